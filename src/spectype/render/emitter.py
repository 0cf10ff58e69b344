"""Assemble one generated unit from a :class:`~spectype.models.GenerationResult`.

Unit layout, sections separated by a blank line:

1. a banner comment;
2. the renderer's preamble (imports, helpers), when non-empty;
3. every named definition, in registry order;
4. the rendered components (via :meth:`Renderer.render_all`).

The emitter returns text and performs no I/O; writing the file is the
caller's job, and only happens once the whole unit has been assembled.
"""

from __future__ import annotations

import logging
from typing import Any, NamedTuple, Optional

from spectype.exceptions import RendererError, SpectypeError
from spectype.models import DEFAULT_ROUTE_PLACEHOLDER, GenerationResult
from spectype.render.base import Renderer
from spectype.render.typescript import print_definition
from spectype.synth.pipeline import generate

logger = logging.getLogger(__name__)

BANNER = "/* Generated by spectype. Do not edit by hand. */"


class RenderedUnit(NamedTuple):
    """Generated text plus the IR it was rendered from."""

    text: str
    result: GenerationResult


def emit(result: GenerationResult, renderer: Renderer) -> str:
    """Render *result* with *renderer* into a single text unit.

    Raises:
        RendererError: If any renderer hook raises or returns a non-string.
    """
    try:
        preamble = renderer.preamble()
        body = renderer.render_all(result.components)
    except SpectypeError:
        raise
    except Exception as exc:
        raise RendererError(f"Renderer '{renderer.name}' failed: {exc}") from exc

    for label, value in (("preamble", preamble), ("render_all", body)):
        if not isinstance(value, str):
            raise RendererError(
                f"Renderer '{renderer.name}' returned {type(value).__name__} from {label}(), expected str"
            )

    sections = [BANNER, preamble.strip()]
    sections.extend(print_definition(d) for d in result.definitions)
    sections.append(body.strip())
    return "\n\n".join(s for s in sections if s) + "\n"


def render_document(
    document: dict[str, Any],
    renderer: Renderer,
    route_placeholder: str = DEFAULT_ROUTE_PLACEHOLDER,
    workers: int = 1,
) -> RenderedUnit:
    """Synthesize *document* and render it, using the renderer's naming hook.

    Raises:
        UnsupportedReferenceError: For a ``$ref`` outside ``#/components/*``.
        DanglingReferenceError: For a ``$ref`` to an undeclared component.
        RendererError: If the renderer fails.
    """

    def name_operation(verb: str, route: str) -> Optional[str]:
        try:
            return renderer.name_operation(verb, route)
        except SpectypeError:
            raise
        except Exception as exc:
            raise RendererError(
                f"Renderer '{renderer.name}' failed to name {verb.upper()} {route}: {exc}"
            ) from exc

    result = generate(
        document,
        name_operation=name_operation,
        route_placeholder=route_placeholder,
        workers=workers,
    )
    logger.debug(
        "Rendering %d definitions and %d components with '%s'",
        len(result.definitions),
        len(result.components),
        renderer.name,
    )
    return RenderedUnit(text=emit(result, renderer), result=result)
