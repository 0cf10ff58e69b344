"""Inspect commands -- look at the synthesized IR without rendering it.

Provides the ``spectype inspect`` sub-command group:

* ``types`` -- every named definition with its declaration shape and source;
* ``components`` -- every component descriptor with its route and types;
* ``renderers`` -- the renderers available to ``generate``.

Tables go to stdout and honour ``--json`` / ``--plain``.
"""

from __future__ import annotations

from typing import Optional

import typer

from spectype.exceptions import SpectypeError
from spectype.models import DeclarationShape, GenerationResult
from spectype.output import error, get_output, warning
from spectype.parser import load_document, validate_openapi_version
from spectype.render import RendererManager, print_type
from spectype.synth import generate

inspect_app = typer.Typer(no_args_is_help=True)

_MAX_CELL = 60


def _one_line(text: str) -> str:
    flat = " ".join(text.split())
    return flat if len(flat) <= _MAX_CELL else flat[: _MAX_CELL - 3] + "..."


def _synthesize(file: str, renderer: Optional[str] = None) -> GenerationResult:
    """Load *file* and synthesize it, exiting with the error's code on failure."""
    try:
        document = load_document(file)
        validate_openapi_version(document)
        name_operation = None
        if renderer is not None:
            manager = RendererManager()
            manager.discover()
            name_operation = manager.get(renderer).name_operation
        result = generate(document, name_operation=name_operation)
    except SpectypeError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    for collision in result.collisions:
        warning(collision.message)
    return result


@inspect_app.command("types")
def inspect_types(
    file: str = typer.Option(..., "--file", "-f", help="OpenAPI document: URL or file path."),
) -> None:
    """List the named type definitions synthesized from a document.

    Example::

        spectype inspect types --file petstore.yaml
    """
    result = _synthesize(file)
    rows = [
        [
            d.name,
            "interface" if d.declaration_shape is DeclarationShape.STRUCTURAL else "type",
            d.source,
            _one_line(print_type(d.expression)),
        ]
        for d in result.definitions
    ]
    get_output().print_table(
        ["Name", "Declaration", "Source", "Type"],
        rows,
        title=f"Types ({len(rows)})",
    )


@inspect_app.command("components")
def inspect_components(
    file: str = typer.Option(..., "--file", "-f", help="OpenAPI document: URL or file path."),
    renderer: Optional[str] = typer.Option(
        None, "--renderer", "-r", help="Apply this renderer's operation naming."
    ),
) -> None:
    """List the component descriptors synthesized from a document.

    Example::

        spectype inspect components --file petstore.yaml
    """
    result = _synthesize(file, renderer)
    rows = [
        [
            c.name,
            c.verb.value.upper(),
            c.route,
            ", ".join(p.name for p in c.path_params) or "-",
            _one_line(print_type(c.query_type)),
            _one_line(print_type(c.body_type)),
            _one_line(print_type(c.response_type)),
            _one_line(print_type(c.error_type)),
        ]
        for c in result.components
    ]
    get_output().print_table(
        ["Name", "Verb", "Route", "Path params", "Query", "Body", "Response", "Error"],
        rows,
        title=f"Components ({len(rows)})",
    )


@inspect_app.command("renderers")
def inspect_renderers() -> None:
    """List the built-in and discovered renderers.

    Example::

        spectype inspect renderers
    """
    manager = RendererManager()
    manager.discover()
    rows = [
        [entry["name"], entry["description"] or "-", entry["class"]]
        for entry in manager.list_renderers()
    ]
    get_output().print_table(["Name", "Description", "Class"], rows, title="Renderers")
