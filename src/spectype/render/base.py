"""Abstract base class for spectype renderers.

A renderer turns :class:`~spectype.models.ComponentDescriptor` values into
output text. Only :attr:`Renderer.name` and :meth:`Renderer.render` are
required; the other hooks have defaults so renderers only override what they
need:

* :meth:`Renderer.name_operation` -- override the component name of
  operations without ``operationId``;
* :meth:`Renderer.preamble` -- import/setup text emitted once per unit;
* :meth:`Renderer.render_all` -- aggregate mode, wrapping every rendered
  component in a single block.

Renderers are registered as entry points in the ``spectype.renderers`` group
and discovered at runtime by :class:`~spectype.render.manager.RendererManager`.

Example:
    Minimal renderer implementation::

        class PathsRenderer(Renderer):
            @property
            def name(self) -> str:
                return "paths"

            def render(self, component):
                return f"// {component.verb.value.upper()} {component.route}"
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional, Sequence

from spectype.models import ComponentDescriptor
from spectype.naming import path_params_in_route


class Renderer(ABC):
    """Base class for all spectype renderers.

    The core never inspects what the hooks return; all of them must be pure
    functions of their arguments.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the unique renderer name used for selection (e.g. ``"axios"``)."""
        ...

    @property
    def description(self) -> str:
        """Return a one-line description. Defaults to ``""``."""
        return ""

    @abstractmethod
    def render(self, component: ComponentDescriptor) -> str:
        """Return the output text for one component (may be empty)."""
        ...

    def name_operation(self, verb: str, route: str) -> Optional[str]:
        """Return a component name for an operation without ``operationId``.

        Args:
            verb: Lower-case HTTP verb.
            route: Route as declared in the document.

        Returns:
            The name, or ``None`` to keep the default naming rule.
        """
        return None

    def preamble(self) -> str:
        """Return text prepended once to the generated unit (imports, helpers)."""
        return ""

    def render_all(self, components: Sequence[ComponentDescriptor]) -> str:
        """Render every component, in order, into one block of text.

        The default joins the non-empty :meth:`render` results with a blank
        line. Aggregate renderers override this to wrap the result.
        """
        rendered = (self.render(component) for component in components)
        return "\n\n".join(text for text in rendered if text)


def trailing_id(component: ComponentDescriptor) -> Optional[str]:
    """Return the path parameter dropped from a ``DELETE`` route, if any.

    Delete components omit the trailing ``{id}`` placeholder from
    :attr:`~spectype.models.ComponentDescriptor.route`; renderers take it as
    a call argument instead.
    """
    declared = path_params_in_route(component.path)
    if len(declared) > len(component.path_params):
        return declared[-1]
    return None
