"""Rendering -- turn the synthesized IR into TypeScript source.

Renderers are pluggable: each one subclasses :class:`Renderer` and is looked
up by name through :class:`RendererManager`, which knows the built-ins and
discovers third-party renderers from the ``spectype.renderers`` entry-point
group.

Typical usage::

    from spectype.render import RendererManager, render_document

    renderer = RendererManager().get("axios")
    unit = render_document(document, renderer)
    print(unit.text)
"""

from spectype.render.base import Renderer
from spectype.render.emitter import RenderedUnit, emit, render_document
from spectype.render.manager import RendererManager, load_renderer
from spectype.render.typescript import print_definition, print_type

__all__ = [
    "Renderer",
    "RendererManager",
    "load_renderer",
    "RenderedUnit",
    "emit",
    "render_document",
    "print_definition",
    "print_type",
]
