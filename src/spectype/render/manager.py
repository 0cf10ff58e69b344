"""Renderer manager -- built-ins, entry-point discovery and import paths.

:class:`RendererManager` is the single place renderers are looked up by
name. It always knows the built-in renderers, discovers third-party ones
registered as Python entry points, and can load a renderer from a
``module:attribute`` import path given directly in the configuration.

The entry-point group used for discovery is ``spectype.renderers``.
Third-party packages register renderers by declaring an entry point under
this group in their ``pyproject.toml``::

    [project.entry-points."spectype.renderers"]
    vue-query = "my_package.renderers:VueQueryRenderer"
"""

from __future__ import annotations

import importlib
import importlib.metadata
import logging
from typing import Any, Optional

from spectype.exceptions import RendererError
from spectype.render.base import Renderer
from spectype.render.builtin import BUILTIN_RENDERERS

logger = logging.getLogger(__name__)

ENTRY_POINT_GROUP = "spectype.renderers"
"""The entry-point group name used for renderer discovery."""


class RendererManager:
    """Registry of available renderers, keyed by name.

    Example:
        Typical usage::

            manager = RendererManager()
            manager.discover()
            renderer = manager.get("axios")
    """

    def __init__(self) -> None:
        self._renderers: dict[str, Renderer] = {}
        for name, renderer_cls in BUILTIN_RENDERERS.items():
            self.register(renderer_cls(), name=name)

    # ------------------------------------------------------------------
    # Discovery
    # ------------------------------------------------------------------

    def discover(self) -> list[str]:
        """Load renderers registered in the ``spectype.renderers`` group.

        Returns:
            The names of the renderers that were loaded. Entry points that
            fail to load, or that shadow an already registered name, are
            logged as warnings and skipped.
        """
        loaded: list[str] = []
        for ep in importlib.metadata.entry_points().select(group=ENTRY_POINT_GROUP):
            if ep.name in self._renderers:
                logger.warning("Renderer '%s' is already registered, skipping entry point", ep.name)
                continue
            try:
                renderer = _instantiate(ep.load(), ep.value)
                self.register(renderer, name=ep.name)
                loaded.append(ep.name)
            except Exception as exc:
                logger.warning("Failed to load renderer '%s': %s", ep.name, exc)
        return loaded

    # ------------------------------------------------------------------
    # Registration and lookup
    # ------------------------------------------------------------------

    def register(self, renderer: Renderer, name: Optional[str] = None) -> None:
        """Register *renderer* under *name* (defaults to ``renderer.name``).

        Raises:
            RendererError: If the name is already taken.
        """
        key = name or renderer.name
        if key in self._renderers:
            raise RendererError(f"Renderer '{key}' is already registered")
        self._renderers[key] = renderer
        logger.debug("Registered renderer '%s'", key)

    def get(self, name: str) -> Renderer:
        """Return the renderer called *name*, or load it from a ``module:attr`` path.

        Raises:
            RendererError: If the name is unknown or the import path does not
                point at a :class:`Renderer`.
        """
        if name in self._renderers:
            return self._renderers[name]
        if ":" in name:
            return load_renderer(name)
        available = ", ".join(sorted(self._renderers))
        raise RendererError(f"Unknown renderer '{name}'. Available renderers: {available}")

    def list_renderers(self) -> list[dict[str, str]]:
        """List registered renderers as ``{"name", "description", "class"}`` dicts."""
        return [
            {
                "name": name,
                "description": renderer.description,
                "class": f"{type(renderer).__module__}.{type(renderer).__qualname__}",
            }
            for name, renderer in self._renderers.items()
        ]


def load_renderer(path: str) -> Renderer:
    """Import a renderer from a ``package.module:attribute`` path.

    The attribute may be a :class:`Renderer` subclass (instantiated with no
    arguments) or a ready-made instance.

    Raises:
        RendererError: If the module or attribute cannot be imported, or the
            object is not a renderer.
    """
    module_name, _, attribute = path.partition(":")
    if not module_name or not attribute:
        raise RendererError(f"Invalid renderer path '{path}'. Expected 'module:attribute'")
    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise RendererError(f"Cannot import renderer module '{module_name}': {exc}") from exc

    target: Any = module
    for part in attribute.split("."):
        try:
            target = getattr(target, part)
        except AttributeError:
            raise RendererError(f"Module '{module_name}' has no attribute '{attribute}'") from None
    return _instantiate(target, path)


def _instantiate(target: Any, origin: str) -> Renderer:
    if isinstance(target, type) and issubclass(target, Renderer):
        return target()
    if isinstance(target, Renderer):
        return target
    raise RendererError(f"'{origin}' is not a Renderer subclass or instance")
