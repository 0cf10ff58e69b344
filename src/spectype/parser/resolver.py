"""Resolve ``$ref`` JSON Reference pointers to type names and component objects.

OpenAPI documents use ``$ref`` pointers (e.g.,
``{"$ref": "#/components/schemas/Pet"}``) to share definitions. Unlike a
document dereferencer, the type synthesizer never inlines a referenced schema:
it only needs the *name* the target is declared under. That keeps recursive
schema graphs (``A -> B -> A``) safe, because recursion never follows a
reference.

Only four reference roots are supported, each with its own name suffix so
that, e.g., a response and a schema both keyed ``Pet`` cannot collide:

==============================  ==============  ====================
Root                            Example key     Type name
==============================  ==============  ====================
``#/components/schemas/``       ``pet``         ``Pet``
``#/components/responses/``     ``pet``         ``PetResponse``
``#/components/parameters/``    ``pet``         ``PetParameter``
``#/components/requestBodies/`` ``pet``         ``PetRequestBody``
==============================  ==============  ====================

Anything else -- external files, URLs, pointers into ``paths`` or deeper into
a component -- raises :class:`~spectype.exceptions.UnsupportedReferenceError`.
A root-qualified key that is not declared in the document raises
:class:`~spectype.exceptions.DanglingReferenceError`. Both are fatal.
"""

from __future__ import annotations

from typing import Any, NamedTuple, Optional

from spectype.exceptions import DanglingReferenceError, UnsupportedReferenceError
from spectype.naming import pascal_case


class _Root(NamedTuple):
    section: str
    suffix: str


REFERENCE_ROOTS: dict[str, _Root] = {
    "#/components/schemas/": _Root("schemas", ""),
    "#/components/responses/": _Root("responses", "Response"),
    "#/components/parameters/": _Root("parameters", "Parameter"),
    "#/components/requestBodies/": _Root("requestBodies", "RequestBody"),
}
"""Supported reference prefixes mapped to their components section and name suffix."""


def is_reference(node: Any) -> bool:
    """Return ``True`` if *node* is a JSON Reference object (has a ``$ref`` key)."""
    return isinstance(node, dict) and "$ref" in node


def split_ref(ref: str, context: Optional[str] = None) -> tuple[str, str]:
    """Split a reference into its components section and (unescaped) key.

    Args:
        ref: The ``$ref`` string (e.g., ``"#/components/schemas/Pet"``).
        context: Optional location used in error messages.

    Returns:
        A ``(section, key)`` tuple such as ``("schemas", "Pet")``.

    Raises:
        UnsupportedReferenceError: If *ref* is not a string, does not start
            with a supported root, or points below a component (sibling-level
            pointers like ``#/components/schemas/Pet/properties/id``).
    """
    if not isinstance(ref, str):
        raise UnsupportedReferenceError(repr(ref), context)
    for prefix, root in REFERENCE_ROOTS.items():
        if ref.startswith(prefix):
            key = ref[len(prefix):]
            if not key or "/" in key:
                raise UnsupportedReferenceError(ref, context)
            # JSON Pointer escaping (RFC 6901)
            return root.section, key.replace("~1", "/").replace("~0", "~")
    raise UnsupportedReferenceError(ref, context)


def ref_name(ref: str, context: Optional[str] = None) -> str:
    """Map a reference string to its canonical type name.

    This is a pure function of the string; it does not check that the target
    exists. Use :meth:`ReferenceResolver.name_for` for that.

    Example::

        ref_name("#/components/schemas/foo")        # "Foo"
        ref_name("#/components/responses/foo")      # "FooResponse"
        ref_name("#/components/requestBodies/foo")  # "FooRequestBody"
    """
    section, key = split_ref(ref, context)
    return component_type_name(section, key)


def component_type_name(section: str, key: str) -> str:
    """Return the type name declared for *key* in components *section*."""
    suffix = next(root.suffix for root in REFERENCE_ROOTS.values() if root.section == section)
    return pascal_case(key) + suffix


class ReferenceResolver:
    """Resolve references against the ``components`` object of one document.

    The resolver is read-only and safe to share between worker threads.

    Args:
        components: The document's ``components`` mapping (after discriminator
            normalization). ``None`` disables existence checks, which is
            handy when synthesizing isolated schema fragments.

    Example::

        resolver = ReferenceResolver(document.get("components", {}))
        resolver.name_for("#/components/schemas/Pet")   # "Pet"
        resolver.lookup("#/components/parameters/limit")  # the parameter dict
    """

    def __init__(self, components: Optional[dict[str, Any]] = None) -> None:
        self._components = components

    def name_for(self, ref: str, context: Optional[str] = None) -> str:
        """Return the type name for *ref*, verifying that the target exists.

        Raises:
            UnsupportedReferenceError: For an unsupported reference root.
            DanglingReferenceError: If the target key is not declared.
        """
        section, key = split_ref(ref, context)
        if self._components is not None:
            self._target(ref, section, key, context)
        return component_type_name(section, key)

    def lookup(self, ref: str, context: Optional[str] = None) -> Any:
        """Return the component object *ref* points at.

        Raises:
            UnsupportedReferenceError: For an unsupported reference root.
            DanglingReferenceError: If the target key is not declared (or the
                resolver was created without components).
        """
        section, key = split_ref(ref, context)
        return self._target(ref, section, key, context)

    def deref(self, node: Any, context: Optional[str] = None) -> Any:
        """Follow a chain of references until a concrete object is reached.

        Used for parameter, request-body and response objects, which the
        operation synthesizer has to inspect (``in``, ``content``...).
        Circular chains are reported as dangling.
        """
        seen: set[str] = set()
        while is_reference(node):
            ref = node["$ref"]
            if ref in seen:
                raise DanglingReferenceError(ref, context)
            seen.add(ref)
            node = self.lookup(ref, context)
        return node

    def _target(self, ref: str, section: str, key: str, context: Optional[str]) -> Any:
        section_map = (self._components or {}).get(section)
        if not isinstance(section_map, dict) or key not in section_map:
            raise DanglingReferenceError(ref, context)
        return section_map[key]
