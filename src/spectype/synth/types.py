"""Convert one schema node into a :data:`~spectype.models.TypeExpression`.

The single public function is :func:`synthesize`. It is a closed mapping from
the open OpenAPI schema grammar onto the small type algebra in
:mod:`spectype.models`:

===============================================  ===================================
Schema                                           Expression
===============================================  ===================================
``integer``/``long``/``float``/``double``/...    ``Scalar(number)``
``boolean``                                      ``Scalar(boolean)``
``string``/``byte``/``binary``/``date``/...      ``Scalar(string)``
``string`` with ``enum``                         ``LiteralUnion``
unknown primitive                                ``Scalar(any)``
``array``                                        ``ArrayOf(items)``
``object`` with ``properties``                   ``ObjectShape`` (own fields first)
``object`` without ``properties``                free-form map ``{[key]: any}``
``additionalProperties: true | {} | <schema>``   ``ObjectShape.open_index``
bare ``{}`` or ``properties: {}``                empty, closed ``ObjectShape``
``$ref``                                         ``NamedRef``
``allOf``                                        ``Intersection``
``oneOf`` / ``anyOf``                            ``Union``
``nullable: true`` (or 3.1 ``"null"`` type)      outermost ``Nullable``
===============================================  ===================================

References are never followed: a ``$ref`` becomes a :class:`NamedRef`
immediately, so recursion only walks inline structure and cyclic schema
graphs cannot recurse forever. Malformed input degrades to the most
permissive expression instead of failing; only unsupported or dangling
references raise.
"""

from __future__ import annotations

from typing import Any, Optional

from spectype.models import (
    ANY,
    BOOLEAN,
    EMPTY_OBJECT,
    FREE_FORM_OBJECT,
    NUMBER,
    STRING,
    ArrayOf,
    LiteralUnion,
    NamedRef,
    Nullable,
    ObjectField,
    ObjectShape,
    TypeExpression,
    make_intersection,
    make_union,
)
from spectype.parser.resolver import ReferenceResolver, is_reference

_NUMBER_TYPES = frozenset({"integer", "long", "float", "double", "number", "int32", "int64"})
_STRING_TYPES = frozenset(
    {"string", "byte", "binary", "date", "dateTime", "date-time", "password"}
)

_MISSING = object()

# Name-only resolution, used when no document is bound.
_DETACHED = ReferenceResolver(None)


def synthesize(
    node: Any,
    name_hint: Optional[str] = None,
    resolver: Optional[ReferenceResolver] = None,
) -> TypeExpression:
    """Synthesize the type expression for a schema node.

    The result depends only on the arguments: structurally equal input gives
    structurally equal output.

    Args:
        node: A schema object (``dict``). Non-dict values (e.g. the 3.1
            ``true`` schema) synthesize to ``Scalar(any)``.
        name_hint: Location of the node (e.g. ``"Pet.owner"``), extended
            while descending and quoted in reference errors.
        resolver: Resolver bound to the document's components. Without one,
            references are mapped to names but not checked for existence.

    Returns:
        The synthesized expression.

    Raises:
        UnsupportedReferenceError: For a ``$ref`` outside ``#/components/*``.
        DanglingReferenceError: For a ``$ref`` to an undeclared component
            (only with a bound *resolver*).

    Example::

        synthesize({"type": "array", "items": {"$ref": "#/components/schemas/Pet"}})
        # ArrayOf(item=NamedRef(name="Pet"))
    """
    return _synthesize(node, name_hint or "<schema>", resolver or _DETACHED)


def _synthesize(node: Any, hint: str, resolver: ReferenceResolver) -> TypeExpression:
    if not isinstance(node, dict):
        return ANY

    type_name, null_in_type = _schema_type(node)
    expression = _synthesize_body(node, type_name, hint, resolver)

    if (node.get("nullable") is True or null_in_type) and not isinstance(expression, Nullable):
        return Nullable(inner=expression)
    return expression


def _schema_type(node: dict[str, Any]) -> tuple[Optional[str], bool]:
    """Return ``(type, has_null)``; OpenAPI 3.1 allows ``type: [string, "null"]``."""
    value = node.get("type")
    if isinstance(value, list):
        non_null = [t for t in value if t != "null"]
        return (str(non_null[0]) if non_null else None), "null" in value
    if isinstance(value, str):
        return value, False
    return None, False


def _synthesize_body(
    node: dict[str, Any],
    type_name: Optional[str],
    hint: str,
    resolver: ReferenceResolver,
) -> TypeExpression:
    if is_reference(node):
        return NamedRef(name=resolver.name_for(node["$ref"], hint))

    if "allOf" in node:
        return _all_of(node, hint, resolver)

    for keyword in ("oneOf", "anyOf"):
        if keyword in node:
            members = node.get(keyword) or []
            return make_union(
                [_synthesize(m, f"{hint}.{keyword}[{i}]", resolver) for i, m in enumerate(members)]
            )

    if type_name == "array" or (type_name is None and "items" in node):
        if "items" not in node:
            return ArrayOf(item=ANY)
        return ArrayOf(item=_synthesize(node["items"], f"{hint}[]", resolver))

    if type_name == "object":
        return _object(node, hint, resolver, explicit_object=True)

    if type_name is None:
        if "enum" in node and "properties" not in node:
            return _literals(node)
        return _object(node, hint, resolver, explicit_object=False)

    if type_name == "string" and "enum" in node:
        return _literals(node)
    if type_name in _NUMBER_TYPES:
        return NUMBER
    if type_name == "boolean":
        return BOOLEAN
    if type_name in _STRING_TYPES:
        return STRING
    return ANY


def _all_of(node: dict[str, Any], hint: str, resolver: ReferenceResolver) -> TypeExpression:
    members = [
        _synthesize(m, f"{hint}.allOf[{i}]", resolver) for i, m in enumerate(node.get("allOf") or [])
    ]
    # Sibling properties next to allOf extend the composition.
    if isinstance(node.get("properties"), dict) and node["properties"]:
        members.append(_object(node, hint, resolver, explicit_object=True))
    return make_intersection(members)


def _literals(node: dict[str, Any]) -> TypeExpression:
    values = [str(v) for v in node.get("enum") or [] if v is not None]
    if not values:
        return STRING
    return LiteralUnion(values=tuple(dict.fromkeys(values)))


def _object(
    node: dict[str, Any],
    hint: str,
    resolver: ReferenceResolver,
    explicit_object: bool,
) -> TypeExpression:
    properties = node.get("properties")
    additional = node.get("additionalProperties", _MISSING)

    if not isinstance(properties, dict) and additional is _MISSING:
        # `type: object` alone is a free-form map, a bare `{}` is an empty shape.
        return FREE_FORM_OBJECT if explicit_object else EMPTY_OBJECT

    required = node.get("required")
    required_names = set(required) if isinstance(required, list) else set()

    fields: list[ObjectField] = []
    if isinstance(properties, dict):
        for name, schema in properties.items():
            fields.append(
                ObjectField(
                    name=str(name),
                    type=_synthesize(schema, f"{hint}.{name}", resolver),
                    optional=name not in required_names,
                    doc=_description(schema),
                )
            )

    return ObjectShape(
        properties=tuple(fields),
        open_index=_open_index(additional, hint, resolver),
    )


def _open_index(additional: Any, hint: str, resolver: ReferenceResolver) -> Optional[TypeExpression]:
    if additional is _MISSING or additional is False or additional is None:
        return None
    if isinstance(additional, dict):
        if not additional:
            return ANY
        return _synthesize(additional, f"{hint}[key]", resolver)
    return ANY


def _description(schema: Any) -> Optional[str]:
    if isinstance(schema, dict):
        description = schema.get("description")
        if isinstance(description, str) and description.strip():
            return description.strip()
    return None
