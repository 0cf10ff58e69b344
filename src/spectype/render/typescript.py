"""Print type expressions and named definitions as TypeScript declarations.

The printer is a pure structural walk over :mod:`spectype.models`; it never
looks at the source document. Output conventions:

* structural definitions become ``export interface``, aliases ``export type``;
* documentation is emitted as ``/** ... */`` blocks, one `` * `` per line;
* the free-form map prints inline as ``{[key: string]: any}``, other object
  shapes print one member per line;
* property names that are not identifiers are JSON-quoted;
* array element unions and intersections are parenthesised
  (``(Foo | Bar)[]``), as are unions and multi-value literal unions
  inside intersections.
"""

from __future__ import annotations

import json
import re
from typing import Optional, Sequence

from spectype.models import (
    ANY,
    ArrayOf,
    DeclarationShape,
    Intersection,
    LiteralUnion,
    NamedRef,
    NamedTypeDefinition,
    Nullable,
    ObjectShape,
    PathParam,
    Scalar,
    TypeExpression,
    Union,
)

_IDENTIFIER = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")
_INDENT = "  "


def quote_property(name: str) -> str:
    """Return *name* as a property key, quoting it when it is not an identifier."""
    return name if _IDENTIFIER.match(name) else json.dumps(name)


def doc_comment(doc: Optional[str], indent: str = "") -> str:
    """Format *doc* as a ``/** */`` block (empty string for no doc)."""
    if not doc or not doc.strip():
        return ""
    lines = [f"{indent}/**"]
    lines.extend(f"{indent} * {line}".rstrip() for line in doc.strip().splitlines())
    lines.append(f"{indent} */")
    return "\n".join(lines)


def print_type(expression: TypeExpression, indent: str = "") -> str:
    """Return the TypeScript text for *expression*.

    Args:
        expression: Any type expression.
        indent: Indentation of the line the expression starts on; nested
            object members are indented one level deeper.

    Example::

        print_type(ArrayOf(item=Union(members=(NUMBER, STRING))))
        # "(number | string)[]"
    """
    if isinstance(expression, Scalar):
        return expression.scalar.value
    if isinstance(expression, LiteralUnion):
        return " | ".join(json.dumps(v) for v in expression.values)
    if isinstance(expression, NamedRef):
        return expression.name
    if isinstance(expression, ArrayOf):
        item = print_type(expression.item, indent)
        if _needs_parens_in_array(expression.item):
            item = f"({item})"
        return f"{item}[]"
    if isinstance(expression, Union):
        return " | ".join(print_type(m, indent) for m in expression.members)
    if isinstance(expression, Intersection):
        parts = []
        for member in expression.members:
            text = print_type(member, indent)
            parts.append(f"({text})" if _needs_parens_in_intersection(member) else text)
        return " & ".join(parts)
    if isinstance(expression, Nullable):
        return f"{print_type(expression.inner, indent)} | null"
    if isinstance(expression, ObjectShape):
        return _print_object(expression, indent)
    return ANY.scalar.value


def _needs_parens_in_array(item: TypeExpression) -> bool:
    if isinstance(item, (Union, Intersection, Nullable)):
        return True
    return isinstance(item, LiteralUnion) and len(item.values) > 1


def _needs_parens_in_intersection(member: TypeExpression) -> bool:
    if isinstance(member, (Union, Nullable)):
        return True
    return isinstance(member, LiteralUnion) and len(member.values) > 1


def _print_object(shape: ObjectShape, indent: str) -> str:
    if not shape.properties:
        if shape.open_index is None:
            return "{}"
        if shape.open_index == ANY:
            return "{[key: string]: any}"

    inner = indent + _INDENT
    lines = ["{"]
    for field in shape.properties:
        comment = doc_comment(field.doc, inner)
        if comment:
            lines.append(comment)
        marker = "?" if field.optional else ""
        lines.append(f"{inner}{quote_property(field.name)}{marker}: {print_type(field.type, inner)};")
    if shape.open_index is not None:
        lines.append(f"{inner}[key: string]: {print_type(shape.open_index, inner)};")
    lines.append(f"{indent}}}")
    return "\n".join(lines)


def print_definition(definition: NamedTypeDefinition) -> str:
    """Return the declaration for *definition*, preceded by its doc block."""
    if definition.declaration_shape is DeclarationShape.STRUCTURAL:
        body = f"export interface {definition.name} {print_type(definition.expression)}"
    else:
        body = f"export type {definition.name} = {print_type(definition.expression)};"
    comment = doc_comment(definition.doc)
    return f"{comment}\n{body}" if comment else body


def path_params_signature(params: Sequence[PathParam]) -> str:
    """Render path parameters as a function parameter list (``id: string, tag?: string``)."""
    return ", ".join(
        f"{p.name}{'' if p.required else '?'}: {print_type(p.type)}" for p in params
    )
