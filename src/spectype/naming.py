"""Identifier helpers shared by the resolver, the synthesizers and the renderers.

Type names derived from component keys are PascalCase; component names
derived from ``operationId`` only have their first letter upper-cased so that
camel-case ids keep their word boundaries (``listPets`` -> ``ListPets``).
"""

from __future__ import annotations

import re

_WORD_SPLIT = re.compile(r"[^0-9A-Za-z]+")
_PATH_PARAM = re.compile(r"\{([^{}]+)\}")


def upper_first(value: str) -> str:
    """Upper-case the first character and leave the rest untouched."""
    return value[:1].upper() + value[1:]


def lower_first(value: str) -> str:
    """Lower-case the first character and leave the rest untouched."""
    return value[:1].lower() + value[1:]


def pascal_case(value: str) -> str:
    """Convert a component key into a type name.

    Separators (``-``, ``_``, ``.``, spaces) are dropped and each word is
    capitalised; existing capitals are kept (``APIError`` stays ``APIError``).

    Example::

        pascal_case("foo")          # "Foo"
        pascal_case("use-case_v2")  # "UseCaseV2"
    """
    words = [w for w in _WORD_SPLIT.split(value) if w]
    if not words:
        return value
    return "".join(upper_first(w) for w in words)


def camel_case(value: str) -> str:
    """Like :func:`pascal_case` but with a lower-case first letter."""
    return lower_first(pascal_case(value))


def path_params_in_route(route: str) -> list[str]:
    """Return the ``{placeholder}`` names of *route* in the order they occur.

    Example::

        path_params_in_route("/pet/{category}/{name}/")  # ["category", "name"]
    """
    return _PATH_PARAM.findall(route)


def interpolate_route(route: str, template: str) -> str:
    """Rewrite every ``{name}`` placeholder in *route* using *template*.

    Args:
        route: Route as declared in the document (``/pets/{petId}``).
        template: ``str.format`` template with a ``name`` field, e.g.
            ``"${{{name}}}"`` for TypeScript template literals.
    """
    return _PATH_PARAM.sub(lambda m: template.format(name=m.group(1)), route)


def default_operation_name(verb: str, route: str) -> str:
    """Derive a component name for an operation without ``operationId``.

    Static path segments become nouns and every placeholder becomes a
    ``By<Param>`` suffix, e.g. ``GET /pets/{petId}/toys`` -> ``GetPetsToysByPetId``.
    """
    segments = [s for s in route.split("/") if s]
    entities = [s for s in segments if not _PATH_PARAM.fullmatch(s)]
    operators = ["by " + m for s in segments for m in _PATH_PARAM.findall(s)]
    words = [verb, *entities, *operators]
    return pascal_case(" ".join(words))
