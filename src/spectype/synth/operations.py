"""Derive one :class:`~spectype.models.ComponentDescriptor` per (route, verb) pair.

:func:`synthesize_operation` is a pure function of the operation object, the
inherited path-level parameters and the (read-only) resolver. Besides the
descriptor it returns the auxiliary named definitions the operation needs:

* ``<Component>QueryParams`` -- one structural type holding every query
  parameter;
* ``<Component>RequestBody`` -- an inline request-body schema;
* ``<Component>Response`` -- a success type that is not a single name.

Status codes are partitioned into success (``2xx``) and error (``default``,
``1xx``, ``4xx``, ``5xx``); ``3xx`` responses are ignored. Each partition is
reduced to a de-duplicated union; an empty success partition is ``void`` and
an empty error partition is ``unknown``.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, NamedTuple, Optional

from spectype.models import (
    ANY,
    DEFAULT_ROUTE_PLACEHOLDER,
    UNKNOWN,
    VOID,
    ComponentDescriptor,
    DeclarationShape,
    HTTPMethod,
    NamedRef,
    NamedTypeDefinition,
    ObjectField,
    ObjectShape,
    PathParam,
    Scalar,
    TypeExpression,
    make_union,
)
from spectype.naming import (
    default_operation_name,
    interpolate_route,
    path_params_in_route,
    upper_first,
)
from spectype.parser.resolver import ReferenceResolver, is_reference
from spectype.synth.definitions import define, join_docs, pick_media_schema
from spectype.synth.types import synthesize

logger = logging.getLogger(__name__)

NameOperation = Callable[[str, str], Optional[str]]
"""Naming hook: ``(verb, route) -> name``; ``None`` falls back to the default rule."""


class SynthesizedOperation(NamedTuple):
    """A component descriptor plus the auxiliary definitions it references."""

    component: ComponentDescriptor
    definitions: list[NamedTypeDefinition]


def synthesize_operation(
    operation: dict[str, Any],
    verb: str,
    route: str,
    inherited_parameters: Optional[list[Any]] = None,
    resolver: Optional[ReferenceResolver] = None,
    name_operation: Optional[NameOperation] = None,
    route_placeholder: str = DEFAULT_ROUTE_PLACEHOLDER,
) -> SynthesizedOperation:
    """Synthesize the component descriptor for one operation.

    Args:
        operation: The operation object (``paths[route][verb]``).
        verb: Lower-case HTTP verb.
        route: Route as declared in ``paths``.
        inherited_parameters: The path item's ``parameters``.
        resolver: Resolver bound to the document's components.
        name_operation: Optional naming hook, only consulted when the
            operation has no ``operationId``.
        route_placeholder: ``str.format`` template used to rewrite
            ``{param}`` placeholders in the route.

    Returns:
        The descriptor and its auxiliary definitions.

    Raises:
        UnsupportedReferenceError: For a ``$ref`` outside ``#/components/*``.
        DanglingReferenceError: For a ``$ref`` to an undeclared component.

    Example::

        result = synthesize_operation(
            {"operationId": "showPetById", "responses": {...}},
            "get",
            "/pets/{petId}",
            resolver=resolver,
        )
        result.component.route  # "/pets/${petId}"
    """
    resolver = resolver or ReferenceResolver(None)
    method = HTTPMethod(verb.lower())
    context = f"paths.{route}.{method.value}"
    name = _component_name(operation, method, route, name_operation)
    definitions: list[NamedTypeDefinition] = []

    parameters = _merge_parameters(
        _deref_parameters(inherited_parameters, resolver, f"paths.{route}.parameters"),
        _deref_parameters(operation.get("parameters"), resolver, f"{context}.parameters"),
    )
    by_location: dict[str, list[dict[str, Any]]] = {"path": [], "query": [], "header": []}
    for param in parameters:
        location = param.get("in")
        if location in by_location:
            by_location[location].append(param)

    path_params, interpolated = _path_params(
        by_location["path"], method, route, route_placeholder, resolver, context
    )

    query_ref: Optional[NamedRef] = None
    if by_location["query"]:
        query_definition = _query_definition(name, by_location["query"], resolver, context)
        definitions.append(query_definition)
        query_ref = NamedRef(name=query_definition.name)

    body_type, body_definition = _body_type(name, operation.get("requestBody"), resolver, context)
    if body_definition is not None:
        definitions.append(body_definition)

    success, errors = _partition_responses(operation.get("responses"), resolver, context)
    response_type = success
    if not isinstance(success, (NamedRef, Scalar)):
        response_definition = define(
            f"{name}Response", success, source=f"{context}.responses"
        )
        definitions.append(response_definition)
        response_type = NamedRef(name=response_definition.name)

    tags = operation.get("tags")
    component = ComponentDescriptor(
        name=name,
        verb=method,
        path=route,
        route=interpolated,
        path_params=tuple(path_params),
        query_params_type=query_ref,
        header_params=tuple(by_location["header"]),
        body_type=body_type,
        response_type=response_type,
        error_type=errors,
        doc=join_docs(operation.get("summary"), operation.get("description")) or "",
        operation_id=operation.get("operationId"),
        summary=operation.get("summary"),
        tags=tuple(str(t) for t in tags) if isinstance(tags, list) else (),
        operation=operation,
    )
    logger.debug("Synthesized %s %s as %s", method.value.upper(), route, name)
    return SynthesizedOperation(component=component, definitions=definitions)


def _component_name(
    operation: dict[str, Any],
    method: HTTPMethod,
    route: str,
    name_operation: Optional[NameOperation],
) -> str:
    operation_id = operation.get("operationId")
    if operation_id:
        return upper_first(str(operation_id))
    if name_operation is not None:
        custom = name_operation(method.value, route)
        if custom:
            return upper_first(custom)
    return default_operation_name(method.value, route)


def _deref_parameters(
    parameters: Any,
    resolver: ReferenceResolver,
    context: str,
) -> list[dict[str, Any]]:
    if not isinstance(parameters, list):
        return []
    resolved = [resolver.deref(p, context) for p in parameters]
    return [p for p in resolved if isinstance(p, dict)]


def _merge_parameters(
    path_params: list[dict[str, Any]],
    op_params: list[dict[str, Any]],
) -> list[dict[str, Any]]:
    """Merge path-level and operation-level parameters.

    Operation-level parameters override path-level parameters with the same
    ``name`` and ``in``; overridden entries keep their path-level position.
    """
    op_lookup = {(p.get("name", ""), p.get("in", "")): p for p in op_params}

    merged: list[dict[str, Any]] = []
    for param in path_params:
        key = (param.get("name", ""), param.get("in", ""))
        merged.append(op_lookup.pop(key, param))
    merged.extend(p for p in op_params if (p.get("name", ""), p.get("in", "")) in op_lookup)
    return merged


def _parameter_schema(param: dict[str, Any]) -> Any:
    if "schema" in param:
        return param["schema"]
    return pick_media_schema(param.get("content"))


def _path_params(
    declared: list[dict[str, Any]],
    method: HTTPMethod,
    route: str,
    route_placeholder: str,
    resolver: ReferenceResolver,
    context: str,
) -> tuple[list[PathParam], str]:
    """Return path parameters in route order and the interpolated route.

    For ``DELETE`` the trailing placeholder is dropped (from both) when it is
    the route's last segment: the id is supplied separately by the caller.
    A parameter is optional only when it declares ``required: false``.
    """
    lookup = {p.get("name"): p for p in declared}
    names = path_params_in_route(route)
    trimmed = route

    segments = route.rstrip("/").split("/")
    if method is HTTPMethod.DELETE and names and segments[-1] == "{" + names[-1] + "}":
        names = names[:-1]
        trimmed = "/".join(segments[:-1]) or "/"

    params: list[PathParam] = []
    for name in names:
        param = lookup.get(name)
        if param is None:
            logger.debug("Route %s uses undeclared path parameter '%s'", route, name)
            params.append(PathParam(name=name, type=ANY))
            continue
        params.append(
            PathParam(
                name=name,
                required=param.get("required") is not False,
                type=synthesize(_parameter_schema(param), f"{context}.{name}", resolver),
                description=param.get("description"),
            )
        )
    return params, interpolate_route(trimmed, route_placeholder)


def _query_definition(
    component_name: str,
    params: list[dict[str, Any]],
    resolver: ReferenceResolver,
    context: str,
) -> NamedTypeDefinition:
    fields = [
        ObjectField(
            name=str(p.get("name", "")),
            type=synthesize(_parameter_schema(p), f"{context}.query.{p.get('name')}", resolver),
            optional=p.get("required") is not True,
            doc=p.get("description") or None,
        )
        for p in params
    ]
    return NamedTypeDefinition(
        name=f"{component_name}QueryParams",
        expression=ObjectShape(properties=tuple(fields)),
        declaration_shape=DeclarationShape.STRUCTURAL,
        source=f"{context}.parameters",
    )


def _body_type(
    component_name: str,
    request_body: Any,
    resolver: ReferenceResolver,
    context: str,
) -> tuple[TypeExpression, Optional[NamedTypeDefinition]]:
    hint = f"{context}.requestBody"
    if not isinstance(request_body, dict):
        return ANY, None
    if is_reference(request_body):
        return NamedRef(name=resolver.name_for(request_body["$ref"], hint)), None

    schema = pick_media_schema(request_body.get("content"))
    if schema is None:
        return ANY, None
    if is_reference(schema):
        return synthesize(schema, hint, resolver), None

    schema_doc = schema.get("description") if isinstance(schema, dict) else None
    definition = define(
        f"{component_name}RequestBody",
        synthesize(schema, hint, resolver),
        doc=join_docs(request_body.get("description"), schema_doc),
        source=hint,
    )
    return NamedRef(name=definition.name), definition


def _partition_responses(
    responses: Any,
    resolver: ReferenceResolver,
    context: str,
) -> tuple[TypeExpression, TypeExpression]:
    """Return ``(success, error)`` types, ignoring ``3xx`` responses."""
    success: list[TypeExpression] = []
    errors: list[TypeExpression] = []
    if not isinstance(responses, dict):
        return VOID, UNKNOWN

    for status, response in responses.items():
        code = str(status)
        if code.startswith("3"):
            continue
        is_success = code.startswith("2")
        hint = f"{context}.responses.{code}"
        if is_reference(response):
            member: TypeExpression = NamedRef(name=resolver.name_for(response["$ref"], hint))
        else:
            schema = pick_media_schema(response.get("content") if isinstance(response, dict) else None)
            if schema is None:
                member = VOID if is_success else UNKNOWN
            else:
                member = synthesize(schema, hint, resolver)
        (success if is_success else errors).append(member)

    return (
        make_union(success) if success else VOID,
        make_union(errors) if errors else UNKNOWN,
    )
