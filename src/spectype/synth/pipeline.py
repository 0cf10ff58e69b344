"""Run the whole synthesizer over one OpenAPI document.

Stage order is fixed:

1. discriminator normalization (produces a new ``components.schemas`` map);
2. component definitions (schemas, responses, request bodies);
3. operation synthesis, one task per (route, verb) pair.

Stage 3 only reads immutable data, so with ``workers > 1`` the operations are
synthesized on a thread pool. Results are collected in declaration order
either way, which keeps the output deterministic.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, NamedTuple, Optional

from spectype.models import DEFAULT_ROUTE_PLACEHOLDER, GenerationResult, HTTPMethod
from spectype.parser.discriminator import normalize_discriminators
from spectype.parser.resolver import ReferenceResolver
from spectype.synth.definitions import TypeRegistry, component_definitions
from spectype.synth.operations import NameOperation, SynthesizedOperation, synthesize_operation

logger = logging.getLogger(__name__)

_HTTP_METHODS = frozenset(m.value for m in HTTPMethod)


class OperationRef(NamedTuple):
    """One operation found under ``paths``."""

    route: str
    verb: str
    operation: dict[str, Any]
    inherited_parameters: list[Any]


def iter_operations(paths: Any) -> list[OperationRef]:
    """List every supported operation in path-declaration order.

    Verbs keep the order they are declared in within each path item; keys
    that are not supported verbs (``parameters``, ``summary``, ``head``...)
    are skipped.
    """
    if not isinstance(paths, dict):
        return []

    found: list[OperationRef] = []
    for route, path_item in paths.items():
        if not isinstance(path_item, dict):
            continue
        inherited = path_item.get("parameters")
        inherited = inherited if isinstance(inherited, list) else []
        for key, operation in path_item.items():
            verb = str(key).lower()
            if verb not in _HTTP_METHODS or not isinstance(operation, dict):
                continue
            found.append(OperationRef(str(route), verb, operation, inherited))
    return found


def generate(
    document: dict[str, Any],
    name_operation: Optional[NameOperation] = None,
    route_placeholder: str = DEFAULT_ROUTE_PLACEHOLDER,
    workers: int = 1,
) -> GenerationResult:
    """Synthesize all named definitions and component descriptors of *document*.

    The run is all-or-nothing: the first unsupported or dangling reference
    aborts it and nothing is returned.

    Args:
        document: The decoded OpenAPI document (not modified).
        name_operation: Optional naming hook for operations without
            ``operationId``.
        route_placeholder: ``str.format`` template for route interpolation.
        workers: Number of threads used for operation synthesis.

    Returns:
        A :class:`~spectype.models.GenerationResult` holding the component
        definitions followed by the auxiliary definitions of each operation,
        the descriptors in declaration order, and any naming collisions.

    Raises:
        UnsupportedReferenceError: For a ``$ref`` outside ``#/components/*``.
        DanglingReferenceError: For a ``$ref`` to an undeclared component.

    Example::

        document = load_document("petstore.yaml")
        result = generate(document, workers=4)
        for component in result.components:
            print(component.name, component.route)
    """
    components = document.get("components")
    components = dict(components) if isinstance(components, dict) else {}
    schemas = components.get("schemas")
    components["schemas"] = normalize_discriminators(schemas if isinstance(schemas, dict) else {})

    resolver = ReferenceResolver(components)
    registry = component_definitions(components, resolver, TypeRegistry())

    operations = iter_operations(document.get("paths"))
    logger.debug("Synthesizing %d operations with %d worker(s)", len(operations), workers)

    def run(ref: OperationRef) -> SynthesizedOperation:
        return synthesize_operation(
            ref.operation,
            ref.verb,
            ref.route,
            ref.inherited_parameters,
            resolver=resolver,
            name_operation=name_operation,
            route_placeholder=route_placeholder,
        )

    if workers > 1 and len(operations) > 1:
        with ThreadPoolExecutor(max_workers=workers) as pool:
            synthesized = list(pool.map(run, operations))
    else:
        synthesized = [run(ref) for ref in operations]

    for item in synthesized:
        registry.register_all(item.definitions)

    return GenerationResult(
        definitions=registry.definitions,
        components=[item.component for item in synthesized],
        collisions=registry.collisions,
    )
