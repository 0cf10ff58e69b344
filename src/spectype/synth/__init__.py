"""Schema and operation synthesis -- from OpenAPI documents to a typed IR.

The synthesizers turn the decoded document into two ordered lists consumed by
renderers: named type definitions and component descriptors (see
:mod:`spectype.models`).

Typical usage::

    from spectype.synth import generate

    result = generate(document)
    for definition in result.definitions:
        print(definition.name)

Sub-modules:

* :mod:`~spectype.synth.types` -- the recursive schema-to-expression mapping.
* :mod:`~spectype.synth.definitions` -- component definitions and the
  explicit :class:`TypeRegistry`.
* :mod:`~spectype.synth.operations` -- one component descriptor per
  (route, verb) pair.
* :mod:`~spectype.synth.pipeline` -- stage ordering and the worker pool.
"""

from spectype.synth.definitions import TypeRegistry, component_definitions
from spectype.synth.operations import SynthesizedOperation, synthesize_operation
from spectype.synth.pipeline import generate, iter_operations
from spectype.synth.types import synthesize

__all__ = [
    "synthesize",
    "TypeRegistry",
    "component_definitions",
    "synthesize_operation",
    "SynthesizedOperation",
    "generate",
    "iter_operations",
]
