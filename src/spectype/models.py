"""Canonical Pydantic models shared across all spectype modules.

This is the single source of truth for data shapes in the project. Every other
module imports from here rather than defining its own models. The models fall
into three groups:

**Configuration models** -- read from the project's ``spectype.json``:
    :class:`TargetConfig` and :class:`ProjectConfig`.

**Type expressions** -- the closed output algebra produced by the type
synthesizer:
    :class:`Scalar`, :class:`LiteralUnion`, :class:`ArrayOf`,
    :class:`ObjectShape` (with :class:`ObjectField`), :class:`Union`,
    :class:`Intersection`, :class:`NamedRef`, and :class:`Nullable`, collected
    in the :data:`TypeExpression` discriminated union.

**IR output models** -- produced by the synthesizer and consumed by renderers:
    :class:`NamedTypeDefinition`, :class:`PathParam`,
    :class:`ComponentDescriptor`, :class:`NamingCollision`, and
    :class:`GenerationResult`.

Type expressions and IR records are frozen: equality is structural and the
expression models are hashable, which the union de-duplication relies on.
"""

from __future__ import annotations

import enum
from typing import Annotated, Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# --- Configuration ---


DEFAULT_ROUTE_PLACEHOLDER = "${{{name}}}"
"""``str.format`` template for path interpolation (TypeScript template literal)."""


class TargetConfig(BaseModel):
    """One generation target declared in ``spectype.json``.

    A target ties a source document to an output file and the renderer that
    turns component descriptors into code.

    Example::

        TargetConfig(
            file="examples/petstore.yaml",
            output="examples/axios.ts",
            renderer="axios",
        )
    """

    file: str = Field(description="URL or file path to the OpenAPI document")
    output: Optional[str] = Field(
        default=None, description="Output file path (stdout when omitted)"
    )
    renderer: str = Field(
        default="types",
        description="Built-in renderer name, entry-point name, or module:attribute",
    )
    route_placeholder: str = Field(
        default=DEFAULT_ROUTE_PLACEHOLDER,
        description="str.format template used to interpolate path parameters",
    )
    workers: int = Field(
        default=1, ge=1, description="Threads used for operation synthesis"
    )

    @field_validator("route_placeholder")
    @classmethod
    def _placeholder_has_name(cls, value: str) -> str:
        if "{name}" not in value:
            raise ValueError("route_placeholder must contain a '{name}' field")
        return value


class ProjectConfig(BaseModel):
    """Project-local configuration persisted as ``./spectype.json``."""

    targets: dict[str, TargetConfig] = Field(default_factory=dict)


# --- Type expressions ---


class ScalarKind(str, enum.Enum):
    """Scalar leaves of the type algebra.

    ``VOID`` and ``UNKNOWN`` are sentinels: ``VOID`` means "no declared success
    body", ``UNKNOWN`` means "no declared error contract".
    """

    NUMBER = "number"
    STRING = "string"
    BOOLEAN = "boolean"
    ANY = "any"
    VOID = "void"
    UNKNOWN = "unknown"


class _Expression(BaseModel):
    model_config = ConfigDict(frozen=True)


class Scalar(_Expression):
    """A primitive leaf type."""

    kind: Literal["scalar"] = "scalar"
    scalar: ScalarKind


class LiteralUnion(_Expression):
    """An ordered set of string literals (from a string ``enum``)."""

    kind: Literal["literal_union"] = "literal_union"
    values: tuple[str, ...]


class ArrayOf(_Expression):
    """A homogeneous array."""

    kind: Literal["array"] = "array"
    item: TypeExpression


class ObjectField(_Expression):
    """One named member of an :class:`ObjectShape`."""

    name: str
    type: TypeExpression
    optional: bool = False
    doc: Optional[str] = None


class ObjectShape(_Expression):
    """A structural object type.

    ``open_index`` is the value type of the ``[key: string]`` index signature;
    ``None`` means the shape is closed. An empty, closed shape (``{}``) is
    distinct from the free-form map (only ``open_index=Scalar(any)``).
    """

    kind: Literal["object"] = "object"
    properties: tuple[ObjectField, ...] = ()
    open_index: Optional[TypeExpression] = None


class Union(_Expression):
    """Alternatives; build through :func:`make_union`."""

    kind: Literal["union"] = "union"
    members: tuple[TypeExpression, ...]


class Intersection(_Expression):
    """Conjunction of members; build through :func:`make_intersection`."""

    kind: Literal["intersection"] = "intersection"
    members: tuple[TypeExpression, ...]


class NamedRef(_Expression):
    """A reference to a :class:`NamedTypeDefinition` by name."""

    kind: Literal["ref"] = "ref"
    name: str


class Nullable(_Expression):
    """Wraps an expression that also admits ``null``."""

    kind: Literal["nullable"] = "nullable"
    inner: TypeExpression


TypeExpression = Annotated[
    Scalar | LiteralUnion | ArrayOf | ObjectShape | Union | Intersection | NamedRef | Nullable,
    Field(discriminator="kind"),
]

for _model in (ArrayOf, ObjectField, ObjectShape, Union, Intersection, Nullable):
    _model.model_rebuild()


NUMBER = Scalar(scalar=ScalarKind.NUMBER)
STRING = Scalar(scalar=ScalarKind.STRING)
BOOLEAN = Scalar(scalar=ScalarKind.BOOLEAN)
ANY = Scalar(scalar=ScalarKind.ANY)
VOID = Scalar(scalar=ScalarKind.VOID)
UNKNOWN = Scalar(scalar=ScalarKind.UNKNOWN)

FREE_FORM_OBJECT = ObjectShape(open_index=ANY)
EMPTY_OBJECT = ObjectShape()


def _dedupe(members: list[Any]) -> list[Any]:
    """Drop structurally equal members, keeping the first occurrence."""
    unique: list[Any] = []
    for member in members:
        if member not in unique:
            unique.append(member)
    return unique


def make_union(members: list[TypeExpression]) -> TypeExpression:
    """Build a :class:`Union`, collapsing duplicates and single members.

    An empty member list degrades to ``Scalar(any)``.
    """
    unique = _dedupe(members)
    if not unique:
        return ANY
    if len(unique) == 1:
        return unique[0]
    return Union(members=tuple(unique))


def make_intersection(members: list[TypeExpression]) -> TypeExpression:
    """Build an :class:`Intersection`, collapsing duplicates and single members."""
    unique = _dedupe(members)
    if not unique:
        return ANY
    if len(unique) == 1:
        return unique[0]
    return Intersection(members=tuple(unique))


# --- IR output ---


class HTTPMethod(str, enum.Enum):
    """HTTP verbs for which component descriptors are produced."""

    GET = "get"
    PUT = "put"
    POST = "post"
    PATCH = "patch"
    DELETE = "delete"


class DeclarationShape(str, enum.Enum):
    """How a named definition is declared in the output.

    ``STRUCTURAL`` (an interface) is only used for a bare :class:`ObjectShape`;
    everything else, nullable objects included, is an ``ALIAS``.
    """

    ALIAS = "alias"
    STRUCTURAL = "structural"


class NamedTypeDefinition(BaseModel):
    """A top-level named type destined for declaration in generated output."""

    model_config = ConfigDict(frozen=True)

    name: str
    expression: TypeExpression
    declaration_shape: DeclarationShape = DeclarationShape.ALIAS
    doc: Optional[str] = None
    source: str = Field(
        default="", description="Document location the definition came from"
    )


class PathParam(BaseModel):
    """A path parameter in route order."""

    model_config = ConfigDict(frozen=True)

    name: str
    required: bool = True
    type: TypeExpression
    description: Optional[str] = None


class ComponentDescriptor(BaseModel):
    """Everything a renderer needs to emit code for one REST operation.

    Created once per (path, verb) pair by the operation synthesizer and never
    mutated afterwards.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    verb: HTTPMethod
    path: str = Field(description="Route as declared in the document")
    route: str = Field(description="Route with placeholders rewritten for interpolation")
    path_params: tuple[PathParam, ...] = ()
    query_params_type: Optional[NamedRef] = None
    header_params: tuple[dict[str, Any], ...] = ()
    body_type: TypeExpression = ANY
    response_type: TypeExpression = VOID
    error_type: TypeExpression = UNKNOWN
    doc: str = ""
    operation_id: Optional[str] = None
    summary: Optional[str] = None
    tags: tuple[str, ...] = ()
    operation: dict[str, Any] = Field(default_factory=dict)

    @property
    def query_type(self) -> TypeExpression:
        """The query-string type: the ``QueryParams`` reference or ``Scalar(any)``."""
        return self.query_params_type if self.query_params_type is not None else ANY

    def header(self, name: str) -> Optional[dict[str, Any]]:
        """Return the raw header parameter called *name* (case-insensitive)."""
        wanted = name.lower()
        for param in self.header_params:
            if str(param.get("name", "")).lower() == wanted:
                return param
        return None


class NamingCollision(BaseModel):
    """Two definitions from different sources resolved to the same name."""

    name: str
    previous_source: str
    source: str

    @property
    def message(self) -> str:
        return (
            f"Type name '{self.name}' from {self.source} overrides the "
            f"definition from {self.previous_source}"
        )


class GenerationResult(BaseModel):
    """Complete IR for one document: definitions, components and diagnostics."""

    definitions: list[NamedTypeDefinition] = Field(default_factory=list)
    components: list[ComponentDescriptor] = Field(default_factory=list)
    collisions: list[NamingCollision] = Field(default_factory=list)
