"""Canonical Pydantic models shared across all openapi-typegen modules.

This is the single source of truth for data shapes in the project. Every other
module imports from here rather than defining its own models. The models fall
into three groups:

**Schema models** -- the in-memory form of a loaded document:
    :class:`SchemaNode`, :class:`SpecVersion`, :class:`LoadResult`, and the
    :data:`ResolvedSchemaMap` / :data:`DependencyGraph` /
    :data:`GroupAssignment` aliases.

**Index models** -- produced by the path/operation indexer:
    :class:`OperationRefs` and :class:`EndpointHint`.

**Configuration models** -- generation options and the project config file:
    :class:`SplitStrategy`, :class:`PropertyNaming`, :class:`LogLevel`,
    :class:`IndentConfig`, :class:`GenerateOptions`, and
    :class:`ProjectConfig`.

All models use Pydantic v2. :class:`SchemaNode` is frozen and uses
``extra="allow"`` so that dialect-specific keywords (``additionalProperties``,
``discriminator``, ``x-*`` extensions, ...) are preserved in ``model_extra``
without being interpreted.
"""

from __future__ import annotations

import enum
from typing import Any, Callable, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


# --- Schema Models ---


class SchemaNode(BaseModel):
    """One JSON-Schema-like node of an OpenAPI document.

    The recognised keywords are modelled as typed fields; everything else
    lands in ``model_extra`` untouched. Keyword names that are not valid
    Python identifiers are exposed through snake_case attributes and keep
    their original spelling as aliases, so both of these work::

        SchemaNode.model_validate({"$ref": "#/components/schemas/Pet"})
        SchemaNode(ref="#/components/schemas/Pet")

    Nodes are frozen. Code that needs a different node builds a new one
    (see :meth:`pydantic.BaseModel.model_copy`).
    """

    model_config = ConfigDict(extra="allow", frozen=True, populate_by_name=True)

    type: Optional[Union[str, list[str]]] = None
    format: Optional[str] = None
    ref: Optional[str] = Field(default=None, alias="$ref")
    items: Optional[SchemaNode] = None
    properties: Optional[dict[str, SchemaNode]] = None
    required: Optional[list[str]] = None
    enum: Optional[list[Any]] = None
    description: Optional[str] = None
    title: Optional[str] = None
    all_of: Optional[list[SchemaNode]] = Field(default=None, alias="allOf")
    one_of: Optional[list[SchemaNode]] = Field(default=None, alias="oneOf")
    any_of: Optional[list[SchemaNode]] = Field(default=None, alias="anyOf")
    nullable: Optional[bool] = None

    @field_validator("required", mode="before")
    @classmethod
    def _required_must_be_list(cls, value: Any) -> Any:
        # Swagger 2 documents in the wild put ``required: true`` on properties.
        if value is not None and not isinstance(value, list):
            return None
        if value is not None:
            return [item for item in value if isinstance(item, str)]
        return value

    @field_validator("title", "description", "format", mode="before")
    @classmethod
    def _scalar_text(cls, value: Any) -> Any:
        # YAML reads ``title: 2024`` or ``description: 1.0`` as numbers.
        if value is None or isinstance(value, str):
            return value
        if isinstance(value, (bool, int, float)):
            return str(value)
        return None

    @field_validator("items", mode="before")
    @classmethod
    def _items_tuple_form(cls, value: Any) -> Any:
        if isinstance(value, list):
            return value[0] if value else None
        return value

    @field_validator("properties", mode="before")
    @classmethod
    def _properties_objects_only(cls, value: Any) -> Any:
        if isinstance(value, dict):
            return {k: v for k, v in value.items() if isinstance(v, (dict, SchemaNode))}
        return value

    @property
    def extras(self) -> dict[str, Any]:
        """Unrecognised keywords, in document order."""
        return dict(self.model_extra or {})

    @property
    def additional_properties(self) -> Optional[SchemaNode]:
        """The ``additionalProperties`` schema, when it is a schema and not a boolean."""
        value = (self.model_extra or {}).get("additionalProperties")
        if isinstance(value, SchemaNode):
            return value
        if isinstance(value, dict):
            return SchemaNode.model_validate(value)
        return None

    def to_dict(self) -> dict[str, Any]:
        """Serialise back to document form (original keyword spelling)."""
        return self.model_dump(by_alias=True, exclude_unset=True)


SchemaNode.model_rebuild()


class SpecVersion(str, enum.Enum):
    """OpenAPI dialect detected from the document's version marker."""

    OPENAPI2 = "openapi2"
    OPENAPI3 = "openapi3"


ResolvedSchemaMap = dict[str, SchemaNode]
"""Canonical type name -> schema, in emission order."""

DependencyGraph = dict[str, set[str]]
"""Type name -> names of the registry types it references directly."""

GroupAssignment = dict[str, str]
"""Type name -> output group slug."""

Resolver = Callable[[str], Any]
"""Fetch capability for external documents.

Called with a base document URL; returns the parsed document, or an
awaitable resolving to it. Raising signals failure.
"""


class LoadResult(BaseModel):
    """A loaded document together with its extracted schema registry.

    Produced by :func:`~openapi_typegen.parser.load` and consumed by
    :func:`~openapi_typegen.parser.resolver.resolve`.
    """

    version: SpecVersion
    spec: dict[str, Any] = Field(description="The raw parsed document")
    registry: dict[str, SchemaNode] = Field(
        default_factory=dict,
        description="Schema name (as written) -> schema, from definitions or components.schemas",
    )
    refs: list[str] = Field(
        default_factory=list,
        description="Every $ref string in the document, in discovery order",
    )


class GenerationStage(str, enum.Enum):
    """Lifecycle of a single generation request."""

    LOADED = "loaded"
    RESOLVED = "resolved"
    INDEXED = "indexed"
    ASSIGNED = "assigned"
    RECONCILED = "reconciled"
    EMITTED = "emitted"


# --- Index Models ---


class EndpointHint(BaseModel):
    """An endpoint that references a type, rendered as ``METHOD /path``."""

    method: str
    path: str

    def __str__(self) -> str:
        return f"{self.method} {self.path}"


class OperationRefs(BaseModel):
    """Type names referenced by one path + HTTP method operation.

    ``refs`` holds canonical type names reachable from the operation's
    request and response bodies, following local references transitively.
    External documents are named but never entered.
    """

    path: str
    method: str
    tags: list[str] = Field(default_factory=list)
    refs: list[str] = Field(default_factory=list)


# --- Configuration Models ---


class SplitStrategy(str, enum.Enum):
    """How types are partitioned into output files."""

    TAG = "tag"
    PATH = "path"


class PropertyNaming(str, enum.Enum):
    """How property names are written in generated declarations."""

    PRESERVE = "preserve"
    CAMEL = "camel"


class LogLevel(str, enum.Enum):
    """Diagnostic detail for warnings raised during generation."""

    BASIC = "basic"
    VERBOSE = "verbose"


class IndentConfig(BaseModel):
    """Indentation of generated source: one tab, or ``width`` spaces, per level."""

    use_tabs: bool = False
    width: int = Field(default=4, ge=0, description="Spaces per level when use_tabs is False")

    @property
    def unit(self) -> str:
        return "\t" if self.use_tabs else " " * self.width


class GenerateOptions(BaseModel):
    """Options accepted by :func:`~openapi_typegen.generate.generate_types`.

    ``output`` is a file path in single-file mode and a directory when
    ``split`` is set; splitting without it is a configuration error.
    ``endpoint_hints`` is normally computed by the pipeline, but can be
    supplied when calling :func:`~openapi_typegen.generator.generate`
    directly.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    resolver: Optional[Resolver] = Field(default=None, exclude=True)
    output: Optional[str] = None
    split: Optional[SplitStrategy] = None
    property_naming: PropertyNaming = PropertyNaming.PRESERVE
    indent: IndentConfig = Field(default_factory=IndentConfig)
    include_header: bool = True
    header_comment: Optional[str] = Field(
        default=None, description="Literal header block, emitted as-is"
    )
    source_label: Optional[str] = Field(
        default=None, description="Shown as 'Source file:' in the default header"
    )
    log_level: LogLevel = LogLevel.BASIC
    include_endpoint_hints: bool = True
    endpoint_hints: Optional[dict[str, list[EndpointHint]]] = None


class ProjectConfig(BaseModel):
    """Project-local defaults read from ``./openapi-typegen.json``.

    Every field is optional; unset fields fall through to the
    :class:`GenerateOptions` defaults. Unknown keys are rejected so that a
    misspelt option surfaces as a :class:`~openapi_typegen.exceptions.ConfigError`
    instead of being silently ignored.
    """

    model_config = ConfigDict(extra="forbid")

    output: Optional[str] = None
    split: Optional[SplitStrategy] = None
    property_naming: Optional[PropertyNaming] = None
    indent: Optional[IndentConfig] = None
    include_header: Optional[bool] = None
    header_comment: Optional[str] = None
    include_endpoint_hints: Optional[bool] = None
    log_level: Optional[LogLevel] = None
