"""Canonical Pydantic models shared across all specdocs modules.

This is the single source of truth for data shapes in the project. Every other
module imports from here rather than defining its own models. The models fall
into four groups:

**Configuration models** -- serialised as JSON in the user's config directory
or in a project-local ``specdocs.json``:
    :class:`OutputConfig`, :class:`ExtractionConfig`, :class:`DiffConfig`
    and :class:`SpecdocsConfig`.

**Schema nodes** -- the closed, discriminated variant type every schema in a
document is parsed into:
    :class:`ObjectSchema`, :class:`ArraySchema`, :class:`StringSchema`,
    :class:`NumberSchema`, :class:`BooleanSchema`, :class:`RefSchema`,
    :class:`UnknownSchema`, joined as :data:`SchemaNode`.

**Document and endpoint models** -- produced by the loader and the extractor
and consumed by external renderers and navigation builders:
    :class:`SpecDocument`, :class:`Parameter`, :class:`ParameterGroups`,
    :class:`RequestBody`, :class:`Response`, :class:`Operation`,
    :class:`Endpoint`, :class:`Category`, :class:`ExtractionWarning` and
    :class:`EndpointModel`.

**Change report models** -- produced by the differencer:
    :class:`EndpointChange`, :class:`SchemaChange`, :class:`BreakingChange`,
    :class:`MetadataChanges` and :class:`ChangeReport`.

Values produced by the core are frozen (``frozen=True``); nothing downstream
may reassign their fields.
"""

from __future__ import annotations

import enum
from datetime import datetime, timezone
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, computed_field

_FROZEN = ConfigDict(frozen=True, populate_by_name=True)


# --- Config ---


class OutputConfig(BaseModel):
    """Default output format preferences."""

    format: str = Field(
        default="auto", description="Output format: auto, json, plain, rich"
    )


class ExtractionConfig(BaseModel):
    """Settings applied to every ``specdocs extract`` run."""

    untagged_category: str = Field(
        default="untagged",
        description="Category assigned to operations that declare no tags",
    )
    strict: bool = Field(
        default=False,
        description="Exit non-zero when extraction records any warning",
    )
    timestamp: Optional[datetime] = Field(
        default=None,
        description="Pinned timestamp for date-time examples (reproducible output)",
    )


class DiffConfig(BaseModel):
    """Settings applied to every ``specdocs diff`` run."""

    fail_on_breaking: bool = Field(
        default=False,
        description="Exit non-zero when the diff contains breaking changes",
    )


class SpecdocsConfig(BaseModel):
    """Effective configuration, merged by :func:`~specdocs.config.resolve_config`.

    Persisted at ``~/.config/specdocs/config.json`` (user) or
    ``./specdocs.json`` (project). See :func:`~specdocs.config.resolve_config`
    for the full precedence chain.
    """

    output: OutputConfig = Field(default_factory=OutputConfig)
    extraction: ExtractionConfig = Field(default_factory=ExtractionConfig)
    diff: DiffConfig = Field(default_factory=DiffConfig)


# --- Enumerations ---


class HTTPMethod(str, enum.Enum):
    """HTTP methods recognised as operation keys inside a path item."""

    GET = "get"
    POST = "post"
    PUT = "put"
    PATCH = "patch"
    DELETE = "delete"
    HEAD = "head"
    OPTIONS = "options"
    TRACE = "trace"


class ParameterLocation(str, enum.Enum):
    """Parameter buckets kept by the extractor.

    ``body`` parameters feed the request body instead of a bucket, and any
    other location (``cookie``, vendor extensions) is dropped.
    """

    PATH = "path"
    QUERY = "query"
    HEADER = "header"
    FORM_DATA = "formData"


class Severity(str, enum.Enum):
    """Severity attached to a :class:`BreakingChange`."""

    HIGH = "high"
    MEDIUM = "medium"


class ChangeKind(str, enum.Enum):
    """The six kinds of change record a diff can produce."""

    ENDPOINT_ADDED = "endpoint_added"
    ENDPOINT_REMOVED = "endpoint_removed"
    ENDPOINT_MODIFIED = "endpoint_modified"
    SCHEMA_ADDED = "schema_added"
    SCHEMA_REMOVED = "schema_removed"
    SCHEMA_MODIFIED = "schema_modified"


# --- Schema nodes ---


class _SchemaBase(BaseModel):
    """Fields shared by every schema variant."""

    model_config = _FROZEN

    description: Optional[str] = None
    example: Any = None
    nullable: bool = False


class ObjectSchema(_SchemaBase):
    """An object with named child schemas and a set of required names."""

    kind: Literal["object"] = "object"
    properties: dict[str, SchemaNode] = Field(default_factory=dict)
    required: tuple[str, ...] = ()


class ArraySchema(_SchemaBase):
    """A sequence whose elements all follow ``items``."""

    kind: Literal["array"] = "array"
    items: Optional[SchemaNode] = None


class StringSchema(_SchemaBase):
    kind: Literal["string"] = "string"
    format: Optional[str] = None
    enum: Optional[list[Any]] = None


class NumberSchema(_SchemaBase):
    """``integer`` and ``number`` share a variant; ``kind`` keeps them apart."""

    kind: Literal["integer", "number"] = "number"
    format: Optional[str] = None
    minimum: Optional[Union[int, float]] = None
    enum: Optional[list[Any]] = None


class BooleanSchema(_SchemaBase):
    kind: Literal["boolean"] = "boolean"


class RefSchema(_SchemaBase):
    """A pointer to a named definition; never a materialised copy."""

    kind: Literal["ref"] = "ref"
    ref: str = Field(description="Original $ref string")
    name: str = Field(description="Definition name the reference points at")


class UnknownSchema(_SchemaBase):
    """A schema that declares none of the recognised shapes."""

    kind: Literal["unknown"] = "unknown"


SchemaNode = Annotated[
    Union[
        ObjectSchema,
        ArraySchema,
        StringSchema,
        NumberSchema,
        BooleanSchema,
        RefSchema,
        UnknownSchema,
    ],
    Field(discriminator="kind"),
]

ObjectSchema.model_rebuild()
ArraySchema.model_rebuild()


# --- Document ---


class TagInfo(BaseModel):
    """An entry from the document's top-level ``tags`` list."""

    model_config = _FROZEN

    name: str
    description: str = ""


class ApiInfo(BaseModel):
    """API metadata from the *Info Object* plus server/host information."""

    model_config = _FROZEN

    title: str = "Untitled API"
    version: str = "0.0.0"
    description: Optional[str] = None
    host: Optional[str] = None
    base_path: Optional[str] = None
    schemes: list[str] = Field(default_factory=list)
    servers: list[str] = Field(default_factory=list)


class SpecDocument(BaseModel):
    """A loaded and validated API description.

    ``paths`` keeps the raw path items exactly as parsed; the extractor
    builds :class:`Operation` objects from them and the differencer compares
    them directly. ``definitions`` holds every named schema already parsed
    into :data:`SchemaNode` variants, merged from Swagger ``definitions`` and
    OpenAPI ``components.schemas``.
    """

    model_config = _FROZEN

    source: str = "<string>"
    spec_format: Literal["swagger", "openapi"]
    spec_version: str
    info: ApiInfo
    paths: dict[str, Any]
    definitions: dict[str, SchemaNode] = Field(default_factory=dict)
    raw_definitions: dict[str, Any] = Field(default_factory=dict)
    tags: list[TagInfo] = Field(default_factory=list)
    security: list[dict[str, Any]] = Field(default_factory=list)
    raw: dict[str, Any] = Field(default_factory=dict, repr=False)

    def tag_description(self, name: str) -> str:
        """Return the declared description for tag *name*, or ``""``."""
        for tag in self.tags:
            if tag.name == name:
                return tag.description
        return ""


# --- Endpoint model ---


class Parameter(BaseModel):
    """A single declared parameter after normalisation."""

    model_config = _FROZEN

    name: str
    location: ParameterLocation
    required: bool = False
    description: str = ""
    schema_type: str = Field(default="string", description="JSON Schema type")
    schema_format: Optional[str] = None
    default: Any = None
    enum_values: Optional[list[Any]] = None
    example: Any = None


class ParameterGroups(BaseModel):
    """Declared parameters partitioned by location."""

    model_config = _FROZEN

    path: list[Parameter] = Field(default_factory=list)
    query: list[Parameter] = Field(default_factory=list)
    header: list[Parameter] = Field(default_factory=list)
    form_data: list[Parameter] = Field(default_factory=list, alias="formData")

    def all(self) -> list[Parameter]:
        """Every parameter in bucket order: path, query, header, formData."""
        return [*self.path, *self.query, *self.header, *self.form_data]


class BodyProperty(BaseModel):
    """One row of a flattened request body, nested names in dot notation."""

    model_config = _FROZEN

    name: str
    required: bool = False
    description: str = ""
    type: str = "string"
    format: Optional[str] = None
    enum: Optional[list[Any]] = None


class RequestBody(BaseModel):
    model_config = _FROZEN

    required: bool = False
    description: str = ""
    content_types: list[str] = Field(default_factory=list)
    schema_: Optional[SchemaNode] = Field(default=None, alias="schema")
    properties: list[BodyProperty] = Field(default_factory=list)
    examples: dict[str, Any] = Field(default_factory=dict)
    example: Any = None


class Response(BaseModel):
    """A declared response; ``example`` is ``None`` when synthesis failed or had no schema."""

    model_config = _FROZEN

    status_code: str
    description: str = ""
    content_types: list[str] = Field(default_factory=list)
    schema_: Optional[SchemaNode] = Field(default=None, alias="schema")
    headers: dict[str, Any] = Field(default_factory=dict)
    examples: dict[str, Any] = Field(default_factory=dict)
    example: Any = None


class Operation(BaseModel):
    """One HTTP verb bound to one path."""

    model_config = _FROZEN

    path: str
    method: HTTPMethod
    operation_id: Optional[str] = None
    summary: str = ""
    description: str = ""
    tags: list[str] = Field(default_factory=list)
    parameters: ParameterGroups = Field(default_factory=ParameterGroups)
    request_body: Optional[RequestBody] = None
    responses: dict[str, Response] = Field(default_factory=dict)
    security: list[dict[str, Any]] = Field(default_factory=list)
    deprecated: bool = False
    code_samples: dict[str, str] = Field(default_factory=dict)

    @property
    def key(self) -> str:
        """Identity key used in logs and warnings, e.g. ``GET /accounts``."""
        return f"{self.method.value.upper()} {self.path}"


class Endpoint(Operation):
    """An :class:`Operation` with its derived slug and display name.

    Both are deterministic functions of the operation and act as stable
    identity keys for page files and navigation entries.
    """

    slug: str
    display_name: str


class Category(BaseModel):
    """Endpoints sharing one tag, in extraction order."""

    model_config = _FROZEN

    name: str
    display_name: str
    description: str = ""
    endpoints: tuple[Endpoint, ...] = ()


class ExtractionWarning(BaseModel):
    """A recoverable per-operation problem recorded during extraction."""

    model_config = _FROZEN

    location: str = Field(description="Operation key, e.g. 'GET /accounts'")
    message: str
    status_code: Optional[str] = None
    error_type: str = "ExtractionError"

    def __str__(self) -> str:
        where = self.location
        if self.status_code is not None:
            where = f"{where} [{self.status_code}]"
        return f"{where}: {self.message}"


class ModelStats(BaseModel):
    model_config = _FROZEN

    endpoints: int
    categories: int
    schemas: int
    warnings: int


class EndpointModel(BaseModel):
    """Extractor output handed to external renderers and navigation builders."""

    model_config = _FROZEN

    info: ApiInfo
    endpoints: tuple[Endpoint, ...] = ()
    categories: tuple[Category, ...] = ()
    schemas: dict[str, SchemaNode] = Field(default_factory=dict)
    warnings: tuple[ExtractionWarning, ...] = ()

    @computed_field  # type: ignore[prop-decorator]
    @property
    def stats(self) -> ModelStats:
        return ModelStats(
            endpoints=len(self.endpoints),
            categories=len(self.categories),
            schemas=len(self.schemas),
            warnings=len(self.warnings),
        )

    def category(self, name: str) -> Optional[Category]:
        """Return the category for tag *name*, or ``None``."""
        for category in self.categories:
            if category.name == name:
                return category
        return None

    def endpoint(self, slug: str) -> Optional[Endpoint]:
        """Return the first endpoint whose slug is *slug*, or ``None``."""
        for endpoint in self.endpoints:
            if endpoint.slug == slug:
                return endpoint
        return None


# --- Change report ---


class EndpointChange(BaseModel):
    """An added, removed, or modified operation keyed by (method, path)."""

    model_config = _FROZEN

    kind: ChangeKind
    method: str = Field(description="Upper-case HTTP verb")
    path: str
    operation_id: Optional[str] = None
    summary: Optional[str] = None
    changes: list[str] = Field(
        default_factory=list, description="Differing facets (modified only)"
    )

    @property
    def key(self) -> str:
        return f"{self.method} {self.path}"


class SchemaChange(BaseModel):
    """An added, removed, or modified named schema definition."""

    model_config = _FROZEN

    kind: ChangeKind
    name: str
    changes: list[str] = Field(default_factory=list)

    @property
    def key(self) -> str:
        return self.name


ChangeRecord = Union[EndpointChange, SchemaChange]


class EndpointChanges(BaseModel):
    model_config = _FROZEN

    added: list[EndpointChange] = Field(default_factory=list)
    removed: list[EndpointChange] = Field(default_factory=list)
    modified: list[EndpointChange] = Field(default_factory=list)


class SchemaChanges(BaseModel):
    model_config = _FROZEN

    added: list[SchemaChange] = Field(default_factory=list)
    removed: list[SchemaChange] = Field(default_factory=list)
    modified: list[SchemaChange] = Field(default_factory=list)


class BreakingChange(BaseModel):
    """A removal record annotated with a severity by the classifier."""

    model_config = _FROZEN

    type: Literal["removed_endpoint", "removed_schema"]
    severity: Severity
    description: str
    record: ChangeRecord


class FieldChange(BaseModel):
    model_config = _FROZEN

    old: Optional[str] = None
    new: Optional[str] = None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def changed(self) -> bool:
        return self.old != self.new


class MetadataChanges(BaseModel):
    model_config = _FROZEN

    title: FieldChange = Field(default_factory=FieldChange)
    version: FieldChange = Field(default_factory=FieldChange)


class ChangeReport(BaseModel):
    """Result of :func:`~specdocs.diff.diff`.

    Consumed by orchestration tooling through three facets:
    :attr:`has_changes`, :attr:`has_breaking_changes` and :meth:`summary`.
    """

    model_config = _FROZEN

    endpoints: EndpointChanges = Field(default_factory=EndpointChanges)
    schemas: SchemaChanges = Field(default_factory=SchemaChanges)
    metadata: MetadataChanges = Field(default_factory=MetadataChanges)
    breaking: list[BreakingChange] = Field(default_factory=list)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def has_changes(self) -> bool:
        buckets = (
            self.endpoints.added,
            self.endpoints.removed,
            self.endpoints.modified,
            self.schemas.added,
            self.schemas.removed,
            self.schemas.modified,
        )
        return (
            any(buckets)
            or self.metadata.title.changed
            or self.metadata.version.changed
        )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def has_breaking_changes(self) -> bool:
        return len(self.breaking) > 0

    def summary(self, timestamp: Optional[datetime] = None) -> dict[str, Any]:
        """Return the serialisable change summary (counts plus full details).

        Args:
            timestamp: Time stamped into the summary. Defaults to now (UTC).
        """
        when = timestamp or datetime.now(timezone.utc)
        return {
            "timestamp": when.isoformat(),
            "hasChanges": self.has_changes,
            "hasBreakingChanges": self.has_breaking_changes,
            "summary": {
                "endpoints": {
                    "added": len(self.endpoints.added),
                    "modified": len(self.endpoints.modified),
                    "removed": len(self.endpoints.removed),
                },
                "schemas": {
                    "added": len(self.schemas.added),
                    "modified": len(self.schemas.modified),
                    "removed": len(self.schemas.removed),
                },
                "breakingChanges": len(self.breaking),
            },
            "details": {
                "endpoints": self.endpoints.model_dump(mode="json"),
                "schemas": self.schemas.model_dump(mode="json"),
                "breaking": [b.model_dump(mode="json") for b in self.breaking],
                "metadata": self.metadata.model_dump(mode="json"),
            },
        }
