"""Pydantic v2 models for archgen.

Defines the entity descriptor consumed by the generator (``CrudDetails`` and
its properties/options), the single-endpoint descriptor
(``EndpointDetails``), the immutable ``ProjectStructure`` snapshot produced
by the analyzer, and the ``GenerationResult`` reported back to callers.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from archgen.utils import load_mapping, to_pascal

# Logical folder name -> resolved absolute path ("" when unresolved).
FolderMap = dict[str, str]


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class PropertyType(str, Enum):
    """Semantic type tag of an entity property."""

    STRING = "string"
    INT = "int"
    DECIMAL = "decimal"
    BOOL = "bool"
    DATETIME = "datetime"
    GUID = "guid"
    LONG = "long"
    FLOAT = "float"
    DOUBLE = "double"
    VALUE_OBJECT = "value-object"
    OTHER = "other"

    @classmethod
    def from_raw(cls, raw: str) -> "PropertyType":
        """Map raw type text (``'DateTime'``, ``'Int32'``, ``'uuid'``...) to a tag."""
        return _TYPE_ALIASES.get(raw.strip().lower(), cls.OTHER)

    @property
    def is_numeric(self) -> bool:
        return self in _NUMERIC_TYPES


_TYPE_ALIASES: dict[str, PropertyType] = {
    "string": PropertyType.STRING,
    "str": PropertyType.STRING,
    "int": PropertyType.INT,
    "int32": PropertyType.INT,
    "integer": PropertyType.INT,
    "decimal": PropertyType.DECIMAL,
    "bool": PropertyType.BOOL,
    "boolean": PropertyType.BOOL,
    "datetime": PropertyType.DATETIME,
    "date": PropertyType.DATETIME,
    "guid": PropertyType.GUID,
    "uuid": PropertyType.GUID,
    "long": PropertyType.LONG,
    "int64": PropertyType.LONG,
    "float": PropertyType.FLOAT,
    "single": PropertyType.FLOAT,
    "double": PropertyType.DOUBLE,
    "value-object": PropertyType.VALUE_OBJECT,
    "value_object": PropertyType.VALUE_OBJECT,
    "valueobject": PropertyType.VALUE_OBJECT,
}

_NUMERIC_TYPES = frozenset(
    {
        PropertyType.INT,
        PropertyType.LONG,
        PropertyType.DECIMAL,
        PropertyType.FLOAT,
        PropertyType.DOUBLE,
    }
)

_CLR_TYPES: dict[PropertyType, str] = {
    PropertyType.STRING: "string",
    PropertyType.INT: "int",
    PropertyType.DECIMAL: "decimal",
    PropertyType.BOOL: "bool",
    PropertyType.DATETIME: "DateTime",
    PropertyType.GUID: "Guid",
    PropertyType.LONG: "long",
    PropertyType.FLOAT: "float",
    PropertyType.DOUBLE: "double",
}


def clr_type_for(raw: str) -> str:
    """Return the C# type for raw type text, keeping unknown types verbatim."""
    return _CLR_TYPES.get(PropertyType.from_raw(raw), raw.strip())


# ---------------------------------------------------------------------------
# Entity descriptor
# ---------------------------------------------------------------------------


class _DescriptorModel(BaseModel):
    """Accepts both snake_case field names and their camelCase aliases."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class EntityProperty(_DescriptorModel):
    """A single property of the entity being scaffolded."""

    name: str = Field(..., description="Property identifier, e.g. 'Total'")
    type: str = Field(default="string", description="Raw type text, e.g. 'decimal' or 'DateTime'")
    is_required: bool = Field(default=False)
    default_value: Optional[str] = Field(default=None, description="Initializer expression")
    is_key: bool = Field(default=False, description="At most one per entity by convention")
    foreign_key: Optional[str] = Field(default=None, description="Informational relation hint")
    navigation_property: Optional[str] = Field(default=None, description="Informational relation hint")
    description: Optional[str] = Field(default=None, description="Emitted as a doc comment")
    attributes: list[str] = Field(
        default_factory=list, description="Decorations emitted verbatim above the property"
    )
    is_value_object: bool = Field(default=False)
    value_object_properties: dict[str, str] = Field(
        default_factory=dict, description="Field name -> type, for value-object properties"
    )

    @property
    def kind(self) -> PropertyType:
        """Semantic type tag used by the fixed rule/literal tables."""
        if self.is_value_object:
            return PropertyType.VALUE_OBJECT
        return PropertyType.from_raw(self.type)

    @property
    def clr_type(self) -> str:
        """The C# type emitted for this property."""
        kind = self.kind
        if kind is PropertyType.VALUE_OBJECT:
            return self.name
        if kind is PropertyType.OTHER:
            return self.type.strip()
        return _CLR_TYPES[kind]


class CrudOptions(_DescriptorModel):
    """Boolean/string toggles that shape the generated artifacts."""

    include_swagger_docs: bool = False
    implement_soft_delete: bool = False
    include_auditing: bool = False
    add_pagination: bool = False
    implement_validation: bool = False
    generate_tests: bool = False
    use_async_methods: bool = True
    add_logging: bool = True
    implement_caching: bool = False
    custom_namespace: Optional[str] = None


class CrudDetails(_DescriptorModel):
    """Declarative description of one entity and the pattern to scaffold it with."""

    entity_name: str = Field(default="", description="Non-empty identifier")
    pattern: str = Field(default="", description="One of the registered pattern tags")
    properties: list[EntityProperty] = Field(
        default_factory=list, description="Insertion order is preserved in generated output"
    )
    options: CrudOptions = Field(default_factory=CrudOptions)

    @property
    def key_property(self) -> EntityProperty | None:
        """The first property flagged as key, if any."""
        return next((p for p in self.properties if p.is_key), None)

    @property
    def non_key_properties(self) -> list[EntityProperty]:
        return [p for p in self.properties if not p.is_key]

    @property
    def value_object_properties(self) -> list[EntityProperty]:
        return [p for p in self.properties if p.kind is PropertyType.VALUE_OBJECT]

    @classmethod
    def load(cls, path: str | Path) -> "CrudDetails":
        """Load a descriptor from a JSON or YAML file."""
        return cls.model_validate(load_mapping(path))


class EndpointDetails(_DescriptorModel):
    """Declarative description of a single API endpoint added to a project."""

    http_method: str = Field(default="GET", description="GET, POST, PUT, PATCH or DELETE")
    route: str = Field(default="", description="Route template, e.g. 'api/orders'")
    response_type: str = Field(
        default="",
        description="'void', 'ActionResult', 'IEnumerable<T>', 'Single Entity' or 'Custom DTO'",
    )
    dto_name: Optional[str] = Field(default=None, description="Request/response DTO class, if any")
    requires_validation: bool = False
    requires_authorization: bool = False
    requires_caching: bool = False

    @property
    def verb(self) -> str:
        return self.http_method.strip().upper()

    @property
    def controller_name(self) -> str:
        """PascalCase form of the last literal route segment, or ``Default``."""
        segments = [s for s in self.route.split("/") if s and not s.startswith("{")]
        return to_pascal(segments[-1]) if segments else "Default"

    @property
    def method_name(self) -> str:
        return self.verb.capitalize() + self.controller_name

    @classmethod
    def load(cls, path: str | Path) -> "EndpointDetails":
        """Load an endpoint descriptor from a JSON or YAML file."""
        return cls.model_validate(load_mapping(path))


# ---------------------------------------------------------------------------
# Analyzer output
# ---------------------------------------------------------------------------


class ProjectStructure(BaseModel):
    """Immutable snapshot of an analysed source tree.

    Bucket entries are paths relative to ``root``, in enumeration order.
    """

    model_config = ConfigDict(frozen=True)

    root: Path
    controller_files: tuple[str, ...] = ()
    service_files: tuple[str, ...] = ()
    repository_files: tuple[str, ...] = ()
    cqrs_files: tuple[str, ...] = ()
    entity_files: tuple[str, ...] = ()
    patterns: tuple[str, ...] = ()

    def controller_locations(self) -> list[str]:
        """Distinct parent directories of the controller files."""
        return _distinct_parents(self.controller_files)

    def entity_locations(self) -> list[str]:
        """Distinct parent directories of the entity/model files."""
        return _distinct_parents(self.entity_files)


def _distinct_parents(paths: tuple[str, ...]) -> list[str]:
    seen: list[str] = []
    for path in paths:
        parent = str(Path(path).parent)
        if parent and parent != "." and parent not in seen:
            seen.append(parent)
    return seen


# ---------------------------------------------------------------------------
# Generation result
# ---------------------------------------------------------------------------


class GenerationResult(BaseModel):
    """Outcome of a workflow-level generation request."""

    success: bool
    pattern: Optional[str] = None
    written: list[Path] = Field(default_factory=list)
    error: Optional[str] = None
    rolled_back: bool = False
    details: dict[str, Any] = Field(default_factory=dict)
