"""Placeholder mapping builders, one per artifact family.

Each builder returns a flat ``{Key: text}`` mapping containing exactly the keys
declared for its family in :data:`archgen.scaffolder.profiles.FAMILY_KEYS`.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from archgen.models import CrudDetails, CrudOptions, EntityProperty
from archgen.scaffolder import blocks, methods
from archgen.scaffolder.profiles import ArtifactFamily, Pattern
from archgen.utils import is_identifier, pluralize, to_pascal

DEFAULT_KEY_TYPE = "int"
DEFAULT_KEY_NAME = "Id"
DEFAULT_NAMESPACE = "App"


def derive_namespace(output_root: str | Path, custom: str | None = None) -> str:
    """Custom namespace, else the PascalCase output directory name, else ``App``."""
    if custom and custom.strip():
        return custom.strip()
    candidate = to_pascal(Path(output_root).resolve().name)
    return candidate if is_identifier(candidate) else DEFAULT_NAMESPACE


@dataclass(frozen=True)
class RenderContext:
    """Everything a builder needs to render one entity for one pattern."""

    details: CrudDetails
    pattern: Pattern
    namespace: str

    @classmethod
    def create(cls, details: CrudDetails, pattern: Pattern, output_root: str | Path) -> "RenderContext":
        namespace = derive_namespace(output_root, details.options.custom_namespace)
        return cls(details=details, pattern=pattern, namespace=namespace)

    @property
    def entity(self) -> str:
        return self.details.entity_name

    @property
    def options(self) -> CrudOptions:
        return self.details.options

    @property
    def properties(self) -> list[EntityProperty]:
        return self.details.properties

    @property
    def key_type(self) -> str:
        key = self.details.key_property
        return key.clr_type if key else DEFAULT_KEY_TYPE

    @property
    def key_name(self) -> str:
        key = self.details.key_property
        return key.name if key else DEFAULT_KEY_NAME

    @property
    def use_async(self) -> bool:
        # CQRS handlers always await the repository.
        return self.options.use_async_methods or self.pattern is Pattern.CQRS

    @property
    def style(self) -> methods.MethodStyle:
        return methods.MethodStyle(self.entity, self.key_type, self.key_name, self.use_async)


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------


def _base(ctx: RenderContext) -> dict[str, str]:
    return {
        "Namespace": ctx.namespace,
        "EntityName": ctx.entity,
        "EntityNamePlural": pluralize(ctx.entity),
        "KeyType": ctx.key_type,
        "KeyName": ctx.key_name,
    }


def _entity(ctx: RenderContext) -> dict[str, str]:
    return {
        **_base(ctx),
        "KeyDeclaration": blocks.key_declaration(ctx.key_type, ctx.details.key_property is not None),
        "Properties": blocks.property_block(ctx.properties),
        "AuditProperties": blocks.audit_properties(ctx.options.include_auditing),
        "SoftDeleteProperty": blocks.soft_delete_property(ctx.options.implement_soft_delete),
    }


def _dto(ctx: RenderContext) -> dict[str, str]:
    return {
        **_base(ctx),
        "KeyDeclaration": blocks.key_declaration(ctx.key_type, ctx.details.key_property is not None),
        "Properties": blocks.property_block(ctx.properties),
        "SoftDeleteProperty": blocks.soft_delete_property(ctx.options.implement_soft_delete),
    }


def _cqrs(ctx: RenderContext) -> dict[str, str]:
    opts = ctx.options
    caching = opts.implement_caching
    return {
        **_base(ctx),
        "CommandProperties": blocks.property_block(ctx.details.non_key_properties),
        "Validations": blocks.validation_block(ctx.properties),
        "Mappings": blocks.mappings_block(ctx.properties),
        "SoftDelete": blocks.handler_soft_delete(opts.implement_soft_delete),
        "SearchConditions": blocks.search_conditions(ctx.properties),
        "CacheService": blocks.cache_service_field(caching),
        "CacheServiceParam": blocks.cache_service_param(caching),
        "CacheServiceAssignment": blocks.cache_service_assignment(caching),
        "CacheCheck": blocks.cache_check(ctx.entity, ctx.key_name, caching),
        "CacheSet": blocks.cache_set(caching),
        "PaginationProperties": blocks.pagination_properties(opts.add_pagination),
        "PaginationClause": blocks.pagination_clause(opts.add_pagination),
    }


def _validator(ctx: RenderContext) -> dict[str, str]:
    return {**_base(ctx), "Validations": blocks.validation_block(ctx.properties)}


def _repository(ctx: RenderContext) -> dict[str, str]:
    return {
        **_base(ctx),
        "RepositoryContract": methods.repository_contract(ctx.style),
        "RepositoryMethods": methods.repository_methods(ctx.style),
    }


def _service(ctx: RenderContext) -> dict[str, str]:
    logging = ctx.options.add_logging
    return {
        **_base(ctx),
        "ServiceContract": methods.service_contract(ctx.style),
        "ServiceMethods": methods.service_methods(
            ctx.style, logging=logging, soft_delete=ctx.options.implement_soft_delete
        ),
        "LoggerField": methods.logger_field(ctx.entity, logging),
        "LoggerParam": methods.logger_param(ctx.entity, logging),
        "LoggerAssignment": methods.logger_assignment(logging),
    }


def _controller(ctx: RenderContext) -> dict[str, str]:
    opts = ctx.options
    return {
        **_base(ctx),
        "ControllerMethods": methods.controller_methods(
            ctx.style, swagger=opts.include_swagger_docs, pagination=opts.add_pagination
        ),
        "SwaggerAttributes": methods.swagger_attributes(opts.include_swagger_docs),
    }


def _dbcontext(ctx: RenderContext) -> dict[str, str]:
    return {
        **_base(ctx),
        "SoftDeleteFilter": blocks.soft_delete_filter(ctx.entity, ctx.options.implement_soft_delete),
    }


def _endpoints(ctx: RenderContext) -> dict[str, str]:
    opts = ctx.options
    return {
        **_base(ctx),
        "SearchConditions": blocks.search_conditions(ctx.properties, term="search"),
        "UpdateAssignments": blocks.update_assignments(ctx.properties),
        "SoftDelete": blocks.endpoint_soft_delete(opts.implement_soft_delete),
        "PaginationParameters": blocks.pagination_parameters(opts.add_pagination),
        "PaginationClause": blocks.pagination_clause(opts.add_pagination, owner="", prefix=blocks.ENTRY),
    }


def _samples(ctx: RenderContext) -> dict[str, str]:
    return {**_base(ctx), "TestValues": blocks.sample_values_block(ctx.properties)}


def value_object_mapping(ctx: RenderContext, prop: EntityProperty) -> dict[str, str]:
    """Mapping for the value-object artifact generated from *prop*."""
    fields = prop.value_object_properties
    return {
        "Namespace": ctx.namespace,
        "EntityName": ctx.entity,
        "ValueObjectName": prop.name,
        "ValueObjectProperties": blocks.value_object_properties(fields),
        "ValueObjectParameters": blocks.value_object_parameters(fields),
        "ValueObjectAssignments": blocks.value_object_assignments(fields),
        "EqualityComponents": blocks.equality_components(fields),
    }


_BUILDERS: dict[ArtifactFamily, Callable[[RenderContext], dict[str, str]]] = {
    ArtifactFamily.ENTITY: _entity,
    ArtifactFamily.DTO: _dto,
    ArtifactFamily.COMMANDS: _cqrs,
    ArtifactFamily.QUERIES: _cqrs,
    ArtifactFamily.HANDLERS: _cqrs,
    ArtifactFamily.VALIDATOR: _validator,
    ArtifactFamily.REPOSITORY: _repository,
    ArtifactFamily.SERVICE: _service,
    ArtifactFamily.CONTROLLER: _controller,
    ArtifactFamily.DBCONTEXT: _dbcontext,
    ArtifactFamily.ENDPOINTS: _endpoints,
    ArtifactFamily.DOMAIN_EVENTS: _base,
    ArtifactFamily.SWAGGER: _samples,
    ArtifactFamily.TESTS: _samples,
}


def build_mapping(
    family: ArtifactFamily,
    ctx: RenderContext,
    *,
    value_object: EntityProperty | None = None,
) -> dict[str, str]:
    """Build the placeholder mapping for one step of *family*.

    Raises:
        ValueError: If a value-object mapping is requested without a property.
    """
    if family is ArtifactFamily.VALUE_OBJECTS:
        if value_object is None:
            raise ValueError("A value-object property is required for value-object artifacts")
        return value_object_mapping(ctx, value_object)
    return _BUILDERS[family](ctx)
