"""Pattern profile registry.

A static, read-only table describing, per architecture pattern, the ordered
generation steps (artifact family, layer, template file, output path shape)
that scaffold one entity.  Output paths are relative to the project root and
may reference ``{EntityName}``, ``{EntityNamePlural}`` and, for value objects,
``{ValueObjectName}``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType

from archgen.exceptions import UnsupportedPatternError
from archgen.models import CrudOptions

# ---------------------------------------------------------------------------
# Patterns
# ---------------------------------------------------------------------------


class Pattern(str, Enum):
    """The five supported architectural layouts."""

    CLEAN = "clean"
    DDD = "ddd"
    CQRS = "cqrs"
    SERVICE_REPOSITORY = "service-repository"
    MINIMAL_API = "minimal-api"

    @property
    def label(self) -> str:
        """Display name, as reported by the structure analyzer."""
        return _LABELS[self]

    @property
    def template_dir(self) -> str:
        """Name of this pattern's directory inside the template root."""
        return _TEMPLATE_DIRS[self]

    @classmethod
    def parse(cls, tag: "str | Pattern") -> "Pattern":
        """Resolve a pattern tag or display label, case-insensitively.

        Raises:
            UnsupportedPatternError: If *tag* names no registered pattern.
        """
        if isinstance(tag, Pattern):
            return tag
        key = re.sub(r"[\s_-]+", "-", str(tag).strip().lower())
        try:
            return _ALIASES[key]
        except KeyError:
            raise UnsupportedPatternError(str(tag)) from None


_LABELS = {
    Pattern.CLEAN: "Clean Architecture",
    Pattern.DDD: "Domain-Driven Design",
    Pattern.CQRS: "CQRS",
    Pattern.SERVICE_REPOSITORY: "Service Repository",
    Pattern.MINIMAL_API: "Minimal API",
}

_TEMPLATE_DIRS = {
    Pattern.CLEAN: "clean_architecture",
    Pattern.DDD: "domain_driven_design",
    Pattern.CQRS: "cqrs",
    Pattern.SERVICE_REPOSITORY: "service_repository",
    Pattern.MINIMAL_API: "minimal_api",
}

_ALIASES = {
    "clean": Pattern.CLEAN,
    "clean-architecture": Pattern.CLEAN,
    "ddd": Pattern.DDD,
    "domain-driven-design": Pattern.DDD,
    "cqrs": Pattern.CQRS,
    "service-repository": Pattern.SERVICE_REPOSITORY,
    "minimal-api": Pattern.MINIMAL_API,
}


# ---------------------------------------------------------------------------
# Layers and artifact families
# ---------------------------------------------------------------------------


class Layer(str, Enum):
    DOMAIN = "domain"
    APPLICATION = "application"
    INFRASTRUCTURE = "infrastructure"
    API = "api"
    ENDPOINTS = "endpoints"
    MODELS = "models"
    SERVICES = "services"
    TESTS = "tests"


class ArtifactFamily(str, Enum):
    """Groups of steps that share one placeholder mapping builder."""

    ENTITY = "entity"
    DTO = "dto"
    COMMANDS = "commands"
    QUERIES = "queries"
    HANDLERS = "handlers"
    VALIDATOR = "validator"
    REPOSITORY = "repository"
    SERVICE = "service"
    CONTROLLER = "controller"
    DBCONTEXT = "dbcontext"
    ENDPOINTS = "endpoints"
    DOMAIN_EVENTS = "domain-events"
    VALUE_OBJECTS = "value-objects"
    SWAGGER = "swagger"
    TESTS = "tests"


# ---------------------------------------------------------------------------
# Placeholder keys declared per family
# ---------------------------------------------------------------------------

BASE_KEYS = frozenset({"Namespace", "EntityName", "EntityNamePlural", "KeyType", "KeyName"})

_CQRS_KEYS = BASE_KEYS | {
    "CommandProperties",
    "Validations",
    "Mappings",
    "SoftDelete",
    "SearchConditions",
    "CacheService",
    "CacheServiceParam",
    "CacheServiceAssignment",
    "CacheCheck",
    "CacheSet",
    "PaginationProperties",
    "PaginationClause",
}

FAMILY_KEYS: MappingProxyType[ArtifactFamily, frozenset[str]] = MappingProxyType(
    {
        ArtifactFamily.ENTITY: BASE_KEYS
        | {"Properties", "KeyDeclaration", "AuditProperties", "SoftDeleteProperty"},
        ArtifactFamily.DTO: BASE_KEYS | {"Properties", "KeyDeclaration", "SoftDeleteProperty"},
        ArtifactFamily.COMMANDS: _CQRS_KEYS,
        ArtifactFamily.QUERIES: _CQRS_KEYS,
        ArtifactFamily.HANDLERS: _CQRS_KEYS,
        ArtifactFamily.VALIDATOR: BASE_KEYS | {"Validations"},
        ArtifactFamily.REPOSITORY: BASE_KEYS | {"RepositoryContract", "RepositoryMethods"},
        ArtifactFamily.SERVICE: BASE_KEYS
        | {"ServiceContract", "ServiceMethods", "LoggerField", "LoggerParam", "LoggerAssignment"},
        ArtifactFamily.CONTROLLER: BASE_KEYS | {"ControllerMethods", "SwaggerAttributes"},
        ArtifactFamily.DBCONTEXT: BASE_KEYS | {"SoftDeleteFilter"},
        ArtifactFamily.ENDPOINTS: BASE_KEYS
        | {
            "SearchConditions",
            "UpdateAssignments",
            "SoftDelete",
            "PaginationParameters",
            "PaginationClause",
        },
        ArtifactFamily.DOMAIN_EVENTS: BASE_KEYS,
        ArtifactFamily.VALUE_OBJECTS: frozenset(
            {
                "Namespace",
                "EntityName",
                "ValueObjectName",
                "ValueObjectProperties",
                "ValueObjectParameters",
                "ValueObjectAssignments",
                "EqualityComponents",
            }
        ),
        ArtifactFamily.SWAGGER: BASE_KEYS | {"TestValues"},
        ArtifactFamily.TESTS: BASE_KEYS | {"TestValues"},
    }
)


# ---------------------------------------------------------------------------
# Steps and profiles
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class GenerationStep:
    """One (layer, template, output path) unit within a pattern profile.

    ``folder`` names the analyzer's logical folder used to relocate the file
    into an existing project; ``toggle`` names the ``CrudOptions`` field that
    gates the step when a whole profile is generated.
    """

    family: ArtifactFamily
    layer: Layer
    template: str
    output: str
    folder: str | None = None
    toggle: str | None = None

    @property
    def keys(self) -> frozenset[str]:
        """Placeholder keys this step's mapping supplies."""
        return FAMILY_KEYS[self.family]

    def enabled_for(self, options: CrudOptions) -> bool:
        return self.toggle is None or bool(getattr(options, self.toggle))


@dataclass(frozen=True)
class PatternProfile:
    pattern: Pattern
    steps: tuple[GenerationStep, ...]

    @property
    def families(self) -> frozenset[ArtifactFamily]:
        return frozenset(step.family for step in self.steps)

    def steps_of(self, family: ArtifactFamily) -> tuple[GenerationStep, ...]:
        return tuple(step for step in self.steps if step.family is family)


_F = ArtifactFamily
_L = Layer
_VALIDATION = "implement_validation"
_SWAGGER = "include_swagger_docs"
_TESTS = "generate_tests"

_CLEAN = (
    GenerationStep(_F.ENTITY, _L.DOMAIN, "Entity.template", "Domain/Entities/{EntityName}.cs", "Entities"),
    GenerationStep(
        _F.REPOSITORY,
        _L.DOMAIN,
        "RepositoryInterface.template",
        "Domain/Interfaces/I{EntityName}Repository.cs",
        "Interfaces",
    ),
    GenerationStep(_F.DTO, _L.APPLICATION, "Dto.template", "Application/DTOs/{EntityName}Dto.cs"),
    GenerationStep(
        _F.SERVICE,
        _L.APPLICATION,
        "ServiceInterface.template",
        "Application/Interfaces/I{EntityName}Service.cs",
        "Interfaces",
    ),
    GenerationStep(
        _F.SERVICE, _L.APPLICATION, "Service.template", "Application/Services/{EntityName}Service.cs", "Services"
    ),
    GenerationStep(
        _F.VALIDATOR,
        _L.APPLICATION,
        "Validator.template",
        "Application/Validators/{EntityName}DtoValidator.cs",
        toggle=_VALIDATION,
    ),
    GenerationStep(
        _F.REPOSITORY,
        _L.INFRASTRUCTURE,
        "Repository.template",
        "Infrastructure/Repositories/{EntityName}Repository.cs",
    ),
    GenerationStep(
        _F.DBCONTEXT, _L.INFRASTRUCTURE, "DbContext.template", "Infrastructure/Data/ApplicationDbContext.cs"
    ),
    GenerationStep(
        _F.CONTROLLER, _L.API, "Controller.template", "Api/Controllers/{EntityName}Controller.cs", "Controllers"
    ),
    GenerationStep(
        _F.SWAGGER, _L.API, "SwaggerExamples.template", "Api/Swagger/{EntityName}SwaggerExamples.cs", toggle=_SWAGGER
    ),
    GenerationStep(_F.TESTS, _L.TESTS, "EntityTests.template", "Tests/Domain/{EntityName}Tests.cs", toggle=_TESTS),
    GenerationStep(
        _F.TESTS, _L.TESTS, "ServiceTests.template", "Tests/Application/{EntityName}ServiceTests.cs", toggle=_TESTS
    ),
    GenerationStep(
        _F.TESTS,
        _L.TESTS,
        "RepositoryTests.template",
        "Tests/Infrastructure/{EntityName}RepositoryTests.cs",
        toggle=_TESTS,
    ),
)

_DDD = (
    GenerationStep(_F.DOMAIN_EVENTS, _L.DOMAIN, "AggregateRoot.template", "Domain/Common/AggregateRoot.cs"),
    GenerationStep(
        _F.ENTITY,
        _L.DOMAIN,
        "Aggregate.template",
        "Domain/Aggregates/{EntityName}Aggregate/{EntityName}.cs",
        "Aggregates",
    ),
    GenerationStep(
        _F.DOMAIN_EVENTS,
        _L.DOMAIN,
        "DomainEvents.template",
        "Domain/Aggregates/{EntityName}Aggregate/{EntityName}Events.cs",
        "Aggregates",
    ),
    GenerationStep(
        _F.REPOSITORY,
        _L.DOMAIN,
        "RepositoryInterface.template",
        "Domain/Aggregates/{EntityName}Aggregate/I{EntityName}Repository.cs",
        "Aggregates",
    ),
    GenerationStep(
        _F.REPOSITORY,
        _L.INFRASTRUCTURE,
        "Repository.template",
        "Infrastructure/Repositories/{EntityName}Repository.cs",
        "Repositories",
    ),
    GenerationStep(
        _F.VALUE_OBJECTS, _L.DOMAIN, "ValueObject.template", "Domain/ValueObjects/{ValueObjectName}.cs", "ValueObjects"
    ),
    GenerationStep(
        _F.SERVICE,
        _L.APPLICATION,
        "ServiceInterface.template",
        "Application/Services/I{EntityName}Service.cs",
        "Services",
    ),
    GenerationStep(
        _F.SERVICE, _L.APPLICATION, "Service.template", "Application/Services/{EntityName}Service.cs", "Services"
    ),
    GenerationStep(_F.CONTROLLER, _L.API, "Controller.template", "Api/Controllers/{EntityName}Controller.cs", "Api"),
    GenerationStep(
        _F.TESTS, _L.TESTS, "AggregateTests.template", "Tests/Domain/{EntityName}AggregateTests.cs", toggle=_TESTS
    ),
    GenerationStep(
        _F.TESTS, _L.TESTS, "ServiceTests.template", "Tests/Application/{EntityName}ServiceTests.cs", toggle=_TESTS
    ),
)

_CQRS = (
    GenerationStep(_F.ENTITY, _L.DOMAIN, "Entity.template", "Domain/Entities/{EntityName}.cs", "Models"),
    GenerationStep(
        _F.COMMANDS,
        _L.APPLICATION,
        "CreateCommand.template",
        "Application/Commands/Create{EntityName}Command.cs",
        "Commands",
    ),
    GenerationStep(
        _F.COMMANDS,
        _L.APPLICATION,
        "UpdateCommand.template",
        "Application/Commands/Update{EntityName}Command.cs",
        "Commands",
    ),
    GenerationStep(
        _F.COMMANDS,
        _L.APPLICATION,
        "DeleteCommand.template",
        "Application/Commands/Delete{EntityName}Command.cs",
        "Commands",
    ),
    GenerationStep(
        _F.QUERIES, _L.APPLICATION, "GetQuery.template", "Application/Queries/Get{EntityName}Query.cs", "Queries"
    ),
    GenerationStep(
        _F.QUERIES,
        _L.APPLICATION,
        "GetAllQuery.template",
        "Application/Queries/GetAll{EntityNamePlural}Query.cs",
        "Queries",
    ),
    GenerationStep(
        _F.HANDLERS,
        _L.APPLICATION,
        "CreateHandler.template",
        "Application/Handlers/Create{EntityName}CommandHandler.cs",
        "Handlers",
    ),
    GenerationStep(
        _F.HANDLERS,
        _L.APPLICATION,
        "UpdateHandler.template",
        "Application/Handlers/Update{EntityName}CommandHandler.cs",
        "Handlers",
    ),
    GenerationStep(
        _F.HANDLERS,
        _L.APPLICATION,
        "DeleteHandler.template",
        "Application/Handlers/Delete{EntityName}CommandHandler.cs",
        "Handlers",
    ),
    GenerationStep(
        _F.VALIDATOR,
        _L.APPLICATION,
        "Validators.template",
        "Application/Validators/{EntityName}CommandValidators.cs",
        toggle=_VALIDATION,
    ),
    GenerationStep(
        _F.REPOSITORY,
        _L.APPLICATION,
        "RepositoryInterface.template",
        "Application/Interfaces/I{EntityName}Repository.cs",
    ),
    GenerationStep(
        _F.REPOSITORY,
        _L.INFRASTRUCTURE,
        "Repository.template",
        "Infrastructure/Repositories/{EntityName}Repository.cs",
    ),
    GenerationStep(
        _F.TESTS, _L.TESTS, "CommandTests.template", "Tests/Commands/{EntityName}CommandTests.cs", toggle=_TESTS
    ),
    GenerationStep(_F.TESTS, _L.TESTS, "QueryTests.template", "Tests/Queries/{EntityName}QueryTests.cs", toggle=_TESTS),
)

_SERVICE_REPOSITORY = (
    GenerationStep(_F.ENTITY, _L.MODELS, "Model.template", "Models/{EntityName}.cs", "Models"),
    GenerationStep(
        _F.REPOSITORY,
        _L.SERVICES,
        "RepositoryInterface.template",
        "Interfaces/I{EntityName}Repository.cs",
        "Interfaces",
    ),
    GenerationStep(
        _F.SERVICE, _L.SERVICES, "ServiceInterface.template", "Interfaces/I{EntityName}Service.cs", "Interfaces"
    ),
    GenerationStep(
        _F.REPOSITORY,
        _L.INFRASTRUCTURE,
        "Repository.template",
        "Repositories/{EntityName}Repository.cs",
        "Repositories",
    ),
    GenerationStep(_F.SERVICE, _L.SERVICES, "Service.template", "Services/{EntityName}Service.cs", "Services"),
    GenerationStep(
        _F.CONTROLLER, _L.API, "Controller.template", "Controllers/{EntityName}Controller.cs", "Controllers"
    ),
    GenerationStep(
        _F.VALIDATOR, _L.SERVICES, "Validator.template", "Validators/{EntityName}Validator.cs", toggle=_VALIDATION
    ),
    GenerationStep(_F.TESTS, _L.TESTS, "ServiceTests.template", "Tests/{EntityName}ServiceTests.cs", toggle=_TESTS),
)

_MINIMAL_API = (
    GenerationStep(_F.ENDPOINTS, _L.ENDPOINTS, "Endpoints.template", "Endpoints/{EntityName}Endpoints.cs", "Endpoints"),
    GenerationStep(_F.DTO, _L.MODELS, "Dto.template", "Models/{EntityName}Dto.cs", "Models"),
    GenerationStep(
        _F.TESTS, _L.TESTS, "EndpointsTests.template", "Tests/{EntityName}EndpointsTests.cs", toggle=_TESTS
    ),
)

PROFILES: MappingProxyType[Pattern, PatternProfile] = MappingProxyType(
    {
        Pattern.CLEAN: PatternProfile(Pattern.CLEAN, _CLEAN),
        Pattern.DDD: PatternProfile(Pattern.DDD, _DDD),
        Pattern.CQRS: PatternProfile(Pattern.CQRS, _CQRS),
        Pattern.SERVICE_REPOSITORY: PatternProfile(Pattern.SERVICE_REPOSITORY, _SERVICE_REPOSITORY),
        Pattern.MINIMAL_API: PatternProfile(Pattern.MINIMAL_API, _MINIMAL_API),
    }
)


def profile_for(pattern: str | Pattern) -> PatternProfile:
    """Return the profile registered for *pattern*.

    Raises:
        UnsupportedPatternError: If *pattern* names no registered pattern.
    """
    return PROFILES[Pattern.parse(pattern)]


def steps_for(pattern: str | Pattern) -> tuple[GenerationStep, ...]:
    """Return the ordered generation steps for *pattern*."""
    return profile_for(pattern).steps
