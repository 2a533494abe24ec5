"""Property-driven C# snippets substituted into templates.

Every function returns either the empty string or text that ends with a
newline, so templates can place markers back to back on one line.  Indents
follow file-scoped namespaces: class members at 4 spaces, statements at 8,
object-initializer entries at 12.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from archgen.models import EntityProperty, PropertyType, clr_type_for
from archgen.utils import to_camel

MEMBER = " " * 4
STATEMENT = " " * 8
ENTRY = " " * 12

MAX_STRING_LENGTH = 200
CACHE_MINUTES = 10

_SAMPLE_LITERALS: dict[PropertyType, str] = {
    PropertyType.STRING: '"Test Value"',
    PropertyType.INT: "1",
    PropertyType.DECIMAL: "1.0m",
    PropertyType.BOOL: "true",
    PropertyType.DATETIME: "DateTime.UtcNow",
    PropertyType.GUID: "Guid.NewGuid()",
    PropertyType.LONG: "1L",
    PropertyType.FLOAT: "1.0f",
    PropertyType.DOUBLE: "1.0d",
}

NULL_LITERAL = "null"


def indent(lines: Iterable[str], prefix: str) -> list[str]:
    return [prefix + line if line else line for line in lines]


def members(chunks: Sequence[str]) -> str:
    """Join member chunks with blank lines; empty input gives ``""``."""
    chunks = [chunk for chunk in chunks if chunk]
    if not chunks:
        return ""
    return "\n\n".join(chunks) + "\n"


def statements(lines: Sequence[str], prefix: str = STATEMENT) -> str:
    """Emit one line per statement at *prefix*; empty input gives ``""``."""
    if not lines:
        return ""
    return "\n".join(indent(lines, prefix)) + "\n"


# ---------------------------------------------------------------------------
# Properties
# ---------------------------------------------------------------------------


def property_declaration(prop: EntityProperty) -> str:
    """Render one auto-property with its doc comment and attributes."""
    lines: list[str] = []
    if prop.description:
        lines += ["/// <summary>", f"/// {prop.description}", "/// </summary>"]
    lines += list(prop.attributes)
    nullable = "" if prop.is_required or prop.is_key else "?"
    declaration = f"public {prop.clr_type}{nullable} {prop.name} {{ get; set; }}"
    if prop.default_value is not None:
        declaration += f" = {prop.default_value};"
    lines.append(declaration)
    return "\n".join(indent(lines, MEMBER))


def property_block(properties: Sequence[EntityProperty]) -> str:
    """Member block declaring *properties* in order."""
    return members([property_declaration(prop) for prop in properties])


def key_declaration(key_type: str, has_key: bool) -> str:
    """Implicit ``Id`` property emitted when no property is flagged as key."""
    if has_key:
        return ""
    return f"{MEMBER}public {key_type} Id {{ get; set; }}\n"


def audit_properties(enabled: bool) -> str:
    if not enabled:
        return ""
    return members(
        [
            f"{MEMBER}public DateTime CreatedAt {{ get; set; }}",
            f"{MEMBER}public string? CreatedBy {{ get; set; }}",
            f"{MEMBER}public DateTime? UpdatedAt {{ get; set; }}",
            f"{MEMBER}public string? UpdatedBy {{ get; set; }}",
        ]
    )


def soft_delete_property(enabled: bool) -> str:
    if not enabled:
        return ""
    return f"{MEMBER}public bool IsDeleted {{ get; set; }}\n"


def soft_delete_filter(entity: str, enabled: bool) -> str:
    """EF Core global query filter hiding soft-deleted rows."""
    if not enabled:
        return ""
    return statements([f"modelBuilder.Entity<{entity}>().HasQueryFilter(x => !x.IsDeleted);"])


# ---------------------------------------------------------------------------
# Validation, test values and mappings
# ---------------------------------------------------------------------------


def validation_rule(prop: EntityProperty) -> str | None:
    """FluentValidation rule for one property, or ``None`` if its type has no rule."""
    kind = prop.kind
    rule = f"RuleFor(x => x.{prop.name})"
    optional = f".When(x => x.{prop.name} != null);"
    if kind is PropertyType.STRING:
        if prop.is_required:
            return f"{rule}.MaximumLength({MAX_STRING_LENGTH}).NotEmpty();"
        return f"{rule}.MaximumLength({MAX_STRING_LENGTH}){optional}"
    if kind.is_numeric:
        if prop.is_required:
            return f"{rule}.GreaterThanOrEqualTo(0).NotNull();"
        return f"{rule}.GreaterThanOrEqualTo(0){optional}"
    if kind in (PropertyType.DATETIME, PropertyType.GUID) and prop.is_required:
        return f"{rule}.NotEmpty();"
    return None


def validation_block(properties: Sequence[EntityProperty]) -> str:
    rules = [validation_rule(prop) for prop in properties if not prop.is_key]
    return statements([rule for rule in rules if rule])


def sample_literal(prop: EntityProperty) -> str:
    """Default literal used to populate *prop* in generated tests."""
    return _SAMPLE_LITERALS.get(prop.kind, NULL_LITERAL)


def sample_values_block(properties: Sequence[EntityProperty]) -> str:
    return statements(
        [f"{prop.name} = {sample_literal(prop)}," for prop in properties if not prop.is_key],
        ENTRY,
    )


def mappings_block(properties: Sequence[EntityProperty], source: str = "request") -> str:
    """Object-initializer entries copying every non-key property from *source*."""
    return statements(
        [f"{prop.name} = {source}.{prop.name}," for prop in properties if not prop.is_key],
        ENTRY,
    )


def update_assignments(properties: Sequence[EntityProperty], source: str = "input") -> str:
    return statements(
        [f"entity.{prop.name} = {source}.{prop.name};" for prop in properties if not prop.is_key],
        ENTRY,
    )


def search_conditions(properties: Sequence[EntityProperty], term: str = "request.SearchTerm") -> str:
    """OR-joined ``Contains`` predicate over string properties, else ``true``."""
    predicates = [
        f"x.{prop.name}.Contains({term})"
        for prop in properties
        if prop.kind is PropertyType.STRING
    ]
    return " || ".join(predicates) if predicates else "true"


# ---------------------------------------------------------------------------
# Caching
# ---------------------------------------------------------------------------


def cache_service_field(enabled: bool) -> str:
    if not enabled:
        return ""
    return f"{MEMBER}private readonly ICacheService _cacheService;\n"


def cache_service_param(enabled: bool) -> str:
    return ", ICacheService cacheService" if enabled else ""


def cache_service_assignment(enabled: bool) -> str:
    return statements(["_cacheService = cacheService;"]) if enabled else ""


def cache_check(entity: str, key_name: str, enabled: bool) -> str:
    """Read-through cache lookup keyed ``Entity:{request.Key}``."""
    if not enabled:
        return ""
    return statements(
        [
            f'var cacheKey = $"{entity}:{{request.{key_name}}}";',
            f"var cached = await _cacheService.GetAsync<{entity}>(cacheKey, cancellationToken);",
            "if (cached != null)",
            "{",
            "    return cached;",
            "}",
            "",
        ]
    )


def cache_set(enabled: bool) -> str:
    if not enabled:
        return ""
    return statements(
        [
            "if (entity != null)",
            "{",
            "    await _cacheService.SetAsync(cacheKey, entity, "
            f"TimeSpan.FromMinutes({CACHE_MINUTES}), cancellationToken);",
            "}",
            "",
        ]
    )


# ---------------------------------------------------------------------------
# Deletion and pagination
# ---------------------------------------------------------------------------


def handler_soft_delete(enabled: bool) -> str:
    """Delete handler body: mark-deleted-and-update, or a hard delete."""
    if enabled:
        return statements(
            [
                "entity.IsDeleted = true;",
                "await _repository.UpdateAsync(entity, cancellationToken);",
            ]
        )
    return statements(["await _repository.DeleteAsync(entity, cancellationToken);"])


def endpoint_soft_delete(enabled: bool) -> str:
    if enabled:
        return statements(["entity.IsDeleted = true;"], ENTRY)
    return statements(["db.Remove(entity);"], ENTRY)


def pagination_properties(enabled: bool) -> str:
    if not enabled:
        return ""
    return members(
        [
            f"{MEMBER}public int PageNumber {{ get; set; }} = 1;",
            f"{MEMBER}public int PageSize {{ get; set; }} = 20;",
        ]
    )


def pagination_clause(enabled: bool, owner: str = "request.", prefix: str = STATEMENT) -> str:
    """``Skip``/``Take`` over ``query`` using *owner*'s page fields."""
    if not enabled:
        return ""
    number = f"{owner}PageNumber" if owner else "pageNumber"
    size = f"{owner}PageSize" if owner else "pageSize"
    return statements([f"query = query.Skip(({number} - 1) * {size}).Take({size});"], prefix)


def pagination_parameters(enabled: bool) -> str:
    return ", int pageNumber = 1, int pageSize = 20" if enabled else ""


# ---------------------------------------------------------------------------
# Value objects
# ---------------------------------------------------------------------------


def value_object_properties(fields: dict[str, str]) -> str:
    return members(
        [f"{MEMBER}public {clr_type_for(type_)} {name} {{ get; }}" for name, type_ in fields.items()]
    )


def value_object_parameters(fields: dict[str, str]) -> str:
    return ", ".join(f"{clr_type_for(type_)} {to_camel(name)}" for name, type_ in fields.items())


def value_object_assignments(fields: dict[str, str]) -> str:
    return statements([f"{name} = {to_camel(name)};" for name in fields])


def equality_components(fields: dict[str, str]) -> str:
    return statements([f"yield return {name};" for name in fields])
