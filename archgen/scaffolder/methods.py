"""Repository, service and controller method blocks.

Each block comes in an asynchronous (``Task``-returning, ``...Async`` names)
and a synchronous flavour selected by ``use_async_methods``.  Service logging
and Swagger response attributes are toggled per call.
"""

from __future__ import annotations

from dataclasses import dataclass

from archgen.scaffolder.blocks import MEMBER, members


@dataclass(frozen=True)
class MethodStyle:
    """Naming and signature helpers for one entity and one async flavour."""

    entity: str
    key_type: str
    key_name: str
    use_async: bool

    def name(self, base: str) -> str:
        return f"{base}Async" if self.use_async else base

    def returns(self, type_: str | None) -> str:
        if self.use_async:
            return f"Task<{type_}>" if type_ else "Task"
        return type_ or "void"

    @property
    def modifier(self) -> str:
        return "public async" if self.use_async else "public"

    @property
    def await_(self) -> str:
        return "await " if self.use_async else ""


def _method(signature: str, body: list[str], attributes: list[str] | None = None) -> str:
    lines = list(attributes or []) + [signature, "{"] + ["    " + line for line in body] + ["}"]
    return "\n".join(MEMBER + line for line in lines)


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


def repository_contract(style: MethodStyle) -> str:
    """Interface members of ``I{Entity}Repository``."""
    e, k = style.entity, style.key_type
    token = ", CancellationToken cancellationToken = default" if style.use_async else ""
    only_token = "CancellationToken cancellationToken = default" if style.use_async else ""
    lines = [
        f"{style.returns(e + '?')} {style.name('GetById')}({k} id{token});",
        f"{style.returns(f'IReadOnlyList<{e}>')} {style.name('GetAll')}({only_token});",
        f"{style.returns(e)} {style.name('Add')}({e} entity{token});",
        f"{style.returns(None)} {style.name('Update')}({e} entity{token});",
        f"{style.returns(None)} {style.name('Delete')}({e} entity{token});",
    ]
    return "\n".join(MEMBER + line for line in lines) + "\n"


def repository_methods(style: MethodStyle) -> str:
    """EF Core implementation of the repository contract over ``_context``."""
    e, k = style.entity, style.key_type
    if style.use_async:
        token = ", CancellationToken cancellationToken = default"
        return members(
            [
                _method(
                    f"public async Task<{e}?> GetByIdAsync({k} id{token})",
                    [f"return await _context.Set<{e}>().FindAsync(new object[] {{ id }}, cancellationToken);"],
                ),
                _method(
                    f"public async Task<IReadOnlyList<{e}>> GetAllAsync(CancellationToken cancellationToken = default)",
                    [f"return await _context.Set<{e}>().ToListAsync(cancellationToken);"],
                ),
                _method(
                    f"public async Task<{e}> AddAsync({e} entity{token})",
                    [
                        f"await _context.Set<{e}>().AddAsync(entity, cancellationToken);",
                        "await _context.SaveChangesAsync(cancellationToken);",
                        "return entity;",
                    ],
                ),
                _method(
                    f"public async Task UpdateAsync({e} entity{token})",
                    [
                        f"_context.Set<{e}>().Update(entity);",
                        "await _context.SaveChangesAsync(cancellationToken);",
                    ],
                ),
                _method(
                    f"public async Task DeleteAsync({e} entity{token})",
                    [
                        f"_context.Set<{e}>().Remove(entity);",
                        "await _context.SaveChangesAsync(cancellationToken);",
                    ],
                ),
            ]
        )
    return members(
        [
            _method(f"public {e}? GetById({k} id)", [f"return _context.Set<{e}>().Find(id);"]),
            _method(f"public IReadOnlyList<{e}> GetAll()", [f"return _context.Set<{e}>().ToList();"]),
            _method(
                f"public {e} Add({e} entity)",
                [f"_context.Set<{e}>().Add(entity);", "_context.SaveChanges();", "return entity;"],
            ),
            _method(
                f"public void Update({e} entity)",
                [f"_context.Set<{e}>().Update(entity);", "_context.SaveChanges();"],
            ),
            _method(
                f"public void Delete({e} entity)",
                [f"_context.Set<{e}>().Remove(entity);", "_context.SaveChanges();"],
            ),
        ]
    )


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


def service_contract(style: MethodStyle) -> str:
    """Interface members of ``I{Entity}Service``."""
    e, k = style.entity, style.key_type
    lines = [
        f"{style.returns(e + '?')} {style.name('GetById')}({k} id);",
        f"{style.returns(f'IReadOnlyList<{e}>')} {style.name('GetAll')}();",
        f"{style.returns(e)} {style.name('Create')}({e} entity);",
        f"{style.returns(None)} {style.name('Update')}({e} entity);",
        f"{style.returns('bool')} {style.name('Delete')}({k} id);",
    ]
    return "\n".join(MEMBER + line for line in lines) + "\n"


def service_methods(style: MethodStyle, *, logging: bool, soft_delete: bool) -> str:
    """Service implementation delegating to ``_repository``."""
    e, k, aw = style.entity, style.key_type, style.await_

    def log(message: str, *args: str) -> list[str]:
        if not logging:
            return []
        params = "".join(f", {arg}" for arg in args)
        return [f'_logger.LogInformation("{message}"{params});']

    if soft_delete:
        removal = ["entity.IsDeleted = true;", f"{aw}_repository.{style.name('Update')}(entity);"]
    else:
        removal = [f"{aw}_repository.{style.name('Delete')}(entity);"]

    return members(
        [
            _method(
                f"{style.modifier} {style.returns(e + '?')} {style.name('GetById')}({k} id)",
                log(f"Retrieving {e} {{id}}", "id")
                + [f"return {aw}_repository.{style.name('GetById')}(id);"],
            ),
            _method(
                f"{style.modifier} {style.returns(f'IReadOnlyList<{e}>')} {style.name('GetAll')}()",
                log(f"Retrieving all {e} records")
                + [f"return {aw}_repository.{style.name('GetAll')}();"],
            ),
            _method(
                f"{style.modifier} {style.returns(e)} {style.name('Create')}({e} entity)",
                log(f"Creating {e}")
                + [f"return {aw}_repository.{style.name('Add')}(entity);"],
            ),
            _method(
                f"{style.modifier} {style.returns(None)} {style.name('Update')}({e} entity)",
                log(f"Updating {e} {{id}}", f"entity.{style.key_name}")
                + [f"{aw}_repository.{style.name('Update')}(entity);"],
            ),
            _method(
                f"{style.modifier} {style.returns('bool')} {style.name('Delete')}({k} id)",
                log(f"Deleting {e} {{id}}", "id")
                + [
                    f"var entity = {aw}_repository.{style.name('GetById')}(id);",
                    "if (entity == null)",
                    "{",
                    "    return false;",
                    "}",
                ]
                + removal
                + ["return true;"],
            ),
        ]
    )


def logger_field(entity: str, enabled: bool) -> str:
    if not enabled:
        return ""
    return f"{MEMBER}private readonly ILogger<{entity}Service> _logger;\n"


def logger_param(entity: str, enabled: bool) -> str:
    return f", ILogger<{entity}Service> logger" if enabled else ""


def logger_assignment(enabled: bool) -> str:
    return f"{MEMBER * 2}_logger = logger;\n" if enabled else ""


# ---------------------------------------------------------------------------
# Controller
# ---------------------------------------------------------------------------


def swagger_attributes(enabled: bool) -> str:
    """Class-level attributes placed above the controller declaration."""
    return '[Produces("application/json")]\n' if enabled else ""


def controller_methods(style: MethodStyle, *, swagger: bool, pagination: bool) -> str:
    """REST actions delegating to ``_service``."""
    e, k, aw = style.entity, style.key_type, style.await_

    def action(result: str) -> str:
        inner = f"ActionResult<{result}>" if result else "IActionResult"
        return f"Task<{inner}>" if style.use_async else inner

    def responses(*codes: str) -> list[str]:
        if not swagger:
            return []
        return [f"[ProducesResponseType(StatusCodes.Status{code})]" for code in codes]

    page_params = ", [FromQuery] int pageNumber = 1, [FromQuery] int pageSize = 20" if pagination else ""
    get_all_body = [f"var entities = {aw}_service.{style.name('GetAll')}();"]
    if pagination:
        get_all_body.append("return Ok(entities.Skip((pageNumber - 1) * pageSize).Take(pageSize));")
    else:
        get_all_body.append("return Ok(entities);")

    modifier = style.modifier
    return members(
        [
            _method(
                f"{modifier} {action(f'IEnumerable<{e}>')} GetAll({page_params.lstrip(', ')})",
                get_all_body,
                ["[HttpGet]"] + responses("200OK"),
            ),
            _method(
                f"{modifier} {action(e)} GetById({k} id)",
                [
                    f"var entity = {aw}_service.{style.name('GetById')}(id);",
                    "return entity == null ? NotFound() : Ok(entity);",
                ],
                ['[HttpGet("{id}")]'] + responses("200OK", "404NotFound"),
            ),
            _method(
                f"{modifier} {action(e)} Create({e} entity)",
                [
                    f"var created = {aw}_service.{style.name('Create')}(entity);",
                    f"return CreatedAtAction(nameof(GetById), new {{ id = created.{style.key_name} }}, created);",
                ],
                ["[HttpPost]"] + responses("201Created", "400BadRequest"),
            ),
            _method(
                f"{modifier} {action('')} Update({k} id, {e} entity)",
                [
                    f"if (!Equals(id, entity.{style.key_name}))",
                    "{",
                    "    return BadRequest();",
                    "}",
                    f"{aw}_service.{style.name('Update')}(entity);",
                    "return NoContent();",
                ],
                ['[HttpPut("{id}")]'] + responses("204NoContent", "400BadRequest"),
            ),
            _method(
                f"{modifier} {action('')} Delete({k} id)",
                [
                    f"var deleted = {aw}_service.{style.name('Delete')}(id);",
                    "return deleted ? NoContent() : NotFound();",
                ],
                ['[HttpDelete("{id}")]'] + responses("204NoContent", "404NotFound"),
            ),
        ]
    )
