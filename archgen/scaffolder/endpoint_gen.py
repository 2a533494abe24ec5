"""Single-endpoint generator.

Adds one controller action to an existing project from an ``EndpointDetails``
descriptor, together with its optional DTO and validator, a test skeleton and
an entry appended to ``docs/api.md``.  Templates live in the ``endpoint/``
directory of the template root.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from archgen.config import Config
from archgen.exceptions import (
    DescriptorError,
    ScaffoldError,
    TemplateNotFoundError,
    TemplatePathNotFoundError,
)
from archgen.log import get_logger
from archgen.models import EndpointDetails
from archgen.scaffolder.placeholders import derive_namespace
from archgen.scaffolder.templates import TemplateRenderer, substitute
from archgen.scaffolder.unit_of_work import GenerationUnit
from archgen.utils import is_identifier, read_text, write_text

logger = get_logger("scaffolder.endpoint")

ENDPOINT_TEMPLATE_DIR = "endpoint"
HTTP_METHODS = ("GET", "POST", "PUT", "PATCH", "DELETE")
CACHE_SECONDS = 60

_BODY_METHODS = frozenset({"POST", "PUT", "PATCH"})
_ID_METHODS = frozenset({"GET", "DELETE"})


@dataclass(frozen=True)
class EndpointStep:
    """One (template, output path) pair of the endpoint artifact set.

    ``requires`` names the ``EndpointDetails`` condition gating the step and
    ``append`` marks outputs that accumulate one entry per endpoint.
    """

    template: str
    output: str
    requires: str | None = None
    append: bool = False

    def enabled_for(self, details: EndpointDetails) -> bool:
        if self.requires == "dto":
            return bool(details.dto_name)
        if self.requires == "validation":
            return bool(details.dto_name) and details.requires_validation
        return True


CONTROLLER_STEP = EndpointStep("Controller.template", "Controllers/{ControllerName}Controller.cs")
DTO_STEP = EndpointStep("Dto.template", "Models/DTOs/{DtoName}.cs", requires="dto")
VALIDATOR_STEP = EndpointStep("Validator.template", "Validators/{DtoName}Validator.cs", requires="validation")
TESTS_STEP = EndpointStep("EndpointTests.template", "Tests/{ControllerName}Tests.cs")
API_DOC_STEP = EndpointStep("ApiDoc.template", "docs/api.md", append=True)

ENDPOINT_STEPS = (CONTROLLER_STEP, DTO_STEP, VALIDATOR_STEP, TESTS_STEP, API_DOC_STEP)


def validate_endpoint(details: EndpointDetails | None) -> EndpointDetails:
    """Check that *details* can drive endpoint generation.

    Raises:
        DescriptorError: If the descriptor is missing, the HTTP method is not
            supported, or a derived class name is not an identifier.
    """
    if details is None:
        raise DescriptorError("An endpoint descriptor is required")
    if details.verb not in HTTP_METHODS:
        raise DescriptorError(f"Unsupported HTTP method: {details.http_method!r}")
    if not is_identifier(details.controller_name):
        raise DescriptorError(f"Route does not yield a controller name: {details.route!r}")
    if details.dto_name and not is_identifier(details.dto_name):
        raise DescriptorError(f"DTO name is not a valid identifier: {details.dto_name!r}")
    return details


# ---------------------------------------------------------------------------
# Placeholder mapping
# ---------------------------------------------------------------------------


def return_type(details: EndpointDetails) -> str:
    dto = details.dto_name or "object"
    return {
        "void": "IActionResult",
        "ActionResult": "ActionResult",
        "IEnumerable<T>": f"ActionResult<IEnumerable<{dto}>>",
        "Single Entity": f"ActionResult<{dto}>",
        "Custom DTO": f"ActionResult<{dto}>",
    }.get(details.response_type.strip(), "IActionResult")


def method_parameters(details: EndpointDetails) -> str:
    if details.verb in _BODY_METHODS:
        return f"[FromBody] {details.dto_name or 'object'} request"
    if details.verb in _ID_METHODS:
        return "int id"
    return ""


def method_body(details: EndpointDetails) -> str:
    if details.verb == "POST":
        return f"return CreatedAtAction(nameof({details.method_name}), new {{ id = 1 }}, request);"
    if details.verb in ("PUT", "PATCH", "DELETE"):
        return "return NoContent();"
    return "return Ok();"


def call_arguments(details: EndpointDetails) -> str:
    if details.verb in _BODY_METHODS:
        return f"new {details.dto_name or 'object'}()"
    if details.verb in _ID_METHODS:
        return "1"
    return ""


def build_endpoint_mapping(details: EndpointDetails, namespace: str) -> dict[str, str]:
    """Return the ``{Key: text}`` mapping shared by every endpoint template."""
    request_notes = ""
    if details.requires_validation:
        request_notes += "- Validation: Yes\n"
    if details.requires_caching:
        request_notes += f"- Caching: Enabled ({CACHE_SECONDS} seconds)\n"
    return {
        "Namespace": namespace,
        "ControllerName": details.controller_name,
        "MethodName": details.method_name,
        "HttpMethod": details.verb,
        "HttpAttribute": details.verb.capitalize(),
        "Route": details.route,
        "DtoName": details.dto_name or "",
        "DtoUsing": f"using {namespace}.Models.DTOs;\n" if details.dto_name else "",
        "ControllerAttributes": "[Authorize]\n" if details.requires_authorization else "",
        "ActionAttributes": (
            f"    [ResponseCache(Duration = {CACHE_SECONDS})]\n" if details.requires_caching else ""
        ),
        "ReturnType": return_type(details),
        "Parameters": method_parameters(details),
        "MethodBody": method_body(details),
        "TestArguments": call_arguments(details),
        "AuthNote": (
            "**Requires Authentication**" if details.requires_authorization else "No authentication required"
        ),
        "RequestNotes": request_notes,
        "ResponseType": details.response_type.strip() or "void",
        "ResponseNotes": f"- DTO: {details.dto_name}\n" if details.dto_name else "",
    }


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------


class EndpointGenerator:
    """Generates the artifacts of one API endpoint.

    The per-artifact methods mirror ``generate_endpoint`` but run a single
    step; a step whose condition is not met (no DTO name, validation not
    requested) writes nothing.
    """

    def __init__(self, config: Config | None = None) -> None:
        self.config = config or Config()
        self.renderer = TemplateRenderer(self.config.templates_dir)

    async def generate_endpoint(
        self, project_root: str | Path, details: EndpointDetails, namespace: str | None = None
    ) -> list[Path]:
        """Write every enabled endpoint artifact and return the written paths."""
        return await self._run(project_root, details, ENDPOINT_STEPS, namespace)

    async def generate_controller_action(
        self, project_root: str | Path, details: EndpointDetails, namespace: str | None = None
    ) -> list[Path]:
        return await self._run(project_root, details, [CONTROLLER_STEP], namespace)

    async def generate_dto(
        self, project_root: str | Path, details: EndpointDetails, namespace: str | None = None
    ) -> list[Path]:
        return await self._run(project_root, details, [DTO_STEP], namespace)

    async def generate_validator(
        self, project_root: str | Path, details: EndpointDetails, namespace: str | None = None
    ) -> list[Path]:
        return await self._run(project_root, details, [VALIDATOR_STEP], namespace)

    async def generate_endpoint_tests(
        self, project_root: str | Path, details: EndpointDetails, namespace: str | None = None
    ) -> list[Path]:
        return await self._run(project_root, details, [TESTS_STEP], namespace)

    async def update_api_documentation(
        self, project_root: str | Path, details: EndpointDetails, namespace: str | None = None
    ) -> list[Path]:
        """Append the endpoint's entry to ``docs/api.md``, creating the file if needed."""
        return await self._run(project_root, details, [API_DOC_STEP], namespace)

    async def _run(
        self,
        project_root: str | Path,
        details: EndpointDetails | None,
        steps: Iterable[EndpointStep],
        namespace: str | None,
    ) -> list[Path]:
        details = validate_endpoint(details)
        template_dir = self.renderer.pattern_dir(ENDPOINT_TEMPLATE_DIR)
        if not template_dir.is_dir():
            logger.error("Endpoint template directory not found: %s", template_dir)
            raise TemplatePathNotFoundError(template_dir)

        mapping = build_endpoint_mapping(details, derive_namespace(project_root, namespace))
        unit = GenerationUnit()
        written: list[Path] = []
        try:
            for step in steps:
                if not step.enabled_for(details):
                    logger.debug("Skipping %s for %s %s", step.template, details.verb, details.route)
                    continue
                written.append(await self._render(step, mapping, Path(project_root), unit))
        except (ScaffoldError, OSError):
            if self.config.transactional:
                await unit.rollback()
                logger.warning("Rolled back partial endpoint generation for %s %s", details.verb, details.route)
            raise

        logger.info("Generated %d file(s) for %s %s", len(written), details.verb, details.route)
        return written

    async def _render(
        self, step: EndpointStep, mapping: dict[str, str], project_root: Path, unit: GenerationUnit
    ) -> Path:
        output = project_root / substitute(step.output, mapping)
        template = self.renderer.template_path(ENDPOINT_TEMPLATE_DIR, step.template)
        if not template.is_file():
            logger.error("Template %s not found while generating %s", template, output)
            raise TemplateNotFoundError(template, output)

        content = await self.renderer.render(template, mapping)
        await unit.prepare(output)
        await unit.record(output)
        if step.append and output.is_file():
            content = await read_text(output) + content
        await write_text(output, content)
        logger.debug("Wrote %s", output)
        return output
