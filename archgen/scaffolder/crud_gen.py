"""Entity artifact generator.

Takes a ``CrudDetails`` descriptor and a project root, drives the pattern
profile registry and renders every generation step through the placeholder
substitution engine.  Output files are overwritten without confirmation.
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable, Sequence
from pathlib import Path

from archgen.config import Config
from archgen.exceptions import (
    DescriptorError,
    EntityNameRequiredError,
    InvalidEntityNameError,
    MissingDescriptorError,
    ScaffoldError,
    TemplateNotFoundError,
    TemplatePathNotFoundError,
)
from archgen.log import get_logger
from archgen.models import CrudDetails, EntityProperty, FolderMap
from archgen.scaffolder.placeholders import RenderContext, build_mapping
from archgen.scaffolder.profiles import (
    ArtifactFamily,
    GenerationStep,
    Pattern,
    PatternProfile,
    profile_for,
)
from archgen.scaffolder.templates import TemplateRenderer, substitute
from archgen.scaffolder.unit_of_work import GenerationUnit
from archgen.utils import is_identifier

logger = get_logger("scaffolder.crud")


def validate_details(details: CrudDetails | None) -> CrudDetails:
    """Check that *details* can drive generation and return a normalised copy.

    Raises:
        MissingDescriptorError: If no descriptor was supplied.
        EntityNameRequiredError: If the entity name is blank.
        InvalidEntityNameError: If the entity name is not an identifier.
    """
    if details is None:
        raise MissingDescriptorError()
    name = details.entity_name.strip()
    if not name:
        raise EntityNameRequiredError()
    if not is_identifier(name):
        raise InvalidEntityNameError(name)
    if name != details.entity_name:
        details = details.model_copy(update={"entity_name": name})
    return details


class CrudGenerator:
    """Generates the per-entity artifacts of one architecture pattern.

    The family methods (``generate_entity``, ``generate_commands``, ...)
    render every step of their family unconditionally and raise on failure.
    ``generate_all`` runs the whole profile honoring the option toggles, and
    ``generate_crud_operations`` is the boolean boundary used by the CLI.
    """

    def __init__(self, config: Config | None = None) -> None:
        self.config = config or Config()
        self.renderer = TemplateRenderer(self.config.templates_dir)
        self._locks: dict[Path, asyncio.Lock] = {}

    # -- Preparation -------------------------------------------------------

    def prepare(
        self, project_root: str | Path, details: CrudDetails | None
    ) -> tuple[RenderContext, PatternProfile]:
        """Validate *details* and resolve its pattern profile and template subtree.

        Raises:
            DescriptorError: If the descriptor is unusable.
            UnsupportedPatternError: If the pattern tag is unknown.
            TemplatePathNotFoundError: If the pattern's template subtree is missing.
        """
        details = validate_details(details)
        pattern = Pattern.parse(details.pattern)
        pattern_dir = self.renderer.pattern_dir(pattern.template_dir)
        if not pattern_dir.is_dir():
            logger.error("Template directory for %s not found: %s", pattern.label, pattern_dir)
            raise TemplatePathNotFoundError(pattern_dir)
        return RenderContext.create(details, pattern, project_root), profile_for(pattern)

    @staticmethod
    def resolve_output(
        step: GenerationStep,
        mapping: dict[str, str],
        project_root: str | Path,
        folder_map: FolderMap | None = None,
    ) -> Path:
        """Return where *step* writes, relocating into a mapped folder when one resolved.

        A relocated file keeps the part of its default path below the logical
        folder, or just its file name when the folder is not part of that path.
        """
        relative = Path(substitute(step.output, mapping))
        if folder_map and step.folder and folder_map.get(step.folder):
            parts = relative.parts
            # Keep the sub-path below the logical folder, e.g. Api/Controllers/X.cs.
            if step.folder in parts[:-1]:
                return Path(folder_map[step.folder]).joinpath(*parts[parts.index(step.folder) + 1 :])
            return Path(folder_map[step.folder]) / relative.name
        return Path(project_root) / relative

    # -- Step rendering ----------------------------------------------------

    async def render_step(
        self,
        step: GenerationStep,
        ctx: RenderContext,
        project_root: str | Path,
        *,
        unit: GenerationUnit | None = None,
        folder_map: FolderMap | None = None,
        value_object: EntityProperty | None = None,
    ) -> Path:
        """Render one generation step and write its output file.

        Raises:
            TemplateNotFoundError: If the step's template file is missing.
        """
        unit = unit or GenerationUnit()
        mapping = build_mapping(step.family, ctx, value_object=value_object)
        output = self.resolve_output(step, mapping, project_root, folder_map)
        template = self.renderer.template_path(ctx.pattern.template_dir, step.template)

        if not template.is_file():
            available = self.renderer.list_templates(ctx.pattern.template_dir)
            logger.error(
                "Template %s not found while generating %s (available: %s)",
                template,
                output,
                ", ".join(available) or "none",
            )
            raise TemplateNotFoundError(template, output)

        async with self._lock_for(output):
            await unit.prepare(output)
            await unit.record(output)
            await self.renderer.render_to_file(template, output, mapping)

        logger.debug("Wrote %s", output)
        return output

    def _lock_for(self, path: Path) -> asyncio.Lock:
        # Steps of different entities may target one shared file (e.g. the DbContext).
        return self._locks.setdefault(path, asyncio.Lock())

    async def _run(
        self,
        project_root: str | Path,
        details: CrudDetails | None,
        families: Iterable[ArtifactFamily] | None = None,
        *,
        honor_toggles: bool = False,
        folder_map: FolderMap | None = None,
        skip: Iterable[ArtifactFamily] = (),
        unit: GenerationUnit | None = None,
    ) -> list[Path]:
        ctx, profile = self.prepare(project_root, details)
        wanted = frozenset(families) if families is not None else profile.families
        skipped = frozenset(skip)
        steps = [
            step
            for step in profile.steps
            if step.family in wanted
            and step.family not in skipped
            and (not honor_toggles or step.enabled_for(ctx.options))
        ]
        if families is not None and not wanted & profile.families:
            logger.warning(
                "%s defines no %s artifacts",
                ctx.pattern.label,
                ", ".join(sorted(f.value for f in wanted)),
            )

        # A caller-supplied unit is shared with other runs and rolled back by the caller.
        owns_unit = unit is None
        if unit is None:
            unit = GenerationUnit()
        written: list[Path] = []
        try:
            for step in steps:
                if step.family is ArtifactFamily.VALUE_OBJECTS:
                    for prop in ctx.details.value_object_properties:
                        if not is_identifier(prop.name):
                            raise DescriptorError(f"Value object name is not a valid identifier: {prop.name!r}")
                        written.append(
                            await self.render_step(
                                step, ctx, project_root, unit=unit, folder_map=folder_map, value_object=prop
                            )
                        )
                else:
                    written.append(await self.render_step(step, ctx, project_root, unit=unit, folder_map=folder_map))
        except (ScaffoldError, OSError):
            if self.config.transactional and owns_unit:
                await unit.rollback()
                logger.warning("Rolled back partial %s generation for %s", ctx.pattern.label, ctx.entity)
            raise

        written = list(dict.fromkeys(written))
        logger.info("Generated %d file(s) for %s (%s)", len(written), ctx.entity, ctx.pattern.label)
        return written

    # -- Artifact families -------------------------------------------------

    async def generate_entity(self, project_root: str | Path, details: CrudDetails) -> list[Path]:
        """Render the entity class (aggregate root for ddd, model for service-repository)."""
        return await self._run(project_root, details, [ArtifactFamily.ENTITY])

    async def generate_dto(self, project_root: str | Path, details: CrudDetails) -> list[Path]:
        return await self._run(project_root, details, [ArtifactFamily.DTO])

    async def generate_commands(self, project_root: str | Path, details: CrudDetails) -> list[Path]:
        """Render the create/update/delete command classes."""
        return await self._run(project_root, details, [ArtifactFamily.COMMANDS])

    async def generate_queries(self, project_root: str | Path, details: CrudDetails) -> list[Path]:
        """Render the get and get-all queries with their handlers and cache blocks."""
        return await self._run(project_root, details, [ArtifactFamily.QUERIES])

    async def generate_handlers(self, project_root: str | Path, details: CrudDetails) -> list[Path]:
        """Render the command handlers; delete honors the soft-delete toggle."""
        return await self._run(project_root, details, [ArtifactFamily.HANDLERS])

    async def generate_validator(self, project_root: str | Path, details: CrudDetails) -> list[Path]:
        return await self._run(project_root, details, [ArtifactFamily.VALIDATOR])

    async def generate_repository(self, project_root: str | Path, details: CrudDetails) -> list[Path]:
        """Render the repository interface and implementation."""
        return await self._run(project_root, details, [ArtifactFamily.REPOSITORY])

    async def generate_service(self, project_root: str | Path, details: CrudDetails) -> list[Path]:
        """Render the service interface and implementation."""
        return await self._run(project_root, details, [ArtifactFamily.SERVICE])

    async def generate_controller(self, project_root: str | Path, details: CrudDetails) -> list[Path]:
        return await self._run(project_root, details, [ArtifactFamily.CONTROLLER])

    async def generate_dbcontext(self, project_root: str | Path, details: CrudDetails) -> list[Path]:
        return await self._run(project_root, details, [ArtifactFamily.DBCONTEXT])

    async def generate_endpoints(self, project_root: str | Path, details: CrudDetails) -> list[Path]:
        return await self._run(project_root, details, [ArtifactFamily.ENDPOINTS])

    async def generate_domain_events(self, project_root: str | Path, details: CrudDetails) -> list[Path]:
        """Render the aggregate-root plumbing and the entity's domain events."""
        return await self._run(project_root, details, [ArtifactFamily.DOMAIN_EVENTS])

    async def generate_value_objects(self, project_root: str | Path, details: CrudDetails) -> list[Path]:
        """Render one value object per property flagged as a value object."""
        return await self._run(project_root, details, [ArtifactFamily.VALUE_OBJECTS])

    async def generate_swagger_docs(self, project_root: str | Path, details: CrudDetails) -> list[Path]:
        return await self._run(project_root, details, [ArtifactFamily.SWAGGER])

    async def generate_tests(self, project_root: str | Path, details: CrudDetails) -> list[Path]:
        """Render the skeleton test files of the pattern."""
        return await self._run(project_root, details, [ArtifactFamily.TESTS])

    # -- Whole profiles ----------------------------------------------------

    async def generate_all(
        self,
        project_root: str | Path,
        details: CrudDetails,
        *,
        folder_map: FolderMap | None = None,
        skip: Iterable[ArtifactFamily] = (),
        unit: GenerationUnit | None = None,
    ) -> list[Path]:
        """Run every step of the descriptor's pattern, honoring the option toggles.

        When *unit* is given, changes are recorded there and a failure leaves
        the rollback to the caller that owns the unit.
        """
        return await self._run(
            project_root, details, honor_toggles=True, folder_map=folder_map, skip=skip, unit=unit
        )

    async def generate_many(
        self,
        project_root: str | Path,
        entities: Sequence[CrudDetails],
        *,
        folder_map: FolderMap | None = None,
    ) -> list[list[Path]]:
        """Generate several entities concurrently; steps of one entity stay sequential.

        Every entity runs to completion before the first failure is re-raised.
        All entities record into one unit of work, so with ``transactional``
        enabled a single failure rolls back the whole batch, shared files
        (DbContext, aggregate root base class) included.
        """
        unit = GenerationUnit()
        results = await asyncio.gather(
            *(
                self.generate_all(project_root, details, folder_map=folder_map, unit=unit)
                for details in entities
            ),
            return_exceptions=True,
        )
        failures = [result for result in results if isinstance(result, BaseException)]
        if failures:
            if self.config.transactional:
                await unit.rollback()
                logger.warning("Rolled back %d entity generation(s) after a failure", len(entities))
            raise failures[0]
        return list(results)

    async def generate_crud_operations(
        self,
        entity_name: str,
        pattern: str | Pattern,
        project_path: str | Path,
        entity_location: str = "",
        *,
        details: CrudDetails | None = None,
        folder_map: FolderMap | None = None,
    ) -> bool:
        """Generate the full CRUD artifact set and report success as a boolean.

        When *entity_location* names an existing file the entity steps are
        skipped so the user's entity class is kept.  Failures are logged with
        the offending path and reported as ``False``.
        """
        tag = pattern.value if isinstance(pattern, Pattern) else pattern
        if details is None:
            details = CrudDetails(entity_name=entity_name, pattern=tag)
        else:
            details = details.model_copy(
                update={
                    "entity_name": entity_name or details.entity_name,
                    "pattern": tag or details.pattern,
                }
            )

        skip: list[ArtifactFamily] = []
        if entity_location and Path(entity_location).is_file():
            logger.info("Using existing entity at %s", entity_location)
            skip.append(ArtifactFamily.ENTITY)

        try:
            await self.generate_all(project_path, details, folder_map=folder_map, skip=skip)
        except (ScaffoldError, OSError) as exc:
            logger.error("CRUD generation for %r failed: %s", entity_name, exc)
            return False
        return True
