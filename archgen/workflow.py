"""High-level generation workflows used by the CLI.

``scaffold_entity`` writes a fresh entity into a new tree using the default
profile paths.  ``customize_project`` first analyzes an existing tree to
recover its pattern and folder layout, then generates into that layout.
Both return a ``GenerationResult`` instead of raising.
"""

from __future__ import annotations

from pathlib import Path

from archgen.analyzer import ProjectAnalyzer
from archgen.config import Config
from archgen.exceptions import ScaffoldError
from archgen.log import get_logger
from archgen.models import CrudDetails, GenerationResult
from archgen.scaffolder import ArtifactFamily, CrudGenerator, Pattern, validate_details

logger = get_logger("workflow")


async def scaffold_entity(
    details: CrudDetails | None,
    output_root: str | Path,
    config: Config | None = None,
) -> GenerationResult:
    """Generate every artifact of the descriptor's pattern under *output_root*."""
    config = config or Config()
    generator = CrudGenerator(config)
    pattern = details.pattern if details is not None else None
    try:
        ctx, _ = generator.prepare(output_root, details)
    except ScaffoldError as exc:
        logger.error("Scaffolding failed: %s", exc)
        return GenerationResult(success=False, pattern=pattern, error=str(exc))

    pattern = ctx.pattern.value
    try:
        written = await generator.generate_all(output_root, ctx.details)
    except (ScaffoldError, OSError) as exc:
        logger.error("Scaffolding failed: %s", exc)
        return GenerationResult(
            success=False, pattern=pattern, error=str(exc), rolled_back=config.transactional
        )
    return GenerationResult(success=True, pattern=pattern, written=written)


async def customize_project(
    project_path: str | Path,
    details: CrudDetails | None,
    config: Config | None = None,
) -> GenerationResult:
    """Add an entity to an existing project, following the layout found there.

    The descriptor's pattern wins when set.  Otherwise exactly one pattern must
    be detected; with none or several the result fails and lists the
    candidates instead of guessing.
    """
    config = config or Config()
    root = Path(project_path)
    analyzer = ProjectAnalyzer(config.source_extensions)
    generator = CrudGenerator(config)

    started = False
    try:
        details = validate_details(details)
        structure = await analyzer.analyze(root)
        detected = list(structure.patterns)

        if details.pattern.strip():
            pattern = Pattern.parse(details.pattern)
        elif len(detected) == 1:
            pattern = Pattern.parse(detected[0])
        else:
            reason = "no pattern detected" if not detected else "several patterns detected"
            logger.warning("Cannot customize %s: %s %s", root, reason, detected)
            return GenerationResult(
                success=False,
                error=f"Cannot choose a pattern for {root}: {reason}",
                details={"detected": detected},
            )

        folder_map = await analyzer.identify_project_folders(root, pattern)
        location = await analyzer.find_entity_location(root, details.entity_name)
        skip = [ArtifactFamily.ENTITY] if location else []
        if location:
            logger.info("Keeping existing %s at %s", details.entity_name, location)

        details = details.model_copy(update={"pattern": pattern.value})
        started = True
        written = await generator.generate_all(root, details, folder_map=folder_map, skip=skip)
    except (ScaffoldError, OSError) as exc:
        logger.error("Customizing %s failed: %s", root, exc)
        return GenerationResult(
            success=False,
            pattern=details.pattern if details is not None else None,
            error=str(exc),
            rolled_back=started and config.transactional,
        )

    return GenerationResult(
        success=True,
        pattern=pattern.value,
        written=written,
        details={"detected": detected, "folders": folder_map, "entity_location": location},
    )
