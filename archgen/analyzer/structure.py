"""Project structure analyzer.

Scans an existing source tree, sorts every source file into a role bucket by
file-name convention, infers which architecture patterns are present, and
resolves the directories that play each pattern's logical folder roles.

The analyzer is read-only and best-effort: ambiguous input yields fewer
detected patterns or unresolved folders, never an exception.
"""

from __future__ import annotations

import asyncio
import os
import re
from collections.abc import Iterator
from enum import Enum
from pathlib import Path

from archgen.exceptions import UnsupportedPatternError
from archgen.log import get_logger
from archgen.models import FolderMap, ProjectStructure
from archgen.scaffolder.profiles import Pattern

logger = get_logger("analyzer.structure")


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------


class FileRole(str, Enum):
    CONTROLLER = "controller"
    SERVICE = "service"
    REPOSITORY = "repository"
    CQRS = "cqrs"
    ENTITY = "entity"


# Evaluated in order; the first rule whose marker occurs in the path wins.
# Reordering these rules changes classification results.
CLASSIFICATION_RULES: tuple[tuple[FileRole, tuple[str, ...]], ...] = (
    (FileRole.CONTROLLER, ("Controller",)),
    (FileRole.SERVICE, ("Service",)),
    (FileRole.REPOSITORY, ("Repository",)),
    (FileRole.CQRS, ("Command", "Query")),
    (FileRole.ENTITY, ("Entity", "Model")),
)

ENTITY_CANDIDATE_MARKERS = ("Models", "Entities", "Domain")

REQUIRED_FOLDERS: dict[Pattern, tuple[str, ...]] = {
    Pattern.CQRS: ("Commands", "Queries", "Handlers", "Models", "Controllers"),
    Pattern.SERVICE_REPOSITORY: ("Services", "Repositories", "Models", "Controllers", "Interfaces"),
    Pattern.CLEAN: (
        "Domain",
        "Application",
        "Infrastructure",
        "Presentation",
        "Entities",
        "Interfaces",
        "Services",
        "Controllers",
    ),
    Pattern.MINIMAL_API: ("Endpoints", "Models", "Services"),
    Pattern.DDD: (
        "Domain",
        "Application",
        "Infrastructure",
        "Api",
        "Aggregates",
        "ValueObjects",
        "Repositories",
        "Services",
    ),
}


def classify_path(path: str) -> FileRole | None:
    """Return the bucket for *path* (case-sensitive substring rules), or ``None``."""
    for role, markers in CLASSIFICATION_RULES:
        if any(marker in path for marker in markers):
            return role
    return None


def infer_patterns(
    *,
    controller_files: tuple[str, ...] | list[str],
    service_files: tuple[str, ...] | list[str],
    repository_files: tuple[str, ...] | list[str],
    cqrs_files: tuple[str, ...] | list[str],
    entity_files: tuple[str, ...] | list[str],
) -> list[str]:
    """Labels of every pattern whose bucket signature is present.

    A pure function of bucket contents; several patterns may be reported.
    """
    patterns: list[str] = []
    if cqrs_files:
        patterns.append(Pattern.CQRS.label)
    if service_files and repository_files:
        patterns.append(Pattern.SERVICE_REPOSITORY.label)
    if any("Domain" in path for path in entity_files):
        patterns.append(Pattern.CLEAN.label)
    if any("Aggregate" in path for path in entity_files):
        patterns.append(Pattern.DDD.label)
    if not controller_files and entity_files:
        patterns.append(Pattern.MINIMAL_API.label)
    return patterns


def declaration_pattern(name: str) -> re.Pattern[str]:
    """Regex matching a ``class <name>`` declaration, whole word only."""
    return re.compile(rf"\bclass\s+{re.escape(name)}\b")


# ---------------------------------------------------------------------------
# ProjectAnalyzer
# ---------------------------------------------------------------------------


class ProjectAnalyzer:
    """Read-only, re-entrant analyzer for generated source trees."""

    def __init__(self, source_extensions: list[str] | None = None) -> None:
        self.source_extensions = tuple(ext.lower() for ext in (source_extensions or [".cs"]))

    # -- Enumeration -------------------------------------------------------

    def iter_source_files(self, root: Path) -> Iterator[Path]:
        """Yield source files under *root* in sorted top-down walk order."""
        for dirpath, dirnames, filenames in os.walk(root):
            dirnames.sort()
            for filename in sorted(filenames):
                if filename.lower().endswith(self.source_extensions):
                    yield Path(dirpath) / filename

    @staticmethod
    def iter_directories(root: Path) -> Iterator[Path]:
        """Yield every directory below *root* in sorted top-down walk order."""
        for dirpath, dirnames, _ in os.walk(root):
            dirnames.sort()
            for dirname in dirnames:
                yield Path(dirpath) / dirname

    # -- Public API --------------------------------------------------------

    async def analyze(self, project_path: str | Path) -> ProjectStructure:
        """Classify every source file under *project_path* and infer its patterns."""
        root = Path(project_path)
        if not root.is_dir():
            logger.warning("Project path %s does not exist; nothing to analyze", root)
            return ProjectStructure(root=root)
        return await asyncio.to_thread(self._analyze, root)

    def _analyze(self, root: Path) -> ProjectStructure:
        buckets: dict[FileRole, list[str]] = {role: [] for role in FileRole}
        for path in self.iter_source_files(root):
            role = classify_path(str(path))
            if role is None:
                continue
            buckets[role].append(path.relative_to(root).as_posix())

        fields = {
            "controller_files": tuple(buckets[FileRole.CONTROLLER]),
            "service_files": tuple(buckets[FileRole.SERVICE]),
            "repository_files": tuple(buckets[FileRole.REPOSITORY]),
            "cqrs_files": tuple(buckets[FileRole.CQRS]),
            "entity_files": tuple(buckets[FileRole.ENTITY]),
        }
        patterns = infer_patterns(**fields)
        logger.debug("Detected patterns in %s: %s", root, patterns or "none")
        return ProjectStructure(root=root, patterns=tuple(patterns), **fields)

    async def validate_entity(self, project_path: str | Path, entity_name: str) -> bool:
        """Return ``True`` if a candidate file declares ``class <entity_name>``."""
        return bool(await self.find_entity_location(project_path, entity_name))

    async def find_entity_location(self, project_path: str | Path, entity_name: str) -> str:
        """Return the first candidate file declaring *entity_name*, or ``""``."""
        root = Path(project_path)
        if not entity_name or not root.is_dir():
            return ""
        return await asyncio.to_thread(self._find_entity, root, entity_name)

    def _find_entity(self, root: Path, entity_name: str) -> str:
        marker = declaration_pattern(entity_name)
        for path in self.iter_source_files(root):
            if not any(m in str(path) for m in ENTITY_CANDIDATE_MARKERS):
                continue
            try:
                content = path.read_text(encoding="utf-8", errors="replace")
            except OSError as exc:
                logger.warning("Skipping unreadable file %s: %s", path, exc)
                continue
            if marker.search(content):
                return str(path)
        return ""

    async def identify_project_folders(self, project_path: str | Path, pattern: str | Pattern) -> FolderMap:
        """Resolve each of *pattern*'s logical folders to the first matching directory.

        Matching is case-insensitive containment on the directory name.  An
        unresolved folder maps to ``""``; an unknown pattern yields ``{}``.
        """
        try:
            resolved = Pattern.parse(pattern)
        except UnsupportedPatternError:
            logger.warning("No folder layout known for pattern %r", str(pattern))
            return {}

        root = Path(project_path).resolve()
        if not root.is_dir():
            logger.warning("Project path %s does not exist", root)
            return {name: "" for name in REQUIRED_FOLDERS[resolved]}
        return await asyncio.to_thread(self._identify, root, resolved)

    def _identify(self, root: Path, pattern: Pattern) -> FolderMap:
        directories = list(self.iter_directories(root))
        folders: FolderMap = {}
        for name in REQUIRED_FOLDERS[pattern]:
            needle = name.lower()
            match = next((d for d in directories if needle in d.name.lower()), None)
            folders[name] = str(match) if match is not None else ""
        return folders
