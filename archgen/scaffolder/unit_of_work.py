"""Unit of work for a multi-step generation run.

Records every directory and file a run creates plus the previous content of
every file it overwrites, so a failed run can be rolled back to the tree it
started from.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

from archgen.log import get_logger
from archgen.utils import ensure_dir

logger = get_logger("scaffolder.unit_of_work")


class GenerationUnit:
    """Tracks file-system changes made while generating one entity."""

    def __init__(self) -> None:
        self.created_files: list[Path] = []
        self.created_dirs: list[Path] = []
        self.backups: dict[Path, str] = {}

    @property
    def written(self) -> list[Path]:
        """Every file recorded so far, created files first."""
        return self.created_files + [p for p in self.backups if p not in self.created_files]

    async def prepare(self, path: str | Path) -> None:
        """Create *path*'s parent directories, remembering the ones that were missing."""
        await asyncio.to_thread(self._prepare, Path(path))

    def _prepare(self, path: Path) -> None:
        parent = path.parent
        while not parent.exists():
            self.created_dirs.append(parent)
            parent = parent.parent
        ensure_dir(path.parent)

    async def record(self, path: str | Path) -> None:
        """Remember *path* (and its current content, if any) before it is written."""
        await asyncio.to_thread(self._record, Path(path))

    def _record(self, path: Path) -> None:
        if path in self.backups or path in self.created_files:
            return
        if path.is_file():
            self.backups[path] = path.read_text(encoding="utf-8", errors="replace")
        else:
            self.created_files.append(path)

    async def rollback(self) -> None:
        """Restore overwritten files and remove everything this run created."""
        await asyncio.to_thread(self._rollback)

    def _rollback(self) -> None:
        for path, content in self.backups.items():
            path.write_text(content, encoding="utf-8")
            logger.debug("Restored %s", path)
        for path in reversed(self.created_files):
            if path.is_file():
                path.unlink()
                logger.debug("Removed %s", path)
        for directory in sorted(self.created_dirs, key=lambda p: len(p.parts), reverse=True):
            if directory.is_dir() and not any(directory.iterdir()):
                directory.rmdir()
                logger.debug("Removed directory %s", directory)
        self.created_files.clear()
        self.created_dirs.clear()
        self.backups.clear()
