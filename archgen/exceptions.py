"""Exceptions raised by the archgen scaffolder."""

from __future__ import annotations

from pathlib import Path


class ScaffoldError(Exception):
    """Base class for every error raised while generating artifacts."""


class UnsupportedPatternError(ScaffoldError):
    """Raised when a pattern tag does not match a registered profile."""

    def __init__(self, pattern: str) -> None:
        self.pattern = pattern
        super().__init__(f"Unsupported pattern: {pattern!r}")


class TemplateNotFoundError(ScaffoldError):
    """Raised when a generation step's template file is missing on disk."""

    def __init__(self, template_path: Path, output_path: Path | None = None) -> None:
        self.template_path = Path(template_path)
        self.output_path = Path(output_path) if output_path is not None else None
        message = f"Template file not found: {self.template_path}"
        if self.output_path is not None:
            message += f" (while generating {self.output_path})"
        super().__init__(message)


class TemplatePathNotFoundError(ScaffoldError):
    """Raised when a pattern's template subtree is missing on disk."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        super().__init__(f"Template path not found: {self.path}")


class DescriptorError(ScaffoldError):
    """Raised when an entity descriptor cannot be used for generation."""


class MissingDescriptorError(DescriptorError):
    def __init__(self) -> None:
        super().__init__("An entity descriptor is required")


class EntityNameRequiredError(DescriptorError):
    def __init__(self) -> None:
        super().__init__("Entity name is required")


class InvalidEntityNameError(DescriptorError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Entity name is not a valid identifier: {name!r}")
