"""archgen configuration.

Centralised, typed configuration for the scaffolder and the analyzer.  Uses
Pydantic v2 so settings are validated at construction time and can be
serialised to/from JSON or read from environment variables.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator

from archgen.utils import ensure_dir

DEFAULT_TEMPLATES_DIR = Path(__file__).parent / "scaffolder" / "templates"

_TRUTHY = {"1", "true", "yes", "on"}


class Config(BaseModel):
    """Global archgen configuration.

    Instances are typically created once by the CLI entry point (or by
    :meth:`from_env`) and then passed to the generator and the analyzer.
    """

    templates_dir: Path = Field(
        default=DEFAULT_TEMPLATES_DIR,
        description="Root of the template tree, organised by pattern directory",
    )
    source_extensions: list[str] = Field(
        default_factory=lambda: [".cs"],
        description="File suffixes the structure analyzer enumerates",
    )
    transactional: bool = Field(
        default=False,
        description="Roll back files written by a failed generation run",
    )
    verbose: bool = Field(default=False, description="Enable DEBUG logging")
    log_file: Path | None = Field(default=None, description="Optional log file sink")

    @field_validator("source_extensions")
    @classmethod
    def _normalise_extensions(cls, value: list[str]) -> list[str]:
        normalised = []
        for ext in value:
            ext = ext.strip().lower()
            if not ext:
                continue
            normalised.append(ext if ext.startswith(".") else f".{ext}")
        return normalised

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def save(self, path: Path) -> Path:
        """Persist the configuration to a JSON file and return its path."""
        target = Path(path)
        ensure_dir(target.parent)
        target.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        return target

    @classmethod
    def load(cls, path: Path) -> "Config":
        """Load a previously-saved configuration from JSON."""
        raw = Path(path).read_text(encoding="utf-8")
        return cls.model_validate_json(raw)

    @classmethod
    def from_env(cls) -> "Config":
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            ARCHGEN_TEMPLATES_DIR, ARCHGEN_SOURCE_EXTENSIONS,
            ARCHGEN_TRANSACTIONAL, ARCHGEN_VERBOSE, ARCHGEN_LOG_FILE.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("ARCHGEN_TEMPLATES_DIR"):
            kwargs["templates_dir"] = Path(os.environ["ARCHGEN_TEMPLATES_DIR"])
        if os.environ.get("ARCHGEN_SOURCE_EXTENSIONS"):
            kwargs["source_extensions"] = [
                ext for ext in os.environ["ARCHGEN_SOURCE_EXTENSIONS"].split(",") if ext.strip()
            ]
        if os.environ.get("ARCHGEN_TRANSACTIONAL"):
            kwargs["transactional"] = os.environ["ARCHGEN_TRANSACTIONAL"].strip().lower() in _TRUTHY
        if os.environ.get("ARCHGEN_VERBOSE"):
            kwargs["verbose"] = os.environ["ARCHGEN_VERBOSE"].strip().lower() in _TRUTHY
        if os.environ.get("ARCHGEN_LOG_FILE"):
            kwargs["log_file"] = Path(os.environ["ARCHGEN_LOG_FILE"])
        return cls(**kwargs)
