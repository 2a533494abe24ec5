"""Unit tests for Config (archgen.config).

Tests cover:
- Config defaults
- Source-extension normalisation
- save / load round trip
- from_env
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from unittest.mock import patch

import pytest

from archgen.config import DEFAULT_TEMPLATES_DIR, Config


# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------


class TestConfigDefaults:
    @pytest.mark.unit
    def test_defaults(self):
        config = Config()
        assert config.templates_dir == DEFAULT_TEMPLATES_DIR
        assert config.source_extensions == [".cs"]
        assert config.transactional is False
        assert config.verbose is False
        assert config.log_file is None

    @pytest.mark.unit
    def test_packaged_templates_exist(self):
        assert DEFAULT_TEMPLATES_DIR.is_dir()
        for name in ("clean_architecture", "domain_driven_design", "cqrs", "service_repository", "minimal_api"):
            assert (DEFAULT_TEMPLATES_DIR / name).is_dir()

    @pytest.mark.unit
    def test_missing_templates_dir_is_accepted(self, tmp_path: Path):
        config = Config(templates_dir=tmp_path / "nowhere")
        assert config.templates_dir == tmp_path / "nowhere"

    @pytest.mark.unit
    def test_extensions_are_normalised(self):
        config = Config(source_extensions=["CS", " .py ", "", ".Ts"])
        assert config.source_extensions == [".cs", ".py", ".ts"]


# ---------------------------------------------------------------------------
# Persistence
# ---------------------------------------------------------------------------


class TestConfigPersistence:
    @pytest.mark.unit
    def test_save_creates_json(self, tmp_path: Path):
        target = Config(transactional=True).save(tmp_path / "nested" / "archgen.json")
        assert target.is_file()
        data = json.loads(target.read_text(encoding="utf-8"))
        assert data["transactional"] is True

    @pytest.mark.unit
    def test_round_trip(self, tmp_path: Path):
        saved = Config(
            templates_dir=tmp_path / "tpl",
            source_extensions=[".cs", ".vb"],
            verbose=True,
            log_file=tmp_path / "archgen.log",
        )
        loaded = Config.load(saved.save(tmp_path / "archgen.json"))
        assert loaded == saved


# ---------------------------------------------------------------------------
# Environment
# ---------------------------------------------------------------------------


class TestConfigFromEnv:
    @pytest.mark.unit
    def test_empty_environment_gives_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            assert Config.from_env() == Config()

    @pytest.mark.unit
    def test_reads_every_variable(self, tmp_path: Path):
        env = {
            "ARCHGEN_TEMPLATES_DIR": str(tmp_path / "tpl"),
            "ARCHGEN_SOURCE_EXTENSIONS": ".cs, vb",
            "ARCHGEN_TRANSACTIONAL": "yes",
            "ARCHGEN_VERBOSE": "1",
            "ARCHGEN_LOG_FILE": str(tmp_path / "run.log"),
        }
        with patch.dict(os.environ, env, clear=True):
            config = Config.from_env()
        assert config.templates_dir == tmp_path / "tpl"
        assert config.source_extensions == [".cs", ".vb"]
        assert config.transactional is True
        assert config.verbose is True
        assert config.log_file == tmp_path / "run.log"

    @pytest.mark.unit
    def test_falsy_flags(self):
        with patch.dict(os.environ, {"ARCHGEN_TRANSACTIONAL": "off", "ARCHGEN_VERBOSE": "no"}, clear=True):
            config = Config.from_env()
        assert config.transactional is False
        assert config.verbose is False
