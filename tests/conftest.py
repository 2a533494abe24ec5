"""Shared pytest fixtures for the archgen test suite.

Provides reusable fixtures for:
- Temporary project directories
- Sample entity descriptors (camelCase and snake_case)
- Source-tree builders for analyzer tests
- Isolated copies of the packaged template tree
"""

from __future__ import annotations

import logging
import shutil
from collections.abc import Callable
from pathlib import Path

import pytest

from archgen.config import DEFAULT_TEMPLATES_DIR, Config
from archgen.models import CrudDetails, CrudOptions, EntityProperty
from archgen.scaffolder import CrudGenerator


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def reset_archgen_logger():
    """Undo ``configure_logging`` so later tests can capture via ``caplog``."""
    yield
    logger = logging.getLogger("archgen")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


# ---------------------------------------------------------------------------
# Paths & Directories
# ---------------------------------------------------------------------------

@pytest.fixture
def tmp_project_dir(tmp_path: Path) -> Path:
    """Temporary project root for generated trees (auto-cleanup)."""
    project_dir = tmp_path / "shop"
    project_dir.mkdir()
    yield project_dir


@pytest.fixture
def isolated_templates(tmp_path: Path) -> Path:
    """A private copy of the packaged template tree that tests may mutate."""
    target = tmp_path / "templates"
    shutil.copytree(DEFAULT_TEMPLATES_DIR, target)
    return target


@pytest.fixture
def isolated_config(isolated_templates: Path) -> Config:
    """Config pointing at the isolated template copy."""
    return Config(templates_dir=isolated_templates)


# ---------------------------------------------------------------------------
# Tree builders
# ---------------------------------------------------------------------------

@pytest.fixture
def make_tree(tmp_path: Path) -> Callable[..., Path]:
    """Factory that writes ``{relative_path: content}`` under a fresh root.

    Usage:
        root = make_tree({"Api/FooController.cs": "public class Foo {}"})
    """
    counter = {"n": 0}

    def _make(files: dict[str, str], name: str | None = None) -> Path:
        counter["n"] += 1
        root = tmp_path / (name or f"tree{counter['n']}")
        root.mkdir(parents=True, exist_ok=True)
        for relative, content in files.items():
            path = root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        return root

    return _make


# ---------------------------------------------------------------------------
# Descriptors
# ---------------------------------------------------------------------------

@pytest.fixture
def order_details() -> CrudDetails:
    """The cached CQRS ``Order`` entity with one required decimal property."""
    return CrudDetails.model_validate(
        {
            "entityName": "Order",
            "pattern": "cqrs",
            "properties": [{"name": "Total", "type": "decimal", "isRequired": True}],
            "options": {"implementCaching": True},
        }
    )


@pytest.fixture
def product_details() -> CrudDetails:
    """A ``Product`` entity exercising most property kinds."""
    return CrudDetails(
        entity_name="Product",
        pattern="service-repository",
        properties=[
            EntityProperty(name="ProductId", type="guid", is_key=True),
            EntityProperty(
                name="Name",
                type="string",
                is_required=True,
                description="Display name",
                attributes=["[Required]"],
            ),
            EntityProperty(name="Sku", type="string"),
            EntityProperty(name="Price", type="decimal", is_required=True),
            EntityProperty(name="Stock", type="int"),
            EntityProperty(name="IsActive", type="bool", default_value="true"),
            EntityProperty(name="ReleasedAt", type="DateTime", is_required=True),
        ],
        options=CrudOptions(),
    )


@pytest.fixture
def customer_ddd_details() -> CrudDetails:
    """A DDD ``Customer`` aggregate with one value-object property."""
    return CrudDetails(
        entity_name="Customer",
        pattern="ddd",
        properties=[
            EntityProperty(name="Email", type="string", is_required=True),
            EntityProperty(
                name="ShippingAddress",
                type="Address",
                is_value_object=True,
                value_object_properties={"Street": "string", "City": "string", "Zip": "string"},
            ),
        ],
    )


@pytest.fixture
def empty_details() -> CrudDetails:
    """A property-less entity."""
    return CrudDetails(entity_name="Tag", pattern="minimal-api")


@pytest.fixture
def generator() -> CrudGenerator:
    """A generator using the packaged templates."""
    return CrudGenerator(Config())
