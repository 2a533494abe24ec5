"""Tests for the new-project and customize-existing-project workflows.

Covers:
- scaffold_entity success / failure reporting
- customize_project pattern resolution (explicit, single detected, none, several)
- Folder-map relocation into an existing layout
- Keeping an existing entity class
- rolled_back reporting with the unit of work enabled
"""

from __future__ import annotations

from pathlib import Path

import pytest

from archgen.config import Config
from archgen.models import CrudDetails, EntityProperty
from archgen.workflow import customize_project, scaffold_entity


# ---------------------------------------------------------------------------
# Markers
# ---------------------------------------------------------------------------

pytestmark = pytest.mark.unit


@pytest.fixture
def existing_sr_project(make_tree):
    """A service-repository project whose layers live under ``Source/``."""
    return make_tree(
        {
            "Source/Controllers/ProductController.cs": "public class ProductController { }\n",
            "Source/Services/ProductService.cs": "public class ProductService { }\n",
            "Source/Repositories/ProductRepository.cs": "public class ProductRepository { }\n",
            "Source/Models/Product.cs": "public class Product { }\n",
            "Source/Contracts/IProductService.cs": "public interface IProductService { }\n",
        },
        name="store",
    )


# ---------------------------------------------------------------------------
# scaffold_entity
# ---------------------------------------------------------------------------


class TestScaffoldEntity:
    async def test_success(self, tmp_project_dir, order_details):
        result = await scaffold_entity(order_details, tmp_project_dir)
        assert result.success is True
        assert result.pattern == "cqrs"
        assert result.error is None
        assert tmp_project_dir / "Application/Queries/GetOrderQuery.cs" in result.written
        assert all(p.is_file() for p in result.written)

    async def test_missing_descriptor(self, tmp_project_dir):
        result = await scaffold_entity(None, tmp_project_dir)
        assert result.success is False
        assert "descriptor" in result.error
        assert result.rolled_back is False

    async def test_unsupported_pattern(self, tmp_project_dir):
        result = await scaffold_entity(CrudDetails(entity_name="Order", pattern="mvc"), tmp_project_dir)
        assert result.success is False
        assert result.pattern == "mvc"
        assert "mvc" in result.error
        assert list(tmp_project_dir.iterdir()) == []

    async def test_partial_tree_is_kept_by_default(
        self, isolated_templates, isolated_config, tmp_project_dir, order_details
    ):
        (isolated_templates / "cqrs" / "UpdateHandler.template").unlink()
        result = await scaffold_entity(order_details, tmp_project_dir, isolated_config)
        assert result.success is False
        assert result.rolled_back is False
        assert "UpdateHandler.template" in result.error
        assert (tmp_project_dir / "Application/Handlers/CreateOrderCommandHandler.cs").is_file()

    async def test_transactional_failure_rolls_back(self, isolated_templates, tmp_project_dir, order_details):
        (isolated_templates / "cqrs" / "UpdateHandler.template").unlink()
        config = Config(templates_dir=isolated_templates, transactional=True)

        result = await scaffold_entity(order_details, tmp_project_dir, config)

        assert result.success is False
        assert result.rolled_back is True
        assert list(tmp_project_dir.iterdir()) == []


# ---------------------------------------------------------------------------
# customize_project
# ---------------------------------------------------------------------------


class TestCustomizeProject:
    async def test_single_detected_pattern_and_folder_relocation(self, existing_sr_project):
        details = CrudDetails(
            entity_name="Order",
            properties=[EntityProperty(name="Total", type="decimal", is_required=True)],
        )
        result = await customize_project(existing_sr_project, details)

        source = existing_sr_project / "Source"
        assert result.success is True, result.error
        assert result.pattern == "service-repository"
        assert result.details["detected"] == ["Service Repository"]
        assert result.details["folders"]["Services"] == str(source / "Services")
        assert result.details["folders"]["Interfaces"] == ""
        assert result.details["entity_location"] == ""

        assert (source / "Models" / "Order.cs").is_file()
        assert (source / "Services" / "OrderService.cs").is_file()
        assert (source / "Repositories" / "OrderRepository.cs").is_file()
        assert (source / "Controllers" / "OrderController.cs").is_file()
        # Unresolved logical folders fall back to the default profile path.
        assert (existing_sr_project / "Interfaces" / "IOrderService.cs").is_file()

    async def test_existing_entity_is_kept(self, existing_sr_project):
        entity = existing_sr_project / "Source" / "Models" / "Product.cs"
        result = await customize_project(existing_sr_project, CrudDetails(entity_name="Product"))

        assert result.success is True, result.error
        assert result.details["entity_location"] == str(entity)
        assert entity.read_text(encoding="utf-8") == "public class Product { }\n"
        assert entity not in result.written
        assert "ProductService" in (existing_sr_project / "Source/Services/ProductService.cs").read_text(
            encoding="utf-8"
        )

    async def test_explicit_pattern_wins(self, existing_sr_project):
        result = await customize_project(
            existing_sr_project, CrudDetails(entity_name="Order", pattern="cqrs")
        )
        assert result.success is True, result.error
        assert result.pattern == "cqrs"
        assert result.details["detected"] == ["Service Repository"]
        assert (existing_sr_project / "Application/Commands/CreateOrderCommand.cs").is_file()

    async def test_no_pattern_detected(self, make_tree):
        root = make_tree({"Program.cs": "class Program { }\n"})
        result = await customize_project(root, CrudDetails(entity_name="Order"))
        assert result.success is False
        assert "no pattern detected" in result.error
        assert result.details == {"detected": []}
        assert [p.name for p in root.iterdir()] == ["Program.cs"]

    async def test_several_patterns_detected(self, make_tree):
        root = make_tree(
            {
                "Commands/CreateOrderCommand.cs": "",
                "Services/OrderService.cs": "",
                "Repositories/OrderRepository.cs": "",
                "Controllers/OrderController.cs": "",
            }
        )
        result = await customize_project(root, CrudDetails(entity_name="Invoice"))
        assert result.success is False
        assert result.details["detected"] == ["CQRS", "Service Repository"]

    async def test_invalid_descriptor(self, existing_sr_project):
        result = await customize_project(existing_sr_project, CrudDetails(entity_name=" "))
        assert result.success is False
        assert result.rolled_back is False
        assert "Entity name is required" in result.error

    async def test_missing_project_root(self, tmp_path: Path):
        result = await customize_project(tmp_path / "absent", CrudDetails(entity_name="Order"))
        assert result.success is False
        assert result.details == {"detected": []}

    async def test_transactional_failure_after_start(self, existing_sr_project, isolated_templates):
        (isolated_templates / "service_repository" / "Controller.template").unlink()
        config = Config(templates_dir=isolated_templates, transactional=True)
        before = sorted(p.relative_to(existing_sr_project).as_posix() for p in existing_sr_project.rglob("*"))

        result = await customize_project(existing_sr_project, CrudDetails(entity_name="Order"), config)

        assert result.success is False
        assert result.rolled_back is True
        after = sorted(p.relative_to(existing_sr_project).as_posix() for p in existing_sr_project.rglob("*"))
        assert after == before
