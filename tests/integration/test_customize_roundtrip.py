"""Integration tests for the scaffold-then-customize round trip.

These tests run the real generator, analyzer and workflows end-to-end:
a fresh tree is scaffolded from a descriptor file, analyzed back, and then
extended with further entities through the customize flow.

No .NET toolchain is required; generated C# is inspected as text.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from archgen.analyzer import ProjectAnalyzer
from archgen.models import CrudDetails
from archgen.scaffolder import CrudGenerator
from archgen.scaffolder.templates import MARKER_RE
from archgen.workflow import customize_project, scaffold_entity


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _write_descriptor(path: Path, data: dict) -> Path:
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")
    return path


def _assert_no_markers(paths: list[Path]) -> None:
    for path in paths:
        assert MARKER_RE.search(path.read_text(encoding="utf-8")) is None, path


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------

@pytest.mark.integration
class TestCqrsRoundTrip:
    """Scaffold a CQRS tree, then add entities to it."""

    async def test_scaffold_analyze_customize(self, tmp_path: Path):
        root = tmp_path / "sales"
        descriptor = _write_descriptor(
            tmp_path / "order.json",
            {
                "entityName": "Order",
                "pattern": "cqrs",
                "properties": [
                    {"name": "Number", "type": "string", "isRequired": True},
                    {"name": "Total", "type": "decimal", "isRequired": True},
                ],
                "options": {"implementCaching": True, "implementValidation": True, "addPagination": True},
            },
        )

        created = await scaffold_entity(CrudDetails.load(descriptor), root)
        assert created.success, created.error
        _assert_no_markers(created.written)

        structure = await ProjectAnalyzer().analyze(root)
        assert structure.patterns == ("CQRS",)
        assert "Application/Queries/GetOrderQuery.cs" in structure.cqrs_files

        added = await customize_project(root, CrudDetails(entity_name="Shipment"))
        assert added.success, added.error
        assert added.pattern == "cqrs"
        assert added.details["folders"]["Commands"] == str(root / "Application" / "Commands")
        assert (root / "Application/Commands/CreateShipmentCommand.cs").is_file()
        assert (root / "Application/Queries/GetAllShipmentsQuery.cs").is_file()

        # The tree still reads as a single-pattern project.
        assert (await ProjectAnalyzer().analyze(root)).patterns == ("CQRS",)

    async def test_customize_keeps_existing_entity(self, tmp_path: Path, order_details):
        root = tmp_path / "sales"
        assert (await scaffold_entity(order_details, root)).success

        entity = root / "Domain/Entities/Order.cs"
        entity.write_text(entity.read_text(encoding="utf-8") + "// hand edited\n", encoding="utf-8")

        result = await customize_project(root, order_details.model_copy(update={"pattern": ""}))

        assert result.success, result.error
        assert result.details["entity_location"] == str(entity)
        assert entity.read_text(encoding="utf-8").endswith("// hand edited\n")
        assert entity not in result.written

    async def test_cached_order_query(self, tmp_path: Path, order_details):
        root = tmp_path / "sales"
        result = await scaffold_entity(order_details, root)
        text = (root / "Application/Queries/GetOrderQuery.cs").read_text(encoding="utf-8")

        assert result.success
        assert 'var cacheKey = $"Order:{request.Id}";' in text
        assert "public GetOrderQueryHandler(IOrderRepository repository, ICacheService cacheService)" in text


@pytest.mark.integration
class TestServiceRepositoryRoundTrip:
    """Scaffold several entities concurrently, then add one more."""

    async def test_many_then_customize(self, tmp_path: Path):
        root = tmp_path / "catalog"
        generator = CrudGenerator()
        entities = [
            CrudDetails(entity_name=name, pattern="service-repository") for name in ("Product", "Supplier")
        ]
        results = await generator.generate_many(root, entities)
        for written in results:
            _assert_no_markers(written)

        structure = await ProjectAnalyzer().analyze(root)
        assert structure.patterns == ("Service Repository",)
        assert structure.controller_locations() == ["Controllers"]
        assert structure.entity_locations() == ["Models"]

        descriptor = _write_descriptor(
            tmp_path / "warehouse.json",
            {
                "entityName": "Warehouse",
                "properties": [{"name": "Code", "type": "string", "isRequired": True}],
                "options": {"implementSoftDelete": True, "generateTests": True},
            },
        )
        result = await customize_project(root, CrudDetails.load(descriptor))

        assert result.success, result.error
        assert result.pattern == "service-repository"
        assert all(result.details["folders"].values())
        service = (root / "Services/WarehouseService.cs").read_text(encoding="utf-8")
        assert "entity.IsDeleted = true;" in service
        assert (root / "Tests/WarehouseServiceTests.cs").is_file()
