"""Tests for the per-family placeholder mapping builders."""

from __future__ import annotations

from pathlib import Path

import pytest

from archgen.models import CrudDetails, CrudOptions, EntityProperty
from archgen.scaffolder.placeholders import (
    RenderContext,
    build_mapping,
    derive_namespace,
)
from archgen.scaffolder.profiles import FAMILY_KEYS, ArtifactFamily, Pattern


pytestmark = pytest.mark.unit


def _ctx(details: CrudDetails, root: Path) -> RenderContext:
    return RenderContext.create(details, Pattern.parse(details.pattern), root)


class TestBuilderKeys:
    @pytest.mark.parametrize("family", [f for f in ArtifactFamily if f is not ArtifactFamily.VALUE_OBJECTS])
    def test_builder_supplies_exactly_declared_keys(self, family, product_details, tmp_path):
        mapping = build_mapping(family, _ctx(product_details, tmp_path))
        assert set(mapping) == FAMILY_KEYS[family]

    def test_value_object_builder_keys(self, customer_ddd_details, tmp_path):
        ctx = _ctx(customer_ddd_details, tmp_path)
        vo = customer_ddd_details.value_object_properties[0]
        mapping = build_mapping(ArtifactFamily.VALUE_OBJECTS, ctx, value_object=vo)
        assert set(mapping) == FAMILY_KEYS[ArtifactFamily.VALUE_OBJECTS]
        assert mapping["ValueObjectName"] == "ShippingAddress"

    def test_value_object_builder_requires_property(self, customer_ddd_details, tmp_path):
        with pytest.raises(ValueError):
            build_mapping(ArtifactFamily.VALUE_OBJECTS, _ctx(customer_ddd_details, tmp_path))

    def test_all_values_are_strings(self, product_details, tmp_path):
        ctx = _ctx(product_details, tmp_path)
        for family in ArtifactFamily:
            if family is ArtifactFamily.VALUE_OBJECTS:
                continue
            assert all(isinstance(v, str) for v in build_mapping(family, ctx).values())


class TestDerivedNames:
    def test_key_from_key_property(self, product_details, tmp_path):
        mapping = build_mapping(ArtifactFamily.ENTITY, _ctx(product_details, tmp_path))
        assert mapping["KeyType"] == "Guid"
        assert mapping["KeyName"] == "ProductId"
        assert mapping["KeyDeclaration"] == ""

    def test_default_key(self, order_details, tmp_path):
        mapping = build_mapping(ArtifactFamily.ENTITY, _ctx(order_details, tmp_path))
        assert mapping["KeyType"] == "int"
        assert mapping["KeyName"] == "Id"
        assert mapping["KeyDeclaration"] == "    public int Id { get; set; }\n"

    def test_plural(self, tmp_path):
        details = CrudDetails(entity_name="Category", pattern="cqrs")
        assert build_mapping(ArtifactFamily.QUERIES, _ctx(details, tmp_path))["EntityNamePlural"] == "Categories"

    def test_namespace_from_output_root(self, tmp_path):
        root = tmp_path / "my-shop"
        assert derive_namespace(root) == "MyShop"

    def test_custom_namespace_wins(self, tmp_path):
        assert derive_namespace(tmp_path / "x", "Acme.Sales") == "Acme.Sales"

    def test_unusable_directory_name_falls_back(self, tmp_path):
        assert derive_namespace(tmp_path / "123") == "App"

    def test_custom_namespace_reaches_mapping(self, tmp_path):
        details = CrudDetails(
            entity_name="Order", pattern="cqrs", options=CrudOptions(custom_namespace="Acme")
        )
        assert build_mapping(ArtifactFamily.ENTITY, _ctx(details, tmp_path))["Namespace"] == "Acme"


class TestCqrsMapping:
    def test_cached_order_scenario(self, order_details, tmp_path):
        mapping = build_mapping(ArtifactFamily.QUERIES, _ctx(order_details, tmp_path))
        assert 'var cacheKey = $"Order:{request.Id}";' in mapping["CacheCheck"]
        assert mapping["CacheSet"]
        assert "RuleFor(x => x.Total).GreaterThanOrEqualTo(0)" in mapping["Validations"]

    def test_uncached_blocks_are_empty(self, tmp_path):
        details = CrudDetails(
            entity_name="Order",
            pattern="cqrs",
            properties=[EntityProperty(name="Total", type="decimal")],
        )
        mapping = build_mapping(ArtifactFamily.QUERIES, _ctx(details, tmp_path))
        for key in ("CacheService", "CacheServiceParam", "CacheServiceAssignment", "CacheCheck", "CacheSet"):
            assert mapping[key] == ""

    def test_command_properties_exclude_key(self, product_details, tmp_path):
        details = product_details.model_copy(update={"pattern": "cqrs"})
        mapping = build_mapping(ArtifactFamily.COMMANDS, _ctx(details, tmp_path))
        assert "ProductId" not in mapping["CommandProperties"]
        assert "public string Name { get; set; }" in mapping["CommandProperties"]

    def test_empty_entity_blocks(self, tmp_path):
        details = CrudDetails(entity_name="Tag", pattern="cqrs")
        mapping = build_mapping(ArtifactFamily.HANDLERS, _ctx(details, tmp_path))
        assert mapping["CommandProperties"] == ""
        assert mapping["Mappings"] == ""
        assert mapping["SearchConditions"] == "true"

    def test_cqrs_repository_is_always_async(self, tmp_path):
        details = CrudDetails(
            entity_name="Order", pattern="cqrs", options=CrudOptions(use_async_methods=False)
        )
        mapping = build_mapping(ArtifactFamily.REPOSITORY, _ctx(details, tmp_path))
        assert "GetByIdAsync" in mapping["RepositoryContract"]


class TestServiceAndController:
    def test_sync_service_when_async_disabled(self, product_details, tmp_path):
        details = product_details.model_copy(
            update={"options": CrudOptions(use_async_methods=False)}
        )
        mapping = build_mapping(ArtifactFamily.SERVICE, _ctx(details, tmp_path))
        assert "Task<" not in mapping["ServiceMethods"]
        assert "public Product? GetById(Guid id)" in mapping["ServiceMethods"]

    def test_logging_toggle(self, product_details, tmp_path):
        on = build_mapping(ArtifactFamily.SERVICE, _ctx(product_details, tmp_path))
        assert on["LoggerField"] == "    private readonly ILogger<ProductService> _logger;\n"
        assert "_logger.LogInformation" in on["ServiceMethods"]

        details = product_details.model_copy(update={"options": CrudOptions(add_logging=False)})
        off = build_mapping(ArtifactFamily.SERVICE, _ctx(details, tmp_path))
        assert off["LoggerField"] == off["LoggerParam"] == off["LoggerAssignment"] == ""
        assert "_logger" not in off["ServiceMethods"]

    def test_soft_delete_in_service(self, product_details, tmp_path):
        details = product_details.model_copy(update={"options": CrudOptions(implement_soft_delete=True)})
        mapping = build_mapping(ArtifactFamily.SERVICE, _ctx(details, tmp_path))
        assert "entity.IsDeleted = true;" in mapping["ServiceMethods"]

    def test_swagger_toggle(self, product_details, tmp_path):
        off = build_mapping(ArtifactFamily.CONTROLLER, _ctx(product_details, tmp_path))
        assert off["SwaggerAttributes"] == ""
        assert "ProducesResponseType" not in off["ControllerMethods"]

        details = product_details.model_copy(update={"options": CrudOptions(include_swagger_docs=True)})
        on = build_mapping(ArtifactFamily.CONTROLLER, _ctx(details, tmp_path))
        assert on["SwaggerAttributes"] == '[Produces("application/json")]\n'
        assert "[ProducesResponseType(StatusCodes.Status404NotFound)]" in on["ControllerMethods"]
