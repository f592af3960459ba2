"""Tests for the configuration models and the adapter compatibility table."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from expressgen.models import (
    COMPATIBLE_ORMS,
    DEFAULT_ORM,
    ORM,
    STANDARD_HANDLERS,
    AddOptions,
    BoilerplateLevel,
    ConfigurationError,
    Database,
    DocsConfig,
    IncompatibleAdapterError,
    Language,
    ProjectConfig,
    ResourceConfig,
    camel_case,
    check_adapter_compatibility,
    check_resource_name,
    databases_for_orm,
    pascal_case,
)

pytestmark = pytest.mark.unit


# ---------------------------------------------------------------------------
# Compatibility
# ---------------------------------------------------------------------------


class TestCompatibility:
    @pytest.mark.parametrize(
        "database,orm",
        [(db, orm) for db, orms in COMPATIBLE_ORMS.items() for orm in orms],
    )
    def test_allowed_pairs_pass(self, database, orm):
        check_adapter_compatibility(database, orm)

    @pytest.mark.parametrize("orm", [ORM.SEQUELIZE, ORM.TYPEORM])
    def test_relational_adapters_rejected_for_mongodb(self, orm):
        with pytest.raises(IncompatibleAdapterError) as exc_info:
            check_adapter_compatibility(Database.MONGODB, orm)
        assert exc_info.value.orm is orm
        assert "mongodb" in str(exc_info.value)

    def test_mongoose_rejected_for_postgres(self):
        with pytest.raises(IncompatibleAdapterError):
            check_adapter_compatibility(Database.POSTGRES, ORM.MONGOOSE)

    def test_adapter_without_database_rejected(self):
        with pytest.raises(IncompatibleAdapterError, match="requires a database"):
            check_adapter_compatibility(None, ORM.PRISMA)

    def test_no_adapter_always_allowed(self):
        check_adapter_compatibility(None, None)
        check_adapter_compatibility(Database.MONGODB, None)

    def test_default_orm_is_compatible(self):
        for database, orm in DEFAULT_ORM.items():
            assert orm in COMPATIBLE_ORMS[database]

    def test_databases_for_prisma(self):
        assert databases_for_orm(ORM.PRISMA) == [Database.MONGODB, Database.POSTGRES]
        assert databases_for_orm(ORM.MONGOOSE) == [Database.MONGODB]

    def test_incompatible_adapter_is_a_configuration_error(self):
        assert issubclass(IncompatibleAdapterError, ConfigurationError)


# ---------------------------------------------------------------------------
# ProjectConfig
# ---------------------------------------------------------------------------


class TestProjectConfig:
    def test_defaults(self):
        config = ProjectConfig(name="shop")
        assert config.language is Language.TS
        assert config.database is None
        assert config.orm is None
        assert config.boilerplate_level is BoilerplateLevel.FULL
        assert config.include_validation is True
        assert config.docs.enabled is False

    def test_derived_values(self):
        config = ProjectConfig(name="shop", language=Language.JS, database=Database.MONGODB,
                               orm=ORM.MONGOOSE)
        assert config.ext == ".js"
        assert config.is_typescript is False
        assert config.has_database is True
        assert config.has_auth is False

    def test_incompatible_pair_rejected(self):
        with pytest.raises(ValidationError):
            ProjectConfig(name="shop", database=Database.MONGODB, orm=ORM.TYPEORM)

    def test_empty_name_rejected(self):
        with pytest.raises(ValidationError):
            ProjectConfig(name="")

    def test_light_requires_reduced_features(self):
        with pytest.raises(ValidationError, match="Light mode forbids"):
            ProjectConfig(name="shop", light=True, testing=True)

    def test_light_config_accepted(self):
        config = ProjectConfig(
            name="shop",
            light=True,
            boilerplate_level=BoilerplateLevel.MINIMAL,
            include_validation=False,
        )
        assert config.light is True


class TestDocsConfig:
    def test_trailing_slash_removed(self):
        assert DocsConfig(path="/api-docs/").path == "/api-docs"

    def test_relative_path_rejected(self):
        with pytest.raises(ValidationError):
            DocsConfig(path="docs")


# ---------------------------------------------------------------------------
# ResourceConfig / options
# ---------------------------------------------------------------------------


class TestResourceConfig:
    def test_endpoints_deduplicated_in_order(self):
        resource = ResourceConfig(name="order", custom_endpoints=["ship", " cancel ", "ship", ""])
        assert resource.custom_endpoints == ("ship", "cancel")

    def test_endpoints_from_string(self):
        resource = ResourceConfig(name="order", custom_endpoints="ship,cancel")
        assert resource.custom_endpoints == ("ship", "cancel")

    @pytest.mark.parametrize("name", ["", "1order", "../etc", "order item"])
    def test_bad_names_rejected(self, name):
        with pytest.raises(ValidationError):
            ResourceConfig(name=name)

    def test_check_resource_name_strips(self):
        assert check_resource_name("  blog-post ") == "blog-post"

    def test_check_resource_name_raises_configuration_error(self):
        with pytest.raises(ConfigurationError):
            check_resource_name("..")

    @pytest.mark.parametrize("endpoint", ["it's", "2fa", "mark shipped", "/:id"])
    def test_bad_endpoint_names_rejected(self, endpoint):
        with pytest.raises(ValidationError, match="endpoint name"):
            ResourceConfig(name="order", custom_endpoints=["ship", endpoint])

    @pytest.mark.parametrize("endpoint", ["create", "update", "delete", "get-all", "getById"])
    def test_endpoint_clashing_with_crud_handler_rejected(self, endpoint):
        with pytest.raises(ValidationError, match="clashes"):
            ResourceConfig(name="order", custom_endpoints=[endpoint])

    def test_endpoint_clashing_with_service_field_rejected(self):
        with pytest.raises(ValidationError, match="orderService"):
            ResourceConfig(name="order", custom_endpoints=["order-service"])

    def test_endpoints_sharing_a_handler_rejected(self):
        with pytest.raises(ValidationError, match="bulkUpdate"):
            ResourceConfig(name="order", custom_endpoints=["bulk-update", "bulk_update"])

    def test_dashed_endpoint_accepted(self):
        resource = ResourceConfig(name="order", custom_endpoints=["mark-shipped"])
        assert resource.custom_endpoints == ("mark-shipped",)


class TestNaming:
    @pytest.mark.parametrize(
        "value,pascal,camel",
        [("blog-post", "BlogPost", "blogPost"), ("bulk_update", "BulkUpdate", "bulkUpdate")],
    )
    def test_case_conversion(self, value, pascal, camel):
        assert pascal_case(value) == pascal
        assert camel_case(value) == camel

    def test_standard_handlers(self):
        assert STANDARD_HANDLERS == {"getAll", "getById", "create", "update", "delete"}


class TestAddOptions:
    def test_endpoint_string_split(self):
        assert AddOptions(endpoints="activate, deactivate").endpoints == ["activate", "deactivate"]

    def test_unset_fields_are_none(self):
        options = AddOptions()
        assert options.tests is None
        assert options.endpoints is None
