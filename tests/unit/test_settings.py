"""Unit tests for GeneratorSettings and dialect helpers."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from jsondoclet.settings import (
    DIALECT_ENV_VAR,
    INCLUDE_PRIVATE_ENV_VAR,
    SCHEMA_ID_ENV_VAR,
    GeneratorSettings,
    SchemaDialect,
)


class TestSchemaDialect:
    """Tests for dialect-dependent keywords."""

    def test_2020_12(self) -> None:
        dialect = SchemaDialect.DRAFT_2020_12
        assert dialect.meta_schema == "https://json-schema.org/draft/2020-12/schema"
        assert dialect.ref_prefix == "#/$defs/"
        assert dialect.supports_deprecated
        assert dialect.ref_allows_siblings

    def test_draft_07(self) -> None:
        dialect = SchemaDialect("draft-07")
        assert dialect.meta_schema == "http://json-schema.org/draft-07/schema#"
        assert dialect.ref_prefix == "#/definitions/"
        assert not dialect.supports_deprecated
        assert not dialect.ref_allows_siblings


class TestGeneratorSettings:
    """Tests for GeneratorSettings validation and layering."""

    def test_defaults(self) -> None:
        settings = GeneratorSettings()
        assert settings.dialect == SchemaDialect.DRAFT_2020_12
        assert not settings.include_private
        assert settings.additional_properties
        assert settings.schema_id is None

    def test_frozen(self) -> None:
        settings = GeneratorSettings()
        with pytest.raises(ValidationError):
            settings.pretty = True  # type: ignore[misc]

    def test_extra_fields_forbidden(self) -> None:
        with pytest.raises(ValidationError):
            GeneratorSettings(indent=4)  # type: ignore[call-arg]

    def test_unknown_dialect_rejected(self) -> None:
        with pytest.raises(ValidationError):
            GeneratorSettings(dialect="draft-04")

    def test_merged_ignores_none(self) -> None:
        """Unset overrides fall through to the base settings."""
        base = GeneratorSettings(title="Orders", include_private=True)
        merged = base.merged(title=None, dialect="draft-07")
        assert merged.title == "Orders"
        assert merged.include_private
        assert merged.dialect == SchemaDialect.DRAFT_07
        assert base.merged() is base

    def test_from_env(self) -> None:
        environ = {
            DIALECT_ENV_VAR: "draft-07",
            INCLUDE_PRIVATE_ENV_VAR: "yes",
            SCHEMA_ID_ENV_VAR: "https://example.com/orders.json",
        }
        settings = GeneratorSettings.from_env(GeneratorSettings(title="Orders"), environ)
        assert settings.dialect == SchemaDialect.DRAFT_07
        assert settings.include_private
        assert settings.schema_id == "https://example.com/orders.json"
        assert settings.title == "Orders"

    def test_from_env_empty(self) -> None:
        base = GeneratorSettings(title="Orders")
        assert GeneratorSettings.from_env(base, {}) is base

    def test_from_env_rejects_bad_flag(self) -> None:
        with pytest.raises(ValueError, match=INCLUDE_PRIVATE_ENV_VAR):
            GeneratorSettings.from_env(environ={INCLUDE_PRIVATE_ENV_VAR: "maybe"})
