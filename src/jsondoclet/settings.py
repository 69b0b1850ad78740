"""Generator settings for json-doclet.

Settings are layered, highest priority first:
1. Explicit overrides (CLI options)
2. JSONDOCLET_* environment variables
3. The ``settings:`` block of the type model YAML
4. Defaults
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)

# Environment variables consulted by GeneratorSettings.from_env()
DIALECT_ENV_VAR = "JSONDOCLET_DIALECT"
INCLUDE_PRIVATE_ENV_VAR = "JSONDOCLET_INCLUDE_PRIVATE"
SCHEMA_ID_ENV_VAR = "JSONDOCLET_SCHEMA_ID"

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off", ""})


class SchemaDialect(str, Enum):
    """Supported JSON Schema dialects."""

    DRAFT_2020_12 = "2020-12"
    DRAFT_07 = "draft-07"

    @property
    def meta_schema(self) -> str:
        """URI of the dialect's meta-schema, used as ``$schema``."""
        if self is SchemaDialect.DRAFT_07:
            return "http://json-schema.org/draft-07/schema#"
        return "https://json-schema.org/draft/2020-12/schema"

    @property
    def definitions_key(self) -> str:
        """Key of the definitions table in the document root."""
        if self is SchemaDialect.DRAFT_07:
            return "definitions"
        return "$defs"

    @property
    def ref_prefix(self) -> str:
        """JSON pointer prefix for references into the definitions table."""
        return f"#/{self.definitions_key}/"

    @property
    def supports_deprecated(self) -> bool:
        """Whether the ``deprecated`` annotation keyword exists in this dialect."""
        return self is SchemaDialect.DRAFT_2020_12

    @property
    def ref_allows_siblings(self) -> bool:
        """Whether keywords next to ``$ref`` are applied (draft-07 ignores them)."""
        return self is SchemaDialect.DRAFT_2020_12


class GeneratorSettings(BaseModel):
    """Options controlling a schema generation run.

    Attributes:
        dialect: JSON Schema dialect of the produced document.
        include_private: Include private and package-private members.
        schema_id: Optional ``$id`` of the produced document.
        title: Optional ``title`` of the produced document.
        additional_properties: When False, object definitions without
            supertypes are closed with ``additionalProperties: false``.
        pretty: Pretty print serialized output.

    Example:
        >>> settings = GeneratorSettings(dialect="draft-07", pretty=True)
        >>> settings.dialect.definitions_key
        'definitions'
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    dialect: SchemaDialect = Field(
        default=SchemaDialect.DRAFT_2020_12,
        description="JSON Schema dialect of the produced document",
    )
    include_private: bool = Field(
        default=False,
        description="Include private and package-private members in output",
    )
    schema_id: str | None = Field(
        default=None,
        min_length=1,
        description="Optional $id of the produced document",
    )
    title: str | None = Field(
        default=None,
        min_length=1,
        description="Optional title of the produced document",
    )
    additional_properties: bool = Field(
        default=True,
        description="Allow properties not declared by the type",
    )
    pretty: bool = Field(
        default=False,
        description="Pretty print generated JSON files",
    )

    def merged(self, **overrides: Any) -> GeneratorSettings:
        """Return a copy with every non-None override applied.

        Args:
            **overrides: Field values to replace. ``None`` values are ignored
                so unset CLI options fall through to lower layers.

        Returns:
            New validated GeneratorSettings.
        """
        updates = {key: value for key, value in overrides.items() if value is not None}
        if not updates:
            return self
        data = self.model_dump()
        data.update(updates)
        return GeneratorSettings.model_validate(data)

    @classmethod
    def from_env(
        cls,
        base: GeneratorSettings | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> GeneratorSettings:
        """Apply JSONDOCLET_* environment variables on top of *base*.

        Args:
            base: Settings to start from. Defaults to GeneratorSettings().
            environ: Environment mapping. Defaults to ``os.environ``.

        Returns:
            Settings with environment overrides applied.

        Raises:
            ValueError: If a boolean variable holds an unrecognized value.
        """
        env = os.environ if environ is None else environ
        base = base or cls()

        overrides: dict[str, Any] = {}
        if env.get(DIALECT_ENV_VAR):
            overrides["dialect"] = env[DIALECT_ENV_VAR]
        if INCLUDE_PRIVATE_ENV_VAR in env:
            overrides["include_private"] = _parse_bool(
                INCLUDE_PRIVATE_ENV_VAR, env[INCLUDE_PRIVATE_ENV_VAR]
            )
        if env.get(SCHEMA_ID_ENV_VAR):
            overrides["schema_id"] = env[SCHEMA_ID_ENV_VAR]

        if overrides:
            logger.debug("Applying environment overrides: %s", sorted(overrides))
        return base.merged(**overrides)


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be a boolean flag, got '{raw}'")
