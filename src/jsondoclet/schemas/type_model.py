"""TypeModel: the complete host type model for one generation run."""

from __future__ import annotations

from functools import cached_property
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from jsondoclet.schemas.declarations import PackageDeclaration, TypeDeclaration
from jsondoclet.settings import GeneratorSettings


class TypeModel(BaseModel):
    """Documented types supplied by the host, plus optional settings and roots.

    Attributes:
        settings: Generator settings stored with the model (lowest priority
            after defaults).
        roots: Qualified or simple names of the root types, in output order.
            Empty means every exported declaration.
        types: Type declarations in source order.
        packages: Package documentation.

    Example:
        >>> model = TypeModel.from_yaml("types.yaml")
        >>> model.get("com.example.Point").simple_name
        'Point'
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    settings: GeneratorSettings | None = Field(
        default=None,
        description="Generator settings stored with the model",
    )
    roots: list[str] = Field(
        default_factory=list,
        description="Root type names, in output order",
    )
    types: list[TypeDeclaration] = Field(
        default_factory=list,
        description="Type declarations in source order",
    )
    packages: list[PackageDeclaration] = Field(
        default_factory=list,
        description="Package documentation",
    )

    @field_validator("types")
    @classmethod
    def validate_unique_names(cls, v: list[TypeDeclaration]) -> list[TypeDeclaration]:
        """Reject two declarations with the same qualified name."""
        seen: set[str] = set()
        for declaration in v:
            if declaration.name in seen:
                raise ValueError(f"duplicate type declaration '{declaration.name}'")
            seen.add(declaration.name)
        return v

    @field_validator("packages")
    @classmethod
    def validate_unique_packages(cls, v: list[PackageDeclaration]) -> list[PackageDeclaration]:
        """Reject two entries for the same package."""
        seen: set[str] = set()
        for package in v:
            if package.name in seen:
                raise ValueError(f"duplicate package declaration '{package.name}'")
            seen.add(package.name)
        return v

    @cached_property
    def declaration_index(self) -> dict[str, TypeDeclaration]:
        return {declaration.name: declaration for declaration in self.types}

    @cached_property
    def simple_name_index(self) -> dict[str, list[TypeDeclaration]]:
        index: dict[str, list[TypeDeclaration]] = {}
        for declaration in self.types:
            index.setdefault(declaration.simple_name, []).append(declaration)
        return index

    def get(self, name: str) -> TypeDeclaration | None:
        """Return the declaration with qualified *name*, or None."""
        return self.declaration_index.get(name)

    def find_simple(self, simple_name: str) -> list[TypeDeclaration]:
        """Return every declaration whose simple name is *simple_name*."""
        return list(self.simple_name_index.get(simple_name, []))

    @classmethod
    def from_yaml(cls, path: str | Path) -> TypeModel:
        """Load and validate a TypeModel from a YAML file.

        Args:
            path: Path to the type model file.

        Returns:
            Validated TypeModel instance.

        Raises:
            FileNotFoundError: If the file doesn't exist.
            yaml.YAMLError: If YAML syntax is invalid.
            pydantic.ValidationError: If model validation fails.
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")

        with path.open("r", encoding="utf-8") as f:
            data: dict[str, Any] | None = yaml.safe_load(f)

        return cls.model_validate(data or {})
