"""Shared pytest fixtures for json-doclet tests.

This module provides common fixtures used across unit and integration
tests: structlog capture, logging isolation, CLI runners, and type model
builders.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any

import pytest
import structlog
from click.testing import CliRunner

from jsondoclet import DocumentAssembler, GeneratorSettings, SchemaDocument, TypeModel


@pytest.fixture(autouse=True)
def configure_structlog_for_tests() -> None:
    """Configure structlog to output to stdout for test capture.

    The CLI reconfigures structlog for the runner's streams, so every test
    starts from this configuration again.
    """
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=False,  # Important for test isolation
    )


@pytest.fixture(autouse=True)
def restore_root_logger() -> Generator[None, None, None]:
    """Undo logging.basicConfig(force=True) calls made by CLI commands."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Create a Click test runner."""
    return CliRunner()


@pytest.fixture
def isolated_runner(cli_runner: CliRunner) -> Generator[CliRunner, None, None]:
    """Create a Click test runner inside a temporary working directory."""
    with cli_runner.isolated_filesystem():
        yield cli_runner


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the path to the test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def shapes_yaml(fixtures_dir: Path) -> Path:
    """Return the path to the shapes type model fixture."""
    return fixtures_dir / "shapes.yaml"


@pytest.fixture
def make_model() -> Callable[..., TypeModel]:
    """Build a TypeModel from plain declaration dictionaries.

    Example:
        >>> model = make_model({"name": "com.example.Point", "fields": [...]})
    """

    def _make(*types: dict[str, Any], **kwargs: Any) -> TypeModel:
        return TypeModel.model_validate({"types": list(types), **kwargs})

    return _make


@pytest.fixture
def assemble() -> Callable[..., SchemaDocument]:
    """Assemble a document for a model, with optional roots and settings."""

    def _assemble(
        model: TypeModel,
        *roots: str,
        **settings: Any,
    ) -> SchemaDocument:
        generator_settings = GeneratorSettings(**settings) if settings else None
        return DocumentAssembler(model, generator_settings).assemble(list(roots) or None)

    return _assemble
