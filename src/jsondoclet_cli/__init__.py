"""jsondoclet-cli: Command-line interface for json-doclet.

This package provides the `jsondoclet` CLI for generating JSON Schema
documents from documented type models.
"""

from __future__ import annotations

__version__ = "0.1.0"

__all__ = ["__version__"]
