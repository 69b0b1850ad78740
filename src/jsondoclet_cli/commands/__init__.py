"""CLI command modules, registered on the group in jsondoclet_cli.main."""

from __future__ import annotations

__all__: list[str] = []
