# src/docmap/config.py
"""Startup configuration: which table to load and how to treat repeats."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import typer

from .defaults import default_registry
from .enums import DuplicatePolicy
from .loader import load_registry
from .registry import NamespaceRegistry

ENV_URLMAP = "DOCMAP_URLMAP"


@dataclass(slots=True)
class RegistryConfig:
    urlmap: Path | None = None
    on_duplicate: DuplicatePolicy = DuplicatePolicy.reject
    verbose: int = 0


def build_registry(cfg: RegistryConfig) -> NamespaceRegistry:
    """Load the configured table once; the built-in table when no file is set."""
    if cfg.urlmap is None:
        if cfg.verbose:
            typer.echo("[load] using built-in namespace table")
        return default_registry()
    return load_registry(cfg.urlmap, cfg.on_duplicate, verbose=cfg.verbose)
