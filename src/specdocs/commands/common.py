"""Helpers shared by the sub-commands: reading documents and config."""

from __future__ import annotations

from pathlib import Path

import typer

from specdocs.exceptions import SpecdocsError, SpecParseError
from specdocs.models import SpecdocsConfig, SpecDocument
from specdocs.output import debug, error


def read_spec_text(path: Path) -> str:
    """Read a document from disk as UTF-8.

    Raises:
        SpecParseError: If the file cannot be read or decoded.
    """
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise SpecParseError(f"Cannot read specification {path}: {exc}") from exc


def load_document(path: Path) -> SpecDocument:
    """Read and load *path*, exiting with the error's code on failure."""
    from specdocs.parser import load

    debug(f"Loading {path}")
    try:
        return load(read_spec_text(path), source=str(path))
    except SpecdocsError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None


def get_config(ctx: typer.Context) -> SpecdocsConfig:
    """Return the config resolved by the root callback, or defaults."""
    if ctx.obj and isinstance(ctx.obj.get("config"), SpecdocsConfig):
        return ctx.obj["config"]
    return SpecdocsConfig()
