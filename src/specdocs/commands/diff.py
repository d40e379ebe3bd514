"""``specdocs diff`` -- report changes between two versions of an API description.

Meant for CI: the summary on stdout is the machine-readable result, and
``--fail-on-breaking`` turns removals into a non-zero exit. When either
document cannot be loaded the command still prints a summary, the
fail-safe one that reports changes and no breaking changes, and exits with
code 11.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from specdocs.commands.common import get_config, read_spec_text
from specdocs.exceptions import DiffFailure, SpecdocsError
from specdocs.exit_codes import EXIT_BREAKING_CHANGES
from specdocs.output import emit, error, info, warning


def diff_command(
    ctx: typer.Context,
    old: Path = typer.Argument(..., dir_okay=False, help="Previous version of the document."),
    new: Path = typer.Argument(..., dir_okay=False, help="New version of the document."),
    fail_on_breaking: Optional[bool] = typer.Option(
        None,
        "--fail-on-breaking/--no-fail-on-breaking",
        help="Exit with code 12 when breaking changes are found.",
    ),
) -> None:
    """Compare OLD and NEW and print the change summary.

    Example::

        specdocs diff main/openapi.yaml openapi.yaml --fail-on-breaking
    """
    from specdocs.diff import diff_texts, fail_safe_summary

    config = get_config(ctx)
    try:
        old_text = _read(old, "old")
        new_text = _read(new, "new")
        report = diff_texts(old_text, new_text, old_source=str(old), new_source=str(new))
    except DiffFailure as exc:
        error(str(exc))
        emit(fail_safe_summary(exc))
        raise typer.Exit(code=exc.exit_code) from None

    emit(report.summary())

    endpoints = report.endpoints
    info(
        f"Endpoints: {len(endpoints.added)} added, {len(endpoints.modified)} modified, "
        f"{len(endpoints.removed)} removed"
    )
    for item in report.breaking:
        warning(f"Breaking ({item.severity.value}): {item.description}")

    should_fail = config.diff.fail_on_breaking if fail_on_breaking is None else fail_on_breaking
    if should_fail and report.has_breaking_changes:
        raise typer.Exit(code=EXIT_BREAKING_CHANGES)


def _read(path: Path, which: str) -> str:
    try:
        return read_spec_text(path)
    except SpecdocsError as exc:
        raise DiffFailure(which, exc) from exc
