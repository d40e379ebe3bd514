"""``specdocs extract`` -- print the endpoint model of an API description."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from specdocs.commands.common import get_config, load_document
from specdocs.exit_codes import EXIT_EXTRACTION_WARNINGS, EXIT_INVALID_USAGE
from specdocs.output import emit, error, info, suggest, warning


def extract_command(
    ctx: typer.Context,
    spec: Path = typer.Argument(
        ...,
        exists=True,
        dir_okay=False,
        readable=True,
        help="OpenAPI 3.x or Swagger 2.0 document (JSON or YAML).",
    ),
    category: Optional[str] = typer.Option(
        None, "--category", "-c", help="Only print the category for this tag."
    ),
    strict: Optional[bool] = typer.Option(
        None,
        "--strict/--no-strict",
        help="Exit with code 10 when any operation produced a warning.",
    ),
) -> None:
    """Extract endpoints, categories and examples from SPEC.

    The endpoint model is written to stdout (or ``-o FILE``); skipped
    operations and missing examples are reported as warnings on stderr.

    Example::

        specdocs extract openapi/v1.yaml --json
        specdocs extract openapi/v1.yaml --category accounts
    """
    from specdocs.parser.extractor import extract

    config = get_config(ctx)
    doc = load_document(spec)
    model = extract(
        doc,
        untagged=config.extraction.untagged_category,
        now=config.extraction.timestamp,
    )

    if category is None:
        emit(model.model_dump(mode="json", by_alias=True))
    else:
        selected = model.category(category)
        if selected is None:
            error(f"No category named '{category}'")
            suggest(f"Run: specdocs inspect categories {spec}")
            raise typer.Exit(code=EXIT_INVALID_USAGE)
        emit(selected.model_dump(mode="json", by_alias=True))

    for item in model.warnings:
        warning(str(item))
    info(
        f"Extracted {model.stats.endpoints} endpoints in "
        f"{model.stats.categories} categories ({model.stats.warnings} warnings)"
    )

    is_strict = config.extraction.strict if strict is None else strict
    if is_strict and model.warnings:
        raise typer.Exit(code=EXIT_EXTRACTION_WARNINGS)
