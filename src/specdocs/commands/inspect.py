"""Inspect commands -- tabular views of an API description.

``specdocs inspect`` offers read-only views of a single document: its
operations, schema definitions, tag categories, and general metadata.
Each sub-command takes the document path as its argument and prints a
table (or JSON records with ``--json``).
"""

from __future__ import annotations

from pathlib import Path

import typer

from specdocs.commands.common import get_config, load_document
from specdocs.models import ArraySchema, ObjectSchema, RefSchema, SchemaNode
from specdocs.output import emit, get_output, info


inspect_app = typer.Typer(no_args_is_help=True)

_SPEC_ARGUMENT = typer.Argument(
    ..., exists=True, dir_okay=False, readable=True, help="API description file."
)


@inspect_app.command("paths")
def inspect_paths(ctx: typer.Context, spec: Path = _SPEC_ARGUMENT) -> None:
    """List every operation with its slug, summary and deprecation status.

    Example::

        specdocs inspect paths openapi.yaml
    """
    from specdocs.parser.extractor import extract

    config = get_config(ctx)
    model = extract(load_document(spec), untagged=config.extraction.untagged_category)

    rows = [
        [
            endpoint.method.value.upper(),
            endpoint.path,
            endpoint.slug,
            endpoint.summary or "-",
            "Yes" if endpoint.deprecated else "",
        ]
        for endpoint in model.endpoints
    ]
    get_output().print_table(
        ["Method", "Path", "Slug", "Summary", "Deprecated"],
        rows,
        title=f"{model.info.title} -- Paths ({len(rows)})",
    )


@inspect_app.command("schemas")
def inspect_schemas(spec: Path = _SPEC_ARGUMENT) -> None:
    """List named schema definitions with their kind and first properties."""
    doc = load_document(spec)
    if not doc.definitions:
        info("No schemas defined in this document.")
        return

    rows: list[list[str]] = []
    for name, schema in sorted(doc.definitions.items()):
        props = ""
        if isinstance(schema, ObjectSchema):
            prop_names = list(schema.properties)
            props = ", ".join(prop_names[:5])
            if len(prop_names) > 5:
                props += "..."
        rows.append([name, _describe(schema), props])

    get_output().print_table(["Schema", "Type", "Properties"], rows, title=f"Schemas ({len(rows)})")


@inspect_app.command("categories")
def inspect_categories(ctx: typer.Context, spec: Path = _SPEC_ARGUMENT) -> None:
    """List tag categories in first-seen order with their endpoint counts."""
    from specdocs.parser.extractor import extract

    config = get_config(ctx)
    model = extract(load_document(spec), untagged=config.extraction.untagged_category)

    rows = [
        [category.name, category.display_name, str(len(category.endpoints)), category.description or "-"]
        for category in model.categories
    ]
    get_output().print_table(
        ["Tag", "Name", "Endpoints", "Description"], rows, title=f"Categories ({len(rows)})"
    )


@inspect_app.command("info")
def inspect_info(ctx: typer.Context, spec: Path = _SPEC_ARGUMENT) -> None:
    """Show title, version, servers and counts for the document."""
    from specdocs.parser.extractor import extract

    config = get_config(ctx)
    doc = load_document(spec)
    model = extract(doc, untagged=config.extraction.untagged_category)

    data: dict = {
        "title": doc.info.title,
        "version": doc.info.version,
        "format": doc.spec_format,
        "spec_version": doc.spec_version,
        "description": doc.info.description or "-",
        "servers": list(doc.info.servers),
        "operations": model.stats.endpoints,
        "categories": model.stats.categories,
        "schemas": model.stats.schemas,
        "warnings": model.stats.warnings,
    }
    emit(data)


def _describe(schema: SchemaNode) -> str:
    if isinstance(schema, RefSchema):
        return f"-> {schema.name}"
    if isinstance(schema, ArraySchema) and isinstance(schema.items, RefSchema):
        return f"array[{schema.items.name}]"
    return schema.kind
