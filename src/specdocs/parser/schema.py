"""Discriminate raw schema dictionaries into :data:`~specdocs.models.SchemaNode` variants.

Every schema in a document is classified exactly once, here, so that the
resolver, synthesizer and extractor can dispatch on ``node.kind`` instead of
probing for ``properties`` or ``items`` keys.

Classification order:

1. ``$ref`` present -> :class:`~specdocs.models.RefSchema`.
2. ``type`` declared -> the matching variant. OpenAPI 3.1 type lists are
   reduced to their first non-``null`` entry, and a ``null`` entry marks
   the node nullable.
3. No ``type`` but ``properties`` -> object; no ``type`` but ``items`` ->
   array.
4. Anything else -> :class:`~specdocs.models.UnknownSchema`.

Parsing is total: malformed children (a non-mapping property schema, a
non-list ``required``) degrade to :class:`~specdocs.models.UnknownSchema` or
are ignored, so loading a document never fails because of one odd schema.
"""

from __future__ import annotations

from typing import Any

from specdocs.models import (
    ArraySchema,
    BooleanSchema,
    NumberSchema,
    ObjectSchema,
    RefSchema,
    SchemaNode,
    StringSchema,
    UnknownSchema,
)

# Prefixes under which named schema definitions live
_DEFINITION_PREFIXES = ("#/definitions/", "#/components/schemas/")


def ref_name(ref: str) -> str:
    """Return the definition name a ``$ref`` string points at.

    ``#/definitions/Pet`` and ``#/components/schemas/Pet`` both name
    ``Pet``. Any other reference is returned verbatim so that it fails to
    resolve against the definitions table with a readable message.
    """
    for prefix in _DEFINITION_PREFIXES:
        if ref.startswith(prefix):
            return ref[len(prefix):].replace("~1", "/").replace("~0", "~")
    return ref


def parse_schema(raw: Any) -> SchemaNode:
    """Parse one raw schema mapping (and its children) into a schema node.

    Args:
        raw: A schema dictionary as found in the document.

    Returns:
        The discriminated schema node.
    """
    if not isinstance(raw, dict):
        return UnknownSchema()

    if "$ref" in raw:
        ref = str(raw["$ref"])
        return RefSchema(ref=ref, name=ref_name(ref), description=_text(raw.get("description")))

    schema_type, nullable = _schema_type(raw)
    nullable = nullable or bool(raw.get("nullable")) or bool(raw.get("x-nullable"))
    common: dict[str, Any] = {
        "description": _text(raw.get("description")),
        "example": raw.get("example"),
        "nullable": nullable,
    }

    if schema_type is None:
        if isinstance(raw.get("properties"), dict):
            schema_type = "object"
        elif "items" in raw:
            schema_type = "array"

    if schema_type == "object":
        properties = raw.get("properties")
        required = raw.get("required")
        return ObjectSchema(
            properties={
                str(name): parse_schema(child)
                for name, child in (properties.items() if isinstance(properties, dict) else ())
            },
            required=tuple(str(r) for r in required) if isinstance(required, list) else (),
            **common,
        )
    if schema_type == "array":
        items = raw.get("items")
        return ArraySchema(items=parse_schema(items) if items is not None else None, **common)
    if schema_type == "string":
        return StringSchema(format=_text(raw.get("format")), enum=_enum(raw), **common)
    if schema_type in ("integer", "number"):
        minimum = raw.get("minimum")
        return NumberSchema(
            kind=schema_type,
            format=_text(raw.get("format")),
            minimum=minimum if isinstance(minimum, (int, float)) and not isinstance(minimum, bool) else None,
            enum=_enum(raw),
            **common,
        )
    if schema_type == "boolean":
        return BooleanSchema(**common)
    return UnknownSchema(**common)


def parse_definitions(raw: dict[str, Any]) -> dict[str, Any]:
    """Collect raw named schemas from ``definitions`` and ``components.schemas``.

    When both tables declare the same name, the OpenAPI 3 entry wins.
    """
    merged: dict[str, Any] = {}
    definitions = raw.get("definitions")
    if isinstance(definitions, dict):
        merged.update(definitions)
    components = raw.get("components")
    if isinstance(components, dict) and isinstance(components.get("schemas"), dict):
        merged.update(components["schemas"])
    return {str(name): schema for name, schema in merged.items()}


def _schema_type(raw: dict[str, Any]) -> tuple[str | None, bool]:
    """Return ``(type, nullable_from_type_list)`` for a raw schema."""
    type_value = raw.get("type")
    if isinstance(type_value, list):
        non_null = [t for t in type_value if t != "null"]
        return (str(non_null[0]) if non_null else None), "null" in type_value
    if type_value is None:
        return None, False
    return str(type_value), False


def _text(value: Any) -> str | None:
    # YAML reads unquoted 2024, yes or 2024-01-01 as int, bool or date
    return None if value is None else str(value)


def _enum(raw: dict[str, Any]) -> list[Any] | None:
    values = raw.get("enum")
    return list(values) if isinstance(values, list) and values else None
