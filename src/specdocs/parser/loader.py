"""Parse and validate API description text into a :class:`~specdocs.models.SpecDocument`.

The loader receives text that a caller has already read; it never opens
files or sockets. It accepts both JSON and YAML transparently and checks the
two structural rules every later stage relies on:

* a format marker (``swagger`` for 2.0 documents, ``openapi`` for 3.x) is
  present, and
* a non-empty ``paths`` table is present.

The two public functions are:

* :func:`load` -- parse, validate, and build the frozen document.
* :func:`parse_content` -- parse only, returning the raw mapping.

After loading, the document is passed to
:func:`~specdocs.parser.extractor.extract` to build the endpoint model, or
to :func:`~specdocs.diff.diff` together with a second document.
"""

from __future__ import annotations

import json
import logging
from typing import Any

import yaml
from pydantic import ValidationError

from specdocs.exceptions import SpecParseError, SpecValidationError
from specdocs.models import ApiInfo, SpecDocument, TagInfo
from specdocs.parser.schema import parse_definitions, parse_schema

logger = logging.getLogger(__name__)


def load(raw_text: str, source: str = "<string>") -> SpecDocument:
    """Load an API description from already-read text.

    Args:
        raw_text: The document text, JSON or YAML.
        source: A name for the document used in error messages (usually
            the file path the caller read it from).

    Returns:
        The validated, frozen :class:`~specdocs.models.SpecDocument`.

    Raises:
        SpecParseError: If the text is neither valid JSON nor valid YAML,
            or does not describe a mapping.
        SpecValidationError: If the format marker or the ``paths`` table is
            missing.
        SpecParseError: Also raised when a field holds a value that cannot
            be represented, e.g. a mapping where a title is expected.

    Example::

        text = Path("openapi/v1.yaml").read_text(encoding="utf-8")
        doc = load(text, source="openapi/v1.yaml")
        print(doc.info.title, len(doc.paths))
    """
    raw = parse_content(raw_text, source=source)
    spec_format, spec_version = validate_spec(raw, source=source)

    raw_definitions = parse_definitions(raw)
    try:
        definitions = {name: parse_schema(schema) for name, schema in raw_definitions.items()}
        doc = SpecDocument(
            source=source,
            spec_format=spec_format,
            spec_version=spec_version,
            info=_extract_info(raw),
            paths={str(path): item for path, item in raw["paths"].items()},
            definitions=definitions,
            raw_definitions=raw_definitions,
            tags=_extract_tags(raw),
            security=_list_of_dicts(raw.get("security")),
            raw={str(key): value for key, value in raw.items()},
        )
    except ValidationError as exc:
        raise SpecParseError(f"Specification {source} has invalid content: {exc}") from exc
    logger.debug(
        "Loaded %s: %s %s (%d paths, %d definitions)",
        source,
        doc.info.title,
        doc.info.version,
        len(doc.paths),
        len(doc.definitions),
    )
    return doc


def parse_content(content: str, source: str = "<string>") -> dict[str, Any]:
    """Parse content as JSON or YAML.

    Tries JSON first, then falls back to YAML. This order is chosen because
    valid JSON is also valid YAML, but JSON parsing is stricter and faster.

    Args:
        content: The raw string content.
        source: Document name used in error messages.

    Returns:
        The parsed dictionary.

    Raises:
        SpecParseError: If the content is empty, cannot be parsed as either
            format, or is not a mapping.
    """
    if not content.strip():
        raise SpecParseError(f"Specification {source} is empty")

    try:
        result = json.loads(content)
    except json.JSONDecodeError as json_error:
        try:
            result = yaml.safe_load(content)
        except yaml.YAMLError as yaml_error:
            raise SpecParseError(
                f"Failed to parse {source} as JSON or YAML"
                f"\n  JSON error: {json_error}"
                f"\n  YAML error: {yaml_error}"
            ) from yaml_error

    if not isinstance(result, dict):
        raise SpecParseError(
            f"Specification {source} must be a JSON/YAML object (got "
            f"{type(result).__name__ if result is not None else 'empty document'})"
        )
    return result


def validate_spec(spec: dict[str, Any], source: str = "<string>") -> tuple[str, str]:
    """Check the structural rules and return ``(format, version)``.

    Args:
        spec: The parsed document.
        source: Document name used in error messages.

    Returns:
        ``("swagger", "2.0")`` or ``("openapi", "3.0.3")`` style tuple.

    Raises:
        SpecValidationError: Naming ``swagger/openapi`` or ``paths``.
    """
    if spec.get("swagger") is not None:
        spec_format, version = "swagger", spec["swagger"]
    elif spec.get("openapi") is not None:
        spec_format, version = "openapi", spec["openapi"]
    else:
        raise SpecValidationError("swagger/openapi", source=source)

    paths = spec.get("paths")
    if not isinstance(paths, dict) or not paths:
        raise SpecValidationError("paths", source=source)

    return spec_format, str(version)


def _extract_info(spec: dict[str, Any]) -> ApiInfo:
    """Build :class:`~specdocs.models.ApiInfo` from ``info`` and the server fields.

    Swagger 2.0 documents describe their base URL with ``host``,
    ``basePath`` and ``schemes``; OpenAPI 3.x documents use ``servers``.
    Both are kept, and ``servers`` is derived from the Swagger fields when
    the document declares none.
    """
    info = spec.get("info")
    if not isinstance(info, dict):
        info = {}

    schemes = [str(s) for s in spec.get("schemes") or [] if s]
    host = str(spec["host"]) if spec.get("host") else None
    base_path = str(spec["basePath"]) if spec.get("basePath") else None

    servers = [
        str(server["url"])
        for server in spec.get("servers") or []
        if isinstance(server, dict) and server.get("url")
    ]
    if not servers and host:
        servers = [f"{scheme}://{host}{base_path or ''}" for scheme in schemes or ["https"]]

    return ApiInfo(
        title=str(info.get("title", "Untitled API")),
        version=str(info.get("version", "0.0.0")),
        description=str(info["description"]) if info.get("description") is not None else None,
        host=host,
        base_path=base_path,
        schemes=schemes,
        servers=servers,
    )


def _extract_tags(spec: dict[str, Any]) -> list[TagInfo]:
    tags: list[TagInfo] = []
    for tag in spec.get("tags") or []:
        if isinstance(tag, dict) and tag.get("name"):
            tags.append(
                TagInfo(name=str(tag["name"]), description=str(tag.get("description") or ""))
            )
    return tags


def _list_of_dicts(value: Any) -> list[dict[str, Any]]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]
