"""Build the endpoint model from a loaded :class:`~specdocs.models.SpecDocument`.

This module walks every path and recognised HTTP verb of a document and
produces an :class:`~specdocs.models.EndpointModel`: one
:class:`~specdocs.models.Endpoint` per operation (with parameters, request
body, responses and synthesized examples) plus the
:class:`~specdocs.models.Category` grouping by tag.

The single public entry point is :func:`extract`. Internally it delegates
to private helpers that each handle one part of an operation:

* ``_merge_parameters`` / ``_partition_parameters`` -- path-level and
  operation-level parameters, bucketed by location.
* ``_extract_request_body`` -- the modern ``requestBody`` object or the
  legacy ``in: body`` parameter.
* ``_extract_responses`` -- the response table, with contextual error
  examples for 4xx/5xx codes and synthesized examples otherwise.

Failures are contained per operation. A malformed operation is logged,
recorded as an :class:`~specdocs.models.ExtractionWarning`, and skipped; a
failed example synthesis only drops that one example.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime
from typing import Any, Iterable, Mapping, Optional

from specdocs.examples import ExampleSynthesizer, contextual_error_example, is_error_status
from specdocs.exceptions import ExtractionError, SpecdocsError
from specdocs.models import (
    BodyProperty,
    Category,
    Endpoint,
    EndpointModel,
    ExtractionWarning,
    HTTPMethod,
    ObjectSchema,
    Parameter,
    ParameterGroups,
    ParameterLocation,
    RefSchema,
    RequestBody,
    Response,
    SchemaNode,
    SpecDocument,
    UnknownSchema,
)
from specdocs.parser.resolver import resolve, resolve_pointer
from specdocs.parser.schema import parse_schema

logger = logging.getLogger(__name__)

UNTAGGED = "untagged"

_HTTP_METHODS = {m.value: m for m in HTTPMethod}
_LOCATIONS = {loc.value: loc for loc in ParameterLocation}
_MAX_REF_HOPS = 32


def extract(
    doc: SpecDocument,
    *,
    untagged: str = UNTAGGED,
    now: Optional[datetime] = None,
) -> EndpointModel:
    """Extract the endpoint model from a loaded document.

    Args:
        doc: The document returned by :func:`~specdocs.parser.loader.load`.
        untagged: Category name given to operations without tags.
        now: Timestamp used for ``date-time`` examples. Pin it to make two
            runs over the same document produce identical output.

    Returns:
        The :class:`~specdocs.models.EndpointModel`. Endpoints follow
        document order (paths, then verbs within a path); categories follow
        first-seen tag order.

    Example::

        doc = load(text, source="v1.yaml")
        model = extract(doc)
        for category in model.categories:
            print(category.display_name, [e.slug for e in category.endpoints])
    """
    synthesizer = ExampleSynthesizer(doc.definitions, now=now)
    endpoints: list[Endpoint] = []
    warnings: list[ExtractionWarning] = []

    for path, path_item in doc.paths.items():
        if not isinstance(path_item, dict):
            warnings.append(_warn(str(path), ExtractionError("Path item is not a mapping")))
            continue

        for method_key, raw_op in path_item.items():
            method = _HTTP_METHODS.get(str(method_key).lower())
            if method is None:
                continue

            key = f"{method.value.upper()} {path}"
            try:
                endpoint = _build_endpoint(
                    doc, str(path), method, raw_op, path_item, synthesizer, untagged, warnings
                )
            except (SpecdocsError, ValueError, TypeError) as exc:
                warnings.append(_warn(key, exc))
                continue
            endpoints.append(endpoint)

    categories = group_by_category(endpoints, doc)
    logger.debug(
        "Extracted %d endpoints in %d categories (%d warnings)",
        len(endpoints),
        len(categories),
        len(warnings),
    )
    return EndpointModel(
        info=doc.info,
        endpoints=tuple(endpoints),
        categories=categories,
        schemas=doc.definitions,
        warnings=tuple(warnings),
    )


def group_by_category(endpoints: Iterable[Endpoint], doc: SpecDocument) -> tuple[Category, ...]:
    """Group endpoints by tag, keeping first-seen tag order.

    An endpoint with several tags appears in each of their categories.
    """
    members: dict[str, list[Endpoint]] = {}
    for endpoint in endpoints:
        for tag in dict.fromkeys(endpoint.tags):
            members.setdefault(tag, []).append(endpoint)

    return tuple(
        Category(
            name=tag,
            display_name=format_tag_name(tag),
            description=doc.tag_description(tag),
            endpoints=tuple(tagged),
        )
        for tag, tagged in members.items()
    )


# --- Naming ---


def kebab_case(value: str) -> str:
    """``listAccountUsers`` -> ``list-account-users``."""
    value = re.sub(r"([a-z0-9])([A-Z])", r"\1-\2", value)
    value = re.sub(r"[\s_]+", "-", value)
    return value.lower()


def title_case(value: str) -> str:
    """``listAccountUsers`` -> ``List Account Users``."""
    value = re.sub(r"([a-z])([A-Z])", r"\1 \2", value)
    value = re.sub(r"[_-]", " ", value)
    return re.sub(r"\b\w", lambda m: m.group(0).upper(), value)


def make_slug(method: HTTPMethod, path: str, operation_id: Optional[str]) -> str:
    """Return the stable slug used for page file names.

    ``operationId`` wins when present; otherwise the verb and the path
    (braces removed, slashes turned into dashes) are combined.
    """
    if operation_id:
        return kebab_case(operation_id)
    path_slug = kebab_case(re.sub(r"[{}]", "", path).replace("/", "-"))
    path_slug = re.sub(r"-+", "-", path_slug).strip("-")
    return f"{method.value}-{path_slug}" if path_slug else method.value


def make_display_name(
    method: HTTPMethod, path: str, summary: str, operation_id: Optional[str]
) -> str:
    if summary:
        return summary
    if operation_id:
        return title_case(operation_id)
    return f"{method.value.upper()} {path}"


def format_tag_name(tag: str) -> str:
    """``account_users`` -> ``Account Users``."""
    return " ".join(word[:1].upper() + word[1:] for word in tag.split("_"))


# --- Operations ---


def _build_endpoint(
    doc: SpecDocument,
    path: str,
    method: HTTPMethod,
    raw_op: Any,
    path_item: dict[str, Any],
    synthesizer: ExampleSynthesizer,
    untagged: str,
    warnings: list[ExtractionWarning],
) -> Endpoint:
    """Build one :class:`~specdocs.models.Endpoint`.

    Example-synthesis problems are appended to *warnings*; anything else
    raises and the caller skips the operation.
    """
    if not isinstance(raw_op, dict):
        raise ExtractionError("Operation is not a mapping")

    key = f"{method.value.upper()} {path}"
    params = _merge_parameters(
        _resolve_parameters(path_item.get("parameters"), doc),
        _resolve_parameters(raw_op.get("parameters"), doc),
    )
    body_param = next((p for p in params if p.get("in") == "body"), None)

    operation_id = raw_op.get("operationId")
    operation_id = str(operation_id) if operation_id else None
    summary = str(raw_op.get("summary") or "")

    tags = raw_op.get("tags")
    if tags is None:
        tags = []
    if not isinstance(tags, list):
        raise ExtractionError(f"'tags' must be a list, got {type(tags).__name__}")

    security = raw_op.get("security")
    if security is None:
        security = doc.security

    return Endpoint(
        path=path,
        method=method,
        operation_id=operation_id,
        summary=summary,
        description=str(raw_op.get("description") or ""),
        tags=[str(t) for t in tags] or [untagged],
        parameters=_partition_parameters(params),
        request_body=_extract_request_body(
            doc, raw_op, body_param, synthesizer, key, warnings
        ),
        responses=_extract_responses(
            doc, path, method, raw_op.get("responses"), synthesizer, key, warnings
        ),
        security=security,
        deprecated=bool(raw_op.get("deprecated", False)),
        code_samples=_extract_code_samples(raw_op),
        slug=make_slug(method, path, operation_id),
        display_name=make_display_name(method, path, summary, operation_id),
    )


def _deref(value: Any, doc: SpecDocument) -> Any:
    """Follow ``$ref`` pointers on a raw (non-schema) object until none is left."""
    hops = 0
    while isinstance(value, dict) and "$ref" in value:
        hops += 1
        if hops > _MAX_REF_HOPS:
            raise ExtractionError(f"Too many $ref hops resolving {value['$ref']}")
        value = resolve_pointer(str(value["$ref"]), doc.raw)
    return value


def _resolve_parameters(raw_params: Any, doc: SpecDocument) -> list[dict[str, Any]]:
    if raw_params is None:
        return []
    if not isinstance(raw_params, list):
        raise ExtractionError(
            f"'parameters' must be a list, got {type(raw_params).__name__}"
        )

    resolved: list[dict[str, Any]] = []
    for raw in raw_params:
        param = _deref(raw, doc)
        if not isinstance(param, dict):
            raise ExtractionError(f"Malformed parameter: expected a mapping, got {param!r}")
        if not param.get("name"):
            raise ExtractionError("Malformed parameter: missing 'name'")
        resolved.append(param)
    return resolved


def _merge_parameters(
    path_params: list[dict[str, Any]],
    op_params: list[dict[str, Any]],
) -> list[dict[str, Any]]:
    """Merge path-level and operation-level parameters.

    Operation-level parameters override path-level parameters with the same
    name and location (``in`` field).
    """
    op_keys = {(p.get("name"), p.get("in")) for p in op_params}
    merged = [p for p in path_params if (p.get("name"), p.get("in")) not in op_keys]
    merged.extend(op_params)
    return merged


def _partition_parameters(params: list[dict[str, Any]]) -> ParameterGroups:
    """Bucket parameters by location.

    Parameters whose location is not one of path, query, header or formData
    are dropped on purpose: ``body`` feeds the request body, and ``cookie``
    or vendor locations are not documented as parameters.
    """
    buckets: dict[ParameterLocation, list[Parameter]] = {loc: [] for loc in ParameterLocation}

    for param in params:
        location = _LOCATIONS.get(str(param.get("in", "")))
        if location is None:
            continue

        # OpenAPI 3 moves type information into a nested schema object
        schema = param.get("schema") if isinstance(param.get("schema"), dict) else {}
        required = bool(param.get("required", False))
        # Path parameters are always required
        if location == ParameterLocation.PATH:
            required = True

        example = param.get("x-example")
        if example is None:
            example = param.get("example", schema.get("example"))

        buckets[location].append(
            Parameter(
                name=str(param["name"]),
                location=location,
                required=required,
                description=str(param.get("description") or ""),
                schema_type=_type_name(param.get("type") or schema.get("type")),
                schema_format=param.get("format") or schema.get("format"),
                default=param.get("default", schema.get("default")),
                enum_values=param.get("enum") or schema.get("enum"),
                example=example,
            )
        )

    return ParameterGroups(
        path=buckets[ParameterLocation.PATH],
        query=buckets[ParameterLocation.QUERY],
        header=buckets[ParameterLocation.HEADER],
        form_data=buckets[ParameterLocation.FORM_DATA],
    )


def _type_name(type_value: Any) -> str:
    """Handle OpenAPI 3.1 type arrays by returning the first non-null type."""
    if isinstance(type_value, list):
        non_null = [t for t in type_value if t != "null"]
        return str(non_null[0]) if non_null else "string"
    return str(type_value) if type_value else "string"


# --- Request bodies ---


def _extract_request_body(
    doc: SpecDocument,
    raw_op: dict[str, Any],
    body_param: Optional[dict[str, Any]],
    synthesizer: ExampleSynthesizer,
    key: str,
    warnings: list[ExtractionWarning],
) -> Optional[RequestBody]:
    """Extract the request body from either supported shape.

    The OpenAPI 3 ``requestBody`` object wins when present; otherwise a
    Swagger 2.0 ``in: body`` parameter is used.
    """
    raw_body = _deref(raw_op.get("requestBody"), doc)
    if isinstance(raw_body, dict):
        schema_raw, content_types = _payload_schema(raw_body)
        source = raw_body
    elif body_param is not None:
        schema_raw = body_param.get("schema")
        consumes = raw_op.get("consumes") or doc.raw.get("consumes") or []
        content_types = [str(ct) for ct in consumes]
        source = body_param
    else:
        return None

    schema = parse_schema(schema_raw) if schema_raw is not None else None
    example = None
    properties: list[BodyProperty] = []
    if schema is not None:
        try:
            properties = flatten_properties(schema, doc.definitions)
            example = synthesizer.synthesize(schema)
        except SpecdocsError as exc:
            warnings.append(_warn(key, exc, prefix="Could not generate request body example"))

    return RequestBody(
        required=bool(source.get("required", False)),
        description=str(source.get("description") or ""),
        content_types=content_types,
        schema=schema,
        properties=properties,
        examples=_declared_examples(source),
        example=example,
    )


def flatten_properties(
    schema: SchemaNode,
    definitions: Mapping[str, SchemaNode],
    prefix: str = "",
    active: tuple[str, ...] = (),
) -> list[BodyProperty]:
    """Flatten an object schema into rows, nested names in dot notation.

    A property that refers back to a definition already being flattened is
    listed but not expanded again.
    """
    if isinstance(schema, RefSchema):
        active = (*active, schema.name)
    node = resolve(schema, definitions)
    if not isinstance(node, ObjectSchema):
        return []

    rows: list[BodyProperty] = []
    for name, child in node.properties.items():
        full_name = f"{prefix}.{name}" if prefix else name
        recursive = isinstance(child, RefSchema) and child.name in active
        concrete = child if recursive else resolve(child, definitions)

        rows.append(
            BodyProperty(
                name=full_name,
                required=name in node.required,
                description=concrete.description or child.description or "",
                type=_node_type(concrete),
                format=getattr(concrete, "format", None),
                enum=getattr(concrete, "enum", None),
            )
        )
        if not recursive and isinstance(concrete, ObjectSchema) and concrete.properties:
            rows.extend(flatten_properties(child, definitions, full_name, active))
    return rows


def _node_type(node: SchemaNode) -> str:
    if isinstance(node, (UnknownSchema, RefSchema)):
        return "object" if isinstance(node, RefSchema) else "string"
    return node.kind


# --- Responses ---


def _extract_responses(
    doc: SpecDocument,
    path: str,
    method: HTTPMethod,
    raw_responses: Any,
    synthesizer: ExampleSynthesizer,
    key: str,
    warnings: list[ExtractionWarning],
) -> dict[str, Response]:
    """Extract every declared response, keyed by status code string.

    4xx/5xx responses get a contextual error example; others are
    synthesized from their schema. A failure while resolving or
    synthesizing one response is recorded as a warning and the response is
    kept without an example.
    """
    if raw_responses is None:
        return {}
    if not isinstance(raw_responses, dict):
        raise ExtractionError(
            f"'responses' must be a mapping, got {type(raw_responses).__name__}"
        )

    responses: dict[str, Response] = {}
    for code, raw in raw_responses.items():
        status_code = str(code)
        if status_code.startswith("x-"):
            continue

        try:
            raw = _deref(raw, doc)
        except SpecdocsError as exc:
            warnings.append(_warn(key, exc, status_code=status_code))
            responses[status_code] = Response(status_code=status_code)
            continue
        if not isinstance(raw, dict):
            raw = {}

        schema_raw, content_types = _payload_schema(raw)
        schema = parse_schema(schema_raw) if schema_raw is not None else None

        example = None
        try:
            if is_error_status(status_code):
                example = contextual_error_example(status_code, path, method.value)
            elif schema is not None:
                example = synthesizer.synthesize(schema)
        except SpecdocsError as exc:
            warnings.append(
                _warn(
                    key,
                    exc,
                    status_code=status_code,
                    prefix=f"Could not generate example for {status_code} response",
                )
            )

        responses[status_code] = Response(
            status_code=status_code,
            description=str(raw.get("description") or ""),
            content_types=content_types,
            schema=schema,
            headers=raw.get("headers") if isinstance(raw.get("headers"), dict) else {},
            examples=_declared_examples(raw),
            example=example,
        )
    return responses


def _payload_schema(raw: dict[str, Any]) -> tuple[Any, list[str]]:
    """Return ``(raw_schema, content_types)`` for a body or response object.

    Swagger 2.0 puts ``schema`` directly on the object; OpenAPI 3 nests it
    under ``content.<media-type>.schema``, and the first media type that
    declares one is used.
    """
    content = raw.get("content")
    content_types = list(content.keys()) if isinstance(content, dict) else []

    if raw.get("schema") is not None:
        return raw["schema"], content_types
    if isinstance(content, dict):
        for media in content.values():
            if isinstance(media, dict) and media.get("schema") is not None:
                return media["schema"], content_types
    return None, content_types


def _declared_examples(raw: dict[str, Any]) -> dict[str, Any]:
    """Collect examples the author wrote into the document.

    Handles ``examples`` maps (Swagger media-type maps and OpenAPI named
    Example Objects), a bare ``example``, and per-media-type examples.
    """
    examples: dict[str, Any] = {}
    declared = raw.get("examples")
    if isinstance(declared, dict):
        for name, value in declared.items():
            if isinstance(value, dict) and "value" in value:
                value = value["value"]
            examples[str(name)] = value
    if raw.get("example") is not None:
        examples.setdefault("default", raw["example"])

    content = raw.get("content")
    if isinstance(content, dict):
        for media_type, media in content.items():
            if isinstance(media, dict) and media.get("example") is not None:
                examples.setdefault(str(media_type), media["example"])
    return examples


def _extract_code_samples(raw_op: dict[str, Any]) -> dict[str, str]:
    """Read ``x-code-samples`` (or ``x-codeSamples``) into ``{lang: source}``."""
    samples = raw_op.get("x-code-samples") or raw_op.get("x-codeSamples") or []
    result: dict[str, str] = {}
    if not isinstance(samples, list):
        return result
    for sample in samples:
        if isinstance(sample, dict) and sample.get("lang") and sample.get("source"):
            result[str(sample["lang"]).lower()] = str(sample["source"])
    return result


def _warn(
    location: str,
    exc: Exception,
    status_code: Optional[str] = None,
    prefix: Optional[str] = None,
) -> ExtractionWarning:
    """Log *exc* and turn it into an :class:`~specdocs.models.ExtractionWarning`."""
    message = f"{prefix}: {exc}" if prefix else str(exc)
    warning = ExtractionWarning(
        location=location,
        message=message,
        status_code=status_code,
        error_type=type(exc).__name__,
    )
    logger.warning("%s", warning)
    return warning
