"""Compare two loaded API descriptions.

:func:`diff` keys operations by ``(VERB, path)`` and schemas by name, and
compares the raw payloads of both documents, so any edit to an operation
or definition is detected even when it does not affect the extracted
endpoint model. :func:`diff_texts` adds loading, and
:func:`fail_safe_summary` gives the summary to publish when loading fails.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Optional

from specdocs.diff.classifier import classify
from specdocs.exceptions import DiffFailure, SpecdocsError
from specdocs.models import (
    ChangeKind,
    ChangeReport,
    EndpointChange,
    EndpointChanges,
    FieldChange,
    HTTPMethod,
    MetadataChanges,
    SchemaChange,
    SchemaChanges,
    SpecDocument,
)
from specdocs.parser.loader import load

logger = logging.getLogger(__name__)

_HTTP_METHODS = frozenset(m.value for m in HTTPMethod)

# Facets reported first, in this order; other differing keys follow sorted.
OPERATION_FACETS = (
    "operationId",
    "summary",
    "description",
    "tags",
    "parameters",
    "requestBody",
    "responses",
    "deprecated",
    "security",
)

_MISSING = object()


def diff(old: SpecDocument, new: SpecDocument) -> ChangeReport:
    """Return the :class:`~specdocs.models.ChangeReport` from *old* to *new*.

    ``diff(doc, doc)`` is always empty.
    """
    old_ops = _index_operations(old)
    new_ops = _index_operations(new)

    endpoints = EndpointChanges(
        added=[
            _endpoint_record(ChangeKind.ENDPOINT_ADDED, key, op)
            for key, op in new_ops.items()
            if key not in old_ops
        ],
        removed=[
            _endpoint_record(ChangeKind.ENDPOINT_REMOVED, key, op)
            for key, op in old_ops.items()
            if key not in new_ops
        ],
        modified=[
            _endpoint_record(
                ChangeKind.ENDPOINT_MODIFIED,
                key,
                new_ops[key],
                changes=operation_changes(op, new_ops[key]),
            )
            for key, op in old_ops.items()
            if key in new_ops and not same_value(op, new_ops[key])
        ],
    )

    old_defs = old.raw_definitions
    new_defs = new.raw_definitions
    schemas = SchemaChanges(
        added=[
            SchemaChange(kind=ChangeKind.SCHEMA_ADDED, name=name)
            for name in new_defs
            if name not in old_defs
        ],
        removed=[
            SchemaChange(kind=ChangeKind.SCHEMA_REMOVED, name=name)
            for name in old_defs
            if name not in new_defs
        ],
        modified=[
            SchemaChange(
                kind=ChangeKind.SCHEMA_MODIFIED,
                name=name,
                changes=_differing_keys(schema, new_defs[name]),
            )
            for name, schema in old_defs.items()
            if name in new_defs and not same_value(schema, new_defs[name])
        ],
    )

    report = ChangeReport(
        endpoints=endpoints,
        schemas=schemas,
        metadata=MetadataChanges(
            title=FieldChange(old=old.info.title, new=new.info.title),
            version=FieldChange(old=old.info.version, new=new.info.version),
        ),
        breaking=classify(endpoints, schemas),
    )
    logger.debug(
        "Diff: %d/%d/%d endpoints added/removed/modified, %d breaking",
        len(endpoints.added),
        len(endpoints.removed),
        len(endpoints.modified),
        len(report.breaking),
    )
    return report


def diff_texts(
    old_text: str,
    new_text: str,
    old_source: str = "old",
    new_source: str = "new",
) -> ChangeReport:
    """Load two documents and diff them.

    Raises:
        DiffFailure: If either document fails to load. ``which`` names the
            document (``"old"`` or ``"new"``).
    """
    try:
        old = load(old_text, source=old_source)
    except SpecdocsError as exc:
        raise DiffFailure("old", exc) from exc
    try:
        new = load(new_text, source=new_source)
    except SpecdocsError as exc:
        raise DiffFailure("new", exc) from exc
    return diff(old, new)


def fail_safe_summary(
    error: Exception, timestamp: Optional[datetime] = None
) -> dict[str, Any]:
    """Summary to publish when a diff could not be computed.

    Downstream automation must treat a failed diff as "something changed,
    breaking status unknown", so ``hasChanges`` is true and
    ``hasBreakingChanges`` false.
    """
    when = timestamp or datetime.now(timezone.utc)
    return {
        "timestamp": when.isoformat(),
        "hasChanges": True,
        "hasBreakingChanges": False,
        "error": str(error),
        "message": "Change detection failed, assuming changes exist",
    }


def operation_changes(old_op: Any, new_op: Any) -> list[str]:
    """Return the facets that differ between two raw operation objects."""
    if not isinstance(old_op, dict) or not isinstance(new_op, dict):
        return [] if same_value(old_op, new_op) else ["operation"]

    differing = set(_differing_keys(old_op, new_op))
    ordered = [facet for facet in OPERATION_FACETS if facet in differing]
    ordered.extend(sorted(differing.difference(OPERATION_FACETS)))
    return ordered


def same_value(old: Any, new: Any) -> bool:
    """Structural equality that tells booleans apart from numbers.

    ``example: 1`` and ``example: true`` differ even though ``True == 1``.
    Integers and floats with the same value compare equal, as they do once
    serialised to JSON.
    """
    if isinstance(old, bool) or isinstance(new, bool):
        return type(old) is type(new) and old == new
    if isinstance(old, dict) and isinstance(new, dict):
        return old.keys() == new.keys() and all(same_value(old[k], new[k]) for k in old)
    if isinstance(old, list) and isinstance(new, list):
        return len(old) == len(new) and all(same_value(a, b) for a, b in zip(old, new))
    if isinstance(old, (dict, list)) or isinstance(new, (dict, list)):
        return False
    return old == new


def _differing_keys(old: Any, new: Any) -> list[str]:
    if not isinstance(old, dict) or not isinstance(new, dict):
        return [] if same_value(old, new) else ["schema"]
    keys = set(old) | set(new)
    return sorted(
        str(k) for k in keys if not same_value(old.get(k, _MISSING), new.get(k, _MISSING))
    )


def _index_operations(doc: SpecDocument) -> dict[tuple[str, str], Any]:
    """Map ``(VERB, path)`` to the raw operation, in document order."""
    index: dict[tuple[str, str], Any] = {}
    for path, path_item in doc.paths.items():
        if not isinstance(path_item, dict):
            continue
        for method, op in path_item.items():
            if str(method).lower() in _HTTP_METHODS:
                index[(str(method).upper(), str(path))] = op
    return index


def _endpoint_record(
    kind: ChangeKind,
    key: tuple[str, str],
    op: Any,
    changes: Optional[list[str]] = None,
) -> EndpointChange:
    method, path = key
    op = op if isinstance(op, dict) else {}
    operation_id = op.get("operationId")
    summary = op.get("summary")
    return EndpointChange(
        kind=kind,
        method=method,
        path=path,
        operation_id=str(operation_id) if operation_id is not None else None,
        summary=str(summary) if summary is not None else None,
        changes=changes or [],
    )
