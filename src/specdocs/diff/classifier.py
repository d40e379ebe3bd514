"""Classify removal records as breaking changes.

Only removals are classified: a removed endpoint is ``high`` severity, a
removed schema ``medium``. Changes inside an operation (new required
parameters, narrowed types) are not inspected.
"""

from __future__ import annotations

from specdocs.models import (
    BreakingChange,
    EndpointChanges,
    SchemaChanges,
    Severity,
)


def classify(endpoints: EndpointChanges, schemas: SchemaChanges) -> list[BreakingChange]:
    """Return the breaking changes implied by *endpoints* and *schemas*.

    Endpoint removals come first, in the order they were recorded, then
    schema removals.
    """
    breaking = [
        BreakingChange(
            type="removed_endpoint",
            severity=Severity.HIGH,
            description=f"Endpoint {record.method} {record.path} was removed",
            record=record,
        )
        for record in endpoints.removed
    ]
    breaking.extend(
        BreakingChange(
            type="removed_schema",
            severity=Severity.MEDIUM,
            description=f"Schema {record.name} was removed",
            record=record,
        )
        for record in schemas.removed
    )
    return breaking
