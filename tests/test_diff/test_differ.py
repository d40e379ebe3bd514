"""Tests for specdocs.diff.differ."""

from __future__ import annotations

import copy
import json
from datetime import datetime, timezone
from typing import Any

import pytest

from specdocs.diff import diff, diff_texts, fail_safe_summary, operation_changes
from specdocs.diff.differ import same_value
from specdocs.exceptions import DiffFailure, SpecParseError, SpecValidationError
from specdocs.models import ChangeKind, Severity
from specdocs.parser import load, parse_content


def _load(raw: dict[str, Any]):  # noqa: ANN202
    return load(json.dumps(raw))


@pytest.fixture
def swagger_raw(swagger_text: str) -> dict[str, Any]:
    return parse_content(swagger_text)


# ---------------------------------------------------------------------------
# diff
# ---------------------------------------------------------------------------


class TestDiffIdentity:
    def test_same_document_has_no_changes(self, swagger_doc) -> None:  # noqa: ANN001
        report = diff(swagger_doc, swagger_doc)
        assert report.has_changes is False
        assert report.has_breaking_changes is False
        assert report.endpoints.added == []
        assert report.schemas.modified == []

    def test_equal_copies_have_no_changes(self, swagger_raw: dict[str, Any]) -> None:
        report = diff(_load(swagger_raw), _load(copy.deepcopy(swagger_raw)))
        assert report.has_changes is False


class TestEndpointChanges:
    """Operations keyed by (VERB, path)."""

    def test_removed_endpoint_is_high_severity_breaking(self, swagger_raw: dict[str, Any]) -> None:
        new = copy.deepcopy(swagger_raw)
        del new["paths"]["/accounts/{account_id}"]["get"]

        report = diff(_load(swagger_raw), _load(new))

        assert [r.key for r in report.endpoints.removed] == ["GET /accounts/{account_id}"]
        removed = report.endpoints.removed[0]
        assert removed.kind == ChangeKind.ENDPOINT_REMOVED
        assert removed.operation_id == "getAccount"
        assert removed.summary == "Get an account by ID"

        assert len(report.breaking) == 1
        breaking = report.breaking[0]
        assert breaking.type == "removed_endpoint"
        assert breaking.severity == Severity.HIGH
        assert breaking.description == "Endpoint GET /accounts/{account_id} was removed"
        assert report.has_breaking_changes is True

    def test_added_endpoint_not_breaking(self, swagger_raw: dict[str, Any]) -> None:
        new = copy.deepcopy(swagger_raw)
        new["paths"]["/sites"]["get"] = {"operationId": "listSites", "responses": {}}

        report = diff(_load(swagger_raw), _load(new))

        assert [r.key for r in report.endpoints.added] == ["GET /sites"]
        assert report.endpoints.added[0].operation_id == "listSites"
        assert report.has_changes is True
        assert report.has_breaking_changes is False

    def test_removed_path_removes_every_verb(self, swagger_raw: dict[str, Any]) -> None:
        new = copy.deepcopy(swagger_raw)
        del new["paths"]["/accounts/{account_id}"]

        report = diff(_load(swagger_raw), _load(new))

        assert [r.key for r in report.endpoints.removed] == [
            "GET /accounts/{account_id}",
            "PATCH /accounts/{account_id}",
        ]

    def test_modified_responses_facet(self, swagger_raw: dict[str, Any]) -> None:
        new = copy.deepcopy(swagger_raw)
        new["paths"]["/accounts"]["get"]["responses"]["200"]["description"] = "Accounts page"

        report = diff(_load(swagger_raw), _load(new))

        assert len(report.endpoints.modified) == 1
        modified = report.endpoints.modified[0]
        assert modified.key == "GET /accounts"
        assert modified.changes == ["responses"]
        assert report.breaking == []

    def test_path_level_keys_do_not_count_as_endpoints(self, swagger_raw: dict[str, Any]) -> None:
        new = copy.deepcopy(swagger_raw)
        new["paths"]["/accounts"]["x-internal"] = True

        assert diff(_load(swagger_raw), _load(new)).has_changes is False


class TestOperationChanges:
    def test_fixed_facet_order(self) -> None:
        old = {"summary": "a", "responses": {}, "tags": ["x"], "operationId": "a"}
        new = {"summary": "b", "responses": {"200": {}}, "tags": ["y"], "operationId": "b"}
        assert operation_changes(old, new) == ["operationId", "summary", "tags", "responses"]

    def test_other_keys_sorted_after_known_facets(self) -> None:
        old = {"deprecated": False}
        new = {"deprecated": True, "x-stability": "beta", "consumes": ["text/plain"]}
        assert operation_changes(old, new) == ["deprecated", "consumes", "x-stability"]

    def test_added_and_removed_keys(self) -> None:
        assert operation_changes({"security": []}, {"requestBody": {}}) == [
            "requestBody",
            "security",
        ]

    def test_equal_operations(self) -> None:
        assert operation_changes({"summary": "a"}, {"summary": "a"}) == []


class TestSchemaChanges:
    def test_removed_schema_is_medium_severity(self, swagger_raw: dict[str, Any]) -> None:
        new = copy.deepcopy(swagger_raw)
        del new["definitions"]["AccountRef"]

        report = diff(_load(swagger_raw), _load(new))

        assert [s.name for s in report.schemas.removed] == ["AccountRef"]
        assert [(b.type, b.severity) for b in report.breaking] == [
            ("removed_schema", Severity.MEDIUM)
        ]
        assert report.breaking[0].description == "Schema AccountRef was removed"

    def test_added_and_modified_schemas(self, swagger_raw: dict[str, Any]) -> None:
        new = copy.deepcopy(swagger_raw)
        new["definitions"]["Backup"] = {"type": "object"}
        new["definitions"]["Account"]["required"] = ["id"]
        new["definitions"]["Account"]["description"] = "A billing account"

        report = diff(_load(swagger_raw), _load(new))

        assert [s.name for s in report.schemas.added] == ["Backup"]
        assert [(s.name, s.changes) for s in report.schemas.modified] == [
            ("Account", ["description", "required"])
        ]
        assert report.has_breaking_changes is False

    def test_components_schemas_compared(self, openapi_text: str) -> None:
        old_raw = parse_content(openapi_text)
        new_raw = copy.deepcopy(old_raw)
        del new_raw["components"]["schemas"]["Install"]

        report = diff(_load(old_raw), _load(new_raw))
        assert [s.name for s in report.schemas.removed] == ["Install"]


class TestTypeStrictComparison:
    def test_boolean_replacing_integer_is_a_change(self, swagger_raw: dict[str, Any]) -> None:
        old = copy.deepcopy(swagger_raw)
        new = copy.deepcopy(swagger_raw)
        old["definitions"]["AccountRef"]["example"] = 1
        new["definitions"]["AccountRef"]["example"] = True

        report = diff(_load(old), _load(new))

        assert report.has_changes is True
        assert [(s.name, s.changes) for s in report.schemas.modified] == [
            ("AccountRef", ["example"])
        ]

    def test_boolean_in_operation_is_a_change(self, swagger_raw: dict[str, Any]) -> None:
        old = copy.deepcopy(swagger_raw)
        new = copy.deepcopy(swagger_raw)
        old["paths"]["/status"]["get"]["deprecated"] = 0
        new["paths"]["/status"]["get"]["deprecated"] = False

        report = diff(_load(old), _load(new))

        assert [(e.key, e.changes) for e in report.endpoints.modified] == [
            ("GET /status", ["deprecated"])
        ]

    @pytest.mark.parametrize(
        "old, new, expected",
        [
            (1, 1.0, True),
            (1, True, False),
            (0, False, False),
            ({"a": [1, {"b": True}]}, {"a": [1, {"b": True}]}, True),
            ({"a": [1, {"b": 1}]}, {"a": [1, {"b": True}]}, False),
            ([1, 2], [1, 2, 3], False),
            ({"a": 1}, [1], False),
        ],
    )
    def test_same_value(self, old: Any, new: Any, expected: bool) -> None:
        assert same_value(old, new) is expected


class TestMetadata:
    def test_version_bump_counts_as_change(self, swagger_raw: dict[str, Any]) -> None:
        new = copy.deepcopy(swagger_raw)
        new["info"]["version"] = "1.3.0"

        report = diff(_load(swagger_raw), _load(new))

        assert report.has_changes is True
        assert report.metadata.version.old == "1.2.0"
        assert report.metadata.version.new == "1.3.0"
        assert report.metadata.version.changed is True
        assert report.metadata.title.changed is False


# ---------------------------------------------------------------------------
# Summary
# ---------------------------------------------------------------------------


class TestSummary:
    def test_summary_counts_and_details(self, swagger_raw: dict[str, Any]) -> None:
        new = copy.deepcopy(swagger_raw)
        del new["paths"]["/status"]
        new["paths"]["/sites"]["post"]["summary"] = "Create a site"
        when = datetime(2024, 5, 1, tzinfo=timezone.utc)

        summary = diff(_load(swagger_raw), _load(new)).summary(timestamp=when)

        assert summary["timestamp"] == "2024-05-01T00:00:00+00:00"
        assert summary["hasChanges"] is True
        assert summary["hasBreakingChanges"] is True
        assert summary["summary"] == {
            "endpoints": {"added": 0, "modified": 1, "removed": 1},
            "schemas": {"added": 0, "modified": 0, "removed": 0},
            "breakingChanges": 1,
        }
        modified = summary["details"]["endpoints"]["modified"][0]
        assert modified["path"] == "/sites"
        assert modified["changes"] == ["summary"]
        assert summary["details"]["breaking"][0]["severity"] == "high"
        json.dumps(summary)


# ---------------------------------------------------------------------------
# diff_texts / fail-safe
# ---------------------------------------------------------------------------


class TestDiffTexts:
    def test_loads_and_diffs(self, swagger_text: str) -> None:
        report = diff_texts(swagger_text, swagger_text)
        assert report.has_changes is False

    def test_old_document_failure(self, swagger_text: str) -> None:
        with pytest.raises(DiffFailure) as exc_info:
            diff_texts("", swagger_text)
        assert exc_info.value.which == "old"
        assert isinstance(exc_info.value.cause, SpecParseError)
        assert exc_info.value.exit_code == 11

    def test_new_document_failure(self, swagger_text: str) -> None:
        with pytest.raises(DiffFailure) as exc_info:
            diff_texts(swagger_text, '{"info": {}}', new_source="next.json")
        assert exc_info.value.which == "new"
        assert isinstance(exc_info.value.cause, SpecValidationError)
        assert "next.json" in str(exc_info.value)


    def test_non_string_info_loads(self, swagger_text: str) -> None:
        raw = parse_content(swagger_text)
        raw["info"]["description"] = 2024

        report = diff_texts(swagger_text, json.dumps(raw))
        assert report.has_changes is False

    def test_unrepresentable_content_is_diff_failure(
        self, swagger_text: str, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        from specdocs.models import ApiInfo
        from specdocs.parser import loader

        real_extract_info = loader._extract_info
        seen: list[dict[str, Any]] = []

        def info_failing_on_second_document(spec: dict[str, Any]) -> ApiInfo:
            seen.append(spec)
            if len(seen) == 2:
                return ApiInfo(title={"not": "text"})
            return real_extract_info(spec)

        monkeypatch.setattr(loader, "_extract_info", info_failing_on_second_document)

        with pytest.raises(DiffFailure) as exc_info:
            diff_texts(swagger_text, swagger_text)
        assert exc_info.value.which == "new"
        assert isinstance(exc_info.value.cause, SpecParseError)


class TestFailSafeSummary:
    def test_assumes_changes_without_breaking(self) -> None:
        summary = fail_safe_summary(RuntimeError("boom"))
        assert summary["hasChanges"] is True
        assert summary["hasBreakingChanges"] is False
        assert summary["error"] == "boom"
        assert "assuming changes exist" in summary["message"]
