"""Tests for specdocs.parser.loader."""

from __future__ import annotations

import json

import pytest

from specdocs.exceptions import SpecParseError, SpecValidationError
from specdocs.models import ObjectSchema, RefSchema
from specdocs.parser.loader import load, parse_content, validate_spec


# ---------------------------------------------------------------------------
# parse_content
# ---------------------------------------------------------------------------


class TestParseContent:
    """JSON-first parsing with YAML fallback."""

    def test_parses_json(self) -> None:
        assert parse_content('{"openapi": "3.0.0"}') == {"openapi": "3.0.0"}

    def test_falls_back_to_yaml(self) -> None:
        result = parse_content("swagger: '2.0'\npaths:\n  /a: {}\n")
        assert result == {"swagger": "2.0", "paths": {"/a": {}}}

    def test_empty_content_raises(self) -> None:
        with pytest.raises(SpecParseError, match="empty"):
            parse_content("   \n", source="blank.yaml")

    def test_invalid_syntax_raises(self) -> None:
        with pytest.raises(SpecParseError, match="JSON or YAML"):
            parse_content("{not: [valid", source="broken.yaml")

    def test_non_mapping_raises(self) -> None:
        with pytest.raises(SpecParseError, match="must be a JSON/YAML object"):
            parse_content("- just\n- a list\n")


# ---------------------------------------------------------------------------
# validate_spec
# ---------------------------------------------------------------------------


class TestValidateSpec:
    """Structural checks: version marker and non-empty paths."""

    def test_swagger_marker(self) -> None:
        assert validate_spec({"swagger": "2.0", "paths": {"/a": {}}}) == ("swagger", "2.0")

    def test_openapi_marker(self) -> None:
        assert validate_spec({"openapi": "3.1.0", "paths": {"/a": {}}}) == ("openapi", "3.1.0")

    def test_missing_marker_names_field(self) -> None:
        with pytest.raises(SpecValidationError) as exc_info:
            validate_spec({"paths": {"/a": {}}}, source="v1.yaml")
        assert exc_info.value.field == "swagger/openapi"
        assert exc_info.value.source == "v1.yaml"

    @pytest.mark.parametrize("paths", [None, {}, ["/a"]])
    def test_missing_or_empty_paths(self, paths: object) -> None:
        spec = {"openapi": "3.0.0"}
        if paths is not None:
            spec["paths"] = paths
        with pytest.raises(SpecValidationError) as exc_info:
            validate_spec(spec)
        assert exc_info.value.field == "paths"

    def test_validation_error_exit_code(self) -> None:
        with pytest.raises(SpecValidationError) as exc_info:
            validate_spec({})
        assert exc_info.value.exit_code == 8


# ---------------------------------------------------------------------------
# load
# ---------------------------------------------------------------------------


class TestLoad:
    """Full load into a SpecDocument."""

    def test_swagger_document(self, swagger_text: str) -> None:
        doc = load(swagger_text, source="swagger_hosting.yaml")

        assert doc.source == "swagger_hosting.yaml"
        assert doc.spec_format == "swagger"
        assert doc.spec_version == "2.0"
        assert doc.info.title == "Hosting API"
        assert doc.info.version == "1.2.0"
        assert doc.info.host == "api.example.com"
        assert doc.info.base_path == "/v1"
        assert doc.info.servers == ["https://api.example.com/v1"]
        assert list(doc.paths) == ["/accounts", "/accounts/{account_id}", "/sites", "/status"]
        assert doc.security == [{"basicAuth": []}]

    def test_definitions_are_parsed(self, swagger_doc) -> None:  # noqa: ANN001
        account = swagger_doc.definitions["Account"]
        assert isinstance(account, ObjectSchema)
        assert account.required == ("id", "name")
        assert account.properties["nickname"].nullable is True

        site = swagger_doc.definitions["Site"]
        assert isinstance(site, ObjectSchema)
        assert isinstance(site.properties["account"], RefSchema)
        assert site.properties["account"].name == "AccountRef"

    def test_raw_definitions_kept(self, swagger_doc) -> None:  # noqa: ANN001
        assert swagger_doc.raw_definitions["AccountUpdate"] == {
            "type": "object",
            "properties": {"name": {"type": "string"}},
        }

    def test_tags(self, swagger_doc) -> None:  # noqa: ANN001
        assert swagger_doc.tag_description("accounts") == "Account management"
        assert swagger_doc.tag_description("unknown") == ""

    def test_openapi_servers_and_components(self, openapi_text: str) -> None:
        doc = load(openapi_text)

        assert doc.spec_format == "openapi"
        assert doc.info.servers == ["https://api.example.com/v2"]
        assert set(doc.definitions) == {"NewInstall", "Install"}

    def test_json_and_yaml_give_same_document(self, swagger_doc, swagger_text: str) -> None:  # noqa: ANN001
        as_json = json.dumps(parse_content(swagger_text))
        assert load(as_json, source="swagger_hosting.yaml") == swagger_doc

    def test_missing_info_uses_defaults(self) -> None:
        doc = load('{"openapi": "3.0.0", "paths": {"/a": {}}}')
        assert doc.info.title == "Untitled API"
        assert doc.info.version == "0.0.0"

    def test_parse_error_propagates(self) -> None:
        with pytest.raises(SpecParseError):
            load("")


# ---------------------------------------------------------------------------
# YAML scalars that are not strings
# ---------------------------------------------------------------------------

UNQUOTED_SCALARS = """\
swagger: "2.0"
info:
  title: 2024
  version: 1.0
  description: 2024
paths:
  /things:
    get:
      responses:
        200:
          description: OK
definitions:
  Thing:
    type: object
    description: yes
    properties:
      count:
        type: integer
        description: 42
      created:
        type: string
        format: 2024-01-01
"""


class TestNonStringScalars:
    """Unquoted YAML values arrive as int, float, bool or date."""

    def test_info_fields_become_strings(self) -> None:
        doc = load(UNQUOTED_SCALARS)
        assert doc.info.title == "2024"
        assert doc.info.version == "1.0"
        assert doc.info.description == "2024"

    def test_schema_fields_become_strings(self) -> None:
        thing = load(UNQUOTED_SCALARS).definitions["Thing"]
        assert isinstance(thing, ObjectSchema)
        assert thing.description == "True"
        assert thing.properties["count"].description == "42"
        assert thing.properties["created"].format == "2024-01-01"

    def test_non_string_path_keys(self) -> None:
        doc = load('openapi: "3.0.0"\npaths:\n  404:\n    get: {}\n')
        assert list(doc.paths) == ["404"]

    def test_unrepresentable_value_is_parse_error(self, monkeypatch: pytest.MonkeyPatch) -> None:
        from specdocs.models import ApiInfo

        monkeypatch.setattr(
            "specdocs.parser.loader._extract_info", lambda spec: ApiInfo(title=["not", "text"])
        )
        with pytest.raises(SpecParseError, match="has invalid content"):
            load(UNQUOTED_SCALARS, source="things.yaml")
