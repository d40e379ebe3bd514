"""Tests for specdocs.examples.errors."""

from __future__ import annotations

import pytest

from specdocs.examples.errors import (
    GENERIC_ERROR,
    contextual_error_example,
    is_error_status,
    resource_category,
)


class TestIsErrorStatus:
    @pytest.mark.parametrize("code", ["400", "404", "4XX", "500", "503"])
    def test_error_codes(self, code: str) -> None:
        assert is_error_status(code) is True

    @pytest.mark.parametrize("code", ["200", "201", "302", "default", ""])
    def test_non_error_codes(self, code: str) -> None:
        assert is_error_status(code) is False


class TestResourceCategory:
    @pytest.mark.parametrize(
        "path, expected",
        [
            ("/accounts", "account"),
            ("/accounts/{account_id}/account_users/{user_id}", "account_user"),
            ("/sites/{site_id}", "site"),
            ("/installs", "install"),
            ("/installs/{install_id}/domains", "domain"),
            ("/installs/{install_id}/backups", "backup"),
            ("/installs/{install_id}/purge_cache", "cache"),
            ("/ssh_keys", "ssh_key"),
            ("/status", "default"),
        ],
    )
    def test_classification(self, path: str, expected: str) -> None:
        assert resource_category(path) == expected


class TestContextualErrorExample:
    """400 bodies depend on resource and verb; other codes on status only."""

    def test_bad_request_by_resource_and_method(self) -> None:
        example = contextual_error_example("400", "/sites", "post")
        assert example["message"] == "Site name is required"
        assert example["errors"] == [
            {
                "resource": "Site",
                "field": "name",
                "type": "missing_field",
                "code": "required",
                "message": "Site name cannot be empty",
            }
        ]

    def test_bad_request_falls_back_to_get_entry(self) -> None:
        example = contextual_error_example("400", "/accounts/{account_id}", "DELETE")
        assert example == {"message": "Invalid account ID format"}

    def test_bad_request_without_get_entry(self) -> None:
        example = contextual_error_example("400", "/ssh_keys/{ssh_key_id}", "DELETE")
        assert example == {"message": "Bad request - invalid parameters"}

    def test_bad_request_unknown_resource(self) -> None:
        assert contextual_error_example("400", "/status", "GET") == {
            "message": "Bad request - invalid parameters"
        }

    @pytest.mark.parametrize(
        "code, message",
        [
            ("401", "Authentication required"),
            ("403", "Insufficient permissions to access this resource"),
            ("404", "Resource not found"),
            ("429", "Rate limit exceeded - too many requests"),
            ("500", "Internal server error - please try again later"),
            ("503", "Service temporarily unavailable"),
        ],
    )
    def test_status_specific(self, code: str, message: str) -> None:
        assert contextual_error_example(code, "/sites", "GET") == {"message": message}

    def test_unlisted_code_is_generic(self) -> None:
        assert contextual_error_example("418", "/sites", "GET") == GENERIC_ERROR

    def test_returns_fresh_copy(self) -> None:
        first = contextual_error_example("400", "/sites", "POST")
        first["errors"][0]["field"] = "mutated"
        second = contextual_error_example("400", "/sites", "POST")
        assert second["errors"][0]["field"] == "name"
