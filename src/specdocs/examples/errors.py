"""Contextual error-response examples for 4xx and 5xx status codes.

Error responses in API descriptions rarely carry a useful schema, and a
generic ``{"message": "Bad request"}`` is a poor example on a page that
documents creating a site. :func:`contextual_error_example` picks an example
body by matching the endpoint path against known resource categories and the
HTTP verb:

* ``400`` responses are resource- and verb-specific when a category matches,
  falling back to the category's ``GET`` entry and then to a generic body.
* Other error codes use a per-status generic body.
* Unlisted codes use ``{"message": "An error occurred"}``.

Returned values are fresh copies; callers may mutate them.
"""

from __future__ import annotations

import copy
from typing import Any

GENERIC_ERROR: dict[str, Any] = {"message": "An error occurred"}


def _missing_field(resource: str, field: str, message: str) -> dict[str, Any]:
    return {
        "resource": resource,
        "field": field,
        "type": "missing_field",
        "code": "required",
        "message": message,
    }


def _invalid_value(resource: str, field: str, code: str, message: str) -> dict[str, Any]:
    return {
        "resource": resource,
        "field": field,
        "type": "invalid_value",
        "code": code,
        "message": message,
    }


_BAD_REQUEST: dict[str, dict[str, dict[str, Any]]] = {
    "account": {
        "GET": {"message": "Invalid account ID format"},
        "POST": {
            "message": "Account name is required",
            "errors": [_missing_field("Account", "name", "Account name cannot be empty")],
        },
    },
    "account_user": {
        "GET": {"message": "Invalid user ID format"},
        "POST": {
            "message": "User email is required",
            "errors": [_missing_field("AccountUser", "email", "Email address is required")],
        },
        "PATCH": {
            "message": "Invalid role specified",
            "errors": [
                _invalid_value(
                    "AccountUser",
                    "roles",
                    "invalid_role",
                    "Role must be one of: owner, full, full,billing, partial, partial,billing",
                )
            ],
        },
    },
    "site": {
        "GET": {"message": "Invalid site ID format"},
        "POST": {
            "message": "Site name is required",
            "errors": [_missing_field("Site", "name", "Site name cannot be empty")],
        },
        "PATCH": {
            "message": "Invalid site name",
            "errors": [
                _invalid_value(
                    "Site", "name", "too_long", "Site name is too long (maximum is 40 characters)"
                )
            ],
        },
    },
    "install": {
        "GET": {"message": "Invalid install ID format"},
        "POST": {
            "message": "Install name is required",
            "errors": [
                _missing_field("Installation", "name", "Installation name cannot be empty")
            ],
        },
    },
    "domain": {
        "GET": {"message": "Invalid domain ID format"},
        "POST": {
            "message": "Domain name is required",
            "errors": [_missing_field("Domain", "name", "Domain name cannot be empty")],
        },
    },
    "ssh_key": {
        "POST": {
            "message": "Invalid SSH key format",
            "errors": [
                _invalid_value(
                    "SshKey",
                    "public_key",
                    "invalid_format",
                    "SSH key must be in valid OpenSSH format",
                )
            ],
        },
    },
    "backup": {
        "POST": {
            "message": "Backup description is required",
            "errors": [
                _missing_field("Backup", "description", "Backup description cannot be empty")
            ],
        },
    },
    "cache": {
        "POST": {
            "message": "Invalid cache type",
            "errors": [
                _invalid_value(
                    "Cache", "type", "invalid_type", "Cache type must be one of: object, page, cdn"
                )
            ],
        },
    },
}

_BAD_REQUEST_DEFAULT: dict[str, Any] = {"message": "Bad request - invalid parameters"}

_BY_STATUS: dict[str, dict[str, Any]] = {
    "401": {"message": "Authentication required"},
    "403": {"message": "Insufficient permissions to access this resource"},
    "404": {"message": "Resource not found"},
    "429": {"message": "Rate limit exceeded - too many requests"},
    "500": {"message": "Internal server error - please try again later"},
    "503": {"message": "Service temporarily unavailable"},
}


def is_error_status(status_code: str) -> bool:
    """Return ``True`` for 4xx and 5xx codes (including ``4XX`` wildcards)."""
    return status_code[:1] in ("4", "5")


def resource_category(path: str) -> str:
    """Classify *path* into one of the known resource categories, or ``"default"``.

    Nested resources are checked before their parents, so
    ``/installs/{id}/backups`` is a ``backup`` path rather than an
    ``install`` path.
    """
    if "/accounts" in path and "/account_users" in path:
        return "account_user"
    if "/accounts" in path:
        return "account"
    if "/sites" in path:
        return "site"
    if "/installs" in path and "/domains" in path:
        return "domain"
    if "/installs" in path and "/backups" in path:
        return "backup"
    if "/installs" in path and "/purge_cache" in path:
        return "cache"
    if "/installs" in path:
        return "install"
    if "/ssh_keys" in path:
        return "ssh_key"
    return "default"


def contextual_error_example(status_code: str, path: str, method: str) -> dict[str, Any]:
    """Return an example error body for an endpoint.

    Args:
        status_code: The response status code, e.g. ``"400"``.
        path: The endpoint path template, e.g. ``"/sites/{site_id}"``.
        method: The HTTP verb, in any case.

    Returns:
        A new dictionary with at least a ``message`` key.
    """
    if status_code == "400":
        by_method = _BAD_REQUEST.get(resource_category(path), {})
        example = by_method.get(method.upper()) or by_method.get("GET") or _BAD_REQUEST_DEFAULT
    else:
        example = _BY_STATUS.get(status_code, GENERIC_ERROR)
    return copy.deepcopy(example)
