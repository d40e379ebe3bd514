"""Exception hierarchy for specdocs.

All exceptions inherit from :class:`SpecdocsError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`specdocs.exit_codes`.
The top-level error handler in :func:`specdocs.app.main` catches
``SpecdocsError`` and exits with the appropriate code, while unexpected
exceptions produce a crash log and exit with :data:`EXIT_GENERIC_FAILURE`.

Subclass hierarchy::

    SpecdocsError (exit 1)
    +-- SpecParseError            (exit 7)
    +-- SpecValidationError       (exit 8)
    +-- SchemaResolutionError     (exit 9)
    |   +-- CyclicReferenceError  (exit 9)
    +-- ExtractionError           (exit 1)
    +-- DiffFailure               (exit 11)
    +-- ConfigError               (exit 1)
"""

from __future__ import annotations

from typing import Optional

from specdocs.exit_codes import (
    EXIT_DIFF_FAILURE,
    EXIT_GENERIC_FAILURE,
    EXIT_SCHEMA_RESOLUTION_ERROR,
    EXIT_SPEC_PARSE_ERROR,
    EXIT_SPEC_VALIDATION_ERROR,
)


class SpecdocsError(Exception):
    """Base exception for all specdocs errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`specdocs.exit_codes`. The entry point catches
    this exception type and calls ``sys.exit(exc.exit_code)``.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class SpecParseError(SpecdocsError):
    """Raised when the document text is not valid JSON or YAML."""

    exit_code = EXIT_SPEC_PARSE_ERROR


class SpecValidationError(SpecdocsError):
    """Raised when a parsed document is missing a required top-level field.

    Args:
        field: The missing field (``"swagger/openapi"`` or ``"paths"``).
        source: Name of the document that failed validation.
    """

    exit_code = EXIT_SPEC_VALIDATION_ERROR

    def __init__(self, field: str, source: str = "<string>"):
        self.field = field
        self.source = source
        super().__init__(
            f"Invalid API description {source}: missing required field '{field}'"
        )


class SchemaResolutionError(SpecdocsError):
    """Raised when a ``$ref`` names a definition that does not exist."""

    exit_code = EXIT_SCHEMA_RESOLUTION_ERROR

    def __init__(self, message: str, ref: Optional[str] = None):
        super().__init__(message)
        self.ref = ref


class CyclicReferenceError(SchemaResolutionError):
    """Raised when reference resolution or synthesis revisits a definition.

    ``chain`` lists the definition names in the order they were entered,
    ending with the name that closed the cycle.
    """

    def __init__(self, chain: list[str]):
        self.chain = list(chain)
        super().__init__(
            "Cyclic schema reference: " + " -> ".join(self.chain),
            ref=self.chain[-1] if self.chain else None,
        )


class ExtractionError(SpecdocsError):
    """Raised for malformed operation content (bad parameter, non-mapping operation).

    The extractor never lets this escape: it is converted into an
    :class:`~specdocs.models.ExtractionWarning` and the operation is skipped.
    """


class DiffFailure(SpecdocsError):
    """Raised when either document of a diff run cannot be loaded.

    Callers must not read this as "no changes": the fail-safe is to assume
    changes exist and that no breaking changes can be determined.

    Args:
        which: ``"old"`` or ``"new"``.
        cause: The underlying load error.
    """

    exit_code = EXIT_DIFF_FAILURE

    def __init__(self, which: str, cause: SpecdocsError):
        self.which = which
        self.cause = cause
        super().__init__(f"Failed to load {which} specification: {cause}")


class ConfigError(SpecdocsError):
    """Raised for configuration problems (invalid JSON, failed validation)."""

    exit_code = EXIT_GENERIC_FAILURE
