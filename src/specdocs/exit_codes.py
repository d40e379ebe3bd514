"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~specdocs.exceptions.SpecdocsError` subclass or by a
CLI command that reports a non-error outcome (breaking changes, warnings).
CI pipelines can inspect the exit code to decide whether to rebuild the
documentation without parsing stderr.

Example::

    $ specdocs diff old.yaml new.yaml --fail-on-breaking
    $ echo $?
    12  # EXIT_BREAKING_CHANGES -- an endpoint or schema was removed
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or an unreadable input file."""

EXIT_SPEC_PARSE_ERROR = 7
"""The document is not valid JSON or YAML."""

EXIT_SPEC_VALIDATION_ERROR = 8
"""The document parsed but is missing a required top-level field."""

EXIT_SCHEMA_RESOLUTION_ERROR = 9
"""A ``$ref`` names a definition that does not exist, or references form a cycle."""

EXIT_EXTRACTION_WARNINGS = 10
"""Extraction finished but recorded warnings while running in strict mode."""

EXIT_DIFF_FAILURE = 11
"""One of the two documents could not be loaded; changes must be assumed."""

EXIT_BREAKING_CHANGES = 12
"""The diff found breaking changes and ``--fail-on-breaking`` was requested."""
