"""Shared test fixtures for specdocs.

Provides document fixtures (raw text and loaded documents), a pinned
timestamp for reproducible examples, isolated config directories, and
output-manager helpers. pytest discovers these automatically.
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

import pytest

from specdocs.models import EndpointModel, SpecDocument
from specdocs.output import OutputFormat, OutputManager, reset_output, set_output
from specdocs.parser import load


FIXTURES_DIR = Path(__file__).parent / "fixtures"

PINNED_NOW = datetime(2024, 1, 15, 10, 30, 0, tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The manager keeps references to sys.stdout/sys.stderr from the time it
    was created; CliRunner swaps those streams, so a manager surviving a
    test would write to closed files.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Document fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def swagger_text() -> str:
    """Swagger 2.0 YAML document: accounts, sites and an untagged health check."""
    return (FIXTURES_DIR / "swagger_hosting.yaml").read_text(encoding="utf-8")


@pytest.fixture
def openapi_text() -> str:
    """OpenAPI 3.0 JSON document: installs and backups."""
    return (FIXTURES_DIR / "openapi_installs.json").read_text(encoding="utf-8")


@pytest.fixture
def broken_text() -> str:
    """Swagger 2.0 document with a dangling ref, a cycle and a bad parameter ref."""
    return (FIXTURES_DIR / "broken_refs.yaml").read_text(encoding="utf-8")


@pytest.fixture
def swagger_doc(swagger_text: str) -> SpecDocument:
    return load(swagger_text, source="swagger_hosting.yaml")


@pytest.fixture
def openapi_doc(openapi_text: str) -> SpecDocument:
    return load(openapi_text, source="openapi_installs.json")


@pytest.fixture
def swagger_model(swagger_doc: SpecDocument) -> EndpointModel:
    """Endpoint model of the Swagger fixture, with date-time examples pinned."""
    from specdocs.parser.extractor import extract

    return extract(swagger_doc, now=PINNED_NOW)


@pytest.fixture
def openapi_model(openapi_doc: SpecDocument) -> EndpointModel:
    from specdocs.parser.extractor import extract

    return extract(openapi_doc, now=PINNED_NOW)


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Points the XDG directories at subdirectories of tmp_path, clears all
    SPECDOCS_* variables, and changes the working directory to tmp_path.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.setattr("specdocs.config._is_xdg_platform", lambda: True)

    for var in [
        "SPECDOCS_CONFIG",
        "SPECDOCS_FORMAT",
        "SPECDOCS_UNTAGGED_CATEGORY",
        "SPECDOCS_STRICT",
        "SPECDOCS_TIMESTAMP",
        "SPECDOCS_FAIL_ON_BREAKING",
        "NO_COLOR",
    ]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a PLAIN-format, quiet OutputManager for the test."""
    output = OutputManager(format=OutputFormat.PLAIN, quiet=True)
    set_output(output)
    yield output
    reset_output()


@pytest.fixture
def json_output() -> OutputManager:
    """Install a JSON-format OutputManager for the test."""
    output = OutputManager(format=OutputFormat.JSON)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
