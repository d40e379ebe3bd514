"""Configuration files, directories, and precedence resolution.

* **Directories** -- XDG Base Directory layout on Linux/BSD,
  ``~/.specdocs/`` on macOS and Windows (:func:`get_config_dir`,
  :func:`get_data_dir`).
* **User config** -- ``config.json`` in the config directory, holding a
  :class:`~specdocs.models.SpecdocsConfig`. ``SPECDOCS_CONFIG`` points at a
  different file.
* **Project config** -- ``./specdocs.json`` in the working directory, a
  partial config merged over the user config.
* **Resolution** -- :func:`resolve_config` layers defaults, user config,
  project config, ``SPECDOCS_*`` environment variables and CLI flags.

Writes go through :func:`_atomic_write` (temp file, fsync, rename).
"""

from __future__ import annotations

import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from specdocs.exceptions import ConfigError
from specdocs.models import SpecdocsConfig

_APP_NAME = "specdocs"
_CONFIG_FILENAME = "config.json"
_PROJECT_CONFIG_FILENAME = "specdocs.json"

# Environment variable -> (section, key)
_ENV_OVERRIDES: dict[str, tuple[str, str]] = {
    "SPECDOCS_FORMAT": ("output", "format"),
    "SPECDOCS_UNTAGGED_CATEGORY": ("extraction", "untagged_category"),
    "SPECDOCS_STRICT": ("extraction", "strict"),
    "SPECDOCS_TIMESTAMP": ("extraction", "timestamp"),
    "SPECDOCS_FAIL_ON_BREAKING": ("diff", "fail_on_breaking"),
}


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    return Path.home().joinpath(*default_segments)


def get_config_dir() -> Path:
    """Return the configuration directory, creating it if necessary.

    ``$XDG_CONFIG_HOME/specdocs/`` (default ``~/.config/specdocs/``) on
    Linux/BSD, ``~/.specdocs/`` elsewhere.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_CONFIG_HOME", (".config",)) / _APP_NAME
    else:
        path = Path.home() / f".{_APP_NAME}"
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_dir() -> Path:
    """Return the data directory used for crash logs, creating it if necessary.

    ``$XDG_DATA_HOME/specdocs/`` (default ``~/.local/share/specdocs/``) on
    Linux/BSD, ``~/.specdocs/logs/`` elsewhere.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_DATA_HOME", (".local", "share")) / _APP_NAME
    else:
        path = Path.home() / f".{_APP_NAME}" / "logs"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Atomic file writes ---


def _atomic_write(path: Path, data: str) -> None:
    """Write *data* to *path* via a temp file in the same directory.

    ``os.replace`` within one directory is an atomic rename on POSIX, so
    readers see either the old file or the new one. The temp file is
    removed if anything fails, including ``KeyboardInterrupt``.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    handle = tempfile.NamedTemporaryFile(
        mode="w",
        dir=path.parent,
        prefix=f".{path.name}.",
        suffix=".tmp",
        delete=False,
        encoding="utf-8",
    )
    try:
        with handle:
            handle.write(data)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(handle.name, path)
    except BaseException:
        try:
            os.unlink(handle.name)
        except OSError:
            pass
        raise


# --- User config ---


def global_config_path() -> Path:
    """Path of the user config file (``SPECDOCS_CONFIG`` overrides it)."""
    override = os.environ.get("SPECDOCS_CONFIG")
    if override:
        return Path(override).expanduser()
    return get_config_dir() / _CONFIG_FILENAME


def _read_json(path: Path, label: str) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigError(f"Invalid {label} at {path}: {exc}") from exc


def load_global_config() -> SpecdocsConfig:
    """Load the user config, or defaults when the file does not exist.

    Raises:
        ConfigError: If the file is not valid JSON or fails validation.
    """
    path = global_config_path()
    if not path.is_file():
        return SpecdocsConfig()
    data = _read_json(path, "config")
    try:
        return SpecdocsConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid config at {path}: {exc}") from exc


def save_global_config(config: SpecdocsConfig, path: Optional[Path] = None) -> Path:
    """Write *config* atomically and return the path written."""
    target = path or global_config_path()
    payload = config.model_dump(mode="json", exclude_none=True)
    _atomic_write(target, json.dumps(payload, indent=2) + "\n")
    return target


# --- Project-local config ---


def load_project_config() -> Optional[dict[str, Any]]:
    """Load ``./specdocs.json`` as a dict, or ``None`` when absent.

    The file may set any subset of the config sections, e.g.
    ``{"extraction": {"untagged_category": "misc"}}``.

    Raises:
        ConfigError: If the file is not a JSON object.
    """
    path = Path.cwd() / _PROJECT_CONFIG_FILENAME
    if not path.is_file():
        return None
    data = _read_json(path, "project config")
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid project config at {path}: expected a JSON object")
    return data


# --- Precedence resolution ---


def _merge(base: dict[str, Any], overrides: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _env_overrides() -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    for var, (section, key) in _ENV_OVERRIDES.items():
        value = os.environ.get(var)
        if value:
            overrides.setdefault(section, {})[key] = value
    return overrides


def resolve_config(cli_format: Optional[str] = None) -> SpecdocsConfig:
    """Resolve the effective configuration.

    Precedence (high to low):
        1. CLI output flags (``--json``, ``--plain``)
        2. ``SPECDOCS_*`` environment variables
        3. Project config (``./specdocs.json``)
        4. User config (``~/.config/specdocs/config.json``)
        5. Defaults

    ``--strict`` and ``--fail-on-breaking`` are applied over the result by
    the commands that take them.

    Boolean environment values accept what pydantic accepts (``1``,
    ``true``, ``yes``, ...).

    Raises:
        ConfigError: If any layer is unreadable or the merged result fails
            validation.
    """
    data = load_global_config().model_dump(mode="json", exclude_none=True)

    project = load_project_config()
    if project is not None:
        data = _merge(data, project)

    data = _merge(data, _env_overrides())

    if cli_format is not None:
        data = _merge(data, {"output": {"format": cli_format}})

    try:
        return SpecdocsConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc
