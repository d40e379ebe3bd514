"""Typer application and console-script entry point for specdocs.

The root callback turns the global flags into an
:class:`~specdocs.output.OutputManager`, resolves the effective
:class:`~specdocs.models.SpecdocsConfig`, and wires the library loggers to
stderr when ``--verbose`` is given. Sub-commands live in
:mod:`specdocs.commands` and are registered below.

:func:`main` is the ``specdocs`` console script. It adds Ctrl-C handling and
a crash log for unexpected exceptions on top of the Typer app.
"""

from __future__ import annotations

import logging
import signal
import sys
import traceback
from datetime import datetime
from typing import Any, Optional

import typer
from rich.logging import RichHandler

from specdocs import __version__
from specdocs.exit_codes import EXIT_GENERIC_FAILURE

app = typer.Typer(
    name="specdocs",
    help="Extract endpoint models from OpenAPI/Swagger documents and diff API versions.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"specdocs {__version__}")
        raise typer.Exit()


def _configure_logging(verbose: bool, output: Any) -> None:
    """Send ``specdocs.*`` log records to stderr in verbose mode, nowhere otherwise.

    Handlers are replaced on every call so repeated invocations in one
    process (tests) do not stack them.
    """
    package_logger = logging.getLogger("specdocs")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)

    if verbose:
        package_logger.addHandler(
            RichHandler(console=output.stderr_console, show_path=False, markup=False)
        )
        package_logger.setLevel(logging.DEBUG)
    else:
        package_logger.addHandler(logging.NullHandler())
        package_logger.setLevel(logging.NOTSET)


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    json_output: bool = typer.Option(False, "--json", help="JSON output format."),
    plain_output: bool = typer.Option(False, "--plain", help="Plain text output."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable color output."),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress non-essential output."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug output."),
    output_file: Optional[str] = typer.Option(
        None, "-o", "--output", help="Write results to this file instead of stdout."
    ),
) -> None:
    """Set up output, logging and configuration before every sub-command.

    The resolved config is stored as ``ctx.obj["config"]``.
    """
    from specdocs.config import resolve_config
    from specdocs.exceptions import ConfigError
    from specdocs.output import OutputFormat, OutputManager, error, set_output

    cli_format: Optional[str] = None
    if json_output:
        cli_format = OutputFormat.JSON.value
    elif plain_output:
        cli_format = OutputFormat.PLAIN.value

    try:
        config = resolve_config(cli_format=cli_format)
    except ConfigError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    try:
        fmt = OutputFormat(config.output.format)
    except ValueError:
        error(f"Unknown output format '{config.output.format}'")
        raise typer.Exit(code=2) from None

    output = OutputManager(
        format=fmt,
        no_color=no_color,
        quiet=quiet,
        verbose=verbose,
        output_file=output_file,
    )
    set_output(output)
    _configure_logging(verbose, output)

    ctx.ensure_object(dict)
    ctx.obj["config"] = config


# ------------------------------------------------------------------ #
# Sub-commands
# ------------------------------------------------------------------ #

from specdocs.commands.config import config_app  # noqa: E402
from specdocs.commands.diff import diff_command  # noqa: E402
from specdocs.commands.extract import extract_command  # noqa: E402
from specdocs.commands.inspect import inspect_app  # noqa: E402

app.command("extract")(extract_command)
app.command("diff")(diff_command)
app.add_typer(inspect_app, name="inspect", help="Inspect an API description.")
app.add_typer(config_app, name="config", help="Configuration management.")


def _setup_signal_handlers() -> None:
    """Exit with 130 on Ctrl-C instead of printing a traceback."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write the current traceback under the data directory and return its path."""
    from specdocs.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    log_path = logs_dir / f"crash-{datetime.now().strftime('%Y%m%d-%H%M%S')}.log"
    log_path.write_text(f"{type(exc).__name__}: {exc}\n\n{traceback.format_exc()}")
    return str(log_path)


def main() -> None:
    """Console-script entry point.

    :class:`~specdocs.exceptions.SpecdocsError` exits with the error's own
    code; anything else writes a crash log and exits with
    :data:`~specdocs.exit_codes.EXIT_GENERIC_FAILURE`.
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from specdocs.exceptions import SpecdocsError
        from specdocs.output import error

        if isinstance(exc, SpecdocsError):
            error(str(exc))
            sys.exit(exc.exit_code)
        log_path = _write_crash_log(exc)
        error(f"Unexpected error. Debug log: {log_path}")
        sys.exit(EXIT_GENERIC_FAILURE)
