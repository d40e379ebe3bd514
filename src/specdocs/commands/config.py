"""Config commands -- view and create configuration files.

``specdocs config show`` prints the effective configuration after every
layer (user file, ``./specdocs.json``, ``SPECDOCS_*`` variables, flags) has
been applied. ``specdocs config init`` writes a config file holding the
defaults so it can be edited by hand.
"""

from __future__ import annotations

from pathlib import Path

import typer

from specdocs.commands.common import get_config
from specdocs.exit_codes import EXIT_INVALID_USAGE
from specdocs.output import emit, error, info, success, suggest


config_app = typer.Typer(no_args_is_help=True)


@config_app.command("show")
def config_show(ctx: typer.Context) -> None:
    """Show the effective configuration.

    Example::

        specdocs config show --json
    """
    from specdocs.config import global_config_path

    info(f"User config: {global_config_path()}")
    emit(get_config(ctx).model_dump(mode="json"))


@config_app.command("init")
def config_init(
    project: bool = typer.Option(
        False, "--project", help="Write ./specdocs.json instead of the user config."
    ),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite an existing file."),
) -> None:
    """Write a config file holding the default settings.

    Example::

        specdocs config init
        specdocs config init --project
    """
    from specdocs.config import global_config_path, save_global_config
    from specdocs.models import SpecdocsConfig

    target = Path.cwd() / "specdocs.json" if project else global_config_path()
    if target.exists() and not force:
        error(f"Config file already exists: {target}")
        suggest("Pass --force to overwrite it.")
        raise typer.Exit(code=EXIT_INVALID_USAGE)

    save_global_config(SpecdocsConfig(), path=target)
    success(f"Wrote {target}")
