"""Configuration-related CLI commands."""

from __future__ import annotations

import json

import typer

from sshpick.cli._shared import show_help_if_no_subcommand
from sshpick.config import ConfigStore

config_app = typer.Typer(help="Manage application configuration")


@config_app.callback(invoke_without_command=True)
def config_root(ctx: typer.Context) -> None:
    """Display contextual help when no subcommand is provided."""

    show_help_if_no_subcommand(ctx)


@config_app.command("show")
def show_config() -> None:
    """Display the current application configuration."""

    store = ConfigStore()
    config = store.load()
    typer.echo(json.dumps(config.to_payload(), indent=2))


@config_app.command("set")
def set_config_value(
    key: str = typer.Argument(..., metavar="KEY", help="Setting to change."),
    value: str = typer.Argument(
        ...,
        metavar="VALUE",
        help="New value. Booleans accept yes/no; preview_fields takes a comma-separated list.",
    ),
) -> None:
    """Persist a single setting in the config file."""

    store = ConfigStore()
    config = store.load()
    try:
        config.set_value(key, value)
    except ValueError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(2) from exc
    store.save(config)
    typer.echo(f"Updated {key}.")


@config_app.command("reset")
def reset_config() -> None:
    """Discard saved settings and return to the defaults."""

    store = ConfigStore()
    store.reset()
    typer.echo(f"Removed {store.path}; defaults restored.")
