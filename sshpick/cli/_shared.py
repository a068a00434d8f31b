"""Shared helpers for Typer-based CLI components."""

from __future__ import annotations

import typer

from sshpick.cli.completion import CompletionSettings
from sshpick.config import ConfigStore


def show_help_if_no_subcommand(ctx: typer.Context) -> None:
    """Emit contextual help when a subcommand is not provided."""

    if ctx.invoked_subcommand or ctx.resilient_parsing:
        return
    typer.echo(ctx.get_help())
    raise typer.Exit()


def settings_from_context(ctx: typer.Context) -> CompletionSettings:
    """Return the settings built by the root callback, building them if absent."""

    root = ctx.find_root()
    settings = root.obj
    if not isinstance(settings, CompletionSettings):
        settings = CompletionSettings.build(ConfigStore().load())
        root.obj = settings
    return settings


def fail(message: str, code: int = 1) -> typer.Exit:
    """Print ``message`` on stderr and return the exit to raise."""

    typer.echo(message, err=True)
    return typer.Exit(code)
