"""Command-line interface for the sshpick application."""

from __future__ import annotations

import logging
import sys
from collections.abc import Sequence
from pathlib import Path

import click
import typer

from sshpick import __version__
from sshpick.cli._shared import fail, settings_from_context
from sshpick.cli.completion import (
    CompletionHandler,
    CompletionSettings,
    select_host,
)
from sshpick.cli.config import config_app
from sshpick.cli.picker import FzfPicker
from sshpick.cli.preview import render_preview
from sshpick.cli.shell import SUPPORTED_SHELLS, render_init_script
from sshpick.cli.ssh_launcher import run_ssh
from sshpick.config import ConfigStore
from sshpick.core.errors import PickerUnavailable, ResourceNotFound
from sshpick.core.extractor import FilteredEntry
from sshpick.core.filtering import strip_flags
from sshpick.core.inventory import load_entries
from sshpick.core.table import format_table

app = typer.Typer(help="Fuzzy SSH host picker for your OpenSSH client configuration")
app.add_typer(config_app, name="config", help="Inspect and adjust configuration")

_EXIT_CANCELLED = 130
_ROOT_OPTIONS_WITH_VALUE = frozenset({"--config", "-F"})
_LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=_LOG_FORMAT,
        stream=sys.stderr,
    )


@app.callback(invoke_without_command=True)
def cli(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        help="Show the application's version and exit.",
        is_eager=True,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Log parsing details to stderr.",
    ),
    config: Path | None = typer.Option(
        None,
        "--config",
        "-F",
        help="SSH client config to read instead of $SSH_CONFIG_FILE or ~/.ssh/config.",
        show_default=False,
    ),
) -> None:
    """Handle top-level options for the CLI."""
    if version:
        typer.echo(__version__)
        raise typer.Exit()

    if ctx.resilient_parsing:
        return

    _configure_logging(verbose)
    ctx.obj = CompletionSettings.build(ConfigStore().load(), config)

    if ctx.invoked_subcommand is not None:
        return

    raise typer.Exit(_connect(ctx.obj, []))


def _load(settings: CompletionSettings, keywords: Sequence[str]) -> list[FilteredEntry]:
    try:
        return load_entries(settings.config_path, strip_flags(keywords))
    except ResourceNotFound as exc:
        raise fail(str(exc)) from exc


def _select(settings: CompletionSettings, keywords: Sequence[str]) -> str:
    """Resolve keywords to an alias, exiting with a message when that fails."""

    entries = _load(settings, keywords)
    query = " ".join(keywords)
    try:
        selection = select_host(entries, query, FzfPicker(settings.picker))
    except PickerUnavailable as exc:
        raise fail(f"Several hosts match but the picker cannot run: {exc}") from exc

    if selection is None:
        raise fail(f"No host matches {query!r}." if query else "No hosts configured.")
    if selection.alias is None:
        raise typer.Exit(_EXIT_CANCELLED)
    return selection.alias


def _connect(settings: CompletionSettings, keywords: Sequence[str]) -> int:
    alias = _select(settings, keywords)
    return run_ssh(alias, settings.connect_command)


@app.command("list")
def list_hosts(
    ctx: typer.Context,
    keywords: list[str] | None = typer.Argument(
        None,
        metavar="[KEYWORDS]...",
        help="Case-insensitive substrings that must all occur in a host entry.",
    ),
    raw: bool = typer.Option(
        False,
        "--raw",
        help="Print the '|'-delimited entry lines instead of the table.",
    ),
    color: bool = typer.Option(True, "--color/--no-color", help="Colour descriptions."),
) -> None:
    """List the selectable hosts."""

    settings = settings_from_context(ctx)
    entries = _load(settings, keywords or [])
    if not entries:
        raise fail("No hosts match.")
    if raw:
        for entry in entries:
            typer.echo(entry.serialize())
        return
    typer.echo(format_table(entries, color=color))


@app.command("pick")
def pick_host(
    ctx: typer.Context,
    keywords: list[str] | None = typer.Argument(
        None,
        metavar="[KEYWORDS]...",
        help="Keywords narrowing the candidates; also the picker's initial query.",
    ),
) -> None:
    """Print the alias of the selected host."""

    typer.echo(_select(settings_from_context(ctx), keywords or []))


@app.command("connect")
def connect_host(
    ctx: typer.Context,
    keywords: list[str] | None = typer.Argument(
        None,
        metavar="[KEYWORDS]...",
        help="Keywords narrowing the candidates; also the picker's initial query.",
    ),
) -> None:
    """Select a host and open an SSH session to it."""

    raise typer.Exit(_connect(settings_from_context(ctx), keywords or []))


@app.command("complete")
def complete_buffer(
    ctx: typer.Context,
    buffer: str = typer.Argument(..., metavar="BUFFER", help="Current line editor buffer."),
) -> None:
    """Complete a command line for the shell widget.

    Prints the action (fallback, replace, accept or noop) and the new buffer
    on two lines.
    """

    handler = CompletionHandler(settings_from_context(ctx))
    typer.echo(handler.complete(buffer).render())


@app.command("preview")
def preview_host(
    ctx: typer.Context,
    alias: str = typer.Argument(..., metavar="ALIAS", help="Host alias to inspect."),
) -> None:
    """Show the effective ssh settings of ALIAS."""

    settings = settings_from_context(ctx)
    try:
        text = render_preview(
            alias,
            settings.preview_fields,
            config_path=settings.config_path if settings.explicit_config else None,
        )
    except (FileNotFoundError, RuntimeError) as exc:
        raise fail(str(exc)) from exc
    typer.echo(text)


@app.command("init")
def init_shell(
    shell: str = typer.Argument(
        "zsh",
        metavar="SHELL",
        help=f"Shell to integrate with ({', '.join(SUPPORTED_SHELLS)}).",
    ),
) -> None:
    """Print the shell widget that binds Tab to sshpick."""

    try:
        script = render_init_script(shell)
    except ValueError as exc:
        raise fail(str(exc), code=2) from exc
    typer.echo(script, nl=False)


def _known_subcommand_names() -> set[str]:
    """Collect all registered top-level command names."""

    names: set[str] = {info.name for info in app.registered_commands if info.name is not None}
    names.update(name for info in app.registered_groups if (name := info.name) is not None)
    return names


def _rewrite_default_invocation(args: list[str]) -> list[str]:
    """Treat ``sshpick [-F FILE] web prod`` as ``sshpick [-F FILE] connect web prod``."""

    index = 0
    while index < len(args):
        arg = args[index]
        if arg in _ROOT_OPTIONS_WITH_VALUE:
            index += 2
        elif arg.startswith("-"):
            index += 1
        else:
            break
    if index >= len(args) or args[index] in _known_subcommand_names():
        return args
    return [*args[:index], "connect", *args[index:]]


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point for the sshpick CLI."""

    args = list(argv) if argv is not None else list(sys.argv[1:])
    args = _rewrite_default_invocation(args)

    try:
        result = app(args=args, prog_name="sshpick", standalone_mode=False)
    except typer.Exit as exc:  # exit path already handled by Typer
        return exc.exit_code
    except typer.Abort:
        return _EXIT_CANCELLED
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except Exception as exc:  # pragma: no cover - unexpected errors bubble to the shell
        typer.echo(str(exc), err=True)
        return 1
    return result if isinstance(result, int) else 0


if __name__ == "__main__":  # pragma: no cover - manual execution only
    raise SystemExit(main())
