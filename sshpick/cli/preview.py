"""Preview pane content showing the effective ssh settings of a host."""

from __future__ import annotations

import shlex
import shutil
import subprocess
import sys
from collections.abc import Callable, Iterable
from pathlib import Path

from sshpick.core.table import align_rows

__all__ = ["build_ssh_g_command", "format_preview", "preview_command", "render_preview"]

RunFn = Callable[..., "subprocess.CompletedProcess[str]"]


def preview_command(config_path: Path | None = None) -> str:
    """Return the shell command fzf runs for the highlighted row.

    ``{1}`` is replaced by fzf with the first field of the row, the alias.
    """

    parts = [sys.executable, "-m", "sshpick"]
    if config_path is not None:
        parts.extend(["--config", str(config_path)])
    parts.append("preview")
    return " ".join(shlex.quote(part) for part in parts) + " {1}"


def build_ssh_g_command(
    alias: str,
    *,
    ssh_command: str = "ssh",
    config_path: Path | None = None,
) -> list[str]:
    """Construct the ``ssh -G`` invocation that prints the effective config."""

    command = [ssh_command, "-T", "-G"]
    if config_path is not None:
        command.extend(["-F", str(config_path)])
    command.append(alias)
    return command


def format_preview(output: str, fields: Iterable[str]) -> str:
    """Keep the requested keys of ``ssh -G`` output and align the values."""

    wanted = {name.lower() for name in fields}
    rows: list[tuple[str, str]] = []
    for line in output.splitlines():
        key, _, value = line.strip().partition(" ")
        if key.lower() in wanted:
            rows.append((key, value.strip()))
    return "\n".join(align_rows(rows))


def render_preview(
    alias: str,
    fields: Iterable[str],
    *,
    config_path: Path | None = None,
    runner: RunFn | None = None,
) -> str:
    """Run ``ssh -G`` for ``alias`` and format the interesting fields.

    Raises:
        FileNotFoundError: the ssh binary is not installed.
        RuntimeError: ssh rejected the alias or the configuration.
    """

    ssh_path = shutil.which("ssh")
    if ssh_path is None:
        msg = "ssh command not found"
        raise FileNotFoundError(msg)

    run = runner if runner is not None else subprocess.run
    command = build_ssh_g_command(alias, ssh_command=ssh_path, config_path=config_path)
    completed = run(command, capture_output=True, text=True, check=False)
    if completed.returncode != 0:
        message = (completed.stderr or "").strip() or f"ssh -G exited with status {completed.returncode}"
        raise RuntimeError(message)
    return format_preview(completed.stdout, fields)
