"""Run fzf as the interactive picker for ambiguous host queries."""

from __future__ import annotations

import logging
import shutil
import subprocess
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TextIO

from sshpick.config import AppConfig
from sshpick.core.errors import PickerUnavailable

__all__ = ["FzfPicker", "PickerOptions"]

logger = logging.getLogger(__name__)

_KEY_BINDINGS = "shift-tab:up,tab:down,bspace:backward-delete-char/eof"
# fzf exits with 1 when nothing matched and 130 when the user aborted.
_CANCEL_STATUSES = frozenset({1, 130})
_TERMINAL = "/dev/tty"

RunFn = Callable[..., "subprocess.CompletedProcess[str]"]


@dataclass(frozen=True, slots=True)
class PickerOptions:
    """Presentation settings handed to fzf."""

    command: str = "fzf"
    height: str = "40%"
    prompt: str = "SSH Remote > "
    preview_command: str | None = None

    @classmethod
    def from_config(cls, config: AppConfig, preview_command: str | None = None) -> PickerOptions:
        return cls(
            command=config.picker_command,
            height=config.picker_height,
            prompt=config.prompt,
            preview_command=preview_command if config.preview else None,
        )


class FzfPicker:
    """Feed the host table to fzf and return the row the user picked."""

    def __init__(
        self,
        options: PickerOptions | None = None,
        *,
        runner: RunFn | None = None,
        which: Callable[[str], str | None] | None = None,
        terminal: str = _TERMINAL,
    ) -> None:
        self._options = options if options is not None else PickerOptions()
        self._runner = runner if runner is not None else subprocess.run
        self._which = which if which is not None else shutil.which
        self._terminal = terminal

    def _open_terminal(self) -> TextIO | None:
        """Open the controlling terminal for fzf to draw on, if there is one."""

        try:
            return open(self._terminal, "w", encoding="utf-8")
        except OSError as exc:
            logger.debug("Cannot open %s (%s); fzf keeps the inherited stderr", self._terminal, exc)
            return None

    def build_command(self, executable: str, query: str) -> list[str]:
        """Construct the fzf argv for the given initial query."""

        options = self._options
        argv = [
            executable,
            "--height",
            options.height,
            "--ansi",
            "--border",
            "--cycle",
            "--info=inline",
            "--header-lines=2",
            "--reverse",
            f"--prompt={options.prompt}",
            f"--query={query}",
            "--no-separator",
            "--bind",
            _KEY_BINDINGS,
        ]
        if options.preview_command:
            argv.extend(["--preview", options.preview_command, "--preview-window=right:40%"])
        return argv

    def choose(self, table: str, query: str) -> str | None:
        """Run the picker and return the selected row or ``None`` on cancel.

        Raises:
            PickerUnavailable: fzf is not installed or failed to start.
        """

        executable = self._which(self._options.command)
        if executable is None:
            msg = f"{self._options.command} command not found"
            raise PickerUnavailable(msg)

        argv = self.build_command(executable, query)
        kwargs: dict[str, Any] = {
            "input": table,
            "stdout": subprocess.PIPE,
            "text": True,
            "check": False,
        }
        # fzf draws its interface on stderr; point that at the terminal.
        terminal = self._open_terminal()
        if terminal is not None:
            kwargs["stderr"] = terminal
        try:
            completed = self._runner(argv, **kwargs)
        except OSError as exc:
            raise PickerUnavailable(str(exc)) from exc
        finally:
            if terminal is not None:
                terminal.close()

        if completed.returncode in _CANCEL_STATUSES:
            logger.debug("Picker closed without a selection (status %d)", completed.returncode)
            return None
        if completed.returncode != 0:
            msg = f"{self._options.command} exited with status {completed.returncode}"
            raise PickerUnavailable(msg)

        selection = (completed.stdout or "").strip("\r\n")
        return selection or None
