"""Turn a partially typed ``ssh`` command line into a completed one."""

from __future__ import annotations

import logging
import re
import shlex
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from sshpick import paths
from sshpick.config import AppConfig
from sshpick.core.errors import PickerUnavailable, ResourceNotFound
from sshpick.core.extractor import FilteredEntry
from sshpick.core.filtering import strip_flags
from sshpick.core.interfaces import EntryLoader, Picker
from sshpick.core.inventory import load_entries
from sshpick.core.resolution import (
    NoMatch,
    ResolvedHost,
    decode_selection,
    resolve,
)
from sshpick.cli.picker import FzfPicker, PickerOptions
from sshpick.cli.preview import preview_command

__all__ = [
    "Action",
    "CompletionHandler",
    "CompletionResult",
    "CompletionSettings",
    "Selection",
    "select_host",
    "split_buffer",
]

logger = logging.getLogger(__name__)


class Action(str, Enum):
    """What the shell widget should do with the returned buffer."""

    FALLBACK = "fallback"
    REPLACE = "replace"
    ACCEPT = "accept"
    NOOP = "noop"


@dataclass(frozen=True, slots=True)
class CompletionSettings:
    """Per-process settings, built once and passed to every handler."""

    config_path: Path
    connect_command: str = "ssh"
    picker: PickerOptions = field(default_factory=PickerOptions)
    preview_fields: tuple[str, ...] = ()
    # False when reading the default ~/.ssh/config, so ssh -G keeps the system config.
    explicit_config: bool = False

    @classmethod
    def build(cls, config: AppConfig, config_path: Path | None = None) -> CompletionSettings:
        path = config_path.expanduser() if config_path is not None else paths.ssh_config_path()
        explicit = config_path is not None or _is_overridden(path)
        preview = preview_command(path if explicit else None)
        return cls(
            config_path=path,
            explicit_config=explicit,
            connect_command=config.connect_command,
            picker=PickerOptions.from_config(config, preview),
            preview_fields=tuple(config.preview_fields),
        )


def _is_overridden(path: Path) -> bool:
    return path != Path(paths.DEFAULT_SSH_CONFIG).expanduser()


@dataclass(frozen=True, slots=True)
class CompletionResult:
    action: Action
    buffer: str

    def render(self) -> str:
        """Two-line reply consumed by the shell widget."""

        return f"{self.action.value}\n{self.buffer}"


@dataclass(frozen=True, slots=True)
class Selection:
    """Outcome of a successful resolution.

    ``alias`` is ``None`` when the picker was shown and the user cancelled.
    """

    alias: str | None
    interactive: bool


def select_host(
    entries: Sequence[FilteredEntry],
    query: str,
    picker: Picker,
) -> Selection | None:
    """Resolve ``entries`` to one alias, asking ``picker`` when ambiguous.

    Returns ``None`` when nothing matched.

    Raises:
        PickerUnavailable: several entries matched but the picker cannot run.
    """

    resolution = resolve(entries, query)
    if isinstance(resolution, NoMatch):
        return None
    if isinstance(resolution, ResolvedHost):
        return Selection(alias=resolution.alias, interactive=False)

    chosen = picker.choose(resolution.display_table(), resolution.query)
    return Selection(alias=decode_selection(chosen), interactive=True)


def split_buffer(buffer: str) -> list[str]:
    """Split a command line the way the shell would, tolerating open quotes."""

    try:
        return shlex.split(buffer)
    except ValueError:
        return buffer.split()


class CompletionHandler:
    """Decide how to complete the current line editor buffer."""

    def __init__(
        self,
        settings: CompletionSettings,
        *,
        loader: EntryLoader | None = None,
        picker: Picker | None = None,
    ) -> None:
        self._settings = settings
        self._loader = loader if loader is not None else load_entries
        self._picker = picker if picker is not None else FzfPicker(settings.picker)

    def complete(self, buffer: str) -> CompletionResult:
        command = self._settings.connect_command
        fallback = CompletionResult(Action.FALLBACK, buffer)

        if re.fullmatch(rf"\s*{re.escape(command)}", buffer):
            return fallback

        tokens = split_buffer(buffer)
        if not tokens or tokens[0] != command:
            return fallback

        keywords = strip_flags(tokens[1:])
        query = buffer.lstrip()[len(command) :].lstrip()

        try:
            entries = self._loader(self._settings.config_path, keywords)
        except ResourceNotFound as exc:
            logger.info("%s", exc)
            return fallback

        try:
            selection = select_host(entries, query, self._picker)
        except PickerUnavailable as exc:
            logger.info("Picker unavailable: %s", exc)
            return fallback

        if selection is None:
            return fallback
        if selection.alias is None:
            return CompletionResult(Action.NOOP, buffer)

        completed = f"{command} {selection.alias}"
        action = Action.ACCEPT if selection.interactive else Action.REPLACE
        return CompletionResult(action, completed)
