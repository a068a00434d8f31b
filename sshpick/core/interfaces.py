"""Protocol definitions for collaborators of the resolution engine."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Protocol

from sshpick.core.extractor import FilteredEntry


class Picker(Protocol):
    """Interactive selector that returns the chosen table row."""

    def choose(self, table: str, query: str) -> str | None:
        """Return the selected line, or ``None`` when the user cancelled.

        Implementations raise ``PickerUnavailable`` when they cannot run.
        """


class EntryLoader(Protocol):
    """Callable producing the filtered entries for a configuration file."""

    def __call__(self, config_path: Path, keywords: Sequence[str] = ()) -> list[FilteredEntry]: ...
