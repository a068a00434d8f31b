"""Decide whether a query resolves directly or needs the interactive picker."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from sshpick.core.extractor import FilteredEntry
from sshpick.core.table import COLUMN_DELIMITER, format_table

__all__ = [
    "NeedsInteractiveChoice",
    "NoMatch",
    "Resolution",
    "ResolvedHost",
    "decode_selection",
    "resolve",
]


@dataclass(frozen=True, slots=True)
class ResolvedHost:
    """Exactly one candidate remained; ``alias`` is the answer."""

    alias: str


@dataclass(frozen=True, slots=True)
class NeedsInteractiveChoice:
    """Several candidates remain and the user has to pick one."""

    entries: tuple[FilteredEntry, ...]
    query: str

    def display_table(self, *, color: bool = True) -> str:
        return format_table(self.entries, color=color)


@dataclass(frozen=True, slots=True)
class NoMatch:
    """No candidate survived filtering."""


Resolution = ResolvedHost | NeedsInteractiveChoice | NoMatch


def decode_selection(line: str | None) -> str | None:
    """Extract the alias from a serialized entry or a formatted table row.

    Returns ``None`` for an empty selection, which means the user cancelled.
    """

    if not line or not line.strip():
        return None
    first_field = line.split(COLUMN_DELIMITER, 1)[0]
    tokens = first_field.split()
    return tokens[0] if tokens else None


def resolve(entries: Sequence[FilteredEntry], query: str = "") -> Resolution:
    """Apply the single-match versus multi-match policy to filtered entries."""

    if not entries:
        return NoMatch()
    if len(entries) == 1:
        alias = decode_selection(entries[0].serialize())
        if alias is None:
            return NoMatch()
        return ResolvedHost(alias)
    return NeedsInteractiveChoice(entries=tuple(entries), query=query)
