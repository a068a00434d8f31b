"""Keyword filtering and de-duplication of host entries."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from sshpick.core.extractor import FilteredEntry

__all__ = ["filter_entries", "matches_keywords", "strip_flags"]


def strip_flags(args: Sequence[str]) -> list[str]:
    """Drop the leading ``-``-prefixed arguments meant for the caller."""

    remaining = list(args)
    while remaining and remaining[0].startswith("-"):
        remaining.pop(0)
    return remaining


def matches_keywords(entry: FilteredEntry, keywords: Iterable[str]) -> bool:
    """Return True when every keyword occurs in the entry, ignoring case."""

    haystack = entry.serialize().casefold()
    return all(keyword.casefold() in haystack for keyword in keywords if keyword)


def filter_entries(
    entries: Iterable[FilteredEntry],
    keywords: Sequence[str] = (),
) -> list[FilteredEntry]:
    """Keep entries matching all ``keywords``, de-duplicated and sorted.

    Two entries are duplicates when their serialized lines are identical. The
    result is ordered by serialized line so identical input always produces
    identical output.
    """

    unique: dict[str, FilteredEntry] = {}
    for entry in entries:
        if not matches_keywords(entry, keywords):
            continue
        unique.setdefault(entry.serialize(), entry)
    return [unique[line] for line in sorted(unique)]
