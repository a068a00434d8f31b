"""Column-aligned rendering of host entries for the interactive picker."""

from __future__ import annotations

from collections.abc import Sequence

from sshpick.core.extractor import FilteredEntry

__all__ = ["COLUMN_DELIMITER", "HEADER", "SEPARATOR", "align_rows", "format_description", "format_table"]

COLUMN_DELIMITER = "|"
HEADER = ("Alias", "->", "Hostname", "User", "Desc")
SEPARATOR = ("─────", "──", "────────", "────", "────")

_COLUMN_GAP = "  "
_DESCRIPTION_STYLE = "\033[00;34m{}\033[0m"


def format_description(description: str, *, color: bool = True) -> str:
    """Return the bracketed description cell, or an empty cell."""

    if not description:
        return ""
    text = _DESCRIPTION_STYLE.format(description) if color else description
    return f"[{text}]"


def align_rows(rows: Sequence[Sequence[str]]) -> list[str]:
    """Pad every column but the last to a common width.

    Mirrors ``column -t``: columns are separated by two spaces and trailing
    whitespace is dropped.
    """

    if not rows:
        return []
    count = max(len(row) for row in rows)
    widths = [0] * count
    for row in rows:
        for index, cell in enumerate(row[:-1]):
            widths[index] = max(widths[index], len(cell))

    lines: list[str] = []
    for row in rows:
        cells = [cell.ljust(widths[index]) for index, cell in enumerate(row[:-1])]
        cells.append(row[-1])
        lines.append(_COLUMN_GAP.join(cells).rstrip())
    return lines


def format_table(entries: Sequence[FilteredEntry], *, color: bool = True) -> str:
    """Render the header, separator and one row per entry as aligned text."""

    rows: list[Sequence[str]] = [HEADER, SEPARATOR]
    for entry in entries:
        rows.append(
            (
                entry.alias,
                "->",
                entry.address,
                entry.user,
                format_description(entry.description, color=color),
            )
        )
    return "\n".join(align_rows(rows))
