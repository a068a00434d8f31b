"""Group flattened configuration lines into selectable host records."""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable, Iterator, Sequence
from dataclasses import dataclass, field
from pathlib import Path

from sshpick.core.reader import ConfigLine

__all__ = [
    "DESCRIPTION_SENTINEL",
    "FilteredEntry",
    "HostRecord",
    "eligible_entries",
    "extract",
    "is_plain_comment",
    "is_wildcard",
    "split_directive",
]

DESCRIPTION_SENTINEL = "#_Desc"

_WILDCARD_GLYPHS = ("*", "?")
_DIRECTIVE_RE = re.compile(r"^\s*(?P<key>[^\s=]+)(?:\s*=\s*|\s+|$)(?P<value>.*)$")


@dataclass(frozen=True, slots=True)
class FilteredEntry:
    """Displayable form of a single host alias."""

    alias: str
    address: str
    user: str = ""
    description: str = ""

    def serialize(self) -> str:
        """Return the ``|`` delimited line used for filtering and ordering."""

        return "|".join((self.alias, "->", self.address, self.user, self.description))


def is_wildcard(value: str) -> bool:
    """Return True when ``value`` is a host pattern rather than a concrete name."""

    if not value:
        return False
    return value.startswith(_WILDCARD_GLYPHS) or value.endswith(_WILDCARD_GLYPHS) or value[0] == "!"


@dataclass(slots=True)
class HostRecord:
    """Host-related directives collected from one configuration paragraph."""

    aliases: list[str] = field(default_factory=list)
    address: str = ""
    user: str = ""
    description: str = ""
    is_match_conditional: bool = False
    match_criteria: str = ""
    source: Path | None = None

    def is_wildcard_pattern(self, alias: str) -> bool:
        return is_wildcard(alias) or is_wildcard(self.address or alias)

    def is_eligible(self, alias: str) -> bool:
        return bool(alias) and not self.is_match_conditional and not self.is_wildcard_pattern(alias)

    def entries(self) -> list[FilteredEntry]:
        """Expand the record into one entry per eligible alias."""

        return [
            FilteredEntry(
                alias=alias,
                address=self.address or alias,
                user=self.user,
                description=self.description,
            )
            for alias in self.aliases
            if self.is_eligible(alias)
        ]


def _set_match(record: HostRecord, value: str) -> None:
    record.is_match_conditional = True
    record.match_criteria = value


def _set_aliases(record: HostRecord, value: str) -> None:
    record.aliases = value.split()


def _set_address(record: HostRecord, value: str) -> None:
    tokens = value.split()
    if tokens:
        record.address = tokens[0]


def _set_user(record: HostRecord, value: str) -> None:
    tokens = value.split()
    if tokens:
        record.user = tokens[0]


def _set_description(record: HostRecord, value: str) -> None:
    record.description = value.strip()


_DIRECTIVES: dict[str, Callable[[HostRecord, str], None]] = {
    "match": _set_match,
    "host": _set_aliases,
    "hostname": _set_address,
    "user": _set_user,
    DESCRIPTION_SENTINEL.lower(): _set_description,
}


def split_directive(text: str) -> tuple[str, str] | None:
    """Split a line into its keyword and the remaining value.

    Both ``Key value`` and ``Key=value`` forms are accepted. Blank lines yield
    ``None``.
    """

    match = _DIRECTIVE_RE.match(text)
    if match is None:
        return None
    return match.group("key"), match.group("value").strip()


def is_plain_comment(text: str) -> bool:
    """Return True for comments other than the description sentinel."""

    stripped = text.lstrip()
    if not stripped.startswith("#"):
        return False
    first = stripped.split(None, 1)[0]
    return first.lower() != DESCRIPTION_SENTINEL.lower()


def _paragraphs(lines: Iterable[ConfigLine]) -> Iterator[list[ConfigLine]]:
    paragraph: list[ConfigLine] = []
    for line in lines:
        if is_plain_comment(line.text):
            continue
        if not line.text.strip():
            if paragraph:
                yield paragraph
                paragraph = []
            continue
        paragraph.append(line)
    if paragraph:
        yield paragraph


def _build_record(paragraph: Sequence[ConfigLine]) -> HostRecord:
    record = HostRecord(source=paragraph[0].source)
    for line in paragraph:
        parsed = split_directive(line.text)
        if parsed is None:
            continue
        key, value = parsed
        setter = _DIRECTIVES.get(key.lower())
        if setter is not None:
            setter(record, value)
    if not record.address and record.aliases:
        record.address = record.aliases[0]
    return record


def extract(lines: Iterable[ConfigLine]) -> list[HostRecord]:
    """Build one :class:`HostRecord` per paragraph that names at least one alias.

    Paragraphs are runs of non-blank lines once plain comments are removed.
    Within a paragraph the last occurrence of a directive wins. A record keeps
    its ``Match`` flag and wildcard aliases; eligibility is decided when it is
    expanded into entries.
    """

    records: list[HostRecord] = []
    for paragraph in _paragraphs(lines):
        record = _build_record(paragraph)
        if record.aliases:
            records.append(record)
    return records


def eligible_entries(records: Iterable[HostRecord]) -> list[FilteredEntry]:
    """Flatten records into their selectable entries, preserving file order."""

    entries: list[FilteredEntry] = []
    for record in records:
        entries.extend(record.entries())
    return entries
