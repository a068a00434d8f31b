"""Read, extract and filter host entries in one call."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

from sshpick.core.extractor import FilteredEntry, eligible_entries, extract
from sshpick.core.filtering import filter_entries
from sshpick.core.reader import ConfigReader

__all__ = ["load_entries"]

logger = logging.getLogger(__name__)


def load_entries(
    config_path: Path,
    keywords: Sequence[str] = (),
    *,
    reader: ConfigReader | None = None,
) -> list[FilteredEntry]:
    """Return the sorted, de-duplicated entries of ``config_path`` matching ``keywords``.

    Raises:
        ResourceNotFound: the root configuration file cannot be read.
    """

    reader = reader if reader is not None else ConfigReader()
    lines = reader.read(config_path)
    records = extract(lines)
    entries = filter_entries(eligible_entries(records), keywords)
    logger.debug(
        "Loaded %d host records from %s, %d entries match %r",
        len(records),
        config_path,
        len(entries),
        list(keywords),
    )
    return entries
