"""Flatten an OpenSSH client configuration by splicing in ``Include`` files."""

from __future__ import annotations

import glob
import logging
import os
import re
import shlex
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

from sshpick.core.errors import (
    IncludeCycleExceeded,
    IncludePathUnresolvable,
    ResourceNotFound,
    SshPickError,
)

__all__ = [
    "MAX_INCLUDE_DEPTH",
    "ConfigLine",
    "ConfigReader",
    "IncludeDirective",
    "expand_pattern",
    "read_config",
]

logger = logging.getLogger(__name__)

# Same nesting limit as the OpenSSH client.
MAX_INCLUDE_DEPTH = 16

_INCLUDE_RE = re.compile(r"^\s*include(?:\s*=\s*|\s+)(?P<rest>\S.*)$", re.IGNORECASE)


@dataclass(frozen=True, slots=True)
class ConfigLine:
    """A raw configuration line and the file it was read from."""

    text: str
    source: Path | None = None


@dataclass(frozen=True, slots=True)
class IncludeDirective:
    """Path patterns named by a single ``Include`` line."""

    patterns: tuple[str, ...]

    @classmethod
    def parse(cls, line: str) -> IncludeDirective | None:
        """Return the directive for ``line`` or ``None`` when it is not an include."""

        match = _INCLUDE_RE.match(line)
        if match is None:
            return None
        rest = match.group("rest").strip()
        try:
            tokens = shlex.split(rest)
        except ValueError:
            # Unbalanced quotes: fall back to plain whitespace splitting.
            tokens = rest.split()
        if not tokens:
            return None
        return cls(patterns=tuple(tokens))


def expand_pattern(pattern: str, base_dir: Path) -> list[Path]:
    """Expand one include pattern into the sorted list of matching paths.

    Environment variables and ``~`` are substituted first. Relative patterns
    are anchored at ``base_dir``. A pattern without wildcards yields the path
    itself when it exists, and nothing otherwise.
    """

    expanded = os.path.expanduser(os.path.expandvars(pattern))
    if not os.path.isabs(expanded):
        expanded = str(base_dir / expanded)
    return [Path(item) for item in sorted(glob.glob(expanded))]


class ConfigReader:
    """Produce the flattened line sequence for a root configuration file.

    Included files are read in place of the ``Include`` line, each preceded by
    a blank line so that its first host block starts a new paragraph. A file
    that is already open further up the include chain is skipped, as is any
    include nested deeper than ``max_depth``. Both cases, along with included
    files that cannot be resolved or read, are logged and collected in
    :attr:`problems` while reading carries on.
    """

    def __init__(
        self,
        *,
        include_dir: Path | None = None,
        max_depth: int = MAX_INCLUDE_DEPTH,
    ) -> None:
        self._include_dir = include_dir
        self._max_depth = max_depth
        self.problems: list[SshPickError] = []

    def read(self, path: Path | str) -> list[ConfigLine]:
        """Read ``path`` and every file it includes.

        Raises:
            ResourceNotFound: the root file is missing, cannot be
                canonicalised or cannot be read.
        """

        self.problems = []
        root = Path(path).expanduser()
        try:
            root = root.resolve(strict=True)
        except (OSError, RuntimeError) as exc:
            raise ResourceNotFound(root, str(exc)) from exc
        if not root.is_file():
            raise ResourceNotFound(root, "not a regular file")

        include_dir = self._include_dir if self._include_dir is not None else root.parent
        try:
            return list(self.iter_lines(root, include_dir))
        except OSError as exc:
            raise ResourceNotFound(root, str(exc)) from exc

    def iter_lines(
        self,
        path: Path,
        include_dir: Path,
        stack: tuple[Path, ...] = (),
    ) -> Iterator[ConfigLine]:
        """Yield the lines of ``path`` with includes expanded in place."""

        stack = (*stack, path)
        with path.open("r", encoding="utf-8", errors="replace") as handle:
            for raw_line in handle:
                text = raw_line.rstrip("\r\n")
                directive = IncludeDirective.parse(text)
                if directive is None:
                    yield ConfigLine(text, path)
                    continue
                yield from self._splice(directive, include_dir, stack)

    def _splice(
        self,
        directive: IncludeDirective,
        include_dir: Path,
        stack: tuple[Path, ...],
    ) -> Iterator[ConfigLine]:
        for pattern in directive.patterns:
            for candidate in expand_pattern(pattern, include_dir):
                try:
                    if not candidate.is_file():
                        continue
                    resolved = candidate.resolve(strict=True)
                except (OSError, RuntimeError) as exc:
                    self._record(IncludePathUnresolvable(candidate, str(exc)))
                    continue

                if resolved in stack or len(stack) >= self._max_depth:
                    self._record(IncludeCycleExceeded(resolved, len(stack)))
                    continue

                logger.debug("Including %s from %s", resolved, stack[-1])
                yield ConfigLine("", resolved)
                try:
                    yield from self.iter_lines(resolved, include_dir, stack)
                except OSError as exc:
                    self._record(IncludePathUnresolvable(resolved, str(exc)))

    def _record(self, problem: SshPickError) -> None:
        logger.warning("%s", problem)
        self.problems.append(problem)


def read_config(path: Path | str, *, include_dir: Path | None = None) -> list[ConfigLine]:
    """Convenience wrapper returning the flattened lines of ``path``."""

    return ConfigReader(include_dir=include_dir).read(path)
