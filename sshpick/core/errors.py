"""Exception hierarchy raised by the host resolution engine."""

from __future__ import annotations

from pathlib import Path

__all__ = [
    "IncludeCycleExceeded",
    "IncludePathUnresolvable",
    "PickerUnavailable",
    "ResourceNotFound",
    "SshPickError",
]


class SshPickError(Exception):
    """Base class for all sshpick errors."""


class ResourceNotFound(SshPickError):
    """Raised when the root configuration file is missing or unreadable."""

    def __init__(self, path: Path | str, reason: str | None = None) -> None:
        self.path = Path(path)
        self.reason = reason
        message = f"SSH config file not found: {self.path}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class IncludePathUnresolvable(SshPickError):
    """An included file exists but could not be canonicalised or read."""

    def __init__(self, path: Path | str, reason: str | None = None) -> None:
        self.path = Path(path)
        self.reason = reason
        message = f"Cannot resolve included file: {self.path}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class IncludeCycleExceeded(SshPickError):
    """Include expansion stopped because of a cycle or excessive nesting."""

    def __init__(self, path: Path | str, depth: int) -> None:
        self.path = Path(path)
        self.depth = depth
        super().__init__(f"Include of {self.path} skipped at depth {depth}")


class PickerUnavailable(SshPickError):
    """The external interactive picker cannot be started."""
