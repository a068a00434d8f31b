"""Utilities for resolving filesystem locations used by sshpick."""

from __future__ import annotations

import os
from pathlib import Path

from platformdirs import user_data_path

__all__ = ["DEFAULT_SSH_CONFIG", "data_dir", "ssh_config_path"]

DEFAULT_SSH_CONFIG = "~/.ssh/config"


def data_dir() -> Path:
    """Return the base directory for mutable application data.

    The path defaults to the platform-specific user data directory exposed by
    :mod:`platformdirs`. When the ``SSHPICK_DATA_DIR`` environment variable is
    set the value is treated as an override, allowing tests or alternative
    deployments to isolate their state.
    """

    override = os.getenv("SSHPICK_DATA_DIR")
    path = Path(override).expanduser() if override else user_data_path("sshpick")

    path.mkdir(parents=True, exist_ok=True)
    return path


def ssh_config_path() -> Path:
    """Return the OpenSSH client configuration file to read hosts from.

    ``SSH_CONFIG_FILE`` replaces the default ``~/.ssh/config`` location. The
    returned path is only expanded, not resolved; canonicalisation happens when
    the file is read so that a missing file is reported at that point.
    """

    override = os.getenv("SSH_CONFIG_FILE")
    return Path(override or DEFAULT_SSH_CONFIG).expanduser()
