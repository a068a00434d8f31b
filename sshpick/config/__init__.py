"""Configuration models and persistence helpers for sshpick."""

from __future__ import annotations

import json
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

from sshpick.paths import data_dir

__all__ = ["AppConfig", "ConfigStore", "DEFAULT_PREVIEW_FIELDS", "default_config_path"]

_DEFAULT_CONFIG_FILENAME = "config.json"

DEFAULT_PREVIEW_FIELDS = (
    "User",
    "HostName",
    "Port",
    "ControlMaster",
    "ForwardAgent",
    "LocalForward",
    "IdentityFile",
    "RemoteForward",
    "ProxyCommand",
    "ProxyJump",
)

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass(slots=True)
class AppConfig:
    """Top-level application configuration settings."""

    connect_command: str = "ssh"
    picker_command: str = "fzf"
    picker_height: str = "40%"
    prompt: str = "SSH Remote > "
    preview: bool = True
    preview_fields: list[str] = field(default_factory=lambda: list(DEFAULT_PREVIEW_FIELDS))

    def to_payload(self) -> dict[str, Any]:
        """Serialize the configuration into a JSON-compatible structure."""

        return {
            "connect_command": self.connect_command,
            "picker_command": self.picker_command,
            "picker_height": self.picker_height,
            "prompt": self.prompt,
            "preview": self.preview,
            "preview_fields": list(self.preview_fields),
        }

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> AppConfig:
        """Create a configuration instance from serialized data.

        Values of the wrong type are dropped in favour of the defaults so that
        a hand-edited file can never break host selection.
        """

        config = cls()
        for name in ("connect_command", "picker_command", "picker_height", "prompt"):
            value = payload.get(name)
            if isinstance(value, str) and value.strip():
                setattr(config, name, value if name == "prompt" else value.strip())

        preview = payload.get("preview")
        if isinstance(preview, bool):
            config.preview = preview

        raw_fields = payload.get("preview_fields")
        if isinstance(raw_fields, list):
            names: list[str] = []
            for item in raw_fields:
                if not isinstance(item, str):
                    continue
                normalized = item.strip()
                if normalized and normalized not in names:
                    names.append(normalized)
            config.preview_fields = names
        return config

    def set_value(self, key: str, value: str) -> None:
        """Update a single setting from its textual CLI representation."""

        known = {item.name for item in fields(self)}
        if key not in known:
            msg = f"Unknown setting '{key}'. Choose from: {', '.join(sorted(known))}."
            raise ValueError(msg)

        if key == "preview":
            lowered = value.strip().lower()
            if lowered in _TRUE_VALUES:
                self.preview = True
            elif lowered in _FALSE_VALUES:
                self.preview = False
            else:
                msg = f"Setting 'preview' expects a boolean, got '{value}'."
                raise ValueError(msg)
            return

        if key == "preview_fields":
            self.preview_fields = [item.strip() for item in value.split(",") if item.strip()]
            return

        if not value.strip():
            msg = f"Setting '{key}' must not be empty."
            raise ValueError(msg)
        setattr(self, key, value)


def default_config_path() -> Path:
    """Return the default location for the application's configuration file."""

    return data_dir() / _DEFAULT_CONFIG_FILENAME


class ConfigStore:
    """Manage persistence of the application configuration file."""

    def __init__(self, path: Path | None = None) -> None:
        self._path = path if path is not None else default_config_path()

    @property
    def path(self) -> Path:
        """Expose the backing configuration file path."""

        return self._path

    def load(self) -> AppConfig:
        """Load configuration from disk, returning defaults when absent."""

        if not self._path.exists():
            return AppConfig()
        try:
            raw = self._path.read_text(encoding="utf-8")
        except OSError:
            return AppConfig()
        if not raw.strip():
            return AppConfig()
        try:
            payload = json.loads(raw)
        except json.JSONDecodeError:
            return AppConfig()
        if not isinstance(payload, dict):
            return AppConfig()
        return AppConfig.from_payload(payload)

    def save(self, config: AppConfig) -> None:
        """Persist the provided configuration to disk atomically."""

        self._path.parent.mkdir(parents=True, exist_ok=True)
        data = json.dumps(config.to_payload(), indent=2, sort_keys=True)
        tmp_path = self._path.with_suffix(".tmp")
        tmp_path.write_text(data, encoding="utf-8")
        tmp_path.replace(self._path)

    def reset(self) -> None:
        """Remove the persisted configuration so defaults apply again."""

        self._path.unlink(missing_ok=True)
