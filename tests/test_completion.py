"""Tests for the line-buffer completion handler."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

import pytest

from sshpick.cli.completion import (
    Action,
    CompletionHandler,
    CompletionResult,
    CompletionSettings,
    Selection,
    select_host,
    split_buffer,
)
from sshpick.config import AppConfig
from sshpick.core.errors import PickerUnavailable
from sshpick.core.extractor import FilteredEntry

ENTRIES = [
    FilteredEntry("db1", "10.0.0.1", "postgres", "prod box"),
    FilteredEntry("web1", "10.0.0.2"),
    FilteredEntry("web2", "10.0.0.2"),
]


class StubPicker:
    """Picker returning a canned selection and recording its input."""

    def __init__(self, selection: str | None = None, *, error: Exception | None = None) -> None:
        self.selection = selection
        self.error = error
        self.calls: list[tuple[str, str]] = []

    def choose(self, table: str, query: str) -> str | None:
        self.calls.append((table, query))
        if self.error is not None:
            raise self.error
        return self.selection


class StubLoader:
    """Loader filtering a fixed entry list the way the real pipeline does."""

    def __init__(self, entries: Sequence[FilteredEntry] = ENTRIES) -> None:
        self.entries = list(entries)
        self.calls: list[tuple[Path, list[str]]] = []

    def __call__(self, config_path: Path, keywords: Sequence[str] = ()) -> list[FilteredEntry]:
        self.calls.append((config_path, list(keywords)))
        return [
            entry
            for entry in self.entries
            if all(word.lower() in entry.serialize().lower() for word in keywords)
        ]


@pytest.fixture()
def settings(tmp_path: Path) -> CompletionSettings:
    return CompletionSettings(config_path=tmp_path / "config")


def _handler(
    settings: CompletionSettings,
    picker: StubPicker | None = None,
    loader: StubLoader | None = None,
) -> CompletionHandler:
    return CompletionHandler(
        settings,
        loader=loader if loader is not None else StubLoader(),
        picker=picker if picker is not None else StubPicker(),
    )


@pytest.mark.parametrize("buffer", ["ssh", "  ssh", "", "git push", "sshfs host:", "scp db"])
def test_buffers_outside_the_engine_fall_back(
    settings: CompletionSettings,
    buffer: str,
) -> None:
    loader = StubLoader()
    picker = StubPicker("web1")

    result = _handler(settings, picker, loader).complete(buffer)

    assert result == CompletionResult(Action.FALLBACK, buffer)
    assert loader.calls == []
    assert picker.calls == []


def test_bare_command_with_trailing_space_opens_picker(settings: CompletionSettings) -> None:
    picker = StubPicker("db1    ->  10.0.0.1")

    result = _handler(settings, picker).complete("ssh ")

    assert result == CompletionResult(Action.ACCEPT, "ssh db1")
    assert picker.calls[0][1] == ""


def test_single_match_replaces_without_picker(settings: CompletionSettings) -> None:
    picker = StubPicker()

    result = _handler(settings, picker).complete("ssh db")

    assert result == CompletionResult(Action.REPLACE, "ssh db1")
    assert picker.calls == []


def test_multiple_matches_use_picker_and_accept(settings: CompletionSettings) -> None:
    picker = StubPicker("web2    ->  10.0.0.2")
    loader = StubLoader()

    result = _handler(settings, picker, loader).complete("ssh web")

    assert result == CompletionResult(Action.ACCEPT, "ssh web2")
    table, query = picker.calls[0]
    assert query == "web"
    assert table.splitlines()[0].startswith("Alias")
    assert len(table.splitlines()) == 4
    assert loader.calls == [(settings.config_path, ["web"])]


def test_cancelled_picker_leaves_buffer_unchanged(settings: CompletionSettings) -> None:
    result = _handler(settings, StubPicker(None)).complete("ssh web")

    assert result == CompletionResult(Action.NOOP, "ssh web")


def test_no_match_falls_back(settings: CompletionSettings) -> None:
    result = _handler(settings).complete("ssh nothing-here")

    assert result == CompletionResult(Action.FALLBACK, "ssh nothing-here")


def test_missing_config_falls_back(settings: CompletionSettings) -> None:
    handler = CompletionHandler(settings, picker=StubPicker())

    assert handler.complete("ssh db").action is Action.FALLBACK


def test_unavailable_picker_falls_back(settings: CompletionSettings) -> None:
    picker = StubPicker(error=PickerUnavailable("fzf command not found"))

    result = _handler(settings, picker).complete("ssh web")

    assert result == CompletionResult(Action.FALLBACK, "ssh web")


def test_leading_flags_are_not_keywords(settings: CompletionSettings) -> None:
    loader = StubLoader()
    picker = StubPicker("web1")

    result = _handler(settings, picker, loader).complete("ssh -v -A web 10.0")

    assert loader.calls[0][1] == ["web", "10.0"]
    assert picker.calls[0][1] == "-v -A web 10.0"
    assert result.buffer == "ssh web1"


def test_custom_connect_command(tmp_path: Path) -> None:
    settings = CompletionSettings(config_path=tmp_path / "config", connect_command="mosh")

    handler = _handler(settings)

    assert handler.complete("mosh db").buffer == "mosh db1"
    assert handler.complete("ssh db").action is Action.FALLBACK


def test_end_to_end_with_real_config(write_file) -> None:
    config = write_file("config", "#_Desc prod box\nHost db1\n  HostName 10.0.0.1\n")
    settings = CompletionSettings(config_path=config)

    result = CompletionHandler(settings, picker=StubPicker()).complete("ssh d")

    assert result.render() == "replace\nssh db1"


def test_select_host_outcomes() -> None:
    assert select_host([], "", StubPicker()) is None
    assert select_host(ENTRIES[:1], "", StubPicker()) == Selection("db1", interactive=False)
    assert select_host(ENTRIES, "w", StubPicker("web1  ->")) == Selection("web1", interactive=True)
    assert select_host(ENTRIES, "w", StubPicker("")) == Selection(None, interactive=True)


def test_split_buffer_tolerates_open_quotes() -> None:
    assert split_buffer("ssh 'a b' c") == ["ssh", "a b", "c"]
    assert split_buffer("ssh 'open") == ["ssh", "'open"]


def test_settings_build_uses_environment(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    override = tmp_path / "custom_config"
    monkeypatch.setenv("SSH_CONFIG_FILE", str(override))
    config = AppConfig(connect_command="ssh", preview=True)

    settings = CompletionSettings.build(config)

    assert settings.config_path == override
    assert settings.explicit_config
    assert settings.picker.preview_command is not None
    assert str(override) in settings.picker.preview_command


def test_settings_build_default_path_omits_config_flag(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setenv("HOME", str(tmp_path))

    settings = CompletionSettings.build(AppConfig())

    assert settings.config_path == tmp_path / ".ssh" / "config"
    assert not settings.explicit_config
    assert "--config" not in (settings.picker.preview_command or "")


def test_settings_build_without_preview(tmp_path: Path) -> None:
    settings = CompletionSettings.build(AppConfig(preview=False), tmp_path / "config")

    assert settings.picker.preview_command is None
    assert settings.config_path == tmp_path / "config"
