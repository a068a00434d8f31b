"""Shared pytest configuration for the test suite."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    """Tag every test that is not marked as system as a unit test."""

    for item in items:
        if "system" not in item.keywords:
            item.add_marker(pytest.mark.unit)


@pytest.fixture(autouse=True)
def isolated_environment(
    tmp_path_factory: pytest.TempPathFactory,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """Keep tests away from the real data directory and ssh config."""

    monkeypatch.setenv("SSHPICK_DATA_DIR", str(tmp_path_factory.mktemp("data")))
    monkeypatch.delenv("SSH_CONFIG_FILE", raising=False)


WriteFn = Callable[[str, str], Path]


@pytest.fixture()
def ssh_dir(tmp_path: Path) -> Path:
    """Directory standing in for ``~/.ssh``."""

    path = tmp_path / "ssh"
    path.mkdir()
    return path


@pytest.fixture()
def write_file(ssh_dir: Path) -> WriteFn:
    """Write a file relative to ``ssh_dir`` and return its path."""

    def _write(relative: str, content: str) -> Path:
        target = ssh_dir / relative
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
        return target

    return _write
