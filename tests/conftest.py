"""Pytest configuration helpers for the test suite."""

from __future__ import annotations

from pathlib import Path

import pytest

from pcactl.defaults import SettingHooks


@pytest.fixture
def hooks(tmp_path: Path) -> SettingHooks:
    """Host hooks pinned to a fixed certname and a temporary confdir."""
    confdir = tmp_path / "confdir"
    return SettingHooks(
        certname=lambda: "chihuahua-333",
        confdir=lambda: str(confdir),
    )


@pytest.fixture
def write_conf(tmp_path: Path):
    """Return a helper that writes ``puppet.conf`` text under *tmp_path*."""

    def _write(text: str, name: str = "puppet.conf") -> Path:
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path

    return _write
