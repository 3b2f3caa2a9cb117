"""Shared pytest fixtures for tabungin tests."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest

from tabungin.runtime import get_paths, load_settings, set_data_root
from tabungin.runtime import paths as runtime_paths

_ENV_OVERRIDES = ("TABUNGIN_OCR_URL", "TABUNGIN_OCR_TIMEOUT", "TABUNGIN_CRON_SECRET")


@pytest.fixture(autouse=True)
def data_root(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[Path]:
    """Point the data root at a temp directory and start from clean settings."""
    for name in _ENV_OVERRIDES:
        monkeypatch.delenv(name, raising=False)
    root = tmp_path / "tabungin-home"
    monkeypatch.setenv("TABUNGIN_HOME", str(root))
    set_data_root(root)
    load_settings.cache_clear()
    yield get_paths().root
    load_settings.cache_clear()
    runtime_paths._paths = None

