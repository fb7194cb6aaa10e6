# tests/conftest.py

"""Shared pytest fixtures for all storefront tests."""

from collections.abc import Generator
from pathlib import Path

import pytest

from storefront.config.settings import Settings


@pytest.fixture(autouse=True)
def isolated_paths(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch,
) -> Generator[Path, None, None]:
    """Point every on-disk location at a per-test temp directory."""
    monkeypatch.setattr(Settings, "DATA_DIR", tmp_path / "data")
    monkeypatch.setattr(
        Settings, "LOCAL_STORAGE_PATH", tmp_path / "data" / "local_storage.json"
    )
    monkeypatch.setattr(Settings, "CHARTS_DIR", tmp_path / "data" / "charts")
    monkeypatch.setattr(Settings, "EXPORTS_DIR", tmp_path / "exports")
    monkeypatch.setattr(Settings, "LOGS_DIR", tmp_path / "logs")
    monkeypatch.delenv(Settings.HF_API_KEY_ENV, raising=False)
    yield tmp_path
