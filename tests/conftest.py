# tests/conftest.py

"""Shared pytest fixtures for all QuickCart tests."""

from collections.abc import Generator
from pathlib import Path
from unittest.mock import patch

import pytest

from src.config.settings import Settings


@pytest.fixture(autouse=True)
def isolated_data_dirs(tmp_path: Path) -> Generator[Path, None, None]:
    """Point every on-disk location at a per-test temp directory."""
    with patch.multiple(
        Settings,
        DATA_DIR=tmp_path,
        DB_PATH=tmp_path / "quickcart.db",
        IMAGES_DIR=tmp_path / "images",
        REPORTS_DIR=tmp_path / "reports",
        CART_PATH=tmp_path / "cart.json",
        RESULTS_DIR=tmp_path / "results",
    ), patch(
        "src.storage.report_exporter._REPORTS_DIR", tmp_path / "reports",
    ):
        yield tmp_path
