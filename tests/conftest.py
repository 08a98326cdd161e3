from __future__ import annotations

from pathlib import Path

import pytest

from ruleswitch.catalog import clear_catalog_cache


@pytest.fixture(autouse=True)
def _reset_catalog_cache() -> None:
    clear_catalog_cache()


@pytest.fixture()
def plugin_dir(tmp_path: Path) -> Path:
    path = tmp_path / "custom_rules"
    path.mkdir()
    return path
