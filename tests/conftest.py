"""Global pytest fixtures for lcanalyzer."""

from __future__ import annotations

import pytest

pytest_plugins = [
    "tests.fixtures.lightcurves",
]


@pytest.fixture(autouse=True)
def _no_data_dir(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep a developer's LCANALYZER_DATA_DIR from leaking into tests."""
    monkeypatch.delenv("LCANALYZER_DATA_DIR", raising=False)
