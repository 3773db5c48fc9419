"""Pytest configuration."""

from pathlib import Path

import pandas as pd
import pytest

from dashboard_config import CONFIG_ENV, CSV_ENV, LOG_LEVEL_ENV

SAMPLE_CSV = """country,REGION,RandomValue
France,Europe,2
France,Europe,1
France,Europe,0
France,Europe,2
Germany,Europe,2
United States,North America,0
USA,North America,0
Atlantis,Ocean,1
"""


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the developer's shell settings out of the tests."""
    for name in (CONFIG_ENV, CSV_ENV, LOG_LEVEL_ENV):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def sample_csv_text() -> str:
    return SAMPLE_CSV


@pytest.fixture
def sample_csv_path(tmp_path: Path) -> Path:
    path = tmp_path / "geo_sentiments.csv"
    path.write_text(SAMPLE_CSV, encoding="utf-8")
    return path


@pytest.fixture
def records() -> pd.DataFrame:
    return pd.DataFrame(
        {
            "country": ["United States", "France", "USA", "Atlantis", "France"],
            "region": ["North America", "Europe", "North America", "Ocean", "Europe"],
            "sentiment": [2, 1, 0, 2, 1],
        }
    )


@pytest.fixture
def aggregates() -> pd.DataFrame:
    return pd.DataFrame(
        {
            "id": ["USA", "FRA"],
            "display_name": ["United States", "France"],
            "positive": [1, 0],
            "neutral": [0, 2],
            "negative": [1, 0],
            "total": [2, 2],
        }
    )
