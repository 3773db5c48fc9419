"""Test config loading and environment overrides."""

from pathlib import Path

import pytest

from dashboard_config import (
    CONFIG_ENV,
    CSV_ENV,
    LOG_LEVEL_ENV,
    ROOT,
    DashboardConfig,
    get_config_value,
    load_config,
)


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    path = tmp_path / "dashboard.yaml"
    path.write_text(
        "data:\n"
        "  source: https://example.com/data.csv\n"
        "  request_timeout: 5\n"
        "page:\n"
        "  title: Test Board\n"
        "  map_height: 300\n"
        "logging:\n"
        "  level: debug\n",
        encoding="utf-8",
    )
    return path


def test_defaults_when_file_missing(tmp_path):
    config = load_config(tmp_path / "missing.yaml")
    assert config == DashboardConfig()


def test_load_from_yaml(config_file):
    config = load_config(config_file)

    assert config.data_source == "https://example.com/data.csv"
    assert config.request_timeout == 5.0
    assert config.page_title == "Test Board"
    assert config.map_height == 300
    assert config.log_level == "DEBUG"


def test_env_overrides(config_file, monkeypatch):
    monkeypatch.setenv(CONFIG_ENV, str(config_file))
    monkeypatch.setenv(CSV_ENV, "/srv/data/other.csv")
    monkeypatch.setenv(LOG_LEVEL_ENV, "warning")

    config = load_config()

    assert config.data_source == "/srv/data/other.csv"
    assert config.log_level == "WARNING"
    assert config.page_title == "Test Board"


def test_malformed_yaml_falls_back_to_defaults(tmp_path):
    path = tmp_path / "broken.yaml"
    path.write_text("data: [unclosed\n", encoding="utf-8")

    assert load_config(path) == DashboardConfig()


def test_unknown_log_level(tmp_path):
    path = tmp_path / "dashboard.yaml"
    path.write_text("logging:\n  level: chatty\n", encoding="utf-8")

    assert load_config(path).log_level == "INFO"


def test_resolved_source():
    assert DashboardConfig(data_source="data/x.csv").resolved_source() == str(ROOT / "data" / "x.csv")
    assert DashboardConfig(data_source="/tmp/x.csv").resolved_source() == "/tmp/x.csv"
    assert DashboardConfig(data_source="HTTPS://host/x.csv").resolved_source() == "HTTPS://host/x.csv"


def test_get_config_value():
    raw = {"a": {"b": None, "c": 3}}
    assert get_config_value(raw, ["a", "c"], 0) == 3
    assert get_config_value(raw, ["a", "b"], "dflt") == "dflt"
    assert get_config_value(raw, ["a", "x"], "dflt") == "dflt"
    assert get_config_value(raw, ["a", "c", "d"], "dflt") == "dflt"


def test_shipped_config_matches_defaults():
    config = load_config(ROOT / "config" / "dashboard.yaml")
    assert config.data_source == "data/geo_sentiments.csv"
    assert config.page_title == "Global Sentiment Dashboard"
