"""Smoke tests for the Streamlit page."""

from pathlib import Path

import pytest
from streamlit.testing.v1 import AppTest

import app as dashboard_app
import sentiment_map
from dashboard_config import CSV_ENV

APP_PATH = str(Path(__file__).resolve().parents[1] / "app.py")


@pytest.fixture
def app(sample_csv_path, monkeypatch) -> AppTest:
    monkeypatch.setenv(CSV_ENV, str(sample_csv_path))
    return AppTest.from_file(APP_PATH, default_timeout=30)


def test_renders_dashboard(app):
    app.run()

    assert not app.exception
    assert app.title[0].value == "🌍 Global Sentiment Dashboard"
    assert app.selectbox(key="view_select").value == "overall"
    assert app.selectbox(key="country_select").value == "Select a country"
    assert app.selectbox(key="country_select").options == [
        "Select a country",
        "Atlantis",
        "France",
        "Germany",
        "USA",
        "United States",
    ]
    assert [m.value for m in app.metric] == ["4", "8", "37.5%", "37.5%"]


def test_country_details_panel(app):
    app.run()
    app.selectbox(key="country_select").select("France").run()

    assert not app.exception
    assert app.subheader[0].value == "France Overview"
    assert "**Positive:** 2" in [e.value for e in app.success]
    assert "**Neutral:** 1" in [e.value for e in app.warning]
    assert "**Negative:** 1" in [e.value for e in app.error]
    assert "**Total Entries:** 4" in [e.value for e in app.info]


def test_close_details_resets_dropdown(app):
    app.run()
    app.selectbox(key="country_select").select("United States").run()
    assert app.subheader[0].value == "United States Overview"
    assert "**Total Entries:** 2" in [e.value for e in app.info]

    app.button(key="close_details").click().run()

    assert app.selectbox(key="country_select").value == "Select a country"
    assert len(app.subheader) == 0


def test_view_switch(app):
    app.run()
    app.selectbox(key="view_select").select("negative").run()

    assert not app.exception
    assert app.selectbox(key="view_select").value == "negative"


def test_missing_file_shows_error(tmp_path, monkeypatch):
    monkeypatch.setenv(CSV_ENV, str(tmp_path / "missing.csv"))
    app = AppTest.from_file(APP_PATH, default_timeout=30).run()

    assert app.error[0].value.startswith("Failed to load data: File not found")
    assert len(app.selectbox) == 0


def test_invalid_csv_shows_error(tmp_path, monkeypatch):
    path = tmp_path / "invalid.csv"
    path.write_text("Country,Region,RandomValue\nFrance,Europe,9\n", encoding="utf-8")
    monkeypatch.setenv(CSV_ENV, str(path))
    app = AppTest.from_file(APP_PATH, default_timeout=30).run()

    assert app.error[0].value == (
        "No valid data found. Check CSV format (headers: Country,Region,RandomValue)."
    )


def test_map_build_failure_shows_error(app, monkeypatch):
    def broken_figure(*args, **kwargs):
        raise TypeError("bad figure")

    monkeypatch.setattr(sentiment_map, "build_map_figure", broken_figure)
    app.run()

    assert app.error[0].value == "Failed to initialize map: bad figure"


@pytest.fixture
def map_state(monkeypatch) -> dict:
    """Session state as the page leaves it after rendering the map."""
    state = {
        dashboard_app.IDS_KEY: ["USA", "FRA"],
        dashboard_app.NAMES_KEY: {"USA": "United States", "FRA": "France"},
        dashboard_app.COUNTRY_KEY: dashboard_app.COUNTRY_PLACEHOLDER,
    }
    monkeypatch.setattr(dashboard_app.st, "session_state", state)
    return state


def test_map_click_selects_country(map_state):
    map_state[dashboard_app.MAP_KEY] = {
        "selection": {"points": [{"location": "USA", "curve_number": 1, "point_index": 0}]}
    }

    dashboard_app._on_map_select()

    assert map_state[dashboard_app.COUNTRY_KEY] == "United States"


def test_map_click_on_country_without_data_keeps_dropdown(map_state):
    map_state[dashboard_app.COUNTRY_KEY] = "France"
    map_state[dashboard_app.MAP_KEY] = {
        "selection": {"points": [{"location": "DEU", "curve_number": 0, "point_index": 12}]}
    }

    dashboard_app._on_map_select()

    assert map_state[dashboard_app.COUNTRY_KEY] == "France"


def test_close_details_callback(map_state):
    map_state[dashboard_app.COUNTRY_KEY] = "France"

    dashboard_app._on_close_details()

    assert map_state[dashboard_app.COUNTRY_KEY] == dashboard_app.COUNTRY_PLACEHOLDER
