"""
Global Sentiment Dashboard
Loads per-country sentiment labels from a CSV, colors a world map by
sentiment mix and shows a details panel for the selected country.

Run with: streamlit run app.py
"""

import streamlit as st
import pandas as pd

from color_scale import LEGEND_COLORS, VIEWS, sentiment_bucket
from dashboard_config import DashboardConfig, load_config
from sentiment_data import (
    DataLoadError,
    NoValidDataError,
    aggregate_by_country,
    country_options,
    load_sentiment_data,
    sentiment_summary,
)
from sentiment_map import build_map_figure, country_label, selected_country_from_event
from utils_logging import get_logger, set_log_level

COUNTRY_PLACEHOLDER = "Select a country"

VIEW_KEY = "view_select"
COUNTRY_KEY = "country_select"
MAP_KEY = "world_map"
IDS_KEY = "map_country_ids"
NAMES_KEY = "map_country_names"


@st.cache_data(show_spinner=False)
def load_dashboard_data(source: str, timeout: float) -> pd.DataFrame:
    """Read and validate the CSV once per source."""
    return load_sentiment_data(source, timeout=timeout)


def _on_map_select():
    """Copy a map click into the country dropdown."""
    event = st.session_state.get(MAP_KEY)
    country_id = selected_country_from_event(event, st.session_state.get(IDS_KEY, []))
    if country_id:
        st.session_state[COUNTRY_KEY] = st.session_state.get(NAMES_KEY, {}).get(country_id, COUNTRY_PLACEHOLDER)


def _on_close_details():
    st.session_state[COUNTRY_KEY] = COUNTRY_PLACEHOLDER


class GeoSentimentDashboardApp:
    def __init__(self, config: DashboardConfig = None):
        self.config = config or load_config()
        set_log_level(self.config.log_level)
        self.logger = get_logger("geo_sentiment.app")
        self.setup_page_config()

    def setup_page_config(self):
        st.set_page_config(
            page_title=self.config.page_title,
            page_icon="🌍",
            layout="wide",
        )

    def load_data(self) -> pd.DataFrame:
        """Load the records, or show the error and stop the page."""
        source = self.config.resolved_source()
        try:
            with st.spinner("Loading data..."):
                records = load_dashboard_data(source, self.config.request_timeout)
        except NoValidDataError as e:
            self.logger.error(f"No usable rows in {source}")
            st.error(str(e))
            st.stop()
        except DataLoadError as e:
            self.logger.error(f"Failed to load {source}: {e}")
            st.error(f"Failed to load data: {e}")
            st.stop()
        self.logger.info(f"Loaded {len(records)} rows from {source}")
        return records

    def summary_metrics(self, aggregates: pd.DataFrame):
        summary = sentiment_summary(aggregates)
        col1, col2, col3, col4 = st.columns(4)

        with col1:
            st.metric("Countries", f"{summary['countries']:,}")

        with col2:
            st.metric("Total Entries", f"{summary['total']:,}")

        with col3:
            st.metric("Positive %", f"{summary['positive_pct']:.1f}%")

        with col4:
            st.metric("Negative %", f"{summary['negative_pct']:.1f}%")

    def controls(self, records: pd.DataFrame, aggregates: pd.DataFrame):
        """View and country dropdowns. Returns (view, selected country id or None)."""
        options = country_options(records)
        name_to_id = dict(options)

        # Remember what a map click should put in the dropdown
        st.session_state[IDS_KEY] = aggregates["id"].tolist()
        st.session_state[NAMES_KEY] = dict(zip(aggregates["id"], aggregates["display_name"]))

        col1, col2 = st.columns(2)
        with col1:
            view = st.selectbox(
                "View:",
                list(VIEWS),
                format_func=VIEWS.get,
                key=VIEW_KEY,
            )
        with col2:
            names = [COUNTRY_PLACEHOLDER] + [name for name, _ in options]
            if st.session_state.get(COUNTRY_KEY) not in names:
                st.session_state[COUNTRY_KEY] = COUNTRY_PLACEHOLDER
            chosen = st.selectbox("Country:", names, key=COUNTRY_KEY)

        selected_id = name_to_id.get(chosen) if chosen != COUNTRY_PLACEHOLDER else None
        return view, selected_id

    def world_map(self, aggregates: pd.DataFrame, view: str, selected_id):
        try:
            fig = build_map_figure(aggregates, view, selected_id=selected_id, config=self.config)
        except Exception as e:
            self.logger.exception("Map setup failed")
            st.error(f"Failed to initialize map: {e}")
            st.stop()
        st.plotly_chart(
            fig,
            use_container_width=True,
            key=MAP_KEY,
            on_select=_on_map_select,
            selection_mode="points",
            config={"scrollZoom": True, "displayModeBar": False},
        )

    def legend(self):
        swatches = " ".join(
            f'<span style="display:inline-flex;align-items:center;margin:0 12px;">'
            f'<span style="width:16px;height:16px;border-radius:50%;background:{color};'
            f'display:inline-block;margin-right:6px;"></span>{label}</span>'
            for label, color in LEGEND_COLORS.items()
        )
        st.markdown(f'<div style="text-align:center;">{swatches}</div>', unsafe_allow_html=True)

    def details_panel(self, aggregates: pd.DataFrame, selected_id):
        """Counts for the selected country, with a button to clear the selection."""
        match = aggregates[aggregates["id"] == selected_id]
        if match.empty:
            return
        details = match.iloc[0].to_dict()

        header, close = st.columns([5, 1])
        with header:
            st.subheader(f"{country_label(details['id'], details['display_name'])} Overview")
        with close:
            st.button("✖", key="close_details", help="Close", on_click=_on_close_details)

        st.success(f"**Positive:** {details['positive']}")
        st.warning(f"**Neutral:** {details['neutral']}")
        st.error(f"**Negative:** {details['negative']}")
        st.info(f"**Total Entries:** {details['total']}")

        mood = sentiment_bucket(details)
        if mood:
            st.caption(f"Dominant mood: {mood}")

    def run_dashboard(self):
        """Main dashboard interface"""
        st.title(f"🌍 {self.config.page_title}")

        records = self.load_data()
        aggregates = aggregate_by_country(records)

        self.summary_metrics(aggregates)
        st.markdown("---")

        view, selected_id = self.controls(records, aggregates)

        if selected_id:
            col1, col2 = st.columns([2, 1])
        else:
            col1, col2 = st.container(), None

        with col1:
            self.world_map(aggregates, view, selected_id)
            self.legend()

        if col2 is not None:
            with col2:
                self.details_panel(aggregates, selected_id)

        st.caption(f"Data source: {self.config.data_source}")


if __name__ == "__main__":
    app = GeoSentimentDashboardApp()
    app.run_dashboard()
