"""
Plotly world map of per-country sentiment.

Two choropleth traces: a grey one for every country without data (hover
only), and one for countries with data, colored on the active view's scale.
The selected country, if any, is redrawn on top with a heavy outline.
"""
from __future__ import annotations

from typing import Iterable, Mapping, Optional

import pandas as pd
import plotly.graph_objects as go

from color_scale import MISSING_COLOR, VIEWS, build_colorscale, color_values, gradient_color
from country_codes import id_to_country_name, world_country_ids
from dashboard_config import DashboardConfig

BORDER_COLOR = "#000000"
HIGHLIGHT_COLOR = "#1d4ed8"

MISSING_TRACE = 0
DATA_TRACE = 1


def country_label(country_id: str, display_name: Optional[str] = None) -> str:
    """Preferred display name: known country name, else the raw CSV name, else the id."""
    known = id_to_country_name(country_id)
    if known != country_id:
        return known
    return display_name or country_id


def hover_text(row: Mapping) -> str:
    name = country_label(row["id"], row.get("display_name"))
    if row.get("total", 0) > 0:
        return (
            f"<b>{name}</b><br>Positive: {row['positive']}"
            f"<br>Neutral: {row['neutral']}<br>Negative: {row['negative']}"
        )
    return f"No data for {name}"


def build_series(aggregates: pd.DataFrame, view: str) -> pd.DataFrame:
    """One row per country: aggregates colored for the view, plus grey no-data countries."""
    data = aggregates.copy()
    data["value"] = color_values(data, view) if len(data) else pd.Series(dtype=float)
    data["fill"] = [gradient_color(v, view) for v in data["value"]]
    data["interactive"] = True

    have = set(data["id"])
    missing_ids = [cid for cid in world_country_ids() if cid not in have]
    missing = pd.DataFrame({
        "id": missing_ids,
        "display_name": [id_to_country_name(cid) for cid in missing_ids],
        "positive": 0,
        "neutral": 0,
        "negative": 0,
        "total": 0,
        "value": 0.0,
        "fill": MISSING_COLOR,
        "interactive": False,
    })

    series = pd.concat([data, missing], ignore_index=True)
    series["hover"] = [hover_text(row) for row in series.to_dict("records")]
    return series


def build_map_figure(
    aggregates: pd.DataFrame,
    view: str,
    selected_id: Optional[str] = None,
    config: Optional[DashboardConfig] = None,
) -> go.Figure:
    config = config or DashboardConfig()
    series = build_series(aggregates, view)
    data = series[series["interactive"]]
    missing = series[~series["interactive"]]
    border = dict(line=dict(color=BORDER_COLOR, width=0.5))

    fig = go.Figure()
    fig.add_trace(go.Choropleth(
        name="No data",
        locations=missing["id"],
        z=[0] * len(missing),
        colorscale=[[0, MISSING_COLOR], [1, MISSING_COLOR]],
        showscale=False,
        hovertext=missing["hover"],
        hoverinfo="text",
        marker=border,
    ))
    fig.add_trace(go.Choropleth(
        name=VIEWS.get(view, view),
        locations=data["id"],
        z=data["value"],
        zmin=0,
        zmax=1,
        colorscale=build_colorscale(view),
        customdata=data["id"],
        hovertext=data["hover"],
        hoverinfo="text",
        marker=border,
        colorbar=dict(title=VIEWS.get(view, view), thickness=12),
    ))

    if selected_id and selected_id in set(data["id"]):
        row = data[data["id"] == selected_id].iloc[0]
        fig.add_trace(go.Choropleth(
            name="Selected",
            locations=[selected_id],
            z=[row["value"]],
            zmin=0,
            zmax=1,
            colorscale=build_colorscale(view),
            showscale=False,
            hovertext=[row["hover"]],
            hoverinfo="text",
            marker=dict(line=dict(color=HIGHLIGHT_COLOR, width=2.5)),
        ))

    fig.update_geos(
        projection_type="mercator",
        showframe=False,
        showcoastlines=False,
        showland=True,
        landcolor=MISSING_COLOR,
        lataxis_range=[-58, 85],
    )
    fig.update_layout(
        height=config.map_height,
        margin=dict(l=0, r=0, t=0, b=0),
        clickmode="event+select",
        showlegend=False,
    )
    return fig


def _points(event) -> list:
    if event is None:
        return []
    selection = event.get("selection") if isinstance(event, Mapping) else getattr(event, "selection", None)
    if not selection:
        return []
    points = selection.get("points") if isinstance(selection, Mapping) else getattr(selection, "points", None)
    return list(points or [])


def selected_country_from_event(event, ids: Iterable[str]) -> Optional[str]:
    """
    Country id picked by a plotly_chart selection event, or None.
    Only countries in ids (those with data) can be picked.
    """
    ids = list(ids)
    known = set(ids)
    for point in _points(event):
        location = point.get("location")
        if location in known:
            return location

        customdata = point.get("customdata")
        if isinstance(customdata, (list, tuple)):
            customdata = customdata[0] if customdata else None
        if customdata in known:
            return customdata

        index = point.get("point_index", point.get("point_number"))
        if point.get("curve_number") == DATA_TRACE and isinstance(index, int) and 0 <= index < len(ids):
            return ids[index]
    return None
