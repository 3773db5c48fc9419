"""
Map colors for the sentiment views.

Each country gets a value in [0, 1] (color_value) that is turned into a hex
color by gradient_color. The overall view runs dark red -> olive -> dark green
with a flat olive band in the middle; the single-label views run light -> dark
in the label's hue.
"""
from __future__ import annotations

from typing import Dict, List, Mapping, Optional

import numpy as np
import pandas as pd

OVERALL = "overall"
POSITIVE = "positive"
NEUTRAL = "neutral"
NEGATIVE = "negative"

VIEWS: Dict[str, str] = {
    OVERALL: "Overall Sentiment",
    POSITIVE: "Positive",
    NEUTRAL: "Neutral",
    NEGATIVE: "Negative",
}

MISSING_COLOR = "#d3d3d3"

# Light -> dark ramp per single-label view
LABEL_RAMPS: Dict[str, tuple] = {
    POSITIVE: ("#cce5cc", "#006400"),
    NEUTRAL: ("#ffffcc", "#cccc00"),
    NEGATIVE: ("#f5cccc", "#8b0000"),
}

DARK_RED = "#8b0000"
OLIVE = "#cccc00"
DARK_GREEN = "#006400"
LOW_BREAK = 0.33
HIGH_BREAK = 0.66

# Legend swatches (label -> css color)
LEGEND_COLORS: Dict[str, str] = {
    "Positive": "#22c55e",
    "Neutral": "#eab308",
    "Negative": "#ef4444",
}


def _hex_to_rgb(color: str) -> np.ndarray:
    return np.array([int(color[i:i + 2], 16) for i in (1, 3, 5)], dtype=float)


def interpolate_color(color1: str, color2: str, factor: float) -> str:
    """Linear RGB blend of two #rrggbb colors; channels round half up."""
    if factor <= 0:
        return color1
    if factor >= 1:
        return color2
    a, b = _hex_to_rgb(color1), _hex_to_rgb(color2)
    r, g, bl = (int(c) for c in np.floor(a + (b - a) * factor + 0.5))
    return f"#{r:02x}{g:02x}{bl:02x}"


def gradient_color(value: float, view: str) -> str:
    if view in LABEL_RAMPS:
        light, dark = LABEL_RAMPS[view]
        return interpolate_color(light, dark, value)

    if value >= HIGH_BREAK:
        return interpolate_color(OLIVE, DARK_GREEN, (value - HIGH_BREAK) / (1 - HIGH_BREAK))
    if value >= LOW_BREAK:
        return OLIVE
    return interpolate_color(DARK_RED, OLIVE, value / LOW_BREAK)


def color_value(counts: Mapping, view: str) -> float:
    """
    Where a country sits on the view's scale, in [0, 1].
    Label views use that label's share; overall maps
    (2*pos + neu - 2*neg) / (2*total) from [-1, 1] onto [0, 1].
    """
    total = counts.get("total", 0) or 0
    if total == 0:
        return 0.0
    if view in LABEL_RAMPS:
        return counts.get(view, 0) / total

    score = (2 * counts.get("positive", 0) + counts.get("neutral", 0) - 2 * counts.get("negative", 0)) / (2 * total)
    return (score + 1) / 2


def color_values(aggregates: pd.DataFrame, view: str) -> pd.Series:
    """Vectorised color_value over an aggregate table."""
    total = aggregates["total"].astype(float)
    safe_total = total.where(total > 0, 1.0)
    if view in LABEL_RAMPS:
        values = aggregates[view] / safe_total
    else:
        score = (2 * aggregates["positive"] + aggregates["neutral"] - 2 * aggregates["negative"]) / (2 * safe_total)
        values = (score + 1) / 2
    return values.where(total > 0, 0.0).astype(float)


def sentiment_bucket(counts: Mapping) -> Optional[str]:
    """Dominant mood from the mean label (0..2): positive, neutral or negative."""
    total = counts.get("total", 0) or 0
    if total == 0:
        return None
    score = (2 * counts.get("positive", 0) + counts.get("neutral", 0)) / total
    if score >= 1.5:
        return POSITIVE
    if score >= 0.5:
        return NEUTRAL
    return NEGATIVE


def build_colorscale(view: str, samples: int = 21) -> List[list]:
    """Plotly colorscale sampled from gradient_color, breakpoints included."""
    stops = set(np.round(np.linspace(0.0, 1.0, samples), 6).tolist())
    if view not in LABEL_RAMPS:
        stops.update([LOW_BREAK, HIGH_BREAK])
    return [[stop, gradient_color(stop, view)] for stop in sorted(stops)]
