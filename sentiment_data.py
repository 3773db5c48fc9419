"""
Loading and aggregation of per-country sentiment labels.

Input is a CSV with (case-insensitive) headers Country, Region, RandomValue,
where RandomValue is 0 (negative), 1 (neutral) or 2 (positive).
- fetch_csv_text: read the CSV from a local path or an http(s) URL
- parse_sentiment_csv: header matching, trimming, row validation
- aggregate_by_country: per-country sentiment tallies keyed by ISO alpha-3
"""
from __future__ import annotations

import io
import re
import warnings
from enum import IntEnum
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import pandas as pd
import requests

from country_codes import country_to_id
from dashboard_config import is_url
from utils_logging import get_logger

LOGGER = get_logger("geo_sentiment.data")

COUNTRY_HEADER = "Country"
REGION_HEADER = "Region"
VALUE_HEADER = "RandomValue"

EMPTY_DATA_MESSAGE = "No valid data found. Check CSV format (headers: Country,Region,RandomValue)."

RECORD_COLUMNS = ["country", "region", "sentiment"]
AGGREGATE_COLUMNS = ["id", "display_name", "positive", "neutral", "negative", "total"]

_LEADING_INT = re.compile(r"^\s*([+-]?[0-9]+)")


class Sentiment(IntEnum):
    NEGATIVE = 0
    NEUTRAL = 1
    POSITIVE = 2

    @property
    def label(self) -> str:
        return self.name.lower()


LABELS: Dict[int, str] = {s.value: s.label for s in Sentiment}


class DataLoadError(Exception):
    """Raised when the sentiment CSV cannot be fetched or holds no usable rows."""


class NoValidDataError(DataLoadError):
    """The CSV was read but no row has a country and a sentiment of 0, 1 or 2."""


def fetch_csv_text(source: str, timeout: float = 10.0) -> str:
    """Return the CSV text behind a local path or an http(s) URL."""
    if is_url(source):
        LOGGER.info(f"Fetching {source}")
        try:
            response = requests.get(source, timeout=timeout)
        except requests.RequestException as e:
            raise DataLoadError(f"Request to {source} failed: {e}") from e
        if not response.ok:
            raise DataLoadError(f"HTTP error: {response.status_code} {response.reason}")
        try:
            return response.content.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise DataLoadError(f"{source} is not valid UTF-8: {e}") from e

    path = Path(source)
    LOGGER.info(f"Reading {path}")
    try:
        return path.read_text(encoding="utf-8-sig")
    except FileNotFoundError as e:
        raise DataLoadError(f"File not found: {path}") from e
    except UnicodeDecodeError as e:
        raise DataLoadError(f"{path} is not valid UTF-8: {e}") from e
    except OSError as e:
        raise DataLoadError(f"Could not read {path}: {e}") from e


def parse_sentiment_value(raw: str) -> Optional[int]:
    """Lenient integer parse: the leading digit run counts ("2.0" -> 2, "1abc" -> 1)."""
    m = _LEADING_INT.match(raw or "")
    return int(m.group(1)) if m else None


def _find_header(headers: List[str], wanted: str) -> str:
    for h in headers:
        if h.lower() == wanted.lower():
            return h
    return wanted


def parse_sentiment_csv(text: str) -> pd.DataFrame:
    """Parse CSV text into a record table of (country, region, sentiment)."""
    try:
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always", pd.errors.ParserWarning)
            raw = pd.read_csv(
                io.StringIO(text),
                dtype=str,
                keep_default_na=False,
                skip_blank_lines=True,
                index_col=False,
                engine="python",
            )
    except pd.errors.EmptyDataError:
        LOGGER.warning("CSV is empty")
        return pd.DataFrame(columns=RECORD_COLUMNS)
    except pd.errors.ParserError as e:
        raise DataLoadError(f"Could not parse CSV: {e}") from e

    # Lines longer than the header are cut to the header width, extra cells dropped
    for w in caught:
        if issubclass(w.category, pd.errors.ParserWarning):
            LOGGER.debug(f"Truncated long row(s): {w.message}")
        else:
            warnings.warn_explicit(w.message, w.category, w.filename, w.lineno)

    raw = pd.DataFrame(
        {str(c).strip(): raw[c].fillna("").astype(str).str.strip() for c in raw.columns},
        index=raw.index,
    )
    LOGGER.debug(f"Parsed headers: {list(raw.columns)}")

    headers = list(raw.columns)
    country_h = _find_header(headers, COUNTRY_HEADER)
    region_h = _find_header(headers, REGION_HEADER)
    value_h = _find_header(headers, VALUE_HEADER)
    LOGGER.debug(f"Using headers: country={country_h!r} region={region_h!r} value={value_h!r}")

    def column(name: str) -> pd.Series:
        if name in raw.columns:
            return raw[name]
        return pd.Series([""] * len(raw), index=raw.index, dtype=object)

    records = pd.DataFrame({
        "country": column(country_h),
        "region": column(region_h),
        "sentiment": column(value_h).map(parse_sentiment_value),
    })

    valid = (records["country"] != "") & records["sentiment"].isin(list(LABELS))
    for idx, row in records.loc[~valid].iterrows():
        LOGGER.debug(f"Filtered out row {idx}: {row.to_dict()}")

    out = records.loc[valid].reset_index(drop=True)
    out["sentiment"] = out["sentiment"].astype(int)
    LOGGER.info(f"Kept {len(out)}/{len(records)} rows")
    return out


def load_sentiment_data(source: str, timeout: float = 10.0) -> pd.DataFrame:
    records = parse_sentiment_csv(fetch_csv_text(source, timeout=timeout))
    if records.empty:
        raise NoValidDataError(EMPTY_DATA_MESSAGE)
    return records


def aggregate_by_country(records: pd.DataFrame) -> pd.DataFrame:
    """
    Tally sentiments per country id, in first-seen order.
    display_name is the first raw country string seen for the id.
    """
    if records.empty:
        return pd.DataFrame(columns=AGGREGATE_COLUMNS)

    frame = records.assign(
        id=records["country"].map(country_to_id),
        label=records["sentiment"].map(LABELS),
    )
    order = frame["id"].drop_duplicates()
    counts = (
        pd.crosstab(frame["id"], frame["label"])
        .reindex(index=order, columns=["positive", "neutral", "negative"], fill_value=0)
        .astype(int)
    )
    names = frame.groupby("id", sort=False)["country"].first()

    agg = counts.assign(display_name=names.reindex(order).values)
    agg["total"] = agg[["positive", "neutral", "negative"]].sum(axis=1)
    agg = agg.rename_axis("id").reset_index()[AGGREGATE_COLUMNS]
    LOGGER.info(f"Aggregated {int(agg['total'].sum())} rows into {len(agg)} countries")
    LOGGER.debug(f"Aggregated data (first 5):\n{agg.head()}")
    return agg


def country_options(records: pd.DataFrame) -> List[Tuple[str, str]]:
    """Sorted distinct country names paired with their ids, for the dropdown."""
    names = sorted(set(records["country"]))
    return [(name, country_to_id(name)) for name in names]


def sentiment_summary(aggregates: pd.DataFrame) -> Dict:
    """Headline totals and label shares across every country."""
    if aggregates.empty or int(aggregates["total"].sum()) == 0:
        return {
            "countries": 0,
            "total": 0,
            "positive_pct": 0.0,
            "neutral_pct": 0.0,
            "negative_pct": 0.0,
        }

    total = int(aggregates["total"].sum())
    return {
        "countries": len(aggregates),
        "total": total,
        "positive_pct": aggregates["positive"].sum() / total * 100,
        "neutral_pct": aggregates["neutral"].sum() / total * 100,
        "negative_pct": aggregates["negative"].sum() / total * 100,
    }
