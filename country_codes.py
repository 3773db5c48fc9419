"""
Country name <-> ISO 3166-1 alpha-3 lookups.

The CSV carries free-text country names, the map wants alpha-3 codes. Names
are resolved through a curated table of common spellings first and then
through pycountry. Names neither knows keep an upper-cased identifier so they
still aggregate and show up in the dropdown, they just never match a shape on
the map.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Dict, Tuple

import pycountry

from utils_logging import get_logger

LOGGER = get_logger("geo_sentiment.countries")

KOSOVO = "XKX"
ANTARCTICA = "ATA"

# Spellings people actually write that the ISO registry spells differently.
COUNTRY_NAME_OVERRIDES: Dict[str, str] = {
    "bolivia": "BOL",
    "brunei": "BRN",
    "cape verde": "CPV",
    "czech republic": "CZE",
    "czechia": "CZE",
    "democratic republic of the congo": "COD",
    "dr congo": "COD",
    "congo": "COG",
    "republic of the congo": "COG",
    "east timor": "TLS",
    "england": "GBR",
    "great britain": "GBR",
    "iran": "IRN",
    "ivory coast": "CIV",
    "kosovo": KOSOVO,
    "laos": "LAO",
    "macedonia": "MKD",
    "micronesia": "FSM",
    "moldova": "MDA",
    "north korea": "PRK",
    "palestine": "PSE",
    "russia": "RUS",
    "scotland": "GBR",
    "south korea": "KOR",
    "korea": "KOR",
    "swaziland": "SWZ",
    "syria": "SYR",
    "taiwan": "TWN",
    "tanzania": "TZA",
    "turkey": "TUR",
    "uk": "GBR",
    "united kingdom": "GBR",
    "united states": "USA",
    "united states of america": "USA",
    "us": "USA",
    "usa": "USA",
    "vatican": "VAT",
    "venezuela": "VEN",
    "vietnam": "VNM",
    "wales": "GBR",
}

# Display names for ids whose registry name reads badly in a UI.
PREFERRED_NAMES: Dict[str, str] = {
    "BOL": "Bolivia",
    "COD": "DR Congo",
    "CZE": "Czech Republic",
    "FSM": "Micronesia",
    "GBR": "United Kingdom",
    "IRN": "Iran",
    "KOR": "South Korea",
    KOSOVO: "Kosovo",
    "LAO": "Laos",
    "MDA": "Moldova",
    "PRK": "North Korea",
    "PSE": "Palestine",
    "RUS": "Russia",
    "SYR": "Syria",
    "TWN": "Taiwan",
    "TZA": "Tanzania",
    "USA": "United States",
    "VEN": "Venezuela",
    "VNM": "Vietnam",
}


@lru_cache(maxsize=None)
def country_to_id(name: str) -> str:
    """Resolve a country name (or ISO code) to its alpha-3 identifier."""
    key = (name or "").strip()
    if not key:
        return ""
    override = COUNTRY_NAME_OVERRIDES.get(key.lower())
    if override:
        return override
    try:
        return pycountry.countries.lookup(key).alpha_3
    except LookupError:
        LOGGER.debug(f"No ISO code for {key!r}, using upper-cased name")
        return key.upper()


@lru_cache(maxsize=None)
def id_to_country_name(country_id: str) -> str:
    if country_id in PREFERRED_NAMES:
        return PREFERRED_NAMES[country_id]
    country = pycountry.countries.get(alpha_3=country_id)
    if country is None:
        return country_id
    return getattr(country, "common_name", None) or country.name


@lru_cache(maxsize=1)
def world_country_ids() -> Tuple[str, ...]:
    """Every alpha-3 id drawn on the world map, Antarctica excluded."""
    ids = {c.alpha_3 for c in pycountry.countries}
    ids.add(KOSOVO)
    ids.discard(ANTARCTICA)
    return tuple(sorted(ids))
