"""
Config loader for the sentiment map dashboard.
Reads config/dashboard.yaml, then applies environment overrides.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List

import yaml

from utils_logging import get_logger

ROOT = Path(__file__).resolve().parent  # project root

CONFIG_ENV = "GEO_SENTIMENT_CONFIG"
CSV_ENV = "GEO_SENTIMENT_CSV"
LOG_LEVEL_ENV = "GEO_SENTIMENT_LOG_LEVEL"

DEFAULT_CONFIG_PATH = ROOT / "config" / "dashboard.yaml"

LOGGER = get_logger("geo_sentiment.config")


@dataclass
class DashboardConfig:
    data_source: str = "data/geo_sentiments.csv"
    request_timeout: float = 10.0
    page_title: str = "Global Sentiment Dashboard"
    map_height: int = 500
    log_level: str = "INFO"

    def resolved_source(self) -> str:
        """URLs pass through; relative paths are anchored at the project root."""
        if is_url(self.data_source):
            return self.data_source
        path = Path(self.data_source).expanduser()
        if not path.is_absolute():
            path = ROOT / path
        return str(path)


def is_url(source: str) -> bool:
    return source.lower().startswith(("http://", "https://"))


def load_yaml_config(path: Path) -> Dict[str, Any]:
    if not path.is_file():
        LOGGER.info(f"No config file at {path}, using defaults")
        return {}
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        LOGGER.error(f"Could not parse config YAML {path}: {e}")
        return {}
    return data if isinstance(data, dict) else {}


def get_config_value(config: Dict[str, Any], keys: List[str], default: Any) -> Any:
    cur: Any = config
    for key in keys:
        if not isinstance(cur, dict) or key not in cur:
            return default
        cur = cur[key]
    return default if cur is None else cur


def _normalise_level(level: Any) -> str:
    name = str(level).strip().upper()
    if not isinstance(logging.getLevelName(name), int):
        LOGGER.warning(f"Unknown log level {level!r}, falling back to INFO")
        return "INFO"
    return name


def load_config(path: str | os.PathLike | None = None) -> DashboardConfig:
    """Build the dashboard config from YAML plus environment overrides."""
    if path is None:
        path = os.getenv(CONFIG_ENV) or DEFAULT_CONFIG_PATH
    raw = load_yaml_config(Path(path))
    defaults = DashboardConfig()

    data_source = os.getenv(CSV_ENV) or get_config_value(raw, ["data", "source"], defaults.data_source)
    log_level = os.getenv(LOG_LEVEL_ENV) or get_config_value(raw, ["logging", "level"], defaults.log_level)

    return DashboardConfig(
        data_source=str(data_source),
        request_timeout=float(get_config_value(raw, ["data", "request_timeout"], defaults.request_timeout)),
        page_title=str(get_config_value(raw, ["page", "title"], defaults.page_title)),
        map_height=int(get_config_value(raw, ["page", "map_height"], defaults.map_height)),
        log_level=_normalise_level(log_level),
    )
