"""Scrape configuration, read from the environment.

Variables:
  FIS_SOURCE       html (default) or xml
  FIS_BASE_URL     FIS web page, default https://www.fis.com.mv/index.php
  FIS_XML_ARR_URL  arrivals feed, default https://www.fis.com.mv/xml/arrive.xml
  FIS_XML_DEP_URL  departures feed, default https://www.fis.com.mv/xml/depart.xml
  FIS_TIMEOUT      per-request timeout in seconds (default 20)
  FIS_HEADERS      JSON object of extra request headers
  FIS_MAX_WORKERS  concurrent fetches per cycle (default 6)
  SCRAPE_INTERVAL  seconds between cycles in watch mode (default 120)

The older names FIS_XML_TIMEOUT_MS, FIS_XML_HEADERS and SCRAPE_INTERVAL_MS
(milliseconds) are still read when the names above are unset.
"""

import json
import os
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional
from urllib.parse import urlencode

from fidswatch.scrape.models import SCOPE_ORDER, Category, FlightType, SourceSpec

BASE_URL = "https://www.fis.com.mv/index.php"
XML_ARR_URL = "https://www.fis.com.mv/xml/arrive.xml"
XML_DEP_URL = "https://www.fis.com.mv/xml/depart.xml"

SOURCE_FORMATS = ("html", "xml")

_SCOPE_PARAM = {
    Category.DOMESTIC: "D",
    Category.INTERNATIONAL: "I",
    Category.ALL: "both",
}
_TYPE_PARAM = {
    FlightType.ARRIVAL: "arrivals",
    FlightType.DEPARTURE: "departures",
}


def page_url(base_url: str, flight_type: FlightType, scope: Category) -> str:
    """FIS web page URL for one direction and domestic/international scope."""
    params = {
        "webfids_type": _TYPE_PARAM[flight_type],
        "webfids_lang": "1",
        "webfids_domesticinternational": _SCOPE_PARAM[scope],
        "webfids_passengercargo": "passenger",
        "webfids_airline": "ALL",
        "webfids_waypoint": "ALL",
        "Submit": " UPDATE ",
    }
    return f"{base_url}?{urlencode(params)}"


def _positive(env: Mapping[str, str], name: str, default, cast):
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = cast(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {raw!r}")
    return value


def _seconds(env: Mapping[str, str], name: str, legacy_ms: str, default: float) -> float:
    """Seconds from name, else from the millisecond variable legacy_ms, else default."""
    if (env.get(name) or "").strip():
        return _positive(env, name, default, float)
    millis = _positive(env, legacy_ms, None, float)
    return default if millis is None else millis / 1000.0


@dataclass
class ScrapeConfig:
    """Where to scrape from and how."""

    source: str = "html"
    base_url: str = BASE_URL
    xml_arr_url: str = XML_ARR_URL
    xml_dep_url: str = XML_DEP_URL
    timeout: float = 20.0
    headers: Dict[str, str] = field(default_factory=dict)
    max_workers: int = 6
    interval: float = 120.0

    def __post_init__(self):
        if self.source not in SOURCE_FORMATS:
            raise ValueError(f"Unknown source {self.source!r}. Expected one of {SOURCE_FORMATS}")

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "ScrapeConfig":
        env = os.environ if env is None else env

        headers_name = "FIS_HEADERS" if (env.get("FIS_HEADERS") or "").strip() else "FIS_XML_HEADERS"
        headers_raw = (env.get(headers_name) or "").strip()
        headers: Dict[str, str] = {}
        if headers_raw:
            try:
                headers = json.loads(headers_raw)
            except json.JSONDecodeError as e:
                raise ValueError(f"{headers_name} is not valid JSON: {e}") from None
            if not isinstance(headers, dict):
                raise ValueError(f"{headers_name} must be a JSON object")
            headers = {str(k): str(v) for k, v in headers.items()}

        return cls(
            source=env.get("FIS_SOURCE", "html").strip().lower() or "html",
            base_url=env.get("FIS_BASE_URL") or BASE_URL,
            xml_arr_url=env.get("FIS_XML_ARR_URL") or XML_ARR_URL,
            xml_dep_url=env.get("FIS_XML_DEP_URL") or XML_DEP_URL,
            timeout=_seconds(env, "FIS_TIMEOUT", "FIS_XML_TIMEOUT_MS", 20.0),
            headers=headers,
            max_workers=_positive(env, "FIS_MAX_WORKERS", 6, int),
            interval=_seconds(env, "SCRAPE_INTERVAL", "SCRAPE_INTERVAL_MS", 120.0),
        )

    def sources(self, flight_types=(FlightType.ARRIVAL, FlightType.DEPARTURE)) -> List[SourceSpec]:
        """Source list for the configured format, in merge precedence order per type."""
        specs = []
        for flight_type in flight_types:
            if self.source == "xml":
                url = self.xml_arr_url if flight_type is FlightType.ARRIVAL else self.xml_dep_url
                specs.append(SourceSpec(flight_type, Category.ALL, url, format="xml"))
                continue
            for scope in SCOPE_ORDER:
                specs.append(
                    SourceSpec(flight_type, scope, page_url(self.base_url, flight_type, scope))
                )
        return specs
