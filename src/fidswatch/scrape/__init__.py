"""FIDS scrape pipeline: fetch, extract, normalize, merge."""

from fidswatch.scrape.errors import (
    ExtractionEmpty,
    FetchError,
    ParseTotalFailure,
    RowRejected,
    ScrapeCancelled,
    ScrapeError,
)
from fidswatch.scrape.models import (
    Category,
    CycleStatus,
    FlightRecord,
    FlightType,
    ScrapeResult,
    SourceResult,
    SourceSpec,
)
from fidswatch.scrape.service import ScrapeService

__all__ = [
    "Category",
    "CycleStatus",
    "ExtractionEmpty",
    "FetchError",
    "FlightRecord",
    "FlightType",
    "ParseTotalFailure",
    "RowRejected",
    "ScrapeCancelled",
    "ScrapeError",
    "ScrapeResult",
    "ScrapeService",
    "SourceResult",
    "SourceSpec",
]
