"""Scrape service - one cycle of fetch, extract, normalize and merge."""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import replace
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from tqdm import tqdm

from fidswatch.scrape.config import ScrapeConfig
from fidswatch.scrape.errors import (
    ExtractionEmpty,
    FetchError,
    ParseTotalFailure,
    RowRejected,
    ScrapeCancelled,
)
from fidswatch.scrape.fetcher import Fetcher
from fidswatch.scrape.merge import merge_records
from fidswatch.scrape.models import (
    SCOPE_ORDER,
    Category,
    CycleStatus,
    FlightRecord,
    FlightType,
    RawRow,
    ScrapeResult,
    SourceResult,
    SourceSpec,
)
from fidswatch.scrape.normalize import normalize_row
from fidswatch.scrape.sources.base import Extraction, PageAdapter
from fidswatch.scrape.sources.html_table import HtmlTableAdapter
from fidswatch.scrape.sources.text_fallback import TextFallbackAdapter
from fidswatch.scrape.sources.xml_feed import XmlFeedAdapter

logger = logging.getLogger(__name__)

ADAPTERS: Dict[str, Callable[[SourceSpec], PageAdapter]] = {
    "html": lambda source: HtmlTableAdapter(),
    "xml": lambda source: XmlFeedAdapter(source.flight_type),
}


class ScrapeService:
    """Runs scrape cycles over the configured FIS sources.

    Sources are fetched concurrently; a failing source is recorded on its
    SourceResult and the others still merge. The service keeps no state
    between cycles.
    """

    def __init__(self, config: Optional[ScrapeConfig] = None, fetcher=None):
        self.config = config or ScrapeConfig.from_env()
        self._fetcher = fetcher or Fetcher(timeout=self.config.timeout, headers=self.config.headers)

    def run_cycle(
        self,
        sources: Optional[Iterable[SourceSpec]] = None,
        cancel: Optional[threading.Event] = None,
        progress: bool = False,
    ) -> ScrapeResult:
        """Scrape every source once and merge per flight type.

        Raises ScrapeCancelled if cancel is set before the merge; nothing
        partial is returned in that case.
        """
        sources = list(sources) if sources is not None else self.config.sources()
        for source in sources:
            if source.format not in ADAPTERS:
                raise ValueError(f"Unknown source format {source.format!r} for {source.url}")
        if cancel is not None and cancel.is_set():
            raise ScrapeCancelled("cancelled before fetching")

        results: Dict[int, SourceResult] = {}
        workers = max(1, min(self.config.max_workers, len(sources) or 1))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            future_to_idx = {
                executor.submit(self.scrape_source, source): i
                for i, source in enumerate(sources)
            }
            for future in tqdm(
                as_completed(future_to_idx),
                total=len(future_to_idx),
                desc="Scraping FIDS",
                unit="page",
                disable=not progress,
            ):
                if cancel is not None and cancel.is_set():
                    for pending in future_to_idx:
                        pending.cancel()
                    raise ScrapeCancelled("cancelled while fetching")
                results[future_to_idx[future]] = future.result()

        if cancel is not None and cancel.is_set():
            raise ScrapeCancelled("cancelled before merging")

        ordered = [results[i] for i in range(len(sources))]
        result = ScrapeResult(
            arrivals=self._merge(ordered, FlightType.ARRIVAL),
            departures=self._merge(ordered, FlightType.DEPARTURE),
            sources=ordered,
        )
        self._log_summary(result)
        return result

    def scrape_source(self, source: SourceSpec) -> SourceResult:
        """Fetch, extract and normalize one source. Never raises ScrapeError."""
        result = SourceResult(source=source)
        try:
            response = self._fetcher.fetch(source.url)
            extraction, result.parser = self.extract(source, response.text)
        except FetchError as e:
            logger.warning("Fetch failed for %s: %s", source.label(), e)
            result.error = str(e)
            return result
        except ParseTotalFailure as e:
            logger.warning("No flights parsed from %s: %s", source.label(), e)
            result.error = str(e)
            return result

        result.rows_seen = extraction.rows_seen
        result.records = self.normalize(extraction.rows, source)
        result.rows_kept = len(result.records)
        if result.rows_seen and not result.records:
            # Flight entries present but none usable: the markup changed, not the schedule.
            error = ParseTotalFailure(f"{result.rows_seen} rows seen, none normalized")
            logger.warning("No flights parsed from %s: %s", source.label(), error)
            result.error = str(error)
            return result
        logger.info(
            "%s: kept %d of %d rows (%s parser)",
            source.label(), result.rows_kept, result.rows_seen, result.parser,
        )
        return result

    def extract(self, source: SourceSpec, document: str) -> Tuple[Extraction, str]:
        """Run the source's adapter, falling back to text mode for empty HTML tables."""
        adapter = ADAPTERS[source.format](source)
        try:
            return adapter.extract(document), adapter.name
        except ExtractionEmpty as e:
            logger.info("Table extraction empty for %s (%s); trying text mode", source.label(), e)

        fallback = TextFallbackAdapter()
        extraction = fallback.extract(document)
        if not extraction.rows:
            raise ParseTotalFailure("table and text-mode parsing both found no flights")
        return extraction, fallback.name

    def normalize(self, rows: List[RawRow], source: SourceSpec) -> List[FlightRecord]:
        records = []
        for raw in rows:
            # A domestic-only or international-only page categorizes its rows.
            if source.scope is not Category.ALL and not raw.category:
                raw = replace(raw, category=source.scope.value)
            try:
                records.append(normalize_row(raw, source.flight_type))
            except RowRejected as e:
                logger.debug("Rejected row from %s: %s", source.label(), e.reason)
        return records

    def _merge(self, results: List[SourceResult], flight_type: FlightType) -> List[FlightRecord]:
        scoped = sorted(
            (r for r in results if r.source.flight_type is flight_type),
            key=lambda r: SCOPE_ORDER.index(r.source.scope),
        )
        return merge_records(*(r.records for r in scoped))

    def _log_summary(self, result: ScrapeResult) -> None:
        if result.status is CycleStatus.FAILED:
            logger.warning("Scrape cycle failed: no source succeeded")
            return
        logger.info(
            "Scrape cycle %s: %d arrivals, %d departures (%d of %d sources ok)",
            result.status.value,
            len(result.arrivals),
            len(result.departures),
            len(result.sources) - len(result.failures),
            len(result.sources),
        )
