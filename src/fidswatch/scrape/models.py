"""Data models for the FIDS scrape pipeline."""

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple


class FlightType(str, Enum):
    """Direction of a flight relative to the airport."""

    ARRIVAL = "arrival"
    DEPARTURE = "departure"

    @property
    def short(self) -> str:
        """Three-letter form used in storage keys ('arr' / 'dep')."""
        return self.value[:3]


class Category(str, Enum):
    """Domestic/international classification; ALL means no signal."""

    DOMESTIC = "domestic"
    INTERNATIONAL = "international"
    ALL = "all"


# Fixed merge precedence: scope-specific pages before the catch-all page.
SCOPE_ORDER = (Category.DOMESTIC, Category.INTERNATIONAL, Category.ALL)


class CycleStatus(str, Enum):
    """Outcome of one scrape cycle, or of one flight type within it."""

    OK = "ok"
    EMPTY = "empty"
    FAILED = "failed"


@dataclass
class RawRow:
    """Fields located in one candidate row, before normalization."""

    flight_no: str
    place: str
    scheduled: str
    estimated: str = ""
    terminal: str = ""
    status: str = ""
    # Explicit domestic/international marker carried by the source, if any.
    category: str = ""


@dataclass
class FlightRecord:
    """Normalized flight record."""

    flight_type: FlightType
    flight_no: str
    origin_or_destination: str
    scheduled: str
    estimated: Optional[str] = None
    terminal: str = ""
    status: str = "-"
    category: Category = Category.ALL

    def key(self) -> Tuple[FlightType, str, str]:
        """Uniqueness key within one scrape cycle."""
        return (self.flight_type, self.flight_no, self.scheduled)

    def expected_time(self) -> str:
        """Estimated time when known, otherwise scheduled."""
        return self.estimated or self.scheduled

    def to_dict(self) -> Dict[str, Optional[str]]:
        """Row shape consumed by the storage/API layer."""
        return {
            "type": self.flight_type.value,
            "flightNo": self.flight_no,
            "origin_or_destination": self.origin_or_destination,
            "scheduled": self.scheduled,
            "estimated": self.estimated,
            "terminal": self.terminal,
            "status": self.status,
            "category": self.category.value,
        }


RECORD_COLUMNS = [
    "type",
    "flightNo",
    "origin_or_destination",
    "scheduled",
    "estimated",
    "terminal",
    "status",
    "category",
]


@dataclass
class SourceSpec:
    """One page or feed to scrape: what it holds and how to parse it."""

    flight_type: FlightType
    scope: Category
    url: str
    format: str = "html"

    def label(self) -> str:
        return f"{self.flight_type.short}/{self.scope.value}/{self.format}"


@dataclass
class SourceResult:
    """What one source contributed to a cycle."""

    source: SourceSpec
    records: List[FlightRecord] = field(default_factory=list)
    rows_seen: int = 0
    rows_kept: int = 0
    parser: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def summary(self) -> Dict[str, object]:
        data = asdict(self)
        data.pop("records")
        data["source"] = self.source.label()
        data["url"] = self.source.url
        return data


@dataclass
class ScrapeResult:
    """Result of one scrape cycle.

    ``status`` distinguishes "no flights right now" (EMPTY) from "could not
    scrape" (FAILED) so callers can keep their previous snapshot on failure.
    """

    arrivals: List[FlightRecord] = field(default_factory=list)
    departures: List[FlightRecord] = field(default_factory=list)
    sources: List[SourceResult] = field(default_factory=list)

    def records_for(self, flight_type: FlightType) -> List[FlightRecord]:
        if flight_type is FlightType.ARRIVAL:
            return self.arrivals
        return self.departures

    def status_for(self, flight_type: FlightType) -> CycleStatus:
        """Outcome for one flight type, judged on its own sources."""
        results = [s for s in self.sources if s.source.flight_type is flight_type]
        if not any(s.ok for s in results):
            return CycleStatus.FAILED
        return CycleStatus.OK if self.records_for(flight_type) else CycleStatus.EMPTY

    @property
    def status(self) -> CycleStatus:
        if not any(s.ok for s in self.sources):
            return CycleStatus.FAILED
        if self.arrivals or self.departures:
            return CycleStatus.OK
        return CycleStatus.EMPTY

    @property
    def failures(self) -> List[SourceResult]:
        return [s for s in self.sources if not s.ok]

    def flights(
        self, flight_type: FlightType, scope: Category = Category.ALL
    ) -> List[FlightRecord]:
        """Records of one type, optionally limited to one category."""
        records = self.records_for(flight_type)
        if scope is Category.ALL:
            return list(records)
        return [r for r in records if r.category is scope]

    def merged_with(self, previous: Optional["ScrapeResult"]) -> "ScrapeResult":
        """Keep the previous snapshot for every flight type that failed this cycle."""
        if previous is None:
            return self
        arrivals = self.arrivals
        departures = self.departures
        if self.status_for(FlightType.ARRIVAL) is CycleStatus.FAILED:
            arrivals = previous.arrivals
        if self.status_for(FlightType.DEPARTURE) is CycleStatus.FAILED:
            departures = previous.departures
        return ScrapeResult(arrivals=arrivals, departures=departures, sources=self.sources)

    def to_dataframe(self):
        """Convert to pandas DataFrame."""
        import pandas as pd

        rows = [r.to_dict() for r in self.arrivals + self.departures]
        if not rows:
            return pd.DataFrame(columns=RECORD_COLUMNS)
        return pd.DataFrame(rows, columns=RECORD_COLUMNS)
