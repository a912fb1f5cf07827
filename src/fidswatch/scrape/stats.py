"""Statistics over one cycle's flight records."""

from dataclasses import dataclass, field
from typing import Any, Dict, List

import pandas as pd

from fidswatch.scrape.models import FlightRecord, SourceResult


@dataclass
class FlightStats:
    """Container for flight statistics."""

    total_flights: int = 0
    by_type: Dict[str, int] = field(default_factory=dict)
    by_status: Dict[str, int] = field(default_factory=dict)
    by_category: Dict[str, int] = field(default_factory=dict)
    by_terminal: Dict[str, int] = field(default_factory=dict)
    by_hour: Dict[int, int] = field(default_factory=dict)
    delayed_estimates: int = 0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "total_flights": self.total_flights,
            "by_type": self.by_type,
            "by_status": self.by_status,
            "by_category": self.by_category,
            "by_terminal": self.by_terminal,
            "by_hour": self.by_hour,
            "delayed_estimates": self.delayed_estimates,
        }

    def status_dataframe(self) -> pd.DataFrame:
        """Return by_status as DataFrame, most frequent first."""
        if not self.by_status:
            return pd.DataFrame(columns=["status", "count"])
        return pd.DataFrame(
            [{"status": k, "count": v} for k, v in sorted(self.by_status.items(), key=lambda x: -x[1])]
        )

    def hourly_dataframe(self) -> pd.DataFrame:
        """Return by_hour as DataFrame (flights per scheduled hour)."""
        if not self.by_hour:
            return pd.DataFrame(columns=["hour", "count"])
        return pd.DataFrame(
            [{"hour": h, "count": c} for h, c in sorted(self.by_hour.items())]
        )


def compute_stats(records: List[FlightRecord]) -> FlightStats:
    """Compute statistics from a list of flight records."""
    stats = FlightStats()

    if not records:
        return stats

    stats.total_flights = len(records)

    for r in records:
        key = r.flight_type.value
        stats.by_type[key] = stats.by_type.get(key, 0) + 1

        stats.by_status[r.status] = stats.by_status.get(r.status, 0) + 1

        key = r.category.value
        stats.by_category[key] = stats.by_category.get(key, 0) + 1

        terminal = r.terminal or "-"
        stats.by_terminal[terminal] = stats.by_terminal.get(terminal, 0) + 1

        h = int(r.scheduled[:2])
        stats.by_hour[h] = stats.by_hour.get(h, 0) + 1

        # Estimated later than scheduled (same-day times only)
        if r.estimated and r.estimated > r.scheduled:
            stats.delayed_estimates += 1

    return stats


def sources_dataframe(sources: List[SourceResult]) -> pd.DataFrame:
    """Per-source rows seen vs. kept, parser used and error, one row per source."""
    columns = ["source", "url", "rows_seen", "rows_kept", "parser", "error"]
    if not sources:
        return pd.DataFrame(columns=columns)
    return pd.DataFrame([s.summary() for s in sources], columns=columns)
