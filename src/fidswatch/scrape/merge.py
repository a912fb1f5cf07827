"""Merge per-source record lists into one de-duplicated list."""

from typing import Dict, Iterable, List, Tuple

from fidswatch.scrape.models import FlightRecord, FlightType


def merge_records(*record_lists: Iterable[FlightRecord]) -> List[FlightRecord]:
    """Concatenate lists in the given order, keeping the first record per key.

    Callers pass scope-specific lists before the catch-all list so that the
    category assigned by the scoped page is the one retained.
    """
    seen: Dict[Tuple[FlightType, str, str], FlightRecord] = {}
    for records in record_lists:
        for record in records:
            seen.setdefault(record.key(), record)
    return list(seen.values())
