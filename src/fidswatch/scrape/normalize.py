"""Canonicalize raw row fields into FlightRecords."""

from typing import Optional, Tuple

from fidswatch.reference.patterns import (
    CARRIER_RE,
    FLIGHT_NO_RE,
    FLIGHT_NUMBER_RE,
    TIME_RE,
    TIME_TOKEN_RE,
)
from fidswatch.reference.status import canonical_status
from fidswatch.reference.terminals import DOMESTIC_TERMINALS
from fidswatch.scrape.errors import RowRejected
from fidswatch.scrape.models import Category, FlightRecord, FlightType, RawRow

# Carrier lengths tried on compact input like "Q2225": IATA, ICAO, single.
_CARRIER_LENGTHS = (2, 3, 1)


def clean_text(value: Optional[str]) -> str:
    """Collapse whitespace and turn non-breaking spaces into plain spaces."""
    if not value:
        return ""
    return " ".join(value.replace("\xa0", " ").split())


def normalize_flight_no(value: Optional[str]) -> Optional[str]:
    """Return 'CARRIER NUMBER' (e.g. 'Q2 225'), or None if value is not a flight number."""
    text = clean_text(value).upper()
    if not text or not FLIGHT_NO_RE.match(text):
        return None

    parts = text.split(" ")
    if len(parts) == 2 and CARRIER_RE.match(parts[0]) and FLIGHT_NUMBER_RE.match(parts[1]):
        return f"{parts[0]} {parts[1]}"

    compact = "".join(parts)
    for size in _CARRIER_LENGTHS:
        carrier, number = compact[:size], compact[size:]
        if CARRIER_RE.match(carrier) and FLIGHT_NUMBER_RE.match(number):
            return f"{carrier} {number}"
    return None


def normalize_time(value: Optional[str]) -> Optional[str]:
    """Return zero-padded 'HH:MM' for a valid 24-hour 'H:MM'/'HH:MM', else None."""
    m = TIME_RE.match(clean_text(value))
    if not m:
        return None
    hour, minute = int(m.group(1)), int(m.group(2))
    if hour > 23 or minute > 59:
        return None
    return f"{hour:02d}:{minute:02d}"


def normalize_status(value: Optional[str]) -> str:
    return canonical_status(value)


def normalize_terminal(value: Optional[str]) -> str:
    return clean_text(value).upper()


def derive_category(explicit: Optional[str], terminal: Optional[str]) -> Category:
    """Resolve domestic/international from the source marker and terminal code.

    A domestic terminal always wins. Otherwise an explicit marker ('D...',
    'I...', or containing DOM/INT) decides; then any other terminal means
    international. No signal at all gives Category.ALL.
    """
    code = normalize_terminal(terminal)
    if code in DOMESTIC_TERMINALS:
        return Category.DOMESTIC

    marker = clean_text(explicit).upper()
    if marker and marker not in ("ALL", "BOTH"):
        if marker.startswith("D"):
            return Category.DOMESTIC
        if marker.startswith("I"):
            return Category.INTERNATIONAL
        if "DOM" in marker:
            return Category.DOMESTIC
        if "INT" in marker:
            return Category.INTERNATIONAL

    if code:
        return Category.INTERNATIONAL
    return Category.ALL


def normalize_row(raw: RawRow, flight_type: FlightType) -> FlightRecord:
    """Build a FlightRecord from raw fields, raising RowRejected when required fields fail."""
    flight_no = normalize_flight_no(raw.flight_no)
    if not flight_no:
        raise RowRejected(f"unresolvable flight number {raw.flight_no!r}")

    scheduled = normalize_time(raw.scheduled)
    if not scheduled:
        raise RowRejected(f"{flight_no}: invalid scheduled time {raw.scheduled!r}")

    estimated = normalize_time(raw.estimated)
    if estimated == scheduled:
        estimated = None

    terminal = normalize_terminal(raw.terminal)
    return FlightRecord(
        flight_type=flight_type,
        flight_no=flight_no,
        origin_or_destination=clean_text(raw.place),
        scheduled=scheduled,
        estimated=estimated,
        terminal=terminal,
        status=normalize_status(raw.status),
        category=derive_category(raw.category, terminal),
    )


def split_times(text: str) -> Tuple[str, str]:
    """Return (scheduled, estimated) from the valid time tokens in text."""
    times = []
    for m in TIME_TOKEN_RE.finditer(text):
        t = normalize_time(m.group(0))
        if t:
            times.append(t)
    scheduled = times[0] if times else ""
    estimated = times[1] if len(times) > 1 and times[1] != scheduled else ""
    return scheduled, estimated
