"""Pick arrivals that are due for a "landing soon" reminder.

Only selection lives here. Who gets notified, and how, belongs to the
storage/push layer, which can use reminder_key() to send each reminder once.
"""

from datetime import datetime, timedelta, timezone
from typing import Iterable, List, Optional

from fidswatch.scrape.models import FlightRecord, FlightType

# Velana International Airport local time (MVT, no DST).
AIRPORT_TZ = timezone(timedelta(hours=5), "MVT")
DEFAULT_LEAD_MINUTES = 15


def due_arrivals(
    records: Iterable[FlightRecord],
    now: Optional[datetime] = None,
    lead_minutes: int = DEFAULT_LEAD_MINUTES,
) -> List[FlightRecord]:
    """Arrivals whose estimated (else scheduled) time is exactly now + lead, airport time.

    A naive ``now`` is taken to be airport local time already.
    """
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is not None:
        now = now.astimezone(AIRPORT_TZ)
    target = (now + timedelta(minutes=lead_minutes)).strftime("%H:%M")
    return [
        r for r in records
        if r.flight_type is FlightType.ARRIVAL and r.expected_time() == target
    ]


def reminder_key(record: FlightRecord, lead_minutes: int = DEFAULT_LEAD_MINUTES) -> str:
    """De-duplication key for one reminder, e.g. 'arr|Q2 225|13:20|T-15'."""
    return f"{record.flight_type.short}|{record.flight_no}|{record.scheduled}|T-{lead_minutes}"
