"""FIS XML feed adapter (arrive.xml / depart.xml).

Known document shapes:
  <Arrivals><Flight>...</Flight></Arrivals>   (and <Departures>)
  <flights><flight Type="ARR">...</flight></flights>
  <Flights><Flight>...</Flight></Flights>
Field values may be attributes or child elements; both are read.
"""

import logging
import xml.etree.ElementTree as ET
from typing import Dict, List, Optional

from fidswatch.reference.patterns import FEED_TIME_RE
from fidswatch.scrape.errors import ParseTotalFailure
from fidswatch.scrape.models import FlightType, RawRow
from fidswatch.scrape.normalize import clean_text
from fidswatch.scrape.sources.base import Extraction

logger = logging.getLogger(__name__)

FLIGHT_NO_FIELDS = ("FlightNo", "Flight", "FltNo", "Number", "FNo")
FROM_FIELDS = ("From", "Origin", "CityFrom", "Orig")
TO_FIELDS = ("To", "Destination", "CityTo", "Dest")
SCHEDULED_FIELDS = ("STA", "STD", "Sched", "Time", "Scheduled")
ESTIMATED_FIELDS = ("ETA", "ETD", "Est", "Estimated")
TERMINAL_FIELDS = ("Terminal", "Term", "TerminalCode")
CATEGORY_FIELDS = ("CarrierType", "DomInt", "Sector", "Category")
STATUS_FIELDS = ("Status", "Remark", "Remarks")
TYPE_FIELDS = ("Type", "FlightType")


def _local(tag: str) -> str:
    """Tag name without any namespace, lowercased."""
    return tag.rsplit("}", 1)[-1].lower()


def _fields(element: ET.Element) -> Dict[str, str]:
    """Attributes and child element texts, keyed by lowercase name."""
    values = {_local(k): clean_text(v) for k, v in element.attrib.items()}
    for child in element:
        values.setdefault(_local(child.tag), clean_text("".join(child.itertext())))
    return values


def _first(values: Dict[str, str], names) -> str:
    for name in names:
        v = values.get(name.lower())
        if v:
            return v
    return ""


def feed_time(value: Optional[str]) -> str:
    """Pull 'HH:MM' out of '13:20', '13.20' or an ISO datetime; '' if none."""
    if not value:
        return ""
    m = FEED_TIME_RE.search(value)
    if not m:
        return ""
    return f"{int(m.group(1)):02d}:{m.group(2)}"


def _children(element: ET.Element, name: str) -> List[ET.Element]:
    return [c for c in element if _local(c.tag) == name]


def flight_elements(root: ET.Element, flight_type: FlightType) -> List[ET.Element]:
    """Find the flight elements for one direction in any known document shape."""
    candidates = [root] + list(root)
    container = "arrivals" if flight_type is FlightType.ARRIVAL else "departures"

    for el in candidates:
        if _local(el.tag) == container:
            return _children(el, "flight")

    for el in candidates:
        if _local(el.tag) == "flights":
            flights = _children(el, "flight")
            if any(_first(_fields(f), TYPE_FIELDS) for f in flights):
                prefix = flight_type.short
                flights = [
                    f for f in flights
                    if _first(_fields(f), TYPE_FIELDS).lower().startswith(prefix)
                ]
            return flights

    return _children(root, "flight")


class XmlFeedAdapter:
    """Extract flight rows from one direction's XML feed."""

    name = "xml"

    def __init__(self, flight_type: FlightType):
        self.flight_type = flight_type

    def extract(self, document: str) -> Extraction:
        """A well-formed feed with no flights is a valid, empty answer."""
        try:
            root = ET.fromstring(document)
        except ET.ParseError as e:
            raise ParseTotalFailure(f"unparseable XML feed: {e}") from e

        extraction = Extraction()
        for element in flight_elements(root, self.flight_type):
            extraction.rows_seen += 1
            extraction.rows.append(self._to_raw(_fields(element)))
        return extraction

    def _to_raw(self, values: Dict[str, str]) -> RawRow:
        origin = _first(values, FROM_FIELDS)
        destination = _first(values, TO_FIELDS)
        # Arrivals show where the flight comes from, departures where it goes.
        if self.flight_type is FlightType.ARRIVAL:
            place = origin or destination
        else:
            place = destination or origin

        return RawRow(
            flight_no=_first(values, FLIGHT_NO_FIELDS),
            place=place,
            scheduled=feed_time(_first(values, SCHEDULED_FIELDS)),
            estimated=feed_time(_first(values, ESTIMATED_FIELDS)),
            terminal=_first(values, TERMINAL_FIELDS),
            status=_first(values, STATUS_FIELDS),
            category=_first(values, CATEGORY_FIELDS),
        )
