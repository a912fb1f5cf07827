"""Table-based row extraction for FIS arrivals/departures pages.

The page markup has no stable selectors, so rows are not read by column
position. Each candidate row is treated as a list of cell texts, and the
flight number, terminal, times, status and place are located by pattern.
"""

import logging
from typing import Iterator, List, Optional, Set, Tuple

from bs4 import BeautifulSoup

from fidswatch.reference.patterns import CARRIER_RE, FLIGHT_NO_RE, FLIGHT_NUMBER_RE, TIME_TOKEN_RE
from fidswatch.reference.status import match_status
from fidswatch.reference.terminals import is_banner, match_terminal
from fidswatch.scrape.errors import ExtractionEmpty, RowRejected
from fidswatch.scrape.models import RawRow
from fidswatch.scrape.normalize import clean_text, normalize_flight_no, normalize_time, split_times
from fidswatch.scrape.sources.base import Extraction

logger = logging.getLogger(__name__)

MIN_CELLS = 4


def iter_candidate_rows(html: str) -> Iterator[List[str]]:
    """Yield the cleaned cell texts of every table row with at least MIN_CELLS cells."""
    soup = BeautifulSoup(html, "html.parser")
    for table in soup.find_all("table"):
        for tr in table.find_all("tr"):
            # Rows of nested tables are visited with their own table.
            if tr.find_parent("table") is not table:
                continue
            cells = [
                clean_text(td.get_text(" "))
                for td in tr.find_all(["td", "th"], recursive=False)
            ]
            if len(cells) < MIN_CELLS:
                continue
            yield cells


def _has_letter(text: str) -> bool:
    return any(c.isalpha() for c in text)


def _find_flight_no(cells: List[str]) -> Optional[Tuple[str, Set[int]]]:
    """Return (flight number text, claimed cell indexes)."""
    for i, cell in enumerate(cells):
        if not FLIGHT_NO_RE.match(cell):
            continue
        canonical = normalize_flight_no(cell)
        # A bare number ("225") is a split number cell, not a whole flight number.
        if canonical and _has_letter(canonical.split(" ")[0]):
            return cell, {i}

    for i in range(len(cells) - 1):
        carrier, number = cells[i], cells[i + 1]
        if CARRIER_RE.match(carrier) and _has_letter(carrier) and FLIGHT_NUMBER_RE.match(number):
            return f"{carrier} {number}", {i, i + 1}
    return None


def _time_cells(cells: List[str]) -> Set[int]:
    return {
        i
        for i, cell in enumerate(cells)
        if any(normalize_time(m.group(0)) for m in TIME_TOKEN_RE.finditer(cell))
    }


def _derive_place(cells: List[str], flight_idx: Set[int], claimed: Set[int], stops: Set[int]) -> str:
    after = max(flight_idx) + 1
    later_stops = [i for i in stops if i >= after]
    if later_stops:
        span = [cells[i] for i in range(after, min(later_stops)) if i not in claimed and cells[i]]
        if span:
            return " ".join(span)

    remaining = [cell for i, cell in enumerate(cells) if i not in claimed and cell]
    if not remaining:
        return ""
    return max(remaining, key=len)


def locate_fields(cells: List[str]) -> RawRow:
    """Locate flight fields in one candidate row; raise RowRejected if it is not a flight."""
    found = _find_flight_no(cells)
    if found is None:
        raise RowRejected("no flight number")
    flight_no, flight_idx = found

    terminal_idx = None
    terminal = ""
    for i, cell in enumerate(cells):
        code = match_terminal(cell)
        if code and i not in flight_idx:
            terminal_idx, terminal = i, code
            break

    scheduled, estimated = split_times(" ".join(cells))
    time_idx = _time_cells(cells)

    status_idx = {i for i, cell in enumerate(cells) if i not in flight_idx and match_status(cell)}
    status_text = " ".join(cells[i] for i in range(len(cells)) if i not in flight_idx)
    status = match_status(status_text) or ""

    stops = set(time_idx)
    if terminal_idx is not None:
        stops.add(terminal_idx)
    claimed = flight_idx | stops | status_idx
    place = _derive_place(cells, flight_idx, claimed, stops)

    if is_banner(place):
        raise RowRejected(f"banner row {place!r}")
    if not terminal:
        raise RowRejected(f"{flight_no}: no terminal")
    if not scheduled:
        raise RowRejected(f"{flight_no}: no scheduled time")

    return RawRow(
        flight_no=flight_no,
        place=place,
        scheduled=scheduled,
        estimated=estimated,
        terminal=terminal,
        status=status,
    )


class HtmlTableAdapter:
    """Extract flight rows from the tables of an HTML page."""

    name = "html"

    def extract(self, document: str) -> Extraction:
        """Raises ExtractionEmpty when no candidate row yields a flight."""
        extraction = Extraction()
        for cells in iter_candidate_rows(document):
            extraction.rows_seen += 1
            try:
                extraction.rows.append(locate_fields(cells))
            except RowRejected as e:
                logger.debug("Skipping row %s: %s", cells, e.reason)

        if not extraction.rows:
            raise ExtractionEmpty(extraction.rows_seen)
        return extraction
