"""Line-based fallback parser for FIS pages that do not render as tables.

Used only when table extraction finds nothing. Each line is tried against a
same-line pattern (flight, place, one or two times, terminal, status) and then
a deferred pattern where the terminal and/or status sit in the line tail or on
the single following line. No further lookahead.
"""

import logging
import re
from typing import List, Optional, Tuple

from bs4 import BeautifulSoup

from fidswatch.reference.status import match_status
from fidswatch.reference.terminals import TERMINAL_CODES, is_banner
from fidswatch.scrape.errors import RowRejected
from fidswatch.scrape.models import RawRow
from fidswatch.scrape.normalize import clean_text, normalize_flight_no, normalize_time
from fidswatch.scrape.sources.base import Extraction

logger = logging.getLogger(__name__)

_FLIGHT = r"(?P<flight>[A-Z0-9]{1,3} ?\d{2,4}[A-Z]?)"
_TIME = r"\d{1,2}:\d{2}"
_TERMINAL = "|".join(sorted(TERMINAL_CODES, key=len, reverse=True))

SAME_LINE_RE = re.compile(
    rf"^{_FLIGHT}\s+(?P<place>.+?)\s+(?P<scheduled>{_TIME})"
    rf"(?:\s+(?P<estimated>{_TIME}))?\s+(?P<terminal>{_TERMINAL})\b\s*(?P<tail>.*)$",
    re.IGNORECASE,
)
DEFERRED_RE = re.compile(
    rf"^{_FLIGHT}\s+(?P<place>.+?)\s+(?P<scheduled>{_TIME})"
    rf"(?:\s+(?P<estimated>{_TIME}))?(?:\s+(?P<tail>.*))?$",
    re.IGNORECASE,
)
TERMINAL_TOKEN_RE = re.compile(rf"\b(?P<terminal>{_TERMINAL})\b", re.IGNORECASE)

# Elements after which the flattened text gets a line break or a space.
BLOCK_TAGS = ["p", "div", "li", "tr", "pre", "table", "section", "article",
              "h1", "h2", "h3", "h4", "h5", "h6", "header", "footer"]
CELL_TAGS = ["td", "th", "span"]


def page_lines(html: str) -> List[str]:
    """Visible text of the page body, one cleaned non-empty line per entry."""
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup(["script", "style", "noscript"]):
        tag.decompose()
    for br in soup.find_all("br"):
        br.replace_with("\n")
    for el in soup.find_all(CELL_TAGS):
        el.insert_after(" ")
    for el in soup.find_all(BLOCK_TAGS):
        el.insert_after("\n")

    root = soup.body or soup
    lines = (clean_text(line) for line in root.get_text().splitlines())
    return [line for line in lines if line]


def _terminal_and_status(text: str) -> Tuple[str, str]:
    m = TERMINAL_TOKEN_RE.search(text)
    terminal = m.group("terminal").upper() if m else ""
    return terminal, match_status(text) or ""


def _parse(line: str, next_line: Optional[str]) -> Tuple[RawRow, bool]:
    """Parse one line; returns (row, whether next_line was consumed)."""
    m = SAME_LINE_RE.match(line)
    if m:
        terminal = m.group("terminal").upper()
        status = match_status(m.group("tail")) or ""
    else:
        m = DEFERRED_RE.match(line)
        if not m:
            raise RowRejected("not a flight line")
        terminal, status = _terminal_and_status(m.group("tail") or "")

    canonical = normalize_flight_no(m.group("flight"))
    if not canonical or not any(c.isalpha() for c in canonical.split(" ")[0]):
        raise RowRejected(f"unresolvable flight number {m.group('flight')!r}")

    place = clean_text(m.group("place"))
    if is_banner(place):
        raise RowRejected(f"banner line {place!r}")

    consumed = False
    if (not terminal or not status) and next_line and not DEFERRED_RE.match(next_line):
        next_terminal, next_status = _terminal_and_status(next_line)
        if (next_terminal and not terminal) or (next_status and not status):
            terminal = terminal or next_terminal
            status = status or next_status
            consumed = True

    if not terminal:
        raise RowRejected(f"{canonical}: no terminal")

    scheduled = normalize_time(m.group("scheduled"))
    if not scheduled:
        raise RowRejected(f"{canonical}: invalid scheduled time")

    return (
        RawRow(
            flight_no=m.group("flight"),
            place=place,
            scheduled=scheduled,
            estimated=m.group("estimated") or "",
            terminal=terminal,
            status=status,
        ),
        consumed,
    )


class TextFallbackAdapter:
    """Recover flight rows from the flattened page text."""

    name = "text"

    def extract(self, document: str) -> Extraction:
        lines = page_lines(document)
        extraction = Extraction()
        i = 0
        while i < len(lines):
            line = lines[i]
            next_line = lines[i + 1] if i + 1 < len(lines) else None
            i += 1
            if not DEFERRED_RE.match(line):
                continue
            extraction.rows_seen += 1
            try:
                row, consumed = _parse(line, next_line)
            except RowRejected as e:
                logger.debug("Skipping line %r: %s", line, e.reason)
                continue
            extraction.rows.append(row)
            if consumed:
                i += 1
        return extraction
