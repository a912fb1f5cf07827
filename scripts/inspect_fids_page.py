#!/usr/bin/env python3
"""
Fetch one FIS page and show how the extractor sees it.

Prints every candidate table row with the fields located in it (or why it was
rejected), then what the text-mode fallback recovers from the same page. Use
it when the board suddenly comes back empty and the markup may have changed.

Usage:
    uv run python scripts/inspect_fids_page.py
    uv run python scripts/inspect_fids_page.py --type departures --scope domestic
    uv run python scripts/inspect_fids_page.py --file saved_page.html
"""

import argparse
import sys
from pathlib import Path

from fidswatch.scrape.config import ScrapeConfig, page_url
from fidswatch.scrape.errors import FetchError, RowRejected
from fidswatch.scrape.fetcher import Fetcher
from fidswatch.scrape.models import Category, FlightType
from fidswatch.scrape.sources.html_table import iter_candidate_rows, locate_fields
from fidswatch.scrape.sources.text_fallback import TextFallbackAdapter, page_lines


def main() -> None:
    parser = argparse.ArgumentParser(description="Inspect how a FIS page is parsed")
    parser.add_argument(
        "--type",
        choices=["arrivals", "departures"],
        default="arrivals",
        help="Board to fetch (default: arrivals)",
    )
    parser.add_argument(
        "--scope",
        choices=[c.value for c in Category],
        default=Category.ALL.value,
        help="Domestic/international filter of the page (default: all)",
    )
    parser.add_argument(
        "--file",
        "-f",
        type=str,
        default=None,
        help="Parse a saved HTML file instead of fetching",
    )
    parser.add_argument(
        "--lines",
        action="store_true",
        help="Also dump the flattened text lines the fallback parser sees",
    )
    args = parser.parse_args()

    if args.file:
        html = Path(args.file).read_text(encoding="utf-8", errors="replace")
    else:
        config = ScrapeConfig.from_env()
        flight_type = FlightType.ARRIVAL if args.type == "arrivals" else FlightType.DEPARTURE
        url = page_url(config.base_url, flight_type, Category(args.scope))
        try:
            html = Fetcher(timeout=config.timeout, headers=config.headers).fetch(url).text
        except FetchError as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
        print(f"Fetched {url} ({len(html)} chars)", file=sys.stderr)

    kept = 0
    seen = 0
    print("=== TABLE ROWS ===")
    for cells in iter_candidate_rows(html):
        seen += 1
        try:
            raw = locate_fields(cells)
        except RowRejected as e:
            print(f"  - {cells}\n      rejected: {e.reason}")
            continue
        kept += 1
        print(f"  + {cells}\n      {raw}")
    print(f"Table rows kept: {kept} of {seen}")

    print("\n=== TEXT FALLBACK ===")
    extraction = TextFallbackAdapter().extract(html)
    for raw in extraction.rows:
        print(f"  + {raw}")
    print(f"Fallback rows kept: {len(extraction.rows)} of {extraction.rows_seen}")

    if args.lines:
        print("\n=== FLATTENED LINES ===")
        for line in page_lines(html):
            print(f"  {line}")


if __name__ == "__main__":
    main()
