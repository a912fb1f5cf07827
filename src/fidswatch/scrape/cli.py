"""CLI for scraping the FIS arrivals/departures boards."""

import argparse
import logging
import sys
import time
from dataclasses import replace
from typing import List, Optional

import pandas as pd

from fidswatch.scrape.config import SOURCE_FORMATS, ScrapeConfig
from fidswatch.scrape.models import RECORD_COLUMNS, Category, CycleStatus, FlightType, ScrapeResult
from fidswatch.scrape.service import ScrapeService
from fidswatch.scrape.stats import compute_stats, sources_dataframe

logger = logging.getLogger(__name__)

_TYPES = {
    "arrivals": (FlightType.ARRIVAL,),
    "departures": (FlightType.DEPARTURE,),
    "both": (FlightType.ARRIVAL, FlightType.DEPARTURE),
}


def parse_args(argv: Optional[List[str]] = None):
    parser = argparse.ArgumentParser(
        description="Scrape live arrivals/departures from the FIS flight information display"
    )
    parser.add_argument(
        "--type",
        "-t",
        choices=sorted(_TYPES),
        default="both",
        help="Which board to scrape (default: both)",
    )
    parser.add_argument(
        "--scope",
        choices=[c.value for c in Category],
        default=Category.ALL.value,
        help="Only show domestic or international flights (default: all)",
    )
    parser.add_argument(
        "--source",
        choices=SOURCE_FORMATS,
        default=None,
        help="Scrape the HTML pages or the XML feeds (default: FIS_SOURCE or html)",
    )
    parser.add_argument(
        "--stats",
        "-s",
        action="store_true",
        help="Include statistics summary",
    )
    parser.add_argument(
        "--output",
        "-o",
        help="Write results to CSV file",
    )
    parser.add_argument(
        "--interval",
        "-i",
        type=float,
        default=None,
        help="Repeat every N seconds, keeping the last good board when a cycle fails",
    )
    parser.add_argument(
        "--progress",
        action="store_true",
        help="Show a progress bar while fetching",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="count",
        default=0,
        help="-v for INFO, -vv for DEBUG logging",
    )
    return parser.parse_args(argv)


def to_dataframe(result: ScrapeResult, types, scope: Category) -> pd.DataFrame:
    rows = [r.to_dict() for t in types for r in result.flights(t, scope)]
    if not rows:
        return pd.DataFrame(columns=RECORD_COLUMNS)
    return pd.DataFrame(rows, columns=RECORD_COLUMNS)


def print_stats(result: ScrapeResult, types, scope: Category) -> None:
    records = [r for t in types for r in result.flights(t, scope)]
    stats = compute_stats(records)
    print(f"\nTotal flights: {stats.total_flights}")
    if stats.by_status:
        print("\nBy status:")
        for status, count in sorted(stats.by_status.items(), key=lambda x: -x[1]):
            print(f"  {status}: {count}")
    if stats.by_category:
        print("\nBy category:")
        for category, count in sorted(stats.by_category.items()):
            print(f"  {category}: {count}")
    if stats.by_terminal:
        print("\nBy terminal:")
        for terminal, count in sorted(stats.by_terminal.items()):
            print(f"  {terminal}: {count}")
    if stats.by_hour:
        print("\nBy hour:")
        for hour, count in sorted(stats.by_hour.items()):
            print(f"  {hour:02d}: {count}")
    print("\nSources:")
    print(sources_dataframe(result.sources).to_string(index=False))
    print()


def report(result: ScrapeResult, args, types) -> None:
    scope = Category(args.scope)
    for t in types:
        status = result.status_for(t)
        if status is CycleStatus.FAILED:
            print(f"Warning: {t.value}s could not be scraped", file=sys.stderr)

    if args.stats:
        print_stats(result, types, scope)

    df = to_dataframe(result, types, scope)
    if df.empty:
        print("No flights found.", file=sys.stderr)
    elif not args.output:
        print(df.to_string(index=False))

    if args.output and not df.empty:
        df.to_csv(args.output, index=False)
        print(f"\nWrote {len(df)} rows to {args.output}", file=sys.stderr)


def main(argv: Optional[List[str]] = None):
    args = parse_args(argv)

    level = logging.WARNING
    if args.verbose == 1:
        level = logging.INFO
    elif args.verbose > 1:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    try:
        config = ScrapeConfig.from_env()
        if args.source:
            config = replace(config, source=args.source)
        if args.interval is not None:
            if args.interval <= 0:
                raise ValueError("--interval must be positive")
            config = replace(config, interval=args.interval)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    types = _TYPES[args.type]
    sources = config.sources(types)
    service = ScrapeService(config)

    if args.interval is None:
        result = service.run_cycle(sources, progress=args.progress)
        if result.status is CycleStatus.FAILED:
            print("Error: no FIDS source could be scraped", file=sys.stderr)
            sys.exit(1)
        report(result, args, types)
        return

    previous = None
    try:
        while True:
            result = service.run_cycle(sources, progress=args.progress).merged_with(previous)
            report(result, args, types)
            previous = result
            time.sleep(config.interval)
    except KeyboardInterrupt:
        logger.info("Stopped")


if __name__ == "__main__":
    main()
