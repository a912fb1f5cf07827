"""Unit tests for flight statistics."""

from fidswatch.scrape.models import Category, FlightRecord, FlightType, SourceResult, SourceSpec
from fidswatch.scrape.stats import FlightStats, compute_stats, sources_dataframe


def _record(flight_no, scheduled, status="-", estimated=None, terminal="T1", category=Category.INTERNATIONAL,
            flight_type=FlightType.ARRIVAL):
    return FlightRecord(
        flight_type=flight_type,
        flight_no=flight_no,
        origin_or_destination="Dubai",
        scheduled=scheduled,
        estimated=estimated,
        terminal=terminal,
        status=status,
        category=category,
    )


class TestComputeStats:
    """Tests for compute_stats."""

    def test_empty(self) -> None:
        stats = compute_stats([])
        assert stats.total_flights == 0
        assert stats.by_status == {}
        assert stats.status_dataframe().empty
        assert stats.hourly_dataframe().empty

    def test_counts(self) -> None:
        records = [
            _record("EK 652", "14:35", status="ON TIME"),
            _record("SQ 438", "15:10", status="DELAYED", estimated="16:05"),
            _record("Q2 225", "13:20", status="LANDED", estimated="13:10", terminal="DOM",
                    category=Category.DOMESTIC),
            _record("Q2 226", "14:10", status="DELAYED", terminal="", category=Category.ALL,
                    flight_type=FlightType.DEPARTURE),
        ]

        stats = compute_stats(records)

        assert stats.total_flights == 4
        assert stats.by_type == {"arrival": 3, "departure": 1}
        assert stats.by_status == {"ON TIME": 1, "DELAYED": 2, "LANDED": 1}
        assert stats.by_category == {"international": 2, "domestic": 1, "all": 1}
        assert stats.by_terminal == {"T1": 2, "DOM": 1, "-": 1}
        assert stats.by_hour == {13: 1, 14: 2, 15: 1}
        assert stats.delayed_estimates == 1

        df = stats.status_dataframe()
        assert df.iloc[0]["status"] == "DELAYED"
        assert df.iloc[0]["count"] == 2
        assert list(stats.hourly_dataframe()["hour"]) == [13, 14, 15]

    def test_to_dict(self) -> None:
        d = FlightStats(total_flights=2, by_status={"LANDED": 2}).to_dict()
        assert d["total_flights"] == 2
        assert d["by_status"] == {"LANDED": 2}
        assert "by_hour" in d


def test_sources_dataframe() -> None:
    ok = SourceResult(
        source=SourceSpec(FlightType.ARRIVAL, Category.ALL, "https://fis.example/a"),
        rows_seen=7,
        rows_kept=5,
        parser="html",
    )
    failed = SourceResult(
        source=SourceSpec(FlightType.DEPARTURE, Category.ALL, "https://fis.example/d"),
        error="https://fis.example/d: HTTP 503",
    )

    df = sources_dataframe([ok, failed])

    assert list(df["source"]) == ["arr/all/html", "dep/all/html"]
    assert list(df["rows_kept"]) == [5, 0]
    assert df.iloc[1]["error"].endswith("HTTP 503")
    assert sources_dataframe([]).empty
