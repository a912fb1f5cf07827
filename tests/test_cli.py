"""Unit tests for the scrape CLI with a mocked service."""

from unittest.mock import MagicMock, patch

import pandas as pd
import pytest

from fidswatch.scrape.cli import main, parse_args
from fidswatch.scrape.models import (
    Category,
    FlightRecord,
    FlightType,
    ScrapeResult,
    SourceResult,
    SourceSpec,
)


def _result(ok: bool = True) -> ScrapeResult:
    sources = [
        SourceResult(
            source=SourceSpec(flight_type, Category.ALL, f"https://fis.example/{flight_type.short}"),
            error=None if ok else "HTTP 503",
        )
        for flight_type in FlightType
    ]
    if not ok:
        return ScrapeResult(sources=sources)
    return ScrapeResult(
        arrivals=[
            FlightRecord(FlightType.ARRIVAL, "Q2 225", "Dharavandhoo", "13:20", "13:29", "DOM", "LANDED",
                         Category.DOMESTIC),
            FlightRecord(FlightType.ARRIVAL, "EK 652", "Dubai", "14:35", None, "T1", "ON TIME",
                         Category.INTERNATIONAL),
        ],
        departures=[
            FlightRecord(FlightType.DEPARTURE, "Q2 226", "Dharavandhoo", "14:10", None, "DOM", "BOARDING",
                         Category.DOMESTIC),
        ],
        sources=sources,
    )


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch) -> None:
    for name in (
        "FIS_SOURCE",
        "FIS_TIMEOUT",
        "FIS_HEADERS",
        "FIS_MAX_WORKERS",
        "SCRAPE_INTERVAL",
        "FIS_XML_TIMEOUT_MS",
        "FIS_XML_HEADERS",
        "SCRAPE_INTERVAL_MS",
    ):
        monkeypatch.delenv(name, raising=False)


class TestParseArgs:
    """Tests for argument parsing."""

    def test_defaults(self) -> None:
        args = parse_args([])
        assert args.type == "both"
        assert args.scope == "all"
        assert args.source is None
        assert args.interval is None

    def test_invalid_scope(self) -> None:
        with pytest.raises(SystemExit):
            parse_args(["--scope", "cargo"])


class TestMain:
    """Tests for main()."""

    @patch("fidswatch.scrape.cli.ScrapeService")
    def test_prints_table(self, mock_service_cls: MagicMock, capsys) -> None:
        mock_service_cls.return_value.run_cycle.return_value = _result()

        main([])

        out = capsys.readouterr().out
        assert "Q2 225" in out
        assert "Q2 226" in out

    @patch("fidswatch.scrape.cli.ScrapeService")
    def test_scope_and_type_filter(self, mock_service_cls: MagicMock, capsys) -> None:
        mock_service_cls.return_value.run_cycle.return_value = _result()

        main(["--type", "arrivals", "--scope", "international"])

        out = capsys.readouterr().out
        assert "EK 652" in out
        assert "Q2 225" not in out
        assert "Q2 226" not in out
        sources = mock_service_cls.return_value.run_cycle.call_args[0][0]
        assert {s.flight_type for s in sources} == {FlightType.ARRIVAL}

    @patch("fidswatch.scrape.cli.ScrapeService")
    def test_source_flag(self, mock_service_cls: MagicMock) -> None:
        mock_service_cls.return_value.run_cycle.return_value = _result()

        main(["--source", "xml"])

        config = mock_service_cls.call_args[0][0]
        assert config.source == "xml"
        sources = mock_service_cls.return_value.run_cycle.call_args[0][0]
        assert all(s.format == "xml" for s in sources)

    @patch("fidswatch.scrape.cli.ScrapeService")
    def test_failed_cycle_exits(self, mock_service_cls: MagicMock, capsys) -> None:
        mock_service_cls.return_value.run_cycle.return_value = _result(ok=False)

        with pytest.raises(SystemExit) as exc_info:
            main([])

        assert exc_info.value.code == 1
        assert "could be scraped" in capsys.readouterr().err

    @patch("fidswatch.scrape.cli.ScrapeService")
    def test_writes_csv(self, mock_service_cls: MagicMock, tmp_path) -> None:
        mock_service_cls.return_value.run_cycle.return_value = _result()
        output = tmp_path / "flights.csv"

        main(["-o", str(output)])

        df = pd.read_csv(output)
        assert list(df["flightNo"]) == ["Q2 225", "EK 652", "Q2 226"]
        assert list(df["type"]) == ["arrival", "arrival", "departure"]

    @patch("fidswatch.scrape.cli.ScrapeService")
    def test_stats(self, mock_service_cls: MagicMock, capsys) -> None:
        mock_service_cls.return_value.run_cycle.return_value = _result()

        main(["--stats"])

        out = capsys.readouterr().out
        assert "Total flights: 3" in out
        assert "LANDED: 1" in out
        assert "arr/all/html" in out

    def test_bad_environment(self, monkeypatch, capsys) -> None:
        monkeypatch.setenv("FIS_TIMEOUT", "-1")
        with pytest.raises(SystemExit) as exc_info:
            main([])
        assert exc_info.value.code == 1
        assert "FIS_TIMEOUT" in capsys.readouterr().err

    @patch("fidswatch.scrape.cli.time.sleep")
    @patch("fidswatch.scrape.cli.ScrapeService")
    def test_interval_keeps_last_good_board(
        self, mock_service_cls: MagicMock, mock_sleep: MagicMock, capsys
    ) -> None:
        mock_service_cls.return_value.run_cycle.side_effect = [_result(), _result(ok=False)]
        mock_sleep.side_effect = [None, KeyboardInterrupt]

        main(["--interval", "30"])

        out = capsys.readouterr().out
        # Second cycle failed but still printed the first cycle's board.
        assert out.count("Q2 225") == 2
        mock_sleep.assert_called_with(30.0)
