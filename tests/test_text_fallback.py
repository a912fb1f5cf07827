"""Unit tests for the text-mode fallback parser."""

from fidswatch.scrape.models import FlightType
from fidswatch.scrape.normalize import normalize_row
from fidswatch.scrape.sources.html_table import HtmlTableAdapter
from fidswatch.scrape.sources.text_fallback import TextFallbackAdapter, page_lines


def _records(extraction):
    return [normalize_row(r, FlightType.ARRIVAL) for r in extraction.rows]


class TestPageLines:
    """Tests for page_lines flattening."""

    def test_one_line_per_block(self) -> None:
        html = "<body><div>Q2 225 Male 13:20 DOM</div><p>EK 652<br>Dubai</p></body>"
        assert page_lines(html) == ["Q2 225 Male 13:20 DOM", "EK 652", "Dubai"]

    def test_table_rows_become_lines(self) -> None:
        html = "<table><tr><td>Q2 225</td><td>Male</td><td>13:20</td><td>DOM</td></tr></table>"
        assert page_lines(html) == ["Q2 225 Male 13:20 DOM"]

    def test_scripts_dropped(self) -> None:
        html = "<html><body><script>var a = 'Q2 225 Male 13:20 DOM';</script><p>hello</p></body></html>"
        assert page_lines(html) == ["hello"]


class TestTextFallbackAdapter:
    """Tests for TextFallbackAdapter.extract."""

    def test_same_line_pattern(self) -> None:
        html = "<div>Q2 225 Dharavandhoo 13:20 13:29 DOM LANDED</div>"
        [record] = _records(TextFallbackAdapter().extract(html))
        assert record.flight_no == "Q2 225"
        assert record.origin_or_destination == "Dharavandhoo"
        assert record.scheduled == "13:20"
        assert record.estimated == "13:29"
        assert record.terminal == "DOM"
        assert record.status == "LANDED"

    def test_terminal_on_next_line(self) -> None:
        html = "<div>Q2 150 Kaadedhdhoo 09:05</div><div>DOM DELAYED</div>"
        extraction = TextFallbackAdapter().extract(html)
        [record] = _records(extraction)
        assert record.terminal == "DOM"
        assert record.status == "DELAYED"
        assert extraction.rows_seen == 1

    def test_terminal_in_line_tail(self) -> None:
        html = "<div>SQ 438 Singapore 15:10 16:05 (T1) Delayed</div>"
        [record] = _records(TextFallbackAdapter().extract(html))
        assert record.terminal == "T1"
        assert record.status == "DELAYED"
        assert record.estimated == "16:05"

    def test_status_only_on_next_line(self) -> None:
        html = "<div>NR 201 Maamigili 16:00 DOM</div><div>CANCELLED</div><div>Q2 225 Male 13:20 DOM</div>"
        records = _records(TextFallbackAdapter().extract(html))
        assert [r.flight_no for r in records] == ["NR 201", "Q2 225"]
        assert records[0].status == "CANCELLED"
        assert records[1].status == "-"

    def test_next_flight_line_not_consumed(self) -> None:
        html = "<div>Q2 150 Kaadedhdhoo 09:05</div><div>Q2 225 Male 13:20 DOM</div>"
        records = _records(TextFallbackAdapter().extract(html))
        assert [r.flight_no for r in records] == ["Q2 225"]

    def test_lookahead_is_one_line_only(self) -> None:
        html = "<div>Q2 150 Kaadedhdhoo 09:05</div><div>see remarks</div><div>DOM DELAYED</div>"
        assert TextFallbackAdapter().extract(html).rows == []

    def test_banner_line_rejected(self) -> None:
        html = "<div>Q2 000 ALL ORIGINS 00:00 DOM</div>"
        assert TextFallbackAdapter().extract(html).rows == []

    def test_fallback_matches_table_extraction(self, load_fixture) -> None:
        """Text-mode page yields the same flights as the table page with the same data."""
        table = _records(HtmlTableAdapter().extract(load_fixture("arrivals_all.html")))
        text = _records(TextFallbackAdapter().extract(load_fixture("arrivals_text.html")))

        assert [r.flight_no for r in text] == [r.flight_no for r in table]
        assert [r.key() for r in text] == [r.key() for r in table]
        assert [r.status for r in text] == [r.status for r in table]

    def test_fallback_on_table_page(self, load_fixture) -> None:
        text = _records(TextFallbackAdapter().extract(load_fixture("arrivals_all.html")))
        assert {r.flight_no for r in text} == {"Q2 225", "EK 652", "Q2 150", "SQ 438", "NR 201"}
