"""Tests for the backward date-cursor pagination walk."""

from datetime import date, timedelta
from unittest.mock import MagicMock

from findata.providers.pagination import date_part, paginate_backward


def _by_date(record):
    return record["date"]


def _records(*dates):
    return [{"date": d} for d in dates]


class TestDatePart:
    def test_strips_time(self):
        assert date_part("2024-03-01T10:00:00Z") == "2024-03-01"

    def test_plain_date_unchanged(self):
        assert date_part("2024-03-01") == "2024-03-01"


class TestUnboundedMode:
    def test_single_request_even_for_full_page(self):
        fetch_page = MagicMock(return_value=_records("2024-03-03", "2024-03-02"))

        result = paginate_backward(fetch_page, "2024-03-31", None, limit=2, date_of=_by_date)

        fetch_page.assert_called_once_with("2024-03-31")
        assert result == _records("2024-03-03", "2024-03-02")

    def test_empty_page(self):
        fetch_page = MagicMock(return_value=[])
        assert paginate_backward(fetch_page, "2024-03-31", None, limit=2, date_of=_by_date) == []


class TestBoundedMode:
    def test_short_page_stops_before_reaching_start(self):
        fetch_page = MagicMock(return_value=_records("2024-03-20"))

        result = paginate_backward(fetch_page, "2024-03-31", "2024-01-01", limit=2, date_of=_by_date)

        assert fetch_page.call_count == 1
        assert len(result) == 1

    def test_empty_page_stops_immediately(self):
        fetch_page = MagicMock(return_value=[])

        result = paginate_backward(fetch_page, "2024-03-31", "2024-01-01", limit=2, date_of=_by_date)

        assert result == []
        assert fetch_page.call_count == 1

    def test_walks_back_using_oldest_date_of_each_page(self):
        pages = {
            "2024-03-31": _records("2024-03-30", "2024-03-20T15:30:00Z"),
            "2024-03-20": _records("2024-03-20", "2024-03-10"),
            "2024-03-10": _records("2024-03-05"),
        }
        fetch_page = MagicMock(side_effect=lambda cursor: pages[cursor])

        result = paginate_backward(fetch_page, "2024-03-31", "2024-01-01", limit=2, date_of=_by_date)

        assert [c.args[0] for c in fetch_page.call_args_list] == ["2024-03-31", "2024-03-20", "2024-03-10"]
        assert [r["date"] for r in result] == [
            "2024-03-30", "2024-03-20T15:30:00Z", "2024-03-20", "2024-03-10", "2024-03-05",
        ]

    def test_boundary_duplicates_are_kept(self):
        pages = {
            "2024-03-31": _records("2024-03-25", "2024-03-20"),
            "2024-03-20": _records("2024-03-20"),
        }
        fetch_page = MagicMock(side_effect=lambda cursor: pages[cursor])

        result = paginate_backward(fetch_page, "2024-03-31", "2024-01-01", limit=2, date_of=_by_date)

        assert [r["date"] for r in result].count("2024-03-20") == 2

    def test_stops_when_cursor_reaches_start(self):
        fetch_page = MagicMock(return_value=_records("2024-02-01", "2024-01-01"))

        paginate_backward(fetch_page, "2024-03-31", "2024-01-01", limit=2, date_of=_by_date)

        assert fetch_page.call_count == 1

    def test_stops_when_cursor_passes_start(self):
        fetch_page = MagicMock(return_value=_records("2024-02-01", "2023-12-15"))

        paginate_backward(fetch_page, "2024-03-31", "2024-01-01", limit=2, date_of=_by_date)

        assert fetch_page.call_count == 1

    def test_terminates_when_server_keeps_returning_older_full_pages(self):
        def fetch_page(cursor):
            day = date.fromisoformat(cursor)
            return _records((day - timedelta(days=1)).isoformat(), (day - timedelta(days=2)).isoformat())

        result = paginate_backward(fetch_page, "2024-03-31", "2024-03-01", limit=2, date_of=_by_date)

        assert result[-1]["date"] <= "2024-03-01"
        assert len(result) == 30

    def test_stuck_cursor_stops(self):
        fetch_page = MagicMock(return_value=_records("2024-03-31", "2024-03-31T09:00:00Z"))

        result = paginate_backward(fetch_page, "2024-03-31", "2024-01-01", limit=2, date_of=_by_date)

        assert fetch_page.call_count == 1
        assert len(result) == 2
