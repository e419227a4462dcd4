"""Tests for the commit log loader."""

import datetime as dt
from unittest.mock import MagicMock, patch

import httpx
import pytest

from conftest import EST, HEADER, SAMPLE_CSV
from locviz.errors import LogFetchError, LogParseError
from locviz.loader import load_log, parse_log, read_log_source


class TestParseLog:
    def test_parses_all_rows_in_order(self):
        records = parse_log(SAMPLE_CSV)
        assert [r.commit for r in records] == ["b2", "b2", "a1", "a1", "a1"]

    def test_numeric_fields(self):
        r = parse_log(SAMPLE_CSV)[0]
        assert (r.line, r.depth, r.length) == (1, 1, 20)

    def test_date_is_local_midnight_at_offset(self):
        r = parse_log(SAMPLE_CSV)[0]
        assert r.date == dt.datetime(2025, 1, 3, tzinfo=EST)
        assert r.date.utcoffset() == dt.timedelta(hours=-5)

    def test_datetime_is_absolute(self):
        r = parse_log(SAMPLE_CSV)[0]
        assert r.datetime == dt.datetime(2025, 1, 3, 20, 30, tzinfo=dt.timezone.utc)
        assert r.time == dt.time(15, 30)
        assert r.timezone == "-05:00"
        assert r.type == "py"

    def test_naive_datetime_gets_row_offset(self):
        text = HEADER + "\nc3,bob,z.css,1,0,5,2025-02-01,08:15:00,+02:00,css,2025-02-01T08:15:00\n"
        r = parse_log(text)[0]
        assert r.datetime.utcoffset() == dt.timedelta(hours=2)
        assert r.datetime.hour == 8

    def test_datetime_converted_to_row_offset(self):
        text = HEADER + "\nc3,bob,z.css,1,0,5,2025-02-01,08:15:00,-05:00,css,2025-02-01T13:15:00Z\n"
        r = parse_log(text)[0]
        assert r.datetime.utcoffset() == dt.timedelta(hours=-5)
        assert r.datetime == dt.datetime(2025, 2, 1, 13, 15, tzinfo=dt.timezone.utc)
        assert (r.datetime.hour, r.datetime.minute) == (8, 15)

    def test_empty_text(self):
        assert parse_log("") == []

    def test_header_only(self):
        assert parse_log(HEADER + "\n") == []

    def test_non_integer_line_rejects_load(self):
        text = SAMPLE_CSV + "c3,bob,z.css,abc,0,5,2025-02-01,08:15:00,-05:00,css,2025-02-01T08:15:00-05:00\n"
        with pytest.raises(LogParseError) as exc:
            parse_log(text)
        assert exc.value.row == 6
        assert exc.value.column == "line"
        assert exc.value.value == "abc"

    def test_line_zero_rejected(self):
        text = HEADER + "\nc3,bob,z.css,0,0,5,2025-02-01,08:15:00,-05:00,css,2025-02-01T08:15:00-05:00\n"
        with pytest.raises(LogParseError) as exc:
            parse_log(text)
        assert exc.value.column == "line"

    def test_malformed_date(self):
        text = HEADER + "\nc3,bob,z.css,1,0,5,not-a-date,08:15:00,-05:00,css,2025-02-01T08:15:00-05:00\n"
        with pytest.raises(LogParseError) as exc:
            parse_log(text)
        assert exc.value.column == "date"

    def test_malformed_datetime(self):
        text = HEADER + "\nc3,bob,z.css,1,0,5,2025-02-01,08:15:00,-05:00,css,yesterday\n"
        with pytest.raises(LogParseError) as exc:
            parse_log(text)
        assert exc.value.column == "datetime"

    def test_malformed_timezone(self):
        text = HEADER + "\nc3,bob,z.css,1,0,5,2025-02-01,08:15:00,EST,css,2025-02-01T08:15:00-05:00\n"
        with pytest.raises(LogParseError) as exc:
            parse_log(text)
        assert exc.value.column == "timezone"

    def test_oversized_field_rejects_load(self):
        big = "x" * 200_000
        text = HEADER + f"\nc3,bob,{big},1,0,5,2025-02-01,08:15:00,-05:00,css,2025-02-01T08:15:00-05:00\n"
        with pytest.raises(LogParseError) as exc:
            parse_log(text)
        assert exc.value.row == 1

    def test_missing_column(self):
        text = "commit,author,file\nc3,bob,z.css\n"
        with pytest.raises(LogParseError) as exc:
            parse_log(text)
        assert exc.value.row == 0


class TestReadLogSource:
    def test_local_file(self, sample_csv):
        assert read_log_source(sample_csv) == SAMPLE_CSV

    def test_missing_file(self, tmp_path):
        with pytest.raises(LogFetchError) as exc:
            read_log_source(tmp_path / "nope.csv")
        assert "nope.csv" in exc.value.source

    def test_invalid_utf8(self, tmp_path):
        path = tmp_path / "loc.csv"
        path.write_bytes(HEADER.encode() + b"\nc\xff,bob,z.css,1,0,5,2025-02-01,08:15:00,-05:00,css,2025-02-01T08:15:00-05:00\n")
        with pytest.raises(LogFetchError) as exc:
            read_log_source(path)
        assert exc.value.reason == "not valid UTF-8"

    # mock-ok: no network in tests
    @patch("locviz.loader.httpx.get")
    def test_url(self, mock_get):
        mock_get.return_value = MagicMock(text=SAMPLE_CSV)
        assert read_log_source("https://example.com/loc.csv") == SAMPLE_CSV
        mock_get.assert_called_once()

    # mock-ok: no network in tests
    @patch("locviz.loader.httpx.get")
    def test_http_error(self, mock_get):
        url = "https://example.com/loc.csv"
        response = httpx.Response(404, request=httpx.Request("GET", url))
        mock_get.return_value = response
        with pytest.raises(LogFetchError) as exc:
            read_log_source(url)
        assert "404" in exc.value.reason

    # mock-ok: no network in tests
    @patch("locviz.loader.httpx.get")
    def test_network_error(self, mock_get):
        mock_get.side_effect = httpx.ConnectError("refused")
        with pytest.raises(LogFetchError):
            read_log_source("https://example.com/loc.csv")


class TestLoadLog:
    def test_load(self, sample_csv):
        records = load_log(sample_csv)
        assert len(records) == 5

    def test_bad_row_propagates(self, tmp_path):
        path = tmp_path / "loc.csv"
        path.write_text(HEADER + "\nc3,bob,z.css,x,0,5,2025-02-01,08:15:00,-05:00,css,2025-02-01T08:15:00-05:00\n")
        with pytest.raises(LogParseError):
            load_log(path)
