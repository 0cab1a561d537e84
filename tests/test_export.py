"""Tests for CSV/TXT export and filename derivation."""

from datetime import datetime, timezone

import pytest

from kpwgen import HistoryEntry, export_filename, render_export, to_csv, to_txt
from kpwgen.export import iso_instant, local_timestamp

TS = datetime(2024, 1, 2, 3, 4, 5, 678000, tzinfo=timezone.utc)
NOW = datetime(2025, 3, 9, 12, 0, 0)


def _entry(platform="google", account=None, password="pw", timestamp=TS):
    return HistoryEntry(platform, account, password, timestamp)


# ── Empty input ────────────────────────────────────────────────────────────


class TestEmpty:
    def test_all_empty(self):
        assert to_csv([]) == ""
        assert to_txt([]) == ""
        assert export_filename([]) == ""

    def test_render_nothing(self):
        assert render_export([], "csv") is None


# ── CSV ────────────────────────────────────────────────────────────────────


class TestCsv:
    def test_header_and_row(self):
        out = to_csv([_entry("google", "alice", "Secr3t!")])
        assert out == (
            "Platform,Account,Password,Generated At\n"
            "google,alice,Secr3t!,2024-01-02T03:04:05.678Z"
        )

    def test_quoting(self):
        out = to_csv([_entry("a,b", "", 'x"y')])
        assert out.split("\n")[1] == '"a,b",,"x""y",2024-01-02T03:04:05.678Z'

    def test_newline_quoted(self):
        out = to_csv([_entry("multi\nline")])
        assert '"multi\nline"' in out

    def test_no_quoting_for_other_punctuation(self):
        out = to_csv([_entry("a;b", None, "p@ss w'rd")])
        assert out.endswith("a;b,,p@ss w'rd,2024-01-02T03:04:05.678Z")

    def test_rows_in_history_order(self):
        out = to_csv([_entry("first"), _entry("second")])
        lines = out.split("\n")
        assert len(lines) == 3
        assert lines[1].startswith("first,")
        assert lines[2].startswith("second,")
        assert not out.endswith("\n")


class TestTimestamps:
    def test_iso_instant_utc(self):
        assert iso_instant(TS) == "2024-01-02T03:04:05.678Z"

    def test_iso_instant_converts_offset(self):
        from datetime import timedelta

        ts = datetime(2024, 1, 2, 10, 4, 5, tzinfo=timezone(timedelta(hours=7)))
        assert iso_instant(ts) == "2024-01-02T03:04:05.000Z"

    def test_local_layout(self):
        local = TS.astimezone()
        assert local_timestamp(TS) == local.strftime("%d/%m/%Y, %H.%M.%S")


# ── TXT ────────────────────────────────────────────────────────────────────


class TestTxt:
    def test_block_with_account(self):
        out = to_txt([_entry("google", "alice", "pw1")])
        assert out == (
            "Platform   : google\n"
            "Account    : alice\n"
            "Password   : pw1\n"
            f"Generated  : {local_timestamp(TS)}\n"
            + "-" * 40
        )

    def test_account_line_omitted(self):
        out = to_txt([_entry("google", None, "pw1")])
        assert "Account" not in out

    def test_blocks_joined_by_blank_line(self):
        out = to_txt([_entry("a"), _entry("b")])
        first, second = out.split("\n\n")
        assert first.startswith("Platform   : a")
        assert second.startswith("Platform   : b")


# ── Filename ───────────────────────────────────────────────────────────────


class TestFilename:
    def test_single(self):
        assert export_filename([_entry("google")], NOW) == "Kpwgen_09-03-2025_google"

    def test_strips_non_alnum_and_counts_rest(self):
        names = ["Google!", "Face book", "X", "a", "b"]
        entries = [_entry(n) for n in names]
        assert export_filename(entries, NOW) == "Kpwgen_09-03-2025_Google-Facebook-X_2+"

    def test_exactly_three(self):
        entries = [_entry(n) for n in ["a", "b", "c"]]
        assert export_filename(entries, NOW) == "Kpwgen_09-03-2025_a-b-c"

    def test_uses_call_time_not_entry_time(self):
        name = export_filename([_entry("x")])
        assert name == f"Kpwgen_{datetime.now():%d-%m-%Y}_x"


class TestRenderExport:
    def test_csv(self):
        export = render_export([_entry("google")], "csv", NOW)
        assert export.filename == "Kpwgen_09-03-2025_google.csv"
        assert export.mime_type == "text/csv"
        assert export.content.startswith("Platform,Account")

    def test_txt(self):
        export = render_export([_entry("google")], "txt", NOW)
        assert export.filename.endswith(".txt")
        assert export.mime_type == "text/plain"

    def test_unknown_format(self):
        with pytest.raises(ValueError, match="Unsupported"):
            render_export([_entry()], "pdf")
