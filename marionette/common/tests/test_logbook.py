"""Unit tests for marionette.common.logbook."""

import pytest

from marionette.common.logbook import (LogBook, LogEntry,
                                       kind_error, kind_request, kind_response,
                                       level_default, level_error, level_info, level_of)


class TestLevels:
    def test_detail_classification(self):
        assert level_of("error") is level_error
        assert level_of("ok") is level_info
        assert level_of("info") is level_info
        assert level_of("disassemble") is level_default

    def test_empty_message(self):
        assert LogEntry(kind_request, "ping", "").message == "(empty)"

    def test_time_string_format(self):
        entry = LogEntry(kind_request, "ping", "x", timestamp=0.0)
        assert len(entry.time_string()) == 8
        assert entry.time_string().count(":") == 2


class TestLogBook:
    def test_kinds(self):
        logbook = LogBook()
        logbook.requested("ping", {"x": 1})
        logbook.received("ok", {"status": "ok"})
        logbook.error("connection refused")
        entries = logbook.snapshot()
        assert [e.kind for e in entries] == [kind_request, kind_response, kind_error]
        assert [e.detail for e in entries] == ["ping", "ok", "error"]
        assert entries[0].message == str({"x": 1})
        assert entries[2].level is level_error

    def test_bounded(self):
        logbook = LogBook(max_entries=3)
        for k in range(5):
            logbook.add(kind_request, "m", f"{k}")
        assert [e.message for e in logbook.snapshot()] == ["2", "3", "4"]
        assert len(logbook) == 3

    def test_version_increases(self):
        logbook = LogBook()
        v0 = logbook.version
        logbook.error("x")
        assert logbook.version == v0 + 1
        logbook.clear()
        assert logbook.version == v0 + 2
        assert len(logbook) == 0

    def test_bad_capacity(self):
        with pytest.raises(ValueError):
            LogBook(max_entries=0)
