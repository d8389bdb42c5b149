"""Unit tests for marionette.common.transport, with the network replaced by a fake."""

import pytest
import requests

from marionette.common import transport
from marionette.common.logbook import LogBook, kind_error, kind_request, kind_response
from marionette.common.transport import HostTransport

from .test_bgtask import DeferredExecutor


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

class FakeResponse:
    def __init__(self, status_code=200, content=None, reason="OK"):
        self.status_code = status_code
        self.reason = reason
        self._content = content
        self.text = str(content)

    def json(self):
        if self._content is None:
            raise ValueError("no JSON in response body")
        return self._content


class FakeHost:
    """Stands in for `requests.post`. Records the calls, answers with a canned response."""

    def __init__(self, response=None, exc=None, during_call=None):
        self.calls = []
        self.response = response if response is not None else FakeResponse(content={"status": "ok", "data": "pong"})
        self.exc = exc
        self.during_call = during_call

    def __call__(self, url, json=None, headers=None, timeout=None):
        self.calls.append((url, json))
        if self.during_call is not None:
            self.during_call()
        if self.exc is not None:
            raise self.exc
        return self.response


def _make_transport(monkeypatch, host):
    monkeypatch.setattr(transport.requests, "post", host)
    executor = DeferredExecutor()
    return HostTransport("http://127.0.0.1:5200/", logbook=LogBook(), executor=executor), executor


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------

class TestRequest:
    def test_wire_format(self, monkeypatch):
        host = FakeHost()
        t, executor = _make_transport(monkeypatch, host)
        t.request("disassemble", {"address": 16})
        executor.run_all()
        assert host.calls == [("http://127.0.0.1:5200/api/disassemble",
                               {"method": "disassemble", "data": {"address": 16}})]

    def test_response_delivered_on_poll(self, monkeypatch):
        t, executor = _make_transport(monkeypatch, FakeHost())
        received = []
        t.request("ping", owner="panel", on_response=received.append)
        executor.run_all()
        assert received == []  # not before `poll`
        assert t.poll() == 1
        assert received == [{"status": "ok", "data": "pong"}]
        assert t.poll() == 0

    def test_logbook_entries(self, monkeypatch):
        t, executor = _make_transport(monkeypatch, FakeHost())
        t.request("ping", "hello")
        executor.run_all()
        entries = t.logbook.snapshot()
        assert [(e.kind, e.detail) for e in entries] == [(kind_request, "ping"), (kind_response, "ok")]

    def test_no_response(self, monkeypatch):
        host = FakeHost(response=FakeResponse(content=None))
        t, executor = _make_transport(monkeypatch, host)
        received = []
        t.request("step", no_response=True, on_response=received.append)
        executor.run_all()
        assert t.poll() == 0
        assert received == []
        assert [e.kind for e in t.logbook.snapshot()] == [kind_request]

    def test_empty_method_rejected(self, monkeypatch):
        t, executor = _make_transport(monkeypatch, FakeHost())
        with pytest.raises(ValueError):
            t.request("")


class TestFailures:
    def test_connection_error(self, monkeypatch):
        t, executor = _make_transport(monkeypatch, FakeHost(exc=requests.ConnectionError("refused")))
        received = []
        t.request("ping", on_response=received.append)
        executor.run_all()
        assert t.poll() == 0
        assert received == []
        assert t.logbook.snapshot()[-1].kind == kind_error

    def test_http_error(self, monkeypatch):
        host = FakeHost(response=FakeResponse(status_code=500, content={"status": "error"}, reason="Internal Server Error"))
        t, executor = _make_transport(monkeypatch, host)
        received = []
        t.request("ping", on_response=received.append)
        executor.run_all()
        assert t.poll() == 0
        assert t.logbook.snapshot()[-1].kind == kind_error

    def test_invalid_json(self, monkeypatch):
        t, executor = _make_transport(monkeypatch, FakeHost(response=FakeResponse(content=None)))
        t.request("ping", on_response=lambda content: None)
        executor.run_all()
        assert t.logbook.snapshot()[-1].kind == kind_error


class TestDiscard:
    def test_queued_request_cancelled(self, monkeypatch):
        host = FakeHost()
        t, executor = _make_transport(monkeypatch, host)
        owner = object()
        t.request("ping", owner=owner, on_response=lambda content: None)
        t.discard(owner)
        executor.run_all()
        assert host.calls == []
        assert t.poll() == 0

    def test_queued_response_dropped(self, monkeypatch):
        t, executor = _make_transport(monkeypatch, FakeHost())
        owner = object()
        received = []
        t.request("ping", owner=owner, on_response=received.append)
        executor.run_all()
        t.discard(owner)
        assert t.poll() == 0
        assert received == []

    def test_in_flight_response_dropped(self, monkeypatch):
        """The owner goes away while the request is on the wire: the response is dropped on arrival."""
        owner = object()
        holder = {}
        host = FakeHost(during_call=lambda: holder["transport"].discard(owner))
        t, executor = _make_transport(monkeypatch, host)
        holder["transport"] = t
        received = []
        t.request("ping", owner=owner, on_response=received.append)
        executor.run_all()
        assert len(host.calls) == 1
        assert t.poll() == 0
        assert received == []

    def test_other_owners_unaffected(self, monkeypatch):
        t, executor = _make_transport(monkeypatch, FakeHost())
        gone, alive = object(), object()
        received = []
        t.request("ping", owner=gone, on_response=lambda content: received.append("gone"))
        t.request("ping", owner=alive, on_response=lambda content: received.append("alive"))
        t.discard(gone)
        executor.run_all()
        t.poll()
        assert received == ["alive"]
