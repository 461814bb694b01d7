"""Tests for infra.http_report_sink (httpx.MockTransport, sem rede)."""

import json
import threading

import httpx
import pytest

from app.report_service import ReportService
from infra import http_report_sink
from infra.http_report_sink import HttpReportSink
from infra.memory_store import InMemoryStore

from .helpers import series


@pytest.fixture
def report():
    return ReportService(InMemoryStore(series([1.0, 2.0, 3.0]))).build_sensor_report("S_000001")


@pytest.fixture(autouse=True)
def no_backoff(monkeypatch):
    monkeypatch.setattr(http_report_sink.time, "sleep", lambda s: None)


def _client(handler):
    return httpx.Client(transport=httpx.MockTransport(handler))


def test_posts_report_as_json(report):
    received = []
    lock = threading.Lock()

    def handler(request):
        with lock:
            received.append((request.method, str(request.url), request.read()))
        return httpx.Response(200)

    sink = HttpReportSink("http://reports.local/ingest", workers=2, client=_client(handler))
    sink.start()
    sink.handle(report)
    sink.handle(report)
    sink.stop()

    assert sink.total_published == 2
    assert sink.total_sent == 2
    assert sink.total_failed == 0
    method, url, body = received[0]
    assert method == "POST"
    assert url == "http://reports.local/ingest"
    payload = json.loads(body)
    assert payload["type"] == "sensor"
    assert payload["code"] == "S_000001"
    assert payload["number_of_measurements"] == 3


def test_retries_then_succeeds(report):
    calls = {"n": 0}

    def handler(request):
        calls["n"] += 1
        if calls["n"] < 3:
            return httpx.Response(503)
        return httpx.Response(201)

    sink = HttpReportSink("http://reports.local/ingest", workers=1, max_retries=3, client=_client(handler))
    sink.start()
    sink.handle(report)
    sink.stop()

    assert calls["n"] == 3
    assert sink.total_sent == 1
    assert sink.total_failed == 0


def test_gives_up_after_max_retries(report):
    calls = {"n": 0}

    def handler(request):
        calls["n"] += 1
        raise httpx.ConnectError("recusado", request=request)

    sink = HttpReportSink("http://reports.local/ingest", workers=1, max_retries=2, client=_client(handler))
    sink.start()
    sink.handle(report)
    sink.stop()

    assert calls["n"] == 3
    assert sink.total_sent == 0
    assert sink.total_failed == 1


def test_handle_before_start_fails(report):
    sink = HttpReportSink("http://reports.local/ingest", client=_client(lambda r: httpx.Response(200)))
    with pytest.raises(RuntimeError):
        sink.handle(report)


def test_drop_on_full(report):
    release = threading.Event()

    def handler(request):
        release.wait(timeout=5)
        return httpx.Response(200)

    sink = HttpReportSink(
        "http://reports.local/ingest",
        workers=1,
        queue_max=1,
        drop_on_full=True,
        client=_client(handler),
    )
    sink.start()
    for _ in range(10):
        sink.handle(report)
    release.set()
    sink.stop()

    assert sink.total_published == 10
    assert sink.total_dropped >= 8
    assert sink.total_sent + sink.total_dropped == 10


def test_external_client_is_not_closed(report):
    client = _client(lambda r: httpx.Response(200))
    sink = HttpReportSink("http://reports.local/ingest", client=client)
    sink.start()
    sink.stop()
    assert not client.is_closed
    client.close()
