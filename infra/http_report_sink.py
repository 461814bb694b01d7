from __future__ import annotations

import logging
import queue
import threading
import time
from typing import Any, Dict, List, Optional

import httpx

from domain.ports import ReportSink

from .serialization import report_to_dict

log = logging.getLogger(__name__)

# sinal de parada colocado na fila, um por worker
_STOP = object()

BACKOFF_BASE_SEC = 0.25
BACKOFF_MAX_SEC = 2.0


class HttpReportSink(ReportSink):
    """
    Publica relatórios como JSON (POST) sem bloquear quem monta os relatórios.

    - fila limitada + N workers
    - retry com backoff exponencial (teto 2s) em qualquer httpx.HTTPError,
      inclusive status 4xx/5xx
    - drop_on_full=True descarta quando a fila enche; False bloqueia
    - stop() entrega o que já estava na fila antes de encerrar
    """

    def __init__(
        self,
        url: str,
        *,
        workers: int = 2,
        queue_max: int = 1000,
        timeout_sec: float = 5.0,
        max_retries: int = 3,
        drop_on_full: bool = False,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self.url = url
        self.workers = workers
        self.timeout_sec = timeout_sec
        self.max_retries = max_retries
        self.drop_on_full = drop_on_full

        self._q: "queue.Queue[Any]" = queue.Queue(maxsize=queue_max)
        self._threads: List[threading.Thread] = []
        self._client = client
        self._external_client = client is not None

        self._lock = threading.Lock()
        self.total_published = 0
        self.total_dropped = 0
        self.total_failed = 0
        self.total_sent = 0

    @property
    def running(self) -> bool:
        return bool(self._threads)

    def _count(self, name: str) -> None:
        with self._lock:
            setattr(self, name, getattr(self, name) + 1)

    def start(self) -> None:
        if self.running:
            return
        if self._client is None:
            self._client = httpx.Client(timeout=self.timeout_sec)
        self._threads = [
            threading.Thread(target=self._worker, name=f"http-report-{i}", daemon=True)
            for i in range(self.workers)
        ]
        for t in self._threads:
            t.start()

    def stop(self) -> None:
        if not self.running:
            return
        for _ in self._threads:
            self._q.put(_STOP)
        for t in self._threads:
            t.join(timeout=10)
        self._threads = []
        if not self._external_client and self._client is not None:
            self._client.close()
            self._client = None

    def handle(self, report: Any) -> None:
        if not self.running:
            raise RuntimeError("HttpReportSink.handle chamado antes de start()")

        payload = report_to_dict(report)
        self._count("total_published")

        if not self.drop_on_full:
            self._q.put(payload)
            return
        try:
            self._q.put_nowait(payload)
        except queue.Full:
            self._count("total_dropped")
            log.warning("fila cheia: relatório %s/%s descartado", payload["type"], payload["code"])

    def _post(self, payload: Dict[str, Any]) -> bool:
        assert self._client is not None

        attempts = self.max_retries + 1
        for attempt in range(1, attempts + 1):
            try:
                self._client.post(self.url, json=payload).raise_for_status()
                return True
            except httpx.HTTPError as e:
                if attempt == attempts:
                    log.error("POST %s falhou após %d tentativas: %s", self.url, attempt, e)
                    return False
                time.sleep(min(BACKOFF_BASE_SEC * 2 ** (attempt - 1), BACKOFF_MAX_SEC))
        return False

    def _worker(self) -> None:
        while True:
            item = self._q.get()
            try:
                if item is _STOP:
                    return
                self._count("total_sent" if self._post(item) else "total_failed")
            finally:
                self._q.task_done()
