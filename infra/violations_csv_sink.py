from __future__ import annotations

import csv
import logging
import threading
import time
from pathlib import Path
from queue import Empty, Full, Queue
from typing import Dict, List

from domain.dates import format_date
from domain.ports import ViolationSink
from domain.violations import ViolationEvent

log = logging.getLogger(__name__)

CSV_COLUMNS = ["timestamp", "networkCode", "gatewayCode", "sensorCode", "value", "rule"]


def violation_row(ev: ViolationEvent) -> Dict[str, object]:
    return {
        "timestamp": format_date(ev.timestamp),
        "networkCode": ev.network_code,
        "gatewayCode": ev.gateway_code,
        "sensorCode": ev.sensor_code,
        "value": ev.value,
        "rule": ev.rule,
    }


class AsyncCsvViolationWriter(ViolationSink):
    """
    Grava violações em CSV a partir de uma thread própria, em lotes.

    O lote vai para o disco quando atinge flush_every_n eventos ou quando
    flush_every_sec se passou desde a última gravação. O arquivo só é criado
    na primeira gravação; se já existir com conteúdo, o cabeçalho não é
    repetido.
    """

    def __init__(
        self,
        csv_path: str,
        *,
        queue_max: int = 20000,
        drop_on_full: bool = True,
        flush_every_n: int = 200,
        flush_every_sec: float = 2.0,
    ):
        self.path = Path(csv_path)
        self.drop_on_full = drop_on_full
        self.flush_every_n = max(1, flush_every_n)
        self.flush_every_sec = flush_every_sec

        self.total_written = 0
        self.total_dropped = 0

        self._q: Queue[ViolationEvent] = Queue(maxsize=queue_max)
        self._stopping = threading.Event()
        self._thread = threading.Thread(target=self._run, name="violations-csv", daemon=True)

    def start(self) -> None:
        self._thread.start()

    def stop(self) -> None:
        self._stopping.set()
        if self._thread.is_alive():
            self._thread.join(timeout=5)

    def publish(self, ev: ViolationEvent) -> None:
        if not self.drop_on_full:
            self._q.put(ev)
            return
        try:
            self._q.put_nowait(ev)
        except Full:
            self.total_dropped += 1

    def _write(self, batch: List[ViolationEvent]) -> None:
        new_file = not self.path.exists() or self.path.stat().st_size == 0
        with self.path.open("a", newline="", encoding="utf-8") as f:
            w = csv.DictWriter(f, fieldnames=CSV_COLUMNS)
            if new_file:
                w.writeheader()
            w.writerows(violation_row(ev) for ev in batch)
        self.total_written += len(batch)
        log.debug("%d violações gravadas em %s", len(batch), self.path)

    def _run(self) -> None:
        batch: List[ViolationEvent] = []
        deadline = time.monotonic() + self.flush_every_sec

        while not self._stopping.is_set():
            try:
                batch.append(self._q.get(timeout=0.2))
            except Empty:
                pass

            due = time.monotonic() >= deadline
            if batch and (due or len(batch) >= self.flush_every_n):
                self._write(batch)
                batch = []
            if due:
                deadline = time.monotonic() + self.flush_every_sec

        # stop(): o que sobrou na fila também vai para o arquivo
        while True:
            try:
                batch.append(self._q.get_nowait())
            except Empty:
                break
        if batch:
            self._write(batch)
