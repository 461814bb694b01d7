from __future__ import annotations
import logging
import threading
from queue import Queue
from typing import List, Optional, Sequence, Tuple

from domain.errors import ReportError
from domain.filtering import Scope
from domain.requests import ReportOutcome, ReportRequest

from .report_service import ReportService

log = logging.getLogger(__name__)


class ParallelReportRunner:
    """
    Constrói vários relatórios independentes em paralelo.

    Cada relatório é uma computação pura e síncrona, então os workers não
    compartilham nada além da fila de entrada e do slot de resultado.
    A ordem do resultado é a ordem dos pedidos.
    """

    def __init__(self, service: ReportService, workers: int = 4):
        if workers < 1:
            raise ValueError(f"workers deve ser >= 1 (recebido {workers})")
        self.service = service
        self.workers = workers

        self._tot_lock = threading.Lock()
        self.total_built = 0
        self.total_failed = 0

    def _build(self, req: ReportRequest):
        if req.scope is Scope.NETWORK:
            return self.service.build_network_report(req.code, req.start_date, req.end_date)
        if req.scope is Scope.GATEWAY:
            return self.service.build_gateway_report(req.code, req.start_date, req.end_date)
        return self.service.build_sensor_report(req.code, req.start_date, req.end_date)

    def _worker(
        self,
        q: "Queue[Optional[Tuple[int, ReportRequest]]]",
        results: List[Optional[ReportOutcome]],
    ) -> None:
        while True:
            item = q.get()
            try:
                if item is None:
                    return
                idx, req = item
                try:
                    results[idx] = ReportOutcome(req, report=self._build(req))
                    with self._tot_lock:
                        self.total_built += 1
                except ReportError as e:
                    # erro do pedido (data inválida etc.) não derruba os demais
                    log.warning("relatório %s rejeitado: %s", req.label(), e)
                    results[idx] = ReportOutcome(req, error=e)
                    with self._tot_lock:
                        self.total_failed += 1
                except Exception as e:
                    # falha inesperada (ex.: fonte de dados): fica registrada no outcome
                    log.exception("falha ao montar relatório %s", req.label())
                    results[idx] = ReportOutcome(req, error=e)
                    with self._tot_lock:
                        self.total_failed += 1
            finally:
                q.task_done()

    def run(self, requests: Sequence[ReportRequest]) -> List[ReportOutcome]:
        if not requests:
            return []

        q: Queue[Optional[Tuple[int, ReportRequest]]] = Queue()
        results: List[Optional[ReportOutcome]] = [None] * len(requests)

        n = min(self.workers, len(requests))
        threads = [
            threading.Thread(target=self._worker, args=(q, results), daemon=True)
            for _ in range(n)
        ]
        for t in threads:
            t.start()

        for i, req in enumerate(requests):
            q.put((i, req))
        for _ in threads:
            q.put(None)

        q.join()
        for t in threads:
            t.join()

        return [r for r in results if r is not None]
