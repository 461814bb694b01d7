from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Sequence

from domain.models import Measurement
from domain.ports import ReportSink, ViolationSink
from domain.requests import ReportOutcome, ReportRequest

from .processor import ParallelReportRunner
from .threshold_monitor import ThresholdMonitor

log = logging.getLogger(__name__)


class ReportPipeline:
    """
    Pedidos de relatório -> runner paralelo -> sinks.

    - Um pedido rejeitado não impede a entrega dos outros
    - Violações (opcional): medidas -> ThresholdMonitor -> ViolationSink
    """

    def __init__(
        self,
        runner: ParallelReportRunner,
        sinks: Sequence[ReportSink],
        *,
        monitor: Optional[ThresholdMonitor] = None,
        violation_sink: Optional[ViolationSink] = None,
    ):
        self.runner = runner
        self.sinks = list(sinks)
        self.monitor = monitor
        self.violation_sink = violation_sink

    def run(self, requests: Sequence[ReportRequest]) -> List[ReportOutcome]:
        outcomes = self.runner.run(requests)
        for o in outcomes:
            if not o.ok:
                continue
            for sink in self.sinks:
                sink.handle(o.report)

        failed = sum(1 for o in outcomes if not o.ok)
        log.info("relatórios: %d pedidos, %d entregues, %d rejeitados",
                 len(requests), len(outcomes) - failed, failed)
        return outcomes

    def scan_violations(self, measurements: Iterable[Measurement]) -> int:
        if self.monitor is None or self.violation_sink is None:
            return 0

        n = 0
        for ev in self.monitor.scan(measurements):
            self.violation_sink.publish(ev)
            n += 1
        log.info("violações publicadas: %d", n)
        return n
