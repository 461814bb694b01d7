from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Iterable, List

from domain.models import Measurement
from domain.ports import ThresholdSource
from domain.thresholds import EPSILON
from domain.violations import ViolationEvent


@dataclass
class ThresholdMonitorConfig:
    cooldown_sec: float = 0.0
    epsilon: float = EPSILON


class ThresholdMonitor:
    """
    Avalia cada medida contra o threshold do seu sensor.
    Não notifica ninguém: apenas gera ViolationEvent.
    Sensor sem threshold => nenhuma verificação.
    """

    def __init__(
        self,
        thresholds: ThresholdSource,
        cfg: ThresholdMonitorConfig | None = None,
    ):
        self._thresholds = thresholds
        self._cfg = cfg or ThresholdMonitorConfig()
        # cooldown medido no relógio das medidas (timestamp), não no de parede
        self._last_emit: Dict[str, datetime] = {}

    def check(self, m: Measurement) -> List[ViolationEvent]:
        threshold = self._thresholds.threshold_for(m.sensor_code)
        if threshold is None:
            return []

        if not threshold.violated(m.value, self._cfg.epsilon):
            return []

        if self._cfg.cooldown_sec > 0:
            last = self._last_emit.get(m.sensor_code)
            if last is not None and (m.timestamp - last).total_seconds() < self._cfg.cooldown_sec:
                return []
            self._last_emit[m.sensor_code] = m.timestamp

        return [
            ViolationEvent(
                timestamp=m.timestamp,
                network_code=m.network_code,
                gateway_code=m.gateway_code,
                sensor_code=m.sensor_code,
                value=float(m.value),
                rule=threshold.label(),
            )
        ]

    def scan(self, measurements: Iterable[Measurement]) -> List[ViolationEvent]:
        out: List[ViolationEvent] = []
        for m in sorted(measurements, key=lambda x: x.timestamp):
            out.extend(self.check(m))
        return out
