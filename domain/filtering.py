from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Iterable, List, Optional

from .models import Measurement


class Scope(str, Enum):
    NETWORK = "network"
    GATEWAY = "gateway"
    SENSOR = "sensor"

    def code_of(self, m: Measurement) -> str:
        if self is Scope.NETWORK:
            return m.network_code
        if self is Scope.GATEWAY:
            return m.gateway_code
        return m.sensor_code


def in_window(ts: datetime, start: Optional[datetime], end: Optional[datetime]) -> bool:
    # intervalo fechado nas duas pontas; None = sem limite
    if start is not None and ts < start:
        return False
    if end is not None and ts > end:
        return False
    return True


def filter_measurements(
    measurements: Iterable[Measurement],
    entity_code: str,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    *,
    scope: Scope = Scope.SENSOR,
) -> List[Measurement]:
    return [
        m for m in measurements
        if scope.code_of(m) == entity_code and in_window(m.timestamp, start, end)
    ]
