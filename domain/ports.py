from __future__ import annotations

from datetime import datetime
from typing import Any, List, Optional, Protocol

from .filtering import Scope
from .models import GatewayParams, Measurement
from .thresholds import Threshold
from .violations import ViolationEvent


class MeasurementSource(Protocol):
    def fetch_measurements(
        self,
        scope: Scope,
        code: str,
        start: Optional[datetime],
        end: Optional[datetime],
    ) -> List[Measurement]:
        """Leitura síncrona de uma sequência já materializada."""
        ...


class ThresholdSource(Protocol):
    def threshold_for(self, sensor_code: str) -> Optional[Threshold]: ...


class GatewayParamsSource(Protocol):
    def params_for(self, gateway_code: str) -> Optional[GatewayParams]: ...


class ReportSink(Protocol):
    def handle(self, report: Any) -> None: ...


class ViolationSink(Protocol):
    def publish(self, ev: ViolationEvent) -> None: ...
