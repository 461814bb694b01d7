from __future__ import annotations

from collections import defaultdict
from datetime import datetime
from typing import Dict, Iterable, List, Mapping, Optional

from domain.filtering import Scope
from domain.models import GatewayParams, Measurement
from domain.ports import GatewayParamsSource, MeasurementSource, ThresholdSource
from domain.thresholds import Threshold


class InMemoryStore(MeasurementSource, ThresholdSource, GatewayParamsSource):
    """
    Fonte em memória sobre medidas já carregadas.
    Indexa por escopo/código; a janela de tempo é aplicada pelo núcleo.
    """

    def __init__(
        self,
        measurements: Iterable[Measurement],
        *,
        thresholds: Optional[Mapping[str, Threshold]] = None,
        gateway_params: Optional[Mapping[str, GatewayParams]] = None,
    ):
        self._all: List[Measurement] = list(measurements)
        self._thresholds = dict(thresholds or {})
        self._params = dict(gateway_params or {})

        self._index: Dict[Scope, Dict[str, List[Measurement]]] = {s: defaultdict(list) for s in Scope}
        for m in self._all:
            for s in Scope:
                self._index[s][s.code_of(m)].append(m)

    def __len__(self) -> int:
        return len(self._all)

    @property
    def measurements(self) -> List[Measurement]:
        return list(self._all)

    def fetch_measurements(
        self,
        scope: Scope,
        code: str,
        start: Optional[datetime],
        end: Optional[datetime],
    ) -> List[Measurement]:
        return list(self._index[scope].get(code, ()))

    def threshold_for(self, sensor_code: str) -> Optional[Threshold]:
        return self._thresholds.get(sensor_code)

    def params_for(self, gateway_code: str) -> Optional[GatewayParams]:
        return self._params.get(gateway_code)
