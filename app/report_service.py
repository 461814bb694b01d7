from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Optional, Tuple

from domain.aggregation import aggregate
from domain.dates import parse_date
from domain.errors import InvalidInputError
from domain.filtering import Scope, filter_measurements
from domain.histograms import duration_histogram, time_histogram, value_histogram
from domain.models import GatewayReport, Measurement, NetworkReport, SensorReport
from domain.ports import GatewayParamsSource, MeasurementSource
from domain.statistics import compute_statistics, outlier_sensors
from domain.thresholds import EPSILON, Threshold, evaluate_threshold

log = logging.getLogger(__name__)


class _NoParams:
    def params_for(self, gateway_code: str) -> None:
        return None


class ReportService:
    """
    Monta os três relatórios (rede / gateway / sensor).

    - Datas chegam como string "yyyy-MM-dd HH:mm:ss" (ou None = sem limite)
    - A fonte pode devolver mais medidas que o necessário; o escopo e a
      janela são sempre reaplicados aqui
    - Sem estado mutável: pode ser chamado de várias threads ao mesmo tempo
    """

    def __init__(
        self,
        source: MeasurementSource,
        gateway_params: Optional[GatewayParamsSource] = None,
        *,
        epsilon: float = EPSILON,
    ):
        self.source = source
        self.gateway_params = gateway_params if gateway_params is not None else _NoParams()
        self.epsilon = epsilon

    def _load(
        self,
        scope: Scope,
        code: str,
        start_date: Optional[str],
        end_date: Optional[str],
    ) -> Tuple[List[Measurement], Optional[datetime], Optional[datetime]]:
        if code is None or not str(code).strip():
            raise InvalidInputError(f"Código de {scope.value} obrigatório")

        start = parse_date(start_date)
        end = parse_date(end_date)

        raw = self.source.fetch_measurements(scope, code, start, end)
        measurements = filter_measurements(raw, code, start, end, scope=scope)
        log.debug("%s %s: %d/%d medidas na janela [%s, %s]",
                  scope.value, code, len(measurements), len(raw), start_date, end_date)
        return measurements, start, end

    def build_network_report(
        self,
        code: str,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
    ) -> NetworkReport:
        measurements, start, end = self._load(Scope.NETWORK, code, start_date, end_date)
        activity = aggregate(measurements, lambda m: m.gateway_code)

        return NetworkReport(
            code=code,
            start_date=start_date,
            end_date=end_date,
            number_of_measurements=len(measurements),
            most_active_gateways=activity.most_active,
            least_active_gateways=activity.least_active,
            gateways_load_ratio=activity.load_ratio,
            histogram=time_histogram(measurements, start, end),
        )

    def build_gateway_report(
        self,
        code: str,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
    ) -> GatewayReport:
        measurements, _, _ = self._load(Scope.GATEWAY, code, start_date, end_date)
        activity = aggregate(measurements, lambda m: m.sensor_code)
        params = self.gateway_params.params_for(code)

        return GatewayReport(
            code=code,
            start_date=start_date,
            end_date=end_date,
            number_of_measurements=len(measurements),
            most_active_sensors=activity.most_active,
            least_active_sensors=activity.least_active,
            sensors_load_ratio=activity.load_ratio,
            outlier_sensors=frozenset(outlier_sensors(measurements, params)),
            battery_charge=params.battery_charge if params is not None else None,
            histogram=duration_histogram(measurements),
        )

    def build_sensor_report(
        self,
        code: str,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
    ) -> SensorReport:
        measurements, _, _ = self._load(Scope.SENSOR, code, start_date, end_date)
        stats = compute_statistics(measurements)
        if stats.outliers:
            log.info("sensor %s: %d outlier(s) fora do histograma", code, len(stats.outliers))

        return SensorReport(
            code=code,
            start_date=start_date,
            end_date=end_date,
            number_of_measurements=stats.count,
            mean=stats.mean,
            variance=stats.variance,
            std_dev=stats.std_dev,
            minimum_measured_value=stats.min,
            maximum_measured_value=stats.max,
            outliers=list(stats.outliers),
            histogram=value_histogram(
                [m.value for m in stats.non_outliers], stats.min, stats.max
            ),
        )

    def evaluate_threshold(self, value: float, threshold: Threshold) -> bool:
        return evaluate_threshold(value, threshold, self.epsilon)
