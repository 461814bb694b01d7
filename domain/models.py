from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Dict, FrozenSet, List, Optional

from .ranges import Range


@dataclass(frozen=True)
class Measurement:
    network_code: str
    gateway_code: str
    sensor_code: str
    value: float
    timestamp: datetime  # precisão de segundos


@dataclass(frozen=True)
class GatewayParams:
    # parâmetros de configuração do gateway; ausente = recurso desligado
    expected_mean: Optional[float] = None
    expected_std_dev: Optional[float] = None
    battery_charge: Optional[float] = None


@dataclass(frozen=True)
class StatisticsResult:
    count: int = 0
    mean: float = 0.0
    variance: float = 0.0
    std_dev: float = 0.0
    min: float = 0.0
    max: float = 0.0
    outliers: List[Measurement] = field(default_factory=list)
    non_outliers: List[Measurement] = field(default_factory=list)


@dataclass(frozen=True)
class ActivitySummary:
    counts: Dict[str, int] = field(default_factory=dict)
    most_active: FrozenSet[str] = frozenset()
    least_active: FrozenSet[str] = frozenset()
    load_ratio: Dict[str, float] = field(default_factory=dict)


@dataclass(frozen=True)
class NetworkReport:
    code: str
    start_date: Optional[str]
    end_date: Optional[str]
    number_of_measurements: int
    most_active_gateways: FrozenSet[str]
    least_active_gateways: FrozenSet[str]
    gateways_load_ratio: Dict[str, float]
    histogram: Dict[Range[datetime], int]


@dataclass(frozen=True)
class GatewayReport:
    code: str
    start_date: Optional[str]
    end_date: Optional[str]
    number_of_measurements: int
    most_active_sensors: FrozenSet[str]
    least_active_sensors: FrozenSet[str]
    sensors_load_ratio: Dict[str, float]
    outlier_sensors: FrozenSet[str]
    battery_charge: Optional[float]
    histogram: Dict[Range[timedelta], int]


@dataclass(frozen=True)
class SensorReport:
    code: str
    start_date: Optional[str]
    end_date: Optional[str]
    number_of_measurements: int
    mean: float
    variance: float
    std_dev: float
    minimum_measured_value: float
    maximum_measured_value: float
    outliers: List[Measurement]
    histogram: Dict[Range[float], int]
