from __future__ import annotations

import math
from collections import defaultdict
from typing import Dict, List, Optional, Sequence, Set

from .models import GatewayParams, Measurement, StatisticsResult

# |x - média| >= OUTLIER_K * desvio => outlier
OUTLIER_K = 2.0


def mean_of(values: Sequence[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def sample_variance(values: Sequence[float], mean: float) -> float:
    """Variância amostral (divisor n-1). Indefinida abaixo de 2 amostras => 0."""
    n = len(values)
    if n < 2:
        return 0.0
    return sum((x - mean) ** 2 for x in values) / (n - 1)


def compute_statistics(measurements: Sequence[Measurement]) -> StatisticsResult:
    n = len(measurements)
    if n == 0:
        return StatisticsResult()

    values = [m.value for m in measurements]
    mean = mean_of(values)
    variance = sample_variance(values, mean)
    std_dev = math.sqrt(variance)

    outliers: List[Measurement] = []
    non_outliers: List[Measurement] = list(measurements)

    # n < 2 ou todos os valores iguais (desvio 0): sem outliers
    if n >= 2 and std_dev > 0.0:
        limit = OUTLIER_K * std_dev
        outliers = [m for m in measurements if abs(m.value - mean) >= limit]
        non_outliers = [m for m in measurements if abs(m.value - mean) < limit]

    lo = min((m.value for m in non_outliers), default=0.0)
    hi = max((m.value for m in non_outliers), default=0.0)

    return StatisticsResult(
        count=n,
        mean=mean,
        variance=variance,
        std_dev=std_dev,
        min=lo,
        max=hi,
        outliers=outliers,
        non_outliers=non_outliers,
    )


def outlier_sensors(
    measurements: Sequence[Measurement],
    params: Optional[GatewayParams],
) -> Set[str]:
    """
    Sensores cuja média se afasta da média esperada do gateway em
    2 desvios esperados ou mais. Sem parâmetros => nenhum sensor marcado.
    """
    if params is None or params.expected_mean is None or params.expected_std_dev is None:
        return set()

    by_sensor: Dict[str, List[float]] = defaultdict(list)
    for m in measurements:
        by_sensor[m.sensor_code].append(m.value)

    limit = OUTLIER_K * params.expected_std_dev
    return {
        code for code, values in by_sensor.items()
        if abs(mean_of(values) - params.expected_mean) >= limit
    }
