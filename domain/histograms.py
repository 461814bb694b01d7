from __future__ import annotations

from bisect import bisect_right
from datetime import datetime, timedelta
from typing import Any, Dict, Iterable, List, Optional, Sequence

from .models import Measurement
from .ranges import Range

BUCKET_COUNT = 20

# até 48h de janela => buckets por hora; acima => por dia
HOURLY_LIMIT = timedelta(hours=48)


def count_into(buckets: Sequence[Range], values: Iterable[Any]) -> Dict[Range, int]:
    """
    Conta cada valor no (único) bucket que o contém.
    Os buckets precisam ser contíguos e ordenados por start.
    Valores fora de todos os buckets são ignorados.
    """
    hist: Dict[Range, int] = {b: 0 for b in buckets}
    starts = [b.start for b in buckets]
    for v in values:
        i = bisect_right(starts, v) - 1
        if i >= 0 and buckets[i].contains(v):
            hist[buckets[i]] += 1
    return hist


def equal_width_ranges(lo: Any, hi: Any, count: int = BUCKET_COUNT) -> List[Range]:
    """
    Particiona [lo, hi] em `count` buckets de mesma largura.
    Funciona para float e timedelta. O último termina exatamente em hi.

    Buckets de largura zero ([a, a) não contém nada) são descartados; com
    lo == hi sobra apenas o bucket fechado [lo, hi].
    """
    width = (hi - lo) / count
    out: List[Range] = []
    for i in range(count):
        last = i == count - 1
        start = lo + width * i
        end = hi if last else lo + width * (i + 1)
        if not last and end <= start:
            continue
        out.append(Range(start, end, last))
    return out


def _truncate(ts: datetime, hourly: bool) -> datetime:
    if hourly:
        return ts.replace(minute=0, second=0, microsecond=0)
    return ts.replace(hour=0, minute=0, second=0, microsecond=0)


def time_ranges(eff_start: datetime, eff_end: datetime) -> List[Range[datetime]]:
    """
    Caminha de eff_start até eff_end em horas (ou dias) inteiras: o primeiro
    bucket termina na próxima fronteira cheia, o último é cortado em eff_end
    e é fechado.
    """
    if eff_start > eff_end:
        return []

    hourly = (eff_end - eff_start) <= HOURLY_LIMIT
    step = timedelta(hours=1) if hourly else timedelta(days=1)

    out: List[Range[datetime]] = []
    cur = eff_start
    while True:
        boundary = _truncate(cur + step, hourly)
        end = min(boundary, eff_end)
        last = end == eff_end
        out.append(Range(cur, end, last))
        if last:
            return out
        cur = end


def time_histogram(
    measurements: Sequence[Measurement],
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
) -> Dict[Range[datetime], int]:
    stamps = [m.timestamp for m in measurements]

    eff_start = start if start is not None else min(stamps, default=None)
    eff_end = end if end is not None else max(stamps, default=None)
    if eff_start is None or eff_end is None:
        return {}

    return count_into(time_ranges(eff_start, eff_end), stamps)


def value_histogram(values: Sequence[float], lo: float, hi: float) -> Dict[Range[float], int]:
    """lo/hi = min/max dos não-outliers; `values` já sem outliers."""
    if not values:
        return {}
    return count_into(equal_width_ranges(lo, hi), values)


def inter_arrival_times(measurements: Sequence[Measurement]) -> List[timedelta]:
    stamps = sorted(m.timestamp for m in measurements)
    return [b - a for a, b in zip(stamps, stamps[1:])]


def duration_histogram(measurements: Sequence[Measurement]) -> Dict[Range[timedelta], int]:
    deltas = inter_arrival_times(measurements)
    if not deltas:
        return {}
    return count_into(equal_width_ranges(min(deltas), max(deltas)), deltas)
