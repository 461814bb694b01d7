from __future__ import annotations
from dataclasses import fields, is_dataclass
from datetime import datetime, timedelta
from typing import Any, Dict, List

from domain.dates import format_date
from domain.models import GatewayReport, Measurement, NetworkReport, SensorReport
from domain.ranges import Range


def _scalar(v: Any) -> Any:
    if isinstance(v, datetime):
        return format_date(v)
    if isinstance(v, timedelta):
        return v.total_seconds()
    return v


def histogram_rows(hist: Dict[Range, int]) -> List[Dict[str, Any]]:
    # lista ordenada por start (dict JSON não garante ordem para o consumidor)
    return [
        {"start": _scalar(r.start), "end": _scalar(r.end), "last": r.is_last_bucket, "count": c}
        for r, c in sorted(hist.items(), key=lambda kv: kv[0].start)
    ]


def measurement_to_dict(m: Measurement) -> Dict[str, Any]:
    return {
        "networkCode": m.network_code,
        "gatewayCode": m.gateway_code,
        "sensorCode": m.sensor_code,
        "value": m.value,
        "timestamp": format_date(m.timestamp),
    }


def report_kind(report: Any) -> str:
    if isinstance(report, NetworkReport):
        return "network"
    if isinstance(report, GatewayReport):
        return "gateway"
    if isinstance(report, SensorReport):
        return "sensor"
    raise TypeError(f"Relatório desconhecido: {type(report).__name__}")


def report_to_dict(report: Any) -> Dict[str, Any]:
    if not is_dataclass(report):
        raise TypeError(f"Relatório desconhecido: {type(report).__name__}")

    out: Dict[str, Any] = {"type": report_kind(report)}
    for f in fields(report):
        v = getattr(report, f.name)
        if f.name == "histogram":
            out[f.name] = histogram_rows(v)
        elif f.name == "outliers":
            out[f.name] = [measurement_to_dict(m) for m in v]
        elif isinstance(v, frozenset):
            out[f.name] = sorted(v)
        elif isinstance(v, dict):
            out[f.name] = dict(sorted(v.items()))
        else:
            out[f.name] = _scalar(v)
    return out
