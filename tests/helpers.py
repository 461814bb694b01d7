from __future__ import annotations

from datetime import datetime, timedelta

from domain.models import Measurement

T0 = datetime(2024, 5, 1, 10, 0, 0)


def mk(
    value: float = 0.0,
    ts: datetime = T0,
    *,
    net: str = "NET_01",
    gw: str = "GW_0001",
    sensor: str = "S_000001",
) -> Measurement:
    return Measurement(network_code=net, gateway_code=gw, sensor_code=sensor, value=value, timestamp=ts)


def series(values, *, start: datetime = T0, step: timedelta = timedelta(minutes=10), **kw):
    return [mk(v, start + step * i, **kw) for i, v in enumerate(values)]
