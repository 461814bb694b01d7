from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class ViolationEvent:
    """
    Medida que violou o threshold do seu sensor.
    A entrega (e-mail/SMS) fica fora do núcleo.
    """
    timestamp: datetime
    network_code: str
    gateway_code: str
    sensor_code: str
    value: float
    rule: str
