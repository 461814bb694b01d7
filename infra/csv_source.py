from __future__ import annotations

import csv
import logging
from pathlib import Path
from typing import List

from domain.dates import parse_date
from domain.errors import InvalidInputError
from domain.models import Measurement

log = logging.getLogger(__name__)

CSV_HEADER = ["date", "networkCode", "gatewayCode", "sensorCode", "value"]


def load_measurements_csv(path: str | Path) -> List[Measurement]:
    """
    Formato de importação:
        date,networkCode,gatewayCode,sensorCode,value
        2024-05-01 10:00:00,NET_01,GW_0001,S_000001,21.5

    - primeira linha é cabeçalho (ignorada)
    - linhas em branco são ignoradas
    - linha com menos de 5 colunas ou valor/data inválidos => InvalidInputError
    """
    p = Path(path)
    out: List[Measurement] = []

    with p.open("r", newline="", encoding="utf-8") as f:
        reader = csv.reader(f)
        next(reader, None)

        for lineno, row in enumerate(reader, start=2):
            if not row or all(not c.strip() for c in row):
                continue
            if len(row) < 5:
                raise InvalidInputError(f"{p}:{lineno}: esperado 5 colunas, recebido {len(row)}")

            date_s, net, gw, sensor, value_s = (c.strip() for c in row[:5])
            try:
                value = float(value_s)
            except ValueError as e:
                raise InvalidInputError(f"{p}:{lineno}: valor não numérico {value_s!r}") from e

            try:
                ts = parse_date(date_s)
            except InvalidInputError as e:
                raise InvalidInputError(f"{p}:{lineno}: {e}") from e

            out.append(Measurement(
                network_code=net,
                gateway_code=gw,
                sensor_code=sensor,
                value=value,
                timestamp=ts,
            ))

    log.info("carregadas %d medidas de %s", len(out), p)
    return out
