from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

import yaml

from domain.errors import ConfigError
from domain.filtering import Scope
from domain.models import GatewayParams
from domain.requests import ReportRequest
from domain.thresholds import ComparisonType, Threshold


@dataclass(frozen=True)
class HttpSinkConfig:
    url: str

    workers: int = 2
    queue_max: int = 1000
    timeout_sec: float = 5.0
    max_retries: int = 3
    drop_on_full: bool = False


@dataclass(frozen=True)
class ThresholdMonitorConfig:
    enabled: bool = False

    csv_path: str = "violations.csv"
    queue_max: int = 20000
    drop_on_full: bool = True
    flush_every_n: int = 200
    flush_every_sec: float = 2.0
    cooldown_sec: float = 0.0


@dataclass(frozen=True)
class AppConfig:
    measurements_csv: str

    workers: int = 4
    log_level: str = "INFO"

    reports: list[ReportRequest] = field(default_factory=list)
    thresholds: dict[str, Threshold] = field(default_factory=dict)
    gateways: dict[str, GatewayParams] = field(default_factory=dict)

    http_sink: HttpSinkConfig | None = None
    threshold_monitor: ThresholdMonitorConfig | None = None


def _req(d: Mapping[str, Any], path: str) -> Any:
    cur: Any = d
    for part in path.split("."):
        if not isinstance(cur, Mapping) or part not in cur:
            raise ConfigError(f"Config inválida: campo obrigatório '{path}' ausente.")
        cur = cur[part]
    return cur


def _opt(d: Mapping[str, Any], path: str, default: Any) -> Any:
    cur: Any = d
    for part in path.split("."):
        if not isinstance(cur, Mapping) or part not in cur:
            return default
        cur = cur[part]
    return cur


def _opt_float(d: Mapping[str, Any], key: str, path: str) -> float | None:
    v = d.get(key)
    if v is None:
        return None
    try:
        return float(v)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Config inválida: '{path}.{key}' não numérico: {v!r}") from e


def _to_reports(x: Any, path: str) -> list[ReportRequest]:
    """
    Espera:
      reports:
        - type: network        # network | gateway | sensor
          code: NET_01
          start: "2024-05-01 00:00:00"   # opcional
          end: "2024-05-03 00:00:00"     # opcional
    """
    if x is None:
        return []
    if not isinstance(x, list):
        raise ConfigError(f"Config inválida: '{path}' deve ser uma lista.")

    out: list[ReportRequest] = []
    for i, r in enumerate(x):
        if not isinstance(r, Mapping):
            raise ConfigError(f"Config inválida: '{path}[{i}]' deve ser um objeto.")

        kind = r.get("type")
        code = r.get("code")
        if kind is None or code is None:
            raise ConfigError(f"Config inválida: '{path}[{i}]' precisa de type e code.")
        try:
            scope = Scope(str(kind).lower())
        except ValueError as e:
            raise ConfigError(f"Config inválida: '{path}[{i}].type' desconhecido: {kind!r}") from e

        # datas seguem como string: validação acontece na fronteira do relatório
        start = r.get("start")
        end = r.get("end")
        out.append(
            ReportRequest(
                scope=scope,
                code=str(code),
                start_date=None if start is None else str(start),
                end_date=None if end is None else str(end),
            )
        )
    return out


def _to_thresholds(x: Any, path: str) -> dict[str, Threshold]:
    """
    Espera:
      thresholds:
        S_000001:
          op: ">"          # ou GREATER_THAN
          value: 35.0
    """
    if x is None:
        return {}
    if not isinstance(x, Mapping):
        raise ConfigError(f"Config inválida: '{path}' deve ser um mapa (dict).")

    out: dict[str, Threshold] = {}
    for sensor, t in x.items():
        if not isinstance(t, Mapping):
            raise ConfigError(f"Config inválida: '{path}.{sensor}' deve ser um objeto.")

        op = t.get("op")
        val = t.get("value")
        if op is None or val is None:
            raise ConfigError(f"Config inválida: '{path}.{sensor}' precisa de op e value.")
        try:
            out[str(sensor)] = Threshold(value=float(val), comparison=ComparisonType.parse(op))
        except ValueError as e:
            raise ConfigError(f"Config inválida: '{path}.{sensor}': {e}") from e
    return out


def _to_gateways(x: Any, path: str) -> dict[str, GatewayParams]:
    if x is None:
        return {}
    if not isinstance(x, Mapping):
        raise ConfigError(f"Config inválida: '{path}' deve ser um mapa (dict).")

    out: dict[str, GatewayParams] = {}
    for gw, p in x.items():
        if not isinstance(p, Mapping):
            raise ConfigError(f"Config inválida: '{path}.{gw}' deve ser um objeto.")
        sub = f"{path}.{gw}"
        out[str(gw)] = GatewayParams(
            expected_mean=_opt_float(p, "expected_mean", sub),
            expected_std_dev=_opt_float(p, "expected_std_dev", sub),
            battery_charge=_opt_float(p, "battery_charge", sub),
        )
    return out


def parse_config(data: Mapping[str, Any]) -> AppConfig:
    measurements_csv = str(_req(data, "measurements_csv"))

    workers = int(_opt(data, "workers", 4))
    if workers < 1:
        raise ConfigError(f"Config inválida: 'workers' deve ser >= 1 (recebido {workers}).")
    log_level = str(_opt(data, "log_level", "INFO")).upper()

    reports = _to_reports(_opt(data, "reports", None), "reports")
    thresholds = _to_thresholds(_opt(data, "thresholds", None), "thresholds")
    gateways = _to_gateways(_opt(data, "gateways", None), "gateways")

    # ---- http_sink (opcional) ----
    hs_raw = _opt(data, "http_sink", None)
    http_sink = None

    if isinstance(hs_raw, Mapping) and bool(_opt(hs_raw, "enabled", True)):
        http_sink = HttpSinkConfig(
            url=str(_req(hs_raw, "url")),
            workers=int(_opt(hs_raw, "workers", 2)),
            queue_max=int(_opt(hs_raw, "queue_max", 1000)),
            timeout_sec=float(_opt(hs_raw, "timeout_sec", 5.0)),
            max_retries=int(_opt(hs_raw, "max_retries", 3)),
            drop_on_full=bool(_opt(hs_raw, "drop_on_full", False)),
        )

    # ---- threshold_monitor (opcional) ----
    tm_raw = _opt(data, "threshold_monitor", None)
    threshold_monitor = None

    if isinstance(tm_raw, Mapping):
        threshold_monitor = ThresholdMonitorConfig(
            enabled=bool(_opt(tm_raw, "enabled", False)),
            csv_path=str(_opt(tm_raw, "csv_path", "violations.csv")),
            queue_max=int(_opt(tm_raw, "queue_max", 20000)),
            drop_on_full=bool(_opt(tm_raw, "drop_on_full", True)),
            flush_every_n=int(_opt(tm_raw, "flush_every_n", 200)),
            flush_every_sec=float(_opt(tm_raw, "flush_every_sec", 2.0)),
            cooldown_sec=float(_opt(tm_raw, "cooldown_sec", 0.0)),
        )

    return AppConfig(
        measurements_csv=measurements_csv,
        workers=workers,
        log_level=log_level,
        reports=reports,
        thresholds=thresholds,
        gateways=gateways,
        http_sink=http_sink,
        threshold_monitor=threshold_monitor,
    )


def load_config(path: str = "config.yaml") -> AppConfig:
    p = Path(path)
    data = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    if not isinstance(data, Mapping):
        raise ConfigError(f"Config inválida: '{p}' deve conter um mapa no topo.")
    return parse_config(data)
