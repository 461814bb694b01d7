"""Tests for config."""

import textwrap

import pytest

from config import load_config, parse_config
from domain.errors import ConfigError
from domain.filtering import Scope
from domain.models import GatewayParams
from domain.thresholds import ComparisonType


def _write(tmp_path, text):
    p = tmp_path / "config.yaml"
    p.write_text(textwrap.dedent(text), encoding="utf-8")
    return str(p)


def test_full_config(tmp_path):
    path = _write(tmp_path, """
        measurements_csv: data/measurements.csv
        workers: 2
        log_level: debug

        reports:
          - type: network
            code: NET_01
            start: "2024-05-01 00:00:00"
            end: "2024-05-03 00:00:00"
          - type: SENSOR
            code: S_000001

        thresholds:
          S_000001:
            op: ">"
            value: 35
          S_000002:
            op: NOT_EQUAL
            value: 100.0

        gateways:
          GW_0001:
            expected_mean: 21.0
            expected_std_dev: 1.5
            battery_charge: 80

        http_sink:
          url: http://localhost:8080/reports
          workers: 1
          max_retries: 5

        threshold_monitor:
          enabled: true
          csv_path: out/violations.csv
          cooldown_sec: 60
    """)
    cfg = load_config(path)

    assert cfg.measurements_csv == "data/measurements.csv"
    assert cfg.workers == 2
    assert cfg.log_level == "DEBUG"

    assert [(r.scope, r.code) for r in cfg.reports] == [
        (Scope.NETWORK, "NET_01"),
        (Scope.SENSOR, "S_000001"),
    ]
    assert cfg.reports[0].start_date == "2024-05-01 00:00:00"
    assert cfg.reports[1].end_date is None

    assert cfg.thresholds["S_000001"].comparison is ComparisonType.GREATER_THAN
    assert cfg.thresholds["S_000001"].value == 35.0
    assert cfg.thresholds["S_000002"].comparison is ComparisonType.NOT_EQUAL

    assert cfg.gateways["GW_0001"] == GatewayParams(21.0, 1.5, 80.0)

    assert cfg.http_sink is not None
    assert cfg.http_sink.url == "http://localhost:8080/reports"
    assert cfg.http_sink.workers == 1
    assert cfg.http_sink.max_retries == 5
    assert cfg.http_sink.timeout_sec == 5.0

    assert cfg.threshold_monitor.enabled is True
    assert cfg.threshold_monitor.csv_path == "out/violations.csv"
    assert cfg.threshold_monitor.cooldown_sec == 60.0
    assert cfg.threshold_monitor.flush_every_n == 200


def test_minimal_config_defaults():
    cfg = parse_config({"measurements_csv": "m.csv"})
    assert cfg.workers == 4
    assert cfg.log_level == "INFO"
    assert cfg.reports == []
    assert cfg.thresholds == {}
    assert cfg.gateways == {}
    assert cfg.http_sink is None
    assert cfg.threshold_monitor is None


def test_disabled_http_sink_is_ignored():
    cfg = parse_config({"measurements_csv": "m.csv", "http_sink": {"enabled": False, "url": "x"}})
    assert cfg.http_sink is None


def test_partial_gateway_params():
    cfg = parse_config({"measurements_csv": "m.csv", "gateways": {"GW_0002": {"battery_charge": 50}}})
    assert cfg.gateways["GW_0002"] == GatewayParams(battery_charge=50.0)


@pytest.mark.parametrize(
    "data",
    [
        {},
        {"measurements_csv": "m.csv", "workers": 0},
        {"measurements_csv": "m.csv", "reports": {"type": "network"}},
        {"measurements_csv": "m.csv", "reports": [{"type": "network"}]},
        {"measurements_csv": "m.csv", "reports": [{"type": "planet", "code": "X"}]},
        {"measurements_csv": "m.csv", "thresholds": {"S_000001": {"op": "~", "value": 1}}},
        {"measurements_csv": "m.csv", "thresholds": {"S_000001": {"op": ">"}}},
        {"measurements_csv": "m.csv", "thresholds": ["S_000001"]},
        {"measurements_csv": "m.csv", "gateways": {"GW_0001": {"expected_mean": "alto"}}},
        {"measurements_csv": "m.csv", "http_sink": {"workers": 2}},
    ],
)
def test_invalid_configs(data):
    with pytest.raises(ConfigError):
        parse_config(data)


def test_top_level_must_be_a_mapping(tmp_path):
    path = _write(tmp_path, """
        - a
        - b
    """)
    with pytest.raises(ConfigError):
        load_config(path)


def test_yaml_datetimes_are_kept_as_text(tmp_path):
    path = _write(tmp_path, """
        measurements_csv: m.csv
        reports:
          - type: gateway
            code: GW_0001
            start: 2024-05-01 00:00:00
    """)
    cfg = load_config(path)
    assert cfg.reports[0].start_date == "2024-05-01 00:00:00"
