"""Tests for domain.filtering."""

from datetime import timedelta

from domain.filtering import Scope, filter_measurements, in_window

from .helpers import T0, mk


def _data():
    return [
        mk(1.0, T0, net="N1", gw="G1", sensor="S1"),
        mk(2.0, T0 + timedelta(hours=1), net="N1", gw="G2", sensor="S2"),
        mk(3.0, T0 + timedelta(hours=2), net="N2", gw="G3", sensor="S3"),
    ]


def test_scope_selects_owning_code():
    data = _data()
    assert len(filter_measurements(data, "N1", scope=Scope.NETWORK)) == 2
    assert len(filter_measurements(data, "G2", scope=Scope.GATEWAY)) == 1
    assert len(filter_measurements(data, "S3", scope=Scope.SENSOR)) == 1


def test_no_match_is_empty_not_error():
    assert filter_measurements(_data(), "NOPE", scope=Scope.NETWORK) == []


def test_window_is_inclusive_on_both_ends():
    data = _data()
    out = filter_measurements(data, "N1", T0, T0 + timedelta(hours=1), scope=Scope.NETWORK)
    assert [m.value for m in out] == [1.0, 2.0]


def test_open_bounds():
    data = _data()
    after = filter_measurements(data, "N1", T0 + timedelta(minutes=1), None, scope=Scope.NETWORK)
    before = filter_measurements(data, "N1", None, T0 + timedelta(minutes=59), scope=Scope.NETWORK)
    assert [m.value for m in after] == [2.0]
    assert [m.value for m in before] == [1.0]


def test_input_not_mutated():
    data = _data()
    snapshot = list(data)
    filter_measurements(data, "N1", scope=Scope.NETWORK)
    assert data == snapshot


def test_in_window():
    assert in_window(T0, None, None)
    assert in_window(T0, T0, T0)
    assert not in_window(T0, T0 + timedelta(seconds=1), None)
    assert not in_window(T0, None, T0 - timedelta(seconds=1))
