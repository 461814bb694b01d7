"""Tests for domain.thresholds."""

import pytest

from domain.thresholds import EPSILON, ComparisonType, Threshold, evaluate_threshold


def _t(kind, value):
    return Threshold(value=value, comparison=kind)


def test_epsilon_constant():
    assert EPSILON == 1e-9


def test_greater_than_boundary():
    t = _t(ComparisonType.GREATER_THAN, 35.0)
    assert evaluate_threshold(35.0, t) is False
    assert evaluate_threshold(35.0000001, t) is True


@pytest.mark.parametrize(
    "kind, value, expected",
    [
        (ComparisonType.LESS_THAN, 9.9, True),
        (ComparisonType.LESS_THAN, 10.0, False),
        (ComparisonType.LESS_OR_EQUAL, 10.0, True),
        (ComparisonType.LESS_OR_EQUAL, 10.1, False),
        (ComparisonType.GREATER_OR_EQUAL, 10.0, True),
        (ComparisonType.GREATER_OR_EQUAL, 9.9, False),
    ],
)
def test_ordering_comparisons(kind, value, expected):
    assert evaluate_threshold(value, _t(kind, 10.0)) is expected


def test_equal_uses_epsilon():
    t = _t(ComparisonType.EQUAL, 100.0)
    assert evaluate_threshold(100.0 + 1e-12, t) is True
    assert evaluate_threshold(100.1, t) is False


def test_not_equal_is_complement_of_equal():
    t = _t(ComparisonType.NOT_EQUAL, 100.0)
    assert evaluate_threshold(100.0 + 1e-12, t) is False
    assert evaluate_threshold(100.1, t) is True


def test_epsilon_is_overridable():
    t = _t(ComparisonType.EQUAL, 1.0)
    assert evaluate_threshold(1.05, t) is False
    assert evaluate_threshold(1.05, t, epsilon=0.1) is True


def test_threshold_violated_delegates():
    assert _t(ComparisonType.GREATER_THAN, 1.0).violated(2.0)


def test_every_kind_is_handled():
    for kind in ComparisonType:
        evaluate_threshold(0.0, _t(kind, 0.0))


@pytest.mark.parametrize(
    "text, kind",
    [
        (">", ComparisonType.GREATER_THAN),
        ("<=", ComparisonType.LESS_OR_EQUAL),
        ("!=", ComparisonType.NOT_EQUAL),
        ("==", ComparisonType.EQUAL),
        ("greater_or_equal", ComparisonType.GREATER_OR_EQUAL),
        (" LESS_THAN ", ComparisonType.LESS_THAN),
    ],
)
def test_parse_names_and_symbols(text, kind):
    assert ComparisonType.parse(text) is kind


def test_parse_unknown_raises():
    with pytest.raises(ValueError):
        ComparisonType.parse("~=")


def test_label():
    assert _t(ComparisonType.GREATER_THAN, 35.0).label() == "> 35.0"
