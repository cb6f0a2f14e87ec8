"""Tests for threshold classification and loose numeric coercion."""

from __future__ import annotations

import pytest

from src.checks.classifier import CLASSIFIERS, check, classify, equals, to_float, to_int
from src.core.types import Status


class TestCheck:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (0, Status.OK),
            (79.99, Status.OK),
            (80, Status.WARNING),
            (85, Status.WARNING),
            (89.99, Status.WARNING),
            (90, Status.CRITICAL),
            (250, Status.CRITICAL),
        ],
    )
    def test_thresholds(self, value: float, expected: Status) -> None:
        assert check(value, 80, 90) == expected

    def test_crit_checked_before_warn(self) -> None:
        # Equal thresholds: at the boundary crit wins.
        assert check(5, 5, 5) == Status.CRITICAL

    def test_inverted_thresholds(self) -> None:
        # crit below warn: anything not below warn is already critical.
        assert check(50, 60, 40) == Status.OK
        assert check(70, 60, 40) == Status.CRITICAL

    def test_string_inputs_are_coerced(self) -> None:
        assert check("95", "80", "90") == Status.CRITICAL
        assert check("85.5", 80, 90) == Status.WARNING

    def test_missing_thresholds_default_to_zero(self) -> None:
        assert check(0, None, None) == Status.CRITICAL
        assert check(-1, None, None) == Status.OK

    def test_never_returns_unknown(self) -> None:
        for value in (-1e9, 0, 1e9, "garbage"):
            assert check(value, 10, 20) != Status.UNKNOWN


class TestEquals:
    def test_equal_values(self) -> None:
        assert equals(1, 1) == Status.OK

    def test_string_and_float_compare_numerically(self) -> None:
        assert equals("1", 1.0) == Status.OK
        assert equals("1.0", "1") == Status.OK

    def test_different_values_are_critical(self) -> None:
        assert equals(0, 1) == Status.CRITICAL
        assert equals("2", 1.0) == Status.CRITICAL

    def test_no_warning_tier(self) -> None:
        assert equals(0.99, 1) == Status.CRITICAL


class TestClassify:
    def test_dispatches_check(self) -> None:
        assert classify("check", "85", 80, 90) == Status.WARNING

    def test_dispatches_equals(self) -> None:
        assert classify("equals", "0", 1) == Status.CRITICAL

    def test_unknown_kind(self) -> None:
        with pytest.raises(ValueError, match="Unknown classifier"):
            classify("between", 1, 0, 2)

    def test_registry_is_closed(self) -> None:
        assert set(CLASSIFIERS) == {"check", "equals"}


class TestCoercion:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("95", 95.0),
            ("95.7", 95.7),
            ("95.7abc", 95.7),
            ("  12", 12.0),
            ("-3.5", -3.5),
            (".5", 0.5),
            ("1e3", 1000.0),
            ("abc", 0.0),
            ("NaN", 0.0),
            ("+Inf", 0.0),
            ("", 0.0),
            (None, 0.0),
            (7, 7.0),
            (2.5, 2.5),
        ],
    )
    def test_to_float(self, raw: object, expected: float) -> None:
        assert to_float(raw) == expected

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("95", 95),
            ("95.7", 95),
            ("-4.9", -4),
            ("abc", 0),
            (None, 0),
            (95.7, 95),
            (float("nan"), 0),
            (3, 3),
        ],
    )
    def test_to_int(self, raw: object, expected: int) -> None:
        assert to_int(raw) == expected
