"""Threshold classification of observed values into Sensu statuses."""

from __future__ import annotations

import math
import re
from collections.abc import Callable
from typing import Any

from src.core.types import Status

# Longest leading numeric prefix, e.g. "95.7%" -> 95.7; no match -> 0.0.
_FLOAT_PREFIX = re.compile(r"\s*[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")
_INT_PREFIX = re.compile(r"\s*[+-]?\d+")


def to_float(value: Any) -> float:
    """Loosely coerce *value* to a float; unparsable input becomes 0.0."""
    if isinstance(value, (int, float)):
        return float(value)
    if value is None:
        return 0.0
    match = _FLOAT_PREFIX.match(str(value))
    return float(match.group()) if match else 0.0


def to_int(value: Any) -> int:
    """Loosely coerce *value* to an int by truncation; unparsable input becomes 0."""
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else 0
    if isinstance(value, int):
        return value
    if value is None:
        return 0
    match = _INT_PREFIX.match(str(value))
    return int(match.group()) if match else 0


def check(value: Any, warn: Any, crit: Any) -> Status:
    """Classify *value* against warn/crit thresholds.

    Below warn is OK; at or above crit is CRITICAL, tested before the warning
    tier so crit wins when both thresholds are met; anything else is WARNING.
    """
    result = to_float(value)
    if result < to_float(warn):
        return Status.OK
    if result >= to_float(crit):
        return Status.CRITICAL
    return Status.WARNING


def equals(value: Any, expected: Any) -> Status:
    """OK when *value* numerically equals *expected*, otherwise CRITICAL."""
    if to_float(value) == to_float(expected):
        return Status.OK
    return Status.CRITICAL


Classifier = Callable[..., Status]

CLASSIFIERS: dict[str, Classifier] = {
    "check": check,
    "equals": equals,
}


def classify(kind: str, value: Any, *thresholds: Any) -> Status:
    """Dispatch to the classifier named *kind* (``check`` or ``equals``)."""
    try:
        classifier = CLASSIFIERS[kind]
    except KeyError:
        raise ValueError(f"Unknown classifier: {kind}") from None
    return classifier(value, *thresholds)
