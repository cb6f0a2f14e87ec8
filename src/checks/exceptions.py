"""Exception hierarchy for check evaluation."""

from __future__ import annotations


class CheckError(Exception):
    """Base exception for all check errors."""


class CheckEvaluationError(CheckError):
    """A check could not fold its query results into raw results."""
