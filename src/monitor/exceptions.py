"""Exception hierarchy for event dispatch."""

from __future__ import annotations


class MonitorError(Exception):
    """Base exception for all event dispatch errors."""


class DispatchUnreachable(MonitorError):
    """The event backend socket could not be opened or written to."""
