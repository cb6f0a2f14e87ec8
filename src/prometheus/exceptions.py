"""Exception hierarchy for the Prometheus query client."""

from __future__ import annotations


class PrometheusError(Exception):
    """Base exception for all metrics backend errors."""


class BackendUnreachable(PrometheusError):
    """Connection failure, timeout, or an HTTP error without a query error body."""


class BackendMalformed(PrometheusError):
    """The response could not be decoded into metric rows."""


class BackendQueryError(PrometheusError):
    """The backend rejected or failed to evaluate the expression."""

    def __init__(self, message: str, error_type: str = "") -> None:
        super().__init__(message)
        self.error_type = error_type
