"""Prometheus query layer — expression composers, HTTP client, error hierarchy."""

from src.prometheus import expressions
from src.prometheus.client import PrometheusClient
from src.prometheus.exceptions import (
    BackendMalformed,
    BackendQueryError,
    BackendUnreachable,
    PrometheusError,
)

__all__ = [
    "BackendMalformed",
    "BackendQueryError",
    "BackendUnreachable",
    "PrometheusClient",
    "PrometheusError",
    "expressions",
]
