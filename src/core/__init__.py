"""Core module — config, types, logging."""

from src.core.config import (
    CheckConfig,
    CheckEntry,
    ChecksFile,
    ClassifierSpec,
    CustomCheckConfig,
    RunConfig,
    Settings,
    get_settings,
    load_checks,
    load_settings,
    reset_settings,
)
from src.core.exceptions import ConfigInvalid
from src.core.logging import setup_logging
from src.core.types import Event, MetricRow, RawResult, RunResult, Status

__all__ = [
    "CheckConfig",
    "CheckEntry",
    "ChecksFile",
    "ClassifierSpec",
    "ConfigInvalid",
    "CustomCheckConfig",
    "Event",
    "MetricRow",
    "RawResult",
    "RunConfig",
    "RunResult",
    "Settings",
    "Status",
    "get_settings",
    "load_checks",
    "load_settings",
    "reset_settings",
    "setup_logging",
]
