#!/usr/bin/env python3
"""Run every configured Prometheus check once and report to Sensu.

Usage::

    # Checks from ./config.yml, settings from config/settings.yaml + environment
    python scripts/check_prometheus.py

    # Explicit checks file, print events instead of sending them
    python scripts/check_prometheus.py checks.yml --debug

Prints the run summary on stdout and exits 0 when every dispatched event was
OK, 1 otherwise, and 3 when the configuration is invalid or the Sensu socket
is unreachable.
"""

from __future__ import annotations

import argparse
import sys

import structlog

from src.core.config import DEFAULT_CHECKS_PATH, load_checks, load_settings
from src.core.exceptions import ConfigInvalid
from src.core.logging import setup_logging
from src.core.types import Status
from src.monitor.exceptions import DispatchUnreachable
from src.monitor.factory import create_runner
from src.prometheus.client import PrometheusClient

logger = structlog.get_logger(__name__)


def run(args: argparse.Namespace) -> int:
    """Load configuration, run the checks and print the summary."""
    try:
        settings = load_settings(args.settings)
    except ConfigInvalid as exc:
        print(f"UNKNOWN: {exc}")
        return int(Status.UNKNOWN)

    if args.debug:
        settings = settings.model_copy(update={"debug": True})
    setup_logging(level=args.log_level)

    try:
        checks = load_checks(args.config)
    except ConfigInvalid as exc:
        logger.error("config_invalid", error=str(exc))
        print(f"UNKNOWN: {exc}")
        return int(Status.UNKNOWN)

    logger.info(
        "run_starting",
        checks=len(checks.checks),
        custom=len(checks.custom),
        prometheus=settings.prometheus.base_url,
        debug=settings.debug,
    )

    with PrometheusClient(settings.prometheus) as client:
        runner = create_runner(settings, checks, client)
        try:
            result = runner.run()
        except DispatchUnreachable as exc:
            logger.error("dispatch_unreachable", error=str(exc))
            print(f"UNKNOWN: {exc}")
            return int(Status.UNKNOWN)
        finally:
            runner.close()

    print(result.output)
    return result.status


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Evaluate Prometheus health checks and dispatch Sensu events.",
    )
    parser.add_argument(
        "config",
        nargs="?",
        default=str(DEFAULT_CHECKS_PATH),
        help="Path to the checks YAML (default: config.yml)",
    )
    parser.add_argument(
        "--settings",
        default=None,
        help="Path to settings YAML (default: config/settings.yaml)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Log level override: DEBUG, INFO, WARNING, ERROR",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Print events to stdout instead of sending them (same as PROM_DEBUG=1)",
    )
    args = parser.parse_args()

    sys.exit(run(args))


if __name__ == "__main__":
    main()
