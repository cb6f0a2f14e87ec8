"""Convenience factory for wiring the dispatch stack."""

from __future__ import annotations

from src.checks.catalog import QueryClient
from src.core.config import ChecksFile, Settings
from src.monitor.channels import EventChannel, SensuSocketChannel, StdoutChannel
from src.monitor.dispatcher import EventDispatcher
from src.monitor.runner import CheckRunner


def create_channel(settings: Settings) -> EventChannel:
    """Stdout in debug mode, otherwise the Sensu client socket."""
    if settings.debug:
        return StdoutChannel()
    return SensuSocketChannel(settings.sensu)


def create_runner(settings: Settings, checks: ChecksFile, client: QueryClient) -> CheckRunner:
    """Build a runner whose dispatcher writes to the channel chosen by *settings*."""
    dispatcher = EventDispatcher(
        channel=create_channel(settings),
        run=checks.run,
        debug=settings.debug,
    )
    return CheckRunner(client=client, checks=checks, dispatcher=dispatcher)
