"""Event channels — Sensu client socket delivery and stdout for debug runs."""

from __future__ import annotations

import abc
import socket
import sys
from typing import TextIO

import structlog

from src.core.config import SensuConfig
from src.core.types import Event
from src.monitor.exceptions import DispatchUnreachable

logger = structlog.get_logger(__name__)


class EventChannel(abc.ABC):
    """Base class for event delivery channels."""

    @abc.abstractmethod
    def send(self, event: Event) -> None:
        """Deliver one event."""

    def close(self) -> None:
        """Release resources. Channels without state need not override."""


class SensuSocketChannel(EventChannel):
    """Writes events to the Sensu client socket, one connection per event.

    Fire-and-forget: a newline-terminated JSON document is written and the
    connection closed without reading a reply.
    """

    def __init__(self, config: SensuConfig) -> None:
        self._host = config.host
        self._port = config.port
        self._timeout = config.timeout_secs

    def send(self, event: Event) -> None:
        payload = event.model_dump_json() + "\n"
        try:
            with socket.create_connection((self._host, self._port), timeout=self._timeout) as sock:
                sock.sendall(payload.encode("utf-8"))
        except OSError as exc:
            raise DispatchUnreachable(
                f"Cannot write to Sensu socket {self._host}:{self._port}: {exc}"
            ) from exc
        logger.debug("event_sent", source=event.source, name=event.name, status=int(event.status))


class StdoutChannel(EventChannel):
    """Prints events instead of sending them (debug mode)."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream

    def send(self, event: Event) -> None:
        print(event.model_dump_json(), file=self._stream or sys.stdout)
