"""Event dispatcher — whitelist filtering, delivery and failure aggregation."""

from __future__ import annotations

import structlog

from src.core.config import RunConfig
from src.core.types import Event, RunResult, Status
from src.monitor.channels import EventChannel

logger = structlog.get_logger(__name__)


def describe_failure(event: Event) -> str:
    return (
        f"Source: {event.source}: Check: {event.name}: "
        f"Output: {event.output}: Status: {int(event.status)}"
    )


class EventDispatcher:
    """Gates events on the source whitelist and hands survivors to a channel.

    Every dispatched event is remembered so the run can be summarised with
    :meth:`summarize`.
    """

    def __init__(self, channel: EventChannel, run: RunConfig, debug: bool = False) -> None:
        self._channel = channel
        self._run = run
        self._debug = debug
        self._dispatched: list[Event] = []
        self._dropped = 0

    @property
    def dispatched(self) -> list[Event]:
        return list(self._dispatched)

    @property
    def dropped(self) -> int:
        return self._dropped

    def dispatch(self, event: Event) -> bool:
        """Send *event* if its source passes the whitelist.

        Returns:
            True if the event was handed to the channel.

        Raises:
            DispatchUnreachable: Propagated from the channel; aborts the run.
        """
        if not self._run.allows(event.source):
            self._dropped += 1
            log = logger.info if self._debug else logger.debug
            log(
                "event_dropped",
                source=event.source,
                name=event.name,
                whitelist=self._run.whitelist,
            )
            return False

        self._channel.send(event)
        self._dispatched.append(event)
        return True

    def summarize(self, checks_run: int) -> RunResult:
        """Aggregate the dispatched events into the run result.

        Status is 0 only when every dispatched event was OK. In debug mode the
        failure text is still produced but the status is always 0, since
        nothing reached the event backend.
        """
        failures = [
            describe_failure(event)
            for event in self._dispatched
            if event.status != Status.OK
        ]

        if not failures:
            return RunResult(
                status=0,
                output=f"OK: Ran {checks_run} checks successfully!",
                checks_run=checks_run,
                dispatched=len(self._dispatched),
            )

        return RunResult(
            status=0 if self._debug else 1,
            output=" ".join(failures),
            checks_run=checks_run,
            dispatched=len(self._dispatched),
        )

    def close(self) -> None:
        self._channel.close()
