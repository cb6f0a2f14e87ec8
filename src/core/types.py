"""Domain types for metric rows, check results, events and run summaries."""

from __future__ import annotations

from enum import IntEnum

from pydantic import BaseModel, Field


class Status(IntEnum):
    """Sensu severity status codes."""

    OK = 0
    WARNING = 1
    CRITICAL = 2
    UNKNOWN = 3


class MetricRow(BaseModel):
    """One entry of an instant-vector query result.

    Mirrors the backend's JSON shape::

        {"metric": {"instance": "10.0.0.1:9100", ...}, "value": [1700000000.0, "95"]}
    """

    model_config = {"frozen": True}

    metric: dict[str, str] = Field(default_factory=dict)
    value: tuple[float, str]

    @property
    def instance(self) -> str:
        return self.metric.get("instance", "")

    @property
    def sample(self) -> str:
        """The raw (string) sample value."""
        return self.value[1]

    def label(self, name: str, default: str = "") -> str:
        return self.metric.get(name, default)


class RawResult(BaseModel):
    """Output of one check invocation, before the source is canonicalized."""

    status: Status
    output: str
    name: str
    source: str | None = None


class Event(BaseModel):
    """Canonical event written to the Sensu client socket."""

    status: Status
    output: str
    name: str
    source: str
    reported_by: str | None = None
    occurrences: int = 1
    address: str


class RunResult(BaseModel):
    """Aggregate outcome of one run: process exit status plus summary text."""

    status: int
    output: str
    checks_run: int = 0
    dispatched: int = 0
