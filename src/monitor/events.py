"""Pure functions that turn raw check results into canonical Sensu events."""

from __future__ import annotations

import re

from src.core.config import RunConfig
from src.core.types import Event, RawResult

# Sensu keys dashboards and handlers on these fields; anything outside
# ASCII letters, digits, underscores, dots and hyphens is collapsed to a
# single underscore.
_UNSAFE = re.compile(r"[^\w.-]+", re.ASCII)

NodeMap = dict[str, str]


def sensu_safe(value: str) -> str:
    """Replace every run of disallowed characters with ``_``."""
    return _UNSAFE.sub("_", value)


def build_event(result: RawResult, node_map: NodeMap, run: RunConfig) -> Event:
    """Canonicalize *result* into an Event.

    The raw source is looked up in *node_map*; an unknown instance keeps its raw
    identifier. The address is ``<hostname>.<domain>``.
    """
    raw_source = result.source or ""
    node_name = node_map.get(raw_source, raw_source)
    address = f"{node_name}.{run.domain}"

    return Event(
        status=result.status,
        output=result.output,
        name=sensu_safe(result.name),
        source=sensu_safe(node_name),
        reported_by=run.reported_by,
        occurrences=run.occurrences,
        address=sensu_safe(address),
    )
