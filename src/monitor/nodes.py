"""Node identity resolution — instance address to short host name."""

from __future__ import annotations

import structlog

from src.checks.catalog import QueryClient
from src.monitor.events import NodeMap
from src.prometheus import expressions
from src.prometheus.exceptions import PrometheusError

logger = structlog.get_logger(__name__)


def resolve_node_map(client: QueryClient) -> NodeMap:
    """Map each ``instance`` seen in the last day to the first label of its ``nodename``.

    A failed metadata query yields an empty map: events then fall back to their
    raw instance identifiers instead of aborting the run.
    """
    try:
        rows = client.query(expressions.NODE_METADATA)
    except PrometheusError as exc:
        logger.warning("node_map_unavailable", error=str(exc))
        return {}

    node_map: NodeMap = {}
    for row in rows:
        nodename = row.label("nodename")
        if not nodename:
            continue
        node_map[row.instance] = nodename.split(".", 1)[0]

    logger.debug("node_map_resolved", nodes=len(node_map))
    return node_map
