"""Event building, node resolution, dispatch and run orchestration."""

from src.monitor.channels import EventChannel, SensuSocketChannel, StdoutChannel
from src.monitor.dispatcher import EventDispatcher
from src.monitor.events import NodeMap, build_event, sensu_safe
from src.monitor.exceptions import DispatchUnreachable, MonitorError
from src.monitor.factory import create_channel, create_runner
from src.monitor.nodes import resolve_node_map
from src.monitor.runner import CheckRunner

__all__ = [
    "CheckRunner",
    "DispatchUnreachable",
    "EventChannel",
    "EventDispatcher",
    "MonitorError",
    "NodeMap",
    "SensuSocketChannel",
    "StdoutChannel",
    "build_event",
    "create_channel",
    "create_runner",
    "resolve_node_map",
    "sensu_safe",
]
