"""Tests for node identity resolution."""

from __future__ import annotations

from src.core.types import MetricRow
from src.monitor.nodes import resolve_node_map
from src.prometheus import expressions
from src.prometheus.exceptions import BackendUnreachable


class FakePrometheus:
    def __init__(self, rows: list[dict[str, object]] | None = None, error: Exception | None = None) -> None:
        self.rows = rows or []
        self.error = error
        self.queries: list[str] = []

    def query(self, expr: str) -> list[MetricRow]:
        self.queries.append(expr)
        if self.error is not None:
            raise self.error
        return [MetricRow.model_validate(r) for r in self.rows]


def _uname(instance: str, nodename: str) -> dict[str, object]:
    return {"metric": {"instance": instance, "nodename": nodename}, "value": [0.0, "1"]}


class TestResolveNodeMap:
    def test_short_hostnames(self) -> None:
        fake = FakePrometheus([
            _uname("10.0.0.1:9100", "web01.internal"),
            _uname("10.0.0.2:9100", "db01.eu.example.com"),
            _uname("10.0.0.3:9100", "plain"),
        ])
        assert resolve_node_map(fake) == {
            "10.0.0.1:9100": "web01",
            "10.0.0.2:9100": "db01",
            "10.0.0.3:9100": "plain",
        }

    def test_queries_node_metadata_once(self) -> None:
        fake = FakePrometheus()
        resolve_node_map(fake)
        assert fake.queries == [expressions.NODE_METADATA]

    def test_rows_without_nodename_are_skipped(self) -> None:
        fake = FakePrometheus([{"metric": {"instance": "a"}, "value": [0.0, "1"]}])
        assert resolve_node_map(fake) == {}

    def test_backend_failure_degrades_to_empty_map(self) -> None:
        fake = FakePrometheus(error=BackendUnreachable("down"))
        assert resolve_node_map(fake) == {}
