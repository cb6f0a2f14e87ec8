"""Tests for the check_prometheus entry point — exit codes and output."""

from __future__ import annotations

import argparse
import json
import logging
from collections.abc import Iterator
from pathlib import Path
from unittest.mock import patch

import pytest
import yaml

from scripts.check_prometheus import run
from src.core.config import reset_settings
from src.core.types import MetricRow
from src.monitor.channels import SensuSocketChannel
from src.monitor.exceptions import DispatchUnreachable
from src.prometheus.client import PrometheusClient
from src.prometheus.exceptions import BackendUnreachable

_ENV_VARS = (
    "PROMETHEUS_ENDPOINT",
    "SENSU_SOCKET_ADDRESS",
    "SENSU_SOCKET_PORT",
    "PROM_DEBUG",
    "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    reset_settings()
    yield
    logging.getLogger().handlers.clear()


# ── Helpers ─────────────────────────────────────────────────────


def _args(config: Path, tmp_path: Path, debug: bool = True) -> argparse.Namespace:
    return argparse.Namespace(
        config=str(config),
        settings=str(tmp_path / "settings.yaml"),
        log_level="ERROR",
        debug=debug,
    )


def _checks_file(tmp_path: Path, data: object) -> Path:
    path = tmp_path / "config.yml"
    path.write_text(yaml.dump(data))
    return path


_DISK = {
    "config": {"reported_by": "prometheus", "domain": "example.com"},
    "checks": [{"check": "disk", "cfg": {"name": "root", "mount": "/", "warn": 80, "crit": 90}}],
}


def _fake_query(value: str):
    def query(self: PrometheusClient, expr: str) -> list[MetricRow]:
        if expr.startswith("max_over_time"):
            return [MetricRow.model_validate({
                "metric": {"instance": "10.0.0.1:9100", "nodename": "web01.internal"},
                "value": [0.0, "1"],
            })]
        return [MetricRow.model_validate({
            "metric": {"instance": "10.0.0.1:9100"},
            "value": [0.0, value],
        })]
    return query


# ── run ─────────────────────────────────────────────────────────


class TestRun:
    def test_ok_run(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        path = _checks_file(tmp_path, _DISK)
        with patch.object(PrometheusClient, "query", _fake_query("10")):
            status = run(_args(path, tmp_path))
        out = capsys.readouterr().out.splitlines()
        assert status == 0
        assert json.loads(out[0])["source"] == "web01"
        assert out[-1] == "OK: Ran 1 checks successfully!"

    def test_debug_failure_prints_details_exits_zero(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        path = _checks_file(tmp_path, _DISK)
        with patch.object(PrometheusClient, "query", _fake_query("95")):
            status = run(_args(path, tmp_path))
        out = capsys.readouterr().out.splitlines()
        assert status == 0
        assert out[-1].startswith("Source: web01: Check: check_disk_root")

    def test_failure_exits_one(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        path = _checks_file(tmp_path, _DISK)
        with (
            patch.object(PrometheusClient, "query", _fake_query("95")),
            patch.object(SensuSocketChannel, "send") as mock_send,
            patch.object(SensuSocketChannel, "close") as mock_close,
        ):
            status = run(_args(path, tmp_path, debug=False))
        assert status == 1
        mock_close.assert_called_once()
        assert mock_send.call_count == 1
        assert "Status: 2" in capsys.readouterr().out

    def test_unreachable_sensu_exits_three(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        path = _checks_file(tmp_path, _DISK)
        with (
            patch.object(PrometheusClient, "query", _fake_query("95")),
            patch.object(SensuSocketChannel, "send", side_effect=DispatchUnreachable("refused")),
            patch.object(SensuSocketChannel, "close") as mock_close,
        ):
            status = run(_args(path, tmp_path, debug=False))
        assert status == 3
        mock_close.assert_called_once()
        assert capsys.readouterr().out.startswith("UNKNOWN:")

    def test_unreachable_backend_still_reports(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        path = _checks_file(tmp_path, _DISK)
        with patch.object(PrometheusClient, "query", side_effect=BackendUnreachable("down")):
            status = run(_args(path, tmp_path))
        assert status == 0
        assert capsys.readouterr().out.strip() == "OK: Ran 0 checks successfully!"

    def test_missing_checks_file_exits_three(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        status = run(_args(tmp_path / "missing.yml", tmp_path))
        assert status == 3
        assert "not found" in capsys.readouterr().out

    def test_invalid_checks_file_exits_three(self, tmp_path: Path) -> None:
        path = _checks_file(tmp_path, {"checks": [{"check": "nope", "cfg": {}}]})
        assert run(_args(path, tmp_path)) == 3

    def test_invalid_settings_exit_three(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("SENSU_SOCKET_PORT", "not-a-port")
        path = _checks_file(tmp_path, _DISK)
        assert run(_args(path, tmp_path)) == 3
