"""Tests for the dispatch-stack factory."""

from __future__ import annotations

from src.core.config import ChecksFile, SensuConfig, Settings
from src.monitor.channels import SensuSocketChannel, StdoutChannel
from src.monitor.factory import create_channel, create_runner
from src.monitor.runner import CheckRunner


class _NoBackend:
    def query(self, expr: str) -> list:
        return []


class TestCreateChannel:
    def test_sensu_by_default(self) -> None:
        channel = create_channel(Settings(sensu=SensuConfig(host="sensu", port=3031)))
        assert isinstance(channel, SensuSocketChannel)

    def test_stdout_in_debug(self) -> None:
        assert isinstance(create_channel(Settings(debug=True)), StdoutChannel)


class TestCreateRunner:
    def test_builds_runner(self) -> None:
        checks = ChecksFile.model_validate({"config": {"domain": "example.com"}})
        runner = create_runner(Settings(debug=True), checks, _NoBackend())
        assert isinstance(runner, CheckRunner)

    def test_empty_run_reports_ok(self) -> None:
        checks = ChecksFile.model_validate({"config": {"domain": "example.com"}})
        result = create_runner(Settings(debug=True), checks, _NoBackend()).run()
        assert result.status == 0
        assert result.output == "OK: Ran 0 checks successfully!"
