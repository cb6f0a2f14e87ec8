"""Run orchestrator — execute checks, resolve nodes, build and dispatch events."""

from __future__ import annotations

import structlog

from src.checks.catalog import CheckCatalog, QueryClient
from src.checks.exceptions import CheckError
from src.core.config import CheckConfig, ChecksFile
from src.core.types import RawResult, RunResult
from src.monitor.dispatcher import EventDispatcher
from src.monitor.events import build_event
from src.monitor.nodes import resolve_node_map
from src.prometheus.exceptions import PrometheusError

logger = structlog.get_logger(__name__)


class CheckRunner:
    """Drives one run of the configured checks through to a RunResult.

    - Catalog checks run in file order, then custom checks.
    - A failing check is logged and contributes no results; the run continues.
    - Node identities are resolved once, after every check has executed.
    - ``DispatchUnreachable`` from the channel is not caught and ends the run.
    """

    def __init__(
        self,
        client: QueryClient,
        checks: ChecksFile,
        dispatcher: EventDispatcher,
        catalog: CheckCatalog | None = None,
    ) -> None:
        self._client = client
        self._checks = checks
        self._dispatcher = dispatcher
        self._catalog = catalog or CheckCatalog(client)

    def execute(self) -> tuple[list[RawResult], int]:
        """Run every check, isolating failures.

        Returns:
            (raw results in execution order, number of checks that completed)
        """
        results: list[RawResult] = []
        completed = 0

        invocations: list[tuple[str, CheckConfig]] = [
            (entry.check, entry.cfg) for entry in self._checks.checks
        ]
        invocations.extend(("custom", custom) for custom in self._checks.custom)

        for kind, cfg in invocations:
            check_results = self._run_check(kind, cfg)
            if check_results is None:
                continue
            completed += 1
            results.extend(check_results)

        return results, completed

    def _run_check(self, kind: str, cfg: CheckConfig) -> list[RawResult] | None:
        try:
            return self._catalog.run(kind, cfg)
        except (PrometheusError, CheckError) as exc:
            logger.warning(
                "check_failed",
                kind=kind,
                name=cfg.name,
                error_type=type(exc).__name__,
                error=str(exc),
            )
        except Exception:
            logger.exception("check_failed", kind=kind, name=cfg.name)
        return None

    def run(self) -> RunResult:
        results, completed = self.execute()
        node_map = resolve_node_map(self._client)

        for result in results:
            self._dispatcher.dispatch(build_event(result, node_map, self._checks.run))

        outcome = self._dispatcher.summarize(completed)
        logger.info(
            "run_complete",
            status=outcome.status,
            checks=completed,
            results=len(results),
            dispatched=outcome.dispatched,
            dropped=self._dispatcher.dropped,
        )
        return outcome

    def close(self) -> None:
        """Release the dispatcher's channel."""
        self._dispatcher.close()
