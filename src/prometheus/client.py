"""Prometheus HTTP API client — instant queries decoded into MetricRow lists."""

from __future__ import annotations

from types import TracebackType
from typing import Any

import httpx
import structlog
from pydantic import ValidationError

from src.core.config import PrometheusConfig, get_settings
from src.core.types import MetricRow
from src.prometheus.exceptions import BackendMalformed, BackendQueryError, BackendUnreachable

logger = structlog.get_logger(__name__)

_QUERY_PATH = "/api/v1/query"


def _parse_rows(body: Any) -> list[MetricRow]:
    """Decode a query response body into rows.

    Expected structure::

        {
            "status": "success",
            "data": {
                "resultType": "vector",
                "result": [{"metric": {...}, "value": [1700000000.0, "95"]}]
            }
        }
    """
    if not isinstance(body, dict):
        raise BackendMalformed("Response body is not a JSON object")

    if body.get("status") == "error":
        raise BackendQueryError(
            str(body.get("error", "query failed")),
            error_type=str(body.get("errorType", "")),
        )

    data = body.get("data")
    if not isinstance(data, dict) or not isinstance(data.get("result"), list):
        raise BackendMalformed("Response is missing data.result")

    result_type = data.get("resultType", "vector")
    if result_type != "vector":
        raise BackendMalformed(f"Unsupported resultType: {result_type}")

    try:
        return [MetricRow.model_validate(entry) for entry in data["result"]]
    except ValidationError as exc:
        raise BackendMalformed(f"Unexpected result entry: {exc}") from exc


class PrometheusClient:
    """Synchronous client for the Prometheus instant-query endpoint.

    Every request is bounded by short connect and read timeouts so a slow
    backend cannot stall a scheduled run past the next cycle. Errors are
    raised, never retried.

    Usage::

        with PrometheusClient() as client:
            rows = client.query("node_load5")
    """

    def __init__(self, config: PrometheusConfig | None = None) -> None:
        self._config = config or get_settings().prometheus
        self._http: httpx.Client | None = None

    @property
    def connected(self) -> bool:
        """Whether the HTTP client is active."""
        return self._http is not None and not self._http.is_closed

    def connect(self) -> None:
        """Create the httpx client."""
        self._http = httpx.Client(
            base_url=self._config.base_url,
            timeout=httpx.Timeout(
                self._config.read_timeout_secs,
                connect=self._config.connect_timeout_secs,
            ),
        )

    def close(self) -> None:
        """Close the httpx client."""
        if self._http is not None:
            self._http.close()
            self._http = None

    def __enter__(self) -> PrometheusClient:
        self.connect()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def query(self, expr: str) -> list[MetricRow]:
        """Evaluate *expr* at the current time.

        Raises:
            BackendUnreachable: Transport failure, timeout, or HTTP error status
                without a decodable query error.
            BackendMalformed: The response body could not be decoded.
            BackendQueryError: The backend reported an evaluation error.
        """
        if not self.connected:
            self.connect()

        logger.debug("prometheus_query", expr=expr)
        try:
            response = self._http.get(_QUERY_PATH, params={"query": expr})  # type: ignore[union-attr]
        except httpx.TimeoutException as exc:
            raise BackendUnreachable(f"Prometheus query timed out: {exc}") from exc
        except httpx.HTTPError as exc:
            raise BackendUnreachable(f"Prometheus request failed: {exc}") from exc

        try:
            body = response.json()
        except ValueError as exc:
            if response.is_error:
                raise BackendUnreachable(
                    f"Prometheus returned {response.status_code}"
                ) from exc
            raise BackendMalformed("Prometheus returned invalid JSON") from exc

        if response.is_error and not (isinstance(body, dict) and body.get("status") == "error"):
            raise BackendUnreachable(f"Prometheus returned {response.status_code}")

        rows = _parse_rows(body)
        logger.debug("prometheus_result", expr=expr, rows=len(rows))
        return rows
