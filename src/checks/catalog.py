"""Check catalog — each named check kind queries Prometheus and classifies the rows.

Every public check method takes a :class:`CheckConfig` and returns a list of
:class:`RawResult`. Sources are raw instance identifiers; canonical host names
are resolved later, once per run, by the event builder.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol, TypeVar

import structlog

from src.checks.classifier import check, classify, equals, to_float, to_int
from src.checks.exceptions import CheckEvaluationError
from src.core.config import CheckConfig
from src.core.exceptions import ConfigInvalid
from src.core.types import MetricRow, RawResult, Status
from src.prometheus import expressions

logger = structlog.get_logger(__name__)

_T = TypeVar("_T")


class QueryClient(Protocol):
    def query(self, expr: str) -> list[MetricRow]: ...


def nice_disk_name(mountpoint: str) -> str:
    """Turn a mount point into a check-name fragment: ``/var/log/`` -> ``var_log``."""
    if mountpoint == "/":
        return "root"
    return mountpoint.removeprefix("/").removesuffix("/").replace("/", "_")


def _require(value: _T | None, option: str, kind: str) -> _T:
    if value is None:
        raise CheckEvaluationError(f"Check '{kind}' requires option '{option}'")
    return value


def _custom_source(row: MetricRow) -> str:
    # Bare-address instances are less useful than the application label.
    instance = row.instance
    if instance[:1].isdigit() and row.label("app"):
        return row.label("app")
    return instance


class CheckCatalog:
    """Closed set of check kinds evaluated against a Prometheus client."""

    def __init__(self, client: QueryClient) -> None:
        self._client = client

    def run(self, kind: str, cfg: CheckConfig) -> list[RawResult]:
        """Evaluate the check kind named *kind*.

        Raises:
            ConfigInvalid: If *kind* is not part of the catalog.
        """
        try:
            check_fn = _CATALOG[kind]
        except KeyError:
            raise ConfigInvalid(f"Unknown check kind: {kind}") from None
        return check_fn(self, cfg)

    # ── Per-host filesystem checks ──────────────────────────────

    def disk(self, cfg: CheckConfig) -> list[RawResult]:
        """Percentage of used space on the configured mount point."""
        mount = _require(cfg.mount, "mount", "disk")
        results: list[RawResult] = []
        for row in self._client.query(expressions.disk_usage(mount)):
            value = to_int(row.sample)
            logger.debug("check_value", kind="disk", value=value, source=row.instance)
            results.append(RawResult(
                status=check(value, cfg.warn, cfg.crit),
                output=f"Disk: {value}%, Mountpoint: {mount} |disk={value}",
                name=f"check_disk_{cfg.name or ''}",
                source=row.instance,
            ))
        return results

    def inode(self, cfg: CheckConfig) -> list[RawResult]:
        """Percentage of used inodes on the configured mount point."""
        mount = _require(cfg.mount, "mount", "inode")
        results: list[RawResult] = []
        for row in self._client.query(expressions.inode_usage(mount)):
            value = to_int(row.sample)
            logger.debug("check_value", kind="inode", value=value, source=row.instance)
            results.append(RawResult(
                status=check(value, cfg.warn, cfg.crit),
                output=f"Disk: {mount}, Inodes: {value}% |inodes={value}",
                name=f"check_inodes_{cfg.name or ''}",
                source=row.instance,
            ))
        return results

    def disk_all(self, cfg: CheckConfig) -> list[RawResult]:
        """Inode and space usage of every filesystem not matching ``ignore_fs``.

        Emits one inode result and one space result per mount point.
        """
        results: list[RawResult] = []

        for row in self._client.query(expressions.inode_usage_all(cfg.ignore_fs)):
            mountpoint = row.label("mountpoint")
            value = to_int(row.sample)
            logger.debug("check_value", kind="disk_all", value=value, source=row.instance)
            results.append(RawResult(
                status=check(value, cfg.warn, cfg.crit),
                output=f"Disk: {mountpoint}, Inode Usage: {value}% |inodes={value}",
                name=f"check_inode_{nice_disk_name(mountpoint)}",
                source=row.instance,
            ))

        for row in self._client.query(expressions.disk_usage_all(cfg.ignore_fs)):
            mountpoint = row.label("mountpoint")
            value = to_int(row.sample)
            logger.debug("check_value", kind="disk_all", value=value, source=row.instance)
            results.append(RawResult(
                status=check(value, cfg.warn, cfg.crit),
                output=f"Disk: {mountpoint}, Usage: {value}% |disk={value}",
                name=f"check_disk_{nice_disk_name(mountpoint)}",
                source=row.instance,
            ))

        return results

    def predict_disk_all(self, cfg: CheckConfig) -> list[RawResult]:
        """Single result listing every filesystem predicted to fill within ``days``."""
        days = cfg.days
        query = expressions.predict_disk_full(days, cfg.sample_size, cfg.filter)
        disks = [
            f"{row.instance}:{row.label('mountpoint')}"
            for row in self._client.query(query)
        ]

        if not disks:
            return [RawResult(
                status=Status.OK,
                output=f"No disks are predicted to run out of space in the next {days} days",
                name="predict_disks",
                source=cfg.source,
            )]

        return [RawResult(
            status=Status(cfg.exit_code),
            output=(
                f"Disks predicted to run out of space in the next {days} days: "
                f"{','.join(disks)}"
            ),
            name="predict_disks",
            source=cfg.source,
        )]

    # ── Per-host memory, load and service checks ────────────────

    def memory(self, cfg: CheckConfig) -> list[RawResult]:
        results: list[RawResult] = []
        for row in self._client.query(expressions.memory_usage()):
            value = to_int(row.sample)
            logger.debug("check_value", kind="memory", value=value, source=row.instance)
            results.append(RawResult(
                status=check(value, cfg.warn, cfg.crit),
                output=f"Memory {value}%|memory={value}",
                name="check_memory",
                source=row.instance,
            ))
        return results

    def load_per_cpu(self, cfg: CheckConfig) -> list[RawResult]:
        """5-minute load average divided by the instance's CPU count.

        Raises:
            CheckEvaluationError: If a loaded instance has no (or a zero) CPU count.
        """
        cpu_counts = {
            row.instance: to_float(row.sample)
            for row in self._client.query(expressions.CPU_COUNT_BY_INSTANCE)
        }

        results: list[RawResult] = []
        for row in self._client.query(expressions.LOAD5):
            source = row.instance
            cpus = cpu_counts.get(source)
            if not cpus:
                raise CheckEvaluationError(f"No CPU count reported for instance {source}")
            value = round(to_float(row.sample), 2) / cpus
            logger.debug("check_value", kind="load_per_cpu", value=value, source=source)
            results.append(RawResult(
                status=check(value, cfg.warn, cfg.crit),
                output=f"Load: {value}|load={value}",
                name="check_load",
                source=source,
            ))
        return results

    def service(self, cfg: CheckConfig) -> list[RawResult]:
        """Systemd unit state; OK when the state gauge equals ``state_required``."""
        name = _require(cfg.name, "name", "service")
        results: list[RawResult] = []
        for row in self._client.query(expressions.service_state(name, cfg.state)):
            value = to_int(row.sample)
            logger.debug("check_value", kind="service", value=value, source=row.instance)
            results.append(RawResult(
                status=equals(value, cfg.state_required),
                output=f"Service: {name} ({cfg.state}={value})",
                name=f"check_service_{name}",
                source=row.instance,
            ))
        return results

    # ── Cluster aggregates ──────────────────────────────────────
    # The query already aggregates across the cluster, so the single result
    # is attributed to the configured source rather than a backend row.

    def _cluster_value(self, query: str, kind: str) -> float:
        rows = self._client.query(query)
        if not rows:
            raise CheckEvaluationError(f"Check '{kind}' returned no rows")
        return round(to_float(rows[0].sample), 2)

    def memory_per_cluster(self, cfg: CheckConfig) -> list[RawResult]:
        cluster = _require(cfg.cluster, "cluster", "memory_per_cluster")
        value = self._cluster_value(
            expressions.cluster_memory_usage(cluster), "memory_per_cluster"
        )
        logger.debug("check_value", kind="memory_per_cluster", value=value, source=cfg.source)
        return [RawResult(
            status=check(value, cfg.warn, cfg.crit),
            output=f"Cluster Memory: {value}%|memory={value}",
            name=f"cluster_{cluster}_memory",
            source=cfg.source,
        )]

    def load_per_cluster(self, cfg: CheckConfig) -> list[RawResult]:
        cluster = _require(cfg.cluster, "cluster", "load_per_cluster")
        value = self._cluster_value(expressions.cluster_load(cluster), "load_per_cluster")
        logger.debug("check_value", kind="load_per_cluster", value=value, source=cfg.source)
        return [RawResult(
            status=check(value, cfg.warn, cfg.crit),
            output=f"Cluster Load: {value}|load={value}",
            name=f"cluster_{cluster}_load",
            source=cfg.source,
        )]

    def load_per_cluster_minus_n(self, cfg: CheckConfig) -> list[RawResult]:
        """Cluster load assuming ``minus_n`` nodes are lost."""
        cluster = _require(cfg.cluster, "cluster", "load_per_cluster_minus_n")
        minus_n = _require(cfg.minus_n, "minus_n", "load_per_cluster_minus_n")
        value = self._cluster_value(
            expressions.cluster_load_minus_n(cluster, minus_n),
            "load_per_cluster_minus_n",
        )
        logger.debug(
            "check_value", kind="load_per_cluster_minus_n", value=value, source=cfg.source
        )
        return [RawResult(
            status=check(value, cfg.warn, cfg.crit),
            output=f"Cluster Load: {value}|load={value}",
            name=f"cluster_{cluster}_load_minus_n",
            source=cfg.source,
        )]

    # ── Custom expressions ──────────────────────────────────────

    def custom(self, cfg: CheckConfig) -> list[RawResult]:
        """Arbitrary expression; each row is classified and mapped to ``msg[status]``."""
        query = _require(cfg.query, "query", "custom")
        if cfg.check is None:
            raise CheckEvaluationError("Check 'custom' requires option 'check'")

        results: list[RawResult] = []
        for row in self._client.query(query):
            status = classify(cfg.check.type, row.sample, *cfg.check.thresholds())
            source = _custom_source(row)
            logger.debug("check_value", kind="custom", value=row.sample, source=source)
            results.append(RawResult(
                status=status,
                output=cfg.msg[status] if status < len(cfg.msg) else "",
                name=cfg.name or "",
                source=source,
            ))
        return results


CheckFn = Callable[[CheckCatalog, CheckConfig], list[RawResult]]

_CATALOG: dict[str, CheckFn] = {
    "disk": CheckCatalog.disk,
    "disk_all": CheckCatalog.disk_all,
    "inode": CheckCatalog.inode,
    "memory": CheckCatalog.memory,
    "memory_per_cluster": CheckCatalog.memory_per_cluster,
    "load_per_cluster": CheckCatalog.load_per_cluster,
    "load_per_cluster_minus_n": CheckCatalog.load_per_cluster_minus_n,
    "load_per_cpu": CheckCatalog.load_per_cpu,
    "service": CheckCatalog.service,
    "predict_disk_all": CheckCatalog.predict_disk_all,
    "custom": CheckCatalog.custom,
}
