"""Pure PromQL expression composers used by the check catalog.

Operands are interpolated verbatim; a malformed operand yields a malformed
expression, which the backend reports as a query error.
"""

from __future__ import annotations

NODE_METADATA = "max_over_time(node_uname_info[1d])"
LOAD5 = "node_load5"
CPU_COUNT_BY_INSTANCE = '(count(node_cpu{mode="system"})by(instance))'

_SECONDS_PER_DAY = 86_400


def percent_query_free(total: str, available: str) -> str:
    """Percentage of *total* not covered by *available*: ``100-((A/T)*100)``."""
    return f"100-(({available}/{total})*100)"


def _mountpoint(mount: str) -> str:
    return f'mountpoint="{mount}"'


def _ignore_fs(pattern: str) -> str:
    return f'fstype!~"{pattern}"'


def disk_usage(mount: str) -> str:
    selector = _mountpoint(mount)
    return percent_query_free(
        f"node_filesystem_size{{{selector}}}",
        f"node_filesystem_avail{{{selector}}}",
    )


def inode_usage(mount: str) -> str:
    selector = _mountpoint(mount)
    return percent_query_free(
        f"node_filesystem_files{{{selector}}}",
        f"node_filesystem_files_free{{{selector}}}",
    )


def disk_usage_all(ignore_fs: str) -> str:
    selector = _ignore_fs(ignore_fs)
    return percent_query_free(
        f"node_filesystem_size{{{selector}}}",
        f"node_filesystem_avail{{{selector}}}",
    )


def inode_usage_all(ignore_fs: str) -> str:
    selector = _ignore_fs(ignore_fs)
    return percent_query_free(
        f"node_filesystem_files{{{selector}}}",
        f"node_filesystem_files_free{{{selector}}}",
    )


def memory_usage() -> str:
    return percent_query_free("node_memory_MemTotal", "node_memory_MemAvailable")


def cluster_memory_usage(cluster: str) -> str:
    return percent_query_free(
        f'sum(node_memory_MemTotal{{job="{cluster}"}})',
        f'sum(node_memory_MemAvailable{{job="{cluster}"}})',
    )


def _cluster_load_sum(cluster: str) -> str:
    return f'sum(node_load5{{job="{cluster}"}})'


def _cluster_cpu_count(cluster: str) -> str:
    return f'count(node_cpu{{mode="system",job="{cluster}"}})'


def cluster_load(cluster: str) -> str:
    """Summed 5-minute load of a cluster divided by its total CPU count."""
    return f"{_cluster_load_sum(cluster)}/{_cluster_cpu_count(cluster)}"


def cluster_load_minus_n(cluster: str, minus_n: int) -> str:
    """Cluster load as if *minus_n* nodes were gone.

    The divisor is the CPU count minus *minus_n* times the average CPUs per node.
    """
    total_cpus = _cluster_cpu_count(cluster)
    total_nodes = f'count(node_load5{{job="{cluster}"}})'
    return (
        f"{_cluster_load_sum(cluster)}/"
        f"({total_cpus}-({total_cpus}/{total_nodes})*{int(minus_n)})"
    )


def service_state(name: str, state: str) -> str:
    return f"node_systemd_unit_state{{name='{name}',state='{state}'}}"


def predict_disk_full(days: int, sample_size: str = "24h", label_filter: str = "") -> str:
    """Filesystems whose linear trend over *sample_size* reaches zero within *days*."""
    horizon = int(days) * _SECONDS_PER_DAY
    return (
        f"predict_linear(node_filesystem_avail{label_filter}[{sample_size}], {horizon}) < 0"
    )
