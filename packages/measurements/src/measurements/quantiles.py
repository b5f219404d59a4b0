"""Quantile aggregation over normalized per-entity latencies.

Every measurement kind (pod, service, node, volume claim) normalizes its
observations into one record per entity. The records are grouped by
condition and summarized into min/max/avg/p50/p95/p99, one summary per
condition that was actually observed.
"""

from __future__ import annotations

import math
import statistics
from collections import defaultdict
from typing import TYPE_CHECKING, Any, TypeVar

from whenever import Instant

from latency_core.models import LatencyQuantiles

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Mapping, Sequence

R = TypeVar("R")


def _nearest_rank(sorted_values: Sequence[float], q: float) -> float:
    n = len(sorted_values)
    return sorted_values[min(max(math.ceil(q * n) - 1, 0), n - 1)]


def new_latency_summary(values: Iterable[float], name: str) -> LatencyQuantiles:
    """Summarize one condition's latencies. ``values`` must not be empty."""
    sorted_values = sorted(values)
    if not sorted_values:
        raise ValueError(f"no latencies observed for {name}")

    return LatencyQuantiles(
        quantile_name=name,
        p99=_nearest_rank(sorted_values, 0.99),
        p95=_nearest_rank(sorted_values, 0.95),
        p50=_nearest_rank(sorted_values, 0.50),
        min=sorted_values[0],
        max=sorted_values[-1],
        avg=statistics.fmean(sorted_values),
        timestamp=Instant.now().format_iso(),
    )


def calculate_quantiles(
    *,
    uuid: str,
    job_name: str,
    metadata: Mapping[str, Any],
    records: Iterable[R],
    get_latency: Callable[[R], Mapping[str, float]],
    metric_name: str,
) -> list[LatencyQuantiles]:
    """Group latencies by condition and summarize each group.

    Args:
        uuid: Run UUID stamped on every summary.
        job_name: Job the records belong to.
        metadata: Run metadata, copied onto every summary.
        records: Normalized per-entity latency records.
        get_latency: Returns the condition -> latency mapping of one record.
        metric_name: Name of the quantiles result set.

    Returns:
        One summary per observed condition, sorted by condition name.
    """
    by_condition: dict[str, list[float]] = defaultdict(list)
    for record in records:
        for condition, latency in get_latency(record).items():
            by_condition[condition].append(latency)

    summaries: list[LatencyQuantiles] = []
    for condition in sorted(by_condition):
        summary = new_latency_summary(by_condition[condition], condition)
        summary.uuid = uuid
        summary.job_name = job_name
        summary.metric_name = metric_name
        summary.metadata = dict(metadata)
        summaries.append(summary)
    return summaries
