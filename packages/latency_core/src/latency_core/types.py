"""Latency metric vocabulary and result-set kinds."""

from __future__ import annotations

from enum import StrEnum


class LatencyMetric(StrEnum):
    P99 = "P99"
    P95 = "P95"
    P50 = "P50"
    AVG = "Avg"
    MAX = "Max"


SUPPORTED_LATENCY_METRICS: frozenset[str] = frozenset(m.value for m in LatencyMetric)


class ResultKind(StrEnum):
    """Tag attached to every result set handed to the indexers.

    Values are the metric names written to the backends.
    """

    POD_LATENCY = "podLatencyMeasurement"
    POD_LATENCY_QUANTILES = "podLatencyQuantilesMeasurement"
    SVC_LATENCY = "svcLatencyMeasurement"
    SVC_LATENCY_QUANTILES = "svcLatencyQuantilesMeasurement"
    NODE_LATENCY = "nodeLatencyMeasurement"
    NODE_LATENCY_QUANTILES = "nodeLatencyQuantilesMeasurement"
    PVC_LATENCY = "pvcLatencyMeasurement"
    PVC_LATENCY_QUANTILES = "pvcLatencyQuantilesMeasurement"

    @property
    def is_raw(self) -> bool:
        return self in _RAW_KINDS

    @property
    def is_quantiles(self) -> bool:
        return self in _QUANTILE_KINDS

    @classmethod
    def from_metric_name(cls, name: str) -> ResultKind | None:
        try:
            return cls(name)
        except ValueError:
            return None


_RAW_KINDS = frozenset(
    {
        ResultKind.POD_LATENCY,
        ResultKind.SVC_LATENCY,
        ResultKind.NODE_LATENCY,
        ResultKind.PVC_LATENCY,
    }
)

_QUANTILE_KINDS = frozenset(
    {
        ResultKind.POD_LATENCY_QUANTILES,
        ResultKind.SVC_LATENCY_QUANTILES,
        ResultKind.NODE_LATENCY_QUANTILES,
        ResultKind.PVC_LATENCY_QUANTILES,
    }
)
