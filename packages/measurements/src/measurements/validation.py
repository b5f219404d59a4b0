"""Threshold validation: checks latency thresholds before a run starts."""

from __future__ import annotations

from typing import TYPE_CHECKING

from latency_core.types import SUPPORTED_LATENCY_METRICS

if TYPE_CHECKING:
    from collections.abc import Collection

    from latency_core.models import MeasurementConfig


class MeasurementConfigError(ValueError):
    """A measurement configuration that cannot be run."""


class UnsupportedConditionError(MeasurementConfigError):
    def __init__(self, condition_type: str) -> None:
        self.condition_type = condition_type
        super().__init__(f"unsupported condition type in measurement: {condition_type}")


class UnsupportedMetricError(MeasurementConfigError):
    def __init__(self, metric: str) -> None:
        self.metric = metric
        supported = ", ".join(sorted(SUPPORTED_LATENCY_METRICS))
        super().__init__(f"unsupported metric {metric} in measurement, supported are: {supported}")


def verify_measurement_config(
    config: MeasurementConfig, supported_conditions: Collection[str]
) -> None:
    """Raise on the first threshold whose condition or metric is not supported."""
    for th in config.thresholds:
        if th.condition_type not in supported_conditions:
            raise UnsupportedConditionError(th.condition_type)
        if th.metric not in SUPPORTED_LATENCY_METRICS:
            raise UnsupportedMetricError(th.metric)
