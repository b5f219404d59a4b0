"""Shared models: measurement configuration, run identity, and latency summaries."""

from __future__ import annotations

from collections.abc import Mapping  # noqa: TC003 - resolved by pydantic at runtime
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator
from pydantic.alias_generators import to_camel

from latency_core.durations import DurationType  # noqa: TC001


class LatencyThreshold(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    condition_type: str
    # Kept as a plain string so unsupported metrics reach the validator.
    metric: str
    threshold: DurationType


class MeasurementConfig(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    name: str
    thresholds: tuple[LatencyThreshold, ...] = ()
    timeseries_indexer: str = ""
    quantiles_indexer: str = ""


class JobConfig(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    name: str
    namespace: str = ""
    job_iterations: int = 1
    qps: int = 0
    burst: int = 0


class MeasurementIdentity(BaseModel):
    """Run identity shared by every measurement derived from one factory."""

    model_config = ConfigDict(frozen=True)

    uuid: str
    run_id: str
    config: MeasurementConfig
    metadata: Mapping[str, Any] = Field(default_factory=dict, validate_default=True)

    @field_validator("metadata", mode="after")
    @classmethod
    def _freeze_metadata(cls, value: Mapping[str, Any]) -> Mapping[str, Any]:
        return MappingProxyType(dict(value))

    @field_serializer("metadata")
    def _serialize_metadata(self, value: Mapping[str, Any]) -> dict[str, Any]:
        return dict(value)


class LatencyQuantiles(BaseModel):
    """Statistical summary of one condition across all entities of a job."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    quantile_name: str
    uuid: str = ""
    job_name: str = ""
    metric_name: str = ""
    p99: float = Field(alias="P99")
    p95: float = Field(alias="P95")
    p50: float = Field(alias="P50")
    min: float
    max: float
    avg: float
    timestamp: str
    metadata: dict[str, Any] = Field(default_factory=dict)

    def to_document(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)
