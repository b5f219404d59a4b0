"""Normalized per-entity latency records.

Latencies are milliseconds from object creation to the condition becoming
true. A latency of 0 means the condition was never observed for that entity.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _LatencyRecord(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    timestamp: str
    uuid: str = ""
    job_name: str = ""
    metric_name: str = ""
    metadata: dict[str, Any] = Field(default_factory=dict)

    def to_document(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class PodLatency(_LatencyRecord):
    pod_name: str
    namespace: str
    node_name: str = ""
    scheduling_latency: int = 0
    ready_to_start_containers_latency: int = 0
    initialized_latency: int = 0
    containers_ready_latency: int = 0
    pod_ready_latency: int = 0


class ServiceLatency(_LatencyRecord):
    service_name: str
    namespace: str
    ready_latency: float = 0
    ip_assigned_latency: float = 0
    service_type: str = "ClusterIP"


class NodeLatency(_LatencyRecord):
    node_name: str
    node_memory_pressure_latency: int = 0
    node_disk_pressure_latency: int = 0
    node_pid_pressure_latency: int = 0
    node_ready_latency: int = 0


class PvcLatency(_LatencyRecord):
    pvc_name: str
    namespace: str
    storage_class: str = ""
    size: str = ""
    pending_latency: int = 0
    bound_latency: int = 0
    lost_latency: int = 0
    resizing_latency: int = 0
    file_system_resize_pending_latency: int = 0
