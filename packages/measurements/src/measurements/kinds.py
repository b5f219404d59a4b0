"""Latency measurement kinds: condition vocabulary and latency extraction per entity kind."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict

from latency_core.types import ResultKind
from measurements.models import NodeLatency, PodLatency, PvcLatency, ServiceLatency


class UnknownLatencyKindError(ValueError):
    def __init__(self, name: str) -> None:
        available = ", ".join(LATENCY_KINDS.keys())
        super().__init__(f"Unknown latency kind '{name}'. Available: {available}")


class LatencyKind(BaseModel):
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str
    record_type: type[BaseModel]
    raw: ResultKind
    quantiles: ResultKind
    supported_conditions: frozenset[str]
    get_latency: Callable[[Any], Mapping[str, float]]


def pod_latencies(record: PodLatency) -> dict[str, float]:
    return {
        "PodScheduled": record.scheduling_latency,
        "PodReadyToStartContainers": record.ready_to_start_containers_latency,
        "Initialized": record.initialized_latency,
        "ContainersReady": record.containers_ready_latency,
        "Ready": record.pod_ready_latency,
    }


def service_latencies(record: ServiceLatency) -> dict[str, float]:
    latencies = {"Ready": record.ready_latency}
    if record.service_type == "LoadBalancer":
        latencies["IPAssigned"] = record.ip_assigned_latency
    return latencies


def node_latencies(record: NodeLatency) -> dict[str, float]:
    return {
        "NodeMemoryPressure": record.node_memory_pressure_latency,
        "NodeDiskPressure": record.node_disk_pressure_latency,
        "NodePIDPressure": record.node_pid_pressure_latency,
        "Ready": record.node_ready_latency,
    }


def pvc_latencies(record: PvcLatency) -> dict[str, float]:
    # Only phases the claim actually went through.
    latencies = {
        "Pending": record.pending_latency,
        "Bound": record.bound_latency,
        "Lost": record.lost_latency,
        "Resizing": record.resizing_latency,
        "FileSystemResizePending": record.file_system_resize_pending_latency,
    }
    return {condition: latency for condition, latency in latencies.items() if latency > 0}


POD_LATENCY = LatencyKind(
    name="pod",
    record_type=PodLatency,
    raw=ResultKind.POD_LATENCY,
    quantiles=ResultKind.POD_LATENCY_QUANTILES,
    supported_conditions=frozenset(
        {"PodScheduled", "PodReadyToStartContainers", "Initialized", "ContainersReady", "Ready"}
    ),
    get_latency=pod_latencies,
)

SERVICE_LATENCY = LatencyKind(
    name="service",
    record_type=ServiceLatency,
    raw=ResultKind.SVC_LATENCY,
    quantiles=ResultKind.SVC_LATENCY_QUANTILES,
    supported_conditions=frozenset({"Ready", "IPAssigned"}),
    get_latency=service_latencies,
)

NODE_LATENCY = LatencyKind(
    name="node",
    record_type=NodeLatency,
    raw=ResultKind.NODE_LATENCY,
    quantiles=ResultKind.NODE_LATENCY_QUANTILES,
    supported_conditions=frozenset(
        {"NodeMemoryPressure", "NodeDiskPressure", "NodePIDPressure", "Ready"}
    ),
    get_latency=node_latencies,
)

PVC_LATENCY = LatencyKind(
    name="pvc",
    record_type=PvcLatency,
    raw=ResultKind.PVC_LATENCY,
    quantiles=ResultKind.PVC_LATENCY_QUANTILES,
    supported_conditions=frozenset(
        {"Pending", "Bound", "Lost", "Resizing", "FileSystemResizePending"}
    ),
    get_latency=pvc_latencies,
)

LATENCY_KINDS: dict[str, LatencyKind] = {
    kind.name: kind for kind in (POD_LATENCY, SERVICE_LATENCY, NODE_LATENCY, PVC_LATENCY)
}


def get_latency_kind(name: str) -> LatencyKind:
    kind = LATENCY_KINDS.get(name)
    if kind is None:
        raise UnknownLatencyKindError(name)
    return kind
