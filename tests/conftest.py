"""Pytest configuration and fixtures for the latency measurement tests."""

from __future__ import annotations

from datetime import timedelta

import pytest

from indexers import IndexerRegistry, IndexingError, IndexingOpts
from latency_core.models import LatencyThreshold, MeasurementConfig


class RecordingIndexer:
    """Indexer that remembers every write it receives."""

    def __init__(self, *, fail: bool = False) -> None:
        self.fail = fail
        self.calls: list[tuple[list, str]] = []
        self.closed = False

    def index(self, documents, opts: IndexingOpts) -> str:
        self.calls.append((list(documents), opts.metric_name))
        if self.fail:
            raise IndexingError(f"backend rejected {opts.metric_name}")
        return f"indexed {len(documents)} documents"

    def close(self) -> None:
        self.closed = True

    @property
    def metric_names(self) -> list[str]:
        return [name for _, name in self.calls]


@pytest.fixture
def es() -> RecordingIndexer:
    return RecordingIndexer()


@pytest.fixture
def local() -> RecordingIndexer:
    return RecordingIndexer()


@pytest.fixture
def registry(es: RecordingIndexer, local: RecordingIndexer) -> IndexerRegistry:
    reg = IndexerRegistry()
    reg.register("es", es)
    reg.register("local", local)
    return reg


@pytest.fixture
def pod_measurement_config() -> MeasurementConfig:
    return MeasurementConfig(
        name="podLatency",
        thresholds=(
            LatencyThreshold(
                condition_type="Ready", metric="P99", threshold=timedelta(seconds=5)
            ),
            LatencyThreshold(
                condition_type="PodScheduled", metric="Avg", threshold=timedelta(seconds=1)
            ),
        ),
    )
