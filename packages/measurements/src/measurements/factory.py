"""Measurement factory: shared run identity plus per-job measurement instances.

One factory is built per measurement configuration and run. Each job of the
run derives its own ``BaseMeasurement`` bound to that job's cluster client,
while the identity (uuid, run id, configuration, metadata) stays shared.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from latency_core.models import MeasurementIdentity
from measurements.indexing import index_latency_measurement
from measurements.quantiles import calculate_quantiles
from measurements.validation import verify_measurement_config

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from indexers import IndexerRegistry
    from latency_core.models import JobConfig, LatencyQuantiles, MeasurementConfig
    from latency_core.types import ResultKind
    from measurements.kinds import LatencyKind
    from measurements.settings import GlobalConfig

logger = logging.getLogger("measurements.factory")


class BaseMeasurementFactory:
    def __init__(self, identity: MeasurementIdentity) -> None:
        self._identity = identity

    @classmethod
    def from_config(
        cls,
        global_config: GlobalConfig,
        measurement: MeasurementConfig,
        metadata: Mapping[str, Any] | None = None,
    ) -> BaseMeasurementFactory:
        identity = MeasurementIdentity(
            uuid=global_config.uuid,
            run_id=global_config.run_id,
            config=measurement,
            metadata=dict(metadata or {}),
        )
        return cls(identity)

    @property
    def identity(self) -> MeasurementIdentity:
        return self._identity

    def new_measurement(
        self, job: JobConfig, client: Any = None, rest_config: Any = None
    ) -> BaseMeasurement:
        return BaseMeasurement(self._identity, job, client=client, rest_config=rest_config)


class BaseMeasurement:
    """A measurement bound to one job and its cluster client.

    The cluster client and REST config are passed through untouched; they are
    only used by helpers such as ``measurements.deploy``.
    """

    def __init__(
        self,
        identity: MeasurementIdentity,
        job: JobConfig,
        *,
        client: Any = None,
        rest_config: Any = None,
    ) -> None:
        self.identity = identity
        self.job = job
        self.client = client
        self.rest_config = rest_config
        self._records: list[Any] = []

    @property
    def config(self) -> MeasurementConfig:
        return self.identity.config

    @property
    def uuid(self) -> str:
        return self.identity.uuid

    @property
    def run_id(self) -> str:
        return self.identity.run_id

    @property
    def metadata(self) -> dict[str, Any]:
        """A copy of the run metadata; the shared identity stays untouched."""
        return dict(self.identity.metadata)

    @property
    def records(self) -> list[Any]:
        return list(self._records)

    def validate(self, kind: LatencyKind) -> None:
        verify_measurement_config(self.config, kind.supported_conditions)

    def collect(self, records: Iterable[Any]) -> None:
        self._records.extend(records)

    def quantiles(self, kind: LatencyKind) -> list[LatencyQuantiles]:
        return calculate_quantiles(
            uuid=self.uuid,
            job_name=self.job.name,
            metadata=self.identity.metadata,
            records=self._records,
            get_latency=kind.get_latency,
            metric_name=str(kind.quantiles),
        )

    def result_sets(self, kind: LatencyKind) -> dict[ResultKind, list[dict[str, Any]]]:
        """Raw records and their quantile summaries, keyed by result kind."""
        raw: list[dict[str, Any]] = []
        for record in self._records:
            doc = record.to_document() if hasattr(record, "to_document") else dict(record)
            doc.update(uuid=self.uuid, jobName=self.job.name, metricName=str(kind.raw))
            if not doc.get("metadata"):
                doc["metadata"] = self.metadata
            raw.append(doc)
        quantiles = [q.to_document() for q in self.quantiles(kind)]
        logger.debug(
            "%s: %d raw records, %d quantile summaries", self.job.name, len(raw), len(quantiles)
        )
        return {kind.raw: raw, kind.quantiles: quantiles}

    def index(
        self, result_sets: Mapping[str, list[dict[str, Any]]], registry: IndexerRegistry
    ) -> None:
        index_latency_measurement(self.config, self.job.name, result_sets, registry)
