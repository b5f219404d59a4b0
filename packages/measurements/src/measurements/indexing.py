"""Result routing: sends each latency result set to its indexer(s).

Raw latency result sets go to the configured timeseries indexer and quantile
result sets to the configured quantiles indexer. Anything else, or any kind
without a dedicated indexer, is broadcast to every registered indexer.
A failed write is logged and never stops the remaining writes.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from indexers import IndexingOpts
from latency_core.types import ResultKind

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from indexers import Indexer, IndexerRegistry
    from latency_core.models import MeasurementConfig

logger = logging.getLogger("measurements.indexing")


def select_indexers(
    config: MeasurementConfig, metric_name: str, registry: IndexerRegistry
) -> list[tuple[str, Indexer]]:
    """Return the (name, indexer) pairs a result set is delivered to."""
    kind = ResultKind.from_metric_name(metric_name)
    dedicated = ""
    if config.timeseries_indexer and kind is not None and kind.is_raw:
        dedicated = config.timeseries_indexer
    elif config.quantiles_indexer and kind is not None and kind.is_quantiles:
        dedicated = config.quantiles_indexer

    if not dedicated:
        return list(registry.items())

    indexer = registry.get(dedicated)
    if indexer is None:
        logger.error(
            "Indexer %s configured for %s is not registered, available: %s",
            dedicated,
            metric_name,
            ", ".join(registry.names()),
        )
        return []
    return [(dedicated, indexer)]


def _index_documents(
    name: str, indexer: Indexer, metric_name: str, job_name: str, documents: Sequence[Any]
) -> None:
    logger.info("Indexing metric %s", metric_name)
    opts = IndexingOpts(metric_name=f"{metric_name}-{job_name}")
    logger.debug("Indexing [%d] documents: %s", len(documents), metric_name)
    try:
        resp = indexer.index(documents, opts)
    except Exception:
        logger.warning(
            "Indexer %s failed for metric %s", name, opts.metric_name, exc_info=True
        )
        return
    logger.info(resp)


def index_latency_measurement(
    config: MeasurementConfig,
    job_name: str,
    metric_map: Mapping[str, Sequence[Any]],
    registry: IndexerRegistry,
) -> None:
    """Deliver every result set in ``metric_map`` to its indexer(s)."""
    for metric_name, documents in metric_map.items():
        for name, indexer in select_indexers(config, metric_name, registry):
            _index_documents(name, indexer, str(metric_name), job_name, documents)
