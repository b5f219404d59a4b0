"""Indexer configuration and registry construction."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Literal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from indexers import IndexerRegistry
from indexers.local import LocalIndexer
from indexers.opensearch import OpenSearchIndexer

if TYPE_CHECKING:
    from collections.abc import Iterable

logger = logging.getLogger("indexers.config")


class IndexerConfig(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    name: str
    type: Literal["local", "opensearch"]
    metrics_directory: str = "collected-metrics"
    servers: tuple[str, ...] = ()
    index: str = ""
    insecure_skip_verify: bool = False
    timeout_sec: float = 30.0


def build_registry(configs: Iterable[IndexerConfig]) -> IndexerRegistry:
    """Create one indexer per config entry, registered under its name."""
    registry = IndexerRegistry()
    for cfg in configs:
        match cfg.type:
            case "local":
                indexer = LocalIndexer(cfg.metrics_directory)
            case "opensearch":
                indexer = OpenSearchIndexer(
                    servers=cfg.servers,
                    index=cfg.index,
                    insecure_skip_verify=cfg.insecure_skip_verify,
                    timeout_sec=cfg.timeout_sec,
                )
            case _:
                raise ValueError(f"Unknown indexer type '{cfg.type}'")
        registry.register(cfg.name, indexer)
        logger.info("Registered %s indexer %s", cfg.type, cfg.name)
    return registry
