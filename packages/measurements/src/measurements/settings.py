"""Run settings and configuration file loading."""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings

from indexers.config import IndexerConfig
from latency_core.models import MeasurementConfig

if TYPE_CHECKING:
    from pathlib import Path


def _new_id() -> str:
    return str(uuid.uuid4())


class GlobalConfig(BaseSettings):
    """Identity of one benchmark run."""

    uuid: str = Field(default_factory=_new_id, description="Benchmark UUID")
    run_id: str = Field(default_factory=_new_id, description="Run identifier")
    log_level: str = Field(default="INFO", description="Root log level for the CLI")

    model_config = {"env_prefix": "KUBE_LATENCY_"}


def load_measurement_config(path: Path) -> MeasurementConfig:
    """Load a single measurement definition from a YAML file."""
    data = yaml.safe_load(path.read_text()) or {}
    return MeasurementConfig.model_validate(data)


def load_indexer_configs(path: Path) -> list[IndexerConfig]:
    """Load a YAML list of indexer definitions."""
    data = yaml.safe_load(path.read_text()) or []
    if not isinstance(data, list):
        raise ValueError(f"{path}: expected a list of indexers")
    return [IndexerConfig.model_validate(item) for item in data]
