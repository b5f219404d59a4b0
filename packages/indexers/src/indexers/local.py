"""Local indexer: writes each metric as a JSON document list on disk."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

from indexers import IndexingError, IndexingOpts

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = logging.getLogger("indexers.local")


class LocalIndexer:
    def __init__(self, metrics_directory: str | Path) -> None:
        self._directory = Path(metrics_directory)

    @property
    def directory(self) -> Path:
        return self._directory

    def index(self, documents: Sequence[Any], opts: IndexingOpts) -> str:
        path = self._directory / f"{opts.metric_name}.json"
        try:
            self._directory.mkdir(parents=True, exist_ok=True)
            path.write_text(json.dumps(list(documents), indent=2, default=str))
        except OSError as exc:
            raise IndexingError(f"Error writing metric {opts.metric_name} to {path}: {exc}") from exc
        logger.debug("Wrote %d documents to %s", len(documents), path)
        return f"File {path} created with {len(documents)} documents"
