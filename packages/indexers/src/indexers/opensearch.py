"""OpenSearch / Elasticsearch indexer using the bulk API."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

import httpx

from indexers import IndexingError, IndexingOpts

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = logging.getLogger("indexers.opensearch")


class OpenSearchIndexer:
    """Bulk-indexes documents into a single index on the first reachable server."""

    def __init__(
        self,
        *,
        servers: Sequence[str],
        index: str,
        insecure_skip_verify: bool = False,
        timeout_sec: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        if not servers:
            raise ValueError("OpenSearch indexer requires at least one server")
        if not index:
            raise ValueError("OpenSearch indexer requires an index name")
        self._servers = [s.rstrip("/") for s in servers]
        self._index = index
        self._client = httpx.Client(
            verify=not insecure_skip_verify,
            timeout=timeout_sec,
            transport=transport,
        )

    def _bulk_body(self, documents: Sequence[Any], metric_name: str) -> str:
        lines: list[str] = []
        action = json.dumps({"index": {"_index": self._index}})
        for doc in documents:
            if isinstance(doc, dict) and "metricName" not in doc:
                doc = {**doc, "metricName": metric_name}
            lines.append(action)
            lines.append(json.dumps(doc, default=str))
        return "\n".join(lines) + "\n"

    def index(self, documents: Sequence[Any], opts: IndexingOpts) -> str:
        if not documents:
            return f"No documents to index for {opts.metric_name}"

        body = self._bulk_body(documents, opts.metric_name)
        last_exc: Exception | None = None
        for server in self._servers:
            try:
                resp = self._client.post(
                    f"{server}/_bulk",
                    content=body,
                    headers={"Content-Type": "application/x-ndjson"},
                )
                resp.raise_for_status()
            except httpx.HTTPStatusError as exc:
                raise IndexingError(
                    f"Bulk request to {server} failed: HTTP {exc.response.status_code}: "
                    f"{exc.response.text[:200]}"
                ) from exc
            except httpx.TransportError as exc:
                logger.warning("OpenSearch server %s unreachable: %s", server, exc)
                last_exc = exc
                continue

            try:
                data = resp.json()
            except ValueError as exc:
                raise IndexingError(
                    f"Bulk response from {server} is not JSON: {resp.text[:200]}"
                ) from exc
            if data.get("errors"):
                failed = sum(1 for item in data.get("items", []) if item.get("index", {}).get("error"))
                raise IndexingError(
                    f"{failed}/{len(documents)} documents rejected by {server} "
                    f"for index {self._index}"
                )
            return f"Indexed {len(documents)} documents in index {self._index}"

        raise IndexingError(f"No OpenSearch server reachable: {last_exc}") from last_exc

    def close(self) -> None:
        self._client.close()
