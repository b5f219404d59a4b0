"""Indexer protocol and registry for latency result backends.

An indexer persists a named collection of documents. Concrete indexers live in
``indexers.local`` and ``indexers.opensearch``; anything implementing the
``Indexer`` protocol can be registered.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from pydantic import BaseModel

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence


class IndexingOpts(BaseModel):
    metric_name: str


class IndexingError(Exception):
    """Raised when a backend rejects or fails a write."""


@runtime_checkable
class Indexer(Protocol):
    def index(self, documents: Sequence[Any], opts: IndexingOpts) -> str: ...


class IndexerRegistry:
    """Named indexers available to a run.

    Populated once at startup and only read while results are dispatched.
    """

    def __init__(self) -> None:
        self._indexers: dict[str, Indexer] = {}

    def register(self, name: str, indexer: Indexer) -> None:
        if name in self._indexers:
            raise ValueError(f"Indexer '{name}' is already registered")
        if not isinstance(indexer, Indexer):
            raise TypeError(f"{name} does not implement Indexer")
        self._indexers[name] = indexer

    def get(self, name: str) -> Indexer | None:
        return self._indexers.get(name)

    def names(self) -> list[str]:
        return list(self._indexers.keys())

    def items(self) -> Iterator[tuple[str, Indexer]]:
        return iter(list(self._indexers.items()))

    def __contains__(self, name: object) -> bool:
        return name in self._indexers

    def __len__(self) -> int:
        return len(self._indexers)

    def close(self) -> None:
        """Release resources held by registered indexers, such as HTTP clients."""
        for indexer in self._indexers.values():
            close = getattr(indexer, "close", None)
            if callable(close):
                close()

    def __enter__(self) -> IndexerRegistry:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
