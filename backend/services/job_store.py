"""Key-value document store the parsed jobs are handed to.

Documents are plain dicts keyed by job id. ``update`` accepts dotted paths
(``"metadata.needsReview"``) so a caller can flag one nested field without
rewriting the document.
"""

import copy
from abc import ABC, abstractmethod
from typing import Any


class DocumentStore(ABC):
    @abstractmethod
    async def set(self, doc_id: str, document: dict[str, Any]) -> None:
        """Create or replace a document."""

    @abstractmethod
    async def update(self, doc_id: str, fields: dict[str, Any]) -> None:
        """Merge fields (dotted paths allowed) into a document, creating it if missing."""

    @abstractmethod
    async def get(self, doc_id: str) -> dict[str, Any] | None:
        """Return a copy of the document, or None."""


class InMemoryDocumentStore(DocumentStore):
    def __init__(self) -> None:
        self._docs: dict[str, dict[str, Any]] = {}

    async def set(self, doc_id: str, document: dict[str, Any]) -> None:
        self._docs[doc_id] = copy.deepcopy(document)

    async def update(self, doc_id: str, fields: dict[str, Any]) -> None:
        doc = self._docs.setdefault(doc_id, {})
        for path, value in fields.items():
            *parents, leaf = path.split(".")
            target = doc
            for key in parents:
                child = target.get(key)
                if not isinstance(child, dict):
                    child = target[key] = {}
                target = child
            target[leaf] = copy.deepcopy(value)

    async def get(self, doc_id: str) -> dict[str, Any] | None:
        doc = self._docs.get(doc_id)
        return copy.deepcopy(doc) if doc is not None else None

    def __len__(self) -> int:
        return len(self._docs)
