"""Document store port.

Collections hold flat key-value documents addressed by id. Each single-document
write is atomic; there are no cross-document transactions. Routes and services
only see this interface, never the Firestore client.
"""

from __future__ import annotations

from typing import Any

Document = dict[str, Any]


class DocumentStore:
    """Abstract async document store."""

    async def get(self, collection: str, doc_id: str) -> Document | None:
        """Return the document fields, or None when the id is absent."""
        raise NotImplementedError

    async def set(self, collection: str, doc_id: str, data: Document) -> None:
        """Create or replace a document under a caller-chosen id."""
        raise NotImplementedError

    async def merge(self, collection: str, doc_id: str, data: Document) -> None:
        """Write the given fields, keeping all others (creates when absent)."""
        raise NotImplementedError

    async def update(self, collection: str, doc_id: str, data: Document) -> None:
        """Write the given fields of an existing document.

        Raises NotFoundError when the document does not exist.
        """
        raise NotImplementedError

    async def delete(self, collection: str, doc_id: str) -> None:
        raise NotImplementedError

    async def add(self, collection: str, data: Document) -> str:
        """Create a document under a store-generated id and return the id."""
        raise NotImplementedError

    async def list(self, collection: str) -> list[tuple[str, Document]]:
        raise NotImplementedError

    async def close(self) -> None:
        return None
