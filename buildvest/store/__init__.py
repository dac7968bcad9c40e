"""Document store port and the Firestore adapter."""

from buildvest.store.port import Document, DocumentStore

__all__ = ["Document", "DocumentStore"]
