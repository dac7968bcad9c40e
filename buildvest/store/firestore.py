"""
Firestore Document Store

Uses the google-cloud-firestore async client. The client is created once at
startup from the FIREBASE_SERVICE_ACCOUNT credentials and shared by all
requests.
"""

from __future__ import annotations

import inspect

import structlog
from google.api_core import exceptions as google_exceptions
from google.cloud import firestore
from google.oauth2 import service_account

from buildvest.config import Settings
from buildvest.kernel.errors import NotFoundError, UpstreamError
from buildvest.store.port import Document, DocumentStore

logger = structlog.get_logger()

SCOPES = ["https://www.googleapis.com/auth/cloud-platform", "https://www.googleapis.com/auth/datastore"]


class FirestoreDocumentStore(DocumentStore):
    """DocumentStore backed by a Firestore AsyncClient."""

    def __init__(self, client: firestore.AsyncClient) -> None:
        self._client = client

    def _ref(self, collection: str, doc_id: str):
        return self._client.collection(collection).document(doc_id)

    async def get(self, collection: str, doc_id: str) -> Document | None:
        try:
            snapshot = await self._ref(collection, doc_id).get()
        except google_exceptions.GoogleAPICallError as exc:
            raise _upstream(exc, "get", collection) from exc
        if not snapshot.exists:
            return None
        return snapshot.to_dict() or {}

    async def set(self, collection: str, doc_id: str, data: Document) -> None:
        try:
            await self._ref(collection, doc_id).set(data)
        except google_exceptions.GoogleAPICallError as exc:
            raise _upstream(exc, "set", collection) from exc

    async def merge(self, collection: str, doc_id: str, data: Document) -> None:
        try:
            await self._ref(collection, doc_id).set(data, merge=True)
        except google_exceptions.GoogleAPICallError as exc:
            raise _upstream(exc, "merge", collection) from exc

    async def update(self, collection: str, doc_id: str, data: Document) -> None:
        try:
            await self._ref(collection, doc_id).update(data)
        except google_exceptions.NotFound as exc:
            raise NotFoundError(message="Document not found", meta={"collection": collection}) from exc
        except google_exceptions.GoogleAPICallError as exc:
            raise _upstream(exc, "update", collection) from exc

    async def delete(self, collection: str, doc_id: str) -> None:
        try:
            await self._ref(collection, doc_id).delete()
        except google_exceptions.GoogleAPICallError as exc:
            raise _upstream(exc, "delete", collection) from exc

    async def add(self, collection: str, data: Document) -> str:
        try:
            _, doc_ref = await self._client.collection(collection).add(data)
        except google_exceptions.GoogleAPICallError as exc:
            raise _upstream(exc, "add", collection) from exc
        return doc_ref.id

    async def list(self, collection: str) -> list[tuple[str, Document]]:
        try:
            return [
                (snapshot.id, snapshot.to_dict() or {})
                async for snapshot in self._client.collection(collection).stream()
            ]
        except google_exceptions.GoogleAPICallError as exc:
            raise _upstream(exc, "list", collection) from exc

    async def close(self) -> None:
        result = self._client.close()
        if inspect.isawaitable(result):
            await result


def _upstream(exc: Exception, operation: str, collection: str) -> UpstreamError:
    logger.warning("Firestore call failed", operation=operation, collection=collection, error=str(exc))
    return UpstreamError(
        message="Document store unavailable",
        code="upstream.document_store",
        meta={"operation": operation, "collection": collection, "error": str(exc)},
    )


def create_firestore_store(settings: Settings) -> FirestoreDocumentStore:
    """Open the Firestore client from settings.

    Fails fast (RuntimeError) when the service account is absent or malformed.
    """
    info = settings.service_account_info()
    credentials = service_account.Credentials.from_service_account_info(info, scopes=SCOPES)
    project_id = settings.resolved_project_id()
    client = firestore.AsyncClient(project=project_id, credentials=credentials)

    logger.info("Firestore client initialized", project_id=project_id)
    return FirestoreDocumentStore(client)
