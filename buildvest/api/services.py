"""
Process-wide service handles

The document store and identity provider are opened once in the application
lifespan and stored on `app.state.services`. Request handlers receive them
through the dependencies in `buildvest.api.dependencies`.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import httpx
import structlog

from buildvest.config import Settings
from buildvest.identity.port import IdentityProvider
from buildvest.kernel.time import Clock, utc_now
from buildvest.store.port import DocumentStore

logger = structlog.get_logger()


@dataclass
class Services:
    settings: Settings
    store: DocumentStore
    identity: IdentityProvider
    clock: Clock = utc_now
    http_client: httpx.AsyncClient | None = field(default=None)

    async def close(self) -> None:
        await self.identity.close()
        await self.store.close()
        if self.http_client is not None:
            await self.http_client.aclose()


def create_services(settings: Settings) -> Services:
    """Open the Firestore client and the identity provider.

    Raises RuntimeError when required configuration is absent.
    """
    from buildvest.identity.firebase import create_identity_provider
    from buildvest.store.firestore import create_firestore_store

    if not settings.firebase_api_key:
        raise RuntimeError("Missing FIREBASE_API_KEY environment variable")

    store = create_firestore_store(settings)
    http_client = httpx.AsyncClient(timeout=settings.identity_timeout_seconds)
    identity = create_identity_provider(settings, http_client)
    logger.info("Services initialized", environment=settings.environment)

    return Services(settings=settings, store=store, identity=identity, http_client=http_client)
