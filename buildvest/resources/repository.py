"""
Resource Repository

One CRUD engine over a single document collection, parameterized by a
`ResourceKind`. Builders and projects are two instances of it.

Writes are validated before the store is touched; a rejected payload never
causes a mutation.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import structlog
from pydantic import BaseModel

from buildvest.kernel.errors import NotFoundError
from buildvest.kernel.time import Clock, timestamp, utc_now
from buildvest.store.port import DocumentStore
from buildvest.validation import BuilderRecord, ProjectRecord, validate_payload

logger = structlog.get_logger()

Record = dict[str, Any]


@dataclass(frozen=True)
class ResourceKind:
    collection: str
    label: str
    schema: type[BaseModel]
    # Numeric counters that start at 0 when omitted on create.
    counters: tuple[str, ...] = ()

    @property
    def not_found_message(self) -> str:
        return f"{self.label} not found"

    @property
    def invalid_message(self) -> str:
        return f"Invalid {self.label.lower()} payload"


BUILDERS = ResourceKind(collection="builders", label="Builder", schema=BuilderRecord)
PROJECTS = ResourceKind(
    collection="projects",
    label="Project",
    schema=ProjectRecord,
    counters=("views", "inquiries"),
)

RESOURCE_KINDS = (BUILDERS, PROJECTS)


def _with_id(doc_id: str, data: dict[str, Any]) -> Record:
    return {"id": doc_id, **data}


class ResourceRepository:
    def __init__(self, store: DocumentStore, kind: ResourceKind, *, clock: Clock = utc_now) -> None:
        self.store = store
        self.kind = kind
        self.clock = clock

    @property
    def collection(self) -> str:
        return self.kind.collection

    def _not_found(self, resource_id: str) -> NotFoundError:
        return NotFoundError(
            message=self.kind.not_found_message,
            meta={"collection": self.collection, "id": resource_id},
        )

    async def list(self) -> list[Record]:
        """All records, in store order."""
        return [_with_id(doc_id, data) for doc_id, data in await self.store.list(self.collection)]

    async def get(self, resource_id: str) -> Record:
        data = await self.store.get(self.collection, resource_id)
        if data is None:
            raise self._not_found(resource_id)
        return _with_id(resource_id, data)

    async def create(self, payload: Any) -> Record:
        fields = validate_payload(self.kind.schema, payload, message=self.kind.invalid_message)
        for counter in self.kind.counters:
            if fields.get(counter) is None:
                fields[counter] = 0
        fields["createdAt"] = timestamp(self.clock)

        resource_id = await self.store.add(self.collection, fields)
        logger.info("Resource created", collection=self.collection, id=resource_id)
        return await self.get(resource_id)

    async def update(self, resource_id: str, payload: Any) -> Record:
        """Merge the supplied fields; unspecified fields are left untouched."""
        fields = validate_payload(
            self.kind.schema, payload, partial=True, message=self.kind.invalid_message
        )
        if await self.store.get(self.collection, resource_id) is None:
            raise self._not_found(resource_id)

        fields["updatedAt"] = timestamp(self.clock)
        await self.store.update(self.collection, resource_id, fields)
        logger.info("Resource updated", collection=self.collection, id=resource_id, fields=sorted(fields))
        return await self.get(resource_id)

    async def delete(self, resource_id: str) -> None:
        if await self.store.get(self.collection, resource_id) is None:
            raise self._not_found(resource_id)
        await self.store.delete(self.collection, resource_id)
        logger.info("Resource deleted", collection=self.collection, id=resource_id)
