"""
Resource Routes

Generic CRUD over one document collection. One router is built per
`ResourceKind`:
- GET /{collection} - List records
- GET /{collection}/{id} - Get record
- POST /{collection} - Create record
- PATCH /{collection}/{id} - Update supplied fields
- DELETE /{collection}/{id} - Delete record
"""

from typing import Any

from fastapi import APIRouter, Body, Depends, Path, Response
from prometheus_client import Counter

from buildvest.api.dependencies import guard_resource_writes, repository_dependency
from buildvest.resources import RESOURCE_KINDS, ResourceKind, ResourceRepository

RESOURCE_OPERATIONS = Counter(
    "buildvest_resource_operations_total",
    "Resource CRUD operations",
    ["collection", "operation"],
)


def build_resource_router(kind: ResourceKind) -> APIRouter:
    router = APIRouter(prefix=f"/{kind.collection}", tags=[kind.collection])
    get_repository = repository_dependency(kind)
    label = kind.label.lower()

    def count(operation: str) -> None:
        RESOURCE_OPERATIONS.labels(collection=kind.collection, operation=operation).inc()

    @router.get("", summary=f"List {kind.collection}")
    async def list_records(
        repository: ResourceRepository = Depends(get_repository),
    ) -> list[dict[str, Any]]:
        count("list")
        return await repository.list()

    @router.get("/{resource_id}", summary=f"Get {label}")
    async def get_record(
        resource_id: str = Path(...),
        repository: ResourceRepository = Depends(get_repository),
    ) -> dict[str, Any]:
        count("get")
        return await repository.get(resource_id)

    @router.post(
        "",
        status_code=201,
        summary=f"Create {label}",
        dependencies=[Depends(guard_resource_writes)],
    )
    async def create_record(
        payload: Any = Body(default=None),
        repository: ResourceRepository = Depends(get_repository),
    ) -> dict[str, Any]:
        record = await repository.create(payload)
        count("create")
        return record

    @router.patch(
        "/{resource_id}",
        summary=f"Update {label}",
        dependencies=[Depends(guard_resource_writes)],
    )
    async def update_record(
        resource_id: str = Path(...),
        payload: Any = Body(default=None),
        repository: ResourceRepository = Depends(get_repository),
    ) -> dict[str, Any]:
        record = await repository.update(resource_id, payload)
        count("update")
        return record

    @router.delete(
        "/{resource_id}",
        status_code=204,
        summary=f"Delete {label}",
        dependencies=[Depends(guard_resource_writes)],
    )
    async def delete_record(
        resource_id: str = Path(...),
        repository: ResourceRepository = Depends(get_repository),
    ) -> Response:
        await repository.delete(resource_id)
        count("delete")
        return Response(status_code=204)

    return router


resource_routers = [build_resource_router(kind) for kind in RESOURCE_KINDS]
