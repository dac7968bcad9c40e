"""FastAPI dependencies wiring request handlers to the shared services."""

from __future__ import annotations

from typing import Callable

from fastapi import Depends, Header, Request

from buildvest.accounts import (
    BUILDER_PATH,
    INVESTOR_PATH,
    AuthenticationGateway,
    RegistrationPath,
    RegistrationWorkflow,
    UserAccountStore,
    VerifiedIdentity,
)
from buildvest.api.services import Services
from buildvest.resources import ResourceKind, ResourceRepository


def get_services(request: Request) -> Services:
    services = getattr(request.app.state, "services", None)
    if services is None:
        raise RuntimeError("Services not initialized. Application lifespan has not run.")
    return services


def get_account_store(services: Services = Depends(get_services)) -> UserAccountStore:
    return UserAccountStore(services.store, clock=services.clock)


def get_authentication_gateway(
    services: Services = Depends(get_services),
    accounts: UserAccountStore = Depends(get_account_store),
) -> AuthenticationGateway:
    return AuthenticationGateway(
        identity=services.identity,
        accounts=accounts,
        strict_account_lookup=services.settings.strict_account_lookup,
    )


def _registration_dependency(path: RegistrationPath) -> Callable[..., RegistrationWorkflow]:
    def get_workflow(
        services: Services = Depends(get_services),
        accounts: UserAccountStore = Depends(get_account_store),
    ) -> RegistrationWorkflow:
        return RegistrationWorkflow(path, identity=services.identity, accounts=accounts)

    return get_workflow


get_investor_registration = _registration_dependency(INVESTOR_PATH)
get_builder_registration = _registration_dependency(BUILDER_PATH)


def repository_dependency(kind: ResourceKind) -> Callable[..., ResourceRepository]:
    def get_repository(services: Services = Depends(get_services)) -> ResourceRepository:
        return ResourceRepository(services.store, kind, clock=services.clock)

    return get_repository


async def require_identity(
    authorization: str | None = Header(default=None),
    gateway: AuthenticationGateway = Depends(get_authentication_gateway),
) -> VerifiedIdentity:
    """
    Dependency that requires a valid bearer token.

    ```python
    @router.get("/auth/me")
    async def me(identity: VerifiedIdentity = Depends(require_identity)):
        ...
    ```
    """
    return await gateway.authorize(authorization)


async def guard_resource_writes(
    authorization: str | None = Header(default=None),
    services: Services = Depends(get_services),
    gateway: AuthenticationGateway = Depends(get_authentication_gateway),
) -> VerifiedIdentity | None:
    """Require a bearer token on resource writes when PROTECT_RESOURCE_WRITES is set."""
    if not services.settings.protect_resource_writes:
        return None
    return await gateway.authorize(authorization)
