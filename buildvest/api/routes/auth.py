"""
Authentication Routes

Handles account onboarding and login:
- POST /register-step1, /register-step2/{account_id} - investor onboarding
- POST /builder-register-step1, /builder-register-step2/{account_id} - builder onboarding
- POST /login - email/password login
- GET /me - Get current account (bearer token)
"""

from typing import Any

import structlog
from fastapi import APIRouter, Body, Depends, Path
from prometheus_client import Counter
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from buildvest.accounts import (
    AuthenticationGateway,
    RegistrationWorkflow,
    UserAccountStore,
    VerifiedIdentity,
)
from buildvest.api.dependencies import (
    get_account_store,
    get_authentication_gateway,
    get_builder_registration,
    get_investor_registration,
    require_identity,
)
from buildvest.kernel.errors import AuthenticationError, NotFoundError, ValidationError

logger = structlog.get_logger()
router = APIRouter(prefix="/auth", tags=["auth"])

REGISTRATIONS = Counter(
    "buildvest_registrations_total",
    "Completed registration steps",
    ["role", "step"],
)
LOGINS = Counter(
    "buildvest_logins_total",
    "Login attempts by outcome",
    ["outcome"],
)


# =============================================================================
# Models
# =============================================================================


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RegistrationStartedResponse(CamelModel):
    account_id: str
    message: str


class MessageResponse(CamelModel):
    message: str


class LoginResponse(CamelModel):
    account_id: str
    email: str
    role: str
    display_name: str
    access_token: str
    refresh_token: str


class AccountResponse(CamelModel):
    account_id: str
    email: str | None
    role: str | None
    onboarding_status: str | None
    is_verified: bool | None = None
    profile: dict[str, Any]


# =============================================================================
# Helpers
# =============================================================================


def _field(payload: Any, name: str) -> Any:
    return payload.get(name) if isinstance(payload, dict) else None


def _profile_fields(payload: Any) -> dict[str, Any]:
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise ValidationError(
            message="Invalid profile payload",
            errors={"formErrors": ["Expected a JSON object"], "fieldErrors": {}},
        )
    return payload


async def _begin(workflow: RegistrationWorkflow, payload: Any) -> RegistrationStartedResponse:
    account_id = await workflow.begin_registration(_field(payload, "email"), _field(payload, "password"))
    REGISTRATIONS.labels(role=workflow.role.value, step="1").inc()
    return RegistrationStartedResponse(account_id=account_id, message=workflow.path.step1_message)


async def _complete(workflow: RegistrationWorkflow, account_id: str, payload: Any) -> MessageResponse:
    await workflow.complete_registration(account_id, _profile_fields(payload))
    REGISTRATIONS.labels(role=workflow.role.value, step="2").inc()
    return MessageResponse(message=workflow.path.step2_message)


# =============================================================================
# Routes
# =============================================================================


@router.post("/register-step1", response_model=RegistrationStartedResponse, status_code=201)
async def register_step1(
    payload: Any = Body(default=None),
    workflow: RegistrationWorkflow = Depends(get_investor_registration),
) -> RegistrationStartedResponse:
    """Create an investor credential and account (step 1 of 2)."""
    return await _begin(workflow, payload)


@router.post("/register-step2/{account_id}", response_model=MessageResponse)
async def register_step2(
    account_id: str = Path(..., description="Account id returned by step 1"),
    payload: Any = Body(default=None),
    workflow: RegistrationWorkflow = Depends(get_investor_registration),
) -> MessageResponse:
    """Save investor profile details (step 2 of 2)."""
    return await _complete(workflow, account_id, payload)


@router.post("/builder-register-step1", response_model=RegistrationStartedResponse, status_code=201)
async def builder_register_step1(
    payload: Any = Body(default=None),
    workflow: RegistrationWorkflow = Depends(get_builder_registration),
) -> RegistrationStartedResponse:
    """Create a builder credential and account (step 1 of 2). Builders start unverified."""
    return await _begin(workflow, payload)


@router.post("/builder-register-step2/{account_id}", response_model=MessageResponse)
async def builder_register_step2(
    account_id: str = Path(..., description="Account id returned by step 1"),
    payload: Any = Body(default=None),
    workflow: RegistrationWorkflow = Depends(get_builder_registration),
) -> MessageResponse:
    """Submit builder company details for verification (step 2 of 2)."""
    return await _complete(workflow, account_id, payload)


@router.post("/login", response_model=LoginResponse)
async def login(
    payload: Any = Body(default=None),
    gateway: AuthenticationGateway = Depends(get_authentication_gateway),
) -> LoginResponse:
    """
    Log in with email and password.

    Returns the identity service's tokens verbatim with the stored role.
    """
    try:
        result = await gateway.login(_field(payload, "email"), _field(payload, "password"))
    except AuthenticationError as exc:
        LOGINS.labels(outcome=exc.reason.value).inc()
        logger.info("Login rejected", reason=exc.reason.value)
        raise

    LOGINS.labels(outcome="success").inc()
    return LoginResponse(
        account_id=result.account_id,
        email=result.email,
        role=result.role,
        display_name=result.display_name,
        access_token=result.access_token,
        refresh_token=result.refresh_token,
    )


@router.get("/me", response_model=AccountResponse)
async def get_me(
    identity: VerifiedIdentity = Depends(require_identity),
    accounts: UserAccountStore = Depends(get_account_store),
) -> AccountResponse:
    """Get the account behind the bearer token."""
    account = await accounts.get(identity.account_id)
    if account is None:
        raise NotFoundError(message="User not found", code="account.not_found")

    return AccountResponse(
        account_id=account.id,
        email=account.email or identity.email,
        role=account.role,
        onboarding_status=account.onboarding_status,
        is_verified=account.is_verified,
        profile=account.profile,
    )
