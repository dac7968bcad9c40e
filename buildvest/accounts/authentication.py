"""
Authentication Gateway

- login: verify email/password with the identity service, then read the
  caller's role and display name from the stored user document
- authorize: gate for protected routes; verifies a bearer token
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import structlog

from buildvest.accounts.models import Role
from buildvest.accounts.store import UserAccountStore
from buildvest.identity.port import IdentityProvider
from buildvest.kernel.errors import AuthenticationError, AuthReason, UnauthorizedError
from buildvest.validation import LoginCredentials, validate_payload

logger = structlog.get_logger()

BEARER_PREFIX = "Bearer "


@dataclass(frozen=True)
class LoginResult:
    account_id: str
    email: str
    role: str
    display_name: str
    access_token: str
    refresh_token: str


@dataclass(frozen=True)
class VerifiedIdentity:
    """Decoded bearer-token claims for downstream handlers."""

    account_id: str
    email: str | None
    claims: dict[str, Any] = field(default_factory=dict)


def parse_bearer(authorization: str | None) -> str:
    """Extract the token from an `Authorization: Bearer <token>` header value."""
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        raise UnauthorizedError()
    token = authorization[len(BEARER_PREFIX):].strip()
    if not token:
        raise UnauthorizedError()
    return token


class AuthenticationGateway:
    def __init__(
        self,
        *,
        identity: IdentityProvider,
        accounts: UserAccountStore,
        strict_account_lookup: bool = False,
    ) -> None:
        self.identity = identity
        self.accounts = accounts
        self.strict_account_lookup = strict_account_lookup

    async def login(self, email: Any, password: Any) -> LoginResult:
        supplied = {k: v for k, v in (("email", email), ("password", password)) if v is not None}
        credentials = validate_payload(
            LoginCredentials, supplied, message="Email and password are required"
        )

        verified = await self.identity.verify_password(credentials["email"], credentials["password"])

        account = await self.accounts.get(verified.account_id)
        if account is None:
            # Credential exists upstream with no user document (e.g. created by hand
            # in the Firebase console).
            logger.warning("Login for account without user document", account_id=verified.account_id)
            if self.strict_account_lookup:
                raise AuthenticationError(AuthReason.OTHER)
            role = Role.INVESTOR.value
            display_name = credentials["email"].split("@")[0]
        else:
            role = account.role or Role.INVESTOR.value
            display_name = account.display_name or credentials["email"]

        logger.info("Login succeeded", account_id=verified.account_id, role=role)
        return LoginResult(
            account_id=verified.account_id,
            email=verified.email,
            role=role,
            display_name=display_name,
            access_token=verified.access_token,
            refresh_token=verified.refresh_token,
        )

    async def authorize(self, authorization: str | None) -> VerifiedIdentity:
        token = parse_bearer(authorization)
        claims = await self.identity.verify_token(token)

        account_id = claims.get("sub") or claims.get("user_id") or claims.get("uid")
        if not account_id:
            raise UnauthorizedError(message="Invalid token")
        return VerifiedIdentity(account_id=account_id, email=claims.get("email"), claims=claims)
