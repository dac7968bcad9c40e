"""Identity provider port.

The external identity service owns credentials and tokens. This service never
stores passwords and never mints or signs tokens itself.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class PasswordVerification:
    """Successful email/password verification."""

    account_id: str
    email: str
    access_token: str
    refresh_token: str


class IdentityProvider:
    """Abstract identity service."""

    async def create_credential(self, email: str, password: str) -> str:
        """Register an email/password credential and return the new account id.

        Raises CredentialCreationError when the email is already registered.
        """
        raise NotImplementedError

    async def verify_password(self, email: str, password: str) -> PasswordVerification:
        """Raises AuthenticationError carrying the failure reason."""
        raise NotImplementedError

    async def verify_token(self, token: str) -> dict[str, Any]:
        """Return decoded token claims. Raises UnauthorizedError when invalid."""
        raise NotImplementedError

    async def close(self) -> None:
        return None
