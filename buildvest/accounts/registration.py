"""
Two-step Registration

Step 1 creates the identity credential and a minimal user document
(`onboardingStatus=step1_complete`). Step 2 merges the profile into that same
document and marks onboarding complete.

Investor and builder onboarding are the same workflow with a different
`RegistrationPath`.

Known limitation: the credential is created before the user document. If the
document write fails, the identity service keeps an orphaned credential and a
retry with the same email fails with CredentialCreationError. There is no
rollback.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import structlog

from buildvest.accounts.models import OWNED_FIELDS, Role
from buildvest.accounts.store import UserAccountStore
from buildvest.identity.port import IdentityProvider
from buildvest.validation import RegistrationCredentials, validate_payload

logger = structlog.get_logger()


@dataclass(frozen=True)
class RegistrationPath:
    role: Role
    step1_message: str
    step2_message: str
    # Extra fields written into the step-1 document.
    initial_fields: dict[str, Any] = field(default_factory=dict)


INVESTOR_PATH = RegistrationPath(
    role=Role.INVESTOR,
    step1_message="Account created. Please proceed to profile details.",
    step2_message="Profile saved successfully",
)

BUILDER_PATH = RegistrationPath(
    role=Role.BUILDER,
    step1_message="Builder account created. Please proceed to company details.",
    step2_message="Builder profile submitted for verification",
    initial_fields={"isVerified": False},
)


class RegistrationWorkflow:
    def __init__(
        self,
        path: RegistrationPath,
        *,
        identity: IdentityProvider,
        accounts: UserAccountStore,
    ) -> None:
        self.path = path
        self.identity = identity
        self.accounts = accounts

    @property
    def role(self) -> Role:
        return self.path.role

    async def begin_registration(self, email: Any, password: Any) -> str:
        """Validate credentials, create the credential, then the user document.

        Returns the new account id.
        """
        supplied = {k: v for k, v in (("email", email), ("password", password)) if v is not None}
        credentials = validate_payload(RegistrationCredentials, supplied, message="Invalid credentials")
        email = credentials["email"]

        account_id = await self.identity.create_credential(email, credentials["password"])
        await self.accounts.create(account_id, email, self.role, self.path.initial_fields)

        logger.info("Registration step 1 complete", account_id=account_id, role=self.role.value)
        return account_id

    async def complete_registration(self, account_id: str, profile_fields: dict[str, Any]) -> None:
        """Merge profile fields into an existing step-1 account.

        Safe to repeat: later calls overwrite previously merged fields.
        """
        dropped = sorted(OWNED_FIELDS.intersection(profile_fields))
        if dropped:
            logger.warning(
                "Ignoring step-1 owned fields in profile",
                account_id=account_id,
                fields=dropped,
            )
        profile = {k: v for k, v in profile_fields.items() if k not in OWNED_FIELDS}

        await self.accounts.merge_profile(account_id, profile)
        logger.info("Registration step 2 complete", account_id=account_id, role=self.role.value)
