"""User account documents (collection `users`, keyed by account id)."""

from __future__ import annotations

from typing import Any

import structlog

from buildvest.accounts.models import OnboardingStatus, Role, UserAccount
from buildvest.kernel.errors import NotFoundError
from buildvest.kernel.time import Clock, timestamp, utc_now
from buildvest.store.port import DocumentStore

logger = structlog.get_logger()

USERS_COLLECTION = "users"


class UserAccountStore:
    def __init__(self, store: DocumentStore, *, clock: Clock = utc_now) -> None:
        self.store = store
        self.clock = clock

    async def create(
        self,
        account_id: str,
        email: str,
        role: Role,
        initial_fields: dict[str, Any] | None = None,
    ) -> UserAccount:
        """Write the step-1 document, including any path-specific `initial_fields`."""
        data: dict[str, Any] = {
            **(initial_fields or {}),
            "email": email,
            "role": role.value,
            "onboardingStatus": OnboardingStatus.STEP1_COMPLETE.value,
            "createdAt": timestamp(self.clock),
        }
        await self.store.set(USERS_COLLECTION, account_id, data)
        logger.info("User account created", account_id=account_id, role=role.value)
        return UserAccount.model_validate({**data, "id": account_id})

    async def get(self, account_id: str) -> UserAccount | None:
        data = await self.store.get(USERS_COLLECTION, account_id)
        if data is None:
            return None
        return UserAccount.model_validate({**data, "id": account_id})

    async def merge_profile(self, account_id: str, profile_fields: dict[str, Any]) -> None:
        """Merge step-2 profile fields and mark onboarding complete.

        Raises NotFoundError when step 1 never created the document.
        """
        if await self.store.get(USERS_COLLECTION, account_id) is None:
            raise NotFoundError(message="User not found", code="account.not_found")

        await self.store.merge(
            USERS_COLLECTION,
            account_id,
            {
                **profile_fields,
                "onboardingStatus": OnboardingStatus.COMPLETE.value,
                "updatedAt": timestamp(self.clock),
            },
        )
