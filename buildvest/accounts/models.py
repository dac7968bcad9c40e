"""User account models."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Role(str, Enum):
    INVESTOR = "investor"
    BUILDER = "builder"


class OnboardingStatus(str, Enum):
    STEP1_COMPLETE = "step1_complete"
    COMPLETE = "complete"


# Written at step 1 and never taken from a step-2 profile payload.
OWNED_FIELDS = frozenset({"id", "uid", "email", "role", "onboardingStatus", "isVerified", "createdAt"})


class UserAccount(BaseModel):
    """A stored user document.

    Profile fields merged at step 2 are kept flat in the document and exposed
    through `profile`.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: str
    email: str | None = None
    role: str | None = None
    onboarding_status: str | None = Field(default=None, alias="onboardingStatus")
    is_verified: bool | None = Field(default=None, alias="isVerified")
    # Documents written outside this service may hold native Firestore timestamps.
    created_at: Any = Field(default=None, alias="createdAt")
    updated_at: Any = Field(default=None, alias="updatedAt")

    @property
    def profile(self) -> dict[str, Any]:
        return {k: v for k, v in (self.model_extra or {}).items() if k not in OWNED_FIELDS}

    @property
    def display_name(self) -> str | None:
        full_name = self.profile.get("fullName")
        if isinstance(full_name, str) and full_name:
            return full_name
        return self.email or None
