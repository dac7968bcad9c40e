from __future__ import annotations

import pytest

from buildvest.accounts import Role, UserAccount, UserAccountStore
from buildvest.kernel.errors import NotFoundError


@pytest.fixture
def accounts(document_store, fake_clock):
    return UserAccountStore(document_store, clock=fake_clock)


@pytest.mark.asyncio
async def test_create_investor_writes_step1_document(accounts, document_store):
    account = await accounts.create("uid_1", "asha@example.com", Role.INVESTOR)

    assert account.id == "uid_1"
    assert account.role == "investor"
    assert account.onboarding_status == "step1_complete"
    assert await document_store.get("users", "uid_1") == {
        "email": "asha@example.com",
        "role": "investor",
        "onboardingStatus": "step1_complete",
        "createdAt": "2026-01-01T00:00:00Z",
    }


@pytest.mark.asyncio
async def test_create_writes_initial_fields(accounts, document_store):
    account = await accounts.create(
        "uid_2", "ops@skylinedevelopers.in", Role.BUILDER, {"isVerified": False}
    )

    assert account.is_verified is False
    assert (await document_store.get("users", "uid_2"))["isVerified"] is False


@pytest.mark.asyncio
async def test_get_missing_returns_none(accounts):
    assert await accounts.get("nobody") is None


@pytest.mark.asyncio
async def test_merge_profile_completes_onboarding(accounts):
    await accounts.create("uid_1", "asha@example.com", Role.INVESTOR)

    await accounts.merge_profile("uid_1", {"fullName": "Asha Rao", "city": "Pune"})

    account = await accounts.get("uid_1")
    assert account.onboarding_status == "complete"
    assert account.updated_at == "2026-01-01T00:00:00Z"
    assert account.profile == {"fullName": "Asha Rao", "city": "Pune"}
    assert account.display_name == "Asha Rao"


@pytest.mark.asyncio
async def test_merge_profile_requires_existing_account(accounts):
    with pytest.raises(NotFoundError) as exc:
        await accounts.merge_profile("ghost", {"fullName": "Nobody"})
    assert exc.value.code == "account.not_found"


@pytest.mark.unit
def test_display_name_falls_back_to_email():
    account = UserAccount.model_validate({"id": "u", "email": "asha@example.com"})
    assert account.display_name == "asha@example.com"
