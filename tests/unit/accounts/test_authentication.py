from __future__ import annotations

from datetime import datetime, timezone

import pytest

from buildvest.accounts import AuthenticationGateway, Role, UserAccountStore, parse_bearer
from buildvest.kernel.errors import AuthenticationError, AuthReason, UnauthorizedError, ValidationError


@pytest.fixture
def accounts(document_store, fake_clock):
    return UserAccountStore(document_store, clock=fake_clock)


@pytest.fixture
def gateway(identity, accounts):
    return AuthenticationGateway(identity=identity, accounts=accounts)


@pytest.mark.asyncio
async def test_login_returns_stored_role_and_display_name(gateway, identity, accounts):
    account_id = identity.add_credential("ops@skylinedevelopers.in", "hunter22")
    await accounts.create(account_id, "ops@skylinedevelopers.in", Role.BUILDER)
    await accounts.merge_profile(account_id, {"fullName": "R. Iyer"})

    result = await gateway.login("ops@skylinedevelopers.in", "hunter22")

    assert result.account_id == account_id
    assert result.role == "builder"
    assert result.display_name == "R. Iyer"
    assert result.access_token == identity.token_for(account_id)
    assert result.refresh_token == f"refresh-{account_id}"


@pytest.mark.asyncio
async def test_login_without_user_document_falls_back_to_investor(gateway, identity):
    identity.add_credential("walkin@example.com", "hunter22")

    result = await gateway.login("walkin@example.com", "hunter22")

    assert result.role == "investor"
    assert result.display_name == "walkin"


@pytest.mark.asyncio
async def test_login_reads_role_from_hand_written_document(gateway, identity, document_store):
    account_id = identity.add_credential("ops@skylinedevelopers.in", "hunter22")
    await document_store.set(
        "users",
        account_id,
        {
            "role": "builder",
            "email": "ops@skylinedevelopers.in",
            "createdAt": datetime(2025, 1, 1, tzinfo=timezone.utc),
        },
    )

    result = await gateway.login("ops@skylinedevelopers.in", "hunter22")

    assert result.role == "builder"
    assert result.display_name == "ops@skylinedevelopers.in"


@pytest.mark.asyncio
async def test_display_name_falls_back_to_login_email(gateway, identity, document_store):
    account_id = identity.add_credential("noemail@example.com", "hunter22")
    await document_store.set("users", account_id, {"role": "builder"})

    result = await gateway.login("noemail@example.com", "hunter22")

    assert result.role == "builder"
    assert result.display_name == "noemail@example.com"

@pytest.mark.asyncio
async def test_strict_lookup_rejects_login_without_user_document(identity, accounts):
    identity.add_credential("walkin@example.com", "hunter22")
    gateway = AuthenticationGateway(identity=identity, accounts=accounts, strict_account_lookup=True)

    with pytest.raises(AuthenticationError) as exc:
        await gateway.login("walkin@example.com", "hunter22")
    assert exc.value.reason is AuthReason.OTHER


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("email", "password", "reason"),
    [
        ("asha@example.com", "wrong-pass", AuthReason.INVALID_PASSWORD),
        ("nobody@example.com", "hunter22", AuthReason.EMAIL_NOT_FOUND),
    ],
)
async def test_login_failure_reasons(gateway, identity, email, password, reason):
    identity.add_credential("asha@example.com", "hunter22")

    with pytest.raises(AuthenticationError) as exc:
        await gateway.login(email, password)
    assert exc.value.reason is reason


@pytest.mark.asyncio
@pytest.mark.parametrize(("email", "password"), [(None, "x"), ("a@b.co", None), ("", "")])
async def test_login_requires_email_and_password(gateway, email, password):
    with pytest.raises(ValidationError) as exc:
        await gateway.login(email, password)
    assert exc.value.message == "Email and password are required"


@pytest.mark.asyncio
async def test_authorize_accepts_valid_bearer(gateway, identity):
    account_id = identity.add_credential("asha@example.com", "hunter22")

    verified = await gateway.authorize(f"Bearer {identity.token_for(account_id)}")

    assert verified.account_id == account_id
    assert verified.email == "asha@example.com"


@pytest.mark.asyncio
@pytest.mark.parametrize("header", [None, "", "Basic abc", "Bearer ", "Bearer token-revoked", "bearer token-uid_1"])
async def test_authorize_rejects_bad_headers(gateway, identity, header):
    identity.revoked.add("token-revoked")

    with pytest.raises(UnauthorizedError):
        await gateway.authorize(header)


@pytest.mark.unit
def test_parse_bearer_strips_prefix():
    assert parse_bearer("Bearer abc.def") == "abc.def"
