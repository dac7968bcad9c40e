import pytest

from buildvest.kernel.errors import (
    AuthenticationError,
    AuthReason,
    BuildvestError,
    CredentialCreationError,
    NotFoundError,
)


@pytest.mark.unit
def test_error_code_must_be_dotted_lowercase():
    with pytest.raises(ValueError):
        BuildvestError(code="Not-A-Code", message="x")


@pytest.mark.unit
def test_to_public_dict_omits_empty_meta_and_request_id():
    err = NotFoundError(message="Builder not found")
    assert err.to_public_dict(request_id=None) == {"detail": "Builder not found", "code": "resource.not_found"}


@pytest.mark.unit
def test_to_public_dict_can_suppress_meta():
    err = NotFoundError(meta={"id": "b1"})
    assert "meta" in err.to_public_dict(request_id="r1")
    assert "meta" not in err.to_public_dict(request_id="r1", include_meta=False)


@pytest.mark.unit
@pytest.mark.parametrize(
    ("reason", "message"),
    [
        (AuthReason.INVALID_PASSWORD, "Incorrect password"),
        (AuthReason.EMAIL_NOT_FOUND, "Email not found"),
        (AuthReason.OTHER, "Login failed"),
    ],
)
def test_authentication_error_messages(reason, message):
    err = AuthenticationError(reason)
    assert err.message == message
    assert err.status_code == 401
    assert err.reason is reason


@pytest.mark.unit
def test_credential_creation_error_is_conflict():
    assert CredentialCreationError().status_code == 409
