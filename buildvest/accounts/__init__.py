"""User accounts: onboarding, login and bearer-token authorization."""

from buildvest.accounts.authentication import (
    AuthenticationGateway,
    LoginResult,
    VerifiedIdentity,
    parse_bearer,
)
from buildvest.accounts.models import OnboardingStatus, Role, UserAccount
from buildvest.accounts.registration import (
    BUILDER_PATH,
    INVESTOR_PATH,
    RegistrationPath,
    RegistrationWorkflow,
)
from buildvest.accounts.store import USERS_COLLECTION, UserAccountStore

__all__ = [
    "AuthenticationGateway",
    "LoginResult",
    "VerifiedIdentity",
    "parse_bearer",
    "OnboardingStatus",
    "Role",
    "UserAccount",
    "BUILDER_PATH",
    "INVESTOR_PATH",
    "RegistrationPath",
    "RegistrationWorkflow",
    "USERS_COLLECTION",
    "UserAccountStore",
]
