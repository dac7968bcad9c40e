"""Identity provider port and the Firebase Identity Toolkit adapter."""

from buildvest.identity.port import IdentityProvider, PasswordVerification

__all__ = ["IdentityProvider", "PasswordVerification"]
