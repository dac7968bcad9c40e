from __future__ import annotations

import re
from enum import Enum
from typing import Any


_ERROR_CODE_RE = re.compile(r"^[a-z][a-z0-9_]*(\.[a-z][a-z0-9_]*)*$")


class BuildvestError(Exception):
    """Base typed error for Buildvest.

    Goals:
    - Stable `code` for programmatic handling across clients.
    - Human-readable `message` for UI surfaces.
    - Optional `meta` payload for debugging (safe-to-expose only).
    """

    expose_meta = True

    def __init__(
        self,
        *,
        code: str,
        message: str,
        status_code: int = 500,
        meta: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        if not _ERROR_CODE_RE.fullmatch(code):
            raise ValueError(
                "Invalid Buildvest error code. Expected dot-separated lowercase tokens, "
                f"got: {code!r}"
            )
        super().__init__(message)
        self.code = code
        self.message = message
        self.status_code = int(status_code)
        self.meta = dict(meta or {})
        self.headers = dict(headers or {})

    def to_public_dict(self, *, request_id: str | None, include_meta: bool = True) -> dict[str, Any]:
        payload: dict[str, Any] = {
            # Keep `detail` for compatibility with FastAPI error surfaces.
            "detail": self.message,
            "code": self.code,
        }
        if request_id:
            payload["request_id"] = request_id
        if self.meta and include_meta:
            payload["meta"] = self.meta
        return payload


class ValidationError(BuildvestError):
    def __init__(
        self,
        *,
        message: str = "Validation error",
        code: str = "request.validation_error",
        errors: dict[str, Any] | None = None,
    ):
        meta = {"errors": errors} if errors is not None else None
        super().__init__(code=code, message=message, status_code=400, meta=meta)
        self.errors = errors or {}


class NotFoundError(BuildvestError):
    def __init__(self, *, message: str = "Not found", code: str = "resource.not_found", meta: dict[str, Any] | None = None):
        super().__init__(code=code, message=message, status_code=404, meta=meta)


class UnauthorizedError(BuildvestError):
    def __init__(
        self,
        *,
        message: str = "Unauthorized",
        code: str = "auth.unauthorized",
        meta: dict[str, Any] | None = None,
    ):
        super().__init__(
            code=code,
            message=message,
            status_code=401,
            meta=meta,
            headers={"WWW-Authenticate": "Bearer"},
        )


class CredentialCreationError(BuildvestError):
    """The identity service refused to create a credential (e.g. email taken)."""

    def __init__(
        self,
        *,
        message: str = "Email is already registered",
        code: str = "auth.credential_exists",
        meta: dict[str, Any] | None = None,
    ):
        super().__init__(code=code, message=message, status_code=409, meta=meta)


class AuthReason(str, Enum):
    INVALID_PASSWORD = "invalid_password"
    EMAIL_NOT_FOUND = "email_not_found"
    OTHER = "other"


_AUTH_MESSAGES = {
    AuthReason.INVALID_PASSWORD: ("Incorrect password", "auth.invalid_password"),
    AuthReason.EMAIL_NOT_FOUND: ("Email not found", "auth.email_not_found"),
    AuthReason.OTHER: ("Login failed", "auth.login_failed"),
}


class AuthenticationError(BuildvestError):
    """Credentials were rejected at login.

    The message is always one of a small user-facing set, chosen by `reason`.
    """

    def __init__(self, reason: AuthReason = AuthReason.OTHER):
        message, code = _AUTH_MESSAGES[reason]
        super().__init__(code=code, message=message, status_code=401)
        self.reason = reason


class UpstreamError(BuildvestError):
    expose_meta = False

    def __init__(
        self,
        *,
        message: str = "Upstream service error",
        code: str = "upstream.error",
        meta: dict[str, Any] | None = None,
        status_code: int = 500,
    ):
        super().__init__(code=code, message=message, status_code=status_code, meta=meta)
