"""
Firebase Identity Toolkit provider

Credential creation and password sign-in go through the Identity Toolkit REST
API (API-key authenticated). ID tokens are verified against Google's public
certificates with google-auth.

Identity Toolkit failures come back as HTTP 400 with a body like
``{"error": {"message": "EMAIL_NOT_FOUND"}}``; the message may carry a suffix
(``"WEAK_PASSWORD : Password should be at least 6 characters"``).
"""

from __future__ import annotations

import asyncio
from threading import RLock
from typing import Any

import google.auth.exceptions
import google.auth.transport.requests
import google.oauth2.id_token
import httpx
import requests
import structlog

from buildvest.config import Settings
from buildvest.identity.port import IdentityProvider, PasswordVerification
from buildvest.kernel.errors import (
    AuthenticationError,
    AuthReason,
    CredentialCreationError,
    UnauthorizedError,
    UpstreamError,
)

logger = structlog.get_logger()


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return ""
    error = body.get("error") if isinstance(body, dict) else None
    if isinstance(error, dict):
        return str(error.get("message") or "")
    return ""


def auth_reason_from_message(message: str) -> AuthReason:
    """Map an Identity Toolkit error message onto a login failure reason."""
    if "INVALID_PASSWORD" in message:
        return AuthReason.INVALID_PASSWORD
    if "EMAIL_NOT_FOUND" in message:
        return AuthReason.EMAIL_NOT_FOUND
    return AuthReason.OTHER


class IdentityToolkitProvider(IdentityProvider):
    """IdentityProvider backed by Firebase Authentication."""

    def __init__(
        self,
        *,
        api_key: str,
        project_id: str,
        http_client: httpx.AsyncClient,
        base_url: str = "https://identitytoolkit.googleapis.com/v1",
    ) -> None:
        self.api_key = api_key
        self.project_id = project_id
        self.base_url = base_url.rstrip("/")
        self._http = http_client
        self._session = requests.Session()
        # google-auth's transport session is not documented as thread safe
        self._session_lock = RLock()

    async def _post(self, endpoint: str, payload: dict[str, Any]) -> httpx.Response:
        url = f"{self.base_url}/accounts:{endpoint}"
        try:
            return await self._http.post(url, params={"key": self.api_key}, json=payload)
        except httpx.HTTPError as exc:
            logger.warning("Identity Toolkit request failed", endpoint=endpoint, error=str(exc))
            raise UpstreamError(
                message="Identity service unavailable",
                code="upstream.identity",
                meta={"endpoint": endpoint, "error": str(exc)},
            ) from exc

    async def create_credential(self, email: str, password: str) -> str:
        response = await self._post(
            "signUp",
            {"email": email, "password": password, "returnSecureToken": False},
        )
        if response.status_code == 200:
            return response.json()["localId"]

        message = _error_message(response)
        if message.startswith("EMAIL_EXISTS"):
            raise CredentialCreationError()
        logger.warning("Credential creation rejected", status=response.status_code, reason=message)
        raise UpstreamError(
            message="Could not create credential",
            code="upstream.identity",
            meta={"status": response.status_code, "reason": message},
        )

    async def verify_password(self, email: str, password: str) -> PasswordVerification:
        response = await self._post(
            "signInWithPassword",
            {"email": email, "password": password, "returnSecureToken": True},
        )
        if response.status_code != 200:
            message = _error_message(response) or "Authentication failed"
            logger.info("Password verification failed", reason=message)
            raise AuthenticationError(auth_reason_from_message(message))

        data = response.json()
        return PasswordVerification(
            account_id=data["localId"],
            email=data.get("email", email),
            access_token=data["idToken"],
            refresh_token=data["refreshToken"],
        )

    def _verify_token_sync(self, token: str) -> dict[str, Any]:
        with self._session_lock:
            request = google.auth.transport.requests.Request(session=self._session)
            return google.oauth2.id_token.verify_firebase_token(token, request, audience=self.project_id)

    async def verify_token(self, token: str) -> dict[str, Any]:
        try:
            claims = await asyncio.to_thread(self._verify_token_sync, token)
        except google.auth.exceptions.TransportError as exc:
            raise UpstreamError(
                message="Identity service unavailable",
                code="upstream.identity",
                meta={"error": str(exc)},
            ) from exc
        except (ValueError, google.auth.exceptions.GoogleAuthError) as exc:
            logger.debug("Token verification failed", error=str(exc))
            raise UnauthorizedError(message="Invalid token") from exc
        if not claims:
            raise UnauthorizedError(message="Invalid token")
        return claims

    async def close(self) -> None:
        self._session.close()


def create_identity_provider(settings: Settings, http_client: httpx.AsyncClient) -> IdentityToolkitProvider:
    if not settings.firebase_api_key:
        raise RuntimeError("Missing FIREBASE_API_KEY environment variable")
    return IdentityToolkitProvider(
        api_key=settings.firebase_api_key,
        project_id=settings.resolved_project_id(),
        http_client=http_client,
        base_url=settings.identity_toolkit_url,
    )
