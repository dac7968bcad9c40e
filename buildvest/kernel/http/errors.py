from __future__ import annotations

from typing import Any

import structlog
from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from buildvest.config import Settings, get_settings
from buildvest.kernel.errors import BuildvestError

logger = structlog.get_logger()


def _get_request_id(request: Request) -> str | None:
    return getattr(getattr(request, "state", None), "request_id", None)


def _is_development(settings: Settings) -> bool:
    return settings.environment == "development"


def register_exception_handlers(app: FastAPI, settings: Settings | None = None) -> None:
    """Register service-wide exception handlers on a FastAPI app.

    We keep FastAPI-compatible `detail` while adding stable `code` + `request_id`.
    Internal details are exposed only when `settings` is a development config.
    """
    settings = settings or get_settings()

    @app.exception_handler(BuildvestError)
    async def _buildvest_error_handler(request: Request, exc: BuildvestError) -> Response:
        request_id = _get_request_id(request)
        if exc.status_code >= 500:
            logger.error("Upstream failure", request_id=request_id, code=exc.code, error=exc.message, meta=exc.meta)
        include_meta = exc.expose_meta or _is_development(settings)
        return JSONResponse(
            status_code=exc.status_code,
            content=exc.to_public_dict(request_id=request_id, include_meta=include_meta),
            headers=exc.headers or None,
        )

    @app.exception_handler(HTTPException)
    async def _http_exception_handler(request: Request, exc: HTTPException) -> Response:
        request_id = _get_request_id(request)

        # Preserve existing shapes: FastAPI sometimes uses `detail` as str or list/dict.
        payload: dict[str, Any] = {
            "detail": exc.detail,
            "code": f"http.{exc.status_code}",
        }
        if request_id:
            payload["request_id"] = request_id

        headers = dict(exc.headers or {})
        return JSONResponse(status_code=int(exc.status_code), content=payload, headers=headers)

    @app.exception_handler(RequestValidationError)
    async def _validation_error_handler(request: Request, exc: RequestValidationError) -> Response:
        request_id = _get_request_id(request)
        payload: dict[str, Any] = {
            "detail": "Invalid request body",
            "code": "http.validation_error",
            "meta": {"errors": [
                {"loc": list(err.get("loc", ())), "msg": err.get("msg"), "type": err.get("type")}
                for err in exc.errors()
            ]},
        }
        if request_id:
            payload["request_id"] = request_id
        return JSONResponse(status_code=400, content=payload)

    @app.exception_handler(Exception)
    async def _unhandled_exception_handler(request: Request, exc: Exception) -> Response:
        request_id = _get_request_id(request)
        logger.exception("Unhandled exception", request_id=request_id, error=str(exc))

        payload: dict[str, Any] = {
            "detail": "Internal server error",
            "code": "internal.unhandled",
        }
        if _is_development(settings):
            payload["error"] = str(exc)
        if request_id:
            payload["request_id"] = request_id
        return JSONResponse(status_code=500, content=payload)
