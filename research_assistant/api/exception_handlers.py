from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from research_assistant.core.metrics import route_label
from research_assistant.core.middleware.http_logging import request_id_of
from research_assistant.domain.exceptions import ApiError

logger = logging.getLogger("research_assistant.errors")


def _describe_validation_error(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Request body could not be validated."
    first = errors[0]
    # loc looks like ("body", "questions", 0); drop the "body" prefix.
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = str(first.get("msg", "invalid value"))
    return f"{location}: {message}" if location else message


def register_exception_handlers(app: FastAPI) -> None:
    """Register handlers that render every error as `{"error", "details"?}`."""

    @app.exception_handler(ApiError)
    async def handle_api_error(request: Request, exc: ApiError) -> JSONResponse:
        # Never log request bodies; the error text is ours or the provider's.
        level = logging.ERROR if exc.status_code >= 500 else logging.INFO
        logger.log(
            level,
            exc.error,
            extra={
                "request_id": request_id_of(request),
                "http_method": request.method,
                "request_path": route_label(request),
                "status_code": exc.status_code,
            },
        )
        return JSONResponse(status_code=exc.status_code, content=exc.to_body())

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        logger.info(
            "Request body validation failed",
            extra={
                "request_id": request_id_of(request),
                "http_method": request.method,
                "request_path": route_label(request),
                "status_code": 400,
            },
        )
        return JSONResponse(
            status_code=400,
            content={
                "error": "Invalid request body.",
                "details": _describe_validation_error(exc),
            },
        )

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(
        request: Request,
        exc: StarletteHTTPException,
    ) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )
