"""
FastAPI application entry point for the contact backend.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, Response
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from contact_backend.config import get_settings
from contact_backend.errors import ContactError, NotFoundError, ValidationError
from contact_backend.routes import failure_message_for, router

logger = logging.getLogger(__name__)


def _error_payload(message: str) -> dict:
    return {"success": False, "message": message}


def _body_error_message(errors: list[dict]) -> str:
    messages: list[str] = []
    for error in errors:
        loc = error.get("loc", ())
        if error.get("type") == "json_invalid":
            message = "The request body is not valid JSON."
        elif len(loc) > 1 and isinstance(loc[1], str):
            message = f"The {loc[1].capitalize()} field is invalid."
        else:
            message = "The request body must be a JSON object."
        if message not in messages:
            messages.append(message)
    return ", ".join(messages)


async def _request_validation_handler(
    request: Request, exc: RequestValidationError
) -> Response:
    errors = exc.errors()
    # Path/query typing problems keep FastAPI's default 422.
    if not errors or any(error.get("loc", ("",))[0] != "body" for error in errors):
        return await request_validation_exception_handler(request, exc)
    message = _body_error_message(errors)
    logger.warning("Rejected malformed body on %s: %s", request.url.path, message)
    return JSONResponse(status_code=400, content=_error_payload(message))


async def _not_found_handler(request: Request, exc: NotFoundError) -> Response:
    return Response(status_code=404)


async def _contact_error_handler(request: Request, exc: ContactError) -> JSONResponse:
    # Errors that escape a route (e.g. while building dependencies).
    if isinstance(exc, ValidationError):
        message = exc.message
    else:
        logger.error(
            "Unhandled %s on %s: %s", type(exc).__name__, request.url.path, exc,
            exc_info=exc,
        )
        message = failure_message_for(request.scope.get("endpoint"))
    return JSONResponse(status_code=exc.status_code, content=_error_payload(message))


async def _unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "Unexpected %s on %s", type(exc).__name__, request.url.path, exc_info=exc
    )
    return JSONResponse(
        status_code=500,
        content=_error_payload(failure_message_for(request.scope.get("endpoint"))),
    )


def create_app() -> FastAPI:
    settings = get_settings()
    logging.basicConfig(level=settings.log_level.upper())
    app = FastAPI(title="Contact Backend (FastAPI)", version="0.1.0")
    app.include_router(router, prefix=settings.api_prefix)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.add_exception_handler(NotFoundError, _not_found_handler)
    app.add_exception_handler(ContactError, _contact_error_handler)
    app.add_exception_handler(Exception, _unexpected_error_handler)
    return app


app = create_app()
