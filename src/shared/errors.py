"""HTTP mapping for domain exceptions.

Protean's FastAPI integration maps its exception hierarchy to status codes.
The handlers here override the body shape for the errors the storefront client
shows verbatim: ``{"error": "<message>"}``.
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.integrations.fastapi import register_exception_handlers
from starlette.exceptions import HTTPException


def error_message(exc: Exception) -> str:
    """Flatten a Protean error payload into a single human readable message."""
    messages = getattr(exc, "messages", None)
    if messages is None and exc.args:
        # ObjectNotFoundError carries its payload only in args
        messages = exc.args[0]
    if isinstance(messages, str):
        return messages
    if isinstance(messages, dict):
        parts = []
        for value in messages.values():
            if isinstance(value, list | tuple):
                parts.extend(str(v) for v in value)
            else:
                parts.append(str(value))
        if parts:
            return "; ".join(parts)
    return str(exc)


async def _validation_error(request: Request, exc: ValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": error_message(exc)})


async def _request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    parts = []
    for error in exc.errors():
        field = ".".join(str(loc) for loc in error.get("loc", ())[1:])
        parts.append(f"{field}: {error.get('msg')}" if field else error.get("msg", "Invalid request"))
    return JSONResponse(status_code=400, content={"error": "; ".join(parts) or "Invalid request"})


async def _http_error(request: Request, exc: HTTPException) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail}, headers=exc.headers)


async def _not_found(request: Request, exc: ObjectNotFoundError) -> JSONResponse:
    return JSONResponse(status_code=404, content={"error": error_message(exc)})


def register_error_handlers(app: FastAPI) -> None:
    register_exception_handlers(app)
    app.add_exception_handler(ValidationError, _validation_error)
    app.add_exception_handler(ObjectNotFoundError, _not_found)
    app.add_exception_handler(RequestValidationError, _request_validation_error)
    app.add_exception_handler(HTTPException, _http_error)
