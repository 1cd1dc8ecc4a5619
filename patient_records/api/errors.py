"""
Exception handlers translating framework errors into the response envelope.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded

from patient_records.api.responses import failure
from patient_records.core.rate_limiter import rate_limit_handler
from patient_records.core.results import ErrorKind, Failure
from patient_records.core.security import AuthGateRejection

logger = logging.getLogger(__name__)

_MESSAGES = {
    "missing": "{field} is required",
    "string_type": "{field} must be a string",
    "string_too_short": "{field} must be at least {min_length} characters long",
    "string_too_long": "{field} must be at most {max_length} characters long",
    "int_type": "{field} must be an integer",
    "int_parsing": "{field} must be an integer",
    "greater_than_equal": "{field} must be greater than or equal to {ge}",
    "less_than_equal": "{field} must be less than or equal to {le}",
    "password_too_long": "{field} must be at most {max_bytes} bytes",
    "blank_string": "{field} must not be empty",
    "null_not_allowed": "{field} must not be null",
    "model_attributes_type": "request body must be a JSON object",
    "dict_type": "request body must be a JSON object",
    "json_invalid": "request body is not valid JSON",
}

_FIELD_MESSAGES = {
    ("username", "string_pattern_mismatch"): (
        "username may only contain letters, digits, dots or underscores"
    ),
    ("email", "value_error"): "email must be a valid email address",
}


def _field_name(loc: tuple) -> str:
    parts = [str(part) for part in loc if part not in ("body", "query", "path")]
    return ".".join(parts) if parts else "request body"


def format_validation_error(error: Mapping[str, Any]) -> str:
    """Render one Pydantic error as a human-readable sentence."""
    field = _field_name(tuple(error.get("loc", ())))
    error_type = error.get("type", "")
    leaf = field.rsplit(".", 1)[-1]

    if (leaf, error_type) in _FIELD_MESSAGES:
        return _FIELD_MESSAGES[(leaf, error_type)]
    if error_type == "string_too_short" and (error.get("ctx") or {}).get("min_length") == 1:
        return _MESSAGES["blank_string"].format(field=field)
    template = _MESSAGES.get(error_type)
    if template is not None:
        return template.format(field=field, **(error.get("ctx") or {}))
    return f"{field}: {error.get('msg', 'invalid value')}"


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    message = format_validation_error(errors[0]) if errors else "Invalid request"
    return failure(Failure(ErrorKind.VALIDATION, message))


async def auth_gate_handler(request: Request, exc: AuthGateRejection) -> JSONResponse:
    response = failure(exc.failure)
    if exc.failure.kind is ErrorKind.UNAUTHENTICATED:
        response.headers["WWW-Authenticate"] = "Bearer"
    return response


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return failure(Failure(ErrorKind.INTERNAL, "Internal server error", detail=type(exc).__name__))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(AuthGateRejection, auth_gate_handler)
    app.add_exception_handler(RateLimitExceeded, rate_limit_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
