"""
JSON response envelope shared by every endpoint.

``{"status": "success" | "fail" | "error", "message": ..., "data"?: ..., "error"?: ...}``
"""

from __future__ import annotations

from typing import Any, Optional

from fastapi import status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from patient_records.core.results import ErrorKind, Failure


def success(message: str, data: Optional[Any] = None, status_code: int = status.HTTP_200_OK) -> JSONResponse:
    body: dict[str, Any] = {"status": "success", "message": message}
    if data is not None:
        body["data"] = jsonable_encoder(data)
    return JSONResponse(status_code=status_code, content=body)


def failure(result: Failure) -> JSONResponse:
    """Render a failed outcome; only server faults carry diagnostic text."""
    if result.kind is ErrorKind.INTERNAL:
        body = {"status": "error", "message": result.message, "error": result.detail or ""}
    else:
        body = {"status": "fail", "message": result.message}
    return JSONResponse(status_code=result.status_code, content=body)
