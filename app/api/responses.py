"""
app/api/responses.py

Translate backend ServiceResults into HTTP responses.
"""

from __future__ import annotations

from typing import Any, NoReturn

from fastapi import HTTPException, Response, status
from fastapi.responses import JSONResponse

from app.connectors.base import ServiceResult

CIRCUIT_BREAKER_ERROR = (
    "{service} Service is inoperative, please try later on. "
    "(Business message due to Circuit-Breaker)"
)


def handle_object_result(
    result: ServiceResult,
    *,
    service: str,
    location: str | None = None,
) -> Response:
    """
    200 and 201 pass the backend body through; anything else becomes an error.
    """

    if result.circuit_open:
        raise_for_result(result, service=service)
    if result.status == status.HTTP_201_CREATED:
        headers = {"Location": location} if location else None
        return _body_response(result.value, status.HTTP_201_CREATED, headers=headers)
    if result.is_success:
        return _body_response(result.value, result.status)
    raise_for_result(result, service=service)


def _body_response(value: Any, status_code: int, headers: dict[str, str] | None = None) -> Response:
    if isinstance(value, str):
        return Response(
            content=value,
            status_code=status_code,
            media_type="application/json",
            headers=headers,
        )
    return JSONResponse(content=value, status_code=status_code, headers=headers)


def raise_for_result(result: ServiceResult, *, service: str) -> NoReturn:
    """
    Raise the HTTP error matching a result the route cannot pass through.
    """

    if result.circuit_open:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=CIRCUIT_BREAKER_ERROR.format(service=service),
        )
    raise HTTPException(status_code=result.status, detail=result.details)
