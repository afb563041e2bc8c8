"""
app/api/dependencies.py

Shared FastAPI dependencies for request parsing and backend clients.
"""

from __future__ import annotations

import json

from fastapi import HTTPException, Request, status

from app.config import CustomerImportSettings, get_customer_import_settings
from app.connectors import (
    get_indexing_client,
    get_object_client,
    get_rules_client,
    get_storage_client,
)
from app.schemas.customer import CustomerRequest

__all__ = [
    "customer_payload",
    "get_indexing_client",
    "get_object_client",
    "get_rules_client",
    "get_storage_client",
    "get_text_body",
]


async def get_text_body(request: Request) -> str:
    """
    Read the raw request body as UTF-8 text (CSV payloads, find criteria).
    """

    raw = await request.body()
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Request body must be UTF-8 encoded text.",
        ) from exc


def customer_payload(body: CustomerRequest, settings: CustomerImportSettings | None = None) -> str:
    """
    Serialize a customer body using the configured JSON naming policy.
    """

    settings = settings or get_customer_import_settings()
    document = body.model_dump(
        mode="json",
        by_alias=settings.naming_policy == "camel",
        exclude_none=settings.omit_null_fields,
    )
    return json.dumps(document, ensure_ascii=False)
