"""
app/api/routers/book_router.py

Book endpoints; bodies are forwarded to the object service untouched.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status

from app.api.dependencies import get_object_client, get_text_body
from app.api.responses import handle_object_result
from app.config import BookSettings, get_book_settings
from app.connectors import ObjectServiceClient

router = APIRouter(prefix="/api/1.0/book", tags=["books"])

SERVICE_LABEL = "Book"
BOOK_MIME_TYPE = "application/vnd.mycompany.myapp.book+json; version=1.0"


@router.post("/find")
def find_books(
    criteria: str = Depends(get_text_body),
    client: ObjectServiceClient = Depends(get_object_client),
    settings: BookSettings = Depends(get_book_settings),
) -> Response:
    """
    Find books using MongoDB find syntax (first 10, sorted by name).
    """

    result = client.find(
        settings.db_name,
        settings.collection,
        criteria,
        start=0,
        limit=10,
        sort_field="name",
    )
    return handle_object_result(result, service=SERVICE_LABEL)


@router.get("/{book_id}")
def get_book(
    book_id: str,
    client: ObjectServiceClient = Depends(get_object_client),
    settings: BookSettings = Depends(get_book_settings),
) -> Response:
    result = client.get(settings.db_name, settings.collection, book_id)
    response = handle_object_result(result, service=SERVICE_LABEL)
    response.headers["Content-Type"] = BOOK_MIME_TYPE
    return response


@router.post("/{book_id}", status_code=status.HTTP_201_CREATED)
def insert_book(
    book_id: str,
    payload: str = Depends(get_text_body),
    client: ObjectServiceClient = Depends(get_object_client),
    settings: BookSettings = Depends(get_book_settings),
) -> Response:
    """
    Insert a book; the body is stored as sent.
    """

    result = client.insert(settings.db_name, settings.collection, book_id, payload)
    response = handle_object_result(result, service=SERVICE_LABEL, location=f"{router.prefix}/{book_id}")
    response.headers["Content-Type"] = BOOK_MIME_TYPE
    return response
