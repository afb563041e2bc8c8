"""
app/api/routers/customer_router.py

Customer CRUD, search, validation and bulk import endpoints.

Everything except `/import` is a passthrough to one backend service call.
"""

from __future__ import annotations

import json
import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from app.api.dependencies import (
    customer_payload,
    get_indexing_client,
    get_object_client,
    get_rules_client,
    get_storage_client,
    get_text_body,
)
from app.api.responses import handle_object_result, raise_for_result
from app.config import CustomerImportSettings, get_customer_import_settings
from app.connectors import (
    IndexingServiceClient,
    ObjectServiceClient,
    RulesServiceClient,
    StorageServiceClient,
)
from app.errors import FatalPipelineError
from app.schemas.customer import CustomerRequest, ImportReportResponse
from app.services.bulk_import_service import BulkImportService, get_bulk_import_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/1.0", tags=["customers"])

SERVICE_LABEL = "Customer"
VALIDATION_PROFILE = "bookstore-customer"
VALIDATION_RULES = json.dumps({"$gte": {"$.age": 18}})


@router.post("/find")
def find_customers(
    criteria: str = Depends(get_text_body),
    client: ObjectServiceClient = Depends(get_object_client),
    settings: CustomerImportSettings = Depends(get_customer_import_settings),
) -> Response:
    """
    Find customers using MongoDB find syntax (first 10, sorted by name).
    """

    result = client.find(
        settings.db_name,
        settings.collection,
        criteria,
        start=0,
        limit=10,
        sort_field="name",
        sort_descending=False,
    )
    return handle_object_result(result, service=SERVICE_LABEL)


@router.get("/search")
def search_customers(
    q: str = Query(..., min_length=1, description="Full-text query"),
    start: int = Query(default=0, ge=0, alias="from"),
    size: int = Query(default=10, ge=1, le=100),
    client: IndexingServiceClient = Depends(get_indexing_client),
    settings: CustomerImportSettings = Depends(get_customer_import_settings),
) -> Response:
    """
    Search the customer index.
    """

    result = client.search(settings.search_config, q, start=start, size=size)
    return handle_object_result(result, service=SERVICE_LABEL)


@router.post("/import", response_model=ImportReportResponse)
def bulk_import(
    payload: str = Depends(get_text_body),
    import_service: BulkImportService = Depends(get_bulk_import_service),
) -> ImportReportResponse:
    """
    Bulk import customers from a header-less CSV body.

    The payload is archived verbatim in the storage service before any
    customer is written.
    """

    if not payload.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="CSV payload is empty.",
        )

    try:
        report = import_service.bulk_import(payload)
    except FatalPipelineError as exc:
        status_code = exc.status if 400 <= exc.status < 600 else status.HTTP_503_SERVICE_UNAVAILABLE
        raise HTTPException(status_code=status_code, detail=exc.to_dict()) from exc

    return ImportReportResponse.from_domain(report)


@router.post("/reset-storage")
def reset_storage(client: StorageServiceClient = Depends(get_storage_client)) -> dict[str, int]:
    """
    Remove every archived import node and then the drawer itself.
    """

    drawer = client.get_drawer()
    if drawer.circuit_open:
        raise_for_result(drawer, service=SERVICE_LABEL)
    if not drawer.is_success:
        return {"nodes_deleted": 0}

    nodes = client.list_nodes()
    if not nodes.is_success:
        raise_for_result(nodes, service=SERVICE_LABEL)

    deleted = 0
    for node in nodes.value or []:
        node_id = str(node.get("id")) if isinstance(node, dict) else str(node)
        result = client.delete_node(node_id)
        if result.is_success:
            deleted += 1
        else:
            logger.warning("Storage node delete failed node_id=%s detail=%s", node_id, result.details)

    client.delete_drawer()
    return {"nodes_deleted": deleted}


@router.post("/validate")
def validate_customer(
    body: CustomerRequest,
    explain: bool = Query(default=False),
    client: RulesServiceClient = Depends(get_rules_client),
) -> Response:
    """
    Validate a customer against the `bookstore-customer` rules profile.
    """

    upsert = client.upsert_profile(VALIDATION_PROFILE, VALIDATION_RULES)
    if upsert.status not in (status.HTTP_200_OK, status.HTTP_201_CREATED):
        raise_for_result(upsert, service=SERVICE_LABEL)

    result = client.validate(VALIDATION_PROFILE, customer_payload(body), explain)
    if result.status != status.HTTP_200_OK:
        raise_for_result(result, service=SERVICE_LABEL)
    return handle_object_result(result, service=SERVICE_LABEL)


@router.get("/{customer_id}")
def get_customer(
    customer_id: str,
    client: ObjectServiceClient = Depends(get_object_client),
    settings: CustomerImportSettings = Depends(get_customer_import_settings),
) -> Response:
    result = client.get(settings.db_name, settings.collection, customer_id)
    return handle_object_result(result, service=SERVICE_LABEL)


@router.post("/{customer_id}", status_code=status.HTTP_201_CREATED)
def insert_customer(
    customer_id: str,
    body: CustomerRequest,
    client: ObjectServiceClient = Depends(get_object_client),
    settings: CustomerImportSettings = Depends(get_customer_import_settings),
) -> Response:
    """
    Insert a customer with the given id.
    """

    result = client.insert(settings.db_name, settings.collection, customer_id, customer_payload(body, settings))
    return handle_object_result(result, service=SERVICE_LABEL, location=f"{router.prefix}/{customer_id}")


@router.put("/{customer_id}")
def replace_customer(
    customer_id: str,
    body: CustomerRequest,
    client: ObjectServiceClient = Depends(get_object_client),
    settings: CustomerImportSettings = Depends(get_customer_import_settings),
) -> Response:
    """
    Replace the customer with the given id.
    """

    result = client.replace(settings.db_name, settings.collection, customer_id, customer_payload(body, settings))
    return handle_object_result(result, service=SERVICE_LABEL)


@router.delete("/{customer_id}")
def delete_customer(
    customer_id: str,
    client: ObjectServiceClient = Depends(get_object_client),
    settings: CustomerImportSettings = Depends(get_customer_import_settings),
) -> Response:
    result = client.delete(settings.db_name, settings.collection, customer_id)
    return handle_object_result(result, service=SERVICE_LABEL)
