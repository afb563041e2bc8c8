"""
app/schemas package marker.
"""

from app.schemas.customer import (
    CustomerRequest,
    ImportReportResponse,
    ServiceHealthResponse,
    StorageMetadataResponse,
)

__all__ = [
    "CustomerRequest",
    "ImportReportResponse",
    "ServiceHealthResponse",
    "StorageMetadataResponse",
]
