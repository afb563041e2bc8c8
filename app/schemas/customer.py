"""
app/schemas/customer.py

Request and response schemas for customer endpoints.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.domain.customer import ImportReport, StorageMetadata


class CustomerRequest(BaseModel):
    """
    JSON body accepted by the customer insert, replace and validate routes.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    age: int | None = Field(default=None, ge=0)
    street_address: str | None = None
    date_of_birth: datetime | None = None


class StorageMetadataResponse(BaseModel):
    """
    Where the raw CSV payload of an import was archived.
    """

    id: str
    drawer: str
    file_name: str
    size: int | None = None

    @classmethod
    def from_domain(cls, metadata: StorageMetadata) -> "StorageMetadataResponse":
        return cls(
            id=metadata.id,
            drawer=metadata.drawer,
            file_name=metadata.file_name,
            size=metadata.size,
        )


class ImportReportResponse(BaseModel):
    """
    API response model for one bulk import.
    """

    imported: dict[str, str] = Field(default_factory=dict)
    skipped: dict[str, str] = Field(default_factory=dict)
    storage_metadata: StorageMetadataResponse

    @classmethod
    def from_domain(cls, report: ImportReport) -> "ImportReportResponse":
        return cls(
            imported=dict(report.imported),
            skipped=dict(report.skipped),
            storage_metadata=StorageMetadataResponse.from_domain(report.storage_metadata),
        )


class ServiceHealthResponse(BaseModel):
    service: str
    status: str
    circuits: dict[str, str] = Field(default_factory=dict)
