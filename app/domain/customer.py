"""
app/domain/customer.py

Domain models used by the customer bulk import flow.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

OUTCOME_INSERTED = "inserted"
OUTCOME_UPDATED = "updated"
OUTCOME_SKIPPED = "skipped"


@dataclass(frozen=True)
class Customer:
    """
    One customer record as mapped from a CSV row.
    """

    id: str
    first_name: str | None = None
    last_name: str | None = None
    age: int | None = None
    street_address: str | None = None
    extra: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class StorageMetadata:
    """
    Where the raw import payload was archived in the storage service.
    """

    id: str
    drawer: str
    file_name: str
    size: int | None = None
    raw: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_response(
        cls,
        body: Any,
        *,
        node_id: str,
        drawer: str,
        file_name: str,
        size: int,
    ) -> "StorageMetadata":
        """
        Build metadata from a storage response, falling back to request values.
        """

        payload: Mapping[str, Any] = body if isinstance(body, Mapping) else {}
        return cls(
            id=str(payload.get("id") or node_id),
            drawer=str(payload.get("drawer") or payload.get("bucket") or drawer),
            file_name=str(payload.get("fileName") or payload.get("file_name") or file_name),
            size=payload.get("size") if isinstance(payload.get("size"), int) else size,
            raw=dict(payload),
        )


@dataclass(frozen=True)
class RecordOutcome:
    """
    Result of processing one input record.

    ``status`` is one of inserted/updated/skipped; ``reason`` is set only
    for skipped records.
    """

    key: str
    row_number: int
    status: str
    reason: str | None = None

    @property
    def is_skipped(self) -> bool:
        return self.status == OUTCOME_SKIPPED


@dataclass(frozen=True)
class ImportReport:
    """
    End-of-run bulk import report.
    """

    imported: Mapping[str, str]
    skipped: Mapping[str, str]
    storage_metadata: StorageMetadata

    @property
    def total_records(self) -> int:
        return len(self.imported) + len(self.skipped)
