"""
app/domain package marker.
"""

from app.domain.customer import (
    OUTCOME_INSERTED,
    OUTCOME_SKIPPED,
    OUTCOME_UPDATED,
    Customer,
    ImportReport,
    RecordOutcome,
    StorageMetadata,
)

__all__ = [
    "OUTCOME_INSERTED",
    "OUTCOME_SKIPPED",
    "OUTCOME_UPDATED",
    "Customer",
    "ImportReport",
    "RecordOutcome",
    "StorageMetadata",
]
