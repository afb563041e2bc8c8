"""
app/services package marker.
"""

from app.services.archive_writer import ArchiveWriter
from app.services.bulk_import_service import (
    BulkImportService,
    build_report,
    get_bulk_import_service,
)
from app.services.customer_importer import CustomerImporter, ExistingIdResolver, ImportCandidate

__all__ = [
    "ArchiveWriter",
    "BulkImportService",
    "CustomerImporter",
    "ExistingIdResolver",
    "ImportCandidate",
    "build_report",
    "get_bulk_import_service",
]
