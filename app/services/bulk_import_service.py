"""
app/services/bulk_import_service.py

Service layer for the customer bulk CSV import.

Order of work for one request:

    1. ArchiveWriter.archive()            : raw payload to the storage service
    2. CSVRowSource + CustomerMapper      : rows to customers, bad rows to skips
    3. ExistingIdResolver.resolve()       : identifier snapshot
    4. CustomerImporter.import_customers  : insert or replace per customer
    5. build_report()                     : outcomes + storage metadata

Steps 1 and 3 abort the import with FatalPipelineError. Every other failure
is reported per record in the skipped mapping.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from types import MappingProxyType
from typing import Iterable

from app.config import get_customer_import_settings
from app.connectors.object_client import get_object_client
from app.connectors.storage_client import get_storage_client
from app.domain.customer import OUTCOME_SKIPPED, ImportReport, RecordOutcome, StorageMetadata
from app.importers.csv_parser import CSVRowSource, RowParseError, best_effort_key
from app.mappers.customer_mapper import CustomerMapper, CustomerSerializer, MappingError
from app.services.archive_writer import ArchiveWriter
from app.services.customer_importer import CustomerImporter, ExistingIdResolver, ImportCandidate

logger = logging.getLogger(__name__)


class BulkImportService:
    """
    Coordinates archival, parsing, reconciliation and reporting.
    """

    def __init__(
        self,
        *,
        archive_writer: ArchiveWriter,
        resolver: ExistingIdResolver,
        importer: CustomerImporter,
        mapper: CustomerMapper | None = None,
    ) -> None:
        self._archive_writer = archive_writer
        self._resolver = resolver
        self._importer = importer
        self._mapper = mapper or CustomerMapper()

    def bulk_import(self, raw_csv_text: str) -> ImportReport:
        """
        Import every customer row in ``raw_csv_text``.

        Raises FatalPipelineError when archival or identifier resolution
        fails; no record-level call is made in either case.
        """

        storage_metadata = self._archive_writer.archive(raw_csv_text)

        candidates: list[ImportCandidate] = []
        row_skips: list[RecordOutcome] = []
        rows = CSVRowSource(raw_csv_text, expected_columns=len(self._mapper.columns))
        for row in rows:
            if isinstance(row, RowParseError):
                row_skips.append(self._skip(row.key, row.row_number, row.reason))
                continue
            try:
                customer = self._mapper.map_row(row.values)
            except MappingError as exc:
                row_skips.append(
                    self._skip(
                        best_effort_key(row.values, row.row_number),
                        row.row_number,
                        f"Invalid customer row: {exc}",
                    )
                )
                continue
            candidates.append(ImportCandidate(row_number=row.row_number, customer=customer))

        existing_ids = self._resolver.resolve()
        outcomes = self._importer.import_customers(candidates, existing_ids)

        report = build_report(
            sorted([*row_skips, *outcomes], key=lambda outcome: outcome.row_number),
            storage_metadata,
        )
        logger.info(
            "Customer import completed node_id=%s rows=%s imported=%s skipped=%s",
            storage_metadata.id,
            report.total_records,
            len(report.imported),
            len(report.skipped),
        )
        return report

    @staticmethod
    def _skip(key: str, row_number: int, reason: str) -> RecordOutcome:
        logger.warning("Customer row skipped key=%s row=%s reason=%s", key, row_number, reason)
        return RecordOutcome(key=key, row_number=row_number, status=OUTCOME_SKIPPED, reason=reason)


def build_report(outcomes: Iterable[RecordOutcome], storage_metadata: StorageMetadata) -> ImportReport:
    """
    Fold per-record outcomes and the archive location into one report.

    A key already present in either mapping is suffixed with `#<row>` so each
    record keeps its own entry.
    """

    imported: dict[str, str] = {}
    skipped: dict[str, str] = {}
    for outcome in outcomes:
        key = outcome.key
        while key in imported or key in skipped:
            key = f"{key}#{outcome.row_number}"
        if outcome.is_skipped:
            skipped[key] = outcome.reason or "Skipped."
        else:
            imported[key] = outcome.status

    return ImportReport(
        imported=MappingProxyType(imported),
        skipped=MappingProxyType(skipped),
        storage_metadata=storage_metadata,
    )


@lru_cache(maxsize=1)
def get_bulk_import_service() -> BulkImportService:
    """
    Build and cache the bulk import service with env-driven settings.
    """

    settings = get_customer_import_settings()
    object_client = get_object_client()
    return BulkImportService(
        archive_writer=ArchiveWriter(client=get_storage_client()),
        resolver=ExistingIdResolver(
            client=object_client,
            db_name=settings.db_name,
            collection=settings.collection,
            id_field=settings.id_field,
        ),
        importer=CustomerImporter(
            client=object_client,
            serializer=CustomerSerializer(
                naming_policy=settings.naming_policy,
                omit_none=settings.omit_null_fields,
            ),
            db_name=settings.db_name,
            collection=settings.collection,
            max_workers=settings.max_workers,
        ),
    )
