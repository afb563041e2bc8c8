"""
app/services/customer_importer.py

Insert-vs-replace reconciliation of imported customers against the object store.

The identifier snapshot is read once per import. A record whose id is in the
snapshot is replaced, every other record is inserted; each record gets exactly
one outcome and a failure on one record never stops the rest of the batch.
Retries belong to the service client, never to this loop.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import AbstractSet, Sequence

from app.connectors.object_client import ObjectServiceClient
from app.domain.customer import (
    OUTCOME_INSERTED,
    OUTCOME_SKIPPED,
    OUTCOME_UPDATED,
    Customer,
    RecordOutcome,
)
from app.errors import FatalPipelineError
from app.failure_codes import IDENTIFIER_RESOLUTION_FAILED
from app.mappers.customer_mapper import CustomerSerializer

logger = logging.getLogger(__name__)

DUPLICATE_IN_BATCH_REASON = "Duplicate identifier in batch; only the first occurrence is imported."


@dataclass(frozen=True)
class ImportCandidate:
    """
    A mapped customer together with the CSV row it came from.
    """

    row_number: int
    customer: Customer


class ExistingIdResolver:
    """
    Reads the set of identifiers already stored in the target collection.
    """

    def __init__(
        self,
        *,
        client: ObjectServiceClient,
        db_name: str,
        collection: str,
        id_field: str = "id",
    ) -> None:
        self._client = client
        self._db_name = db_name
        self._collection = collection
        self._id_field = id_field

    def resolve(self) -> frozenset[str]:
        """
        Return the identifier snapshot or raise FatalPipelineError.
        """

        try:
            result = self._client.get_distinct(self._db_name, self._collection, self._id_field, "{}")
        except Exception as exc:
            logger.exception(
                "Identifier resolution raised db=%s collection=%s",
                self._db_name,
                self._collection,
            )
            raise FatalPipelineError(
                code=IDENTIFIER_RESOLUTION_FAILED,
                detail=f"Unable to read existing customer identifiers: {exc}",
            ) from exc

        if not result.is_success:
            logger.error(
                "Identifier resolution failed db=%s collection=%s status=%s circuit_open=%s detail=%s",
                self._db_name,
                self._collection,
                result.status,
                result.circuit_open,
                result.details,
            )
            raise FatalPipelineError(
                code=IDENTIFIER_RESOLUTION_FAILED,
                detail=f"Unable to read existing customer identifiers: {result.details}",
                status=result.status,
            )

        return frozenset(result.value or ())


class CustomerImporter:
    """
    Applies insert or replace per customer and classifies each outcome.

    ``max_workers`` above one dispatches the remote calls through a bounded
    thread pool; outcomes are still returned in input order.
    """

    def __init__(
        self,
        *,
        client: ObjectServiceClient,
        serializer: CustomerSerializer,
        db_name: str,
        collection: str,
        max_workers: int = 1,
    ) -> None:
        self._client = client
        self._serializer = serializer
        self._db_name = db_name
        self._collection = collection
        self._max_workers = max(1, max_workers)

    def import_customers(
        self,
        candidates: Sequence[ImportCandidate],
        existing_ids: AbstractSet[str],
    ) -> list[RecordOutcome]:
        outcomes: list[RecordOutcome | None] = [None] * len(candidates)
        dispatch: list[tuple[int, ImportCandidate]] = []
        seen: set[str] = set()

        for index, candidate in enumerate(candidates):
            customer_id = candidate.customer.id
            if customer_id in seen:
                logger.warning(
                    "Customer skipped id=%s row=%s reason=%s",
                    customer_id,
                    candidate.row_number,
                    DUPLICATE_IN_BATCH_REASON,
                )
                outcomes[index] = RecordOutcome(
                    key=customer_id,
                    row_number=candidate.row_number,
                    status=OUTCOME_SKIPPED,
                    reason=DUPLICATE_IN_BATCH_REASON,
                )
                continue
            seen.add(customer_id)
            dispatch.append((index, candidate))

        if self._max_workers == 1 or len(dispatch) <= 1:
            for index, candidate in dispatch:
                outcomes[index] = self._apply(candidate, existing_ids)
        else:
            with ThreadPoolExecutor(max_workers=self._max_workers) as executor:
                applied = executor.map(
                    lambda item: self._apply(item[1], existing_ids),
                    dispatch,
                )
                for (index, _), outcome in zip(dispatch, applied):
                    outcomes[index] = outcome

        return [outcome for outcome in outcomes if outcome is not None]

    def _apply(self, candidate: ImportCandidate, existing_ids: AbstractSet[str]) -> RecordOutcome:
        customer = candidate.customer
        try:
            payload = self._serializer.serialize(customer)
            if customer.id in existing_ids:
                status = OUTCOME_UPDATED
                result = self._client.replace(self._db_name, self._collection, customer.id, payload)
            else:
                status = OUTCOME_INSERTED
                result = self._client.insert(self._db_name, self._collection, customer.id, payload)

            if result.is_success:
                return RecordOutcome(key=customer.id, row_number=candidate.row_number, status=status)

            reason = result.details or f"Object service responded with status {result.status}."
        except Exception as exc:  # noqa: BLE001
            reason = str(exc) or exc.__class__.__name__

        logger.warning(
            "Customer skipped id=%s row=%s reason=%s",
            customer.id,
            candidate.row_number,
            reason,
        )
        return RecordOutcome(
            key=customer.id,
            row_number=candidate.row_number,
            status=OUTCOME_SKIPPED,
            reason=reason,
        )
