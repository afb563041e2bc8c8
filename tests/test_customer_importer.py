"""
tests/test_customer_importer.py

Reconciliation and identifier resolution against an in-memory object store.
"""

from __future__ import annotations

import json

import pytest

from app.connectors.base import ServiceResult
from app.domain.customer import Customer
from app.errors import FatalPipelineError
from app.mappers.customer_mapper import CustomerSerializer
from app.services.customer_importer import (
    DUPLICATE_IN_BATCH_REASON,
    CustomerImporter,
    ExistingIdResolver,
    ImportCandidate,
)


def _importer(client, max_workers: int = 1) -> CustomerImporter:
    return CustomerImporter(
        client=client,
        serializer=CustomerSerializer(),
        db_name="bookstore",
        collection="customers",
        max_workers=max_workers,
    )


def _candidates(*ids: str) -> list[ImportCandidate]:
    return [
        ImportCandidate(row_number=index, customer=Customer(id=customer_id, first_name="Name"))
        for index, customer_id in enumerate(ids, start=1)
    ]


class TestExistingIdResolver:
    def test_returns_snapshot(self, object_client) -> None:
        object_client.existing_ids = {"1", "2"}
        resolver = ExistingIdResolver(client=object_client, db_name="bookstore", collection="customers")

        assert resolver.resolve() == frozenset({"1", "2"})
        assert object_client.calls == [("distinct", "id")]

    def test_failure_is_fatal(self, object_client) -> None:
        object_client.distinct_result = ServiceResult(status=503, details="object unavailable", circuit_open=True)
        resolver = ExistingIdResolver(client=object_client, db_name="bookstore", collection="customers")

        with pytest.raises(FatalPipelineError) as excinfo:
            resolver.resolve()

        assert excinfo.value.code == "identifier_resolution_failed"
        assert excinfo.value.status == 503

    def test_unexpected_exception_is_fatal(self, object_client) -> None:
        def boom(*args, **kwargs):
            raise RuntimeError("socket closed")

        object_client.get_distinct = boom
        resolver = ExistingIdResolver(client=object_client, db_name="bookstore", collection="customers")

        with pytest.raises(FatalPipelineError, match="socket closed"):
            resolver.resolve()


class TestCustomerImporter:
    def test_inserts_unknown_and_replaces_known(self, object_client) -> None:
        outcomes = _importer(object_client).import_customers(_candidates("1", "2"), frozenset({"2"}))

        assert [(o.key, o.status) for o in outcomes] == [("1", "inserted"), ("2", "updated")]
        assert object_client.write_calls == [("insert", "1"), ("replace", "2")]

    def test_payload_uses_serializer_naming(self, object_client) -> None:
        _importer(object_client).import_customers(_candidates("1"), frozenset())

        assert json.loads(object_client.payloads["1"]) == {"id": "1", "firstName": "Name"}

    def test_remote_rejection_is_skipped_and_processing_continues(self, object_client) -> None:
        object_client.fail_ids["1"] = ServiceResult(status=400, details="Invalid JSON")

        outcomes = _importer(object_client).import_customers(_candidates("1", "2"), frozenset())

        assert outcomes[0].is_skipped
        assert outcomes[0].reason == "Invalid JSON"
        assert outcomes[1].status == "inserted"

    def test_exception_is_skipped_with_message(self, object_client) -> None:
        object_client.raise_ids["1"] = ConnectionError("connection refused")

        outcomes = _importer(object_client).import_customers(_candidates("1", "2"), frozenset())

        assert outcomes[0].is_skipped
        assert outcomes[0].reason == "connection refused"
        assert outcomes[1].status == "inserted"

    def test_circuit_open_result_is_a_skip(self, object_client) -> None:
        object_client.fail_ids["1"] = ServiceResult(status=503, details="object is unavailable (circuit open).", circuit_open=True)

        outcomes = _importer(object_client).import_customers(_candidates("1"), frozenset())

        assert outcomes[0].is_skipped
        assert "circuit open" in outcomes[0].reason

    def test_failure_without_detail_reports_status(self, object_client) -> None:
        object_client.fail_ids["1"] = ServiceResult(status=500)

        outcomes = _importer(object_client).import_customers(_candidates("1"), frozenset())

        assert outcomes[0].reason == "Object service responded with status 500."

    def test_duplicate_identifier_in_batch_is_skipped_without_remote_call(self, object_client) -> None:
        outcomes = _importer(object_client).import_customers(_candidates("1", "1"), frozenset())

        assert [o.status for o in outcomes] == ["inserted", "skipped"]
        assert outcomes[1].reason == DUPLICATE_IN_BATCH_REASON
        assert object_client.write_calls == [("insert", "1")]

    def test_stale_snapshot_conflict_is_skipped(self, object_client) -> None:
        # Inserted by someone else after the snapshot was taken.
        object_client.existing_ids = {"1"}

        outcomes = _importer(object_client).import_customers(_candidates("1"), frozenset())

        assert outcomes[0].is_skipped
        assert "already exists" in outcomes[0].reason

    def test_worker_pool_keeps_input_order(self, object_client) -> None:
        ids = [str(i) for i in range(20)]
        existing = frozenset(ids[::2])

        outcomes = _importer(object_client, max_workers=4).import_customers(_candidates(*ids), existing)

        assert [o.key for o in outcomes] == ids
        assert [o.status for o in outcomes] == ["updated" if i in existing else "inserted" for i in ids]
