"""
Shared fakes for the backend service clients.

The fakes record every call so tests can assert on ordering and on what
was (or was not) sent to the backends.
"""

from __future__ import annotations

import json
from typing import Any, Callable

import pytest
import requests

from app.connectors.base import ServiceResult
from app.domain.customer import StorageMetadata


class FakeObjectClient:
    def __init__(self, existing_ids: set[str] | None = None) -> None:
        self.existing_ids = set(existing_ids or ())
        self.calls: list[tuple[str, str]] = []
        self.payloads: dict[str, str] = {}
        self.distinct_result: ServiceResult | None = None
        self.fail_ids: dict[str, ServiceResult] = {}
        self.raise_ids: dict[str, Exception] = {}

    def get_distinct(self, db: str, collection: str, field: str, filter_json: str = "{}") -> ServiceResult:
        self.calls.append(("distinct", field))
        if self.distinct_result is not None:
            return self.distinct_result
        return ServiceResult(status=200, value=set(self.existing_ids))

    def insert(self, db: str, collection: str, object_id: str, payload: str) -> ServiceResult:
        return self._write("insert", object_id, payload, created=True)

    def replace(self, db: str, collection: str, object_id: str, payload: str) -> ServiceResult:
        return self._write("replace", object_id, payload, created=False)

    def _write(self, op: str, object_id: str, payload: str, *, created: bool) -> ServiceResult:
        self.calls.append((op, object_id))
        if object_id in self.raise_ids:
            raise self.raise_ids[object_id]
        if object_id in self.fail_ids:
            return self.fail_ids[object_id]
        if created and object_id in self.existing_ids:
            return ServiceResult(status=409, details=f"Object with id '{object_id}' already exists.")
        self.existing_ids.add(object_id)
        self.payloads[object_id] = payload
        return ServiceResult(status=201 if created else 200, value=payload)

    @property
    def write_calls(self) -> list[tuple[str, str]]:
        return [call for call in self.calls if call[0] in {"insert", "replace"}]


class FakeStorageClient:
    drawer = "test-drawer"

    def __init__(self) -> None:
        self.calls: list[str] = []
        self.nodes: dict[str, bytes] = {}
        self.node_result: ServiceResult | None = None
        self.drawer_result: ServiceResult | None = None

    def create_drawer(self) -> ServiceResult:
        self.calls.append("create_drawer")
        return self.drawer_result or ServiceResult(status=201)

    def create_node(self, node_id: str, name: str, data: bytes) -> ServiceResult:
        self.calls.append("create_node")
        if self.node_result is not None:
            return self.node_result
        self.nodes[node_id] = data
        return ServiceResult(
            status=201,
            value=StorageMetadata(id=node_id, drawer=self.drawer, file_name=name, size=len(data)),
        )


def make_response(status: int, body: Any = None, *, content_type: str = "application/json") -> requests.Response:
    """Build a real requests.Response without a network round trip."""
    response = requests.Response()
    response.status_code = status
    if body is None:
        response._content = b""
    elif isinstance(body, (bytes, str)):
        response._content = body.encode("utf-8") if isinstance(body, str) else body
    else:
        response._content = json.dumps(body).encode("utf-8")
    response.headers["Content-Type"] = content_type
    return response


class ScriptedSession:
    """requests.Session stand-in that replays queued responses or exceptions."""

    def __init__(self, *outcomes: requests.Response | Exception) -> None:
        self.outcomes = list(outcomes)
        self.requests: list[dict[str, Any]] = []

    def request(self, **kwargs: Any) -> requests.Response:
        self.requests.append(kwargs)
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    def close(self) -> None:
        pass


@pytest.fixture()
def object_client() -> FakeObjectClient:
    return FakeObjectClient()


@pytest.fixture()
def storage_client() -> FakeStorageClient:
    return FakeStorageClient()


@pytest.fixture()
def response_factory() -> Callable[..., requests.Response]:
    return make_response


@pytest.fixture()
def session_factory() -> Callable[..., ScriptedSession]:
    return ScriptedSession
