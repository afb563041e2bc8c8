"""
app/connectors/storage_client.py

Client for the blob storage service (drawers and nodes).
"""

from __future__ import annotations

from functools import lru_cache

import requests

from app.config import (
    CircuitBreakerSettings,
    ExternalHTTPSettings,
    get_circuit_breaker_settings,
    get_customer_import_settings,
    get_external_http_settings,
    get_service_endpoint_settings,
)
from app.connectors.base import BaseServiceClient, ServiceResult
from app.domain.customer import StorageMetadata


class StorageServiceClient(BaseServiceClient):
    """
    Stores raw byte payloads as nodes inside one drawer.
    """

    def __init__(
        self,
        *,
        base_url: str,
        drawer: str,
        http_settings: ExternalHTTPSettings,
        breaker_settings: CircuitBreakerSettings,
        session: requests.Session | None = None,
    ) -> None:
        super().__init__(
            service_name="storage",
            base_url=base_url,
            http_settings=http_settings,
            breaker_settings=breaker_settings,
            session=session,
        )
        self.drawer = drawer

    def create_drawer(self) -> ServiceResult:
        return self._call(method="PUT", url=self._url("drawer", self.drawer))

    def get_drawer(self) -> ServiceResult:
        return self._call(method="GET", url=self._url("drawer", self.drawer))

    def delete_drawer(self) -> ServiceResult:
        return self._call(method="DELETE", url=self._url("drawer", self.drawer))

    def list_nodes(self) -> ServiceResult:
        return self._call(method="GET", url=self._url("node", self.drawer))

    def create_node(self, node_id: str, name: str, data: bytes) -> ServiceResult:
        """
        Upload ``data`` as one node; the success value is a StorageMetadata.
        """

        result = self._call(
            method="POST",
            url=self._url("node", self.drawer, node_id),
            params={"name": name},
            files={"file": (name, data, "application/octet-stream")},
        )
        if not result.is_success:
            return result
        return ServiceResult(
            status=result.status,
            value=StorageMetadata.from_response(
                result.value,
                node_id=node_id,
                drawer=self.drawer,
                file_name=name,
                size=len(data),
            ),
        )

    def delete_node(self, node_id: str) -> ServiceResult:
        return self._call(method="DELETE", url=self._url("node", self.drawer, node_id))


@lru_cache(maxsize=1)
def get_storage_client() -> StorageServiceClient:
    """
    Build and cache the storage client bound to the import drawer.
    """

    return StorageServiceClient(
        base_url=get_service_endpoint_settings().storage_url,
        drawer=get_customer_import_settings().storage_drawer,
        http_settings=get_external_http_settings(),
        breaker_settings=get_circuit_breaker_settings(),
    )
