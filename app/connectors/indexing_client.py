"""
app/connectors/indexing_client.py

Client for the search indexing service.
"""

from __future__ import annotations

from functools import lru_cache

import requests

from app.config import (
    CircuitBreakerSettings,
    ExternalHTTPSettings,
    get_circuit_breaker_settings,
    get_external_http_settings,
    get_service_endpoint_settings,
)
from app.connectors.base import BaseServiceClient, ServiceResult


class IndexingServiceClient(BaseServiceClient):
    def __init__(
        self,
        *,
        base_url: str,
        http_settings: ExternalHTTPSettings,
        breaker_settings: CircuitBreakerSettings,
        session: requests.Session | None = None,
    ) -> None:
        super().__init__(
            service_name="indexing",
            base_url=base_url,
            http_settings=http_settings,
            breaker_settings=breaker_settings,
            session=session,
        )

    def search(self, config_name: str, query: str, *, start: int = 0, size: int = 10) -> ServiceResult:
        """
        Full-text search over the index configured as ``config_name``.
        """

        return self._call(
            method="GET",
            url=self._url(config_name, "search"),
            params={"query": query, "from": start, "size": size},
        )


@lru_cache(maxsize=1)
def get_indexing_client() -> IndexingServiceClient:
    return IndexingServiceClient(
        base_url=get_service_endpoint_settings().indexing_url,
        http_settings=get_external_http_settings(),
        breaker_settings=get_circuit_breaker_settings(),
    )
