"""
app/connectors/object_client.py

Client for the object (document) store service.
"""

from __future__ import annotations

import logging
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

logger = logging.getLogger(__name__)

_JSON_HEADERS = {"Content-Type": "application/json"}
_TEXT_HEADERS = {"Content-Type": "text/plain"}


class ObjectServiceClient(BaseServiceClient):
    """
    CRUD, find and distinct calls against `{base}/{db}/{collection}`.
    """

    def __init__(
        self,
        *,
        base_url: str,
        http_settings: ExternalHTTPSettings,
        breaker_settings: CircuitBreakerSettings,
        session: requests.Session | None = None,
    ) -> None:
        super().__init__(
            service_name="object",
            base_url=base_url,
            http_settings=http_settings,
            breaker_settings=breaker_settings,
            session=session,
        )

    def get(self, db: str, collection: str, object_id: str) -> ServiceResult:
        return self._call(method="GET", url=self._url(db, collection, object_id))

    def insert(self, db: str, collection: str, object_id: str, payload: str) -> ServiceResult:
        return self._call(
            method="POST",
            url=self._url(db, collection, object_id),
            data=payload,
            headers=_JSON_HEADERS,
        )

    def replace(self, db: str, collection: str, object_id: str, payload: str) -> ServiceResult:
        return self._call(
            method="PUT",
            url=self._url(db, collection, object_id),
            data=payload,
            headers=_JSON_HEADERS,
        )

    def delete(self, db: str, collection: str, object_id: str) -> ServiceResult:
        return self._call(method="DELETE", url=self._url(db, collection, object_id))

    def find(
        self,
        db: str,
        collection: str,
        criteria: str,
        *,
        start: int = 0,
        limit: int = 10,
        sort_field: str | None = None,
        sort_descending: bool = False,
    ) -> ServiceResult:
        """
        Run a find query written in MongoDB find syntax.
        """

        params: dict[str, object] = {"from": start, "size": limit}
        if sort_field:
            params["sort"] = sort_field
            params["order"] = "desc" if sort_descending else "asc"
        return self._call(
            method="POST",
            url=self._url(db, collection, "find"),
            params=params,
            data=criteria or "{}",
            headers=_TEXT_HEADERS,
        )

    def get_distinct(self, db: str, collection: str, field: str, filter_json: str = "{}") -> ServiceResult:
        """
        Return the distinct values of ``field`` as a set of strings.
        """

        result = self._call(
            method="POST",
            url=self._url(db, collection, "distinct", field),
            data=filter_json or "{}",
            headers=_JSON_HEADERS,
        )
        if not result.is_success:
            return result

        values = result.value
        if not isinstance(values, list):
            logger.error(
                "Distinct response was not a list db=%s collection=%s field=%s",
                db,
                collection,
                field,
            )
            return ServiceResult(
                status=502,
                details=f"object: distinct '{field}' response was not a JSON array.",
            )
        return ServiceResult(
            status=result.status,
            value={str(value) for value in values if value is not None},
        )


@lru_cache(maxsize=1)
def get_object_client() -> ObjectServiceClient:
    """
    Build and cache the object service client.
    """

    return ObjectServiceClient(
        base_url=get_service_endpoint_settings().object_url,
        http_settings=get_external_http_settings(),
        breaker_settings=get_circuit_breaker_settings(),
    )
