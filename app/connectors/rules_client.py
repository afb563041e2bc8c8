"""
app/connectors/rules_client.py

Client for the rules (validation) service.
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

_JSON_HEADERS = {"Content-Type": "application/json"}


class RulesServiceClient(BaseServiceClient):
    def __init__(
        self,
        *,
        base_url: str,
        http_settings: ExternalHTTPSettings,
        breaker_settings: CircuitBreakerSettings,
        session: requests.Session | None = None,
    ) -> None:
        super().__init__(
            service_name="rules",
            base_url=base_url,
            http_settings=http_settings,
            breaker_settings=breaker_settings,
            session=session,
        )

    def upsert_profile(self, profile: str, rules_json: str) -> ServiceResult:
        return self._call(
            method="POST",
            url=self._url("rules", profile),
            data=rules_json,
            headers=_JSON_HEADERS,
        )

    def validate(self, profile: str, payload: str, explain: bool = False) -> ServiceResult:
        return self._call(
            method="POST",
            url=self._url("validate", profile),
            params={"explain": str(explain).lower()},
            data=payload,
            headers=_JSON_HEADERS,
        )


@lru_cache(maxsize=1)
def get_rules_client() -> RulesServiceClient:
    return RulesServiceClient(
        base_url=get_service_endpoint_settings().rules_url,
        http_settings=get_external_http_settings(),
        breaker_settings=get_circuit_breaker_settings(),
    )
