"""
app/connectors/base.py

Base client abstraction and shared HTTP mechanics for the backend services.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any

import requests

from app.config import CircuitBreakerSettings, ExternalHTTPSettings
from app.connectors.circuit_breaker import CircuitBreaker

logger = logging.getLogger(__name__)

RETRYABLE_STATUS_CODES = {429, 500, 502, 503, 504}
UNAVAILABLE_STATUS = 503
TOO_MANY_REQUESTS_STATUS = 429


@dataclass(frozen=True)
class ServiceResult:
    """
    Outcome of one backend service call.

    Failures of every kind (HTTP error, transport fault, open breaker) are
    carried as a non-success result rather than raised.
    """

    status: int
    value: Any = None
    details: str | None = None
    circuit_open: bool = False

    @property
    def is_success(self) -> bool:
        return 200 <= self.status < 300


class BaseServiceClient:
    """
    Shared request/retry/circuit-breaker behaviour for backend clients.
    """

    service_name: str

    def __init__(
        self,
        *,
        service_name: str,
        base_url: str,
        http_settings: ExternalHTTPSettings,
        breaker_settings: CircuitBreakerSettings,
        session: requests.Session | None = None,
    ) -> None:
        self.service_name = service_name
        self._base_url = base_url.rstrip("/")
        self._session = session or requests.Session()
        self._timeout_seconds = http_settings.timeout_seconds
        self._max_retries = http_settings.max_retries
        self._backoff_initial_seconds = http_settings.backoff_initial_seconds
        self._backoff_multiplier = http_settings.backoff_multiplier
        self.breaker = CircuitBreaker(name=service_name, settings=breaker_settings)

    def close(self) -> None:
        self._session.close()

    def _url(self, *segments: str) -> str:
        return "/".join([self._base_url, *(str(segment).strip("/") for segment in segments)])

    def _call(
        self,
        *,
        method: str,
        url: str,
        params: dict[str, Any] | None = None,
        data: str | bytes | None = None,
        files: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> ServiceResult:
        """
        Execute an HTTP request with circuit breaking and exponential backoff.
        """

        if not self.breaker.allow_request():
            logger.warning(
                "Service call rejected by open circuit service=%s url=%s",
                self.service_name,
                url,
            )
            return ServiceResult(
                status=UNAVAILABLE_STATUS,
                details=f"{self.service_name} is unavailable (circuit open).",
                circuit_open=True,
            )

        if isinstance(data, str):
            data = data.encode("utf-8")

        try:
            return self._attempt(
                method=method,
                url=url,
                params=params,
                data=data,
                files=files,
                headers=headers,
            )
        except Exception:
            # Settle the breaker so a half-open trial is never left in flight.
            self.breaker.record_failure()
            raise

    def _attempt(
        self,
        *,
        method: str,
        url: str,
        params: dict[str, Any] | None,
        data: bytes | None,
        files: dict[str, Any] | None,
        headers: dict[str, str] | None,
    ) -> ServiceResult:
        last_error: str | None = None
        last_status = UNAVAILABLE_STATUS
        for attempt in range(self._max_retries + 1):
            try:
                response = self._session.request(
                    method=method,
                    url=url,
                    params=params,
                    data=data,
                    files=files,
                    headers=headers,
                    timeout=self._timeout_seconds,
                )
            except requests.RequestException as exc:
                last_error = f"{self.service_name}: transport failure: {exc}"
                last_status = UNAVAILABLE_STATUS
            else:
                if response.status_code not in RETRYABLE_STATUS_CODES:
                    return self._classify(response, url)
                last_error = self._error_detail(response)
                last_status = response.status_code

            if attempt >= self._max_retries:
                break

            backoff_seconds = self._backoff_initial_seconds * (self._backoff_multiplier**attempt)
            logger.warning(
                "Service call retry service=%s attempt=%s/%s wait_seconds=%.2f url=%s",
                self.service_name,
                attempt + 1,
                self._max_retries,
                backoff_seconds,
                url,
            )
            time.sleep(backoff_seconds)

        if last_status == TOO_MANY_REQUESTS_STATUS:
            # Throttling is not an outage.
            self.breaker.record_success()
        else:
            self.breaker.record_failure()
        logger.error(
            "Service call exhausted retries service=%s url=%s status=%s error=%s",
            self.service_name,
            url,
            last_status,
            last_error,
        )
        return ServiceResult(status=last_status, details=last_error)

    def _classify(self, response: requests.Response, url: str) -> ServiceResult:
        # 4xx counts as a healthy service.
        if response.status_code >= 500:
            self.breaker.record_failure()
        else:
            self.breaker.record_success()
        if 200 <= response.status_code < 300:
            return ServiceResult(status=response.status_code, value=self._decode_body(response))

        detail = self._error_detail(response)
        logger.info(
            "Service call rejected service=%s status=%s url=%s detail=%s",
            self.service_name,
            response.status_code,
            url,
            detail,
        )
        return ServiceResult(status=response.status_code, details=detail)

    @staticmethod
    def _decode_body(response: requests.Response) -> Any:
        content_type = (response.headers.get("Content-Type") or "").lower()
        if "json" in content_type and response.content:
            try:
                return response.json()
            except ValueError:
                return response.text
        return response.text

    def _error_detail(self, response: requests.Response) -> str:
        body = self._decode_body(response)
        if isinstance(body, dict):
            for key in ("detail", "message", "title"):
                value = body.get(key)
                if isinstance(value, str) and value.strip():
                    return value.strip()
        if isinstance(body, str) and body.strip():
            return body.strip()
        return f"{self.service_name} responded with status {response.status_code}."
