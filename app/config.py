"""
app/config.py

Application-level configuration helpers.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]

_ALLOWED_NAMING_POLICIES = {"camel", "snake"}


def load_env_files() -> None:
    """
    Load simple KEY=VALUE pairs from `.env` and `.env.local` (if present).
    Existing process environment variables are not overwritten.
    """

    for filename in (".env", ".env.local"):
        env_path = PROJECT_ROOT / filename
        if not env_path.exists():
            continue

        for raw_line in env_path.read_text(encoding="utf-8").splitlines():
            line = raw_line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue

            key, value = line.split("=", 1)
            key = key.strip()
            value = value.strip().strip('"').strip("'")
            if key and key not in os.environ:
                os.environ[key] = value


@lru_cache(maxsize=1)
def _load_env_once() -> None:
    """
    Ensure project `.env` files are loaded once before reading app settings.
    """

    load_env_files()


def _get_bool_env(name: str, default: bool) -> bool:
    """
    Read a boolean from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    return raw_value.strip().lower() in {"1", "true", "yes", "on"}


def _get_int_env(name: str, default: int) -> int:
    """
    Read an integer from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return int(raw_value)
    except ValueError:
        return default


def _get_float_env(name: str, default: float) -> float:
    """
    Read a float from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return float(raw_value)
    except ValueError:
        return default


def _get_str_env(name: str, default: str) -> str:
    """
    Read a string from environment variables with fallback.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return default
    stripped = value.strip()
    return stripped if stripped else default


def _get_optional_str_env(name: str) -> str | None:
    """
    Read an optional string value from environment variables.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return None
    stripped = value.strip()
    return stripped if stripped else None


@dataclass(frozen=True)
class ServiceEndpointSettings:
    """
    Base URLs of the backend services this API forwards to.
    """

    app_name: str = "Example-Bookstore-Customer"
    object_url: str = "http://fdns-ms-object:8083/api/1.0"
    storage_url: str = "http://fdns-ms-storage:8082/api/1.0"
    rules_url: str = "http://fdns-ms-rules:8086/api/1.0"
    indexing_url: str = "http://fdns-ms-indexing:8084/api/1.0"


@dataclass(frozen=True)
class ExternalHTTPSettings:
    """
    Shared HTTP behavior settings for backend service clients.
    """

    timeout_seconds: float = 15.0
    max_retries: int = 3
    backoff_initial_seconds: float = 0.5
    backoff_multiplier: float = 2.0


@dataclass(frozen=True)
class CircuitBreakerSettings:
    """
    Failure threshold and cool-down for the per-client circuit breaker.
    """

    failure_threshold: int = 5
    recovery_timeout_seconds: float = 30.0


@dataclass(frozen=True)
class CustomerImportSettings:
    """
    Runtime settings for customer CRUD and the bulk CSV import.
    """

    db_name: str = "bookstore"
    collection: str = "customers"
    id_field: str = "id"
    storage_drawer: str = "bookstore-customer-imports"
    naming_policy: str = "camel"
    omit_null_fields: bool = True
    max_workers: int = 1
    search_config: str = "bookstore-customers"


@dataclass(frozen=True)
class BookSettings:
    """
    Object store coordinates for the book routes.
    """

    db_name: str = "bookstore"
    collection: str = "books"


@lru_cache(maxsize=1)
def get_service_endpoint_settings() -> ServiceEndpointSettings:
    """
    Return backend service URLs from environment variables.
    """

    defaults = ServiceEndpointSettings()
    return ServiceEndpointSettings(
        app_name=_get_str_env("APP_NAME", defaults.app_name),
        object_url=_get_str_env("OBJECT_URL", defaults.object_url).rstrip("/"),
        storage_url=_get_str_env("STORAGE_URL", defaults.storage_url).rstrip("/"),
        rules_url=_get_str_env("RULES_URL", defaults.rules_url).rstrip("/"),
        indexing_url=_get_str_env("INDEXING_URL", defaults.indexing_url).rstrip("/"),
    )


@lru_cache(maxsize=1)
def get_external_http_settings() -> ExternalHTTPSettings:
    """
    Return shared client HTTP settings from environment variables.
    """

    return ExternalHTTPSettings(
        timeout_seconds=max(1.0, _get_float_env("EXTERNAL_HTTP_TIMEOUT_SECONDS", 15.0)),
        max_retries=max(0, _get_int_env("EXTERNAL_HTTP_MAX_RETRIES", 3)),
        backoff_initial_seconds=max(0.1, _get_float_env("EXTERNAL_HTTP_BACKOFF_INITIAL_SECONDS", 0.5)),
        backoff_multiplier=max(1.0, _get_float_env("EXTERNAL_HTTP_BACKOFF_MULTIPLIER", 2.0)),
    )


@lru_cache(maxsize=1)
def get_circuit_breaker_settings() -> CircuitBreakerSettings:
    """
    Return circuit breaker settings from environment variables.
    """

    return CircuitBreakerSettings(
        failure_threshold=max(1, _get_int_env("CIRCUIT_BREAKER_FAILURE_THRESHOLD", 5)),
        recovery_timeout_seconds=max(1.0, _get_float_env("CIRCUIT_BREAKER_RECOVERY_SECONDS", 30.0)),
    )


@lru_cache(maxsize=1)
def get_customer_import_settings() -> CustomerImportSettings:
    """
    Return customer import settings from environment variables.

    Unknown naming policies fall back to camelCase.
    """

    naming_policy = _get_str_env("CUSTOMER_JSON_NAMING", "camel").lower()
    if naming_policy not in _ALLOWED_NAMING_POLICIES:
        naming_policy = "camel"

    return CustomerImportSettings(
        db_name=_get_str_env("CUSTOMER_DB_NAME", "bookstore"),
        collection=_get_str_env("CUSTOMER_COLLECTION", "customers"),
        id_field=_get_str_env("CUSTOMER_ID_FIELD", "id"),
        storage_drawer=_get_str_env("CUSTOMER_IMPORT_DRAWER", "bookstore-customer-imports"),
        naming_policy=naming_policy,
        omit_null_fields=_get_bool_env("CUSTOMER_JSON_OMIT_NULLS", True),
        max_workers=max(1, _get_int_env("CUSTOMER_IMPORT_MAX_WORKERS", 1)),
        search_config=_get_str_env("CUSTOMER_SEARCH_CONFIG", "bookstore-customers"),
    )


@lru_cache(maxsize=1)
def get_book_settings() -> BookSettings:
    """
    Return book collection settings from environment variables.
    """

    return BookSettings(
        db_name=_get_str_env("BOOK_DB_NAME", "bookstore"),
        collection=_get_str_env("BOOK_COLLECTION", "books"),
    )


def get_app_env() -> str:
    """
    Return the deployment environment name (`development` when unset).
    """

    return _get_str_env("APP_ENV", "development").lower()


def get_optional_setting(name: str) -> str | None:
    """
    Read an optional raw setting; used by startup validation.
    """

    return _get_optional_str_env(name)
