"""
app/connectors package marker.
"""

from app.connectors.base import BaseServiceClient, ServiceResult
from app.connectors.circuit_breaker import CircuitBreaker
from app.connectors.indexing_client import IndexingServiceClient, get_indexing_client
from app.connectors.object_client import ObjectServiceClient, get_object_client
from app.connectors.rules_client import RulesServiceClient, get_rules_client
from app.connectors.storage_client import StorageServiceClient, get_storage_client

__all__ = [
    "BaseServiceClient",
    "CircuitBreaker",
    "IndexingServiceClient",
    "ObjectServiceClient",
    "RulesServiceClient",
    "ServiceResult",
    "StorageServiceClient",
    "get_indexing_client",
    "get_object_client",
    "get_rules_client",
    "get_storage_client",
]
