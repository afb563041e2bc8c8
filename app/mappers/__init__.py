"""
app/mappers package marker.
"""

from app.mappers.customer_mapper import (
    CUSTOMER_COLUMNS,
    CustomerMapper,
    CustomerSerializer,
    MappingError,
)

__all__ = [
    "CUSTOMER_COLUMNS",
    "CustomerMapper",
    "CustomerSerializer",
    "MappingError",
]
