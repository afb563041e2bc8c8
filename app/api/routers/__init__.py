"""
app/api/routers package marker.
"""

from app.api.routers.book_router import router as book_router
from app.api.routers.customer_router import router as customer_router

__all__ = [
    "book_router",
    "customer_router",
]
