"""
app/api/routers package marker.
"""

from app.api.routers.cache_router import router as cache_router
from app.api.routers.districts import router as districts_router

__all__ = [
    "cache_router",
    "districts_router",
]
