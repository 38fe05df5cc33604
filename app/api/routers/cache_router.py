"""
app/api/routers/cache_router.py

Cache invalidation endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from app.api.dependencies import get_district_data_service
from app.schemas.district import CacheClearResponse
from app.services.district_data_service import DistrictDataService

router = APIRouter(prefix="/cache", tags=["cache"])


@router.delete("", response_model=CacheClearResponse)
async def clear_all(
    service: DistrictDataService = Depends(get_district_data_service),
) -> CacheClearResponse:
    """
    Drop every cache entry and the memoized dataset.
    """

    return CacheClearResponse(key=None, cleared=service.clear_cache())


@router.delete("/{key}", response_model=CacheClearResponse)
async def clear_key(
    key: str,
    service: DistrictDataService = Depends(get_district_data_service),
) -> CacheClearResponse:
    return CacheClearResponse(key=key, cleared=service.clear_cache(key))
