"""
app/api/routers/districts.py

Read-only district statistics endpoints.

GET /states/{state}/districts
GET /states/{state}/districts/{district}
GET /states/{state}/districts/{district}/report-card
GET /states/{state}/districts/{district}/trend
GET /states/{state}/summary
GET /states/{state}/comparison?districts=A&districts=B

Error mapping
-------------
DistrictNotFoundError -> 404
DatasetLoadError      -> 503 (only reached when no stale cache entry exists)
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable
from typing import TypeVar

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.api.dependencies import get_district_data_service
from app.connectors.dataset_source import DatasetLoadError
from app.schemas.district import (
    DistrictComparisonEntryResponse,
    DistrictComparisonResponse,
    DistrictListResponse,
    DistrictRecordResponse,
    PersonDaysTrendResponse,
    ReportCardResponse,
    StateSummaryResponse,
    TrendPointResponse,
)
from app.services.district_data_service import DistrictDataService, DistrictNotFoundError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/states/{state}", tags=["districts"])

T = TypeVar("T")


async def _call(awaitable: Awaitable[T]) -> T:
    try:
        return await awaitable
    except DistrictNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        ) from exc
    except DatasetLoadError as exc:
        logger.error("District dataset unavailable: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="District dataset is temporarily unavailable.",
        ) from exc


@router.get("/districts", response_model=DistrictListResponse)
async def list_districts(
    state: str,
    service: DistrictDataService = Depends(get_district_data_service),
) -> DistrictListResponse:
    names = await _call(service.get_district_list(state))
    return DistrictListResponse(state_name=state, districts=names)


@router.get("/districts/{district}", response_model=DistrictRecordResponse)
async def get_district(
    state: str,
    district: str,
    service: DistrictDataService = Depends(get_district_data_service),
) -> DistrictRecordResponse:
    """
    Return the current snapshot and up to 12 months of history for one district.
    """

    record = await _call(service.get_district_data(state, district))
    return DistrictRecordResponse.from_domain(record)


@router.get("/districts/{district}/report-card", response_model=ReportCardResponse)
async def get_report_card(
    state: str,
    district: str,
    service: DistrictDataService = Depends(get_district_data_service),
) -> ReportCardResponse:
    card = await _call(service.get_report_card(state, district))
    return ReportCardResponse.from_domain(card)


@router.get("/districts/{district}/trend", response_model=PersonDaysTrendResponse)
async def get_person_days_trend(
    state: str,
    district: str,
    service: DistrictDataService = Depends(get_district_data_service),
) -> PersonDaysTrendResponse:
    points = await _call(service.get_person_days_trend(state, district))
    return PersonDaysTrendResponse(
        district_name=district,
        points=[TrendPointResponse.from_domain(point) for point in points],
    )


@router.get("/summary", response_model=StateSummaryResponse)
async def get_state_summary(
    state: str,
    service: DistrictDataService = Depends(get_district_data_service),
) -> StateSummaryResponse:
    summary = await _call(service.get_state_data(state))
    return StateSummaryResponse.from_domain(summary)


@router.get("/comparison", response_model=DistrictComparisonResponse)
async def compare_districts(
    state: str,
    districts: list[str] = Query(..., description="District names in display order"),
    service: DistrictDataService = Depends(get_district_data_service),
) -> DistrictComparisonResponse:
    """
    Compare headline figures for several districts; unknown names are skipped.
    """

    entries = await _call(service.get_comparative_data(state, districts))
    return DistrictComparisonResponse(
        state_name=state,
        districts=[DistrictComparisonEntryResponse.from_domain(entry) for entry in entries],
    )
