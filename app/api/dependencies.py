"""
app/api/dependencies.py

Shared FastAPI dependencies.
"""

from __future__ import annotations

from fastapi import HTTPException, Request, status

from app.services.district_data_service import DistrictDataService


def get_district_data_service(request: Request) -> DistrictDataService:
    """
    Return the service instance created by the application lifespan.
    """

    service = getattr(request.app.state, "district_data_service", None)
    if service is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="District data service is not initialized.",
        )
    return service
