"""
app/schemas package marker.
"""

from app.schemas.district import (
    CacheClearResponse,
    DistrictComparisonEntryResponse,
    DistrictComparisonResponse,
    DistrictListResponse,
    DistrictRecordResponse,
    HealthResponse,
    MonthlySnapshotResponse,
    PerformanceIndicatorsResponse,
    PersonDaysTrendResponse,
    ReportCardResponse,
    StateSummaryResponse,
    TrendPointResponse,
)

__all__ = [
    "CacheClearResponse",
    "DistrictComparisonEntryResponse",
    "DistrictComparisonResponse",
    "DistrictListResponse",
    "DistrictRecordResponse",
    "HealthResponse",
    "MonthlySnapshotResponse",
    "PerformanceIndicatorsResponse",
    "PersonDaysTrendResponse",
    "ReportCardResponse",
    "StateSummaryResponse",
    "TrendPointResponse",
]
