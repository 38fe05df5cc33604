"""
app/domain package marker.
"""

from app.domain.district import (
    MAX_HISTORY_MONTHS,
    PLACEHOLDER_PERFORMANCE_INDICATORS,
    DistrictComparisonEntry,
    DistrictRecord,
    MonthlySnapshot,
    PerformanceIndicators,
    StateSummary,
    TrendPoint,
)

__all__ = [
    "DistrictComparisonEntry",
    "DistrictRecord",
    "MAX_HISTORY_MONTHS",
    "MonthlySnapshot",
    "PLACEHOLDER_PERFORMANCE_INDICATORS",
    "PerformanceIndicators",
    "StateSummary",
    "TrendPoint",
]
