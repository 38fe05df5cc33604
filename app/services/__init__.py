"""
app/services package marker.
"""

from app.services.aggregation_service import DistrictAggregator, month_ordinal
from app.services.cache_service import CacheEntry, CacheService
from app.services.district_data_service import DistrictDataService, DistrictNotFoundError
from app.services.report_card_service import ReportCard, ReportCardService

__all__ = [
    "CacheEntry",
    "CacheService",
    "DistrictAggregator",
    "DistrictDataService",
    "DistrictNotFoundError",
    "ReportCard",
    "ReportCardService",
    "month_ordinal",
]
