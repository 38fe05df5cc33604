"""
app/schemas/district.py

Response schemas for district statistics endpoints.

Field names are snake_case in Python and rendered camelCase on the wire
(``jobCardsIssued``, ``currentMonthData``, ...).
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.domain.district import (
    DistrictComparisonEntry,
    DistrictRecord,
    MonthlySnapshot,
    PerformanceIndicators,
    StateSummary,
    TrendPoint,
)
from app.services.report_card_service import ReportCard


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class MonthlySnapshotResponse(_CamelModel):
    month: str
    year: str
    job_cards_issued: float
    workers_registered: float
    households_employed: float
    person_days_generated: float
    average_wage_rate: float
    total_expenditure: float
    women_participation: float
    sc_participation: float
    st_participation: float
    completed_works: float
    ongoing_works: float

    @classmethod
    def from_domain(cls, snapshot: MonthlySnapshot) -> MonthlySnapshotResponse:
        return cls.model_validate(snapshot, from_attributes=True)


class PerformanceIndicatorsResponse(_CamelModel):
    employment_generation: int
    wage_payment_efficiency: int
    inclusion_of_marginalized: int
    work_completion: int
    overall_performance: int

    @classmethod
    def from_domain(cls, indicators: PerformanceIndicators) -> PerformanceIndicatorsResponse:
        return cls.model_validate(indicators, from_attributes=True)


class DistrictRecordResponse(_CamelModel):
    district_name: str
    state_name: str
    current_month_data: MonthlySnapshotResponse
    historical_data: list[MonthlySnapshotResponse] = Field(default_factory=list)
    performance_indicators: PerformanceIndicatorsResponse

    @classmethod
    def from_domain(cls, record: DistrictRecord) -> DistrictRecordResponse:
        return cls(
            district_name=record.district_name,
            state_name=record.state_name,
            current_month_data=MonthlySnapshotResponse.from_domain(record.current_month_data),
            historical_data=[MonthlySnapshotResponse.from_domain(s) for s in record.historical_data],
            performance_indicators=PerformanceIndicatorsResponse.from_domain(
                record.performance_indicators
            ),
        )


class DistrictListResponse(_CamelModel):
    state_name: str
    districts: list[str] = Field(default_factory=list)


class DistrictComparisonEntryResponse(_CamelModel):
    district_name: str
    households_employed: float
    total_expenditure: float
    women_participation: float

    @classmethod
    def from_domain(cls, entry: DistrictComparisonEntry) -> DistrictComparisonEntryResponse:
        return cls.model_validate(entry, from_attributes=True)


class DistrictComparisonResponse(_CamelModel):
    state_name: str
    districts: list[DistrictComparisonEntryResponse] = Field(default_factory=list)


class StateSummaryResponse(_CamelModel):
    state_name: str
    total_job_cards: float
    total_workers: float
    total_households: float
    total_expenditure: float
    district_count: int

    @classmethod
    def from_domain(cls, summary: StateSummary) -> StateSummaryResponse:
        return cls.model_validate(summary, from_attributes=True)


class ReportCardResponse(_CamelModel):
    district_name: str
    score: int
    grade: str
    label: str
    insights: list[str] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, card: ReportCard) -> ReportCardResponse:
        return cls.model_validate(card, from_attributes=True)


class TrendPointResponse(_CamelModel):
    label: str
    person_days: float

    @classmethod
    def from_domain(cls, point: TrendPoint) -> TrendPointResponse:
        return cls.model_validate(point, from_attributes=True)


class PersonDaysTrendResponse(_CamelModel):
    district_name: str
    points: list[TrendPointResponse] = Field(default_factory=list)


class CacheClearResponse(_CamelModel):
    key: str | None = None
    cleared: bool


class HealthResponse(_CamelModel):
    status: str
    cache_entries: int
    cache_ttl_seconds: float
