"""
app/domain/district.py

Domain models produced by the district aggregation pipeline.

All models are frozen dataclasses. They are built once per ingestion pass and
never mutated afterwards; ``to_dict`` / ``from_dict`` convert them to and from
the JSON-ready shape stored by the cache service.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from typing import Any, Final

MAX_HISTORY_MONTHS: Final[int] = 12
"""Upper bound on the number of snapshots kept in ``historical_data``."""


@dataclass(frozen=True)
class MonthlySnapshot:
    """
    One district's reported metrics for one reporting period.

    Every numeric field is a finite, non-negative float.
    """

    month: str
    year: str
    job_cards_issued: float = 0.0
    workers_registered: float = 0.0
    households_employed: float = 0.0
    person_days_generated: float = 0.0
    average_wage_rate: float = 0.0
    total_expenditure: float = 0.0
    women_participation: float = 0.0
    sc_participation: float = 0.0
    st_participation: float = 0.0
    completed_works: float = 0.0
    ongoing_works: float = 0.0

    @classmethod
    def empty(cls) -> MonthlySnapshot:
        """Zero-filled snapshot used when a district has no history."""
        return cls(month="", year="")

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> MonthlySnapshot:
        known = {f.name for f in fields(cls)}
        return cls(**{key: value for key, value in payload.items() if key in known})


@dataclass(frozen=True)
class PerformanceIndicators:
    """
    Named indicator scores on a 1-5 scale.

    The defaults are static placeholder scores. They are not derived from the
    snapshot history.
    """

    employment_generation: int = 4
    wage_payment_efficiency: int = 4
    inclusion_of_marginalized: int = 3
    work_completion: int = 4
    overall_performance: int = 4


PLACEHOLDER_PERFORMANCE_INDICATORS: Final[PerformanceIndicators] = PerformanceIndicators()


@dataclass(frozen=True)
class DistrictRecord:
    """
    Aggregated view of one district within one state.

    ``current_month_data`` equals ``historical_data[0]`` when history exists,
    otherwise it is :meth:`MonthlySnapshot.empty`.
    """

    district_name: str
    state_name: str
    current_month_data: MonthlySnapshot
    historical_data: tuple[MonthlySnapshot, ...] = ()
    performance_indicators: PerformanceIndicators = field(
        default_factory=PerformanceIndicators
    )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> DistrictRecord:
        return cls(
            district_name=payload["district_name"],
            state_name=payload["state_name"],
            current_month_data=MonthlySnapshot.from_dict(payload["current_month_data"]),
            historical_data=tuple(
                MonthlySnapshot.from_dict(item) for item in payload.get("historical_data", ())
            ),
            performance_indicators=PerformanceIndicators(
                **payload.get("performance_indicators", {})
            ),
        )


@dataclass(frozen=True)
class DistrictComparisonEntry:
    """
    Minimal per-district shape used by the comparison view.
    """

    district_name: str
    households_employed: float
    total_expenditure: float
    women_participation: float

    @classmethod
    def from_record(cls, record: DistrictRecord) -> DistrictComparisonEntry:
        current = record.current_month_data
        return cls(
            district_name=record.district_name,
            households_employed=current.households_employed,
            total_expenditure=current.total_expenditure,
            women_participation=current.women_participation,
        )


@dataclass(frozen=True)
class StateSummary:
    """
    State-level totals summed over each district's current snapshot.
    """

    state_name: str
    total_job_cards: float
    total_workers: float
    total_households: float
    total_expenditure: float
    district_count: int


@dataclass(frozen=True)
class TrendPoint:
    """One labelled point of a district's person-days series."""

    label: str
    person_days: float
