"""
app/services/report_card_service.py

Rule-based report card for a district's current snapshot.

Score (0-100) is the sum of three banded components:

    households employed   >50000: 40   >30000: 30   >10000: 20   else 10
    workers registered   >100000: 30   >50000: 20                else 10
    total expenditure      >5000: 30    >2000: 20                else 10

The grade is read off the score; insight codes flag notable conditions.
Pure computation, no I/O.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Final, Sequence

from app.domain.district import DistrictRecord, MonthlySnapshot

INSIGHT_EXCELLENT_PERFORMANCE: Final[str] = "excellent_performance"
INSIGHT_NEEDS_IMPROVEMENT: Final[str] = "needs_improvement"
INSIGHT_HIGH_WOMEN_PARTICIPATION: Final[str] = "high_women_participation"

# (lower bound exclusive, points); first match wins, last entry is the floor.
HOUSEHOLD_BANDS: Final[tuple[tuple[float, int], ...]] = ((50000, 40), (30000, 30), (10000, 20))
HOUSEHOLD_FLOOR: Final[int] = 10
WORKER_BANDS: Final[tuple[tuple[float, int], ...]] = ((100000, 30), (50000, 20))
WORKER_FLOOR: Final[int] = 10
EXPENDITURE_BANDS: Final[tuple[tuple[float, int], ...]] = ((5000, 30), (2000, 20))
EXPENDITURE_FLOOR: Final[int] = 10

# (minimum score inclusive, grade, label), highest first.
GRADE_SCALE: Final[tuple[tuple[int, str, str], ...]] = (
    (85, "A+", "Excellent"),
    (75, "A", "Very Good"),
    (65, "B", "Good"),
    (50, "C", "Average"),
    (35, "D", "Below Average"),
)
FAILING_GRADE: Final[tuple[str, str]] = ("F", "Needs Improvement")

EXCELLENT_SCORE_THRESHOLD: Final[int] = 75
IMPROVEMENT_SCORE_THRESHOLD: Final[int] = 50
# Women person-days are divided by this before comparing with the threshold.
WOMEN_PARTICIPATION_DIVISOR: Final[float] = 100000.0
HIGH_WOMEN_PARTICIPATION_THRESHOLD: Final[float] = 40.0


@dataclass(frozen=True)
class ReportCard:
    """Graded summary of one district."""

    district_name: str
    score: int
    grade: str
    label: str
    insights: list[str] = field(default_factory=list)


def _banded_points(value: float, bands: Sequence[tuple[float, int]], floor: int) -> int:
    for lower_bound, points in bands:
        if value > lower_bound:
            return points
    return floor


class ReportCardService:
    """
    Grades a district from its current snapshot.
    """

    def score(self, snapshot: MonthlySnapshot) -> int:
        """Return the 0-100 score of *snapshot*."""
        return (
            _banded_points(snapshot.households_employed, HOUSEHOLD_BANDS, HOUSEHOLD_FLOOR)
            + _banded_points(snapshot.workers_registered, WORKER_BANDS, WORKER_FLOOR)
            + _banded_points(snapshot.total_expenditure, EXPENDITURE_BANDS, EXPENDITURE_FLOOR)
        )

    @staticmethod
    def grade_for(score: int) -> tuple[str, str]:
        for minimum, grade, label in GRADE_SCALE:
            if score >= minimum:
                return grade, label
        return FAILING_GRADE

    def grade(self, record: DistrictRecord) -> ReportCard:
        current = record.current_month_data
        score = self.score(current)
        grade, label = self.grade_for(score)

        insights: list[str] = []
        if score >= EXCELLENT_SCORE_THRESHOLD:
            insights.append(INSIGHT_EXCELLENT_PERFORMANCE)
        if score < IMPROVEMENT_SCORE_THRESHOLD:
            insights.append(INSIGHT_NEEDS_IMPROVEMENT)
        if current.women_participation / WOMEN_PARTICIPATION_DIVISOR > HIGH_WOMEN_PARTICIPATION_THRESHOLD:
            insights.append(INSIGHT_HIGH_WOMEN_PARTICIPATION)

        return ReportCard(
            district_name=record.district_name,
            score=score,
            grade=grade,
            label=label,
            insights=insights,
        )
