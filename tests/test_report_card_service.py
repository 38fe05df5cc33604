"""
tests/test_report_card_service.py

Pytest unit tests for ReportCardService.
"""

from __future__ import annotations

import pytest

from app.domain.district import DistrictRecord, MonthlySnapshot
from app.services.report_card_service import (
    INSIGHT_EXCELLENT_PERFORMANCE,
    INSIGHT_HIGH_WOMEN_PARTICIPATION,
    INSIGHT_NEEDS_IMPROVEMENT,
    ReportCardService,
)


@pytest.fixture()
def svc() -> ReportCardService:
    return ReportCardService()


def _record(**metrics: float) -> DistrictRecord:
    snapshot = MonthlySnapshot(month="Mar", year="2024-2025", **metrics)
    return DistrictRecord(
        district_name="PUNE",
        state_name="Maharashtra",
        current_month_data=snapshot,
        historical_data=(snapshot,),
    )


class TestScore:
    def test_top_bands(self, svc: ReportCardService) -> None:
        snapshot = MonthlySnapshot(
            month="Mar",
            year="2024-2025",
            households_employed=50001,
            workers_registered=100001,
            total_expenditure=5001,
        )
        assert svc.score(snapshot) == 100

    def test_band_bounds_are_exclusive(self, svc: ReportCardService) -> None:
        snapshot = MonthlySnapshot(
            month="Mar",
            year="2024-2025",
            households_employed=50000,
            workers_registered=100000,
            total_expenditure=5000,
        )
        assert svc.score(snapshot) == 30 + 20 + 20

    def test_zero_snapshot_scores_floor(self, svc: ReportCardService) -> None:
        assert svc.score(MonthlySnapshot.empty()) == 30


class TestGrade:
    @pytest.mark.parametrize(
        ("score", "grade", "label"),
        [
            (100, "A+", "Excellent"),
            (85, "A+", "Excellent"),
            (84, "A", "Very Good"),
            (75, "A", "Very Good"),
            (65, "B", "Good"),
            (50, "C", "Average"),
            (35, "D", "Below Average"),
            (34, "F", "Needs Improvement"),
        ],
    )
    def test_grade_scale(self, score: int, grade: str, label: str) -> None:
        assert ReportCardService.grade_for(score) == (grade, label)

    def test_excellent_district(self, svc: ReportCardService) -> None:
        card = svc.grade(
            _record(
                households_employed=60000,
                workers_registered=120000,
                total_expenditure=6000,
                women_participation=5_000_000,
            )
        )

        assert card.district_name == "PUNE"
        assert card.score == 100
        assert card.grade == "A+"
        assert card.insights == [INSIGHT_EXCELLENT_PERFORMANCE, INSIGHT_HIGH_WOMEN_PARTICIPATION]

    def test_middling_district_has_no_insights(self, svc: ReportCardService) -> None:
        card = svc.grade(_record(households_employed=40000, workers_registered=60000, total_expenditure=3000))

        assert card.score == 70
        assert (card.grade, card.label) == ("B", "Good")
        assert card.insights == []

    def test_weak_district_needs_improvement(self, svc: ReportCardService) -> None:
        card = svc.grade(_record())

        assert card.grade == "F"
        assert card.insights == [INSIGHT_NEEDS_IMPROVEMENT]
