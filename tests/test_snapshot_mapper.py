from __future__ import annotations

import pytest

from app.domain.district import MonthlySnapshot
from app.mappers.snapshot_mapper import map_snapshot, to_number
from tests.factories import make_row


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("1234.5", 1234.5),
        (" 42 ", 42.0),
        ("0", 0.0),
        ("", 0.0),
        ("NA", 0.0),
        (None, 0.0),
        ("abc", 0.0),
        ("1,000", 0.0),
        ("1_000", 0.0),
        ("NaN", 0.0),
        ("Infinity", 0.0),
        ("-5", 0.0),
        ("1e999999", 0.0),
    ],
)
def test_to_number(raw: str | None, expected: float) -> None:
    assert to_number(raw) == expected


def test_map_snapshot_reads_every_metric_column() -> None:
    row = make_row(
        "PUNE",
        "Mar",
        job_cards_issued=1,
        workers_registered=2,
        households_employed=3,
        person_days_generated=4,
        average_wage_rate="250.75",
        total_expenditure=6,
        women_participation=7,
        sc_participation=8,
        st_participation=9,
        completed_works=10,
        ongoing_works="NA",
    )

    snapshot = map_snapshot(row)

    assert snapshot == MonthlySnapshot(
        month="Mar",
        year="2024-2025",
        job_cards_issued=1.0,
        workers_registered=2.0,
        households_employed=3.0,
        person_days_generated=4.0,
        average_wage_rate=250.75,
        total_expenditure=6.0,
        women_participation=7.0,
        sc_participation=8.0,
        st_participation=9.0,
        completed_works=10.0,
        ongoing_works=0.0,
    )


def test_map_snapshot_tolerates_missing_columns() -> None:
    snapshot = map_snapshot({"month": "Apr"})

    assert snapshot.month == "Apr"
    assert snapshot.year == ""
    assert snapshot.total_expenditure == 0.0
