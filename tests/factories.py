"""
tests/factories.py

Builders for raw export rows and CSV text used across the test suite.
"""

from __future__ import annotations

from app.connectors.dataset_source import DatasetLoadError, DatasetSource
from app.mappers.snapshot_mapper import SNAPSHOT_COLUMNS

HEADER: tuple[str, ...] = ("state_name", "district_name", "fin_year", "month", *SNAPSHOT_COLUMNS.values())


def make_row(
    district: str,
    month: str,
    *,
    state: str = "MAHARASHTRA",
    fin_year: str = "2024-2025",
    **metrics: float | str,
) -> dict[str, str]:
    """
    Return one raw row. *metrics* are keyed by snapshot field name, e.g.
    ``person_days_generated=100``; unspecified metrics are ``"0"``.
    """

    row = {
        "state_name": state,
        "district_name": district,
        "fin_year": fin_year,
        "month": month,
    }
    for field_name, column in SNAPSHOT_COLUMNS.items():
        row[column] = str(metrics.pop(field_name, "0"))
    if metrics:
        raise TypeError(f"Unknown snapshot fields: {sorted(metrics)}")
    return row


def to_csv(rows: list[dict[str, str]]) -> str:
    lines = [",".join(HEADER)]
    for row in rows:
        lines.append(",".join(row.get(column, "") for column in HEADER))
    return "\n".join(lines) + "\n"


def sample_rows() -> list[dict[str, str]]:
    """
    Two Maharashtra districts plus rows that must be filtered out.
    """

    return [
        make_row(
            "PUNE",
            "Feb",
            person_days_generated=90,
            households_employed=40000,
            workers_registered=60000,
            total_expenditure=3000,
            job_cards_issued=500,
            women_participation=1000,
        ),
        make_row(
            "PUNE",
            "Mar",
            person_days_generated=100,
            households_employed=60000,
            workers_registered=120000,
            total_expenditure=6000,
            job_cards_issued=700,
            women_participation=5_000_000,
        ),
        make_row(
            "NASHIK",
            "Jan",
            person_days_generated=50,
            households_employed=5000,
            workers_registered=8000,
            total_expenditure=1000,
            job_cards_issued=300,
            women_participation=2000,
        ),
        make_row("SATARA", "Mar", fin_year="2023-2024", person_days_generated=999),
        make_row("BENGALURU", "Mar", state="KARNATAKA", person_days_generated=999),
    ]


class FakeSource(DatasetSource):
    """In-memory dataset source that counts loads and can be switched off."""

    name = "fake"

    def __init__(self, text: str) -> None:
        self.text = text
        self.calls = 0
        self.fail = False

    def load_text(self) -> str:
        self.calls += 1
        if self.fail:
            raise DatasetLoadError("source offline")
        return self.text
