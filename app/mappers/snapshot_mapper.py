"""
app/mappers/snapshot_mapper.py

Column mapping from raw export rows to MonthlySnapshot fields.
"""

from __future__ import annotations

import logging
import math
from decimal import Decimal, InvalidOperation
from typing import Mapping

from app.domain.district import MonthlySnapshot

logger = logging.getLogger(__name__)

COLUMN_STATE_NAME = "state_name"
COLUMN_DISTRICT_NAME = "district_name"
COLUMN_FIN_YEAR = "fin_year"
COLUMN_MONTH = "month"

# MonthlySnapshot field -> source column name in the export.
SNAPSHOT_COLUMNS: dict[str, str] = {
    "job_cards_issued": "Total_No_of_JobCards_issued",
    "workers_registered": "Total_No_of_Workers",
    "households_employed": "Total_Households_Worked",
    "person_days_generated": "Persondays_of_Central_Liability_so_far",
    "average_wage_rate": "Average_Wage_rate_per_day_per_person",
    "total_expenditure": "Total_Exp",
    "women_participation": "Women_Persondays",
    "sc_participation": "SC_persondays",
    "st_participation": "ST_persondays",
    "completed_works": "Number_of_Completed_Works",
    "ongoing_works": "Number_of_Ongoing_Works",
}

MISSING_VALUE_TOKENS = frozenset({"", "NA"})


def to_number(value: object) -> float:
    """
    Coerce a raw cell to a finite, non-negative float.

    Blank cells, ``"NA"``, unparsable text, NaN and infinities become ``0.0``.
    Negative values are clamped to ``0.0``.
    """

    if value is None:
        return 0.0
    raw_value = str(value).strip()
    if raw_value in MISSING_VALUE_TOKENS or "_" in raw_value:
        return 0.0

    try:
        parsed = Decimal(raw_value)
    except (InvalidOperation, ValueError):
        return 0.0

    if not parsed.is_finite():
        return 0.0
    if parsed < 0:
        logger.debug("Negative metric value clamped to zero value=%r", raw_value)
        return 0.0
    number = float(parsed)
    return number if math.isfinite(number) else 0.0


def map_snapshot(row: Mapping[str, str]) -> MonthlySnapshot:
    """
    Build one MonthlySnapshot from a raw row.
    """

    metrics = {
        field_name: to_number(row.get(column))
        for field_name, column in SNAPSHOT_COLUMNS.items()
    }
    return MonthlySnapshot(
        month=row.get(COLUMN_MONTH, "") or "",
        year=row.get(COLUMN_FIN_YEAR, "") or "",
        **metrics,
    )
