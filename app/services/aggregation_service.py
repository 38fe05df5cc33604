"""
app/services/aggregation_service.py

District aggregation layer for the statistics export.

Turns the flat rows produced by :func:`app.parsing.csv_parser.parse_csv` into
one :class:`~app.domain.district.DistrictRecord` per district.

Pipeline
--------
1. Filter rows to the target state and fiscal year (exact string match).
2. Group by trimmed ``district_name`` in order of first appearance; rows
   without a district name are dropped.
3. Sort each group by fiscal year, then month, most recent first. The sort
   is stable, so rows sharing a year and month keep their input order.
4. Keep at most :data:`MAX_HISTORY_MONTHS` rows as ``historical_data``.

No I/O happens here. For a fixed input the output is fully deterministic.
"""

from __future__ import annotations

import logging
from typing import Final, Iterable, Mapping, Sequence

from app.domain.district import (
    MAX_HISTORY_MONTHS,
    PLACEHOLDER_PERFORMANCE_INDICATORS,
    DistrictRecord,
    MonthlySnapshot,
)
from app.mappers.snapshot_mapper import (
    COLUMN_DISTRICT_NAME,
    COLUMN_FIN_YEAR,
    COLUMN_MONTH,
    COLUMN_STATE_NAME,
    map_snapshot,
)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Month ordering
# ---------------------------------------------------------------------------

MONTH_ORDINALS: Final[dict[str, int]] = {
    "jan": 0, "january": 0,
    "feb": 1, "february": 1,
    "mar": 2, "march": 2,
    "apr": 3, "april": 3,
    "may": 4,
    "jun": 5, "june": 5,
    "jul": 6, "july": 6,
    "aug": 7, "august": 7,
    "sep": 8, "september": 8,
    "oct": 9, "october": 9,
    "nov": 10, "november": 10,
    "dec": 11, "december": 11,
}

UNKNOWN_MONTH_ORDINAL: Final[int] = -1


def month_ordinal(label: str | None) -> int:
    """
    Return the 0-11 index of a month label, or -1 when it is not recognised.
    """

    if not label:
        return UNKNOWN_MONTH_ORDINAL
    return MONTH_ORDINALS.get(label.strip().lower(), UNKNOWN_MONTH_ORDINAL)


def _recency_key(row: Mapping[str, str]) -> tuple[str, int]:
    return (row.get(COLUMN_FIN_YEAR, "") or "", month_ordinal(row.get(COLUMN_MONTH)))


# ---------------------------------------------------------------------------
# Aggregator
# ---------------------------------------------------------------------------


class DistrictAggregator:
    """
    Builds DistrictRecord objects from raw export rows.

    Parameters
    ----------
    state_label:
        Display name written to ``DistrictRecord.state_name``. Defaults to the
        ``state_name`` filter value passed to :meth:`aggregate`.
    history_limit:
        Maximum number of snapshots per district, capped at
        :data:`MAX_HISTORY_MONTHS`.
    """

    def __init__(
        self,
        *,
        state_label: str | None = None,
        history_limit: int = MAX_HISTORY_MONTHS,
    ) -> None:
        self._state_label = state_label
        self._history_limit = max(1, min(history_limit, MAX_HISTORY_MONTHS))

    def aggregate(
        self,
        rows: Iterable[Mapping[str, str]],
        *,
        state_name: str,
        fin_year: str,
    ) -> list[DistrictRecord]:
        """
        Filter, group and structure *rows* into one record per district.
        """

        grouped = self.group_by_district(self.filter_rows(rows, state_name=state_name, fin_year=fin_year))
        display_state = self._state_label or state_name
        records = [
            self.build_record(district, district_rows, state_name=display_state)
            for district, district_rows in grouped.items()
        ]
        logger.info(
            "Aggregated districts state=%r fin_year=%r districts=%d",
            state_name,
            fin_year,
            len(records),
        )
        return records

    @staticmethod
    def filter_rows(
        rows: Iterable[Mapping[str, str]],
        *,
        state_name: str,
        fin_year: str,
    ) -> list[Mapping[str, str]]:
        """
        Keep rows matching *state_name* (trimmed, case-sensitive) and *fin_year*.
        """

        return [
            row
            for row in rows
            if (row.get(COLUMN_STATE_NAME) or "").strip() == state_name
            and row.get(COLUMN_FIN_YEAR) == fin_year
        ]

    @staticmethod
    def group_by_district(
        rows: Iterable[Mapping[str, str]],
    ) -> dict[str, list[Mapping[str, str]]]:
        """
        Group rows by trimmed district name, preserving first-seen order.
        """

        grouped: dict[str, list[Mapping[str, str]]] = {}
        for row in rows:
            district = (row.get(COLUMN_DISTRICT_NAME) or "").strip()
            if not district:
                continue
            grouped.setdefault(district, []).append(row)
        return grouped

    @staticmethod
    def sort_by_recency(rows: Sequence[Mapping[str, str]]) -> list[Mapping[str, str]]:
        """
        Sort rows most recent first by fiscal year label, then month.
        """

        return sorted(rows, key=_recency_key, reverse=True)

    def build_record(
        self,
        district_name: str,
        rows: Sequence[Mapping[str, str]],
        *,
        state_name: str,
    ) -> DistrictRecord:
        """
        Structure one district's rows into a DistrictRecord.
        """

        ordered = self.sort_by_recency(rows)
        history = tuple(map_snapshot(row) for row in ordered[: self._history_limit])
        current = history[0] if history else MonthlySnapshot.empty()
        return DistrictRecord(
            district_name=district_name,
            state_name=state_name,
            current_month_data=current,
            historical_data=history,
            performance_indicators=PLACEHOLDER_PERFORMANCE_INDICATORS,
        )
