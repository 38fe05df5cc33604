"""
app/services/district_data_service.py

Read-only district statistics served through the response cache.

The service is constructed explicitly by the application entry point with
its collaborators:

    DatasetSource  -> raw CSV text
    parse_csv      -> flat rows
    DistrictAggregator -> DistrictRecord list (memoized per service instance)
    CacheService   -> keyed results with TTL, stale fallback and persistence

Cache keys
----------
    district_<state>_<district>
    comparative_<state>_<district>_<district>...   (request order)
    state_<state>
    district_list_<state>

Cached payloads are plain JSON-ready dicts and lists; this module converts
them back into domain objects before returning.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import asdict
from typing import Sequence

from app.config import (
    CacheSettings,
    DatasetSettings,
    ExternalHTTPSettings,
    get_cache_settings,
    get_dataset_settings,
    get_external_http_settings,
)
from app.connectors.dataset_source import DatasetSource, build_dataset_source
from app.domain.district import (
    DistrictComparisonEntry,
    DistrictRecord,
    StateSummary,
    TrendPoint,
)
from app.parsing.csv_parser import parse_csv
from app.repositories.cache_storage import build_cache_storage
from app.services.aggregation_service import DistrictAggregator
from app.services.cache_service import CacheService
from app.services.report_card_service import ReportCard, ReportCardService

logger = logging.getLogger(__name__)


class DistrictNotFoundError(LookupError):
    """
    Raised when a requested district is absent from the aggregated dataset.
    """

    def __init__(self, state_name: str, district_name: str) -> None:
        super().__init__(f"District data not found: {district_name!r} ({state_name})")
        self.state_name = state_name
        self.district_name = district_name


def district_key(state_name: str, district_name: str) -> str:
    return f"district_{state_name}_{district_name}"


def comparative_key(state_name: str, district_names: Sequence[str]) -> str:
    return f"comparative_{state_name}_{'_'.join(district_names)}"


def state_key(state_name: str) -> str:
    return f"state_{state_name}"


def district_list_key(state_name: str) -> str:
    return f"district_list_{state_name}"


class DistrictDataService:
    """
    Public read surface over the aggregated district dataset.

    Parameters
    ----------
    cache:
        Shared response cache.
    source:
        Provides the raw export text.
    aggregator:
        Builds district records from parsed rows.
    state_name:
        Value matched against the export's ``state_name`` column.
    fin_year:
        Fiscal year label to serve, e.g. ``"2024-2025"``.
    report_cards:
        Grader used by :meth:`get_report_card`.
    """

    def __init__(
        self,
        *,
        cache: CacheService,
        source: DatasetSource,
        aggregator: DistrictAggregator,
        state_name: str,
        fin_year: str,
        report_cards: ReportCardService | None = None,
    ) -> None:
        self._cache = cache
        self._source = source
        self._aggregator = aggregator
        self._state_name = state_name
        self._fin_year = fin_year
        self._report_cards = report_cards or ReportCardService()
        self._districts: list[DistrictRecord] | None = None
        self._loading: asyncio.Task[list[DistrictRecord]] | None = None

    @property
    def cache(self) -> CacheService:
        return self._cache

    # ------------------------------------------------------------------
    # Dataset
    # ------------------------------------------------------------------

    async def get_all_districts(self) -> list[DistrictRecord]:
        """
        Load, parse and aggregate the export once per service instance.

        Concurrent callers share one load. A failed load is not memoized.
        """

        if self._districts is not None:
            return self._districts
        if self._loading is None:
            self._loading = asyncio.get_running_loop().create_task(self._load_districts())
        task = self._loading
        try:
            districts = await asyncio.shield(task)
        finally:
            if self._loading is task and task.done():
                self._loading = None
        self._districts = districts
        return districts

    async def _load_districts(self) -> list[DistrictRecord]:
        return await asyncio.to_thread(self.build_districts)

    def build_districts(self) -> list[DistrictRecord]:
        """
        Synchronously read the source and run the parse/aggregate pipeline.
        """

        text = self._source.load_text()
        rows = parse_csv(text)
        districts = self._aggregator.aggregate(
            rows,
            state_name=self._state_name,
            fin_year=self._fin_year,
        )
        logger.info(
            "District dataset built source=%s rows=%d districts=%d",
            self._source.name,
            len(rows),
            len(districts),
        )
        return districts

    def reset(self) -> None:
        """Forget the memoized dataset so the next read reloads the source."""
        self._districts = None

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def get_district_data(self, state_name: str, district_name: str) -> DistrictRecord:
        """
        Return one district's record.

        Raises DistrictNotFoundError when the district is not in the dataset.
        """

        async def compute() -> dict:
            for record in await self.get_all_districts():
                if record.district_name == district_name:
                    return record.to_dict()
            raise DistrictNotFoundError(state_name, district_name)

        payload = await self._cache.get_data(district_key(state_name, district_name), compute)
        return DistrictRecord.from_dict(payload)

    async def get_comparative_data(
        self,
        state_name: str,
        district_names: Sequence[str],
    ) -> list[DistrictComparisonEntry]:
        """
        Return comparison entries for *district_names* in request order.

        Unknown districts are skipped.
        """

        names = list(district_names)

        async def compute() -> list[dict]:
            by_name = {record.district_name: record for record in await self.get_all_districts()}
            return [
                asdict(DistrictComparisonEntry.from_record(by_name[name]))
                for name in names
                if name in by_name
            ]

        payload = await self._cache.get_data(comparative_key(state_name, names), compute)
        return [DistrictComparisonEntry(**item) for item in payload]

    async def get_state_data(self, state_name: str) -> StateSummary:
        """
        Return totals over every district's current snapshot.
        """

        async def compute() -> dict:
            districts = await self.get_all_districts()
            summary = StateSummary(
                state_name=state_name,
                total_job_cards=sum(d.current_month_data.job_cards_issued for d in districts),
                total_workers=sum(d.current_month_data.workers_registered for d in districts),
                total_households=sum(d.current_month_data.households_employed for d in districts),
                total_expenditure=sum(d.current_month_data.total_expenditure for d in districts),
                district_count=len(districts),
            )
            return asdict(summary)

        payload = await self._cache.get_data(state_key(state_name), compute)
        return StateSummary(**payload)

    async def get_district_list(self, state_name: str) -> list[str]:
        """
        Return all district names sorted case-insensitively.
        """

        async def compute() -> list[str]:
            names = [record.district_name for record in await self.get_all_districts()]
            return sorted(names, key=lambda name: (name.casefold(), name))

        return list(await self._cache.get_data(district_list_key(state_name), compute))

    async def get_report_card(self, state_name: str, district_name: str) -> ReportCard:
        record = await self.get_district_data(state_name, district_name)
        return self._report_cards.grade(record)

    async def get_person_days_trend(self, state_name: str, district_name: str) -> list[TrendPoint]:
        """
        Person-days per reporting period, oldest first.
        """

        record = await self.get_district_data(state_name, district_name)
        return [
            TrendPoint(
                label=f"{snapshot.month[:3]} {snapshot.year}".strip(),
                person_days=snapshot.person_days_generated,
            )
            for snapshot in reversed(record.historical_data)
        ]

    # ------------------------------------------------------------------
    # Invalidation
    # ------------------------------------------------------------------

    def clear_cache(self, key: str | None = None) -> bool:
        """
        Invalidate one cache key, or everything when *key* is None.

        Clearing everything also drops the memoized dataset.
        """

        if key is not None:
            return self._cache.clear(key)
        self._cache.clear_all()
        self.reset()
        return True


def build_district_data_service(
    dataset: DatasetSettings | None = None,
    cache_settings: CacheSettings | None = None,
    http_settings: ExternalHTTPSettings | None = None,
) -> DistrictDataService:
    """
    Wire a service from configuration. Settings default to the environment.
    """

    dataset = dataset or get_dataset_settings()
    cache_settings = cache_settings or get_cache_settings()
    http_settings = http_settings or get_external_http_settings()

    cache = CacheService(
        build_cache_storage(cache_settings),
        ttl_seconds=cache_settings.ttl_seconds,
    )
    return DistrictDataService(
        cache=cache,
        source=build_dataset_source(dataset, http_settings),
        aggregator=DistrictAggregator(state_label=dataset.state_label),
        state_name=dataset.state_name,
        fin_year=dataset.fin_year,
    )
