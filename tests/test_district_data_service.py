"""
tests/test_district_data_service.py

Pytest tests for DistrictDataService against an in-memory dataset source.
"""

from __future__ import annotations

import asyncio

import pytest

from app.connectors.dataset_source import DatasetLoadError
from app.domain.district import DistrictComparisonEntry, StateSummary, TrendPoint
from app.repositories.cache_storage import InMemoryCacheStorage
from app.services.aggregation_service import DistrictAggregator
from app.services.cache_service import CacheService
from app.services.district_data_service import (
    DistrictDataService,
    DistrictNotFoundError,
    comparative_key,
    district_key,
    district_list_key,
    state_key,
)
from tests.factories import FakeSource, make_row, sample_rows, to_csv

STATE = "MAHARASHTRA"
TTL = 60.0


class FakeClock:
    def __init__(self) -> None:
        self.now = 1_000_000.0

    def __call__(self) -> float:
        return self.now


@pytest.fixture()
def source() -> FakeSource:
    return FakeSource(to_csv(sample_rows()))


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def service(source: FakeSource, clock: FakeClock) -> DistrictDataService:
    return DistrictDataService(
        cache=CacheService(InMemoryCacheStorage(), ttl_seconds=TTL, clock=clock),
        source=source,
        aggregator=DistrictAggregator(state_label="Maharashtra"),
        state_name=STATE,
        fin_year="2024-2025",
    )


def test_cache_keys() -> None:
    assert district_key(STATE, "PUNE") == "district_MAHARASHTRA_PUNE"
    assert comparative_key(STATE, ["PUNE", "NASHIK"]) == "comparative_MAHARASHTRA_PUNE_NASHIK"
    assert state_key(STATE) == "state_MAHARASHTRA"
    assert district_list_key(STATE) == "district_list_MAHARASHTRA"


class TestDistrictData:
    def test_returns_record(self, service: DistrictDataService) -> None:
        record = asyncio.run(service.get_district_data(STATE, "PUNE"))

        assert record.district_name == "PUNE"
        assert record.state_name == "Maharashtra"
        assert record.current_month_data.person_days_generated == 100.0
        assert len(record.historical_data) == 2

    def test_result_is_cached_under_district_key(self, service: DistrictDataService) -> None:
        asyncio.run(service.get_district_data(STATE, "PUNE"))

        assert service.cache.keys() == ["district_MAHARASHTRA_PUNE"]
        assert service.cache.get_entry("district_MAHARASHTRA_PUNE").data["district_name"] == "PUNE"

    def test_unknown_district_raises(self, service: DistrictDataService) -> None:
        with pytest.raises(DistrictNotFoundError) as ctx:
            asyncio.run(service.get_district_data(STATE, "NOWHERE"))

        assert ctx.value.district_name == "NOWHERE"
        assert isinstance(ctx.value, LookupError)
        assert service.cache.get_entry(district_key(STATE, "NOWHERE")) is None

    def test_dataset_is_loaded_once(self, service: DistrictDataService, source: FakeSource) -> None:
        async def scenario() -> None:
            await asyncio.gather(
                service.get_district_data(STATE, "PUNE"),
                service.get_district_data(STATE, "NASHIK"),
                service.get_district_list(STATE),
                service.get_state_data(STATE),
            )

        asyncio.run(scenario())

        assert source.calls == 1


class TestQueries:
    def test_comparison_in_request_order(self, service: DistrictDataService) -> None:
        entries = asyncio.run(service.get_comparative_data(STATE, ["NASHIK", "NOWHERE", "PUNE"]))

        assert entries == [
            DistrictComparisonEntry("NASHIK", households_employed=5000.0, total_expenditure=1000.0, women_participation=2000.0),
            DistrictComparisonEntry("PUNE", households_employed=60000.0, total_expenditure=6000.0, women_participation=5_000_000.0),
        ]
        assert service.cache.keys() == ["comparative_MAHARASHTRA_NASHIK_NOWHERE_PUNE"]

    def test_state_summary_sums_current_snapshots(self, service: DistrictDataService) -> None:
        summary = asyncio.run(service.get_state_data(STATE))

        assert summary == StateSummary(
            state_name=STATE,
            total_job_cards=1000.0,
            total_workers=128000.0,
            total_households=65000.0,
            total_expenditure=7000.0,
            district_count=2,
        )

    def test_district_list_sorted_case_insensitively(self, clock: FakeClock) -> None:
        rows = [make_row(name, "Mar") for name in ("pune", "Nashik", "AKOLA", "beed")]
        service = DistrictDataService(
            cache=CacheService(ttl_seconds=TTL, clock=clock),
            source=FakeSource(to_csv(rows)),
            aggregator=DistrictAggregator(),
            state_name=STATE,
            fin_year="2024-2025",
        )

        assert asyncio.run(service.get_district_list(STATE)) == ["AKOLA", "beed", "Nashik", "pune"]

    def test_report_card(self, service: DistrictDataService) -> None:
        card = asyncio.run(service.get_report_card(STATE, "PUNE"))

        assert card.score == 100
        assert card.grade == "A+"

    def test_person_days_trend_is_oldest_first(self, service: DistrictDataService) -> None:
        trend = asyncio.run(service.get_person_days_trend(STATE, "PUNE"))

        assert trend == [
            TrendPoint(label="Feb 2024-2025", person_days=90.0),
            TrendPoint(label="Mar 2024-2025", person_days=100.0),
        ]

    def test_report_card_for_unknown_district(self, service: DistrictDataService) -> None:
        with pytest.raises(DistrictNotFoundError):
            asyncio.run(service.get_report_card(STATE, "NOWHERE"))


class TestFailuresAndInvalidation:
    def test_load_failure_propagates_without_cache(self, service: DistrictDataService, source: FakeSource) -> None:
        source.fail = True

        with pytest.raises(DatasetLoadError):
            asyncio.run(service.get_district_list(STATE))

    def test_failed_load_is_not_memoized(self, service: DistrictDataService, source: FakeSource) -> None:
        source.fail = True
        with pytest.raises(DatasetLoadError):
            asyncio.run(service.get_district_list(STATE))

        source.fail = False

        assert asyncio.run(service.get_district_list(STATE)) == ["NASHIK", "PUNE"]
        assert source.calls == 2

    def test_stale_entry_served_when_source_fails(
        self,
        service: DistrictDataService,
        source: FakeSource,
        clock: FakeClock,
    ) -> None:
        asyncio.run(service.get_district_data(STATE, "PUNE"))
        clock.now += TTL + 1
        service.reset()
        source.fail = True

        record = asyncio.run(service.get_district_data(STATE, "PUNE"))

        assert record.current_month_data.person_days_generated == 100.0
        assert source.calls == 2

    def test_clear_one_key(self, service: DistrictDataService) -> None:
        asyncio.run(service.get_district_list(STATE))
        asyncio.run(service.get_state_data(STATE))

        assert service.clear_cache(state_key(STATE)) is True
        assert service.clear_cache(state_key(STATE)) is False
        assert service.cache.keys() == [district_list_key(STATE)]

    def test_clear_everything_reloads_dataset(self, service: DistrictDataService, source: FakeSource) -> None:
        asyncio.run(service.get_district_list(STATE))

        assert service.clear_cache() is True
        assert service.cache.keys() == []

        asyncio.run(service.get_district_list(STATE))
        assert source.calls == 2
