"""
tests/test_district_routes.py

HTTP contract tests for the district and cache routers.

Routers are mounted on a bare FastAPI app whose state carries a service
backed by an in-memory source and cache, so no lifespan or files are needed.
"""

from __future__ import annotations

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from app.api.routers import cache_router, districts_router
from app.repositories.cache_storage import InMemoryCacheStorage
from app.services.aggregation_service import DistrictAggregator
from app.services.cache_service import CacheService
from app.services.district_data_service import DistrictDataService
from tests.factories import FakeSource, sample_rows, to_csv

BASE = "/states/MAHARASHTRA"


@pytest.fixture()
def source() -> FakeSource:
    return FakeSource(to_csv(sample_rows()))


@pytest.fixture()
def client(source: FakeSource) -> TestClient:
    application = FastAPI()
    application.include_router(districts_router)
    application.include_router(cache_router)
    application.state.district_data_service = DistrictDataService(
        cache=CacheService(InMemoryCacheStorage(), ttl_seconds=3600),
        source=source,
        aggregator=DistrictAggregator(state_label="Maharashtra"),
        state_name="MAHARASHTRA",
        fin_year="2024-2025",
    )
    return TestClient(application)


class TestDistrictRoutes:
    def test_list_districts(self, client: TestClient) -> None:
        response = client.get(f"{BASE}/districts")

        assert response.status_code == 200
        assert response.json() == {"stateName": "MAHARASHTRA", "districts": ["NASHIK", "PUNE"]}

    def test_district_record_uses_camel_case(self, client: TestClient) -> None:
        response = client.get(f"{BASE}/districts/PUNE")

        assert response.status_code == 200
        body = response.json()
        assert body["districtName"] == "PUNE"
        assert body["stateName"] == "Maharashtra"
        assert body["currentMonthData"]["personDaysGenerated"] == 100.0
        assert body["currentMonthData"]["jobCardsIssued"] == 700.0
        assert [item["month"] for item in body["historicalData"]] == ["Mar", "Feb"]
        assert body["performanceIndicators"] == {
            "employmentGeneration": 4,
            "wagePaymentEfficiency": 4,
            "inclusionOfMarginalized": 3,
            "workCompletion": 4,
            "overallPerformance": 4,
        }

    def test_unknown_district_is_404(self, client: TestClient) -> None:
        response = client.get(f"{BASE}/districts/NOWHERE")

        assert response.status_code == 404
        assert "NOWHERE" in response.json()["detail"]

    def test_report_card(self, client: TestClient) -> None:
        response = client.get(f"{BASE}/districts/NASHIK/report-card")

        assert response.status_code == 200
        assert response.json() == {
            "districtName": "NASHIK",
            "score": 30,
            "grade": "F",
            "label": "Needs Improvement",
            "insights": ["needs_improvement"],
        }

    def test_trend(self, client: TestClient) -> None:
        response = client.get(f"{BASE}/districts/PUNE/trend")

        assert response.status_code == 200
        assert response.json() == {
            "districtName": "PUNE",
            "points": [
                {"label": "Feb 2024-2025", "personDays": 90.0},
                {"label": "Mar 2024-2025", "personDays": 100.0},
            ],
        }

    def test_summary(self, client: TestClient) -> None:
        response = client.get(f"{BASE}/summary")

        assert response.status_code == 200
        body = response.json()
        assert body["districtCount"] == 2
        assert body["totalHouseholds"] == 65000.0

    def test_comparison_keeps_request_order(self, client: TestClient) -> None:
        response = client.get(f"{BASE}/comparison", params=[("districts", "PUNE"), ("districts", "NASHIK")])

        assert response.status_code == 200
        assert [d["districtName"] for d in response.json()["districts"]] == ["PUNE", "NASHIK"]

    def test_comparison_requires_districts(self, client: TestClient) -> None:
        assert client.get(f"{BASE}/comparison").status_code == 422

    def test_dataset_failure_is_503(self, client: TestClient, source: FakeSource) -> None:
        source.fail = True

        response = client.get(f"{BASE}/districts")

        assert response.status_code == 503


class TestCacheRoutes:
    def test_clear_one_key(self, client: TestClient) -> None:
        client.get(f"{BASE}/districts")

        response = client.delete("/cache/district_list_MAHARASHTRA")

        assert response.status_code == 200
        assert response.json() == {"key": "district_list_MAHARASHTRA", "cleared": True}

    def test_clear_unknown_key(self, client: TestClient) -> None:
        assert client.delete("/cache/nope").json() == {"key": "nope", "cleared": False}

    def test_clear_all_reloads_dataset(self, client: TestClient, source: FakeSource) -> None:
        client.get(f"{BASE}/districts")

        response = client.delete("/cache")
        client.get(f"{BASE}/districts")

        assert response.json() == {"key": None, "cleared": True}
        assert source.calls == 2


def test_missing_service_is_503() -> None:
    application = FastAPI()
    application.include_router(districts_router)

    response = TestClient(application).get(f"{BASE}/districts")

    assert response.status_code == 503
