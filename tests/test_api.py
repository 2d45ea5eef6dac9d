"""
Tests for the Baby Growth Analytics API
Run: pytest tests/test_api.py -v
"""
import pytest
from fastapi.testclient import TestClient

from src.api.server import app, get_store
from src.ingestion.records import GrowthRecordStore

client = TestClient(app)


@pytest.fixture(autouse=True)
def fresh_store():
    store = GrowthRecordStore()
    app.dependency_overrides[get_store] = lambda: store
    yield store
    app.dependency_overrides.clear()


def _create_boy(subject_id="test-boy"):
    return client.post("/subjects", json={
        "subject_id": subject_id, "sex": "male", "birth_date": "2024-01-01",
    })


class TestHealth:

    def test_health(self):
        r = client.get("/health")
        assert r.status_code == 200
        data = r.json()
        assert data["status"] == "healthy"
        assert data["subjects_tracked"] == 0
        assert data["metrics_available"] == ["weight", "height"]

    def test_docs_available(self):
        r = client.get("/docs")
        assert r.status_code == 200


class TestSubjectCRUD:

    def test_create_subject(self):
        r = _create_boy()
        assert r.status_code == 201
        assert r.json()["birth_date"] == "2024-01-01"

    def test_duplicate_subject(self):
        _create_boy()
        assert _create_boy().status_code == 409

    def test_list_subjects(self):
        _create_boy()
        r = client.get("/subjects")
        assert r.status_code == 200
        assert r.json()["count"] == 1

    def test_get_subject(self):
        _create_boy()
        r = client.get("/subjects/test-boy")
        assert r.status_code == 200
        assert r.json()["sex"] == "male"

    def test_get_nonexistent(self):
        r = client.get("/subjects/nonexistent-999")
        assert r.status_code == 404


class TestRecords:

    def test_add_record(self):
        _create_boy()
        r = client.post("/subjects/test-boy/records", json={
            "date": "2024-01-01", "weight": 3.3,
        })
        assert r.status_code == 201
        data = r.json()
        assert data["weight"] == 3.3
        assert data["height"] is None

    def test_records_listed_by_date(self):
        _create_boy()
        client.post("/subjects/test-boy/records", json={"date": "2024-02-01", "weight": 4.5})
        client.post("/subjects/test-boy/records", json={"date": "2024-01-01", "weight": 3.3})
        r = client.get("/subjects/test-boy/records")
        assert [rec["date"] for rec in r.json()] == ["2024-01-01", "2024-02-01"]

    def test_record_for_unknown_subject(self):
        r = client.post("/subjects/ghost/records", json={"date": "2024-01-01", "weight": 3.3})
        assert r.status_code == 404


class TestAnalytics:

    def test_empty_analytics(self):
        _create_boy()
        r = client.get("/subjects/test-boy/analytics")
        assert r.status_code == 200
        data = r.json()
        assert data["trends"] == []
        assert data["percentiles"] == []
        assert data["alerts"] == []
        assert len(data["recommendations"]) == 1

    def test_low_birth_weight(self):
        _create_boy()
        client.post("/subjects/test-boy/records", json={"date": "2024-01-01", "weight": 2.0})
        data = client.get("/subjects/test-boy/analytics").json()
        assert data["percentiles"][0]["category"] == "below_3rd"
        assert data["alerts"][0]["level"] == "critical"
        assert data["recommendations"]

    def test_trend_and_predictions(self):
        _create_boy()
        for day, weight in [("2024-01-01", 3.3), ("2024-02-01", 4.5), ("2024-03-01", 5.6)]:
            client.post("/subjects/test-boy/records", json={"date": day, "weight": weight})
        data = client.get("/subjects/test-boy/analytics").json()
        [trend] = data["trends"]
        assert trend["trend"] == "increasing"
        assert set(trend["predictions"]) == {"one_month", "three_months", "six_months"}

    def test_weight_velocity(self):
        _create_boy()
        client.post("/subjects/test-boy/records", json={"date": "2024-01-01", "weight": 4.0})
        client.post("/subjects/test-boy/records", json={"date": "2024-01-08", "weight": 3.9})
        r = client.get("/subjects/test-boy/weight-velocity")
        assert r.status_code == 200
        assert [a["level"] for a in r.json()] == ["critical"]


class TestReferenceEndpoints:

    def test_percentile_lines(self):
        r = client.get("/reference/percentile-lines",
                       params={"metric": "weight", "sex": "male"})
        assert r.status_code == 200
        data = r.json()
        assert [l["percentile"] for l in data["lines"]] == [3, 10, 50, 90, 97]

    def test_percentile_lines_female(self):
        r = client.get("/reference/percentile-lines",
                       params={"metric": "height", "sex": "female"})
        assert r.status_code == 200


class TestValidation:

    def test_invalid_sex(self):
        r = client.post("/subjects", json={
            "subject_id": "bad-sex", "sex": "unknown", "birth_date": "2024-01-01",
        })
        assert r.status_code == 422

    def test_record_without_measurement(self):
        _create_boy()
        r = client.post("/subjects/test-boy/records", json={"date": "2024-01-01"})
        assert r.status_code == 422

    def test_negative_weight(self):
        _create_boy()
        r = client.post("/subjects/test-boy/records", json={
            "date": "2024-01-01", "weight": -1.0,
        })
        assert r.status_code == 422

    def test_invalid_reference_metric(self):
        r = client.get("/reference/percentile-lines", params={"metric": "head_circumference"})
        assert r.status_code == 422
