"""
tests/test_api.py

FastAPI endpoint tests through TestClient. The insight credential is removed
from the environment so no request ever leaves the process.
"""

from __future__ import annotations

import json
import logging

import pytest
from fastapi.testclient import TestClient

from api import config
from api.routers import ingest
from api.main import app


@pytest.fixture()
def client(monkeypatch, tmp_path):
    regions = [
        {"name": "Alpha", "lat": [10.0, 11.0], "lng": [70.0, 71.0], "districts": ["A1", "A2"]},
        {"name": "Beta", "lat": [20.0, 20.5], "lng": [80.0, 80.5], "districts": ["B1"]},
    ]
    path = tmp_path / "regions.json"
    path.write_text(json.dumps(regions), encoding="utf-8")

    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    monkeypatch.setenv("REGIONS_FILE", str(path))
    monkeypatch.setenv("INGEST_RANDOM_SEED", "42")
    config.get_settings.cache_clear()
    config.get_regions.cache_clear()
    yield TestClient(app)
    config.get_settings.cache_clear()
    config.get_regions.cache_clear()


FILES = {
    "files": [
        {"name": "biometric_jan.csv", "size_bytes": 1048576},
        {"name": "demographic_feb.csv", "size_bytes": 2048},
    ]
}


class TestHealth:
    def test_root(self, client) -> None:
        assert client.get("/").json()["status"] == "ok"

    def test_health_reports_regions(self, client) -> None:
        body = client.get("/health").json()
        assert body["status"] == "healthy"
        assert body["regions_count"] == 2
        assert body["insights"] == "fallback"

    def test_regions_endpoint(self, client) -> None:
        names = [r["name"] for r in client.get("/regions").json()["regions"]]
        assert names == ["Alpha", "Beta"]


class TestClassify:
    def test_queue(self, client) -> None:
        body = client.post("/classify", json=FILES).json()
        assert [f["category"] for f in body["files"]] == ["BIOMETRIC", "DEMOGRAPHIC"]
        assert body["files"][0]["size_bytes"] == 1048576

    def test_negative_size_rejected(self, client) -> None:
        response = client.post("/classify", json={"files": [{"name": "a.csv", "size_bytes": -1}]})
        assert response.status_code == 422


class TestIngest:
    def test_summary_shape(self, client) -> None:
        response = client.post("/ingest", json=FILES)
        assert response.status_code == 200
        summary = response.json()["summary"]
        assert summary["total_count"] == 1_000_000
        assert summary["category_volumes"] == {
            "BIOMETRIC": 500_000,
            "DEMOGRAPHIC": 500_000,
            "ENROLLMENT": 0,
        }
        assert len(summary["points"]) == 2 * 2 * 45
        assert set(summary["by_region"]) == {"Alpha", "Beta"}
        assert len(summary["by_date"]) == 28

    def test_env_seed_is_reproducible(self, client) -> None:
        a = client.post("/ingest", json=FILES).json()["summary"]
        b = client.post("/ingest", json=FILES).json()["summary"]
        assert a == b

    def test_request_seed_overrides(self, client) -> None:
        a = client.post("/ingest", json={**FILES, "seed": 1}).json()["summary"]
        b = client.post("/ingest", json={**FILES, "seed": 2}).json()["summary"]
        assert a["points"] != b["points"]

    def test_empty_batch(self, client) -> None:
        summary = client.post("/ingest", json={"files": []}).json()["summary"]
        assert summary["total_count"] == 0
        assert summary["points"] == []
        assert summary["by_region"] == {}
        assert summary["age_groups"] == {"0-5": 0, "5-17": 0, "18+": 0}

    def test_bad_regions_file_is_500(self, client, monkeypatch, tmp_path) -> None:
        bad = tmp_path / "bad.json"
        bad.write_text("{}", encoding="utf-8")
        monkeypatch.setenv("REGIONS_FILE", str(bad))
        config.get_settings.cache_clear()
        config.get_regions.cache_clear()
        response = client.post("/ingest", json=FILES)
        assert response.status_code == 500
        assert response.json()["detail"].startswith("Ingestion failed")


class TestIngestStream:
    def test_progress_then_summary(self, client) -> None:
        response = client.post("/ingest/stream", json=FILES)
        assert response.status_code == 200
        events = [json.loads(line) for line in response.text.splitlines() if line]
        progress = [e for e in events if e["event"] == "progress"]
        assert [e["progress"] for e in progress] == [0.5, 1.0]
        assert [e["category"] for e in progress] == ["BIOMETRIC", "DEMOGRAPHIC"]
        assert events[-1]["event"] == "summary"
        assert events[-1]["summary"]["total_count"] == 1_000_000

    def test_stream_matches_plain_ingest(self, client) -> None:
        plain = client.post("/ingest", json=FILES).json()["summary"]
        lines = client.post("/ingest/stream", json=FILES).text.splitlines()
        assert json.loads(lines[-1])["summary"] == plain

    def test_run_failure_ends_with_error_event(self, client, monkeypatch, caplog) -> None:
        class _Exhausted:
            def integers(self, *args, **kwargs):
                raise RuntimeError("entropy exhausted")

            def uniform(self, *args, **kwargs):
                raise RuntimeError("entropy exhausted")

        monkeypatch.setattr(ingest, "_rng", lambda seed: _Exhausted())
        with caplog.at_level(logging.INFO, logger="analytics.aggregator"):
            response = client.post("/ingest/stream", json=FILES)
        events = [json.loads(line) for line in response.text.splitlines() if line]
        assert events[-1]["event"] == "error"
        assert events[-1]["detail"].startswith("Ingestion failed")
        assert "entropy exhausted" in events[-1]["detail"]
        assert not any(e["event"] == "summary" for e in events)
        assert any(r.getMessage() == "Aggregation failed" for r in caplog.records)


class TestInsights:
    def test_fallback_without_credential(self, client) -> None:
        body = client.post(
            "/insights",
            json={"total_count": 1_000_000, "age_groups": {"0-5": 150_000}, "region_names": ["Alpha"]},
        ).json()
        assert body["fallback"] is True
        assert body["text"]
