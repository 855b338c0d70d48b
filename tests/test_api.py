"""Tests for the explanation HTTP endpoints."""

from __future__ import annotations

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from rationale.api.routes import create_app, router
from rationale.explain.service import create_explainer
from rationale.ingestion.loader import load_traces
from rationale.models import ResolvedEntity
from rationale.stores.memory import InMemoryDecisionTraceStore, StaticEntityResolver

HEADERS = {"X-Tenant-ID": "tenant-1"}


@pytest.fixture
def client(traces_file):
    store = InMemoryDecisionTraceStore(load_traces(traces_file))
    resolver = StaticEntityResolver({"jgupta": ResolvedEntity(canonical_id="person-1", display_name="Jaya Gupta")})
    app = create_app(lambda tenant_id: create_explainer(tenant_id, store, entity_resolver=resolver))
    return TestClient(app)


class TestExplainRunEndpoint:
    def test_ok(self, client):
        res = client.get("/runs/run-123/explain", headers=HEADERS)
        assert res.status_code == 200
        data = res.json()
        assert data["run_id"] == "run-123"
        assert data["tenant_id"] == "tenant-1"
        assert data["run_type"] == "code-generation"
        assert data["stats"]["total_decisions"] == 3
        assert data["decisions"][1]["links"] == {
            "previous_step": "trace-1",
            "next_step": "trace-3",
            "related": [],
        }

    def test_not_found(self, client):
        res = client.get("/runs/run-404/explain", headers=HEADERS)
        assert res.status_code == 404
        assert res.json()["detail"]["error"] == "run_not_found"
        assert res.json()["detail"]["details"] == {"run_id": "run-404"}

    def test_other_tenant_gets_404(self, client):
        res = client.get("/runs/run-123/explain", headers={"X-Tenant-ID": "tenant-2"})
        assert res.status_code == 404

    def test_tenant_header_required(self, client):
        assert client.get("/runs/run-123/explain").status_code == 422

    def test_max_content_length(self, client):
        res = client.get("/runs/run-123/explain", params={"max_content_length": 10}, headers=HEADERS)
        assert res.status_code == 200
        assert all(len(d["inputs"]["prompt"]) <= 10 for d in res.json()["decisions"])

    def test_max_content_length_too_small(self, client):
        res = client.get("/runs/run-123/explain", params={"max_content_length": 2}, headers=HEADERS)
        assert res.status_code == 422

    def test_entities_on_request(self, client):
        plain = client.get("/runs/run-123/explain", headers=HEADERS).json()
        assert plain["decisions"][1]["entities"] is None

        res = client.get("/runs/run-123/explain", params={"resolve_entities": True}, headers=HEADERS)
        names = [e["display_name"] for e in res.json()["decisions"][1]["entities"]]
        assert names == ["Jaya Gupta"]


class TestExplainStepEndpoint:
    def test_ok(self, client):
        res = client.get("/runs/run-123/steps/step-3/explain", headers=HEADERS)
        assert res.status_code == 200
        data = res.json()
        assert data["trace_id"] == "trace-3"
        assert data["outcome"]["status"] == "overridden"
        assert data["override"]["user"] == "jgupta"

    def test_not_found(self, client):
        res = client.get("/runs/run-123/steps/step-9/explain", headers=HEADERS)
        assert res.status_code == 404
        assert res.json()["detail"]["error"] == "step_not_found"


class TestUnconfigured:
    def test_no_factory_is_503(self):
        app = FastAPI()
        app.include_router(router)
        res = TestClient(app).get("/runs/run-123/explain", headers=HEADERS)
        assert res.status_code == 503
        assert res.json()["detail"]["error"] == "explainer_unavailable"
