"""Integration tests for the HazardLog API."""

import pytest
from httpx import ASGITransport, AsyncClient

from app.database import async_session_factory
from app.main import app
from app.services.recommendation.actor import ActorContext
from app.services.recommendation.errors import AnalysisUnavailable, SourceUnavailable
from app.services.recommendation.record_source import SqlRecordSource
from app.services.recommendation.registry import ActorRegistry
from app.services.recommendation.state_store import InMemoryStateStore

from conftest import FakeAnalyzer

BASE = "http://test"

ADVICE = "Say which stair flight the loose handrail is on and when it will be repaired."


def _report(inspector: str = "Dana Whitfield", **overrides) -> dict:
    body = {
        "dateOfInspection": "2026-09-16",
        "location": "Warehouse B, mezzanine stairs",
        "inspectorName": inspector,
        "observedHazard": "Loose handrail.",
        "severityRating": "High",
        "recommendedAction": "Fix it.",
    }
    body.update(overrides)
    return body


@pytest.fixture
def analyzer() -> FakeAnalyzer:
    return FakeAnalyzer(ADVICE)


@pytest.fixture
async def client(db_tables, analyzer, store):
    app.state.recommendation_registry = ActorRegistry(
        ActorContext(
            record_source=SqlRecordSource(async_session_factory),
            analyzer=analyzer,
            state_store=store,
        )
    )
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url=BASE) as c:
        yield c
    del app.state.recommendation_registry


# ── Health ─────────────────────────────────────────


async def test_health(client: AsyncClient):
    resp = await client.get("/api/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


# ── Reports ────────────────────────────────────────


async def test_create_and_list_reports(client: AsyncClient):
    resp = await client.post("/api/reports", json=_report())
    assert resp.status_code == 201
    assert resp.json()["message"] == "Report submitted successfully"
    report_id = resp.json()["id"]

    resp = await client.get("/api/reports")
    assert resp.status_code == 200
    reports = resp.json()["reports"]
    assert [r["id"] for r in reports] == [report_id]
    assert reports[0]["inspector_name"] == "Dana Whitfield"
    assert reports[0]["observed_hazard"] == "Loose handrail."


async def test_create_report_accepts_snake_case(client: AsyncClient):
    body = {
        "date_of_inspection": "2026-09-10",
        "location": "Plant 1, paint booth",
        "inspector_name": "Luis Ortega",
        "observed_hazard": "Exhaust filter clogged.",
        "severity_rating": "High",
        "recommended_action": "Replace filters today.",
    }
    resp = await client.post("/api/reports", json=body)
    assert resp.status_code == 201


async def test_create_report_missing_field(client: AsyncClient):
    body = _report()
    del body["observedHazard"]
    resp = await client.post("/api/reports", json=body)
    assert resp.status_code == 422


async def test_delete_report(client: AsyncClient):
    report_id = (await client.post("/api/reports", json=_report())).json()["id"]

    resp = await client.delete(f"/api/reports/{report_id}")
    assert resp.status_code == 200

    resp = await client.delete(f"/api/reports/{report_id}")
    assert resp.status_code == 404


async def test_delete_report_invalid_id(client: AsyncClient):
    resp = await client.delete("/api/reports/abc")
    assert resp.status_code == 422


# ── Recommendations ────────────────────────────────


async def test_recommendation_requires_inspector(client: AsyncClient):
    resp = await client.get("/api/recommendations")
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Inspector name is required"

    resp = await client.get("/api/recommendations", params={"inspector": "  "})
    assert resp.status_code == 400


async def test_recommendation_flow(client: AsyncClient, analyzer: FakeAnalyzer):
    await client.post("/api/reports", json=_report(observedHazard="Pallet jack in walkway."))

    resp = await client.get("/api/recommendations", params={"inspector": "Dana Whitfield"})
    assert resp.status_code == 200
    assert resp.json() == {"recommendation": None}

    await client.post("/api/reports", json=_report())
    resp = await client.get("/api/recommendations", params={"inspector": "Dana Whitfield"})
    assert resp.json() == {"recommendation": ADVICE}

    resp = await client.post("/api/recommendations/ignore", json={"inspector": "Dana Whitfield"})
    assert resp.status_code == 200
    assert resp.json() == {"success": True}

    resp = await client.get("/api/recommendations", params={"inspector": "Dana Whitfield"})
    assert resp.json() == {"recommendation": None}
    assert len(analyzer.calls) == 1


async def test_dismiss_without_recommendation_succeeds(client: AsyncClient):
    resp = await client.post("/api/recommendations/ignore", json={"inspector": "Nobody Yet"})
    assert resp.status_code == 200
    assert resp.json() == {"success": True}


async def test_dismiss_requires_inspector(client: AsyncClient):
    resp = await client.post("/api/recommendations/ignore", json={})
    assert resp.status_code == 400


async def test_source_failure_is_reported_as_unavailable(client: AsyncClient):
    class DownSource:
        async def fetch_recent(self, inspector_name, limit):
            raise SourceUnavailable("database offline")

    app.state.recommendation_registry = ActorRegistry(
        ActorContext(
            record_source=DownSource(),
            analyzer=FakeAnalyzer(),
            state_store=InMemoryStateStore(),
        )
    )

    resp = await client.get("/api/recommendations", params={"inspector": "Dana Whitfield"})
    assert resp.status_code == 503
    assert resp.json()["detail"] == "Recommendation unavailable"


async def test_inspector_name_is_stored_trimmed(client: AsyncClient):
    await client.post("/api/reports", json=_report(" Dana ", observedHazard="Pallet jack in walkway."))
    await client.post("/api/reports", json=_report(" Dana "))

    reports = (await client.get("/api/reports")).json()["reports"]
    assert {r["inspector_name"] for r in reports} == {"Dana"}

    resp = await client.get("/api/recommendations", params={"inspector": " Dana "})
    assert resp.json() == {"recommendation": ADVICE}


@pytest.mark.parametrize("name", ["   ", "x" * 256])
async def test_create_report_rejects_unusable_inspector_name(client: AsyncClient, name: str):
    resp = await client.post("/api/reports", json=_report(name))
    assert resp.status_code == 422


# ── Draft review ───────────────────────────────────


async def test_analyze_draft_uses_recent_reports_as_context(client: AsyncClient, analyzer: FakeAnalyzer, store):
    first = (await client.post("/api/reports", json=_report(observedHazard="Pallet jack in walkway."))).json()["id"]
    second = (await client.post("/api/reports", json=_report())).json()["id"]

    resp = await client.post("/api/recommendations/analyze", json=_report(observedHazard="Frayed extension cord."))
    assert resp.status_code == 200
    assert resp.json() == {"recommendation": ADVICE}
    assert analyzer.calls == [(0, second, first)]
    assert store._data == {}

    reports = (await client.get("/api/reports")).json()["reports"]
    assert len(reports) == 2


async def test_analyze_draft_failure_is_absent(client: AsyncClient, analyzer: FakeAnalyzer):
    analyzer.responses = [AnalysisUnavailable("timed out")]

    resp = await client.post("/api/recommendations/analyze", json=_report())
    assert resp.status_code == 200
    assert resp.json() == {"recommendation": None}


async def test_analyze_draft_validates_body(client: AsyncClient):
    resp = await client.post("/api/recommendations/analyze", json=_report("  "))
    assert resp.status_code == 422
