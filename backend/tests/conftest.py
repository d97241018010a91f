import os
import tempfile
from collections.abc import AsyncGenerator
from datetime import datetime, timezone
from pathlib import Path

# Must be set before app.config is imported anywhere
TEST_DATABASE_URL = f"sqlite+aiosqlite:///{Path(tempfile.gettempdir()) / 'hazardlog_test.db'}"
os.environ["DATABASE_URL"] = TEST_DATABASE_URL
os.environ["STATE_BACKEND"] = "memory"
os.environ["OPENAI_API_KEY"] = ""
os.environ["ANTHROPIC_API_KEY"] = ""

import pytest

import app.models  # noqa: F401
from app.database import Base, engine
from app.services.recommendation.actor import ActorContext
from app.services.recommendation.errors import SourceUnavailable
from app.services.recommendation.record_source import RecordSource, ReportRecord
from app.services.recommendation.state_store import InMemoryStateStore

FIXED_NOW = datetime(2026, 10, 1, 12, 0, tzinfo=timezone.utc)


def make_record(record_id: int, inspector: str = "Dana Whitfield", **overrides) -> ReportRecord:
    data = {
        "id": record_id,
        "inspector_name": inspector,
        "date_of_inspection": f"2026-09-{record_id:02d}",
        "location": f"Site {record_id}",
        "observed_hazard": f"Hazard {record_id}",
        "severity_rating": "Medium",
        "recommended_action": f"Action {record_id}",
    }
    data.update(overrides)
    return ReportRecord(**data)


class FakeRecordSource(RecordSource):
    """Newest-first report lists per inspector, held in memory."""

    def __init__(self):
        self.reports: dict[str, list[ReportRecord]] = {}
        self.calls = 0
        self.fail = False

    def add(self, record_id: int, inspector: str = "Dana Whitfield") -> None:
        self.reports.setdefault(inspector, []).insert(0, make_record(record_id, inspector))

    async def fetch_recent(self, inspector_name: str, limit: int) -> list[ReportRecord]:
        self.calls += 1
        if self.fail:
            raise SourceUnavailable("database offline")
        return list(self.reports.get(inspector_name, []))[:limit]


class FakeAnalyzer:
    """Returns queued responses in order; ``AnalysisUnavailable`` entries are raised."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls: list[tuple[int, ...]] = []

    async def analyze(self, records):
        self.calls.append(tuple(r.id for r in records))
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def source() -> FakeRecordSource:
    return FakeRecordSource()


@pytest.fixture
def store() -> InMemoryStateStore:
    return InMemoryStateStore()


@pytest.fixture
def make_context(source, store):
    def _make(analyzer) -> ActorContext:
        return ActorContext(
            record_source=source,
            analyzer=analyzer,
            state_store=store,
            clock=lambda: FIXED_NOW,
        )

    return _make


@pytest.fixture
async def db_tables() -> AsyncGenerator[None, None]:
    """Fresh tables for each test that touches the database."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    yield
    await engine.dispose()
