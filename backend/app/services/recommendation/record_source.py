"""Read-only access to an inspector's most recent reports."""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.models.report import Report
from app.services.recommendation.errors import SourceUnavailable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReportRecord:
    """Detached snapshot of a report row, as handed to the analyzer."""

    id: int
    inspector_name: str
    date_of_inspection: str
    location: str
    observed_hazard: str
    severity_rating: str
    recommended_action: str

    @classmethod
    def from_model(cls, report: Report) -> "ReportRecord":
        return cls(
            id=report.id,
            inspector_name=report.inspector_name,
            date_of_inspection=report.date_of_inspection,
            location=report.location,
            observed_hazard=report.observed_hazard,
            severity_rating=report.severity_rating,
            recommended_action=report.recommended_action,
        )

    @classmethod
    def draft(cls, **fields) -> "ReportRecord":
        """Unsaved report; id 0 is never assigned to a stored row."""
        return cls(id=0, **fields)


class RecordSource(ABC):
    @abstractmethod
    async def fetch_recent(self, inspector_name: str, limit: int) -> list[ReportRecord]:
        """Return at most ``limit`` reports, newest first."""
        ...


class SqlRecordSource(RecordSource):
    """Reads the ``reports`` table through its own short-lived sessions."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def fetch_recent(self, inspector_name: str, limit: int) -> list[ReportRecord]:
        try:
            async with self._session_factory() as db:
                result = await db.execute(
                    select(Report)
                    .where(Report.inspector_name == inspector_name)
                    .order_by(Report.created_at.desc(), Report.id.desc())
                    .limit(limit)
                )
                reports = [ReportRecord.from_model(r) for r in result.scalars().all()]
        except SQLAlchemyError as e:
            logger.error(f"Report fetch failed for {inspector_name}: {e}")
            raise SourceUnavailable(f"Could not read reports: {e}") from e

        logger.debug("Found %d recent reports for %s", len(reports), inspector_name)
        return reports
