"""Reports router — safety inspection report CRUD."""

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.models.report import Report
from app.schemas.report import ReportCreate, ReportCreatedResponse, ReportResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("")
async def list_reports(db: AsyncSession = Depends(get_db)):
    """All reports, newest first."""
    result = await db.execute(
        select(Report).order_by(Report.created_at.desc(), Report.id.desc())
    )
    reports = result.scalars().all()
    return {"reports": [ReportResponse.model_validate(r) for r in reports]}


@router.post("", status_code=201, response_model=ReportCreatedResponse)
async def create_report(req: ReportCreate, db: AsyncSession = Depends(get_db)):
    """Submit a new inspection report."""
    report = Report(**req.model_dump())
    db.add(report)
    await db.commit()
    await db.refresh(report)
    logger.info(f"Report {report.id} submitted by {report.inspector_name}")
    return ReportCreatedResponse(message="Report submitted successfully", id=report.id)


@router.delete("/{report_id}")
async def delete_report(report_id: int, db: AsyncSession = Depends(get_db)):
    """Delete a report."""
    report = await db.get(Report, report_id)
    if not report:
        raise HTTPException(status_code=404, detail="Report not found")
    await db.delete(report)
    await db.commit()
    return {"message": "Report deleted successfully"}
