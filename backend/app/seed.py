"""Seed script for the HazardLog development database."""

import asyncio

from sqlalchemy import select

from app.database import Base, async_session_factory, engine
from app.models.report import Report

# ── Reports ────────────────────────────────────────────────────────────────────

REPORTS = [
    {
        "date_of_inspection": "2026-09-02",
        "location": "Warehouse B, loading dock 3",
        "inspector_name": "Dana Whitfield",
        "observed_hazard": "Pallet jack left in walkway beside dock door, partially blocking the marked pedestrian lane.",
        "severity_rating": "Medium",
        "recommended_action": "Return equipment to charging bay after use and repaint the pedestrian lane markings.",
    },
    {
        "date_of_inspection": "2026-09-16",
        "location": "Warehouse B, mezzanine stairs",
        "inspector_name": "Dana Whitfield",
        "observed_hazard": "Loose handrail.",
        "severity_rating": "High",
        "recommended_action": "Fix it.",
    },
    {
        "date_of_inspection": "2026-09-10",
        "location": "Plant 1, paint booth",
        "inspector_name": "Luis Ortega",
        "observed_hazard": "Exhaust filter visibly clogged; solvent odor noticeable outside the booth.",
        "severity_rating": "High",
        "recommended_action": "Replace filters today and log airflow readings before the next shift.",
    },
]


async def seed():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with async_session_factory() as db:
        # Check if already seeded
        result = await db.execute(select(Report).limit(1))
        if result.scalar_one_or_none():
            print("Database already seeded. Skipping.")
            return

        for data in REPORTS:
            db.add(Report(**data))
        await db.commit()
        print(f"Seeded {len(REPORTS)} reports.")


if __name__ == "__main__":
    asyncio.run(seed())
