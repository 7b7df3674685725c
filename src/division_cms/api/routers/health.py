"""
division_cms.api.routers.health

Probes for the process and its database.

`/healthz` answers as long as the app serves requests. `/readyz` additionally
needs the division catalogue to be queryable and answers 503 when it is not.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from division_cms import __version__
from division_cms.api.deps import db_session
from division_cms.db.models import Division
from division_cms.errors import ServiceUnavailable, storage_error_message
from division_cms.observability.logging import get_logger

log = get_logger(__name__)

router = APIRouter()


@router.get("/healthz")
async def healthz() -> dict[str, str]:
    return {"status": "ok", "version": __version__}


@router.get("/readyz")
async def readyz(session: AsyncSession = Depends(db_session)) -> dict[str, str | int]:
    try:
        divisions = (
            await session.execute(select(func.count()).select_from(Division))
        ).scalar_one()
    except SQLAlchemyError as e:
        log.warning("readiness_failed", error=storage_error_message(e))
        raise ServiceUnavailable("Database unavailable") from e
    return {"status": "ready", "divisions": divisions}
