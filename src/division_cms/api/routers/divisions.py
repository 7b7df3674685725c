"""
division_cms.api.routers.divisions

Public read endpoints backing the division pages.

Responsibilities:
- List active divisions.
- Return one division with its active programs, their modules and announcements,
  plus a flattened feed of published announcements.
"""

from __future__ import annotations

import uuid
from datetime import date, datetime

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict
from sqlalchemy.ext.asyncio import AsyncSession

from division_cms.api.deps import db_session
from division_cms.db.models import ModuleType
from division_cms.db.repositories.divisions import DivisionRepo
from division_cms.db.repositories.programs import ProgramRepo
from division_cms.errors import ResourceNotFound

router = APIRouter(prefix="/v1/divisions", tags=["divisions"])


class DivisionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    slug: str
    description: str | None


class ModuleSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    module_type: ModuleType
    is_published: bool


class AnnouncementOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    title: str
    description: str | None
    poster_url: str | None
    is_published: bool
    created_at: datetime


class FeedAnnouncement(AnnouncementOut):
    program_id: uuid.UUID
    program_name: str


class ProgramOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    description: str | None
    start_date: date | None
    end_date: date | None
    all_panchayaths: bool
    is_active: bool
    modules: list[ModuleSummary]
    announcements: list[AnnouncementOut]


class DivisionDetailResponse(BaseModel):
    division: DivisionOut
    programs: list[ProgramOut]
    announcements: list[FeedAnnouncement]


@router.get("", response_model=list[DivisionOut])
async def list_divisions(session: AsyncSession = Depends(db_session)) -> list[DivisionOut]:
    divisions = await DivisionRepo(session).list_active()
    return [DivisionOut.model_validate(d) for d in divisions]


@router.get("/{slug}", response_model=DivisionDetailResponse)
async def get_division(
    slug: str,
    session: AsyncSession = Depends(db_session),
) -> DivisionDetailResponse:
    division = await DivisionRepo(session).get_active_by_slug(slug)
    if division is None:
        raise ResourceNotFound("Division not found")

    programs = await ProgramRepo(session).list_active_for_division(division.id)

    feed = [
        FeedAnnouncement(
            **AnnouncementOut.model_validate(a).model_dump(),
            program_id=p.id,
            program_name=p.name,
        )
        for p in programs
        for a in p.announcements
        if a.is_published
    ]
    feed.sort(key=lambda a: a.created_at, reverse=True)

    return DivisionDetailResponse(
        division=DivisionOut.model_validate(division),
        programs=[ProgramOut.model_validate(p) for p in programs],
        announcements=feed,
    )
