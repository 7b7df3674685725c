"""
division_cms.db.repositories.programs

Repository for `Program` entities.

Responsibilities:
- Point lookups used by module authorization.
- The public division-page query (programs with nested modules and announcements).
"""

from __future__ import annotations

import uuid

from sqlalchemy import desc, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from division_cms.db.models import Program


class ProgramRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, program_id: uuid.UUID) -> Program | None:
        return await self._session.get(Program, program_id)

    async def list_active_for_division(self, division_id: uuid.UUID) -> list[Program]:
        # Newest first, the order division pages render in.
        stmt = (
            select(Program)
            .where(Program.division_id == division_id, Program.is_active.is_(True))
            .options(selectinload(Program.modules), selectinload(Program.announcements))
            .order_by(desc(Program.created_at))
        )
        return list((await self._session.execute(stmt)).scalars().all())
