"""
division_cms.db.repositories.modules

Repository for `ProgramModule` entities.

Responsibilities:
- Insert, fetch, toggle and remove program modules.
"""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from division_cms.db.models import ModuleType, ProgramModule


class ModuleRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(
        self,
        *,
        program_id: uuid.UUID,
        module_type: ModuleType,
        is_published: bool = False,
    ) -> ProgramModule:
        module = ProgramModule(
            program_id=program_id,
            module_type=module_type,
            is_published=is_published,
        )
        self._session.add(module)
        await self._session.flush()
        return module

    async def get(self, module_id: uuid.UUID) -> ProgramModule | None:
        return await self._session.get(ProgramModule, module_id)

    async def set_published(self, module: ProgramModule, is_published: bool) -> ProgramModule:
        module.is_published = is_published
        module.updated_at = datetime.utcnow()
        await self._session.flush()
        return module

    async def delete(self, module: ProgramModule) -> None:
        await self._session.delete(module)
        await self._session.flush()
