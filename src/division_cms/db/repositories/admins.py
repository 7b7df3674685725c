from __future__ import annotations

import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from division_cms.db.models import Admin


class AdminRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, admin_id: uuid.UUID) -> Admin | None:
        return await self._session.get(Admin, admin_id)

    async def get_active(self, admin_id: uuid.UUID) -> Admin | None:
        admin = await self.get(admin_id)
        if admin is None or not admin.is_active:
            return None
        return admin
