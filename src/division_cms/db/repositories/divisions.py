from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from division_cms.db.models import Division


class DivisionRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_active_by_slug(self, slug: str) -> Division | None:
        stmt = select(Division).where(
            Division.slug == slug.lower(),
            Division.is_active.is_(True),
        )
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def list_active(self) -> list[Division]:
        stmt = select(Division).where(Division.is_active.is_(True)).order_by(Division.name)
        return list((await self._session.execute(stmt)).scalars().all())
