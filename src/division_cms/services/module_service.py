"""
division_cms.services.module_service

Program module administration (authorization + transaction owner).

Responsibilities:
- Scope every module mutation to the calling admin's division.
- Dispatch the create/update/delete actions of the admin surface.
- Turn storage rejections into `StorageFailure` after rolling back.
"""

from __future__ import annotations

import enum
import uuid
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any, TypeVar, assert_never

from pydantic import BaseModel, ConfigDict, StrictBool, ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from division_cms.db.models import Admin, ModuleType, ProgramModule
from division_cms.db.repositories.modules import ModuleRepo
from division_cms.db.repositories.programs import ProgramRepo
from division_cms.errors import (
    AuthorizationDenied,
    InvalidPayload,
    ResourceNotFound,
    StorageFailure,
    storage_error_message,
)
from division_cms.observability.logging import get_logger

log = get_logger(__name__)

_Data = TypeVar("_Data", bound=BaseModel)


class ModuleAction(enum.StrEnum):
    create = "create"
    update = "update"
    delete = "delete"


class CreateModuleData(BaseModel):
    model_config = ConfigDict(extra="ignore")

    program_id: uuid.UUID
    module_type: ModuleType
    is_published: StrictBool = False


class UpdateModuleData(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: uuid.UUID
    is_published: StrictBool | None = None


class DeleteModuleData(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: uuid.UUID


def _parse(model: type[_Data], data: dict[str, Any]) -> _Data:
    try:
        return model.model_validate(data)
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(p) for p in first["loc"]) or "data"
        raise InvalidPayload(f"Invalid {field}: {first['msg']}") from e


class ModuleService:
    def __init__(self, *, session: AsyncSession) -> None:
        self._session = session
        self._programs = ProgramRepo(session)
        self._modules = ModuleRepo(session)

    async def dispatch(
        self, action: ModuleAction, data: dict[str, Any], *, admin: Admin
    ) -> ProgramModule | None:
        if action is ModuleAction.create:
            return await self.create(_parse(CreateModuleData, data), admin=admin)
        if action is ModuleAction.update:
            return await self.update(_parse(UpdateModuleData, data), admin=admin)
        if action is ModuleAction.delete:
            await self.delete(_parse(DeleteModuleData, data), admin=admin)
            return None
        assert_never(action)

    async def authorize_program(self, program_id: uuid.UUID, division_id: uuid.UUID) -> bool:
        # A missing program is reported exactly like a foreign one.
        program = await self._programs.get(program_id)
        if program is None:
            return False
        return program.division_id == division_id

    async def create(self, data: CreateModuleData, *, admin: Admin) -> ProgramModule:
        log.info("module_create", program_id=str(data.program_id), module_type=data.module_type)
        if not await self.authorize_program(data.program_id, admin.division_id):
            raise AuthorizationDenied()

        async with self._writing():
            module = await self._modules.create(
                program_id=data.program_id,
                module_type=data.module_type,
                is_published=data.is_published,
            )
        return module

    async def update(self, data: UpdateModuleData, *, admin: Admin) -> ProgramModule:
        log.info("module_update", module_id=str(data.id))
        module = await self._load_owned(data.id, admin=admin)

        # Partial update: only fields present in the payload are applied.
        async with self._writing():
            if data.is_published is not None:
                module = await self._modules.set_published(module, data.is_published)
        return module

    async def delete(self, data: DeleteModuleData, *, admin: Admin) -> None:
        log.info("module_delete", module_id=str(data.id))
        module = await self._load_owned(data.id, admin=admin)

        async with self._writing():
            await self._modules.delete(module)

    async def _load_owned(self, module_id: uuid.UUID, *, admin: Admin) -> ProgramModule:
        module = await self._modules.get(module_id)
        if module is None:
            raise ResourceNotFound("Module not found")
        if not await self.authorize_program(module.program_id, admin.division_id):
            raise AuthorizationDenied()
        return module

    @asynccontextmanager
    async def _writing(self) -> AsyncIterator[None]:
        try:
            yield
            await self._session.commit()
        except SQLAlchemyError as e:
            await self._session.rollback()
            log.warning("module_write_failed", error=storage_error_message(e))
            raise StorageFailure(storage_error_message(e)) from e


# --- Module Notes -----------------------------------------------------------
# Authorization and the write run in separate statements without a spanning lock;
# a program moving divisions in between is tolerated on this low-traffic surface.
