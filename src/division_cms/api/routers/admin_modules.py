"""
division_cms.api.routers.admin_modules

Token-gated admin endpoint for program modules.

Responsibilities:
- Authenticate the caller (`x-admin-token`) via `auth.deps.get_admin` before the
  body is interpreted.
- Resolve the requested action and delegate to `ModuleService`.
- Shape the `{"success": true, "module"?: {...}}` response.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any

import structlog
from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from division_cms.api.deps import db_session
from division_cms.auth.deps import get_admin
from division_cms.db.models import Admin, ModuleType
from division_cms.errors import InvalidAction, InvalidPayload
from division_cms.services.module_service import ModuleAction, ModuleService


async def bind_operation_context(request: Request) -> None:
    """Attach `action`/`target_id` to the log context; never rejects the request."""

    try:
        body = await request.json()
    except ValueError:
        return
    if not isinstance(body, dict):
        return
    data = body.get("data")
    target = (data.get("id") or data.get("program_id")) if isinstance(data, dict) else None
    structlog.contextvars.bind_contextvars(
        action=body.get("action"),
        target_id=str(target or ""),
    )


# Route-level dependencies are solved before the endpoint's own, so rejections
# raised by `get_admin` are logged with the operation context.
router = APIRouter(
    prefix="/v1/admin-modules",
    tags=["admin"],
    dependencies=[Depends(bind_operation_context)],
)


class AdminModulesRequest(BaseModel):
    action: str | None = None
    data: dict[str, Any] = Field(default_factory=dict)


class ModuleOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    program_id: uuid.UUID
    module_type: ModuleType
    is_published: bool
    created_at: datetime
    updated_at: datetime


class AdminModulesResponse(BaseModel):
    success: bool = True
    module: ModuleOut | None = None


async def _read_body(request: Request) -> AdminModulesRequest:
    try:
        raw = await request.json()
    except ValueError:
        raise InvalidPayload("Malformed request: body is not valid JSON") from None
    try:
        return AdminModulesRequest.model_validate(raw)
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(p) for p in first["loc"]) or "body"
        raise InvalidPayload(f"Malformed request: {field}: {first['msg']}") from e


@router.post("", response_model=AdminModulesResponse, response_model_exclude_none=True)
async def admin_modules(
    request: Request,
    admin: Admin = Depends(get_admin),
    session: AsyncSession = Depends(db_session),
) -> AdminModulesResponse:
    structlog.contextvars.bind_contextvars(admin_id=str(admin.id))
    body = await _read_body(request)
    try:
        action = ModuleAction(body.action)
    except ValueError:
        raise InvalidAction() from None

    module = await ModuleService(session=session).dispatch(action, body.data, admin=admin)
    if module is None:
        return AdminModulesResponse()
    return AdminModulesResponse(module=ModuleOut.model_validate(module))


# --- Module Notes -----------------------------------------------------------
# Creation answers 200, the same as update and delete.
