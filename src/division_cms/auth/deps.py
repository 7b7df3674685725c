"""
division_cms.auth.deps

FastAPI dependency functions for admin authentication.

Responsibilities:
- Read the admin token header and verify it.
- Resolve the token to a live, active `Admin` row (the authoritative division scope).
"""

from __future__ import annotations

from fastapi import Depends
from fastapi.security import APIKeyHeader
from sqlalchemy.ext.asyncio import AsyncSession

from division_cms.api.deps import db_session, settings_dep
from division_cms.auth.tokens import verify_admin_token
from division_cms.db.models import Admin
from division_cms.db.repositories.admins import AdminRepo
from division_cms.errors import InactiveOrUnknownAdmin, InvalidToken, MissingToken
from division_cms.observability.logging import get_logger
from division_cms.settings import Settings

ADMIN_TOKEN_HEADER = "x-admin-token"

log = get_logger(__name__)

_admin_token = APIKeyHeader(name=ADMIN_TOKEN_HEADER, auto_error=False)


async def get_admin(
    token: str | None = Depends(_admin_token),
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
) -> Admin:
    if not token:
        raise MissingToken()

    principal = verify_admin_token(
        token,
        settings.admin_token_secret,
        retired_secrets=settings.admin_token_retired_secrets,
    )
    if principal is None:
        raise InvalidToken()

    # The token may outlive the admin's access; the row is the source of truth.
    admin = await AdminRepo(session).get_active(principal.admin_id)
    if admin is None:
        log.info("admin_rejected", admin_id=str(principal.admin_id))
        raise InactiveOrUnknownAdmin()
    return admin


# --- Module Notes -----------------------------------------------------------
# Division scoping is not done here: services compare resource ownership against
# `admin.division_id` for every mutation.
