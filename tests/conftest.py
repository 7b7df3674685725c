"""
tests.conftest

Shared fixtures: an app bound to a throwaway SQLite file, an in-process HTTP client,
and a small seeded world of divisions, admins, programs and modules.
"""

from __future__ import annotations

import uuid
from collections.abc import AsyncIterator
from dataclasses import dataclass

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI

from division_cms.api.app import create_app
from division_cms.auth.models import AdminPrincipal
from division_cms.auth.tokens import now_ms, sign_admin_token
from division_cms.db.models import Admin, Division, ModuleType, Program, ProgramModule
from division_cms.settings import Settings

SECRET = "test-secret"
HOUR_MS = 60 * 60 * 1000


@dataclass(frozen=True)
class World:
    farmelife: Division
    organelife: Division
    farm_admin: Admin
    organ_admin: Admin
    inactive_admin: Admin
    farm_program: Program
    organ_program: Program
    organ_module: ProgramModule


def token_for(
    admin: Admin,
    *,
    secret: str = SECRET,
    ttl_ms: int = HOUR_MS,
    division_id: uuid.UUID | None = None,
) -> str:
    principal = AdminPrincipal(
        admin_id=admin.id,
        user_id=admin.user_id,
        division_id=division_id or admin.division_id,
        expiry_timestamp=now_ms() + ttl_ms,
    )
    return sign_admin_token(principal, secret)


def auth_headers(admin: Admin, **kwargs) -> dict[str, str]:
    return {"x-admin-token": token_for(admin, **kwargs)}


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        env="test",
        log_level="WARNING",
        admin_token_secret=SECRET,
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
    )


@pytest_asyncio.fixture
async def app(settings: Settings) -> AsyncIterator[FastAPI]:
    app = create_app(settings=settings)
    # httpx's ASGITransport does not run lifespan events; enter them explicitly.
    async with app.router.lifespan_context(app):
        yield app


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncIterator[httpx.AsyncClient]:
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest_asyncio.fixture
async def world(app: FastAPI) -> World:
    farmelife = Division(id=uuid.uuid4(), name="Farmelife", slug="farmelife")
    organelife = Division(id=uuid.uuid4(), name="Organelife", slug="organelife")
    farm_admin = Admin(id=uuid.uuid4(), user_id="user-farm", division_id=farmelife.id)
    organ_admin = Admin(id=uuid.uuid4(), user_id="user-organ", division_id=organelife.id)
    inactive_admin = Admin(
        id=uuid.uuid4(), user_id="user-gone", division_id=farmelife.id, is_active=False
    )
    farm_program = Program(id=uuid.uuid4(), division_id=farmelife.id, name="Seed drive")
    organ_program = Program(id=uuid.uuid4(), division_id=organelife.id, name="Compost week")
    organ_module = ProgramModule(
        id=uuid.uuid4(),
        program_id=organ_program.id,
        module_type=ModuleType.announcement,
        is_published=False,
    )

    async with app.state.sessionmaker() as session:
        session.add_all([farmelife, organelife])
        await session.flush()
        session.add_all([farm_admin, organ_admin, inactive_admin, farm_program, organ_program])
        await session.flush()
        session.add(organ_module)
        await session.commit()

    return World(
        farmelife=farmelife,
        organelife=organelife,
        farm_admin=farm_admin,
        organ_admin=organ_admin,
        inactive_admin=inactive_admin,
        farm_program=farm_program,
        organ_program=organ_program,
        organ_module=organ_module,
    )


async def load_module(app: FastAPI, module_id: uuid.UUID | str) -> ProgramModule | None:
    async with app.state.sessionmaker() as session:
        return await session.get(ProgramModule, uuid.UUID(str(module_id)))
