"""
tests.test_admin_modules

End-to-end behavior of the token-gated module endpoint: authentication, division
scoping, dispatch of create/update/delete and the error body contract.
"""

from __future__ import annotations

import uuid

import httpx
import pytest
from fastapi import FastAPI
from sqlalchemy import func, select

from division_cms.db.models import Admin, ModuleType, ProgramModule
from division_cms.services.module_service import ModuleService
from tests.conftest import World, auth_headers, load_module

URL = "/v1/admin-modules"


async def _count_modules(app: FastAPI) -> int:
    async with app.state.sessionmaker() as session:
        return (await session.execute(select(func.count()).select_from(ProgramModule))).scalar_one()


@pytest.mark.asyncio
async def test_preflight_returns_empty_body_with_cors_headers(client: httpx.AsyncClient) -> None:
    r = await client.options(URL)

    assert r.status_code == 200
    assert r.content == b""
    assert r.headers["access-control-allow-origin"] == "*"
    assert "x-admin-token" in r.headers["access-control-allow-headers"]


@pytest.mark.asyncio
async def test_missing_token_is_401(client: httpx.AsyncClient, world: World) -> None:
    r = await client.post(URL, json={"action": "create", "data": {}})

    assert r.status_code == 401
    assert r.json() == {"error": "Admin token required"}
    assert r.headers["access-control-allow-origin"] == "*"


@pytest.mark.asyncio
async def test_garbage_token_is_401(client: httpx.AsyncClient, world: World) -> None:
    r = await client.post(
        URL, json={"action": "create", "data": {}}, headers={"x-admin-token": "abc.def"}
    )

    assert r.status_code == 401
    assert r.json() == {"error": "Invalid or expired token"}


@pytest.mark.asyncio
async def test_expired_token_is_401(
    app: FastAPI, client: httpx.AsyncClient, world: World
) -> None:
    headers = auth_headers(world.farm_admin, ttl_ms=-1)
    data = {"program_id": str(world.farm_program.id), "module_type": "registration"}

    r = await client.post(URL, json={"action": "create", "data": data}, headers=headers)

    assert r.status_code == 401
    assert r.json() == {"error": "Invalid or expired token"}
    assert await _count_modules(app) == 1


@pytest.mark.asyncio
async def test_token_signed_with_other_secret_is_401(
    client: httpx.AsyncClient, world: World
) -> None:
    headers = auth_headers(world.farm_admin, secret="not-the-secret")

    r = await client.post(URL, json={"action": "delete", "data": {}}, headers=headers)

    assert r.status_code == 401


@pytest.mark.asyncio
@pytest.mark.parametrize("action", ["create", "update", "delete"])
async def test_inactive_admin_rejected_for_every_action(
    client: httpx.AsyncClient, world: World, action: str
) -> None:
    data = {
        "id": str(world.organ_module.id),
        "program_id": str(world.farm_program.id),
        "module_type": "advertisement",
        "is_published": True,
    }

    r = await client.post(
        URL, json={"action": action, "data": data}, headers=auth_headers(world.inactive_admin)
    )

    assert r.status_code == 401
    assert r.json() == {"error": "Admin account not found or inactive"}


@pytest.mark.asyncio
async def test_unknown_admin_is_401(client: httpx.AsyncClient, world: World) -> None:
    ghost = Admin(
        id=uuid.uuid4(), user_id="nobody", division_id=world.farmelife.id
    )

    r = await client.post(URL, json={"action": "delete", "data": {}}, headers=auth_headers(ghost))

    assert r.status_code == 401
    assert r.json() == {"error": "Admin account not found or inactive"}


@pytest.mark.asyncio
async def test_create_in_own_division(client: httpx.AsyncClient, world: World) -> None:
    data = {"program_id": str(world.farm_program.id), "module_type": "registration"}

    r = await client.post(
        URL, json={"action": "create", "data": data}, headers=auth_headers(world.farm_admin)
    )

    assert r.status_code == 200
    body = r.json()
    assert body["success"] is True
    assert body["module"]["program_id"] == str(world.farm_program.id)
    assert body["module"]["module_type"] == "registration"
    assert body["module"]["is_published"] is False
    assert r.headers["access-control-allow-origin"] == "*"


@pytest.mark.asyncio
async def test_create_for_foreign_program_is_403_and_inserts_nothing(
    app: FastAPI, client: httpx.AsyncClient, world: World
) -> None:
    before = await _count_modules(app)
    data = {"program_id": str(world.organ_program.id), "module_type": "registration"}

    r = await client.post(
        URL, json={"action": "create", "data": data}, headers=auth_headers(world.farm_admin)
    )

    assert r.status_code == 403
    assert r.json() == {"error": "You can only manage modules for programs in your division"}
    assert await _count_modules(app) == before


@pytest.mark.asyncio
async def test_create_for_missing_program_looks_like_foreign_program(
    client: httpx.AsyncClient, world: World
) -> None:
    data = {"program_id": str(uuid.uuid4()), "module_type": "registration"}

    r = await client.post(
        URL, json={"action": "create", "data": data}, headers=auth_headers(world.farm_admin)
    )

    assert r.status_code == 403


@pytest.mark.asyncio
async def test_division_scope_comes_from_admin_record_not_token(
    app: FastAPI, client: httpx.AsyncClient, world: World
) -> None:
    # Correctly signed token claiming a division the admin does not belong to.
    headers = auth_headers(world.farm_admin, division_id=world.organelife.id)
    data = {"program_id": str(world.organ_program.id), "module_type": "advertisement"}

    r = await client.post(URL, json={"action": "create", "data": data}, headers=headers)

    assert r.status_code == 403
    assert await _count_modules(app) == 1


@pytest.mark.asyncio
@pytest.mark.parametrize("action", ["update", "delete"])
async def test_foreign_module_is_403_and_unchanged(
    app: FastAPI, client: httpx.AsyncClient, world: World, action: str
) -> None:
    data = {"id": str(world.organ_module.id), "is_published": True}

    r = await client.post(
        URL, json={"action": action, "data": data}, headers=auth_headers(world.farm_admin)
    )

    assert r.status_code == 403
    stored = await load_module(app, world.organ_module.id)
    assert stored is not None
    assert stored.is_published is False


@pytest.mark.asyncio
async def test_create_then_publish_round_trip(
    app: FastAPI, client: httpx.AsyncClient, world: World
) -> None:
    headers = auth_headers(world.organ_admin)
    data = {"program_id": str(world.organ_program.id), "module_type": "registration"}
    r = await client.post(URL, json={"action": "create", "data": data}, headers=headers)
    module_id = r.json()["module"]["id"]

    r = await client.post(
        URL,
        json={"action": "update", "data": {"id": module_id, "is_published": True}},
        headers=headers,
    )

    assert r.status_code == 200
    assert r.json()["module"]["is_published"] is True
    stored = await load_module(app, module_id)
    assert stored is not None
    assert stored.is_published is True
    assert str(stored.id) == module_id
    assert stored.program_id == world.organ_program.id
    assert stored.module_type is ModuleType.registration


@pytest.mark.asyncio
async def test_update_without_fields_leaves_module_untouched(
    app: FastAPI, client: httpx.AsyncClient, world: World
) -> None:
    r = await client.post(
        URL,
        json={"action": "update", "data": {"id": str(world.organ_module.id)}},
        headers=auth_headers(world.organ_admin),
    )

    assert r.status_code == 200
    assert r.json()["module"]["is_published"] is False


@pytest.mark.asyncio
async def test_delete_twice_is_404_the_second_time(
    app: FastAPI, client: httpx.AsyncClient, world: World
) -> None:
    headers = auth_headers(world.organ_admin)
    payload = {"action": "delete", "data": {"id": str(world.organ_module.id)}}

    first = await client.post(URL, json=payload, headers=headers)
    second = await client.post(URL, json=payload, headers=headers)

    assert first.status_code == 200
    assert first.json() == {"success": True}
    assert await load_module(app, world.organ_module.id) is None
    assert second.status_code == 404
    assert second.json() == {"error": "Module not found"}


@pytest.mark.asyncio
async def test_update_missing_module_is_404(client: httpx.AsyncClient, world: World) -> None:
    r = await client.post(
        URL,
        json={"action": "update", "data": {"id": str(uuid.uuid4()), "is_published": True}},
        headers=auth_headers(world.farm_admin),
    )

    assert r.status_code == 404
    assert r.json() == {"error": "Module not found"}


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [{"action": "archive", "data": {}}, {"data": {}}])
async def test_unrecognized_action_is_400(
    client: httpx.AsyncClient, world: World, body: dict
) -> None:
    r = await client.post(URL, json=body, headers=auth_headers(world.farm_admin))

    assert r.status_code == 400
    assert r.json() == {"error": "Invalid action"}


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "data",
    [
        {"module_type": "registration"},
        {"program_id": "not-a-uuid", "module_type": "registration"},
        {"program_id": None, "module_type": "newsletter"},
    ],
)
async def test_malformed_create_payload_is_400(
    client: httpx.AsyncClient, world: World, data: dict
) -> None:
    r = await client.post(
        URL, json={"action": "create", "data": data}, headers=auth_headers(world.farm_admin)
    )

    assert r.status_code == 400
    assert r.json()["error"].startswith("Invalid ")


@pytest.mark.asyncio
async def test_invalid_json_body_is_400(client: httpx.AsyncClient, world: World) -> None:
    headers = {**auth_headers(world.farm_admin), "content-type": "application/json"}

    r = await client.post(URL, content=b"{not json", headers=headers)

    assert r.status_code == 400
    assert "error" in r.json()


@pytest.mark.asyncio
async def test_duplicate_module_type_surfaces_storage_error(
    app: FastAPI, client: httpx.AsyncClient, world: World
) -> None:
    data = {"program_id": str(world.organ_program.id), "module_type": "announcement"}

    r = await client.post(
        URL, json={"action": "create", "data": data}, headers=auth_headers(world.organ_admin)
    )

    assert r.status_code == 400
    assert "UNIQUE constraint failed" in r.json()["error"]
    assert await _count_modules(app) == 1


@pytest.mark.asyncio
async def test_unexpected_fault_is_generic_500(
    client: httpx.AsyncClient, world: World, monkeypatch: pytest.MonkeyPatch
) -> None:
    async def boom(*_args, **_kwargs):
        raise RuntimeError("database password is hunter2")

    monkeypatch.setattr(ModuleService, "dispatch", boom)

    r = await client.post(
        URL,
        json={"action": "delete", "data": {"id": str(world.organ_module.id)}},
        headers=auth_headers(world.organ_admin),
    )

    assert r.status_code == 500
    assert r.json() == {"error": "Internal server error"}
    assert r.headers["access-control-allow-origin"] == "*"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("headers", "message"),
    [
        ({}, "Admin token required"),
        ({"x-admin-token": "abc.def"}, "Invalid or expired token"),
    ],
)
async def test_authentication_runs_before_body_parsing(
    client: httpx.AsyncClient, world: World, headers: dict[str, str], message: str
) -> None:
    r = await client.post(
        URL, content=b"{not json", headers={**headers, "content-type": "application/json"}
    )

    assert r.status_code == 401
    assert r.json() == {"error": message}


@pytest.mark.asyncio
async def test_null_data_with_valid_token_is_400(client: httpx.AsyncClient, world: World) -> None:
    r = await client.post(
        URL, json={"action": "create", "data": None}, headers=auth_headers(world.farm_admin)
    )

    assert r.status_code == 400
    assert r.json()["error"].startswith("Malformed request: data")
