"""Channel Routes — monitored stream CRUD with role checks.

Invariants:
    - New channels default to status=active
    - Listing ordered by name, filterable by type and status, paginated
    - Unknown type, non-http stream URL or blank name → 400
    - listener → 403 on writes; manager cannot delete; no header → 401
"""

from uuid import uuid4

ADMIN = {"Authorization": "Bearer token-admin"}
MANAGER = {"Authorization": "Bearer token-manager"}
LISTENER = {"Authorization": "Bearer token-listener"}

CHANNEL = {
    "name": "RFM Dakar",
    "type": "radio",
    "stream_url": "https://stream.rfm.sn/live",
    "country": "SN",
    "language": "wo",
}


async def _create(client, headers=ADMIN, **overrides):
    return await client.post(
        "/api/v1/channels", headers=headers, json={**CHANNEL, **overrides},
    )


async def test_create_defaults_to_active(client, seed_users):
    res = await _create(client)
    assert res.status_code == 201
    body = res.json()
    assert body["name"] == "RFM Dakar"
    assert body["type"] == "radio"
    assert body["status"] == "active"
    assert body["stream_url"] == "https://stream.rfm.sn/live"


async def test_manager_can_create(client, seed_users):
    res = await _create(client, headers=MANAGER, type="tv", name="RTS 1")
    assert res.status_code == 201
    assert res.json()["type"] == "tv"


async def test_listener_cannot_create(client, seed_users):
    res = await _create(client, headers=LISTENER)
    assert res.status_code == 403


async def test_unknown_type_rejected(client, seed_users):
    res = await _create(client, type="podcast")
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"


async def test_non_http_stream_url_rejected(client, seed_users):
    res = await _create(client, stream_url="ftp://stream.rfm.sn/live")
    assert res.status_code == 400


async def test_blank_name_rejected(client, seed_users):
    res = await _create(client, name="   ")
    assert res.status_code == 400


async def test_list_ordered_filtered_and_paginated(client, seed_users):
    await _create(client, name="Zik FM")
    await _create(client, name="RTS 1", type="tv")
    await _create(client, name="Sud FM", status="inactive")

    res = await client.get("/api/v1/channels", headers=LISTENER, params={"limit": 2})
    body = res.json()
    assert [c["name"] for c in body["channels"]] == ["RTS 1", "Sud FM"]
    assert body["pagination"] == {"total": 3, "page": 1, "limit": 2, "total_pages": 2}

    res = await client.get("/api/v1/channels", headers=LISTENER, params={"type": "radio"})
    assert [c["name"] for c in res.json()["channels"]] == ["Sud FM", "Zik FM"]

    res = await client.get(
        "/api/v1/channels", headers=LISTENER,
        params={"type": "radio", "status": "active"},
    )
    assert [c["name"] for c in res.json()["channels"]] == ["Zik FM"]
    assert res.json()["pagination"]["total"] == 1


async def test_update_is_partial(client, seed_users):
    created = (await _create(client)).json()
    res = await client.put(
        f"/api/v1/channels/{created['id']}", headers=MANAGER,
        json={"status": "testing", "logo_url": "https://rfm.sn/logo.png"},
    )
    assert res.status_code == 200
    body = res.json()
    assert body["status"] == "testing"
    assert body["logo_url"] == "https://rfm.sn/logo.png"
    assert body["name"] == "RFM Dakar"


async def test_update_cannot_null_name(client, seed_users):
    created = (await _create(client)).json()
    res = await client.put(
        f"/api/v1/channels/{created['id']}", headers=ADMIN, json={"name": None},
    )
    assert res.status_code == 400


async def test_delete_requires_admin(client, seed_users):
    created = (await _create(client)).json()

    res = await client.delete(f"/api/v1/channels/{created['id']}", headers=MANAGER)
    assert res.status_code == 403

    res = await client.delete(f"/api/v1/channels/{created['id']}", headers=ADMIN)
    assert res.status_code == 200
    assert res.json() == {"success": True, "message": "Channel deleted"}

    res = await client.get(f"/api/v1/channels/{created['id']}", headers=ADMIN)
    assert res.status_code == 404


async def test_get_unknown_channel(client, seed_users):
    res = await client.get(f"/api/v1/channels/{uuid4()}", headers=LISTENER)
    assert res.status_code == 404
    assert res.json()["error"]["code"] == "RESOURCE_NOT_FOUND"


async def test_reads_require_bearer(client, seed_users):
    res = await client.get("/api/v1/channels")
    assert res.status_code == 401
