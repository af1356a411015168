"""Detection Routes — airplay history and manual corrections.

Invariants:
    - Listing newest first, filterable by channel and played_at window
    - start_date after end_date → 400
    - A correction re-points the song, keeps the ISRC and is recorded with
      the replaced song and the correcting user
    - Unknown detection or song → 404 and nothing recorded
    - listener → 403 on corrections; no header → 401
"""

from uuid import uuid4

import pytest

ADMIN = {"Authorization": "Bearer token-admin"}
MANAGER = {"Authorization": "Bearer token-manager"}
LISTENER = {"Authorization": "Bearer token-listener"}


@pytest.fixture
async def ingest_key(seed_users, make_api_key):
    return await make_api_key(seed_users["manager"], ["detections:write"])


async def _channel(client, name):
    res = await client.post("/api/v1/channels", headers=ADMIN, json={
        "name": name, "type": "radio", "stream_url": f"https://{name.lower()}.sn/live",
    })
    return res.json()


async def _song(client, title, isrc):
    res = await client.post("/api/v1/songs", headers=ADMIN, json={
        "title": title, "artist": "Youssou N'Dour", "isrc": isrc,
    })
    return res.json()


async def _detect(client, key, channel_id, isrc, played_at):
    res = await client.post(
        "/api/v1/recognitions/isrc", headers={"X-API-Key": key},
        json={
            "provider": "audd", "payload": {"result": {"isrc": isrc}},
            "channel_id": channel_id, "played_at": played_at, "confidence": 0.9,
        },
    )
    assert res.status_code == 200
    return res.json()["detection_id"]


@pytest.fixture
async def airplay(client, ingest_key):
    rfm = await _channel(client, "RFM")
    zik = await _channel(client, "Zik")
    song = await _song(client, "Yay Boy", "FRGFV9400246")
    ids = {
        "early": await _detect(
            client, ingest_key, rfm["id"], "FRGFV9400246", "2026-10-01T08:00:00Z",
        ),
        "late": await _detect(
            client, ingest_key, rfm["id"], "USRC19900108", "2026-10-01T12:00:00Z",
        ),
        "other": await _detect(
            client, ingest_key, zik["id"], "FRGFV9400246", "2026-10-01T10:00:00Z",
        ),
    }
    return {"rfm": rfm, "zik": zik, "song": song, "ids": ids}


async def test_list_newest_first(client, airplay):
    res = await client.get("/api/v1/detections", headers=LISTENER)
    assert res.status_code == 200
    body = res.json()
    ids = airplay["ids"]
    assert [d["id"] for d in body["detections"]] == [
        ids["late"], ids["other"], ids["early"],
    ]
    assert body["pagination"]["total"] == 3

    first = body["detections"][0]
    assert first["isrc"] == "USRC19900108"
    assert first["isrc_display"] == "US-RC1-99-00108"
    assert first["song"] is None
    assert first["channel"]["name"] == "RFM"
    assert first["confidence"] == 0.9


async def test_matched_detection_carries_song(client, airplay):
    res = await client.get(
        f"/api/v1/detections/{airplay['ids']['early']}", headers=LISTENER,
    )
    body = res.json()
    assert body["song"]["id"] == airplay["song"]["id"]
    assert body["provider"] == "audd"
    assert body["corrections"] == []


async def test_filter_by_channel_and_window(client, airplay):
    res = await client.get(
        "/api/v1/detections", headers=LISTENER,
        params={"channel_id": airplay["rfm"]["id"]},
    )
    assert {d["id"] for d in res.json()["detections"]} == {
        airplay["ids"]["early"], airplay["ids"]["late"],
    }

    res = await client.get(
        "/api/v1/detections", headers=LISTENER,
        params={
            "start_date": "2026-10-01T09:00:00Z",
            "end_date": "2026-10-01T11:00:00Z",
        },
    )
    assert [d["id"] for d in res.json()["detections"]] == [airplay["ids"]["other"]]


async def test_pagination_and_limit_bound(client, airplay):
    res = await client.get(
        "/api/v1/detections", headers=LISTENER, params={"limit": 2, "page": 2},
    )
    body = res.json()
    assert [d["id"] for d in body["detections"]] == [airplay["ids"]["early"]]
    assert body["pagination"] == {"total": 3, "page": 2, "limit": 2, "total_pages": 2}

    res = await client.get("/api/v1/detections", headers=LISTENER, params={"limit": 101})
    assert res.status_code == 400


async def test_inverted_window_rejected(client, seed_users):
    res = await client.get(
        "/api/v1/detections", headers=LISTENER,
        params={
            "start_date": "2026-10-02T00:00:00Z",
            "end_date": "2026-10-01T00:00:00Z",
        },
    )
    assert res.status_code == 400
    assert res.json()["error"]["details"][0]["field"] == "start_date"


async def test_get_unknown_detection(client, seed_users):
    res = await client.get(f"/api/v1/detections/{uuid4()}", headers=LISTENER)
    assert res.status_code == 404


# ─── Manual corrections ──────────────────────────────────────────

async def test_manager_corrects_unmatched_detection(client, seed_users, airplay):
    song = await _song(client, "Birima", "GBAYE9300007")
    detection_id = airplay["ids"]["late"]

    res = await client.post(
        f"/api/v1/detections/{detection_id}/correction", headers=MANAGER,
        json={"song_id": song["id"], "reason": "  Wrong match on air  "},
    )
    assert res.status_code == 200
    body = res.json()
    assert body["success"] is True
    assert body["message"] == "Correction applied"
    correction = body["correction"]
    assert correction["detection_id"] == detection_id
    assert correction["previous_song_id"] is None
    assert correction["corrected_song_id"] == song["id"]
    assert correction["reason"] == "Wrong match on air"
    assert correction["corrected_by"] == str(seed_users["manager"].id)

    detail = (await client.get(
        f"/api/v1/detections/{detection_id}", headers=LISTENER,
    )).json()
    assert detail["song"]["id"] == song["id"]
    assert detail["isrc"] == "USRC19900108"
    assert [c["id"] for c in detail["corrections"]] == [correction["id"]]


async def test_correction_records_replaced_song(client, airplay):
    song = await _song(client, "Birima", "GBAYE9300007")
    res = await client.post(
        f"/api/v1/detections/{airplay['ids']['early']}/correction", headers=ADMIN,
        json={"song_id": song["id"]},
    )
    correction = res.json()["correction"]
    assert correction["previous_song_id"] == airplay["song"]["id"]
    assert correction["reason"] == "Manual correction"


async def test_listener_cannot_correct(client, airplay):
    res = await client.post(
        f"/api/v1/detections/{airplay['ids']['early']}/correction", headers=LISTENER,
        json={"song_id": airplay["song"]["id"]},
    )
    assert res.status_code == 403
    assert res.json()["error"]["code"] == "FORBIDDEN"


async def test_correction_of_unknown_detection(client, airplay):
    res = await client.post(
        f"/api/v1/detections/{uuid4()}/correction", headers=ADMIN,
        json={"song_id": airplay["song"]["id"]},
    )
    assert res.status_code == 404
    assert res.json()["error"]["code"] == "RESOURCE_NOT_FOUND"


async def test_correction_to_unknown_song_writes_nothing(client, airplay):
    detection_id = airplay["ids"]["early"]
    res = await client.post(
        f"/api/v1/detections/{detection_id}/correction", headers=ADMIN,
        json={"song_id": str(uuid4())},
    )
    assert res.status_code == 404

    detail = (await client.get(
        f"/api/v1/detections/{detection_id}", headers=ADMIN,
    )).json()
    assert detail["song"]["id"] == airplay["song"]["id"]
    assert detail["corrections"] == []


async def test_detections_require_bearer(client, seed_users):
    res = await client.get("/api/v1/detections")
    assert res.status_code == 401
