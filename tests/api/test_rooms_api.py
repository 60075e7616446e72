"""HTTP-level tests for the room, motion, speech and constants routers."""

import random

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from src.api.routers import constants, motions, rooms, speeches
from src.api.services.debate_store import DebateStore
from src.api.services.motion_service import MotionService


PRESETS = {"politics": {"novice": [{"motion": "This House would abolish exams"}]}}


@pytest.fixture
def client(tmp_path):
    app = FastAPI()
    app.include_router(rooms.router)
    app.include_router(motions.router)
    app.include_router(speeches.router)
    app.include_router(constants.router)

    store = DebateStore(tmp_path / "debate_state.yaml")
    app.state.debate_store = store
    app.state.motion_service = MotionService(store, fallback_motions=PRESETS, rng=random.Random(0))

    with TestClient(app) as test_client:
        yield test_client


def _as(user_id):
    return {"X-User-Id": user_id}


def _create_room(client, creator="host"):
    response = client.post("/api/rooms", json={}, headers=_as(creator))
    assert response.status_code == 201
    return response.json()


def _join(client, code, user, team, role):
    return client.post(
        "/api/rooms/join",
        json={"room_code": code, "team": team, "speaker_role": role},
        headers=_as(user),
    )


def _ready_room(client, roles):
    created = _create_room(client)
    room_id, code = created["room_id"], created["room_code"]
    for team, role in roles:
        assert _join(client, code, f"u_{role}", team, role).status_code == 201
        ready = client.post(f"/api/rooms/{room_id}/ready", json={"is_ready": True}, headers=_as(f"u_{role}"))
        assert ready.status_code == 200
    motion = client.post(
        "/api/motions/generate",
        json={"room_id": room_id, "topic_area": "politics", "difficulty": "novice"},
        headers=_as("host"),
    )
    assert motion.status_code == 201
    return room_id, code


def test_user_header_required(client):
    assert client.post("/api/rooms", json={}).status_code == 422


def test_full_debate_flow(client):
    room_id, _ = _ready_room(
        client,
        [("government", "prime_minister"), ("opposition", "leader_of_opposition")],
    )

    start = client.post(f"/api/rooms/{room_id}/start", headers=_as("host"))
    assert start.status_code == 200
    assert start.json() == {"success": True, "current_slot_index": 0}

    current = client.get(f"/api/rooms/{room_id}/current-speaker").json()
    assert current["slot"]["role"] == "prime_minister"
    assert current["participant"]["user_id"] == "u_prime_minister"
    assert current["active_count"] == 4

    indexes = []
    for _ in range(3):
        result = client.post(f"/api/rooms/{room_id}/advance", headers=_as("host")).json()
        assert result["completed"] is False
        indexes.append(result["next_slot_index"])
    assert indexes == [1, 6, 7]

    final = client.post(f"/api/rooms/{room_id}/advance", headers=_as("host"))
    assert final.json() == {"completed": True, "next_slot_index": None}

    detail = client.get(f"/api/rooms/{room_id}").json()
    assert detail["room"]["status"] == "completed"
    assert detail["room"]["phase"] == "feedback"

    again = client.post(f"/api/rooms/{room_id}/advance", headers=_as("host"))
    assert again.status_code == 409


def test_start_error_codes(client):
    room_id, code = _ready_room(client, [("government", "prime_minister")])

    assert client.post("/api/rooms/missing/start", headers=_as("host")).status_code == 404
    assert client.post(f"/api/rooms/{room_id}/start", headers=_as("u_prime_minister")).status_code == 403

    assert _join(client, code, "late", "opposition", "opposition_whip").status_code == 201
    not_ready = client.post(f"/api/rooms/{room_id}/start", headers=_as("host"))
    assert not_ready.status_code == 400
    assert "opposition_whip" in not_ready.json()["detail"]


def test_join_errors(client):
    created = _create_room(client)
    code = created["room_code"]

    assert _join(client, code, "a", "government", "prime_minister").status_code == 201
    assert _join(client, code, "b", "government", "prime_minister").status_code == 400
    assert _join(client, "ZZZZZZ", "c", "government", "government_whip").status_code == 404
    # Role/team mismatch is rejected by request validation.
    assert _join(client, code, "d", "government", "opposition_whip").status_code == 422


def test_join_after_start_conflicts(client):
    room_id, code = _ready_room(client, [("government", "prime_minister")])
    assert client.post(f"/api/rooms/{room_id}/start", headers=_as("host")).status_code == 200

    assert _join(client, code, "late", "opposition", "leader_of_opposition").status_code == 409
    leave = client.post(f"/api/rooms/{room_id}/leave", headers=_as("u_prime_minister"))
    assert leave.status_code == 409
    unready = client.post(f"/api/rooms/{room_id}/ready", json={"is_ready": False}, headers=_as("u_prime_minister"))
    assert unready.status_code == 409


def test_active_rooms_and_lookup_by_code(client):
    created = _create_room(client)

    active = client.get("/api/rooms/active").json()
    assert [r["id"] for r in active] == [created["room_id"]]

    by_code = client.get(f"/api/rooms/code/{created['room_code'].lower()}")
    assert by_code.status_code == 200
    assert by_code.json()["room"]["id"] == created["room_id"]
    assert client.get("/api/rooms/code/NOPE00").status_code == 404



def test_debate_history(client):
    first = _create_room(client)
    second = _create_room(client)
    _create_room(client)
    for created in (first, second):
        assert _join(client, created["room_code"], "alex", "government", "prime_minister").status_code == 201

    history = client.get("/api/rooms/history", headers=_as("alex"))

    assert history.status_code == 200
    assert sorted(r["id"] for r in history.json()) == sorted([first["room_id"], second["room_id"]])
    assert client.get("/api/rooms/history", headers=_as("nobody")).json() == []

def test_motion_endpoints(client):
    created = _create_room(client)
    response = client.post(
        "/api/motions/generate",
        json={"room_id": created["room_id"], "topic_area": "politics", "difficulty": "novice"},
        headers=_as("host"),
    )
    motion = response.json()
    assert motion["motion"] == "This House would abolish exams"
    assert motion["is_ai_generated"] is False

    assert client.get(f"/api/motions/{motion['id']}").status_code == 200
    assert client.get("/api/motions/missing").status_code == 404


def test_transcript_polling(client):
    room_id, _ = _ready_room(client, [("government", "prime_minister")])
    client.post(f"/api/rooms/{room_id}/start", headers=_as("host"))

    speech = client.post(
        "/api/speeches",
        json={"room_id": room_id, "speaker_role": "prime_minister"},
        headers=_as("u_prime_minister"),
    )
    assert speech.status_code == 201
    speech_id = speech.json()["id"]

    for text in ("Madam Speaker,", "we propose"):
        segment = client.post(f"/api/speeches/{speech_id}/segments", json={"text": text})
        assert segment.status_code == 201

    page = client.get(f"/api/rooms/{room_id}/transcript", params={"after_sequence": 1}).json()
    assert [s["text"] for s in page["segments"]] == ["we propose"]
    assert page["latest_sequence"] == 2
    assert client.get(f"/api/rooms/{room_id}/transcript/latest").json() == {"sequence": 2}

    ended = client.post(f"/api/speeches/{speech_id}/end", json={"duration_seconds": 400})
    assert ended.json()["duration_seconds"] == 400
    assert ended.json()["transcript"] == "Madam Speaker, we propose"


def test_constants(client):
    fmt = client.get("/api/constants/format").json()
    assert [s["role"] for s in fmt["speaking_order"]][-2:] == ["opposition_reply", "government_reply"]
    assert len(client.get("/api/constants/topic-areas").json()) == 8
    assert [d["id"] for d in client.get("/api/constants/difficulty-levels").json()] == [
        "novice",
        "intermediate",
        "advanced",
    ]
