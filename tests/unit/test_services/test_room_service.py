"""Unit tests for RoomService."""

import pytest

from src.api.errors import InvalidStateError, NotFoundError, PreconditionFailedError
from src.api.services.room_service import ROOM_CODE_ALPHABET, RoomService, generate_room_code
from src.api.services.turn_service import TurnService


@pytest.fixture
def room_service(debate_store):
    return RoomService(debate_store)


def test_generate_room_code_shape():
    code = generate_room_code()
    assert len(code) == 6
    assert all(ch in ROOM_CODE_ALPHABET for ch in code)


@pytest.mark.asyncio
async def test_create_room_starts_waiting(room_service):
    room = await room_service.create_room("creator")

    assert room.id.startswith("room_")
    assert len(room.room_code) == 6
    assert room.status == "waiting"
    assert room.phase == "setup"
    assert room.current_slot_index is None
    assert room.motion_id is None


@pytest.mark.asyncio
async def test_join_then_lookup_by_code(room_service):
    room = await room_service.create_room("creator")

    participant = await room_service.join_room(room.room_code.lower(), "u1", "government", "prime_minister")

    assert participant.room_id == room.id
    assert participant.is_ready is False
    detail = await room_service.get_room(room.room_code)
    assert [p.user_id for p in detail.participants] == ["u1"]
    assert detail.motion is None


@pytest.mark.asyncio
async def test_join_unknown_code(room_service):
    with pytest.raises(NotFoundError):
        await room_service.join_room("NOPE00", "u1", "government", "prime_minister")


@pytest.mark.asyncio
async def test_join_rejects_role_from_other_team(room_service):
    room = await room_service.create_room("creator")

    with pytest.raises(PreconditionFailedError, match="Invalid role"):
        await room_service.join_room(room.room_code, "u1", "government", "opposition_whip")


@pytest.mark.asyncio
async def test_join_rejects_taken_role_and_double_join(room_service):
    room = await room_service.create_room("creator")
    await room_service.join_room(room.room_code, "u1", "government", "prime_minister")

    with pytest.raises(PreconditionFailedError, match="already taken"):
        await room_service.join_room(room.room_code, "u2", "government", "prime_minister")
    with pytest.raises(PreconditionFailedError, match="already in this room"):
        await room_service.join_room(room.room_code, "u1", "government", "government_whip")


@pytest.mark.asyncio
async def test_roster_is_frozen_after_start(debate_store, seed, room_service):
    await seed(debate_store, ["prime_minister", "leader_of_opposition"])
    await TurnService(debate_store).start_debate("room_1", "creator")

    with pytest.raises(InvalidStateError):
        await room_service.join_room("ROOM_1", "late", "government", "government_whip")
    with pytest.raises(InvalidStateError):
        await room_service.leave_room("room_1", "u_prime_minister")

    assert len(await debate_store.get_participants("room_1")) == 2


@pytest.mark.asyncio
async def test_leave_room(debate_store, seed, room_service):
    await seed(debate_store, ["prime_minister"])

    await room_service.leave_room("room_1", "u_prime_minister")
    assert await debate_store.get_participants("room_1") == []

    with pytest.raises(NotFoundError, match="not in this room"):
        await room_service.leave_room("room_1", "u_prime_minister")


@pytest.mark.asyncio
async def test_set_ready(debate_store, seed, room_service):
    await seed(debate_store, ["prime_minister"], ready=False)

    updated = await room_service.set_ready("room_1", "u_prime_minister", True)
    assert updated.is_ready is True

    with pytest.raises(NotFoundError):
        await room_service.set_ready("room_1", "stranger", True)


@pytest.mark.asyncio
async def test_readiness_is_frozen_after_start(debate_store, seed, room_service):
    await seed(debate_store, ["prime_minister", "leader_of_opposition"])
    await TurnService(debate_store).start_debate("room_1", "creator")

    with pytest.raises(InvalidStateError, match="Readiness"):
        await room_service.set_ready("room_1", "u_prime_minister", False)

    participant = await debate_store.get_participant("room_1", "u_prime_minister")
    assert participant.is_ready is True


@pytest.mark.asyncio
async def test_get_room_by_id_includes_motion(debate_store, seed, room_service):
    await seed(debate_store, ["prime_minister"])

    detail = await room_service.get_room_by_id("room_1")

    assert detail.motion is not None
    assert detail.motion.id == "motion_room_1"
    with pytest.raises(NotFoundError):
        await room_service.get_room_by_id("missing")


@pytest.mark.asyncio
async def test_list_active_rooms_only_waiting_and_capped(debate_store, seed):
    service = RoomService(debate_store, max_active_rooms=2)
    for room_id in ("room_1", "room_2", "room_3"):
        await seed(debate_store, [], room_id=room_id, with_motion=False)
    await seed(debate_store, [], room_id="room_4", with_motion=False, status="in_progress")

    rooms = await service.list_active_rooms()
    assert len(rooms) == 2
    assert all(r.status == "waiting" for r in rooms)

    assert len(await service.list_active_rooms(limit=10)) == 3


@pytest.mark.asyncio
async def test_debate_history_lists_joined_rooms(debate_store, seed, room_service):
    await seed(debate_store, ["prime_minister"], room_id="room_1")
    await seed(debate_store, ["prime_minister"], room_id="room_2", status="completed")
    await seed(debate_store, ["leader_of_opposition"], room_id="room_3")

    history = await room_service.get_debate_history("u_prime_minister")

    assert sorted(r.id for r in history) == ["room_1", "room_2"]
    assert history[0].created_at >= history[1].created_at
    assert await room_service.get_debate_history("nobody") == []
