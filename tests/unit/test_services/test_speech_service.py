"""Unit tests for SpeechService and the polled transcript."""

import asyncio

import pytest

from src.api.errors import InvalidStateError, NotFoundError
from src.api.services.speech_service import SpeechService


@pytest.fixture
def speech_service(debate_store):
    return SpeechService(debate_store)


async def _live_room(store, seed):
    return await seed(
        store,
        ["prime_minister", "leader_of_opposition"],
        status="in_progress",
        current_slot_index=0,
    )


@pytest.mark.asyncio
async def test_create_speech(debate_store, seed, speech_service):
    await _live_room(debate_store, seed)
    speech = await speech_service.create_speech("room_1", "u_prime_minister", "prime_minister")

    assert speech.participant_id == "part_room_1_prime_minister"
    assert speech.speech_type == "substantive"
    assert speech.transcript is None


@pytest.mark.asyncio
async def test_create_speech_requires_live_room(debate_store, seed, speech_service):
    await seed(debate_store, ["prime_minister"])

    with pytest.raises(InvalidStateError):
        await speech_service.create_speech("room_1", "u_prime_minister", "prime_minister")
    with pytest.raises(NotFoundError):
        await speech_service.create_speech("room_1", "stranger", "prime_minister")
    with pytest.raises(NotFoundError):
        await speech_service.create_speech("missing", "u_prime_minister", "prime_minister")


@pytest.mark.asyncio
async def test_segments_are_numbered_and_appended(debate_store, seed, speech_service):
    await _live_room(debate_store, seed)
    speech = await speech_service.create_speech("room_1", "u_prime_minister", "prime_minister")

    segments = [
        await speech_service.append_segment(speech.id, text, timestamp=i * 5, speaker_name="Alex")
        for i, text in enumerate(["Thank you.", "Our first point", "is simple."])
    ]

    assert [s.sequence_number for s in segments] == [1, 2, 3]
    assert await speech_service.latest_sequence("room_1") == 3
    stored = await speech_service.store.get_speech(speech.id)
    assert stored.transcript == "Thank you. Our first point is simple."


@pytest.mark.asyncio
async def test_concurrent_segments_keep_every_word(debate_store, seed, speech_service):
    await _live_room(debate_store, seed)
    speech = await speech_service.create_speech("room_1", "u_prime_minister", "prime_minister")

    segments = await asyncio.gather(
        *[speech_service.append_segment(speech.id, f"w{i}") for i in range(6)]
    )

    assert sorted(s.sequence_number for s in segments) == [1, 2, 3, 4, 5, 6]
    stored = await speech_service.store.get_speech(speech.id)
    in_order = sorted(segments, key=lambda s: s.sequence_number)
    assert stored.transcript.split() == [s.text for s in in_order]


@pytest.mark.asyncio
async def test_append_to_unknown_speech(debate_store, speech_service):
    with pytest.raises(NotFoundError):
        await speech_service.append_segment("missing", "hello")


@pytest.mark.asyncio
async def test_poll_after_sequence(debate_store, seed, speech_service):
    await _live_room(debate_store, seed)
    pm = await speech_service.create_speech("room_1", "u_prime_minister", "prime_minister")
    lo = await speech_service.create_speech("room_1", "u_leader_of_opposition", "leader_of_opposition")
    await speech_service.append_segment(pm.id, "one")
    await speech_service.append_segment(pm.id, "two")
    await speech_service.append_segment(lo.id, "three")

    page = await speech_service.poll_segments("room_1", after_sequence=1)

    assert [(s.sequence_number, s.speaker_role) for s in page] == [
        (2, "prime_minister"),
        (3, "leader_of_opposition"),
    ]
    assert await speech_service.poll_segments("room_1", after_sequence=3) == []


@pytest.mark.asyncio
async def test_empty_segment_rejected(debate_store, seed, speech_service):
    await _live_room(debate_store, seed)
    speech = await speech_service.create_speech("room_1", "u_prime_minister", "prime_minister")

    with pytest.raises(ValueError):
        await speech_service.append_segment(speech.id, "   ")
    assert await speech_service.latest_sequence("room_1") == 0


@pytest.mark.asyncio
async def test_update_and_end_speech(debate_store, seed, speech_service):
    await _live_room(debate_store, seed)
    speech = await speech_service.create_speech("room_1", "u_prime_minister", "prime_minister")

    updated = await speech_service.update_transcript(speech.id, "Full text")
    assert updated.transcript == "Full text"

    ended = await speech_service.end_speech(speech.id, 415)
    assert ended.duration_seconds == 415
    assert ended.ended_at is not None

    speeches = await speech_service.list_speeches("room_1")
    assert [s.id for s in speeches] == [speech.id]

    with pytest.raises(NotFoundError):
        await speech_service.end_speech("missing", 10)
