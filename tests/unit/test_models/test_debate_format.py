"""Unit tests for debate format and request models."""

import pytest
from pydantic import ValidationError

from src.api.models.debate_format import (
    ASIAN_PARLIAMENTARY_FORMAT,
    GOVERNMENT_ROLES,
    OPPOSITION_ROLES,
    TOPIC_AREAS,
    get_format,
    option_label,
)
from src.api.models.motion import MotionDraft
from src.api.models.room import DebateRoom, RoomJoin


def test_get_format():
    assert get_format("asian_parliamentary") is ASIAN_PARLIAMENTARY_FORMAT
    with pytest.raises(ValueError, match="Unknown debate format"):
        get_format("british_parliamentary")


def test_slots_are_frozen():
    slot = ASIAN_PARLIAMENTARY_FORMAT.speaking_order[0]
    with pytest.raises(ValidationError):
        slot.time_budget_seconds = 10


def test_only_reply_slots_have_anchors():
    replies = [s.role for s in ASIAN_PARLIAMENTARY_FORMAT.speaking_order if s.is_reply]
    assert replies == ["opposition_reply", "government_reply"]


def test_slot_teams_match_role_tables():
    for slot in ASIAN_PARLIAMENTARY_FORMAT.speaking_order:
        role = slot.anchor_role or slot.role
        expected = "government" if role in GOVERNMENT_ROLES else "opposition"
        assert slot.team == expected, slot.role
    assert set(GOVERNMENT_ROLES).isdisjoint(OPPOSITION_ROLES)


def test_option_label_falls_back_to_id():
    assert option_label(TOPIC_AREAS, "ethics") == "Ethics & Philosophy"
    assert option_label(TOPIC_AREAS, "sport") == "sport"


def test_room_join_checks_team():
    RoomJoin(room_code="ABC123", team="opposition", speaker_role="opposition_whip")
    with pytest.raises(ValidationError, match="Invalid role for Government team"):
        RoomJoin(room_code="ABC123", team="government", speaker_role="opposition_whip")


def test_room_rejects_unknown_status():
    with pytest.raises(ValidationError):
        DebateRoom(id="r", room_code="ABC123", creator_id="c", status="paused")


def test_motion_draft_accepts_both_key_styles():
    camel = MotionDraft.model_validate({"motion": '"This House would X"', "keyStakeholders": ["A"]})
    snake = MotionDraft.model_validate({"motion": "This House would X", "key_stakeholders": ["A"]})
    assert camel == snake
    assert camel.motion == "This House would X"
