"""Debate room, participant and turn-state data models."""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, model_validator

from .debate_format import DebateFormatId, SpeakerRole, SpeakerSlot, TEAM_ROLES, Team
from .motion import Motion


RoomStatus = Literal["waiting", "in_progress", "completed", "cancelled"]
RoomPhase = Literal["setup", "debate", "feedback", "completed"]


def _now() -> str:
    return datetime.now().isoformat()


class DebateRoom(BaseModel):
    """Persisted room record, including the turn state."""

    id: str = Field(..., description="Unique room ID")
    room_code: str = Field(..., min_length=6, max_length=6, description="Join code")
    creator_id: str = Field(..., description="User who created the room")
    format: DebateFormatId = "asian_parliamentary"
    motion_id: Optional[str] = None
    status: RoomStatus = "waiting"
    phase: RoomPhase = "setup"
    current_slot_index: Optional[int] = Field(
        None,
        description="Index into the full format speaking order",
    )
    started_at: Optional[str] = None
    ended_at: Optional[str] = None
    created_at: str = Field(default_factory=_now)
    updated_at: str = Field(default_factory=_now)


class Participant(BaseModel):
    """A user bound to one speaker role in a room."""

    id: str
    room_id: str
    user_id: str
    team: Team
    speaker_role: SpeakerRole
    is_ready: bool = False
    joined_at: str = Field(default_factory=_now)


class RoomCreate(BaseModel):
    """Request model for creating a room."""

    format: DebateFormatId = "asian_parliamentary"


class RoomCreated(BaseModel):
    room_id: str
    room_code: str


class RoomJoin(BaseModel):
    """Request model for joining a room by code."""

    room_code: str = Field(..., min_length=6, max_length=6)
    team: Team
    speaker_role: SpeakerRole

    @model_validator(mode="after")
    def check_role_matches_team(self):
        if self.speaker_role not in TEAM_ROLES[self.team]:
            raise ValueError(f"Invalid role for {self.team.capitalize()} team")
        return self


class ReadyUpdate(BaseModel):
    is_ready: bool


class RoomDetail(BaseModel):
    """Room with its roster and attached motion."""

    room: DebateRoom
    participants: List[Participant] = Field(default_factory=list)
    motion: Optional[Motion] = None


class StartDebateResult(BaseModel):
    success: bool = True
    current_slot_index: int


class AdvanceResult(BaseModel):
    completed: bool
    next_slot_index: Optional[int] = None


class CurrentSpeaker(BaseModel):
    """Read-only snapshot of whose turn it is."""

    room_id: str
    status: RoomStatus
    phase: RoomPhase
    slot_index: Optional[int] = None
    slot: Optional[SpeakerSlot] = None
    participant: Optional[Participant] = None
    active_position: Optional[int] = None
    active_count: int = 0
    active_order: List[SpeakerSlot] = Field(default_factory=list)
