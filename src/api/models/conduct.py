"""Points of information and rule-violation reports raised during a debate."""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field


ViolationType = Literal[
    "time_exceeded",
    "new_argument_in_reply",
    "poi_outside_window",
    "speaking_out_of_turn",
]


def _now() -> str:
    return datetime.now().isoformat()


class PointOfInformation(BaseModel):
    """A POI offered to the speaker of ``speech_id``."""

    id: str
    room_id: str
    speech_id: str
    offered_by_id: str = Field(..., description="Participant ID of the offerer")
    accepted: bool = False
    responded: bool = False
    content: Optional[str] = None
    timestamp: int = Field(0, ge=0, description="Seconds into the speech")
    created_at: str = Field(default_factory=_now)


class POIOffer(BaseModel):
    room_id: str
    speech_id: str
    timestamp: int = Field(0, ge=0)


class POIResponse(BaseModel):
    accepted: bool
    content: Optional[str] = None


class RuleViolation(BaseModel):
    """A rule infraction flagged by a participant."""

    id: str
    room_id: str
    speech_id: Optional[str] = None
    participant_id: str = Field(..., description="Participant who reported it")
    violation_type: ViolationType
    description: Optional[str] = None
    timestamp: Optional[int] = Field(None, ge=0)
    created_at: str = Field(default_factory=_now)


class ViolationReport(BaseModel):
    room_id: str
    violation_type: ViolationType
    speech_id: Optional[str] = None
    description: Optional[str] = Field(None, max_length=1000)
    timestamp: Optional[int] = Field(None, ge=0)
