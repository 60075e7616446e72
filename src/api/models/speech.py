"""Speech and live transcript data models."""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from .debate_format import SlotRole


SpeechType = Literal["substantive", "reply"]


class Speech(BaseModel):
    """One delivered speech and its accumulated transcript."""

    id: str
    room_id: str
    participant_id: str
    speaker_role: SlotRole
    speech_type: SpeechType = "substantive"
    transcript: Optional[str] = None
    duration_seconds: Optional[int] = None
    started_at: str = Field(default_factory=lambda: datetime.now().isoformat())
    ended_at: Optional[str] = None


class TranscriptSegment(BaseModel):
    """A transcribed chunk, ordered per room by sequence_number."""

    id: str
    room_id: str
    speech_id: str
    speaker_role: SlotRole
    speaker_name: Optional[str] = None
    text: str
    timestamp: int = Field(0, ge=0, description="Seconds into the speech")
    sequence_number: int = Field(..., ge=1)
    created_at: str = Field(default_factory=lambda: datetime.now().isoformat())


class SpeechCreate(BaseModel):
    room_id: str
    speaker_role: SlotRole
    speech_type: SpeechType = "substantive"


class TranscriptUpdate(BaseModel):
    transcript: str


class SpeechEnd(BaseModel):
    duration_seconds: int = Field(..., ge=0)


class SegmentCreate(BaseModel):
    text: str = Field(..., min_length=1)
    timestamp: int = Field(0, ge=0)
    speaker_name: Optional[str] = None


class TranscriptPage(BaseModel):
    segments: List[TranscriptSegment] = Field(default_factory=list)
    latest_sequence: int = 0
