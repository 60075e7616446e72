"""Debate motion data models."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .debate_format import Difficulty, TopicArea


class Motion(BaseModel):
    """A "This House..." motion, AI-generated or preset."""

    id: str
    motion: str = Field(..., min_length=1)
    topic_area: TopicArea
    difficulty: Difficulty = "intermediate"
    background_context: Optional[str] = None
    key_stakeholders: List[str] = Field(default_factory=list)
    is_ai_generated: bool = False
    created_at: str = Field(default_factory=lambda: datetime.now().isoformat())


class MotionGenerateRequest(BaseModel):
    """Request model for generating a motion for a room."""

    room_id: str
    topic_area: TopicArea
    difficulty: Difficulty


class MotionDraft(BaseModel):
    """Motion content as returned by the LLM (camelCase keys accepted)."""

    motion: str = Field(..., min_length=1)
    background_context: Optional[str] = Field(None, alias="backgroundContext")
    key_stakeholders: List[str] = Field(default_factory=list, alias="keyStakeholders")

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("motion")
    @classmethod
    def strip_motion(cls, v: str) -> str:
        stripped = v.strip().strip('"').strip()
        if not stripped:
            raise ValueError("motion cannot be empty")
        return stripped
