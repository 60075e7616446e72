"""Post-debate coaching feedback models."""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from .debate_format import SpeakerRole, Team


FeedbackType = Literal["overall", "team", "individual"]


class TeamFeedbackDraft(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    team: Team
    strongest_arguments: List[str] = Field(default_factory=list, alias="strongestArguments")
    missed_responses: List[str] = Field(default_factory=list, alias="missedResponses")
    improvements: List[str] = Field(default_factory=list)


class SpeakerFeedbackDraft(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    speaker_role: SpeakerRole = Field(..., alias="speakerRole")
    strongest_arguments: List[str] = Field(default_factory=list, alias="strongestArguments")
    missed_responses: List[str] = Field(default_factory=list, alias="missedResponses")
    improvements: List[str] = Field(default_factory=list)


class FeedbackReport(BaseModel):
    """Coach feedback as returned by the LLM (camelCase keys accepted)."""

    model_config = ConfigDict(populate_by_name=True)

    overall_analysis: str = Field(..., min_length=1, alias="overallAnalysis")
    suggested_winner: Team = Field(..., alias="suggestedWinner")
    winning_reason: str = Field("", alias="winningReason")
    team_feedback: List[TeamFeedbackDraft] = Field(default_factory=list, alias="teamFeedback")
    individual_feedback: List[SpeakerFeedbackDraft] = Field(default_factory=list, alias="individualFeedback")


class DebateFeedback(BaseModel):
    """One persisted feedback entry: overall, per team, or per participant."""

    id: str
    room_id: str
    feedback_type: FeedbackType
    team: Optional[Team] = None
    participant_id: Optional[str] = None
    strongest_arguments: List[str] = Field(default_factory=list)
    missed_responses: List[str] = Field(default_factory=list)
    improvements: List[str] = Field(default_factory=list)
    overall_analysis: Optional[str] = None
    suggested_winner: Optional[Team] = None
    winning_reason: Optional[str] = None
    created_at: str = Field(default_factory=lambda: datetime.now().isoformat())


class FeedbackGenerateRequest(BaseModel):
    room_id: str
