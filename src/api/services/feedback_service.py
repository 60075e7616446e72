"""
Feedback Service

Produces post-debate coaching feedback from the recorded speech transcripts
with an OpenAI-compatible chat model. There is no preset fallback: without a
configured provider, feedback is unavailable.
"""
import asyncio
import logging
import uuid
from typing import Any, List, Optional

from langchain_core.messages import HumanMessage, SystemMessage

from src.api.errors import (
    GenerationFailedError,
    InvalidStateError,
    NotFoundError,
    PreconditionFailedError,
)
from src.api.models.feedback import DebateFeedback, FeedbackReport
from src.api.models.room import Participant
from src.api.models.speech import Speech

from .debate_store import DebateStore
from .llm_support import build_chat_model, load_json_object

logger = logging.getLogger(__name__)

FEEDBACK_SYSTEM_PROMPT = """You are an expert debate coach providing detailed feedback after a competitive Asian Parliamentary debate. Analyze the debate and provide:

1. Overall analysis including the likely winner and why
2. Team-level feedback for both Government and Opposition
3. Individual feedback for each speaker

For each piece of feedback, identify:
- Strongest arguments made
- Missed opportunities to respond
- Specific suggestions for improvement

Respond with only a JSON object containing:
- overallAnalysis: String with the debate summary
- suggestedWinner: "government" or "opposition"
- winningReason: Why this team won
- teamFeedback: Array of {team, strongestArguments, missedResponses, improvements}
- individualFeedback: Array of {speakerRole, strongestArguments, missedResponses, improvements}"""


def parse_feedback_response(content: str) -> FeedbackReport:
    """Parse the model's JSON feedback.

    Raises:
        ValueError: If the content is not a valid feedback object
    """
    return FeedbackReport.model_validate(load_json_object(content))


def format_transcripts(speeches: List[Speech]) -> str:
    """Speech transcripts in delivery order as ``[role]: text`` blocks."""
    return "\n\n".join(
        f"[{speech.speaker_role}]: {speech.transcript}"
        for speech in speeches
        if speech.transcript
    )


def build_feedback_entries(
    room_id: str,
    report: FeedbackReport,
    participants: List[Participant],
) -> List[DebateFeedback]:
    """Flatten a report into overall, team and per-participant entries.

    Individual feedback for a role nobody held is dropped.
    """
    entries = [
        DebateFeedback(
            id=f"fb_{uuid.uuid4().hex[:12]}",
            room_id=room_id,
            feedback_type="overall",
            overall_analysis=report.overall_analysis,
            suggested_winner=report.suggested_winner,
            winning_reason=report.winning_reason,
        )
    ]
    for team_fb in report.team_feedback:
        entries.append(DebateFeedback(
            id=f"fb_{uuid.uuid4().hex[:12]}",
            room_id=room_id,
            feedback_type="team",
            team=team_fb.team,
            strongest_arguments=team_fb.strongest_arguments,
            missed_responses=team_fb.missed_responses,
            improvements=team_fb.improvements,
        ))

    by_role = {p.speaker_role: p for p in participants}
    for speaker_fb in report.individual_feedback:
        participant = by_role.get(speaker_fb.speaker_role)
        if participant is None:
            continue
        entries.append(DebateFeedback(
            id=f"fb_{uuid.uuid4().hex[:12]}",
            room_id=room_id,
            feedback_type="individual",
            team=participant.team,
            participant_id=participant.id,
            strongest_arguments=speaker_fb.strongest_arguments,
            missed_responses=speaker_fb.missed_responses,
            improvements=speaker_fb.improvements,
        ))
    return entries


class FeedbackService:
    """Generate and store coaching feedback for finished debates."""

    def __init__(self, store: DebateStore, llm: Optional[Any] = None, timeout_seconds: int = 60):
        self.store = store
        self.llm = llm
        self.timeout_seconds = timeout_seconds

    @classmethod
    def from_settings(cls, store: DebateStore, settings) -> "FeedbackService":
        return cls(
            store,
            llm=build_chat_model(settings, temperature=0.3),
            timeout_seconds=settings.llm_timeout_seconds * 2,
        )

    async def _invoke(self, motion_text: str, transcripts: str) -> FeedbackReport:
        messages = [
            SystemMessage(content=FEEDBACK_SYSTEM_PROMPT),
            HumanMessage(content=f"Motion: {motion_text}\n\nTranscript:\n{transcripts}"),
        ]
        response = await asyncio.wait_for(self.llm.ainvoke(messages), timeout=self.timeout_seconds)
        return parse_feedback_response(response.content)

    async def generate_feedback(self, room_id: str) -> FeedbackReport:
        """Analyze a completed debate and replace any earlier feedback.

        On success the room moves from the feedback phase to ``completed``.

        Raises:
            NotFoundError: Room does not exist
            InvalidStateError: Debate has not finished
            PreconditionFailedError: No provider configured, or nothing was transcribed
            GenerationFailedError: Model call failed, timed out or returned bad JSON
        """
        room = await self.store.get_room(room_id)
        if room is None:
            raise NotFoundError("Room not found")
        if room.status != "completed":
            raise InvalidStateError("Feedback is available once the debate has completed")
        if self.llm is None:
            raise PreconditionFailedError("No LLM provider is configured for feedback")

        transcripts = format_transcripts(await self.store.list_speeches(room_id))
        if not transcripts:
            raise PreconditionFailedError("No speech transcripts to analyze")

        motion = await self.store.get_motion(room.motion_id) if room.motion_id else None
        motion_text = motion.motion if motion else "Unknown"

        logger.info(f"[Feedback] Generating feedback for room {room_id}")
        try:
            report = await self._invoke(motion_text, transcripts)
        except asyncio.TimeoutError:
            logger.error(f"[Feedback] Timeout generating feedback for room {room_id}")
            raise GenerationFailedError("Feedback generation timed out")
        except Exception as e:
            logger.error(f"[Feedback] Failed to generate feedback for room {room_id}: {e}")
            raise GenerationFailedError("Failed to generate feedback")

        participants = await self.store.get_participants(room_id)
        entries = build_feedback_entries(room_id, report, participants)
        async with self.store.room_lock(room_id):
            await self.store.replace_feedback(room_id, entries)
            await self.store.update_room(room_id, phase="completed")

        logger.info(
            f"[Feedback] Stored {len(entries)} feedback entries for room {room_id}; "
            f"suggested winner {report.suggested_winner}"
        )
        return report

    async def get_feedback(self, room_id: str) -> List[DebateFeedback]:
        room = await self.store.get_room(room_id)
        if room is None:
            raise NotFoundError("Room not found")
        return await self.store.list_feedback(room_id)
