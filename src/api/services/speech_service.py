"""Service for speech records and the polled live transcript."""

import logging
import uuid
from datetime import datetime
from typing import List, Optional

from src.api.errors import InvalidStateError, NotFoundError
from src.api.models.speech import Speech, TranscriptSegment

from .debate_store import DebateStore

logger = logging.getLogger(__name__)


class SpeechService:
    """Speech lifecycle plus transcript segments with per-room sequence numbers.

    Clients poll with the last sequence number they saw; numbers increase by
    one per room and are never reused.
    """

    def __init__(self, store: DebateStore):
        self.store = store

    async def _require_speech(self, speech_id: str) -> Speech:
        speech = await self.store.get_speech(speech_id)
        if speech is None:
            raise NotFoundError("Speech not found")
        return speech

    async def create_speech(
        self,
        room_id: str,
        user_id: str,
        speaker_role: str,
        speech_type: str = "substantive",
    ) -> Speech:
        room = await self.store.get_room(room_id)
        if room is None:
            raise NotFoundError("Room not found")
        participant = await self.store.get_participant(room_id, user_id)
        if participant is None:
            raise NotFoundError("You are not in this room")
        if room.status != "in_progress":
            raise InvalidStateError("Speeches can only be recorded while the debate is in progress")

        speech = Speech(
            id=f"speech_{uuid.uuid4().hex[:12]}",
            room_id=room_id,
            participant_id=participant.id,
            speaker_role=speaker_role,
            speech_type=speech_type,
        )
        await self.store.add_speech(speech)
        logger.info(f"[Speech] Started {speech.id} ({speaker_role}) in room {room_id}")
        return speech

    async def update_transcript(self, speech_id: str, transcript: str) -> Speech:
        await self._require_speech(speech_id)
        return await self.store.update_speech(speech_id, transcript=transcript)

    async def end_speech(self, speech_id: str, duration_seconds: int) -> Speech:
        await self._require_speech(speech_id)
        return await self.store.update_speech(
            speech_id,
            ended_at=datetime.now().isoformat(),
            duration_seconds=duration_seconds,
        )

    async def list_speeches(self, room_id: str) -> List[Speech]:
        return await self.store.list_speeches(room_id)

    async def append_segment(
        self,
        speech_id: str,
        text: str,
        timestamp: int = 0,
        speaker_name: Optional[str] = None,
    ) -> TranscriptSegment:
        """Append transcribed text to a speech and publish it as the next segment."""
        text = text.strip()
        if not text:
            raise ValueError("Transcript text cannot be empty")

        def build(speech: Speech, sequence_number: int) -> TranscriptSegment:
            return TranscriptSegment(
                id=f"seg_{uuid.uuid4().hex[:12]}",
                room_id=speech.room_id,
                speech_id=speech.id,
                speaker_role=speech.speaker_role,
                speaker_name=speaker_name,
                text=text,
                timestamp=timestamp,
                sequence_number=sequence_number,
            )

        result = await self.store.append_transcript_segment(speech_id, text, build)
        if result is None:
            raise NotFoundError("Speech not found")
        _, segment = result
        logger.debug(f"[Speech] Segment #{segment.sequence_number} for room {segment.room_id}")
        return segment

    async def poll_segments(self, room_id: str, after_sequence: Optional[int] = None) -> List[TranscriptSegment]:
        return await self.store.list_transcript_segments(room_id, after_sequence=after_sequence)

    async def latest_sequence(self, room_id: str) -> int:
        return await self.store.latest_sequence(room_id)
