"""YAML-backed store for rooms, rosters, motions, speeches, transcripts and
post-debate records."""

import asyncio
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple, TypeVar

import aiofiles
import yaml
from pydantic import BaseModel, Field

from src.api.models.conduct import PointOfInformation, RuleViolation
from src.api.models.feedback import DebateFeedback
from src.api.models.motion import Motion
from src.api.models.room import DebateRoom, Participant
from src.api.models.speech import Speech, TranscriptSegment

logger = logging.getLogger(__name__)

T = TypeVar("T")


class DebateState(BaseModel):
    """Container for everything persisted in the state file."""

    rooms: List[DebateRoom] = Field(default_factory=list)
    participants: List[Participant] = Field(default_factory=list)
    motions: List[Motion] = Field(default_factory=list)
    speeches: List[Speech] = Field(default_factory=list)
    transcript_segments: List[TranscriptSegment] = Field(default_factory=list)
    points_of_information: List[PointOfInformation] = Field(default_factory=list)
    rule_violations: List[RuleViolation] = Field(default_factory=list)
    feedback: List[DebateFeedback] = Field(default_factory=list)


_SECTIONS: Dict[str, type] = {
    "rooms": DebateRoom,
    "participants": Participant,
    "motions": Motion,
    "speeches": Speech,
    "transcript_segments": TranscriptSegment,
    "points_of_information": PointOfInformation,
    "rule_violations": RuleViolation,
    "feedback": DebateFeedback,
}


class DebateStore:
    """Room store and roster provider backed by a single YAML file.

    Every mutation is a load-modify-save under one store-wide lock, so writes
    for different rooms never lose each other's updates. Serializing the
    read-decide-write of a turn transition is a separate concern: callers
    hold ``room_lock(room_id)`` for that.
    """

    def __init__(self, state_path: Path):
        """Initialize debate store.

        Args:
            state_path: Path to the YAML state file
        """
        self.state_path = Path(state_path)
        self._lock = asyncio.Lock()
        self._room_locks: Dict[str, asyncio.Lock] = {}

    def room_lock(self, room_id: str) -> asyncio.Lock:
        """Per-room mutex for turn-state mutations."""
        lock = self._room_locks.get(room_id)
        if lock is None:
            lock = asyncio.Lock()
            self._room_locks[room_id] = lock
        return lock

    # ------------------------------------------------------------------ #
    # File I/O
    # ------------------------------------------------------------------ #

    async def _load_unlocked(self) -> DebateState:
        if not self.state_path.exists():
            return DebateState()

        try:
            async with aiofiles.open(self.state_path, 'r', encoding='utf-8') as f:
                content = await f.read()
            data = yaml.safe_load(content)
        except Exception as e:
            raise ValueError(f"Failed to load debate state: {e}")

        if not isinstance(data, dict):
            return DebateState()

        sections: Dict[str, List[Any]] = {}
        for key, model_cls in _SECTIONS.items():
            raw_items = data.get(key, [])
            valid: List[Any] = []
            if isinstance(raw_items, list):
                for index, raw in enumerate(raw_items):
                    try:
                        valid.append(model_cls.model_validate(raw))
                    except Exception as e:
                        logger.warning(f"Skipping invalid {key} entry at index {index}: {e}")
            sections[key] = valid
        return DebateState(**sections)

    async def _save_unlocked(self, state: DebateState) -> None:
        self.state_path.parent.mkdir(parents=True, exist_ok=True)

        # Atomic write: write to temp file first, then rename
        temp_path = self.state_path.with_suffix('.tmp')
        try:
            async with aiofiles.open(temp_path, 'w', encoding='utf-8') as f:
                await f.write(yaml.safe_dump(
                    state.model_dump(mode="json"),
                    default_flow_style=False,
                    allow_unicode=True,
                    sort_keys=False
                ))
            temp_path.replace(self.state_path)
        except Exception as e:
            if temp_path.exists():
                temp_path.unlink()
            raise ValueError(f"Failed to save debate state: {e}")

    async def load_state(self) -> DebateState:
        async with self._lock:
            return await self._load_unlocked()

    async def _mutate(self, fn: Callable[[DebateState], T]) -> T:
        """Apply ``fn`` to the current state and persist it in one critical section."""
        async with self._lock:
            state = await self._load_unlocked()
            result = fn(state)
            await self._save_unlocked(state)
            return result

    # ------------------------------------------------------------------ #
    # Rooms
    # ------------------------------------------------------------------ #

    async def add_room(self, room: DebateRoom) -> DebateRoom:
        def apply(state: DebateState) -> DebateRoom:
            for existing in state.rooms:
                if existing.id == room.id:
                    raise ValueError(f"Room with ID '{room.id}' already exists")
                if existing.room_code == room.room_code:
                    raise ValueError(f"Room code '{room.room_code}' already in use")
            state.rooms.append(room)
            return room

        return await self._mutate(apply)

    async def get_room(self, room_id: str) -> Optional[DebateRoom]:
        state = await self.load_state()
        for room in state.rooms:
            if room.id == room_id:
                return room
        return None

    async def get_room_by_code(self, room_code: str) -> Optional[DebateRoom]:
        code = room_code.strip().upper()
        state = await self.load_state()
        for room in state.rooms:
            if room.room_code == code:
                return room
        return None

    async def room_code_exists(self, room_code: str) -> bool:
        return await self.get_room_by_code(room_code) is not None

    async def list_rooms(self, status: Optional[str] = None) -> List[DebateRoom]:
        state = await self.load_state()
        if status is None:
            return list(state.rooms)
        return [room for room in state.rooms if room.status == status]

    async def list_rooms_for_user(self, user_id: str) -> List[DebateRoom]:
        """Rooms where ``user_id`` holds a speaker role."""
        state = await self.load_state()
        room_ids = {p.room_id for p in state.participants if p.user_id == user_id}
        return [room for room in state.rooms if room.id in room_ids]

    async def update_room(self, room_id: str, **updates: Any) -> Optional[DebateRoom]:
        """Apply a partial update to a room.

        Returns:
            Updated room if found, None otherwise
        """
        def apply(state: DebateState) -> Optional[DebateRoom]:
            for i, room in enumerate(state.rooms):
                if room.id == room_id:
                    data = dict(updates)
                    data['updated_at'] = datetime.now().isoformat()
                    updated = DebateRoom.model_validate({**room.model_dump(), **data})
                    state.rooms[i] = updated
                    return updated
            return None

        return await self._mutate(apply)

    # ------------------------------------------------------------------ #
    # Participants
    # ------------------------------------------------------------------ #

    async def get_participants(self, room_id: str) -> List[Participant]:
        state = await self.load_state()
        return [p for p in state.participants if p.room_id == room_id]

    async def get_participant(self, room_id: str, user_id: str) -> Optional[Participant]:
        for participant in await self.get_participants(room_id):
            if participant.user_id == user_id:
                return participant
        return None

    async def add_participant(self, participant: Participant) -> Participant:
        def apply(state: DebateState) -> Participant:
            for existing in state.participants:
                if existing.room_id != participant.room_id:
                    continue
                if existing.user_id == participant.user_id:
                    raise ValueError("User is already in this room")
                if existing.speaker_role == participant.speaker_role:
                    raise ValueError("This speaker role is already taken")
            state.participants.append(participant)
            return participant

        return await self._mutate(apply)

    async def update_participant(self, participant_id: str, **updates: Any) -> Optional[Participant]:
        def apply(state: DebateState) -> Optional[Participant]:
            for i, participant in enumerate(state.participants):
                if participant.id == participant_id:
                    updated = participant.model_copy(update=updates)
                    state.participants[i] = updated
                    return updated
            return None

        return await self._mutate(apply)

    async def remove_participant(self, room_id: str, user_id: str) -> bool:
        def apply(state: DebateState) -> bool:
            original_count = len(state.participants)
            state.participants = [
                p for p in state.participants
                if not (p.room_id == room_id and p.user_id == user_id)
            ]
            return len(state.participants) < original_count

        return await self._mutate(apply)

    # ------------------------------------------------------------------ #
    # Motions
    # ------------------------------------------------------------------ #

    async def add_motion(self, motion: Motion) -> Motion:
        def apply(state: DebateState) -> Motion:
            state.motions.append(motion)
            return motion

        return await self._mutate(apply)

    async def get_motion(self, motion_id: str) -> Optional[Motion]:
        state = await self.load_state()
        for motion in state.motions:
            if motion.id == motion_id:
                return motion
        return None

    # ------------------------------------------------------------------ #
    # Speeches
    # ------------------------------------------------------------------ #

    async def add_speech(self, speech: Speech) -> Speech:
        def apply(state: DebateState) -> Speech:
            state.speeches.append(speech)
            return speech

        return await self._mutate(apply)

    async def get_speech(self, speech_id: str) -> Optional[Speech]:
        state = await self.load_state()
        for speech in state.speeches:
            if speech.id == speech_id:
                return speech
        return None

    async def update_speech(self, speech_id: str, **updates: Any) -> Optional[Speech]:
        def apply(state: DebateState) -> Optional[Speech]:
            for i, speech in enumerate(state.speeches):
                if speech.id == speech_id:
                    updated = speech.model_copy(update=updates)
                    state.speeches[i] = updated
                    return updated
            return None

        return await self._mutate(apply)

    async def list_speeches(self, room_id: str) -> List[Speech]:
        state = await self.load_state()
        speeches = [s for s in state.speeches if s.room_id == room_id]
        return sorted(speeches, key=lambda s: s.started_at)

    # ------------------------------------------------------------------ #
    # Transcript segments
    # ------------------------------------------------------------------ #

    async def append_transcript_segment(
        self,
        speech_id: str,
        text: str,
        build: Callable[[Speech, int], TranscriptSegment],
    ) -> Optional[Tuple[Speech, TranscriptSegment]]:
        """Append ``text`` to a speech transcript and publish it as a segment.

        ``build`` receives the updated speech and the next sequence number for
        the speech's room. The transcript append, the numbering and the insert
        happen in one critical section, so concurrent appends neither drop
        text nor repeat numbers.

        Returns:
            (updated speech, new segment), or None if the speech does not exist
        """
        def apply(state: DebateState) -> Optional[Tuple[Speech, TranscriptSegment]]:
            for i, speech in enumerate(state.speeches):
                if speech.id != speech_id:
                    continue
                transcript = f"{speech.transcript} {text}" if speech.transcript else text
                updated = speech.model_copy(update={"transcript": transcript})
                state.speeches[i] = updated

                latest = max(
                    (s.sequence_number for s in state.transcript_segments if s.room_id == speech.room_id),
                    default=0,
                )
                segment = build(updated, latest + 1)
                state.transcript_segments.append(segment)
                return updated, segment
            return None

        return await self._mutate(apply)

    async def list_transcript_segments(
        self,
        room_id: str,
        after_sequence: Optional[int] = None,
    ) -> List[TranscriptSegment]:
        state = await self.load_state()
        segments = [
            s for s in state.transcript_segments
            if s.room_id == room_id
            and (after_sequence is None or s.sequence_number > after_sequence)
        ]
        return sorted(segments, key=lambda s: s.sequence_number)

    async def latest_sequence(self, room_id: str) -> int:
        state = await self.load_state()
        return max(
            (s.sequence_number for s in state.transcript_segments if s.room_id == room_id),
            default=0,
        )

    # ------------------------------------------------------------------ #
    # Points of information
    # ------------------------------------------------------------------ #

    async def add_poi(self, poi: PointOfInformation) -> PointOfInformation:
        def apply(state: DebateState) -> PointOfInformation:
            state.points_of_information.append(poi)
            return poi

        return await self._mutate(apply)

    async def get_poi(self, poi_id: str) -> Optional[PointOfInformation]:
        state = await self.load_state()
        for poi in state.points_of_information:
            if poi.id == poi_id:
                return poi
        return None

    async def update_poi(self, poi_id: str, **updates: Any) -> Optional[PointOfInformation]:
        def apply(state: DebateState) -> Optional[PointOfInformation]:
            for i, poi in enumerate(state.points_of_information):
                if poi.id == poi_id:
                    updated = poi.model_copy(update=updates)
                    state.points_of_information[i] = updated
                    return updated
            return None

        return await self._mutate(apply)

    async def list_pois(self, room_id: str) -> List[PointOfInformation]:
        state = await self.load_state()
        return [p for p in state.points_of_information if p.room_id == room_id]

    # ------------------------------------------------------------------ #
    # Rule violations
    # ------------------------------------------------------------------ #

    async def add_violation(self, violation: RuleViolation) -> RuleViolation:
        def apply(state: DebateState) -> RuleViolation:
            state.rule_violations.append(violation)
            return violation

        return await self._mutate(apply)

    async def list_violations(self, room_id: str) -> List[RuleViolation]:
        state = await self.load_state()
        return [v for v in state.rule_violations if v.room_id == room_id]

    # ------------------------------------------------------------------ #
    # Feedback
    # ------------------------------------------------------------------ #

    async def replace_feedback(self, room_id: str, entries: List[DebateFeedback]) -> List[DebateFeedback]:
        """Swap a room's feedback for ``entries`` in one write."""
        def apply(state: DebateState) -> List[DebateFeedback]:
            state.feedback = [f for f in state.feedback if f.room_id != room_id]
            state.feedback.extend(entries)
            return entries

        return await self._mutate(apply)

    async def list_feedback(self, room_id: str) -> List[DebateFeedback]:
        state = await self.load_state()
        return [f for f in state.feedback if f.room_id == room_id]
