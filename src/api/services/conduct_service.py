"""Service for in-debate conduct: points of information and rule violations."""

import logging
import uuid
from typing import List, Optional

from src.api.errors import (
    ForbiddenError,
    InvalidStateError,
    NotFoundError,
    PreconditionFailedError,
)
from src.api.models.conduct import PointOfInformation, RuleViolation
from src.api.models.room import DebateRoom, Participant
from src.api.models.speech import Speech

from .debate_store import DebateStore

logger = logging.getLogger(__name__)


class ConductService:
    """POIs offered during speeches and rule-violation reports."""

    def __init__(self, store: DebateStore):
        self.store = store

    async def _require_participant(self, room_id: str, user_id: str) -> Participant:
        room = await self.store.get_room(room_id)
        if room is None:
            raise NotFoundError("Room not found")
        participant = await self.store.get_participant(room_id, user_id)
        if participant is None:
            raise NotFoundError("You are not in this room")
        return participant

    async def _require_speech_in_room(self, room_id: str, speech_id: str) -> Speech:
        speech = await self.store.get_speech(speech_id)
        if speech is None or speech.room_id != room_id:
            raise NotFoundError("Speech not found")
        return speech

    async def _require_live_room(self, room_id: str) -> DebateRoom:
        room = await self.store.get_room(room_id)
        if room is None:
            raise NotFoundError("Room not found")
        if room.status != "in_progress":
            raise InvalidStateError("Points of information are only taken while the debate is in progress")
        return room

    # ------------------------------------------------------------------ #
    # Points of information
    # ------------------------------------------------------------------ #

    async def offer_poi(
        self,
        room_id: str,
        user_id: str,
        speech_id: str,
        timestamp: int = 0,
    ) -> PointOfInformation:
        """Offer a POI to the speaker of ``speech_id``.

        Raises:
            NotFoundError: Unknown room or speech, or caller not in the room
            InvalidStateError: Debate is not in progress
            PreconditionFailedError: Caller is offering to their own speech
        """
        participant = await self._require_participant(room_id, user_id)
        await self._require_live_room(room_id)
        speech = await self._require_speech_in_room(room_id, speech_id)
        if speech.participant_id == participant.id:
            raise PreconditionFailedError("You cannot offer a point of information on your own speech")

        poi = PointOfInformation(
            id=f"poi_{uuid.uuid4().hex[:12]}",
            room_id=room_id,
            speech_id=speech_id,
            offered_by_id=participant.id,
            timestamp=timestamp,
        )
        await self.store.add_poi(poi)
        logger.info(f"[POI] {participant.speaker_role} offered {poi.id} on {speech_id} at {timestamp}s")
        return poi

    async def respond_poi(
        self,
        poi_id: str,
        user_id: str,
        accepted: bool,
        content: Optional[str] = None,
    ) -> PointOfInformation:
        """Accept or decline a POI; only the speaker holding the floor may answer.

        Raises:
            NotFoundError: Unknown POI
            ForbiddenError: Caller did not deliver the speech
        """
        poi = await self.store.get_poi(poi_id)
        if poi is None:
            raise NotFoundError("Point of information not found")
        speech = await self._require_speech_in_room(poi.room_id, poi.speech_id)
        participant = await self.store.get_participant(poi.room_id, user_id)
        if participant is None or participant.id != speech.participant_id:
            raise ForbiddenError("Only the speaker can respond to a point of information")

        updated = await self.store.update_poi(
            poi_id,
            accepted=accepted,
            responded=True,
            content=content if accepted else None,
        )
        logger.info(f"[POI] {poi_id} {'accepted' if accepted else 'declined'}")
        return updated

    async def list_pois(self, room_id: str) -> List[PointOfInformation]:
        return await self.store.list_pois(room_id)

    # ------------------------------------------------------------------ #
    # Rule violations
    # ------------------------------------------------------------------ #

    async def report_violation(
        self,
        room_id: str,
        user_id: str,
        violation_type: str,
        speech_id: Optional[str] = None,
        description: Optional[str] = None,
        timestamp: Optional[int] = None,
    ) -> RuleViolation:
        """Record a violation reported by a participant of the room."""
        participant = await self._require_participant(room_id, user_id)
        if speech_id is not None:
            await self._require_speech_in_room(room_id, speech_id)

        violation = RuleViolation(
            id=f"viol_{uuid.uuid4().hex[:12]}",
            room_id=room_id,
            speech_id=speech_id,
            participant_id=participant.id,
            violation_type=violation_type,
            description=description,
            timestamp=timestamp,
        )
        await self.store.add_violation(violation)
        logger.info(f"[Violation] {violation_type} reported in room {room_id} by {participant.speaker_role}")
        return violation

    async def list_violations(self, room_id: str) -> List[RuleViolation]:
        return await self.store.list_violations(room_id)
