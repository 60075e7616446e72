"""Speaker-turn state machine for a live debate room.

Transitions:
    setup/waiting  --start_debate-->  debate/in_progress
    debate/in_progress  --advance_speaker (last slot)-->  feedback/completed
    feedback/completed  --feedback generated-->  completed/completed (FeedbackService)

No transition returns to an earlier phase. ``cancelled`` is set outside this
service; both transitions reject it.
"""

import logging
from datetime import datetime
from typing import List

from src.api.errors import (
    ForbiddenError,
    InvalidStateError,
    NotFoundError,
    PreconditionFailedError,
)
from src.api.models.debate_format import DebateFormat, get_format
from src.api.models.room import (
    AdvanceResult,
    CurrentSpeaker,
    DebateRoom,
    Participant,
    StartDebateResult,
)

from .debate_store import DebateStore
from .speaking_order import (
    derive_active_order,
    first_active_index,
    participant_for_slot,
    present_roles,
    to_active_position,
    to_full_index,
)

logger = logging.getLogger(__name__)


class TurnService:
    """Start and advance debates; the store handle is owned by the caller."""

    def __init__(self, store: DebateStore):
        self.store = store

    async def _require_room(self, room_id: str) -> DebateRoom:
        room = await self.store.get_room(room_id)
        if room is None:
            raise NotFoundError("Room not found")
        return room

    @staticmethod
    def _format_for(room: DebateRoom) -> DebateFormat:
        return get_format(room.format)

    @staticmethod
    def _check_start_preconditions(
        room: DebateRoom,
        caller_id: str,
        participants: List[Participant],
    ) -> None:
        if room.creator_id != caller_id:
            raise ForbiddenError("Only the room creator can start the debate")
        if room.status != "waiting":
            raise InvalidStateError(f"Debate cannot be started from status '{room.status}'")
        if not room.motion_id:
            raise PreconditionFailedError("A motion must be set before starting")
        if not participants:
            raise PreconditionFailedError("At least one participant must join before starting")
        not_ready = [p.speaker_role for p in participants if not p.is_ready]
        if not_ready:
            raise PreconditionFailedError(
                "All participants must be ready (waiting on: " + ", ".join(not_ready) + ")"
            )

    async def start_debate(self, room_id: str, caller_id: str) -> StartDebateResult:
        """Move a waiting room into the debate phase.

        The first speaker is the first slot, in canonical order, that someone
        present can deliver; it is not necessarily slot 0.

        Raises:
            NotFoundError: Room does not exist
            ForbiddenError: Caller is not the room creator
            InvalidStateError: Room is not waiting
            PreconditionFailedError: No motion, empty roster or someone not ready
        """
        async with self.store.room_lock(room_id):
            room = await self._require_room(room_id)
            participants = await self.store.get_participants(room_id)
            self._check_start_preconditions(room, caller_id, participants)

            debate_format = self._format_for(room)
            first_index = first_active_index(debate_format, present_roles(participants))
            if first_index is None:
                # Unreachable while every participant holds a format role.
                raise PreconditionFailedError("No participant holds a speaking role in this format")

            await self.store.update_room(
                room_id,
                status="in_progress",
                phase="debate",
                current_slot_index=first_index,
                started_at=datetime.now().isoformat(),
            )

        first_role = debate_format.speaking_order[first_index].role
        logger.info(
            f"[Turn] Room {room_id} started with {len(participants)} participant(s); "
            f"first speaker {first_role} (slot {first_index})"
        )
        return StartDebateResult(success=True, current_slot_index=first_index)

    async def advance_speaker(self, room_id: str) -> AdvanceResult:
        """Hand the floor to the next active slot, or finish the debate.

        Raises:
            NotFoundError: Room does not exist
            InvalidStateError: Room is not in progress (including already completed)
        """
        async with self.store.room_lock(room_id):
            room = await self._require_room(room_id)
            if room.status == "completed":
                raise InvalidStateError("Debate already completed")
            if room.status != "in_progress":
                raise InvalidStateError(f"Debate is not in progress (status '{room.status}')")

            debate_format = self._format_for(room)
            participants = await self.store.get_participants(room_id)
            active_order = derive_active_order(debate_format, present_roles(participants))

            position = to_active_position(active_order, room.current_slot_index, debate_format)
            if position is None and active_order:
                restart_index = to_full_index(debate_format, active_order[0])
                logger.warning(
                    f"[Turn] Room {room_id} slot pointer {room.current_slot_index} is not in the "
                    f"active order; restarting at slot {restart_index}"
                )
                await self.store.update_room(room_id, current_slot_index=restart_index)
                return AdvanceResult(completed=False, next_slot_index=restart_index)

            next_position = (position + 1) if position is not None else 0
            if next_position >= len(active_order):
                await self.store.update_room(
                    room_id,
                    phase="feedback",
                    status="completed",
                    ended_at=datetime.now().isoformat(),
                )
                logger.info(f"[Turn] Room {room_id} debate completed after {len(active_order)} slot(s)")
                return AdvanceResult(completed=True, next_slot_index=None)

            next_index = to_full_index(debate_format, active_order[next_position])
            await self.store.update_room(room_id, current_slot_index=next_index)

        logger.info(
            f"[Turn] Room {room_id} advanced to {active_order[next_position].role} "
            f"(slot {next_index}, {next_position + 1}/{len(active_order)})"
        )
        return AdvanceResult(completed=False, next_slot_index=next_index)

    async def get_current_speaker(self, room_id: str) -> CurrentSpeaker:
        """Read-only view of the current slot and who delivers it."""
        room = await self._require_room(room_id)
        debate_format = self._format_for(room)
        participants = await self.store.get_participants(room_id)
        active_order = derive_active_order(debate_format, present_roles(participants))

        snapshot = CurrentSpeaker(
            room_id=room.id,
            status=room.status,
            phase=room.phase,
            active_count=len(active_order),
            active_order=active_order,
        )
        if room.status != "in_progress":
            return snapshot

        position = to_active_position(active_order, room.current_slot_index, debate_format)
        if position is None:
            return snapshot

        slot = active_order[position]
        snapshot.slot_index = room.current_slot_index
        snapshot.slot = slot
        snapshot.active_position = position
        snapshot.participant = participant_for_slot(slot, participants)
        return snapshot

