"""Service for room lifecycle: create, join, leave, ready and lookups."""

import logging
import secrets
import string
import uuid
from typing import List, Optional

from src.api.errors import InvalidStateError, NotFoundError, PreconditionFailedError
from src.api.models.debate_format import TEAM_ROLES
from src.api.models.room import DebateRoom, Participant, RoomDetail

from .debate_store import DebateStore

logger = logging.getLogger(__name__)

ROOM_CODE_ALPHABET = string.ascii_uppercase + string.digits
ROOM_CODE_LENGTH = 6
_MAX_CODE_ATTEMPTS = 20


def generate_room_code(length: int = ROOM_CODE_LENGTH) -> str:
    return "".join(secrets.choice(ROOM_CODE_ALPHABET) for _ in range(length))


class RoomService:
    """Room and roster management.

    Joining and leaving are only possible while a room is waiting, which
    freezes the roster once the debate starts.
    """

    def __init__(self, store: DebateStore, max_active_rooms: int = 20):
        self.store = store
        self.max_active_rooms = max_active_rooms

    async def create_room(self, creator_id: str, format: str = "asian_parliamentary") -> DebateRoom:
        """Create a waiting room with a fresh join code."""
        for _ in range(_MAX_CODE_ATTEMPTS):
            room_code = generate_room_code()
            if not await self.store.room_code_exists(room_code):
                break
        else:
            raise ValueError("Could not allocate a unique room code")

        room = DebateRoom(
            id=f"room_{uuid.uuid4().hex[:12]}",
            room_code=room_code,
            creator_id=creator_id,
            format=format,
        )
        await self.store.add_room(room)
        logger.info(f"[Room] Created room {room.id} ({room_code}) for user {creator_id}")
        return room

    async def join_room(
        self,
        room_code: str,
        user_id: str,
        team: str,
        speaker_role: str,
    ) -> Participant:
        """Bind a user to a free speaker role.

        Raises:
            NotFoundError: Unknown room code
            InvalidStateError: Room no longer accepts participants
            PreconditionFailedError: Already joined, role taken or role/team mismatch
        """
        room = await self.store.get_room_by_code(room_code)
        if room is None:
            raise NotFoundError("Room not found")

        if speaker_role not in TEAM_ROLES.get(team, ()):
            raise PreconditionFailedError(f"Invalid role for {team.capitalize()} team")

        async with self.store.room_lock(room.id):
            room = await self.store.get_room(room.id)
            if room is None:
                raise NotFoundError("Room not found")
            if room.status != "waiting":
                raise InvalidStateError("Room is not accepting participants")

            participant = Participant(
                id=f"part_{uuid.uuid4().hex[:12]}",
                room_id=room.id,
                user_id=user_id,
                team=team,
                speaker_role=speaker_role,
                is_ready=False,
            )
            try:
                await self.store.add_participant(participant)
            except ValueError as e:
                raise PreconditionFailedError(str(e))

        logger.info(f"[Room] User {user_id} joined {room.id} as {speaker_role}")
        return participant

    async def leave_room(self, room_id: str, user_id: str) -> None:
        async with self.store.room_lock(room_id):
            room = await self._require_room(room_id)
            if room.status != "waiting":
                raise InvalidStateError("Participants cannot leave after the debate has started")
            removed = await self.store.remove_participant(room_id, user_id)
            if not removed:
                raise NotFoundError("You are not in this room")
        logger.info(f"[Room] User {user_id} left {room_id}")

    async def set_ready(self, room_id: str, user_id: str, is_ready: bool) -> Participant:
        async with self.store.room_lock(room_id):
            room = await self._require_room(room_id)
            if room.status != "waiting":
                raise InvalidStateError("Readiness cannot change after the debate has started")
            participant = await self.store.get_participant(room_id, user_id)
            if participant is None:
                raise NotFoundError("You are not in this room")
            updated = await self.store.update_participant(participant.id, is_ready=is_ready)
        return updated

    async def _require_room(self, room_id: str) -> DebateRoom:
        room = await self.store.get_room(room_id)
        if room is None:
            raise NotFoundError("Room not found")
        return room

    async def _detail(self, room: DebateRoom) -> RoomDetail:
        participants = await self.store.get_participants(room.id)
        motion = await self.store.get_motion(room.motion_id) if room.motion_id else None
        return RoomDetail(room=room, participants=participants, motion=motion)

    async def get_room(self, room_code: str) -> RoomDetail:
        room = await self.store.get_room_by_code(room_code)
        if room is None:
            raise NotFoundError("Room not found")
        return await self._detail(room)

    async def get_room_by_id(self, room_id: str) -> RoomDetail:
        return await self._detail(await self._require_room(room_id))

    async def list_active_rooms(self, limit: Optional[int] = None) -> List[DebateRoom]:
        """Waiting rooms, newest first."""
        rooms = await self.store.list_rooms(status="waiting")
        rooms.sort(key=lambda r: r.created_at, reverse=True)
        return rooms[: limit or self.max_active_rooms]

    async def get_debate_history(self, user_id: str) -> List[DebateRoom]:
        """Every room the user has joined, newest first."""
        rooms = await self.store.list_rooms_for_user(user_id)
        rooms.sort(key=lambda r: r.created_at, reverse=True)
        return rooms
