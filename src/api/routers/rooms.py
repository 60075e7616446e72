"""Debate room API endpoints."""

from fastapi import APIRouter, Depends, HTTPException
from typing import List
import logging

from ..dependencies import get_current_user_id, get_room_service, get_turn_service
from ..errors import DebateError, to_http_exception
from ..models.room import (
    AdvanceResult,
    CurrentSpeaker,
    DebateRoom,
    Participant,
    ReadyUpdate,
    RoomCreate,
    RoomCreated,
    RoomDetail,
    RoomJoin,
    StartDebateResult,
)
from ..services.room_service import RoomService
from ..services.turn_service import TurnService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/rooms", tags=["rooms"])


@router.post("", response_model=RoomCreated, status_code=201)
async def create_room(
    payload: RoomCreate,
    user_id: str = Depends(get_current_user_id),
    service: RoomService = Depends(get_room_service),
):
    """Create a new debate room owned by the caller."""
    try:
        room = await service.create_room(user_id, format=payload.format)
        return RoomCreated(room_id=room.id, room_code=room.room_code)
    except Exception as e:
        logger.error(f"Error creating room: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/active", response_model=List[DebateRoom])
async def list_active_rooms(service: RoomService = Depends(get_room_service)):
    """List rooms still waiting for participants."""
    try:
        return await service.list_active_rooms()
    except Exception as e:
        logger.error(f"Error listing active rooms: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/history", response_model=List[DebateRoom])
async def get_debate_history(
    user_id: str = Depends(get_current_user_id),
    service: RoomService = Depends(get_room_service),
):
    """Rooms the caller has joined, newest first."""
    try:
        return await service.get_debate_history(user_id)
    except Exception as e:
        logger.error(f"Error loading debate history for {user_id}: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/code/{room_code}", response_model=RoomDetail)
async def get_room_by_code(room_code: str, service: RoomService = Depends(get_room_service)):
    try:
        return await service.get_room(room_code)
    except DebateError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Error getting room {room_code}: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/join", response_model=Participant, status_code=201)
async def join_room(
    payload: RoomJoin,
    user_id: str = Depends(get_current_user_id),
    service: RoomService = Depends(get_room_service),
):
    """Join a room with a team and speaker role."""
    try:
        return await service.join_room(
            payload.room_code,
            user_id,
            team=payload.team,
            speaker_role=payload.speaker_role,
        )
    except DebateError as e:
        logger.warning(f"Join rejected for {payload.room_code}: {e}")
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Error joining room {payload.room_code}: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/{room_id}", response_model=RoomDetail)
async def get_room(room_id: str, service: RoomService = Depends(get_room_service)):
    try:
        return await service.get_room_by_id(room_id)
    except DebateError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Error getting room {room_id}: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/{room_id}/leave", status_code=204)
async def leave_room(
    room_id: str,
    user_id: str = Depends(get_current_user_id),
    service: RoomService = Depends(get_room_service),
):
    try:
        await service.leave_room(room_id, user_id)
    except DebateError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Error leaving room {room_id}: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/{room_id}/ready", response_model=Participant)
async def set_ready(
    room_id: str,
    payload: ReadyUpdate,
    user_id: str = Depends(get_current_user_id),
    service: RoomService = Depends(get_room_service),
):
    try:
        return await service.set_ready(room_id, user_id, payload.is_ready)
    except DebateError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Error updating ready state in room {room_id}: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/{room_id}/start", response_model=StartDebateResult)
async def start_debate(
    room_id: str,
    user_id: str = Depends(get_current_user_id),
    service: TurnService = Depends(get_turn_service),
):
    """Start the debate.

    Raises:
        HTTPException: 404 unknown room, 403 not the creator, 400 failed
            precondition, 409 room not waiting
    """
    try:
        return await service.start_debate(room_id, user_id)
    except DebateError as e:
        logger.warning(f"Start rejected for room {room_id}: {e}")
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Error starting room {room_id}: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/{room_id}/advance", response_model=AdvanceResult)
async def advance_speaker(
    room_id: str,
    user_id: str = Depends(get_current_user_id),
    service: TurnService = Depends(get_turn_service),
):
    """Move to the next speaker, completing the debate after the last one."""
    try:
        return await service.advance_speaker(room_id)
    except DebateError as e:
        logger.warning(f"Advance rejected for room {room_id} (user {user_id}): {e}")
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Error advancing room {room_id}: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/{room_id}/current-speaker", response_model=CurrentSpeaker)
async def get_current_speaker(room_id: str, service: TurnService = Depends(get_turn_service)):
    try:
        return await service.get_current_speaker(room_id)
    except DebateError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Error reading current speaker for room {room_id}: {e}")
        raise HTTPException(status_code=500, detail=str(e))
