"""FastAPI dependency providers.

The debate store is created by the application at startup and kept on
``app.state``; services are built per request around that handle.
"""

from fastapi import Depends, Header, HTTPException, Request

from .config import settings
from .services.conduct_service import ConductService
from .services.debate_store import DebateStore
from .services.feedback_service import FeedbackService
from .services.motion_service import MotionService
from .services.room_service import RoomService
from .services.speech_service import SpeechService
from .services.turn_service import TurnService


def get_debate_store(request: Request) -> DebateStore:
    store = getattr(request.app.state, "debate_store", None)
    if store is None:
        raise HTTPException(status_code=503, detail="Debate store is not initialized")
    return store


def get_current_user_id(x_user_id: str = Header(..., alias="X-User-Id")) -> str:
    """Caller identity supplied by the fronting auth layer."""
    user_id = x_user_id.strip()
    if not user_id:
        raise HTTPException(status_code=401, detail="Missing user identity")
    return user_id


def get_room_service(store: DebateStore = Depends(get_debate_store)) -> RoomService:
    return RoomService(store, max_active_rooms=settings.max_active_rooms)


def get_turn_service(store: DebateStore = Depends(get_debate_store)) -> TurnService:
    return TurnService(store)


def get_speech_service(store: DebateStore = Depends(get_debate_store)) -> SpeechService:
    return SpeechService(store)


def get_motion_service(request: Request, store: DebateStore = Depends(get_debate_store)) -> MotionService:
    service = getattr(request.app.state, "motion_service", None)
    if service is None:
        service = MotionService.from_settings(store, settings)
        request.app.state.motion_service = service
    return service


def get_conduct_service(store: DebateStore = Depends(get_debate_store)) -> ConductService:
    return ConductService(store)


def get_feedback_service(request: Request, store: DebateStore = Depends(get_debate_store)) -> FeedbackService:
    service = getattr(request.app.state, "feedback_service", None)
    if service is None:
        service = FeedbackService.from_settings(store, settings)
        request.app.state.feedback_service = service
    return service
