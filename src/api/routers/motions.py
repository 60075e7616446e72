"""Motion API endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException

from ..dependencies import get_current_user_id, get_motion_service
from ..errors import DebateError, to_http_exception
from ..models.motion import Motion, MotionGenerateRequest
from ..services.motion_service import MotionService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/motions", tags=["motions"])


@router.post("/generate", response_model=Motion, status_code=201)
async def generate_motion(
    payload: MotionGenerateRequest,
    user_id: str = Depends(get_current_user_id),
    service: MotionService = Depends(get_motion_service),
):
    """Generate a motion for a room and attach it."""
    try:
        return await service.generate_motion(payload.room_id, payload.topic_area, payload.difficulty)
    except DebateError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Error generating motion for room {payload.room_id} (user {user_id}): {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/{motion_id}", response_model=Motion)
async def get_motion(motion_id: str, service: MotionService = Depends(get_motion_service)):
    try:
        return await service.get_motion(motion_id)
    except DebateError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Error getting motion {motion_id}: {e}")
        raise HTTPException(status_code=500, detail=str(e))
