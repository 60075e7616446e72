"""Post-debate feedback API endpoints."""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from ..dependencies import get_current_user_id, get_feedback_service
from ..errors import DebateError, to_http_exception
from ..models.feedback import DebateFeedback, FeedbackGenerateRequest, FeedbackReport
from ..services.feedback_service import FeedbackService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/feedback", tags=["feedback"])


@router.post(
    "/generate",
    response_model=FeedbackReport,
    response_model_by_alias=False,
    status_code=201,
)
async def generate_feedback(
    payload: FeedbackGenerateRequest,
    user_id: str = Depends(get_current_user_id),
    service: FeedbackService = Depends(get_feedback_service),
):
    """Generate coaching feedback for a completed debate.

    Raises:
        HTTPException: 404 unknown room, 409 debate not completed, 400 no
            provider or transcripts, 502 model failure
    """
    try:
        return await service.generate_feedback(payload.room_id)
    except DebateError as e:
        logger.warning(f"Feedback rejected for room {payload.room_id} (user {user_id}): {e}")
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Error generating feedback for room {payload.room_id}: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/{room_id}", response_model=List[DebateFeedback])
async def get_feedback(room_id: str, service: FeedbackService = Depends(get_feedback_service)):
    try:
        return await service.get_feedback(room_id)
    except DebateError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Error getting feedback for room {room_id}: {e}")
        raise HTTPException(status_code=500, detail=str(e))
