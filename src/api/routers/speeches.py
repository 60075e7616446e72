"""Speech and live transcript API endpoints."""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from ..dependencies import get_current_user_id, get_speech_service
from ..errors import DebateError, to_http_exception
from ..models.speech import (
    SegmentCreate,
    Speech,
    SpeechCreate,
    SpeechEnd,
    TranscriptPage,
    TranscriptSegment,
    TranscriptUpdate,
)
from ..services.speech_service import SpeechService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["speeches"])


@router.post("/speeches", response_model=Speech, status_code=201)
async def create_speech(
    payload: SpeechCreate,
    user_id: str = Depends(get_current_user_id),
    service: SpeechService = Depends(get_speech_service),
):
    try:
        return await service.create_speech(
            payload.room_id,
            user_id,
            speaker_role=payload.speaker_role,
            speech_type=payload.speech_type,
        )
    except DebateError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Error creating speech in room {payload.room_id}: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.put("/speeches/{speech_id}/transcript", response_model=Speech)
async def update_transcript(
    speech_id: str,
    payload: TranscriptUpdate,
    service: SpeechService = Depends(get_speech_service),
):
    try:
        return await service.update_transcript(speech_id, payload.transcript)
    except DebateError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Error updating transcript for {speech_id}: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/speeches/{speech_id}/end", response_model=Speech)
async def end_speech(
    speech_id: str,
    payload: SpeechEnd,
    service: SpeechService = Depends(get_speech_service),
):
    try:
        return await service.end_speech(speech_id, payload.duration_seconds)
    except DebateError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Error ending speech {speech_id}: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/speeches/{speech_id}/segments", response_model=TranscriptSegment, status_code=201)
async def append_segment(
    speech_id: str,
    payload: SegmentCreate,
    service: SpeechService = Depends(get_speech_service),
):
    """Append transcribed text to a speech and publish it to pollers."""
    try:
        return await service.append_segment(
            speech_id,
            payload.text,
            timestamp=payload.timestamp,
            speaker_name=payload.speaker_name,
        )
    except DebateError as e:
        raise to_http_exception(e)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Error appending segment to {speech_id}: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/rooms/{room_id}/speeches", response_model=List[Speech])
async def list_speeches(room_id: str, service: SpeechService = Depends(get_speech_service)):
    try:
        return await service.list_speeches(room_id)
    except Exception as e:
        logger.error(f"Error listing speeches for room {room_id}: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/rooms/{room_id}/transcript", response_model=TranscriptPage)
async def poll_transcript(
    room_id: str,
    after_sequence: Optional[int] = Query(None, ge=0, description="Return segments after this number"),
    service: SpeechService = Depends(get_speech_service),
):
    """Full transcript, or only segments newer than ``after_sequence``."""
    try:
        segments = await service.poll_segments(room_id, after_sequence=after_sequence)
        latest = segments[-1].sequence_number if segments else await service.latest_sequence(room_id)
        return TranscriptPage(segments=segments, latest_sequence=latest)
    except Exception as e:
        logger.error(f"Error polling transcript for room {room_id}: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/rooms/{room_id}/transcript/latest")
async def latest_sequence(room_id: str, service: SpeechService = Depends(get_speech_service)):
    try:
        return {"sequence": await service.latest_sequence(room_id)}
    except Exception as e:
        logger.error(f"Error reading latest sequence for room {room_id}: {e}")
        raise HTTPException(status_code=500, detail=str(e))
