"""Point-of-information and rule-violation API endpoints."""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from ..dependencies import get_conduct_service, get_current_user_id
from ..errors import DebateError, to_http_exception
from ..models.conduct import (
    POIOffer,
    POIResponse,
    PointOfInformation,
    RuleViolation,
    ViolationReport,
)
from ..services.conduct_service import ConductService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["conduct"])


@router.post("/pois", response_model=PointOfInformation, status_code=201)
async def offer_poi(
    payload: POIOffer,
    user_id: str = Depends(get_current_user_id),
    service: ConductService = Depends(get_conduct_service),
):
    """Offer a point of information on a speech in progress."""
    try:
        return await service.offer_poi(payload.room_id, user_id, payload.speech_id, payload.timestamp)
    except DebateError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Error offering POI in room {payload.room_id}: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/pois/{poi_id}/respond", response_model=PointOfInformation)
async def respond_poi(
    poi_id: str,
    payload: POIResponse,
    user_id: str = Depends(get_current_user_id),
    service: ConductService = Depends(get_conduct_service),
):
    try:
        return await service.respond_poi(poi_id, user_id, payload.accepted, payload.content)
    except DebateError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Error responding to POI {poi_id}: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/rooms/{room_id}/pois", response_model=List[PointOfInformation])
async def list_pois(room_id: str, service: ConductService = Depends(get_conduct_service)):
    try:
        return await service.list_pois(room_id)
    except Exception as e:
        logger.error(f"Error listing POIs for room {room_id}: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/violations", response_model=RuleViolation, status_code=201)
async def report_violation(
    payload: ViolationReport,
    user_id: str = Depends(get_current_user_id),
    service: ConductService = Depends(get_conduct_service),
):
    """Flag a rule violation in a room the caller belongs to."""
    try:
        return await service.report_violation(
            payload.room_id,
            user_id,
            payload.violation_type,
            speech_id=payload.speech_id,
            description=payload.description,
            timestamp=payload.timestamp,
        )
    except DebateError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Error reporting violation in room {payload.room_id}: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/rooms/{room_id}/violations", response_model=List[RuleViolation])
async def list_violations(room_id: str, service: ConductService = Depends(get_conduct_service)):
    try:
        return await service.list_violations(room_id)
    except Exception as e:
        logger.error(f"Error listing violations for room {room_id}: {e}")
        raise HTTPException(status_code=500, detail=str(e))
