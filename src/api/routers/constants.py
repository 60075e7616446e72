"""Static debate vocabularies for clients."""

from typing import List

from fastapi import APIRouter

from ..models.debate_format import (
    ASIAN_PARLIAMENTARY_FORMAT,
    DIFFICULTY_LEVELS,
    TOPIC_AREAS,
    DebateFormat,
    LabeledOption,
)

router = APIRouter(prefix="/api/constants", tags=["constants"])


@router.get("/format", response_model=DebateFormat)
async def get_debate_format():
    return ASIAN_PARLIAMENTARY_FORMAT


@router.get("/topic-areas", response_model=List[LabeledOption])
async def get_topic_areas():
    return TOPIC_AREAS


@router.get("/difficulty-levels", response_model=List[LabeledOption])
async def get_difficulty_levels():
    return DIFFICULTY_LEVELS
