"""
Motion Service

Generates debate motions with an OpenAI-compatible chat model and falls back
to preset motions when no provider is configured or the call fails.
"""
import asyncio
import logging
import random
import uuid
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from langchain_core.messages import HumanMessage, SystemMessage

from src.api.errors import InvalidStateError, NotFoundError
from src.api.models.debate_format import DIFFICULTY_LEVELS, TOPIC_AREAS, option_label
from src.api.models.motion import Motion, MotionDraft
from src.api.paths import fallback_motions_path, first_existing

from .debate_store import DebateStore
from .llm_support import build_chat_model, load_json_object

logger = logging.getLogger(__name__)

MOTION_SYSTEM_PROMPT = """You are an expert debate coach who creates debate motions for competitive debating in Asian Parliamentary format. Generate motions that are:
- Clear and debatable with strong arguments on both sides
- Appropriate for the specified difficulty level
- Relevant to current issues in the topic area
- Formatted as "This House..." statements

Respond with only a JSON object containing:
- motion: The debate motion starting with "This House..."
- backgroundContext: A brief 2-3 sentence explanation of the issue
- keyStakeholders: An array of 3-5 key stakeholders affected by this motion"""


def parse_motion_response(content: str) -> MotionDraft:
    """Parse the model's JSON reply, tolerating a surrounding code fence.

    Raises:
        ValueError: If the content is not a valid motion object
    """
    return MotionDraft.model_validate(load_json_object(content))


def load_fallback_motions(path: Optional[Path] = None) -> Dict[str, Dict[str, List[Dict[str, Any]]]]:
    """Load preset motions keyed by topic area, then difficulty."""
    source = first_existing([p for p in (path, fallback_motions_path()) if p is not None])
    if source is None:
        logger.warning("[Motion] No fallback motions file found")
        return {}
    with open(source, 'r', encoding='utf-8') as f:
        data = yaml.safe_load(f) or {}
    return data.get('motions', {}) if isinstance(data, dict) else {}


class MotionService:
    """Generate motions and attach them to rooms."""

    def __init__(
        self,
        store: DebateStore,
        llm: Optional[Any] = None,
        fallback_motions: Optional[Dict[str, Dict[str, List[Dict[str, Any]]]]] = None,
        timeout_seconds: int = 30,
        rng: Optional[random.Random] = None,
    ):
        """Initialize motion service.

        Args:
            store: Debate store
            llm: Chat model exposing ``ainvoke``; None means preset motions only
            fallback_motions: Preset motions (loaded from config when omitted)
            timeout_seconds: Timeout for one LLM call
            rng: Random source for preset selection
        """
        self.store = store
        self.llm = llm
        self.fallback_motions = fallback_motions if fallback_motions is not None else load_fallback_motions()
        self.timeout_seconds = timeout_seconds
        self.rng = rng or random.Random()

    @classmethod
    def from_settings(cls, store: DebateStore, settings) -> "MotionService":
        return cls(
            store,
            llm=build_chat_model(settings, temperature=0.8),
            fallback_motions=load_fallback_motions(settings.fallback_motions_path),
            timeout_seconds=settings.llm_timeout_seconds,
        )

    def pick_fallback(self, topic_area: str, difficulty: str) -> MotionDraft:
        """Pick a preset motion; topic falls back to politics, difficulty to novice."""
        topic_motions = self.fallback_motions.get(topic_area) or self.fallback_motions.get("politics") or {}
        candidates = topic_motions.get(difficulty) or topic_motions.get("novice") or []
        if not candidates:
            raise ValueError(f"No preset motions available for {topic_area}/{difficulty}")
        return MotionDraft.model_validate(self.rng.choice(candidates))

    async def _generate_with_llm(self, topic_area: str, difficulty: str) -> MotionDraft:
        topic_label = option_label(TOPIC_AREAS, topic_area)
        difficulty_label = option_label(DIFFICULTY_LEVELS, difficulty)
        messages = [
            SystemMessage(content=MOTION_SYSTEM_PROMPT),
            HumanMessage(content=f"Generate a {difficulty_label} level debate motion about {topic_label}."),
        ]
        response = await asyncio.wait_for(self.llm.ainvoke(messages), timeout=self.timeout_seconds)
        return parse_motion_response(response.content)

    async def generate_motion(self, room_id: str, topic_area: str, difficulty: str) -> Motion:
        """Create a motion for ``room_id`` and attach it.

        Raises:
            NotFoundError: Room does not exist
            InvalidStateError: Room has already started
        """
        room = await self.store.get_room(room_id)
        if room is None:
            raise NotFoundError("Room not found")
        if room.status != "waiting":
            raise InvalidStateError("Motion can only be changed before the debate starts")

        draft: Optional[MotionDraft] = None
        is_ai_generated = False
        if self.llm is not None:
            try:
                logger.info(f"[Motion] Generating {difficulty} motion about {topic_area}")
                draft = await self._generate_with_llm(topic_area, difficulty)
                is_ai_generated = True
            except asyncio.TimeoutError:
                logger.error(f"[Motion] Timeout generating motion for room {room_id}")
            except Exception as e:
                logger.error(f"[Motion] Failed to generate motion for room {room_id}: {e}")
        if draft is None:
            logger.info("[Motion] Using preset motion")
            draft = self.pick_fallback(topic_area, difficulty)

        motion = Motion(
            id=f"motion_{uuid.uuid4().hex[:12]}",
            motion=draft.motion,
            topic_area=topic_area,
            difficulty=difficulty,
            background_context=draft.background_context,
            key_stakeholders=draft.key_stakeholders,
            is_ai_generated=is_ai_generated,
        )

        async with self.store.room_lock(room_id):
            room = await self.store.get_room(room_id)
            if room is None:
                raise NotFoundError("Room not found")
            if room.status != "waiting":
                raise InvalidStateError("Motion can only be changed before the debate starts")
            await self.store.add_motion(motion)
            await self.store.update_room(room_id, motion_id=motion.id)

        logger.info(f"[Motion] Attached {motion.id} to room {room_id}: {motion.motion}")
        return motion

    async def get_motion(self, motion_id: str) -> Motion:
        motion = await self.store.get_motion(motion_id)
        if motion is None:
            raise NotFoundError("Motion not found")
        return motion
