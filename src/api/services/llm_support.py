"""Chat-model construction and JSON reply parsing shared by LLM-backed services."""

import json
import re
from typing import Any, Dict, Optional

from langchain_openai import ChatOpenAI

_CODE_FENCE_RE = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)


def build_chat_model(settings, temperature: float = 0.7) -> Optional[ChatOpenAI]:
    """ChatOpenAI for the configured endpoint, or None without an API key."""
    if not settings.has_llm_provider:
        return None
    return ChatOpenAI(
        model=settings.llm_model,
        api_key=settings.llm_api_key,
        base_url=settings.llm_base_url,
        temperature=temperature,
    )


def load_json_object(content: str) -> Dict[str, Any]:
    """Decode a model reply that should be one JSON object.

    A surrounding markdown code fence is tolerated.

    Raises:
        ValueError: If the reply is empty, not JSON, or not an object
    """
    text = _CODE_FENCE_RE.sub("", (content or "").strip()).strip()
    if not text:
        raise ValueError("Empty model response")
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ValueError(f"Model response is not JSON: {e}")
    if not isinstance(data, dict):
        raise ValueError("Model response must be a JSON object")
    return data
