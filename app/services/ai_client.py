# =============================================
# File: app/services/ai_client.py
# Purpose: Single-shot chat completions against the OpenAI-compatible AI gateway
# =============================================
from __future__ import annotations
import os
from functools import lru_cache
from typing import Any, Dict, List

from openai import OpenAI
from loguru import logger

from app.utils import slog
from app.utils.metrics import ai_call

AI_GATEWAY_URL = os.getenv("AI_GATEWAY_URL", "https://ai.gateway.lovable.dev/v1")
TIMEOUT_S = float(os.getenv("LLM_TIMEOUT_SECONDS", "60"))


@lru_cache(maxsize=1)
def get_client() -> OpenAI:
    # One attempt per user action: the SDK's own retries are switched off
    return OpenAI(
        base_url=AI_GATEWAY_URL,
        api_key=os.getenv("AI_GATEWAY_API_KEY"),
        max_retries=0,
        timeout=TIMEOUT_S,
    )


def complete(messages: List[Dict[str, Any]], model: str, client=None, **extra: Any) -> Dict[str, Any]:
    """
    Send one chat-completion request and return the reply as a plain dict
    (gateway-specific fields such as message.images are kept).
    """
    client = client or get_client()
    with ai_call(model):
        resp = client.chat.completions.create(model=model, messages=messages, **extra)
    data = resp.model_dump() if hasattr(resp, "model_dump") else dict(resp)
    slog.log_event("ai.call", model=model, reply_model=data.get("model"), choices=len(data.get("choices") or []))
    logger.debug(f"[ai] model={model} usage={data.get('usage')}")
    return data


def reply_text(data: Dict[str, Any]) -> str:
    try:
        return (data["choices"][0]["message"]["content"] or "").strip()
    except (KeyError, IndexError, TypeError):
        return ""
