# =============================================
# File: app/utils/ai_reply.py
# Purpose: Best-effort extraction of structured data from model replies
# =============================================
from __future__ import annotations
import json
import re
from typing import Any, Dict, List, Optional

_FENCE_RE = re.compile(r"```(?:json)?\s*\n?|\n?\s*```", re.IGNORECASE)


def strip_code_fences(text: str) -> str:
    return _FENCE_RE.sub("", text or "").strip()


def parse_recommendations(text: str) -> List[Dict[str, str]]:
    """
    Extract [{product_id, reason}] from the model output.
    Tolerates markdown fences and an object wrapping the list under "recommendations".
    Raises ValueError when nothing usable can be parsed.
    """
    raw = strip_code_fences(text)
    if not raw:
        raise ValueError("Empty model reply")
    data = json.loads(raw)
    if isinstance(data, dict):
        data = data.get("recommendations")
    if not isinstance(data, list):
        raise ValueError("Model reply is not a JSON array")

    out: List[Dict[str, str]] = []
    for item in data:
        if not isinstance(item, dict):
            continue
        pid = item.get("product_id")
        if pid is None or str(pid).strip() == "":
            continue
        out.append({"product_id": str(pid).strip(), "reason": str(item.get("reason") or "").strip()})
    return out


def first_image_url(reply: Dict[str, Any]) -> Optional[str]:
    """choices[0].message.images[0].image_url.url, or None anywhere along the path."""
    try:
        url = reply["choices"][0]["message"]["images"][0]["image_url"]["url"]
    except (KeyError, IndexError, TypeError):
        return None
    return url or None
