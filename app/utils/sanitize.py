# =============================================
# File: app/utils/sanitize.py
# Purpose: Clean catalog text before it reaches a prompt; validate image references
# =============================================
from __future__ import annotations
import re
from typing import Iterable

_ALLOWED_IMAGE_SCHEMES = ("http://", "https://")
_DATA_IMAGE_RE = re.compile(r"^data:image/[a-z0-9.+-]+;base64,[A-Za-z0-9+/=\s]+$", re.IGNORECASE)
_INJECTION_CUES = [
    "ignore previous instruction",
    "ignore the previous instruction",
    "disregard previous instruction",
    "system prompt",
    "developer message",
    "you are chatgpt",
    "do not follow the above",
    "reset the system",
    "jailbreak",
]

_WHITESPACE_RE = re.compile(r"\s+")
_SENT_SPLIT_RE = re.compile(r'(?<=[.!?])\s+')

def safe_image_ref(ref: str) -> str:
    """Return the reference when it is an inline base64 image or an http(s) URL, else ''."""
    if not ref:
        return ""
    r = ref.strip()
    if r.lower().startswith(_ALLOWED_IMAGE_SCHEMES):
        return r
    if _DATA_IMAGE_RE.match(r):
        return r
    return ""

def collapse_ws(text: str) -> str:
    if not text:
        return ""
    return _WHITESPACE_RE.sub(" ", text).strip()

def _strip_injection_sentences(text: str, cues: Iterable[str] = _INJECTION_CUES) -> str:
    if not text:
        return ""
    parts = _SENT_SPLIT_RE.split(text)
    cues_l = [c.lower() for c in cues]
    kept = [p.strip() for p in parts if p.strip() and not any(c in p.lower() for c in cues_l)]
    return " ".join(kept)

def catalog_text(text: str, max_chars: int = 200) -> str:
    """
    Product descriptions are admin-entered free text that ends up inside a prompt:
    drop sentences that read like instructions to the model, collapse whitespace
    (one catalog line per product) and truncate.
    """
    t = collapse_ws(_strip_injection_sentences(text or ""))
    if max_chars and len(t) > max_chars:
        t = t[:max_chars].rstrip() + "…"
    return t
