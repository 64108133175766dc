# =============================================
# File: app/services/tryon.py
# Purpose: Virtual try-on: forward the shopper photo + product image to the image model, relay the first generated image
# =============================================
from __future__ import annotations
import os

from loguru import logger

from app.services import ai_client
from app.services.errors import TryOnError
from app.utils import slog
from app.utils.ai_reply import first_image_url
from app.utils.prompting import build_tryon_messages
from app.utils.sanitize import safe_image_ref

TRYON_MODEL = os.getenv("TRYON_MODEL", "google/gemini-2.5-flash-image-preview")


def virtual_tryon(user_image: str, product_image: str, product_name: str, client=None) -> str:
    """Returns the composited image as a data URL (or whatever URL the model hands back)."""
    user_ref = safe_image_ref(user_image)
    product_ref = safe_image_ref(product_image)
    if not user_ref:
        raise TryOnError("userImage must be an image data URL or an http(s) URL")
    if not product_ref:
        raise TryOnError("productImage must be an image data URL or an http(s) URL")
    if not (product_name or "").strip():
        raise TryOnError("productName is required")

    messages = build_tryon_messages(product_name, user_ref, product_ref)
    reply = ai_client.complete(
        messages,
        model=TRYON_MODEL,
        client=client,
        extra_body={"modalities": ["image", "text"]},
    )
    result = first_image_url(reply)
    if not result:
        logger.warning(f"[tryon] no image in reply for product={product_name!r}")
        raise TryOnError("Failed to generate try-on image")

    slog.log_event("tryon.completed", product_name=product_name, result=slog.image_kind(result))
    return result
