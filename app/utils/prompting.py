# =============================================
# File: app/utils/prompting.py
# Purpose: Build chat-completion messages for the recommendation and try-on models
# =============================================
from __future__ import annotations
from typing import Any, Dict, List, Sequence

from .sanitize import catalog_text, collapse_ws

RECOMMEND_COUNT = 5

REC_SYS_PROMPT = (
    "You are a fashion recommendation expert. Analyze user behavior and suggest products "
    "that match their style and preferences. Return only valid JSON."
)

REC_USER_TEMPLATE = (
    "Based on the following user behavior, recommend {count} products from the available catalog.\n"
    "\n"
    "Viewed Products: {viewed}\n"
    "Purchased Products: {purchased}\n"
    "\n"
    "Available Products: {catalog}\n"
    "\n"
    "Return recommendations as JSON array with format: "
    "[{{\"product_id\": \"uuid\", \"reason\": \"why this product\"}}]"
)

TRYON_PROMPT_TEMPLATE = (
    "Create a realistic virtual try-on visualization where the person is wearing {product_name}.\n"
    "The result should show the product naturally fitted on the person, maintaining realistic "
    "proportions, lighting, and styling."
)


def format_price(price: Any) -> str:
    """89.9 -> '89.9', 1250.0 -> '1250'"""
    try:
        return f"{float(price):.2f}".rstrip("0").rstrip(".")
    except (TypeError, ValueError):
        return "0"

def _name_price(p: Dict[str, Any]) -> str:
    return f"{collapse_ws(p.get('name') or '')} (${format_price(p.get('price'))})"

def _catalog_line(p: Dict[str, Any]) -> str:
    return f"{p.get('id')}: {_name_price(p)} - {catalog_text(p.get('description') or '')}"

def build_recommendation_messages(
    viewed: Sequence[Dict[str, Any]],
    purchased: Sequence[Dict[str, Any]],
    catalog: Sequence[Dict[str, Any]],
    count: int = RECOMMEND_COUNT,
) -> List[Dict[str, str]]:
    """
    Product dicts carry at least {id, name, price}; catalog rows also {description}.
    The model must answer with a JSON array of {"product_id", "reason"}.
    """
    user = REC_USER_TEMPLATE.format(
        count=count,
        viewed=", ".join(_name_price(p) for p in viewed),
        purchased=", ".join(_name_price(p) for p in purchased),
        catalog="\n".join(_catalog_line(p) for p in catalog),
    )
    return [
        {"role": "system", "content": REC_SYS_PROMPT},
        {"role": "user", "content": user},
    ]

def build_tryon_messages(product_name: str, user_image: str, product_image: str) -> List[Dict[str, Any]]:
    prompt = TRYON_PROMPT_TEMPLATE.format(product_name=collapse_ws(product_name))
    return [
        {
            "role": "user",
            "content": [
                {"type": "text", "text": prompt},
                {"type": "image_url", "image_url": {"url": user_image}},
                {"type": "image_url", "image_url": {"url": product_image}},
            ],
        }
    ]
