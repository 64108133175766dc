# app/routers/functions.py
from __future__ import annotations

from typing import Any, Dict, Tuple

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, Response
from loguru import logger
from sqlmodel import Session
from starlette.concurrency import run_in_threadpool

from app.db.repo import get_session
from app.services import recommender, tryon

router = APIRouter(prefix="/functions", tags=["functions"])

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}


# ---------- Helpers ----------

def _json(body: Dict[str, Any], status_code: int = 200) -> JSONResponse:
    return JSONResponse(body, status_code=status_code, headers=CORS_HEADERS)


def _error(e: Exception) -> JSONResponse:
    return _json({"error": str(e) or "Unknown error"}, status_code=500)


async def _payload(request: Request) -> Dict[str, Any]:
    data = await request.json()
    if not isinstance(data, dict):
        raise ValueError("Request body must be a JSON object")
    return data


def _require_str(data: Dict[str, Any], *keys: str) -> Tuple[str, ...]:
    out = []
    for k in keys:
        v = data.get(k)
        if not isinstance(v, str) or not v.strip():
            raise ValueError(f"Missing {k}")
        out.append(v)
    return tuple(out)


def _set_ctx(request: Request, **fields: Any) -> None:
    ctx = getattr(request.state, "log_context", None) or {}
    ctx.update(fields)
    request.state.log_context = ctx


# ---------- Pre-flight ----------

@router.options("/get-recommendations", include_in_schema=False)
@router.options("/virtual-tryon", include_in_schema=False)
def preflight() -> Response:
    return Response(status_code=200, headers=CORS_HEADERS)


# ---------- Endpoints ----------

@router.post("/get-recommendations")
async def get_recommendations(request: Request, session: Session = Depends(get_session)) -> JSONResponse:
    """
    Input: {"userId": "..."}
    Output: {"recommendations": [{product_id, reason, product_name, product_slug, product_price}]}
    """
    try:
        (user_id,) = _require_str(await _payload(request), "userId")
        _set_ctx(request, user_id=user_id, model=recommender.RECOMMEND_MODEL)
        recs = await run_in_threadpool(recommender.get_recommendations, session, user_id)
    except Exception as e:
        logger.exception(f"Recommendation error: {e}")
        _set_ctx(request, ai_ok=False)
        return _error(e)
    _set_ctx(request, ai_ok=True, recommendations=len(recs))
    return _json({"recommendations": recs})


@router.post("/virtual-tryon")
async def virtual_tryon(request: Request) -> JSONResponse:
    """
    Input: {"userImage": dataURL, "productImage": URL, "productName": "..."}
    Output: {"resultImage": dataURL}
    """
    try:
        user_image, product_image, product_name = _require_str(
            await _payload(request), "userImage", "productImage", "productName"
        )
        _set_ctx(request, model=tryon.TRYON_MODEL)
        result = await run_in_threadpool(tryon.virtual_tryon, user_image, product_image, product_name)
    except Exception as e:
        logger.exception(f"Virtual try-on error: {e}")
        _set_ctx(request, ai_ok=False)
        return _error(e)
    _set_ctx(request, ai_ok=True)
    return _json({"resultImage": result})
