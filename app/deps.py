# =============================================
# File: app/deps.py
# Purpose: Request dependencies: access-token verification (tokens come from the external auth provider) and the admin gate
# =============================================
from __future__ import annotations
import os
from typing import Optional

from fastapi import Depends, Header, HTTPException, Request
from jose import JWTError, jwt
from sqlmodel import Session

from app.db.repo import get_session
from app.services.admin import is_admin

ALGORITHM = "HS256"


def _secret() -> str:
    # read at call time so tests/env overrides take effect
    return os.getenv("AUTH_JWT_SECRET", "dev-secret-change")


def _audience() -> Optional[str]:
    return os.getenv("AUTH_JWT_AUDIENCE", "authenticated") or None


def decode_token(token: str) -> dict:
    try:
        return jwt.decode(
            token,
            _secret(),
            algorithms=[ALGORITHM],
            audience=_audience(),
            options={"verify_aud": _audience() is not None},
        )
    except JWTError:
        raise HTTPException(status_code=401, detail="Invalid or expired token")


def _user_id_from_header(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    if not authorization.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Not authenticated")
    payload = decode_token(authorization.split(" ", 1)[1])
    user_id = payload.get("sub")
    if not user_id:
        raise HTTPException(status_code=401, detail="Invalid token")
    return str(user_id)


def get_optional_user_id(request: Request, authorization: Optional[str] = Header(default=None)) -> Optional[str]:
    """Anonymous browsing is allowed; a token, when sent, must still be valid."""
    user_id = _user_id_from_header(authorization)
    if user_id:
        request.state.log_context = {**(getattr(request.state, "log_context", None) or {}), "user_id": user_id}
    return user_id


def get_current_user_id(user_id: Optional[str] = Depends(get_optional_user_id)) -> str:
    if not user_id:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return user_id


def require_admin(
    user_id: str = Depends(get_current_user_id),
    session: Session = Depends(get_session),
) -> str:
    if not is_admin(session, user_id):
        raise HTTPException(status_code=403, detail="You don't have admin privileges")
    return user_id
