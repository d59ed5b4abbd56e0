"""
Auth API routes — register, login, isAuthorized.

Route prefix: /user
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, status
from fastapi.concurrency import run_in_threadpool
from pydantic import BaseModel, Field
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from auth.dependencies import db_session, require_account
from auth.errors import AccountNotFoundError, ConflictError, InvalidCredentialsError
from auth.password import hash_password, verify_password
from auth.tokens import TokenIssuer, get_token_issuer
from database.helpers import create_user, get_user_by_email
from database.models import User

logger = logging.getLogger(__name__)

router = APIRouter(tags=["User Requests"])

_DUPLICATE_EMAIL = "A user with that email already exists."


# ── Request / response schemas ─────────────────────────────────────────


class RegisterRequest(BaseModel):
    email: str = Field(..., min_length=5, max_length=255, examples=["express@gmail.com"])
    password: str = Field(..., min_length=4, max_length=72, examples=["express_password"])
    name: str = Field(..., min_length=1, max_length=128, examples=["express_user"])


class LoginRequest(BaseModel):
    email: str = Field(..., examples=["express@gmail.com"])
    password: str = Field(..., examples=["express_password"])


class AuthResponse(BaseModel):
    auth: bool
    token: str


class UserResponse(BaseModel):
    user_id: str
    email: str
    name: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


def _user_to_dict(user: User) -> Dict[str, Any]:
    # never includes password_hash
    return {
        "user_id": str(user.user_id),
        "email": user.email,
        "name": user.display_name,
        "created_at": user.created_at,
        "updated_at": user.updated_at,
    }


# ── Public endpoints ───────────────────────────────────────────────────


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(
    req: RegisterRequest,
    session: AsyncSession = Depends(db_session),
    issuer: TokenIssuer = Depends(get_token_issuer),
) -> Dict[str, Any]:
    """Register a user."""
    if await get_user_by_email(session, req.email) is not None:
        raise ConflictError(_DUPLICATE_EMAIL)

    password_hash = await run_in_threadpool(hash_password, req.password)
    try:
        user = await create_user(session, req.email, password_hash, display_name=req.name)
    except IntegrityError as exc:
        # Lost a race with a concurrent registration for the same email.
        raise ConflictError(_DUPLICATE_EMAIL) from exc

    token = issuer.issue(str(user.user_id))
    logger.info("Registered user %s (%s)", req.name, user.user_id)
    return {"auth": True, "token": token}


@router.post("/login", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def login(
    req: LoginRequest,
    session: AsyncSession = Depends(db_session),
    issuer: TokenIssuer = Depends(get_token_issuer),
) -> Dict[str, Any]:
    """Login with email + password."""
    user = await get_user_by_email(session, req.email)
    if user is None:
        raise AccountNotFoundError("Invalid credentials.")

    if not await run_in_threadpool(verify_password, req.password, user.password_hash):
        raise InvalidCredentialsError()

    token = issuer.issue(str(user.user_id))
    logger.info("Login: %s (%s)", user.display_name, user.user_id)
    return {"auth": True, "token": token}


# ── Private endpoints ──────────────────────────────────────────────────


@router.get("/isAuthorized", response_model=UserResponse)
async def is_authorized(user: User = Depends(require_account)) -> Dict[str, Any]:
    """Check a user authorization; returns the account without its password."""
    return _user_to_dict(user)
