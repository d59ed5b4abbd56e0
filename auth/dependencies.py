"""
FastAPI dependencies for authentication.

Provides ``db_session``, ``get_current_user_id`` (token verifier) and
``require_account`` (authorization gate) used across all protected routes.
"""

from __future__ import annotations

import logging
from typing import AsyncGenerator, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from auth.errors import AccountNotFoundError, MissingTokenError, StoreUnavailableError
from auth.tokens import TokenVerifier, get_token_verifier
from database.helpers import get_user_by_id
from database.models import User
from database.session import get_db_session

logger = logging.getLogger(__name__)

# A missing header raises MissingTokenError (401), not the stock 403.
_bearer_scheme = HTTPBearer(auto_error=False)


async def db_session(
    session: AsyncSession = Depends(get_db_session),
) -> AsyncGenerator[AsyncSession, None]:
    """Yield a DB session for route handlers."""
    yield session


async def get_current_user_id(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer_scheme),
    verifier: TokenVerifier = Depends(get_token_verifier),
) -> str:
    """
    Extract and verify the Bearer token, returning the authenticated
    ``user_id`` (UUID string).  The id is also bound to
    ``request.state.user_id`` for downstream handlers.
    """
    if credentials is None or not credentials.credentials:
        raise MissingTokenError()

    user_id = verifier.verify(credentials.credentials)
    request.state.user_id = user_id
    return user_id


async def require_account(
    user_id: str = Depends(get_current_user_id),
    session: AsyncSession = Depends(db_session),
) -> User:
    """
    Confirm the token's subject still has an account.

    A valid signature only proves the token was issued by us; the account
    may have been removed since.
    """
    try:
        user = await get_user_by_id(session, user_id)
    except SQLAlchemyError as exc:
        logger.exception("Account lookup failed for %s", user_id)
        raise StoreUnavailableError() from exc

    if user is None:
        raise AccountNotFoundError()
    return user
