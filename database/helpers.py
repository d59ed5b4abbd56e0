"""
Database helper functions — look up and persist accounts and todos.

"""

from __future__ import annotations

import logging
import uuid
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from database.models import Todo, User

logger = logging.getLogger(__name__)


def _to_uuid(value: str | uuid.UUID) -> uuid.UUID:
    return uuid.UUID(value) if isinstance(value, str) else value


# ── Users ───────────────────────────────────────────────────────────────


async def get_user_by_email(session: AsyncSession, email: str) -> Optional[User]:
    result = await session.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


async def get_user_by_id(session: AsyncSession, user_id: str | uuid.UUID) -> Optional[User]:
    """Return the ``User`` for ``user_id``, or ``None`` if the id is unknown or malformed."""
    try:
        uid = _to_uuid(user_id)
    except ValueError:
        return None
    return await session.get(User, uid)


async def create_user(
    session: AsyncSession,
    email: str,
    password_hash: str,
    display_name: str | None = None,
) -> User:
    user = User(
        user_id=uuid.uuid4(),
        email=email,
        display_name=display_name,
        password_hash=password_hash,
    )
    session.add(user)
    await session.flush()
    return user


# ── Todos ───────────────────────────────────────────────────────────────


async def list_todos(session: AsyncSession, user: str | None = None) -> List[Todo]:
    """All todos, newest first; narrowed to one owner when ``user`` is given."""
    stmt = select(Todo).order_by(Todo.created_at.desc())
    if user is not None:
        stmt = stmt.where(Todo.user == user)
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def get_todo(session: AsyncSession, user: str, name: str) -> Optional[Todo]:
    result = await session.execute(
        select(Todo).where(Todo.user == user, Todo.name == name)
    )
    return result.scalar_one_or_none()


async def create_todo(
    session: AsyncSession,
    user: str,
    name: str,
    description: str,
) -> Todo:
    todo = Todo(
        todo_id=uuid.uuid4(),
        user=user,
        name=name,
        description=description,
    )
    session.add(todo)
    await session.flush()
    logger.debug("Inserted todo %s for %s", todo.todo_id, user)
    return todo
