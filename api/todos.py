"""
Todo API routes — list, create.

Route prefix: /todo
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, Field
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from auth.dependencies import db_session, require_account
from auth.errors import ConflictError
from database.helpers import create_todo, get_todo, list_todos
from database.models import Todo, User

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Todo Requests"])

_DUPLICATE_TODO = "A todo with that user and name already exists."


class NewTodo(BaseModel):
    user: Optional[str] = Field(
        None,
        max_length=128,
        description="Owner name; defaults to the caller's account name.",
        examples=["express_user"],
    )
    name: str = Field(..., min_length=1, max_length=255, examples=["Create an express api."])
    description: str = Field(..., min_length=1, examples=["Create an express api, with authentication and swagger."])


class TodoResponse(BaseModel):
    todo_id: str
    user: str
    name: str
    description: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


def _todo_to_dict(todo: Todo) -> Dict[str, Any]:
    return {
        "todo_id": str(todo.todo_id),
        "user": todo.user,
        "name": todo.name,
        "description": todo.description,
        "created_at": todo.created_at,
        "updated_at": todo.updated_at,
    }


@router.get("/", response_model=List[TodoResponse])
async def get_todos(
    user: Optional[str] = Query(None, description="Only return todos owned by this user."),
    session: AsyncSession = Depends(db_session),
) -> List[Dict[str, Any]]:
    """Retrieve a list of the todos."""
    todos = await list_todos(session, user=user)
    return [_todo_to_dict(t) for t in todos]


@router.post("/create", response_model=TodoResponse, status_code=status.HTTP_201_CREATED)
async def create(
    req: NewTodo,
    account: User = Depends(require_account),
    session: AsyncSession = Depends(db_session),
) -> Dict[str, Any]:
    """Create a Todo."""
    owner = req.user or account.display_name or str(account.user_id)

    if await get_todo(session, owner, req.name) is not None:
        raise ConflictError(_DUPLICATE_TODO)

    try:
        todo = await create_todo(session, owner, req.name, req.description)
    except IntegrityError as exc:
        raise ConflictError(_DUPLICATE_TODO) from exc

    logger.info("Todo created: %r for %s by %s", req.name, owner, account.user_id)
    return _todo_to_dict(todo)
