from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from pymongo.database import Database

from adapter.mongodb.connection import DATABASE_NAME
from adapter.mongodb.task_repository import MongoTaskRepository
from adapter.mongodb.user_repository import MongoUserRepository
from api.security import get_identity
from domain.model.session import Identity
from port.task_repository import TaskRepository
from port.user_repository import UserRepository


def _get_db(request: Request) -> Database:
    """Get the MongoDB database opened at startup, raising 503 if unavailable."""
    client = getattr(request.app.state, "mongo_client", None)
    if client is None:
        raise HTTPException(status_code=503, detail="Database unavailable")
    return client[DATABASE_NAME]


def get_user_repo(request: Request) -> UserRepository:
    return MongoUserRepository(_get_db(request))


def get_task_repo(
    request: Request,
    identity: Optional[Identity] = Depends(get_identity),
) -> TaskRepository:
    """Task store for an authenticated caller.

    Anonymous requests get 401 before the database is touched, so a store
    outage never masks a missing session.
    """
    if identity is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return MongoTaskRepository(_get_db(request))
