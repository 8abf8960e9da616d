"""Task routes.

- GET /tasks: list the caller's tasks, newest first
- POST /tasks: create a task
- PUT /tasks/{task_id}: partially update a task
- DELETE /tasks/{task_id}: permanently delete a task

All routes resolve the caller from the session token; the task service
rejects requests without an identity before touching the store.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status

from api.dependencies import get_task_repo
from api.models import SuccessResponse, TaskCreate, TaskResponse, TaskUpdate
from api.security import get_identity
from domain.model.errors import (
    DomainError,
    NotFoundError,
    StoreError,
    UnauthorizedError,
    ValidationError,
)
from domain.model.session import Identity
from port.task_repository import TaskRepository
from services import task_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tasks", tags=["tasks"])


def _to_http(e: DomainError, store_message: str) -> HTTPException:
    """Map a domain error raised by the task service to an HTTPException."""
    if isinstance(e, UnauthorizedError):
        return HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
            headers={"WWW-Authenticate": "Bearer"},
        )
    if isinstance(e, ValidationError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    if isinstance(e, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Task not found")
    if not isinstance(e, StoreError):
        logger.error("Unexpected domain error", extra={"error": str(e)})
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=store_message)


@router.get("", response_model=list[TaskResponse])
def list_tasks(
    identity: Optional[Identity] = Depends(get_identity),
    repo: TaskRepository = Depends(get_task_repo),
):
    """List the caller's tasks ordered by creation time, newest first."""
    try:
        tasks = task_service.list_tasks(repo, identity)
    except DomainError as e:
        raise _to_http(e, "Failed to fetch tasks")
    return [TaskResponse.from_domain(t) for t in tasks]


@router.post("", response_model=TaskResponse)
def create_task(
    request: TaskCreate,
    identity: Optional[Identity] = Depends(get_identity),
    repo: TaskRepository = Depends(get_task_repo),
):
    """Create a task owned by the caller."""
    try:
        task = task_service.create_task(
            repo,
            identity,
            title=request.title,
            description=request.description,
            due_date=request.due_date,
        )
    except DomainError as e:
        raise _to_http(e, "Failed to create task")
    return TaskResponse.from_domain(task)


@router.put("/{task_id}", response_model=TaskResponse)
def update_task(
    task_id: str,
    request: TaskUpdate,
    identity: Optional[Identity] = Depends(get_identity),
    repo: TaskRepository = Depends(get_task_repo),
):
    """Update any subset of title, description, completed and dueDate."""
    try:
        task = task_service.update_task(repo, identity, task_id, request.changes())
    except DomainError as e:
        raise _to_http(e, "Failed to update task")
    return TaskResponse.from_domain(task)


@router.delete("/{task_id}", response_model=SuccessResponse)
def delete_task(
    task_id: str,
    identity: Optional[Identity] = Depends(get_identity),
    repo: TaskRepository = Depends(get_task_repo),
):
    """Permanently delete one of the caller's tasks."""
    try:
        task_service.delete_task(repo, identity, task_id)
    except DomainError as e:
        raise _to_http(e, "Failed to delete task")
    return SuccessResponse()
