"""Task service — ownership-scoped task CRUD.

Every operation receives the caller's resolved identity and refuses to touch
the repository without one. Lookups for a single task always pass both the
task id and the caller's user id to the repository, so a task owned by
someone else is indistinguishable from one that does not exist.
"""

import logging
from datetime import datetime
from typing import Any, Mapping

from domain.model.errors import NotFoundError, UnauthorizedError, ValidationError
from domain.model.session import Identity
from domain.model.task import Task, UPDATABLE_FIELDS
from port.task_repository import TaskRepository

logger = logging.getLogger(__name__)


def _require_identity(identity: Identity | None) -> Identity:
    if identity is None:
        raise UnauthorizedError("Not authenticated")
    return identity


def _check_title(title: Any) -> str:
    if not isinstance(title, str) or not title.strip():
        raise ValidationError("Title is required", field="title")
    return title


def list_tasks(repo: TaskRepository, identity: Identity | None) -> list[Task]:
    """Return the caller's tasks, newest first."""
    caller = _require_identity(identity)
    return repo.list_by_user(caller.user_id)


def create_task(
    repo: TaskRepository,
    identity: Identity | None,
    title: str | None,
    description: str | None = None,
    due_date: datetime | None = None,
) -> Task:
    """Create a pending task owned by the caller.

    Raises:
        UnauthorizedError: no identity
        ValidationError: title missing or blank
    """
    caller = _require_identity(identity)
    task = repo.create(
        user_id=caller.user_id,
        title=_check_title(title),
        description=description,
        due_date=due_date,
    )
    logger.info("Task created", extra={"taskId": task.id, "userId": caller.user_id})
    return task


def _validate_changes(changes: Mapping[str, Any]) -> dict[str, Any]:
    unknown = set(changes) - set(UPDATABLE_FIELDS)
    if unknown:
        raise ValidationError(f"Unknown fields: {', '.join(sorted(unknown))}")

    cleaned = dict(changes)
    if 'title' in cleaned:
        cleaned['title'] = _check_title(cleaned['title'])
    if 'completed' in cleaned and not isinstance(cleaned['completed'], bool):
        raise ValidationError("Completed must be true or false", field="completed")
    return cleaned


def update_task(
    repo: TaskRepository,
    identity: Identity | None,
    task_id: str,
    changes: Mapping[str, Any],
) -> Task:
    """Apply a partial update to one of the caller's tasks.

    Keys absent from ``changes`` are left as they are; ``due_date`` or
    ``description`` set to None clear the stored value.

    Raises:
        UnauthorizedError: no identity
        ValidationError: invalid title/completed value or unknown field
        NotFoundError: no task with that id belongs to the caller
    """
    caller = _require_identity(identity)
    cleaned = _validate_changes(changes)

    task = repo.update(task_id, caller.user_id, cleaned)
    if task is None:
        raise NotFoundError("Task not found")

    logger.info(
        "Task updated",
        extra={"taskId": task_id, "userId": caller.user_id, "fields": sorted(cleaned)},
    )
    return task


def delete_task(repo: TaskRepository, identity: Identity | None, task_id: str) -> None:
    """Permanently delete one of the caller's tasks.

    Raises:
        UnauthorizedError: no identity
        NotFoundError: no task with that id belongs to the caller
    """
    caller = _require_identity(identity)
    if not repo.delete(task_id, caller.user_id):
        raise NotFoundError("Task not found")
    logger.info("Task deleted", extra={"taskId": task_id, "userId": caller.user_id})
