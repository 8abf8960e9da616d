"""Port definition for TaskRepository.

Every lookup that reads, changes or removes a single task takes both the task
id and the owner's user id, and implementations must apply them as one
predicate.
"""

from datetime import datetime
from typing import Any, Mapping, Protocol

from domain.model.task import Task


class TaskRepository(Protocol):
    def create(
        self,
        user_id: str,
        title: str,
        description: str | None = None,
        due_date: datetime | None = None,
    ) -> Task: ...

    def list_by_user(self, user_id: str) -> list[Task]: ...

    def update(self, task_id: str, user_id: str, changes: Mapping[str, Any]) -> Task | None: ...

    def delete(self, task_id: str, user_id: str) -> bool: ...
