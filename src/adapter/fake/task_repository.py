"""In-memory implementation of TaskRepository for testing."""

import uuid
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, Mapping

from domain.model.task import Task, UPDATABLE_FIELDS


class FakeTaskRepository:
    def __init__(self):
        self.store: dict[str, Task] = {}

    # ── write operations ─────────────────────────────────────

    def create(
        self,
        user_id: str,
        title: str,
        description: str | None = None,
        due_date: datetime | None = None,
    ) -> Task:
        now = datetime.now(timezone.utc)
        task = Task(
            id=uuid.uuid4().hex,
            user_id=user_id,
            title=title,
            description=description,
            due_date=due_date,
            created_at=now,
            updated_at=now,
        )
        self.store[task.id] = task
        return replace(task)

    def update(self, task_id: str, user_id: str, changes: Mapping[str, Any]) -> Task | None:
        task = self._owned(task_id, user_id)
        if not task:
            return None

        for key, value in changes.items():
            if key in UPDATABLE_FIELDS:
                setattr(task, key, value)
        task.updated_at = datetime.now(timezone.utc)
        return replace(task)

    def delete(self, task_id: str, user_id: str) -> bool:
        if not self._owned(task_id, user_id):
            return False
        del self.store[task_id]
        return True

    # ── read operations ──────────────────────────────────────

    def list_by_user(self, user_id: str) -> list[Task]:
        # Newest insertion first so equal timestamps still list newest first
        owned = [replace(t) for t in reversed(self.store.values()) if t.user_id == user_id]
        return sorted(owned, key=lambda t: t.created_at, reverse=True)

    def _owned(self, task_id: str, user_id: str) -> Task | None:
        task = self.store.get(task_id)
        if task and task.user_id == user_id:
            return task
        return None
