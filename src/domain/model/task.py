# domain/model/task.py

from dataclasses import dataclass
from datetime import datetime

# Fields a caller may change after creation. Ownership and timestamps are
# managed by the store.
UPDATABLE_FIELDS = ('title', 'description', 'completed', 'due_date')


@dataclass
class Task:
    """Domain model representing a task owned by a single user."""
    id: str
    user_id: str
    title: str
    created_at: datetime
    updated_at: datetime

    description: str | None = None
    completed: bool = False
    due_date: datetime | None = None
