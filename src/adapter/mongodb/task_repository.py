"""MongoDB implementation of TaskRepository."""

import uuid
from datetime import datetime, timezone
from logging import getLogger
from typing import Any, Mapping

from pymongo import ReturnDocument
from pymongo.database import Database
from pymongo.errors import PyMongoError

from adapter.mongodb import TASKS_COLLECTION_NAME
from domain.model.errors import StoreError
from domain.model.task import Task, UPDATABLE_FIELDS

logger = getLogger(__name__)


class MongoTaskRepository:
    def __init__(self, db: Database):
        self.collection = db[TASKS_COLLECTION_NAME]

    # ── indexes ──────────────────────────────────────────────

    def ensure_indexes(self) -> bool:
        """Create indexes for tasks collection."""
        try:
            self.collection.create_index(
                [('user_id', 1), ('created_at', -1)],
                name='idx_tasks_user_created_at',
            )
            return True
        except PyMongoError as e:
            logger.error("Failed to create tasks indexes", extra={"error": str(e)})
            return False

    # ── helpers ──────────────────────────────────────────────

    def _to_domain(self, doc: dict) -> Task:
        """Convert MongoDB document to Task domain model."""
        return Task(
            id=doc['_id'],
            user_id=doc['user_id'],
            title=doc['title'],
            description=doc.get('description'),
            completed=doc.get('completed', False),
            due_date=doc.get('due_date'),
            created_at=doc['created_at'],
            updated_at=doc['updated_at'],
        )

    # ── write operations ─────────────────────────────────────

    def create(
        self,
        user_id: str,
        title: str,
        description: str | None = None,
        due_date: datetime | None = None,
    ) -> Task:
        now = datetime.now(timezone.utc)
        doc = {
            '_id': uuid.uuid4().hex,
            'user_id': user_id,
            'title': title,
            'description': description,
            'completed': False,
            'due_date': due_date,
            'created_at': now,
            'updated_at': now,
        }
        try:
            self.collection.insert_one(doc)
        except PyMongoError as e:
            logger.error("Failed to create task", extra={"userId": user_id, "error": str(e)})
            raise StoreError("Failed to create task") from e

        logger.debug("Task inserted", extra={"taskId": doc['_id'], "userId": user_id})
        return self._to_domain(doc)

    def update(self, task_id: str, user_id: str, changes: Mapping[str, Any]) -> Task | None:
        """Apply changes to the task matching both id and owner.

        Returns the updated Task, or None if no task matched.
        """
        fields = {k: v for k, v in changes.items() if k in UPDATABLE_FIELDS}
        fields['updated_at'] = datetime.now(timezone.utc)
        try:
            doc = self.collection.find_one_and_update(
                {'_id': task_id, 'user_id': user_id},
                {'$set': fields},
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as e:
            logger.error("Failed to update task", extra={"taskId": task_id, "error": str(e)})
            raise StoreError("Failed to update task") from e

        if doc is None:
            logger.debug("Task not found for update", extra={"taskId": task_id, "userId": user_id})
            return None
        return self._to_domain(doc)

    def delete(self, task_id: str, user_id: str) -> bool:
        """Permanently remove the task matching both id and owner."""
        try:
            result = self.collection.delete_one({'_id': task_id, 'user_id': user_id})
        except PyMongoError as e:
            logger.error("Failed to delete task", extra={"taskId": task_id, "error": str(e)})
            raise StoreError("Failed to delete task") from e

        if result.deleted_count == 0:
            logger.debug("Task not found for deletion", extra={"taskId": task_id, "userId": user_id})
            return False

        logger.debug("Task removed", extra={"taskId": task_id, "userId": user_id})
        return True

    # ── read operations ──────────────────────────────────────

    def list_by_user(self, user_id: str) -> list[Task]:
        """List a user's tasks, newest first."""
        try:
            docs = self.collection.find({'user_id': user_id}).sort('created_at', -1)
            tasks = [self._to_domain(doc) for doc in docs]
        except PyMongoError as e:
            logger.error("Failed to list tasks", extra={"userId": user_id, "error": str(e)})
            raise StoreError("Failed to list tasks") from e

        logger.debug("Listed tasks", extra={"userId": user_id, "count": len(tasks)})
        return tasks
