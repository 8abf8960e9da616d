"""Startup index creation for every collection the service uses."""

from adapter.mongodb.task_repository import MongoTaskRepository
from adapter.mongodb.user_repository import MongoUserRepository


def ensure_all_indexes(db) -> bool:
    """Ensure indexes for users and tasks. Called from the app lifespan."""
    results = [
        MongoUserRepository(db).ensure_indexes(),
        MongoTaskRepository(db).ensure_indexes(),
    ]
    return all(results)
