from dataclasses import dataclass
from datetime import datetime


@dataclass
class User:
    """Domain model representing a registered user."""
    id: str
    email: str
    created_at: datetime
    name: str | None = None
    password_hash: str | None = None
