"""Pydantic models for API request/response."""

from datetime import datetime, timezone
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

from domain.model.task import Task
from domain.model.user import User


def _parse_due_date(v):
    """Accept ISO dates ("2025-01-01") and datetimes, normalized to UTC."""
    if v is None or v == "":
        return None
    if isinstance(v, str):
        # Replace 'Z' with '+00:00' for ISO format compatibility
        v = datetime.fromisoformat(v.replace('Z', '+00:00'))
    if isinstance(v, datetime) and v.tzinfo is None:
        v = v.replace(tzinfo=timezone.utc)
    return v


# ── Auth ─────────────────────────────────────────────────────


class RegisterRequest(BaseModel):
    """Request model for user registration.

    Fields are optional here so that missing values surface as a 400 from
    the auth service rather than a schema error.
    """
    email: Optional[str] = None
    password: Optional[str] = None
    name: Optional[str] = None


class LoginRequest(BaseModel):
    """Request model for user login."""
    email: Optional[str] = None
    password: Optional[str] = None


class UserResponse(BaseModel):
    """Public user fields. Never carries the password hash."""
    id: str
    email: str
    name: Optional[str] = None

    @classmethod
    def from_domain(cls, user: User) -> "UserResponse":
        return cls(id=user.id, email=user.email, name=user.name)


class AuthResponse(BaseModel):
    """Response model for login."""
    model_config = ConfigDict(populate_by_name=True)

    token: str
    token_type: str = Field("bearer", alias="tokenType")
    expires_at: datetime = Field(..., alias="expiresAt")
    user: UserResponse


class SuccessResponse(BaseModel):
    success: bool = True


# ── Tasks ────────────────────────────────────────────────────


class TaskCreate(BaseModel):
    """Request model for creating a task."""
    model_config = ConfigDict(populate_by_name=True)

    title: Optional[str] = None
    description: Optional[str] = None
    due_date: Optional[datetime] = Field(None, alias="dueDate")

    @field_validator('due_date', mode='before')
    @classmethod
    def parse_due_date(cls, v):
        return _parse_due_date(v)


class TaskUpdate(BaseModel):
    """Request model for a partial task update.

    Only fields present in the request body are applied; an explicit null
    dueDate clears the due date.
    """
    model_config = ConfigDict(populate_by_name=True, extra='forbid')

    title: Optional[str] = None
    description: Optional[str] = None
    completed: Optional[bool] = None
    due_date: Optional[datetime] = Field(None, alias="dueDate")

    @field_validator('due_date', mode='before')
    @classmethod
    def parse_due_date(cls, v):
        return _parse_due_date(v)

    def changes(self) -> dict:
        """Fields explicitly sent by the client, keyed by domain field name."""
        return self.model_dump(exclude_unset=True)


class TaskResponse(BaseModel):
    """Response model for task."""
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., description="Task ID")
    user_id: str = Field(..., alias="userId", description="Owner user ID")
    title: str
    description: Optional[str] = None
    completed: bool = False
    due_date: Optional[datetime] = Field(None, alias="dueDate")
    created_at: datetime = Field(..., alias="createdAt")
    updated_at: datetime = Field(..., alias="updatedAt")

    @classmethod
    def from_domain(cls, task: Task) -> "TaskResponse":
        return cls(
            id=task.id,
            user_id=task.user_id,
            title=task.title,
            description=task.description,
            completed=task.completed,
            due_date=task.due_date,
            created_at=task.created_at,
            updated_at=task.updated_at,
        )
