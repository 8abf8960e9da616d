"""Identity and session token value objects."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Identity:
    """Authenticated caller, recovered from a verified session token."""
    user_id: str


@dataclass(frozen=True)
class SessionToken:
    """Signed, time-bounded credential issued after a successful login."""
    token: str
    expires_at: datetime
