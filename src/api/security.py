"""Session configuration and request identity resolution."""

import os
import logging
from datetime import timedelta
from typing import Optional
from fastapi import Depends
from fastapi.security import APIKeyCookie, HTTPAuthorizationCredentials, HTTPBearer

from adapter.jwt.session_tokens import JoseSessionTokens
from domain.model.session import Identity
from port.session_tokens import SessionTokens

logger = logging.getLogger(__name__)

# JWT Configuration
JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY")
if not JWT_SECRET_KEY:
    raise ValueError(
        "JWT_SECRET_KEY environment variable is required. "
        "Generate a secure key with: openssl rand -hex 32"
    )
JWT_ALGORITHM = "HS256"
JWT_EXPIRATION_DAYS = int(os.getenv("JWT_EXPIRATION_DAYS", "7"))

SESSION_COOKIE_NAME = os.getenv("SESSION_COOKIE_NAME", "session_token")
SESSION_COOKIE_SECURE = os.getenv("SESSION_COOKIE_SECURE", "false").lower() in ("1", "true", "yes")

_session_tokens = JoseSessionTokens(
    JWT_SECRET_KEY,
    algorithm=JWT_ALGORITHM,
    expiration=timedelta(days=JWT_EXPIRATION_DAYS),
)

bearer = HTTPBearer(auto_error=False)
session_cookie = APIKeyCookie(name=SESSION_COOKIE_NAME, auto_error=False)


def get_session_tokens() -> SessionTokens:
    return _session_tokens


def get_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer),
    cookie_token: Optional[str] = Depends(session_cookie),
    tokens: SessionTokens = Depends(get_session_tokens),
) -> Optional[Identity]:
    """Resolve the caller from a bearer token or the session cookie.

    Returns None when no credential is presented or it does not verify.
    Bearer credentials take precedence over the cookie.
    """
    token = credentials.credentials if credentials else cookie_token
    return tokens.resolve(token)
