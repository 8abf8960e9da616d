"""JWT implementation of SessionTokens using python-jose."""

import logging
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt

from domain.model.session import Identity, SessionToken

logger = logging.getLogger(__name__)

DEFAULT_ALGORITHM = "HS256"
DEFAULT_EXPIRATION = timedelta(days=7)


class JoseSessionTokens:
    def __init__(
        self,
        secret_key: str,
        algorithm: str = DEFAULT_ALGORITHM,
        expiration: timedelta = DEFAULT_EXPIRATION,
    ):
        if not secret_key:
            raise ValueError("secret_key must not be empty")
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._expiration = expiration

    def issue(self, user_id: str) -> SessionToken:
        """Create a signed token whose subject is the user id."""
        now = datetime.now(timezone.utc)
        expire = now + self._expiration
        payload = {
            "sub": user_id,
            "exp": expire,
            "iat": now,
        }
        token = jwt.encode(payload, self._secret_key, algorithm=self._algorithm)
        return SessionToken(token=token, expires_at=expire)

    def resolve(self, token: str | None) -> Identity | None:
        """Verify signature and expiry and extract the caller's identity."""
        if not token:
            return None
        try:
            payload = jwt.decode(token, self._secret_key, algorithms=[self._algorithm])
        except JWTError as e:
            logger.debug(f"JWT verification failed: {e}")
            return None

        user_id = payload.get("sub")
        if not user_id or not isinstance(user_id, str):
            return None
        return Identity(user_id=user_id)
