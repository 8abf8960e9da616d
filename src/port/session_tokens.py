from typing import Protocol

from domain.model.session import Identity, SessionToken


class SessionTokens(Protocol):
    """Protocol for issuing and verifying session tokens."""
    def issue(self, user_id: str) -> SessionToken:
        """Sign a new token for the given user."""
        ...

    def resolve(self, token: str | None) -> Identity | None:
        """Return the embedded identity, or None if the token does not verify."""
        ...
