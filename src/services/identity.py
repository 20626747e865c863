"""
Authenticated Identity

The ledger only ever asks one question of the auth layer: who is signed
in right now, if anyone. An absent user is a normal state (before sign-in,
after sign-out), not an error.
"""

from abc import ABC, abstractmethod
from typing import Optional


class IdentityProvider(ABC):
    """Source of the current user id."""

    @abstractmethod
    def current_user_id(self) -> Optional[str]:
        """Id of the signed-in user, or None."""
        pass


class StaticIdentityProvider(IdentityProvider):
    """Holds a single user id in memory; used for single-user runs and tests."""

    def __init__(self, user_id: Optional[str] = None):
        self._user_id = user_id or None

    def current_user_id(self) -> Optional[str]:
        return self._user_id

    def sign_in(self, user_id: str) -> None:
        if not user_id:
            raise ValueError("user_id must be non-empty")
        self._user_id = user_id

    def sign_out(self) -> None:
        self._user_id = None
