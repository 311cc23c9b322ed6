from __future__ import annotations

from typing import Optional, Protocol

from .model import User


class UserRepository(Protocol):
    """Read-only user repository used by login."""

    def get_by_username(self, username: str) -> Optional[User]:
        raise NotImplementedError
