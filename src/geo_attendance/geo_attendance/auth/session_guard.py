from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

from flask import has_request_context, session

from ..core.exceptions import Unauthenticated


@dataclass(frozen=True)
class AuthSession:
    """Proof of authentication for the acting user."""

    user_id: int
    full_name: str = ""
    role: str = ""


SessionGetter = Callable[[], Optional[AuthSession]]


def flask_session_getter() -> Optional[AuthSession]:
    """Read the login written by the users controller from the Flask session cookie."""
    if not has_request_context() or "user_id" not in session:
        return None
    try:
        user_id = int(session["user_id"])
    except (TypeError, ValueError):
        return None
    return AuthSession(user_id=user_id, full_name=session.get("name") or "", role=session.get("role") or "")


class SessionGuard:
    def __init__(self, get_session: SessionGetter = flask_session_getter):
        self._get_session = get_session

    def current_session(self) -> Optional[AuthSession]:
        return self._get_session()

    def require_session(self) -> AuthSession:
        auth = self._get_session()
        if auth is None:
            raise Unauthenticated("Please log in to continue")
        return auth
