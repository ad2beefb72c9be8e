from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from shopledger.core.errors import NotAuthenticatedError


@dataclass(frozen=True)
class SessionContext:
    """The authenticated user a request or live view acts on behalf of."""

    user_id: str
    user_name: Optional[str] = None
    user_email: Optional[str] = None

    def attribution(self) -> dict:
        fields = {"userId": self.user_id}
        if self.user_name:
            fields["userName"] = self.user_name
        if self.user_email:
            fields["userEmail"] = self.user_email
        return fields


def require_session(session: Optional[SessionContext]) -> SessionContext:
    if session is None or not session.user_id:
        raise NotAuthenticatedError()
    return session


__all__ = ["SessionContext", "require_session"]
