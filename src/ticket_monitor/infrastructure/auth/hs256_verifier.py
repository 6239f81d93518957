from __future__ import annotations

import jwt

from ticket_monitor.application.dto.viewer import Viewer
from ticket_monitor.domain.value_objects.enums import UserRole
from ticket_monitor.domain.value_objects.ids import UserId


class HS256Verifier:
    """Verify helpdesk session tokens signed with the shared HS256 secret.

    The helpdesk backend issues ``{id, email, role}`` claims; ``sub`` is
    accepted as a fallback for the user id.
    """

    def __init__(self, secret: str, algorithm: str = "HS256") -> None:
        self._secret = secret
        self._algorithm = algorithm

    async def verify(self, token: str) -> Viewer:
        payload = jwt.decode(token, self._secret, algorithms=[self._algorithm])
        user_id = payload.get("id", payload.get("sub"))
        if user_id is None:
            raise jwt.InvalidTokenError("token carries no user id")
        role_raw = payload.get("role", UserRole.USER)
        # Unknown roles get the most restricted ticket view.
        role = UserRole(role_raw) if role_raw in UserRole.__members__.values() else UserRole.FINANCIAL
        return Viewer(
            id=UserId(str(user_id)),
            role=role,
            name=payload.get("name", ""),
        )
