from __future__ import annotations

from dataclasses import dataclass

from ticket_monitor.domain.value_objects.enums import UserRole
from ticket_monitor.domain.value_objects.ids import UserId


@dataclass(frozen=True, slots=True)
class Viewer:
    """Identity of whoever is looking at notifications, extracted from JWT."""

    id: UserId
    role: UserRole
    name: str = ""

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN
