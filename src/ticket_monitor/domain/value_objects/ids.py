from __future__ import annotations

from typing import NewType

TicketId = NewType("TicketId", str)
UserId = NewType("UserId", str)
InteractionId = NewType("InteractionId", str)
NotificationId = NewType("NotificationId", str)
