"""Notification aggregate — a message shown in a user's notification feed.

Notifications are append-only. The only field that ever changes is ``read``.
"""

from enum import Enum

from protean.fields import Boolean, DateTime, Identifier, String, Text

from bitshub.domain import bitshub


class NotificationType(Enum):
    SUCCESS = "success"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@bitshub.aggregate
class Notification:
    user_id = Identifier(required=True)
    message = Text(required=True, sanitize=False)
    type = String(choices=NotificationType, default=NotificationType.INFO.value)
    created_at = DateTime(required=True)
    read = Boolean(default=False)

    @classmethod
    def create(cls, user_id, message, notification_type: NotificationType, now) -> "Notification":
        return cls(user_id=user_id, message=message, type=notification_type.value, created_at=now, read=False)

    def mark_read(self) -> None:
        self.read = True
