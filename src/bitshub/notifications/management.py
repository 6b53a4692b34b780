"""Notification feed management — commands and handler."""

from protean.fields import Boolean, DateTime, Identifier, String, Text
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from bitshub.domain import bitshub
from bitshub.notifications.notification import Notification, NotificationType


@bitshub.command(part_of="Notification")
class AppendNotification:
    notification_id = Identifier(required=True)
    user_id = Identifier(required=True)
    message = Text(required=True, sanitize=False)
    type = String(choices=NotificationType, default=NotificationType.INFO.value)
    created_at = DateTime(required=True)
    read = Boolean(default=False)


@bitshub.command(part_of="Notification")
class MarkNotificationRead:
    notification_id = Identifier(required=True)


@bitshub.command_handler(part_of=Notification)
class ManageNotificationsHandler:
    @handle(AppendNotification)
    def append_notification(self, command):
        data = dict(command.payload)
        data["id"] = data.pop("notification_id")
        current_domain.repository_for(Notification).add(Notification(**data))

    @handle(MarkNotificationRead)
    def mark_notification_read(self, command):
        repo = current_domain.repository_for(Notification)
        notification = repo.get_or_none(command.notification_id)
        if notification is not None:
            notification.mark_read()
            repo.add(notification)
