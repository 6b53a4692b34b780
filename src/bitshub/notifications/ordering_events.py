"""Event handler — the notification feed reacts to Order events.

Events are delivered synchronously, so the order change and the message
about it land in the same snapshot.
"""

from datetime import datetime

from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from bitshub.domain import bitshub, logger
from bitshub.notifications.notification import Notification, NotificationType
from bitshub.ordering.order.events import (
    DeliveryDateUpdated,
    OrderConfirmed,
    OrderDelivered,
    OrderShipped,
)


def _format_date(value: datetime) -> str:
    return value.strftime("%B %d, %Y")


def _notify(user_id, message: str, notification_type: NotificationType) -> None:
    notification = Notification.create(
        user_id=user_id,
        message=message,
        notification_type=notification_type,
        now=current_domain.clock.now(),
    )
    current_domain.repository_for(Notification).add(notification)
    logger.debug("Notification created", notification_id=notification.id, user_id=user_id)


@bitshub.event_handler(part_of=Notification, stream_category="bitshub::order")
class OrderingEventsHandler:
    """Appends a customer notification for each order milestone."""

    @handle(OrderConfirmed)
    def on_order_confirmed(self, event: OrderConfirmed) -> None:
        _notify(
            event.user_id,
            f"Your order #{event.order_id} has been confirmed and will be delivered by "
            f"{_format_date(event.estimated_delivery)}",
            NotificationType.SUCCESS,
        )

    @handle(OrderShipped)
    def on_order_shipped(self, event: OrderShipped) -> None:
        _notify(
            event.user_id,
            f"Your order #{event.order_id} has been shipped and is on its way!",
            NotificationType.INFO,
        )

    @handle(OrderDelivered)
    def on_order_delivered(self, event: OrderDelivered) -> None:
        _notify(
            event.user_id,
            f"Your order #{event.order_id} has been delivered successfully!",
            NotificationType.SUCCESS,
        )

    @handle(DeliveryDateUpdated)
    def on_delivery_date_updated(self, event: DeliveryDateUpdated) -> None:
        _notify(
            event.user_id,
            f"Delivery date updated for order #{event.order_id}. "
            f"New estimated delivery: {_format_date(event.estimated_delivery)}",
            NotificationType.INFO,
        )
