"""Order aggregate — a checked-out cart on its way to the customer.

An order is created once from a snapshot of the cart and a delivery address.
After that only ``status``, ``estimated_delivery`` and ``can_cancel`` ever
change, and orders are never deleted.

State Machine (5 states):
    PENDING → CONFIRMED → SHIPPED → DELIVERED
    PENDING | CONFIRMED → CANCELLED
"""

from datetime import datetime, timedelta
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, Identifier, List, String, ValueObject

from bitshub.domain import bitshub
from bitshub.identity.user import Address
from bitshub.ordering.cart.cart import Cart, CartItem
from bitshub.ordering.order.events import (
    DeliveryDateUpdated,
    OrderConfirmed,
    OrderDelivered,
    OrderShipped,
)


class OrderStatus(Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


# State machine transition map
_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.CONFIRMED, OrderStatus.CANCELLED},
    OrderStatus.CONFIRMED: {OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED},
    OrderStatus.DELIVERED: set(),  # Terminal
    OrderStatus.CANCELLED: set(),  # Terminal
}

# States from which the customer may still cancel
_CANCELLABLE_STATES = {OrderStatus.PENDING, OrderStatus.CONFIRMED}

CANCELLATION_WINDOW_EXPIRED = "Order can only be cancelled within {hours} hours of placement."


@bitshub.aggregate
class Order:
    user_id = Identifier(required=True)
    items = List(content_type=ValueObject(CartItem))
    total = Float(required=True, min_value=0)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    created_at = DateTime(required=True)
    delivery_address = ValueObject(Address, required=True)
    payment_method = String(required=True)
    estimated_delivery = DateTime()
    can_cancel = Boolean(default=True)

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def place(
        cls,
        user_id,
        cart: Cart,
        delivery_address: Address,
        payment_method: str,
        now: datetime,
    ) -> "Order":
        """Create a pending order from the current cart contents."""
        if not cart.items:
            raise ValidationError({"cart": ["Your cart is empty"]})

        return cls(
            user_id=user_id,
            items=list(cart.items),
            total=cart.total,
            status=OrderStatus.PENDING.value,
            created_at=now,
            delivery_address=delivery_address,
            payment_method=payment_method,
            can_cancel=True,
        )

    # -------------------------------------------------------------------
    # State transition helper
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target_status: OrderStatus) -> None:
        """Validate that the current state allows transition to target."""
        current = OrderStatus(self.status)
        if target_status not in _VALID_TRANSITIONS.get(current, set()):
            raise ValidationError({"status": [f"Cannot transition from {current.value} to {target_status.value}"]})

    def _set_status(self, status: OrderStatus) -> None:
        self.status = status.value
        self.can_cancel = status in _CANCELLABLE_STATES

    # -------------------------------------------------------------------
    # Order lifecycle transitions
    # -------------------------------------------------------------------
    def accept(self, lead_days: int = 7) -> None:
        """Confirm the order and promise delivery ``lead_days`` after it was placed."""
        self._assert_can_transition(OrderStatus.CONFIRMED)
        self._set_status(OrderStatus.CONFIRMED)
        self.estimated_delivery = self.created_at + timedelta(days=lead_days)

        self.raise_(
            OrderConfirmed(
                order_id=self.id,
                user_id=self.user_id,
                estimated_delivery=self.estimated_delivery,
            )
        )

    def ship(self) -> None:
        self._assert_can_transition(OrderStatus.SHIPPED)
        self._set_status(OrderStatus.SHIPPED)
        self.raise_(OrderShipped(order_id=self.id, user_id=self.user_id))

    def deliver(self) -> None:
        self._assert_can_transition(OrderStatus.DELIVERED)
        self._set_status(OrderStatus.DELIVERED)
        self.raise_(OrderDelivered(order_id=self.id, user_id=self.user_id))

    def override_status(self, status, estimated_delivery: datetime | None = None) -> None:
        """Set the status directly, ignoring the transition map."""
        self._set_status(OrderStatus(status))
        if estimated_delivery is not None:
            self.estimated_delivery = estimated_delivery

    def update_delivery_date(self, estimated_delivery: datetime) -> None:
        self.estimated_delivery = estimated_delivery
        self.raise_(
            DeliveryDateUpdated(
                order_id=self.id,
                user_id=self.user_id,
                estimated_delivery=estimated_delivery,
            )
        )

    # -------------------------------------------------------------------
    # Cancellation
    # -------------------------------------------------------------------
    def cancel(self, now: datetime, window_hours: int = 24) -> None:
        """Cancel on the customer's behalf, within ``window_hours`` of placement."""
        if not self.can_cancel:
            raise ValidationError({"status": [f"Cannot cancel order in {self.status} state"]})

        if now - self.created_at > timedelta(hours=window_hours):
            raise ValidationError({"cancellation": [CANCELLATION_WINDOW_EXPIRED.format(hours=window_hours)]})

        self.status = OrderStatus.CANCELLED.value
        self.can_cancel = False
