"""Checkout — command and handler that turn the cart into an order."""

from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, Identifier, List, String, ValueObject
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from bitshub.config import get_settings
from bitshub.domain import bitshub, logger
from bitshub.identity.user import ADMIN_USER_ID, CURRENT_SESSION_ID, Address, Session, User, admin_user
from bitshub.ordering.cart.cart import SESSION_CART_ID, Cart, CartItem
from bitshub.ordering.order.order import Order, OrderStatus


class CheckoutOutcome(Enum):
    LOGIN_REQUIRED = "login_required"
    ADDRESS_REQUIRED = "address_required"
    PLACED = "placed"


@bitshub.command(part_of="Order")
class PlaceOrder:
    """Check out the cart to ``address_id``.

    Without an address id the user's default address is used.
    """

    address_id = Identifier()


@bitshub.command(part_of="Order")
class RestoreOrder:
    """Put a previously persisted order back as the newest in the history."""

    order_id = Identifier(required=True)
    user_id = Identifier(required=True)
    items = List(content_type=ValueObject(CartItem))
    total = Float(required=True, min_value=0)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    created_at = DateTime(required=True)
    delivery_address = ValueObject(Address, required=True)
    payment_method = String(required=True)
    estimated_delivery = DateTime()
    can_cancel = Boolean(default=True)


def _signed_in_user() -> User | None:
    session = current_domain.repository_for(Session).get_or_none(CURRENT_SESSION_ID)
    if session is None:
        return None
    if session.user_id == ADMIN_USER_ID:
        return admin_user(session)
    return current_domain.repository_for(User).get_or_none(session.user_id)


@bitshub.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        user = _signed_in_user()
        if user is None:
            return CheckoutOutcome.LOGIN_REQUIRED

        cart_repo = current_domain.repository_for(Cart)
        cart = cart_repo.get(SESSION_CART_ID)
        if not cart.items:
            raise ValidationError({"cart": ["Your cart is empty"]})

        if not user.addresses:
            return CheckoutOutcome.ADDRESS_REQUIRED

        address_id = command.address_id or user.default_address.id
        address = user.find_address(address_id)
        if address is None:
            raise ValidationError({"address_id": [f"Address {address_id} not found"]})

        order = Order.place(
            user_id=user.id,
            cart=cart,
            delivery_address=address,
            payment_method=get_settings().payment_method,
            now=current_domain.clock.now(),
        )
        current_domain.repository_for(Order).add(order)

        cart.clear()
        cart_repo.add(cart)

        logger.info("Order placed", order_id=order.id, user_id=user.id, total=order.total)
        return CheckoutOutcome.PLACED

    @handle(RestoreOrder)
    def restore_order(self, command):
        data = dict(command.payload)
        data["id"] = data.pop("order_id")
        current_domain.repository_for(Order).add(Order(**data))
