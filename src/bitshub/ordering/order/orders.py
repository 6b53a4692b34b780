"""Order lookup shared by the order handlers."""

from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from bitshub.ordering.order.order import Order


def get_order(order_id) -> Order:
    """The order with ``order_id``; a missing order is a rejected intent."""
    order = current_domain.repository_for(Order).get_or_none(order_id)
    if order is None:
        raise ValidationError({"order_id": ["Order not found"]})
    return order
