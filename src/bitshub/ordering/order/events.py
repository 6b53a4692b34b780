"""Domain events for the Order aggregate."""

from protean.fields import DateTime, Identifier

from bitshub.domain import bitshub


@bitshub.event(part_of="Order")
class OrderConfirmed:
    """An administrator accepted a pending order."""

    __version__ = 1

    order_id = Identifier(required=True)
    user_id = Identifier(required=True)
    estimated_delivery = DateTime(required=True)


@bitshub.event(part_of="Order")
class OrderShipped:
    """The order left the warehouse."""

    __version__ = 1

    order_id = Identifier(required=True)
    user_id = Identifier(required=True)


@bitshub.event(part_of="Order")
class OrderDelivered:
    """The order reached the customer."""

    __version__ = 1

    order_id = Identifier(required=True)
    user_id = Identifier(required=True)


@bitshub.event(part_of="Order")
class DeliveryDateUpdated:
    """An administrator changed the estimated delivery date."""

    __version__ = 1

    order_id = Identifier(required=True)
    user_id = Identifier(required=True)
    estimated_delivery = DateTime(required=True)
