"""Administrative order handling — commands and handler.

Accept, ship and deliver move an order one step along the lifecycle and
notify its owner. ``SetOrderStatus`` is the manual override used from the
admin panel's status selector.
"""

from protean.fields import DateTime, Identifier, String
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from bitshub.config import get_settings
from bitshub.domain import bitshub, logger
from bitshub.ordering.order.order import Order, OrderStatus
from bitshub.ordering.order.orders import get_order


@bitshub.command(part_of="Order")
class AcceptOrder:
    order_id = Identifier(required=True)


@bitshub.command(part_of="Order")
class ShipOrder:
    order_id = Identifier(required=True)


@bitshub.command(part_of="Order")
class DeliverOrder:
    order_id = Identifier(required=True)


@bitshub.command(part_of="Order")
class SetOrderStatus:
    """Force an order into ``status``, optionally with a new delivery estimate."""

    order_id = Identifier(required=True)
    status = String(required=True, choices=OrderStatus)
    estimated_delivery = DateTime()


@bitshub.command(part_of="Order")
class UpdateDeliveryDate:
    order_id = Identifier(required=True)
    estimated_delivery = DateTime(required=True)


@bitshub.command_handler(part_of=Order)
class FulfillmentHandler:
    @handle(AcceptOrder)
    def accept_order(self, command):
        order = get_order(command.order_id)
        order.accept(lead_days=get_settings().delivery_lead_days)
        current_domain.repository_for(Order).add(order)
        logger.info("Order accepted", order_id=order.id, estimated_delivery=order.estimated_delivery)

    @handle(ShipOrder)
    def ship_order(self, command):
        order = get_order(command.order_id)
        order.ship()
        current_domain.repository_for(Order).add(order)
        logger.info("Order shipped", order_id=order.id)

    @handle(DeliverOrder)
    def deliver_order(self, command):
        order = get_order(command.order_id)
        order.deliver()
        current_domain.repository_for(Order).add(order)
        logger.info("Order delivered", order_id=order.id)

    @handle(SetOrderStatus)
    def set_order_status(self, command):
        order = get_order(command.order_id)
        previous = order.status
        order.override_status(command.status, estimated_delivery=command.estimated_delivery)
        current_domain.repository_for(Order).add(order)
        logger.info("Order status overridden", order_id=order.id, previous=previous, status=order.status)

    @handle(UpdateDeliveryDate)
    def update_delivery_date(self, command):
        order = get_order(command.order_id)
        order.update_delivery_date(command.estimated_delivery)
        current_domain.repository_for(Order).add(order)
