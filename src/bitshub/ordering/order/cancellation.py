"""Customer-initiated order cancellation — command and handler."""

from protean.fields import Identifier
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from bitshub.config import get_settings
from bitshub.domain import bitshub, logger
from bitshub.ordering.order.order import Order
from bitshub.ordering.order.orders import get_order


@bitshub.command(part_of="Order")
class CancelOrder:
    order_id = Identifier(required=True)


@bitshub.command_handler(part_of=Order)
class CancelOrderHandler:
    @handle(CancelOrder)
    def cancel_order(self, command):
        order = get_order(command.order_id)
        order.cancel(now=current_domain.clock.now(), window_hours=get_settings().cancellation_window_hours)
        current_domain.repository_for(Order).add(order)
        logger.info("Order cancelled", order_id=order.id, user_id=order.user_id)
