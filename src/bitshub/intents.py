"""The closed set of intents the storefront accepts.

A serialised intent (for instance one posted from a rendering layer) names
its kind in a ``type`` tag; ``parse_intent`` turns it back into the command
or UI intent the tag stands for.
"""

from typing import Any

from protean.core.command import BaseCommand
from protean.exceptions import ValidationError
from pydantic import ValidationError as SchemaError

from bitshub.catalogue.management import AddProduct, DeleteProduct, UpdateProduct
from bitshub.catalogue.search import SelectCategory, SetSearchQuery
from bitshub.domain import logger
from bitshub.identity.addresses import AddAddress, DeleteAddress, SetDefaultAddress, UpdateAddress
from bitshub.identity.registration import Register, RestoreUser
from bitshub.identity.session import Login, Logout, RestoreSession
from bitshub.notifications.management import AppendNotification, MarkNotificationRead
from bitshub.ordering.cart.items import AddToCart, ClearCart, RemoveFromCart, UpdateCartQuantity
from bitshub.ordering.order.cancellation import CancelOrder
from bitshub.ordering.order.creation import PlaceOrder, RestoreOrder
from bitshub.ordering.order.fulfillment import (
    AcceptOrder,
    DeliverOrder,
    SetOrderStatus,
    ShipOrder,
    UpdateDeliveryDate,
)
from bitshub.ui import Navigate, UiIntent
from bitshub.utils.casing import snake_keys

Intent = BaseCommand | UiIntent

INTENT_TYPES: dict[str, type] = {
    # Catalogue
    "add_product": AddProduct,
    "update_product": UpdateProduct,
    "delete_product": DeleteProduct,
    "set_search_query": SetSearchQuery,
    "select_category": SelectCategory,
    # Cart
    "add_to_cart": AddToCart,
    "update_cart_quantity": UpdateCartQuantity,
    "remove_from_cart": RemoveFromCart,
    "clear_cart": ClearCart,
    # Identity
    "register": Register,
    "login": Login,
    "logout": Logout,
    "restore_user": RestoreUser,
    "restore_session": RestoreSession,
    "add_address": AddAddress,
    "update_address": UpdateAddress,
    "delete_address": DeleteAddress,
    "set_default_address": SetDefaultAddress,
    # Orders
    "place_order": PlaceOrder,
    "restore_order": RestoreOrder,
    "cancel_order": CancelOrder,
    "accept_order": AcceptOrder,
    "ship_order": ShipOrder,
    "deliver_order": DeliverOrder,
    "set_order_status": SetOrderStatus,
    "update_delivery_date": UpdateDeliveryDate,
    # Notifications
    "append_notification": AppendNotification,
    "mark_notification_read": MarkNotificationRead,
    # UI
    "navigate": Navigate,
}

_TAGS = {intent_cls: tag for tag, intent_cls in INTENT_TYPES.items()}


def intent_type(intent: Any) -> str:
    """The ``type`` tag of ``intent``, or its class name when it has none."""
    return _TAGS.get(type(intent), type(intent).__name__)


def parse_intent(data: dict[str, Any]) -> Intent | None:
    """Build the intent named by ``data["type"]``.

    Returns None for an unknown tag, which callers skip. Raises
    ``ValidationError`` when the payload does not fit the intent.
    """
    tag = data.get("type")
    intent_cls = INTENT_TYPES.get(tag)
    if intent_cls is None:
        logger.warning("Ignoring unknown intent", intent_type=tag)
        return None

    payload = snake_keys({k: v for k, v in data.items() if k != "type"})
    if issubclass(intent_cls, UiIntent):
        try:
            return intent_cls.model_validate(payload)
        except SchemaError as exc:
            raise ValidationError(
                {".".join(str(p) for p in err["loc"]) or tag: [err["msg"]] for err in exc.errors()}
            ) from exc
    return intent_cls(**payload)
