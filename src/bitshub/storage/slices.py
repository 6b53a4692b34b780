"""Storage layout — one key per state slice, each a JSON snapshot.

Field names are camelCase, matching the local-storage layout, so existing
snapshots load unchanged.
"""

import json

from bitshub.state import StoreState
from bitshub.utils.casing import camel_keys

USERS_KEY = "bitshub_users"
CURRENT_USER_KEY = "bitshub_current_user"
CART_KEY = "bitshub_cart"
ORDERS_KEY = "bitshub_orders"
NOTIFICATIONS_KEY = "bitshub_notifications"
PRODUCTS_KEY = "bitshub_products"

SLICE_KEYS = (
    USERS_KEY,
    CURRENT_USER_KEY,
    CART_KEY,
    ORDERS_KEY,
    NOTIFICATIONS_KEY,
    PRODUCTS_KEY,
)

# Storage bookkeeping that never leaves the process
_INTERNAL_FIELDS = ("listing_id", "_version")


def record_of(element) -> dict:
    """The stored form of an aggregate or value object."""
    data = element.to_dict()
    for name in _INTERNAL_FIELDS:
        data.pop(name, None)
    return camel_keys(data)


def _dumps(value) -> str:
    return json.dumps(value, ensure_ascii=False)


def serialize_slices(state: StoreState) -> dict[str, str | None]:
    """Snapshot every persisted slice. ``None`` means the key should be absent."""
    current_user = state.current_user
    return {
        USERS_KEY: _dumps([record_of(user) for user in state.users.values()]),
        CURRENT_USER_KEY: _dumps(record_of(current_user)) if current_user else None,
        CART_KEY: _dumps([record_of(item) for item in state.cart.items]),
        ORDERS_KEY: _dumps([record_of(order) for order in state.orders]),
        NOTIFICATIONS_KEY: _dumps([record_of(notification) for notification in state.notifications]),
        PRODUCTS_KEY: _dumps([record_of(product) for product in state.products]),
    }
