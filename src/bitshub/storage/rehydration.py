"""Startup rehydration — turn stored slices back into a sequence of intents.

Replaying intents instead of assigning slices wholesale keeps every record
on the same validation path as a live change. The sequence is built so that
replaying it on a freshly seeded state reproduces the persisted state.
"""

import json
from collections.abc import Callable
from typing import Any

from protean.exceptions import ValidationError
from protean.utils.reflection import data_fields

from bitshub.catalogue.management import AddProduct, DeleteProduct, UpdateProduct
from bitshub.catalogue.product import Product, ProductSnapshot
from bitshub.domain import logger
from bitshub.identity.registration import RestoreUser
from bitshub.identity.session import RestoreSession
from bitshub.intents import Intent
from bitshub.notifications.management import AppendNotification
from bitshub.ordering.cart.cart import CartItem
from bitshub.ordering.cart.items import AddToCart, UpdateCartQuantity
from bitshub.ordering.order.creation import RestoreOrder
from bitshub.storage.kv_port import KeyValueStore
from bitshub.storage.slices import (
    CART_KEY,
    CURRENT_USER_KEY,
    NOTIFICATIONS_KEY,
    ORDERS_KEY,
    PRODUCTS_KEY,
    USERS_KEY,
)
from bitshub.utils.casing import snake_keys


def _load(store: KeyValueStore, key: str) -> Any | None:
    raw = store.get(key)
    if raw is None:
        return None
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        logger.warning("Ignoring unreadable slice", key=key)
        return None


def _without_nulls(value: Any) -> Any:
    """A stored ``null`` means the field was never set."""
    if isinstance(value, dict):
        return {k: _without_nulls(v) for k, v in value.items() if v is not None}
    if isinstance(value, list):
        return [_without_nulls(v) for v in value]
    return value


def _entries(store: KeyValueStore, key: str) -> list[dict] | None:
    """Records stored under ``key`` with snake_case fields; None when the key is absent or unusable."""
    data = _load(store, key)
    if data is None:
        return None
    if not isinstance(data, list):
        logger.warning("Ignoring slice that is not a list", key=key)
        return None

    entries = []
    for entry in data:
        if not isinstance(entry, dict):
            logger.warning("Skipping malformed record", key=key)
            continue
        entries.append(snake_keys(_without_nulls(entry)))
    return entries


def _replay(key: str, entries: list[dict], build: Callable[[dict], list[Intent]]) -> list[Intent]:
    intents: list[Intent] = []
    for entry in entries:
        try:
            intents.extend(build(entry))
        except ValidationError as exc:
            logger.warning("Skipping malformed record", key=key, errors=exc.messages)
    return intents


def _command(command_cls, data: dict, **identity) -> Intent:
    known = data_fields(command_cls)
    payload = {k: v for k, v in data.items() if k in known}
    payload.update(identity)
    return command_cls(**payload)


def _restore_user(entry: dict) -> list[Intent]:
    if not isinstance(entry.get("addresses"), list):
        entry = {**entry, "addresses": []}
    return [_command(RestoreUser, entry, user_id=entry.get("id"))]


def _restore_cart_item(entry: dict) -> list[Intent]:
    item = CartItem(**entry)
    intents: list[Intent] = [AddToCart(product=item.product)]
    if item.quantity > 1:
        intents.append(UpdateCartQuantity(product_id=item.product.id, quantity=item.quantity))
    return intents


def _restore_order(entry: dict) -> list[Intent]:
    return [_command(RestoreOrder, entry, order_id=entry.get("id"))]


def _restore_notification(entry: dict) -> list[Intent]:
    return [_command(AppendNotification, entry, notification_id=entry.get("id"))]


def _snapshots(entries: list[dict]) -> list[ProductSnapshot]:
    snapshots = []
    for entry in entries:
        try:
            snapshots.append(ProductSnapshot(**entry))
        except ValidationError as exc:
            logger.warning("Skipping malformed record", key=PRODUCTS_KEY, errors=exc.messages)
    return snapshots


def _catalogue_intents(stored: list[ProductSnapshot], seed: list[Product]) -> list[Intent]:
    seed_ids = {p.id for p in seed}
    stored_ids = {p.id for p in stored}

    intents: list[Intent] = []
    updated: set[str] = set()
    for product in stored:
        if product.id in seed_ids and product.id not in updated:
            intents.append(UpdateProduct(product=product))
            updated.add(product.id)
        else:
            intents.append(AddProduct(product=product))

    intents.extend(DeleteProduct(product_id=p.id) for p in seed if p.id not in stored_ids)
    return intents


def rehydration_intents(store: KeyValueStore, seed: list[Product]) -> list[Intent]:
    """Intents that rebuild the persisted state on top of the ``seed`` catalogue."""
    intents: list[Intent] = []

    intents.extend(_replay(USERS_KEY, _entries(store, USERS_KEY) or [], _restore_user))

    current_user = _load(store, CURRENT_USER_KEY)
    if isinstance(current_user, dict) and current_user.get("id"):
        intents.append(RestoreSession(user_id=str(current_user["id"])))

    intents.extend(_replay(CART_KEY, _entries(store, CART_KEY) or [], _restore_cart_item))

    # Stored newest first; each restored order becomes the newest
    orders = list(reversed(_entries(store, ORDERS_KEY) or []))
    intents.extend(_replay(ORDERS_KEY, orders, _restore_order))

    intents.extend(_replay(NOTIFICATIONS_KEY, _entries(store, NOTIFICATIONS_KEY) or [], _restore_notification))

    products = _entries(store, PRODUCTS_KEY)
    if products is not None:
        intents.extend(_catalogue_intents(_snapshots(products), seed))

    logger.info("Rehydration planned", intents=len(intents))
    return intents
