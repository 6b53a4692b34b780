"""The reducer, the single place where state transitions happen.

``reduce`` never changes the snapshot it is given. A UI intent is applied to
a copy of ``ui``. A command is processed by the domain against a working copy
of the snapshot: the aggregates are loaded into fresh stores, the command
handler and any event handlers run, and the next snapshot is read back. A
rejected intent yields the previous domain state with the rejection recorded
in ``ui.errors``.
"""

from dataclasses import replace
from datetime import datetime, timedelta
from typing import Any

from protean import UnitOfWork
from protean.core.command import BaseCommand
from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from bitshub.catalogue.product import Product
from bitshub.config import get_settings
from bitshub.domain import init_domain, logger
from bitshub.identity.addresses import AddAddress
from bitshub.identity.registration import REGISTERED_NOTICE, Register
from bitshub.identity.session import Login, Logout
from bitshub.identity.user import CURRENT_SESSION_ID, Session, User
from bitshub.intents import Intent, intent_type
from bitshub.notifications.notification import Notification
from bitshub.ordering.cart.cart import SESSION_CART_ID, Cart
from bitshub.ordering.cart.items import AddToCart
from bitshub.ordering.order.creation import CheckoutOutcome, PlaceOrder
from bitshub.ordering.order.order import Order
from bitshub.state import StoreState
from bitshub.ui import Surface, UiIntent, UiState
from bitshub.utils.logging import add_context, clear_context


class FrozenClock:
    """A domain clock that always reads the same instant."""

    def __init__(self, now: datetime):
        self._now = now

    def now(self) -> datetime:
        return self._now


def _fresh(element):
    data = element.to_dict()
    data.pop("_version", None)
    return type(element)(**data)


def _reset_stores() -> None:
    for provider in current_domain.providers.values():
        provider._data_reset()

    for broker in current_domain.brokers.values():
        broker._data_reset()

    current_domain.event_store.store._data_reset()


def _load(state: StoreState) -> None:
    with UnitOfWork():
        for product in state.products:
            current_domain.repository_for(Product).add(_fresh(product))
        current_domain.repository_for(Cart).add(_fresh(state.cart))
        for user in state.users.values():
            current_domain.repository_for(User).add(_fresh(user))
        if state.session is not None:
            current_domain.repository_for(Session).add(_fresh(state.session))
        # Stored oldest first so a new order lands at the newest end
        for order in reversed(state.orders):
            current_domain.repository_for(Order).add(_fresh(order))
        for notification in state.notifications:
            current_domain.repository_for(Notification).add(_fresh(notification))


def _all(aggregate_cls) -> list:
    return current_domain.repository_for(aggregate_cls).query.limit(None).all().items


def _read(ui: UiState) -> StoreState:
    return StoreState(
        products=_all(Product),
        cart=current_domain.repository_for(Cart).get(SESSION_CART_ID),
        users={user.id: user for user in _all(User)},
        session=current_domain.repository_for(Session).get_or_none(CURRENT_SESSION_ID),
        orders=list(reversed(_all(Order))),
        notifications=_all(Notification),
        ui=ui,
    )


def _process(state: StoreState, command: BaseCommand, now: datetime) -> tuple[StoreState, Any]:
    domain = init_domain()
    with domain.domain_context():
        previous_clock = domain.clock
        domain.clock = FrozenClock(now)
        try:
            _reset_stores()
            _load(state)
            result = current_domain.process(command, asynchronous=False)
            return _read(state.ui), result
        finally:
            domain.clock = previous_clock


def _reflect(command: BaseCommand, result: Any, ui: UiState, now: datetime) -> UiState:
    """Point the UI at whatever the accepted ``command`` calls for next."""
    match command:
        case AddToCart():
            ui.added_to_cart_until = now + timedelta(seconds=get_settings().added_to_cart_seconds)
        case Register():
            ui.surface = Surface.LOGIN
            ui.notice = REGISTERED_NOTICE
        case Login():
            ui.surface = None
            ui.notice = None
        case Logout():
            ui.surface = None
        case AddAddress() if result is not None and ui.surface == Surface.ADDRESS_FORM.value:
            # Back to checkout with the new address selected
            ui.selected_address_id = result
            ui.surface = Surface.CART
        case PlaceOrder():
            if result == CheckoutOutcome.LOGIN_REQUIRED:
                ui.surface = Surface.LOGIN
            elif result == CheckoutOutcome.ADDRESS_REQUIRED:
                ui.surface = Surface.ADDRESS_FORM
            elif result == CheckoutOutcome.PLACED:
                ui.selected_address_id = None
                ui.surface = Surface.PROFILE
    return ui


def _error_messages(exc: ValidationError) -> dict[str, list[str]]:
    messages = exc.messages
    if isinstance(messages, dict):
        return {key: list(value) if isinstance(value, list) else [str(value)] for key, value in messages.items()}
    if isinstance(messages, list):
        return {"_entity": [str(m) for m in messages]}
    return {"_entity": [str(messages)]}


def reduce(state: StoreState, intent: Intent, now: datetime) -> StoreState:
    """Apply ``intent`` to ``state`` at time ``now`` and return the next snapshot."""
    add_context(intent_type=intent_type(intent))
    try:
        ui = state.ui.model_copy(update={"errors": {}})

        if isinstance(intent, UiIntent):
            return replace(state, ui=intent.apply(ui, state))

        if not isinstance(intent, BaseCommand):
            logger.warning("Ignoring unknown intent")
            return state

        if isinstance(intent, PlaceOrder) and intent.address_id is None and ui.selected_address_id:
            # The address picked during checkout
            intent = PlaceOrder(address_id=ui.selected_address_id)

        try:
            processed, result = _process(state, intent, now)
        except ValidationError as exc:
            errors = _error_messages(exc)
            logger.info("Intent rejected", errors=errors)
            return replace(state, ui=state.ui.model_copy(update={"errors": errors}))

        logger.debug("Intent applied")
        return replace(processed, ui=_reflect(intent, result, ui, now))
    finally:
        clear_context("intent_type")
