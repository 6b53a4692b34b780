"""Storefront — owns the current snapshot and is the only way to change it.

A rendering layer reads ``state``, sends intents through ``dispatch`` and
subscribes to be told when the snapshot changes. Time comes from an
injectable clock so that transitions depending on it (cancellation window,
delivery estimates, the "added to cart" toast) are deterministic under test.
"""

from collections.abc import Callable, Iterable
from dataclasses import replace
from datetime import UTC, datetime

import structlog

from bitshub.catalogue.product import Product, load_seed_catalogue
from bitshub.domain import init_domain, logger
from bitshub.intents import Intent
from bitshub.reducer import reduce
from bitshub.state import StoreState
from bitshub.storage.kv_port import KeyValueStore
from bitshub.storage.mirror import PersistenceMirror
from bitshub.storage.rehydration import rehydration_intents
from bitshub.ui import UiState
from bitshub.utils.logging import configure_logging

Clock = Callable[[], datetime]
Listener = Callable[[StoreState, StoreState], None]


def utcnow() -> datetime:
    return datetime.now(UTC)


class Storefront:
    def __init__(self, state: StoreState | None = None, clock: Clock = utcnow):
        self._state = state if state is not None else StoreState()
        self._clock = clock
        self._listeners: list[Listener] = []

    @classmethod
    def open(
        cls,
        store: KeyValueStore,
        clock: Clock = utcnow,
        seed: list[Product] | None = None,
    ) -> "Storefront":
        """Load the storefront persisted in ``store`` and keep mirroring it there.

        Starts from the seed catalogue, replays whatever storage holds on top
        of it, and only then attaches the mirror, so rehydration itself never
        writes back.
        """
        if not structlog.is_configured():
            configure_logging()
        domain = init_domain()

        with domain.domain_context():
            seed = seed if seed is not None else load_seed_catalogue()
            intents = rehydration_intents(store, seed)

        storefront = cls(StoreState(products=list(seed)), clock=clock)
        storefront.hydrate(intents)
        PersistenceMirror(store).attach(storefront)
        logger.info(
            "Storefront opened",
            products=len(storefront.state.products),
            users=len(storefront.state.users),
            orders=len(storefront.state.orders),
        )
        return storefront

    @property
    def state(self) -> StoreState:
        return self._state

    def now(self) -> datetime:
        return self._clock()

    def dispatch(self, intent: Intent) -> StoreState:
        """Apply ``intent`` and notify subscribers with the previous and new snapshots."""
        previous = self._state
        self._state = reduce(previous, intent, self._clock())
        for listener in list(self._listeners):
            listener(previous, self._state)
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener``; the returned callable unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def hydrate(self, intents: Iterable[Intent]) -> None:
        """Replay ``intents`` without notifying subscribers, then reset transient UI state."""
        state = self._state
        now = self._clock()
        for intent in intents:
            state = reduce(state, intent, now)
        self._state = replace(state, ui=UiState())

    def added_to_cart_visible(self) -> bool:
        return self._state.ui.shows_added_to_cart(self._clock())
