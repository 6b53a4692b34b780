"""Persistence mirror — writes changed slices to storage after every transition.

Writes are full overwrites of a slice and are not acknowledged: if storage
refuses one, the failure is logged and the in-memory state carries on. The
next change to that slice writes it again.
"""

from typing import TYPE_CHECKING

from bitshub.domain import logger
from bitshub.state import StoreState
from bitshub.storage.kv_port import KeyValueStore
from bitshub.storage.slices import SLICE_KEYS, serialize_slices

if TYPE_CHECKING:
    from bitshub.store import Storefront


class PersistenceMirror:
    def __init__(self, store: KeyValueStore):
        self.store = store
        self._written: dict[str, str | None] = {}

    def attach(self, storefront: "Storefront") -> None:
        """Start mirroring ``storefront``, first bringing storage in line with its state."""
        self._written = {key: self.store.get(key) for key in SLICE_KEYS}
        self.sync(storefront.state)
        storefront.subscribe(self.on_change)

    def on_change(self, previous: StoreState, current: StoreState) -> None:
        self.sync(current)

    def sync(self, state: StoreState) -> None:
        for key, value in serialize_slices(state).items():
            if self._written.get(key) == value:
                continue
            try:
                if value is None:
                    self.store.delete(key)
                else:
                    self.store.set(key, value)
            except OSError:
                logger.error("Failed to persist slice", key=key, exc_info=True)
                continue
            self._written[key] = value
            logger.debug("Slice persisted", key=key)
