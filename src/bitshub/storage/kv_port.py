"""Key/value storage port — the local-storage analogue the mirror writes to."""

from abc import ABC, abstractmethod


class KeyValueStore(ABC):
    """Abstract interface for text-valued key/value storage adapters."""

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Return the stored value, or None when the key is absent."""
        ...

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``, replacing anything already there."""
        ...

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove ``key``. Removing an absent key is not an error."""
        ...
