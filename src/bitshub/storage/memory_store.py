"""In-memory key/value adapter — keeps values in a dict for tests and demos."""

from bitshub.storage.kv_port import KeyValueStore


class MemoryStore(KeyValueStore):
    """Key/value adapter that records values in memory for test assertions."""

    def __init__(self, initial: dict[str, str] | None = None):
        self.data: dict[str, str] = dict(initial or {})
        self.writes: list[str] = []
        self.should_fail = False

    def configure(self, should_fail: bool = False):
        """Make every write raise, the way a full disk or quota would."""
        self.should_fail = should_fail

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        if self.should_fail:
            raise OSError(f"Storage quota exceeded while writing {key}")
        self.data[key] = value
        self.writes.append(key)

    def delete(self, key: str) -> None:
        if self.should_fail:
            raise OSError(f"Storage unavailable while removing {key}")
        self.data.pop(key, None)
        self.writes.append(key)

    def reset(self):
        """Clear stored values and the write log."""
        self.data.clear()
        self.writes.clear()
        self.should_fail = False
