"""Logging is configured when a storefront opens, never on import."""

import os
import subprocess
import sys
import textwrap

from bitshub.storage.memory_store import MemoryStore
from bitshub.store import Storefront

_IMPORT_ONLY = textwrap.dedent(
    """
    import logging

    root = logging.getLogger()
    root.addHandler(logging.NullHandler())
    before = list(root.handlers)

    import bitshub.domain
    import bitshub.reducer
    import structlog

    assert root.handlers == before, root.handlers
    assert not structlog.is_configured()
    """
)


class TestLoggingSetup:
    def test_importing_the_core_leaves_logging_alone(self):
        env = {**os.environ, "PYTHONPATH": os.pathsep.join(sys.path)}
        result = subprocess.run(
            [sys.executable, "-c", _IMPORT_ONLY], env=env, capture_output=True, text=True, check=False
        )
        assert result.returncode == 0, result.stderr

    def test_open_configures_logging_when_unconfigured(self, monkeypatch):
        calls = []
        monkeypatch.setattr("bitshub.store.structlog.is_configured", lambda: False)
        monkeypatch.setattr("bitshub.store.configure_logging", lambda: calls.append("configured"))

        Storefront.open(MemoryStore())

        assert calls == ["configured"]

    def test_open_keeps_existing_configuration(self, monkeypatch):
        calls = []
        monkeypatch.setattr("bitshub.store.structlog.is_configured", lambda: True)
        monkeypatch.setattr("bitshub.store.configure_logging", lambda: calls.append("configured"))

        Storefront.open(MemoryStore())

        assert calls == []
