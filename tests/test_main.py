"""
Tests for the server startup hook.
"""
import logging

import pytest

import main
from app.core.logging import LOG_FORMAT


@pytest.fixture
def root_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


def test_startup_configures_logging_and_store(tmp_path, monkeypatch, root_logging):
    """Serving `main:app` directly still gets the log format and the store."""
    db_path = tmp_path / "db" / "exchanges.db"
    monkeypatch.setattr(main.settings, "DATABASE_PATH", str(db_path))
    monkeypatch.setattr(main.settings, "LOG_LEVEL", "DEBUG")

    main.on_startup()

    assert db_path.exists()
    assert main.app.state.session_factory is not None
    assert root_logging.level == logging.DEBUG
    assert any(h.formatter is not None and h.formatter._fmt == LOG_FORMAT for h in root_logging.handlers)
