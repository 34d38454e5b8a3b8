from unittest.mock import AsyncMock, MagicMock

import pytest


# ── Patch settings before any other import ──────────────────────────────────
@pytest.fixture(autouse=True)
def _patch_settings(monkeypatch):
    monkeypatch.setenv("DEBUG", "true")
    from budget_ledger.core.config import settings
    monkeypatch.setattr(settings, "debug", True)
    monkeypatch.setattr(settings, "log_level", "DEBUG")


@pytest.fixture
def mock_db():
    """Create a mock async database session."""
    db = AsyncMock()
    db.flush = AsyncMock()
    db.add = MagicMock()
    db.delete = AsyncMock()
    db.get = AsyncMock(return_value=None)
    db.execute = AsyncMock()
    db.commit = AsyncMock()
    db.rollback = AsyncMock()
    db.refresh = AsyncMock()
    return db


def scalar_result(value):
    """Mock of a Result whose scalar accessors return ``value``."""
    result = MagicMock()
    result.scalar.return_value = value
    result.scalar_one_or_none.return_value = value
    return result


def scalars_result(items):
    result = MagicMock()
    result.scalars.return_value.all.return_value = items
    return result
