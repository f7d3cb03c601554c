"""
Pytest fixtures for smartstock backend tests.

Every test gets its own in-memory inventory driven by a FixedClock, so ledger
timestamps and analytics windows are reproducible.
"""

from datetime import datetime, timedelta

import pytest

from smartstock import create_app
from smartstock.context import build_context
from smartstock.time_utils import FixedClock

NOW = datetime(2024, 6, 1, 12, 0, 0)


@pytest.fixture
def clock():
    return FixedClock(NOW)


@pytest.fixture
def alerts():
    """Reorder alerts raised during the test, in order."""
    return []


@pytest.fixture
def ctx(clock, alerts):
    return build_context(clock=clock, observers=[alerts.append])


@pytest.fixture
def app(ctx):
    app = create_app({"TESTING": True, "SMARTSTOCK_SEED_DEMO_DATA": False}, context=ctx)
    yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def laptop(ctx):
    """Electronics product with 50 units at 10.00, threshold 10."""
    return ctx.stock.add_product("Laptop", "Electronics", 50, 10, 10.0, "TechCorp")


def days_ago(days: float) -> datetime:
    return NOW - timedelta(days=days)


def record_at(clock, when: datetime, operation, *args, **kwargs):
    """Run a stock operation with the clock pinned to ``when``, then restore NOW."""
    clock.set(when)
    try:
        return operation(*args, **kwargs)
    finally:
        clock.set(NOW)
