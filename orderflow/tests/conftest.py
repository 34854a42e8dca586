"""Shared fixtures: a throwaway SQLite database per test."""

import asyncio

import pytest
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import NullPool

from config import get_settings
from orderflow.app import db
from orderflow.app.providers import email_stub


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def engine(tmp_path):
    # NullPool: no connection outlives the event loop that opened it, so the
    # same database works from anyio tests, asyncio.run and TestClient.
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'orders.db'}", poolclass=NullPool
    )
    asyncio.run(db.init_models(engine))
    db.use_engine(engine)
    yield engine
    asyncio.run(db.dispose())


@pytest.fixture(autouse=True)
def _reset_state():
    get_settings.cache_clear()
    email_stub.SENT.clear()
    yield
    get_settings.cache_clear()
