from decimal import Decimal
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from app.core.db import close_db, init_db
from app.events.broadcaster import Broadcaster
from app.main import app
from app.models.menu import MenuCategory, MenuItem

TEST_DB_URL = "sqlite://:memory:"


@pytest_asyncio.fixture
async def db():
    """Fresh in-memory database with all tables for each test."""
    await init_db(TEST_DB_URL)
    yield
    await close_db()


@pytest.fixture
def broadcaster():
    return Broadcaster(max_queue=50)


@pytest_asyncio.fixture
async def observer(broadcaster):
    """A connected client backed by a mock socket; read events from observer.queue."""
    return await broadcaster.subscribe(AsyncMock())


@pytest.fixture
def received(observer):
    """Callable returning (event, data) pairs queued for `observer` since the last call."""
    def _drain():
        messages = []
        while not observer.queue.empty():
            message = observer.queue.get_nowait()
            messages.append((message["event"], message["data"]))
        return messages
    return _drain


@pytest_asyncio.fixture
async def client(db, broadcaster):
    """HTTP client bound to the app, with the test broadcaster installed."""
    original = app.state.broadcaster
    app.state.broadcaster = broadcaster
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.state.broadcaster = original


@pytest_asyncio.fixture
async def menu(db):
    """A small catalog keyed by item name."""
    items = [
        ("Tea", Decimal("10.00"), MenuCategory.DRINKS, 10),
        ("Cake", Decimal("25.00"), MenuCategory.DESSERTS, 3),
        ("Samosa", Decimal("15.00"), MenuCategory.SNACKS, 1),
    ]
    created = {}
    for name, price, category, stock in items:
        created[name] = await MenuItem.create(name=name, price=price, category=category, stock=stock)
    return created
