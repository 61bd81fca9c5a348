import asyncio
import pytest

from app.models.order import Order
from app.models.token_counter import TokenCounter
from app.services.token_service import ORDER_TOKEN_SEQUENCE, allocate_token


@pytest.mark.asyncio
async def test_tokens_are_sequential(db):
    assert [await allocate_token() for _ in range(3)] == [1, 2, 3]


@pytest.mark.asyncio
async def test_counter_starts_after_existing_orders(db):
    """Orders stored before the counter existed keep their tokens below new ones."""
    await Order.create(token_number=41, items=[{"name": "Tea", "quantity": 1}])

    assert await allocate_token() == 42


@pytest.mark.asyncio
async def test_requested_token_raises_counter(db):
    await allocate_token()

    assert await allocate_token(requested=100) == 100
    assert await allocate_token() == 101
    # A lower explicit token never winds the counter back
    assert await allocate_token(requested=5) == 5
    assert await allocate_token() == 102


@pytest.mark.asyncio
async def test_concurrent_allocations_are_unique(db):
    tokens = await asyncio.gather(*(allocate_token() for _ in range(20)))

    assert sorted(tokens) == list(range(1, 21))
    counter = await TokenCounter.get(name=ORDER_TOKEN_SEQUENCE)
    assert counter.value == 20
