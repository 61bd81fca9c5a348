from typing import Optional
from tortoise.expressions import F
from tortoise.transactions import in_transaction
from app.models.order import Order
from app.models.token_counter import TokenCounter

ORDER_TOKEN_SEQUENCE = "order"


async def _current_max_token(conn) -> int:
    last = await Order.filter(token_number__isnull=False).order_by("-token_number").using_db(conn).first()
    return last.token_number if last else 0


async def allocate_token(requested: Optional[int] = None) -> int:
    """
    Returns the next order token.

    The counter row is incremented with a single atomic UPDATE, so concurrent
    callers always receive distinct, increasing values. On first use the
    counter starts from the highest token already stored.
    An explicitly requested token is honoured and the counter is raised to it
    so later allocations stay above it.
    """
    async with in_transaction() as conn:
        counter = await TokenCounter.get_or_none(name=ORDER_TOKEN_SEQUENCE).using_db(conn)
        if counter is None:
            counter, _ = await TokenCounter.get_or_create(
                name=ORDER_TOKEN_SEQUENCE,
                defaults={"value": await _current_max_token(conn)},
                using_db=conn,
            )

        if requested is not None:
            await TokenCounter.filter(id=counter.id, value__lt=requested).using_db(conn).update(value=requested)
            return requested

        await TokenCounter.filter(id=counter.id).using_db(conn).update(value=F("value") + 1)
        counter = await TokenCounter.get(id=counter.id).using_db(conn)
        return counter.value
