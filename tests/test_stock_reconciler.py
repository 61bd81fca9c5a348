import pytest

from app.consumers.stock_reconciler import pending_stock_query, reconcile_pending_stock
from app.models.menu import MenuItem
from app.models.order import Order, OrderStatus
from app.models.stock_adjustment import StockAdjustment
from app.services.order_service import create_order, update_order_status


@pytest.mark.asyncio
async def test_reconciles_completed_orders_missing_adjustment(db, menu):
    order = await create_order(items=[{"name": "Tea", "quantity": 3}], total_amount=30)
    # Simulates a completion whose inline stock step never ran
    await Order.filter(id=order.id).update(status=OrderStatus.PICKED_UP)

    assert await reconcile_pending_stock() == 1
    assert (await MenuItem.get(name="Tea")).stock == 7
    assert await StockAdjustment.filter(order_id=order.id).exists()

    # Second pass finds nothing left to do
    assert await reconcile_pending_stock() == 0
    assert (await MenuItem.get(name="Tea")).stock == 7


@pytest.mark.asyncio
async def test_skips_orders_already_adjusted_or_not_completed(db, menu):
    done = await create_order(items=[{"name": "Tea", "quantity": 1}], total_amount=10)
    await update_order_status(done.id, OrderStatus.PICKED_UP)
    await create_order(items=[{"name": "Cake", "quantity": 1}], total_amount=25)

    assert await reconcile_pending_stock() == 0
    assert (await MenuItem.get(name="Tea")).stock == 9
    assert (await MenuItem.get(name="Cake")).stock == 3


@pytest.mark.asyncio
async def test_batch_size_limits_a_pass(db, menu):
    for _ in range(3):
        order = await create_order(items=[{"name": "Tea", "quantity": 1}], total_amount=10)
        await Order.filter(id=order.id).update(status=OrderStatus.PICKED_UP)

    assert await reconcile_pending_stock(batch_size=2) == 2
    assert await reconcile_pending_stock(batch_size=2) == 1
    assert (await MenuItem.get(name="Tea")).stock == 7


@pytest.mark.asyncio
async def test_pending_query_excludes_adjusted_orders_in_the_database(db, menu):
    before = pending_stock_query().sql()
    for _ in range(3):
        order = await create_order(items=[{"name": "Tea", "quantity": 1}], total_amount=10)
        await update_order_status(order.id, OrderStatus.PICKED_UP)

    # Marker ids stay in the database, the statement does not grow with them
    assert pending_stock_query().sql() == before
    assert "stock_adjustments" in before
    assert await pending_stock_query() == []
