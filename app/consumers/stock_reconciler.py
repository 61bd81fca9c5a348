import asyncio
import logging
from typing import Optional
from tortoise.expressions import Subquery
from app.core.config import BATCH_SIZE, POLLING_INTERVAL
from app.core.db import close_db, init_db
from app.events.broadcaster import Broadcaster
from app.models.order import Order, OrderStatus
from app.models.stock_adjustment import StockAdjustment
from app.services.order_service import apply_stock_for_order

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
log = logging.getLogger("stock_reconciler")


def pending_stock_query(batch_size: int = BATCH_SIZE):
    """Completed orders with no StockAdjustment marker, oldest first."""
    adjusted = Subquery(StockAdjustment.all().values("order_id"))
    return (
        Order.filter(status=OrderStatus.PICKED_UP)
        .exclude(id__in=adjusted)
        .order_by("created_at")
        .limit(batch_size)
    )


async def reconcile_pending_stock(batch_size: int = BATCH_SIZE, broadcaster: Optional[Broadcaster] = None) -> int:
    """
    Applies stock for completed orders whose inline adjustment failed or
    never ran. Returns how many orders were adjusted in this pass.
    """
    orders = await pending_stock_query(batch_size)

    if not orders:
        return 0

    adjusted = 0
    for order in orders:
        if await apply_stock_for_order(order, broadcaster):
            adjusted += 1
    log.info(f"Reconciled stock for {adjusted}/{len(orders)} completed orders.")
    return adjusted


async def start_stock_reconciler():
    """Main loop for the reconciler service."""
    await init_db()
    log.info("--- Stock Reconciler Service Started ---")

    try:
        while True:
            try:
                await reconcile_pending_stock()
            except Exception as e:
                log.error(f"Reconciler encountered a DB error: {e}.")

            await asyncio.sleep(POLLING_INTERVAL)
    finally:
        await close_db()

if __name__ == "__main__":
    try:
        asyncio.run(start_stock_reconciler())
    except KeyboardInterrupt:
        log.info("Reconciler service stopped.")
