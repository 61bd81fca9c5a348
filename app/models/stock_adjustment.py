from tortoise import fields, models
import uuid


class StockAdjustment(models.Model):
    """
    Idempotency marker for the stock side effect of a completed order.
    One row per order id: stock for an order is decremented at most once.
    """
    id = fields.UUIDField(primary_key=True, default=uuid.uuid4)
    order_id = fields.UUIDField(unique=True)
    created_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        table = "stock_adjustments"
