from enum import Enum
from tortoise import fields, models
import uuid


class OrderStatus(str, Enum):
    PENDING = "pending"      # Placed by the customer, not yet picked up by the kitchen
    PREPARING = "preparing"
    READY = "ready"          # Waiting at the counter
    PICKED_UP = "picked_up"  # Completed, money received
    CANCELLED = "cancelled"


# Forward pipeline; CANCELLED sits outside it
STATUS_PIPELINE = [
    OrderStatus.PENDING,
    OrderStatus.PREPARING,
    OrderStatus.READY,
    OrderStatus.PICKED_UP,
]
FINAL_STATUSES = (OrderStatus.PICKED_UP, OrderStatus.CANCELLED)


class PaymentMethod(str, Enum):
    UPI = "upi"
    CASH = "cash"
    CARD = "card"
    WALLET = "wallet"


class OrderPriority(str, Enum):
    NORMAL = "normal"
    RUSH = "rush"


class Order(models.Model):
    id = fields.UUIDField(primary_key=True, default=uuid.uuid4)
    token_number = fields.IntField(null=True)
    table_number = fields.CharField(max_length=32, null=True) # None means takeaway
    student_name = fields.CharField(max_length=255, null=True)
    payment_method = fields.CharEnumField(PaymentMethod, default=PaymentMethod.UPI)
    status = fields.CharEnumField(OrderStatus, default=OrderStatus.PENDING)
    priority = fields.CharEnumField(OrderPriority, default=OrderPriority.NORMAL)
    # Line items are value objects owned by the order: [{"name", "quantity", "notes"}]
    items = fields.JSONField(default=list)
    total_amount = fields.DecimalField(max_digits=14, decimal_places=2, default=0)
    notes = fields.TextField(null=True)
    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        table = "orders"
        indexes = [
            ("status",),                 # Status-based filtering
            ("student_name",),           # Customer order tracker
            ("token_number",),
            ("created_at",),             # Time-based queries
            ("status", "created_at"),    # Composite: dashboard window
        ]
