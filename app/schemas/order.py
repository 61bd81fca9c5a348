import uuid
from datetime import datetime
from typing import List, Optional
from pydantic import Field
from app.models.order import OrderStatus, OrderPriority, PaymentMethod
from app.schemas.response import CamelModel


class OrderLineItem(CamelModel):
    """Schema for a single item in the order request."""
    name: str = Field(..., min_length=1)
    quantity: int = Field(1, gt=0)
    notes: Optional[str] = None


class OrderRequest(CamelModel):
    """Schema for the full order placement request body."""
    items: List[OrderLineItem] = Field(..., min_length=1)
    student_name: Optional[str] = None
    table_number: Optional[str] = Field(None, description="Omit for takeaway.")
    payment_method: PaymentMethod = PaymentMethod.UPI
    priority: OrderPriority = OrderPriority.NORMAL
    total_amount: float = Field(..., ge=0)
    notes: Optional[str] = None
    token_number: Optional[int] = Field(None, gt=0)


class OrderStatusUpdate(CamelModel):
    """Schema for updating an order status."""
    status: OrderStatus


class SeedRequest(CamelModel):
    count: Optional[int] = Field(None, gt=0, le=100)


class OrderOut(CamelModel):
    """Full order record, as returned by the API and pushed on the event stream."""
    id: uuid.UUID
    token_number: Optional[int] = None
    table_number: Optional[str] = None
    student_name: Optional[str] = None
    payment_method: PaymentMethod
    status: OrderStatus
    next_status: Optional[OrderStatus] = None
    priority: OrderPriority
    items: List[OrderLineItem]
    total_amount: float
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class TopItem(CamelModel):
    name: str
    quantity: int


class DashboardStats(CamelModel):
    top_items: List[TopItem]
    favorite_category: str
    today_revenue: float
