import logging
from typing import Optional
from uuid import UUID
from fastapi import APIRouter, Body, Depends, HTTPException, Query, status
from app.api.dependencies import get_broadcaster
from app.core.config import SEED_DEFAULT_COUNT
from app.core.exceptions import NotFoundError
from app.events.broadcaster import Broadcaster
from app.models.order import OrderStatus
from app.schemas.order import DashboardStats, OrderRequest, OrderStatusUpdate, SeedRequest
from app.schemas.response import SuccessResponse
from app.services.order_service import (
    create_order,
    get_order,
    list_orders,
    seed_orders,
    serialize_order,
    update_order_status,
)
from app.services.stats_service import compute_dashboard_stats

router = APIRouter()
log = logging.getLogger("uvicorn")


@router.get("", response_model=SuccessResponse)
async def list_orders_endpoint(
    status: Optional[OrderStatus] = None,
    student_name: Optional[str] = Query(None, alias="studentName"),
):
    """Orders newest first, optionally filtered by status and student name."""
    try:
        orders = await list_orders(status=status, student_name=student_name)
        return SuccessResponse(data=[serialize_order(o) for o in orders])
    except Exception as e:
        log.error(f"Error listing orders: {e}")
        raise HTTPException(status_code=500, detail="Server failed to list orders.")


@router.post("", status_code=status.HTTP_201_CREATED, response_model=SuccessResponse)
async def create_order_endpoint(request_data: OrderRequest, broadcaster: Broadcaster = Depends(get_broadcaster)):
    """
    Places a new order. The response carries the assigned token number.
    """
    try:
        order = await create_order(
            items=[item.model_dump() for item in request_data.items],
            total_amount=request_data.total_amount,
            student_name=request_data.student_name,
            table_number=request_data.table_number,
            payment_method=request_data.payment_method,
            priority=request_data.priority,
            notes=request_data.notes,
            token_number=request_data.token_number,
            broadcaster=broadcaster,
        )
        log.info(f"Order {order.id} placed successfully with token #{order.token_number}.")
        return SuccessResponse(data=serialize_order(order))
    except ValueError as e:
        log.error(f"Value error placing order: {e}")
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        log.error(f"Error placing order: {e}")
        raise HTTPException(status_code=500, detail="Server failed to place order.")


@router.get("/dashboard/stats", response_model=SuccessResponse)
async def dashboard_stats_endpoint():
    """Today's revenue, top 5 items and favourite category over completed orders."""
    try:
        stats = await compute_dashboard_stats()
        return SuccessResponse(data=DashboardStats.model_validate(stats).model_dump(by_alias=True))
    except Exception as e:
        log.error(f"Error computing dashboard stats: {e}")
        raise HTTPException(status_code=500, detail="Server failed to compute dashboard stats.")


@router.post("/seed", status_code=status.HTTP_201_CREATED, response_model=SuccessResponse)
async def seed_orders_endpoint(
    payload: Optional[SeedRequest] = Body(None),
    broadcaster: Broadcaster = Depends(get_broadcaster),
):
    """Creates random sample orders for demos and kitchen display testing."""
    count = (payload.count if payload else None) or SEED_DEFAULT_COUNT
    try:
        orders = await seed_orders(count, broadcaster)
        return SuccessResponse(data=[serialize_order(o) for o in orders])
    except Exception as e:
        log.error(f"Error seeding orders: {e}")
        raise HTTPException(status_code=500, detail="Server failed to seed orders.")


@router.get("/{order_id}", response_model=SuccessResponse)
async def get_order_endpoint(order_id: UUID):
    """Fetches details for a specific order."""
    try:
        order = await get_order(order_id)
        return SuccessResponse(data=serialize_order(order))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        log.error(f"Error fetching order {order_id}: {e}")
        raise HTTPException(status_code=500, detail="Server failed to fetch order details.")


@router.patch("/{order_id}/status", response_model=SuccessResponse)
async def update_status_endpoint(order_id: UUID, payload: OrderStatusUpdate, broadcaster: Broadcaster = Depends(get_broadcaster)):
    """
    Moves an order along pending -> preparing -> ready -> picked_up, or cancels it.
    """
    try:
        # Pydantic ensures payload.status is a valid OrderStatus Enum value
        order = await update_order_status(order_id, payload.status, broadcaster)
        return SuccessResponse(data=serialize_order(order))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        log.error(f"Value error updating order status: {e}")
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        log.error(f"Error updating order status: {e}")
        raise HTTPException(status_code=500, detail="Server failed to update order status.")
