import logging
from typing import Any, Dict, List, Optional
from uuid import UUID

from app.core.exceptions import NotFoundError
from app.core.money import round_amount
from app.events.broadcaster import Broadcaster, MENU_UPDATED
from app.models.menu import MenuCategory, MenuItem
from app.schemas.menu import MenuItemOut

log = logging.getLogger(__name__)

MENU_UPDATED_PAYLOAD = {"message": "Menu has been updated"}


def serialize_menu_item(item: MenuItem) -> Dict[str, Any]:
    return MenuItemOut.model_validate(item).model_dump(mode="json", by_alias=True)


def notify_menu_changed(broadcaster: Optional[Broadcaster]):
    if broadcaster is not None:
        broadcaster.broadcast(MENU_UPDATED, dict(MENU_UPDATED_PAYLOAD))


async def list_available_items(category: Optional[MenuCategory] = None) -> List[MenuItem]:
    """Customer menu: only items currently on offer, optionally for one category."""
    query = MenuItem.filter(is_available=True)
    if category:
        query = query.filter(category=category)
    return await query.order_by("category", "name")


async def list_all_items() -> List[MenuItem]:
    return await MenuItem.all().order_by("category", "name")


async def get_item(item_id: UUID) -> MenuItem:
    item = await MenuItem.get_or_none(id=item_id)
    if not item:
        raise NotFoundError("Menu item not found.")
    return item


async def create_item(data: Dict[str, Any], broadcaster: Optional[Broadcaster] = None) -> MenuItem:
    """
    Adds a catalog entry. name, price and category are required; price may
    not be negative. An item created without stock is saved unavailable.
    """
    for field in ("name", "price", "category"):
        if data.get(field) in (None, ""):
            raise ValueError("Name, price, and category are required.")
    if data["price"] < 0:
        raise ValueError("Price cannot be negative.")

    item = MenuItem(
        name=data["name"],
        price=round_amount(data["price"]),
        category=MenuCategory(data["category"]),
        stock=data.get("stock") or 0,
        image=data.get("image"),
        is_available=data.get("is_available", True),
    )
    await item.save()
    log.info(f"Menu item '{item.name}' created with stock {item.stock}.")
    notify_menu_changed(broadcaster)
    return item


async def update_item(item_id: UUID, updates: Dict[str, Any], broadcaster: Optional[Broadcaster] = None) -> MenuItem:
    """Applies a partial update; availability is re-checked against stock on save."""
    item = await get_item(item_id)
    if updates.get("price") is not None and updates["price"] < 0:
        raise ValueError("Price cannot be negative.")
    if updates.get("stock") is not None and updates["stock"] < 0:
        raise ValueError("Stock cannot be negative.")

    for field, value in updates.items():
        if value is None and field != "image":
            continue
        if field == "price":
            value = round_amount(value)
        setattr(item, field, value)
    await item.save()
    notify_menu_changed(broadcaster)
    return item


async def delete_item(item_id: UUID, broadcaster: Optional[Broadcaster] = None) -> MenuItem:
    item = await get_item(item_id)
    await item.delete()
    log.info(f"Menu item '{item.name}' deleted.")
    notify_menu_changed(broadcaster)
    return item
