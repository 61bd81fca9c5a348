import logging
from typing import Optional
from uuid import UUID
from fastapi import APIRouter, Depends, HTTPException, status
from app.api.dependencies import get_broadcaster
from app.core.exceptions import NotFoundError
from app.events.broadcaster import Broadcaster
from app.models.menu import MenuCategory
from app.schemas.menu import MenuItemCreate, MenuItemUpdate
from app.schemas.response import SuccessResponse
from app.services import menu_service
from app.services.menu_service import serialize_menu_item

log = logging.getLogger("uvicorn")

router = APIRouter()


@router.get("", response_model=SuccessResponse)
async def list_menu_endpoint(category: Optional[MenuCategory] = None):
    """Available menu items, optionally for a single category."""
    try:
        items = await menu_service.list_available_items(category)
        return SuccessResponse(data=[serialize_menu_item(i) for i in items])
    except Exception as e:
        log.error(f"Error fetching menu: {e}")
        raise HTTPException(status_code=500, detail="Server failed to fetch menu.")


@router.get("/admin/all", response_model=SuccessResponse)
async def list_all_menu_items_endpoint():
    """Every catalog entry, including unavailable ones, sorted by category then name."""
    try:
        items = await menu_service.list_all_items()
        return SuccessResponse(data=[serialize_menu_item(i) for i in items])
    except Exception as e:
        log.error(f"Error fetching admin menu: {e}")
        raise HTTPException(status_code=500, detail="Server failed to fetch menu.")


@router.get("/{item_id}", response_model=SuccessResponse)
async def get_menu_item_endpoint(item_id: UUID):
    try:
        item = await menu_service.get_item(item_id)
        return SuccessResponse(data=serialize_menu_item(item))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        log.error(f"Error fetching menu item {item_id}: {e}")
        raise HTTPException(status_code=500, detail="Server failed to fetch menu item.")


@router.post("/admin", status_code=status.HTTP_201_CREATED, response_model=SuccessResponse)
async def create_menu_item_endpoint(item_data: MenuItemCreate, broadcaster: Broadcaster = Depends(get_broadcaster)):
    try:
        item = await menu_service.create_item(item_data.model_dump(), broadcaster)
        return SuccessResponse(data=serialize_menu_item(item))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        log.error(f"Error creating menu item: {e}")
        raise HTTPException(status_code=500, detail="Server failed to create menu item.")


@router.patch("/admin/{item_id}", response_model=SuccessResponse)
async def update_menu_item_endpoint(item_id: UUID, updates: MenuItemUpdate, broadcaster: Broadcaster = Depends(get_broadcaster)):
    try:
        item = await menu_service.update_item(item_id, updates.model_dump(exclude_unset=True), broadcaster)
        return SuccessResponse(data=serialize_menu_item(item))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        log.error(f"Error updating menu item {item_id}: {e}")
        raise HTTPException(status_code=500, detail="Server failed to update menu item.")


@router.delete("/admin/{item_id}", response_model=SuccessResponse)
async def delete_menu_item_endpoint(item_id: UUID, broadcaster: Broadcaster = Depends(get_broadcaster)):
    try:
        item = await menu_service.delete_item(item_id, broadcaster)
        return SuccessResponse(data=serialize_menu_item(item))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        log.error(f"Error deleting menu item {item_id}: {e}")
        raise HTTPException(status_code=500, detail="Server failed to delete menu item.")
