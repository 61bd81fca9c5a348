import uuid
from datetime import datetime
from typing import Optional
from pydantic import Field
from app.models.menu import MenuCategory
from app.schemas.response import CamelModel


class MenuItemCreate(CamelModel):
    name: str = Field(..., min_length=1, description="Display name, also used to match order line items.")
    price: float = Field(..., ge=0, description="Selling price of the item.")
    category: MenuCategory = Field(..., description="One of snacks, meals, drinks, desserts, others.")
    stock: int = Field(0, ge=0, description="Units currently in stock.")
    image: Optional[str] = Field(None, description="Image URL or path.")
    is_available: bool = Field(True, description="Ignored (forced false) while stock is 0.")


class MenuItemUpdate(CamelModel):
    """Partial update; only fields present in the request are applied."""
    name: Optional[str] = Field(None, min_length=1)
    price: Optional[float] = Field(None, ge=0)
    category: Optional[MenuCategory] = None
    stock: Optional[int] = Field(None, ge=0)
    image: Optional[str] = None
    is_available: Optional[bool] = None


class MenuItemOut(CamelModel):
    id: uuid.UUID
    name: str
    price: float
    category: MenuCategory
    stock: int
    image: Optional[str] = None
    is_available: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
