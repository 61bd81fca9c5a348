from enum import Enum
from tortoise import fields, models
import uuid


class MenuCategory(str, Enum):
    SNACKS = "snacks"
    MEALS = "meals"
    DRINKS = "drinks"
    DESSERTS = "desserts"
    OTHERS = "others"


class MenuItem(models.Model):
    id = fields.UUIDField(primary_key=True, default=uuid.uuid4)
    name = fields.CharField(max_length=255)
    price = fields.DecimalField(max_digits=12, decimal_places=2)
    category = fields.CharEnumField(MenuCategory, default=MenuCategory.OTHERS)
    stock = fields.IntField(default=0)
    image = fields.CharField(max_length=1024, null=True)
    is_available = fields.BooleanField(default=True)
    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        table = "menu_items"
        indexes = [
            ("name",),                       # Order line items resolve by name
            ("is_available", "category"),    # Customer menu listing
        ]

    async def save(self, *args, **kwargs):
        # An item with no stock left can never be offered
        if self.stock <= 0:
            self.is_available = False
            update_fields = kwargs.get("update_fields")
            if update_fields is not None and "is_available" not in update_fields:
                kwargs["update_fields"] = [*update_fields, "is_available"]
        await super().save(*args, **kwargs)
