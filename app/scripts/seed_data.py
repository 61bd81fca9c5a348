# scripts/seed_data.py
import asyncio
import logging
from app.core.db import init_db, close_db
from app.models.menu import MenuCategory, MenuItem

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
log = logging.getLogger("seed_data")

CAMPUS_MENU = [
    # name, price, category, stock
    ("Masala Dosa", "60.00", MenuCategory.MEALS, 40),
    ("Veg Thali", "90.00", MenuCategory.MEALS, 30),
    ("Idli Sambar", "40.00", MenuCategory.MEALS, 50),
    ("Paneer Roll", "70.00", MenuCategory.SNACKS, 35),
    ("Samosa", "15.00", MenuCategory.SNACKS, 80),
    ("Cold Coffee", "45.00", MenuCategory.DRINKS, 60),
    ("Masala Chai", "15.00", MenuCategory.DRINKS, 100),
    ("Gulab Jamun", "30.00", MenuCategory.DESSERTS, 40),
]

async def seed():
    for name, price, category, stock in CAMPUS_MENU:
        item, created = await MenuItem.get_or_create(
            name=name,
            defaults={"price": price, "category": category, "stock": stock, "is_available": True},
        )
        # If existing, restock (idempotent)
        if not created:
            item.stock = stock
            item.is_available = True
            await item.save()
        log.info(f"{'Created' if created else 'Restocked'} {name} ({item.id})")

    log.info("Menu seeded.")

async def main():
    # Tables are normally created by the API on startup; generating is safe in dev
    await init_db()
    await seed()
    await close_db()

if __name__ == "__main__":
    asyncio.run(main())
