import pytest
from uuid import uuid4

from app.core.exceptions import NotFoundError
from app.events.broadcaster import MENU_UPDATED
from app.models.menu import MenuCategory
from app.services import menu_service


@pytest.mark.asyncio
async def test_create_then_fetch_round_trip(db):
    created = await menu_service.create_item(
        {"name": "Vada Pav", "price": 25.5, "category": "snacks", "stock": 12, "image": "/img/vada.png"}
    )

    fetched = await menu_service.get_item(created.id)

    assert menu_service.serialize_menu_item(fetched) == menu_service.serialize_menu_item(created)
    assert fetched.category == MenuCategory.SNACKS
    assert float(fetched.price) == 25.5
    assert fetched.is_available is True


@pytest.mark.asyncio
async def test_delete_then_fetch_is_not_found(db):
    item = await menu_service.create_item({"name": "Lassi", "price": 30, "category": "drinks", "stock": 5})

    deleted = await menu_service.delete_item(item.id)

    assert deleted.name == "Lassi"
    with pytest.raises(NotFoundError):
        await menu_service.get_item(item.id)


@pytest.mark.asyncio
@pytest.mark.parametrize("missing", ["name", "price", "category"])
async def test_create_requires_fields(db, missing):
    data = {"name": "Lassi", "price": 30, "category": "drinks"}
    data.pop(missing)

    with pytest.raises(ValueError):
        await menu_service.create_item(data)


@pytest.mark.asyncio
async def test_item_without_stock_is_never_available(db):
    item = await menu_service.create_item({"name": "Brownie", "price": 40, "category": "desserts", "is_available": True})

    assert item.stock == 0
    assert item.is_available is False


@pytest.mark.asyncio
async def test_update_driving_stock_to_zero_forces_unavailable(db, menu):
    tea = menu["Tea"]

    updated = await menu_service.update_item(tea.id, {"stock": 0, "is_available": True})

    assert (updated.stock, updated.is_available) == (0, False)
    assert (await menu_service.get_item(tea.id)).is_available is False


@pytest.mark.asyncio
async def test_restock_allows_availability_again(db, menu):
    cake = menu["Cake"]
    await menu_service.update_item(cake.id, {"stock": 0})

    updated = await menu_service.update_item(cake.id, {"stock": 8, "is_available": True})

    assert (updated.stock, updated.is_available) == (8, True)


@pytest.mark.asyncio
async def test_update_missing_item(db):
    with pytest.raises(NotFoundError):
        await menu_service.update_item(uuid4(), {"price": 10})


@pytest.mark.asyncio
async def test_available_listing_filters_and_sorts(db, menu):
    await menu_service.update_item(menu["Cake"].id, {"is_available": False})

    names = [i.name for i in await menu_service.list_available_items()]
    drinks = [i.name for i in await menu_service.list_available_items(MenuCategory.DRINKS)]
    everything = [i.name for i in await menu_service.list_all_items()]

    assert names == ["Tea", "Samosa"]
    assert drinks == ["Tea"]
    assert everything == ["Cake", "Tea", "Samosa"]


@pytest.mark.asyncio
async def test_mutations_broadcast_menu_update(db, broadcaster, observer, received):
    item = await menu_service.create_item({"name": "Lassi", "price": 30, "category": "drinks", "stock": 5}, broadcaster)
    await menu_service.update_item(item.id, {"price": 35}, broadcaster)
    await menu_service.delete_item(item.id, broadcaster)

    events = received()
    assert [event for event, _ in events] == [MENU_UPDATED] * 3
    assert events[0][1] == {"message": "Menu has been updated"}
