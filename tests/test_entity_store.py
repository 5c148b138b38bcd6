import pytest

from core.exceptions import ResourceNotFoundError
from db.models import Vehicle
from db.store import EntityStore


@pytest.mark.asyncio
async def test_create_then_get_by_string_id(beanie_db) -> None:
    store = EntityStore(Vehicle)

    created = await store.create({"registration_number": "ABC123", "gps_device_id": 77})
    fetched = await store.get(str(created.id))

    assert fetched is not None
    assert fetched.registration_number == "ABC123"
    assert fetched.gps_device_id == "77"


@pytest.mark.asyncio
@pytest.mark.parametrize("entity_id", [None, "", "nope", "000000000000000000000000"])
async def test_get_unknown_returns_none(beanie_db, entity_id) -> None:
    assert await EntityStore(Vehicle).get(entity_id) is None


@pytest.mark.asyncio
async def test_filter_and_list(beanie_db) -> None:
    store = EntityStore(Vehicle)
    await store.create({"registration_number": "AAA111", "gps_device_id": "1"})
    await store.create({"registration_number": "BBB222"})

    assert len(await store.list()) == 2
    matches = await store.filter(gps_device_id="1")
    assert [v.registration_number for v in matches] == ["AAA111"]


@pytest.mark.asyncio
async def test_update_sets_only_given_fields(beanie_db) -> None:
    store = EntityStore(Vehicle)
    vehicle = await store.create({"registration_number": "AAA111", "make": "Volvo"})

    await store.update(vehicle.id, {"gps_device_id": "42"})

    stored = await store.get(vehicle.id)
    assert stored.gps_device_id == "42"
    assert stored.make == "Volvo"


@pytest.mark.asyncio
async def test_update_missing_raises(beanie_db) -> None:
    with pytest.raises(ResourceNotFoundError, match="Vehicle not found"):
        await EntityStore(Vehicle).update("000000000000000000000000", {"make": "x"})
