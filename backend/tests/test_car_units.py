from decimal import Decimal

import pytest
from sqlalchemy import select

from dealership.core.exceptions import DuplicateStockCode, NotFound
from dealership.models import AuditLog
from dealership.schemas.car_unit import CarUnitCreate, CarUnitUpdate, CarUnitFilter
from dealership.services.car_units import (
    create_car_unit, get_car_unit, list_car_units, update_car_unit, duplicate_car_unit
)

from tests.conftest import ACTOR


def car_payload(**overrides):
    data = dict(
        brand="Honda",
        model="Jazz",
        year=2019,
        transmission="automatic",
        odometer=60000,
        color="Red",
        stock_code="HJ-001",
        gallery_urls=["https://img.example/1.jpg"],
    )
    data.update(overrides)
    return CarUnitCreate(**data)


async def test_create_defaults_to_draft_and_audits(db):
    car = await create_car_unit(db, car_payload(), actor=ACTOR)
    assert car.status == "draft"
    assert car.sold_price is None
    assert car.gallery_urls == ["https://img.example/1.jpg"]

    log = (await db.execute(select(AuditLog))).scalars().one()
    assert log.action == "create"
    assert log.entity_type == "car_unit"
    assert log.after_data["stock_code"] == "HJ-001"


async def test_create_with_initial_status(db):
    car = await create_car_unit(db, car_payload(status="bought"), actor=ACTOR)
    assert car.status == "bought"


async def test_duplicate_stock_code_rejected(db, make_car):
    await make_car(stock_code="HJ-001")
    with pytest.raises(DuplicateStockCode, match="Stock code HJ-001 already exists"):
        await create_car_unit(db, car_payload(), actor=ACTOR)


def test_year_range_validated():
    with pytest.raises(ValueError):
        car_payload(year=1850)


async def test_get_missing(db):
    with pytest.raises(NotFound, match="Car unit with ID 10 not found"):
        await get_car_unit(db, 10)


async def test_update_partial_and_stock_code_conflict(db, make_car):
    car = await make_car(stock_code="A-1")
    await make_car(stock_code="B-2")

    updated = await update_car_unit(db, car.id, CarUnitUpdate(color="Black", stock_code="A-1"), actor=ACTOR)
    assert updated.color == "Black"
    assert updated.brand == "Toyota"

    with pytest.raises(DuplicateStockCode):
        await update_car_unit(db, car.id, CarUnitUpdate(stock_code="B-2"), actor=ACTOR)


async def test_update_writes_status_and_price_directly(db, make_car):
    car = await make_car()
    updated = await update_car_unit(
        db, car.id, CarUnitUpdate(status="sold", sold_price=18000), actor=ACTOR
    )
    assert updated.status == "sold"
    assert updated.sold_price == Decimal("18000")

    log = (await db.execute(select(AuditLog).where(AuditLog.action == "update"))).scalars().one()
    assert log.before_data["status"] == "draft"
    assert log.after_data["sold_price"] == 18000.0


async def test_duplicate(db, make_car):
    original = await make_car(status="sold", sold_price=21000, vin="VIN123", notes="clean")

    copy = await duplicate_car_unit(db, original.id, actor=ACTOR)
    assert copy.id != original.id
    assert copy.status == "draft"
    assert copy.sold_price is None
    assert copy.vin == "VIN123"
    assert copy.stock_code.startswith(f"{original.stock_code}-DUP-")

    log = (await db.execute(select(AuditLog))).scalars().one()
    assert log.action == "create"
    assert log.entity_id == copy.id
    assert log.after_data == {
        "action": "duplicate",
        "original_car_id": original.id,
        "duplicated_car_id": copy.id,
        "new_stock_code": copy.stock_code,
    }


async def test_list_filters_and_pagination(db, make_car, make_partner, add_txn):
    honda = await make_car(brand="Honda", model="Brio", year=2018, transmission="cvt")
    await make_car(brand="Toyota", year=2021, status="sold", sold_price=15000)
    await make_car(brand="Suzuki", year=2015, vin="MHYESC")
    broker = await make_partner()
    await add_txn(honda.id, "broker_fee", 300, partner_id=broker.id)

    units, total = await list_car_units(db, CarUnitFilter())
    assert total == 3

    units, total = await list_car_units(db, CarUnitFilter(transmission="cvt"))
    assert [u.id for u in units] == [honda.id]

    units, total = await list_car_units(db, CarUnitFilter(year_min=2016, year_max=2020))
    assert [u.brand for u in units] == ["Honda"]

    units, total = await list_car_units(db, CarUnitFilter(status="sold", price_min=10000))
    assert total == 1

    units, total = await list_car_units(db, CarUnitFilter(partner_id=broker.id))
    assert [u.id for u in units] == [honda.id]

    units, total = await list_car_units(db, CarUnitFilter(search="mhy"))
    assert [u.brand for u in units] == ["Suzuki"]

    units, total = await list_car_units(db, CarUnitFilter(page=2, limit=2))
    assert total == 3
    assert len(units) == 1


@pytest.mark.parametrize("field", ["stock_code", "brand", "year", "transmission", "status"])
def test_update_rejects_null_for_required_fields(field):
    with pytest.raises(ValueError, match=f"{field} cannot be null"):
        CarUnitUpdate(**{field: None})


def test_update_allows_null_for_optional_fields():
    data = CarUnitUpdate(vin=None, notes=None, sold_price=None)
    assert data.model_dump(exclude_unset=True) == {"vin": None, "notes": None, "sold_price": None}


async def test_stock_code_taken_between_check_and_write(db, make_car, monkeypatch):
    from dealership.services import car_units

    async def no_check(db, stock_code):
        return None

    monkeypatch.setattr(car_units, "_ensure_stock_code_free", no_check)
    await make_car(stock_code="HJ-001")

    with pytest.raises(DuplicateStockCode, match="Stock code HJ-001 already exists"):
        await create_car_unit(db, car_payload(), actor=ACTOR)

    other = await make_car(stock_code="HJ-002")
    with pytest.raises(DuplicateStockCode, match="Stock code HJ-001 already exists"):
        await update_car_unit(db, other.id, CarUnitUpdate(stock_code="HJ-001"), actor=ACTOR)

    logs = (await db.execute(select(AuditLog))).scalars().all()
    assert logs == []
