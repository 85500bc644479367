"""
Car unit inventory: create, read, filter, update, duplicate
"""
import time
from datetime import datetime
from decimal import Decimal
from typing import List, Tuple

from sqlalchemy import select, func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import Select

from dealership.core.constants import ENTITY_CAR_UNIT
from dealership.core.exceptions import DuplicateStockCode
from dealership.core.logging_config import get_logger
from dealership.models import CarUnit, Transaction
from dealership.schemas.car_unit import CarUnitCreate, CarUnitUpdate, CarUnitFilter
from dealership.services.audit import record_audit, car_unit_snapshot
from dealership.services.car_status import get_car_or_404

logger = get_logger(__name__)

# Copied onto a duplicate; status, stock code and sold price are not
DESCRIPTIVE_FIELDS = (
    "brand", "model", "year", "transmission", "odometer", "color", "vin",
    "location", "notes", "primary_photo_url", "gallery_urls", "documents",
)


async def _ensure_stock_code_free(db: AsyncSession, stock_code: str) -> None:
    existing = await db.execute(select(CarUnit.id).where(CarUnit.stock_code == stock_code))
    if existing.scalar_one_or_none() is not None:
        raise DuplicateStockCode(f"Stock code {stock_code} already exists")


async def _flush_unique_stock_code(db: AsyncSession, stock_code: str) -> None:
    """Flush pending car writes; a stock code taken meanwhile becomes DuplicateStockCode"""
    try:
        await db.flush()
    except IntegrityError:
        await db.rollback()
        raise DuplicateStockCode(f"Stock code {stock_code} already exists")


def apply_inventory_filters(query: Select, filters: CarUnitFilter) -> Select:
    """Filters shared by the inventory listing and the inventory export"""
    if filters.status:
        query = query.where(CarUnit.status == filters.status)
    if filters.year_min is not None:
        query = query.where(CarUnit.year >= filters.year_min)
    if filters.year_max is not None:
        query = query.where(CarUnit.year <= filters.year_max)
    if filters.transmission:
        query = query.where(CarUnit.transmission == filters.transmission)
    if filters.price_min is not None:
        query = query.where(CarUnit.sold_price >= Decimal(str(filters.price_min)))
    if filters.price_max is not None:
        query = query.where(CarUnit.sold_price <= Decimal(str(filters.price_max)))
    if filters.partner_id is not None:
        query = query.where(
            CarUnit.id.in_(
                select(Transaction.car_id).where(Transaction.partner_id == filters.partner_id)
            )
        )
    if filters.search:
        pattern = f"%{filters.search}%"
        query = query.where(
            or_(
                CarUnit.brand.ilike(pattern),
                CarUnit.model.ilike(pattern),
                CarUnit.stock_code.ilike(pattern),
                CarUnit.vin.ilike(pattern),
            )
        )
    return query


async def get_car_unit(db: AsyncSession, car_id: int) -> CarUnit:
    return await get_car_or_404(db, car_id)


async def list_car_units(db: AsyncSession, filters: CarUnitFilter) -> Tuple[List[CarUnit], int]:
    """Filtered inventory page, newest first"""
    query = apply_inventory_filters(select(CarUnit), filters)

    count_query = select(func.count()).select_from(query.subquery())
    total = (await db.execute(count_query)).scalar() or 0

    query = query.order_by(CarUnit.created_at.desc(), CarUnit.id.desc())
    query = query.offset((filters.page - 1) * filters.limit).limit(filters.limit)
    result = await db.execute(query)

    return list(result.scalars().all()), total


async def create_car_unit(db: AsyncSession, data: CarUnitCreate, *, actor: str) -> CarUnit:
    await _ensure_stock_code_free(db, data.stock_code)

    car = CarUnit(**data.model_dump())
    db.add(car)
    await _flush_unique_stock_code(db, car.stock_code)

    record_audit(db, actor, ENTITY_CAR_UNIT, car.id, "create", before=None, after=car_unit_snapshot(car))
    await db.commit()
    await db.refresh(car)

    logger.info(f"Car unit {car.id} created: {car.stock_code}")
    return car


async def update_car_unit(db: AsyncSession, car_id: int, data: CarUnitUpdate, *, actor: str) -> CarUnit:
    """
    Partial update. status and sold_price are written as given and are not
    checked against the lifecycle.
    """
    car = await get_car_or_404(db, car_id)

    update_data = data.model_dump(exclude_unset=True)
    new_code = update_data.get("stock_code")
    if new_code is not None and new_code != car.stock_code:
        await _ensure_stock_code_free(db, new_code)

    if "sold_price" in update_data and update_data["sold_price"] is not None:
        update_data["sold_price"] = Decimal(str(update_data["sold_price"]))

    before = car_unit_snapshot(car)
    for field, value in update_data.items():
        setattr(car, field, value)
    car.updated_at = datetime.utcnow()
    await _flush_unique_stock_code(db, car.stock_code)

    record_audit(db, actor, ENTITY_CAR_UNIT, car.id, "update", before=before, after=car_unit_snapshot(car))
    await db.commit()
    await db.refresh(car)

    logger.info(f"Car unit {car.id} updated: {', '.join(update_data) or 'no changes'}")
    return car


async def duplicate_car_unit(db: AsyncSession, car_id: int, *, actor: str) -> CarUnit:
    """Copy a car's description into a new draft unit with a fresh stock code"""
    original = await get_car_or_404(db, car_id)

    new_stock_code = f"{original.stock_code}-DUP-{int(time.time() * 1000)}"
    copy = CarUnit(
        **{field: getattr(original, field) for field in DESCRIPTIVE_FIELDS},
        stock_code=new_stock_code,
        status="draft",
        sold_price=None,
    )
    db.add(copy)
    await db.flush()

    record_audit(
        db, actor, ENTITY_CAR_UNIT, copy.id, "create",
        before=None,
        after={
            "action": "duplicate",
            "original_car_id": original.id,
            "duplicated_car_id": copy.id,
            "new_stock_code": new_stock_code,
        },
    )
    await db.commit()
    await db.refresh(copy)

    logger.info(f"Car unit {original.id} duplicated as {copy.id} ({new_stock_code})")
    return copy
