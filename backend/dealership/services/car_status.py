"""
Car unit lifecycle

draft -> bought -> recond -> ready -> listed -> sold -> archived
The allowed edges live in core.constants.STATUS_TRANSITIONS.
"""
from datetime import datetime
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from dealership.core.constants import STATUS_TRANSITIONS, ENTITY_CAR_UNIT
from dealership.core.exceptions import (
    NotFound, InvalidTransition, AlreadyInStatus, InvalidStatus
)
from dealership.core.logging_config import get_logger
from dealership.models import CarUnit
from dealership.services.audit import record_audit

logger = get_logger(__name__)


def can_transition(current: str, target: str) -> bool:
    return target in STATUS_TRANSITIONS.get(current, frozenset())


async def get_car_or_404(db: AsyncSession, car_id: int) -> CarUnit:
    car = await db.get(CarUnit, car_id)
    if not car:
        raise NotFound(f"Car unit with ID {car_id} not found")
    return car


async def change_car_status(
    db: AsyncSession,
    car_id: int,
    new_status: str,
    notes: Optional[str] = None,
    *,
    actor: str) -> CarUnit:
    """
    Move a car unit to another status.

    Raises NotFound, AlreadyInStatus (same status requested) or
    InvalidTransition (edge not allowed). Notes are replaced only when given.
    """
    car = await get_car_or_404(db, car_id)

    old_status = car.status
    old_notes = car.notes

    if new_status == old_status:
        raise AlreadyInStatus(f"Car is already in status: {old_status}")

    if not can_transition(old_status, new_status):
        raise InvalidTransition(f"Invalid status transition from {old_status} to {new_status}")

    car.status = new_status
    if notes is not None:
        car.notes = notes
    car.updated_at = datetime.utcnow()

    record_audit(
        db, actor, ENTITY_CAR_UNIT, car.id, "status_change",
        before={"status": old_status, "notes": old_notes},
        after={"status": car.status, "notes": car.notes},
    )
    await db.commit()
    await db.refresh(car)

    logger.info(f"Car unit {car.id} status {old_status} -> {new_status}")
    return car


async def archive_car_unit(db: AsyncSession, car_id: int, *, actor: str) -> CarUnit:
    """Archive a sold car unit. Only sold units may be archived here."""
    car = await get_car_or_404(db, car_id)

    if car.status != "sold":
        raise InvalidStatus(
            f"Cannot archive car unit with status '{car.status}'. Only 'sold' cars can be archived"
        )

    car.status = "archived"
    car.updated_at = datetime.utcnow()

    record_audit(
        db, actor, ENTITY_CAR_UNIT, car.id, "status_change",
        before={"status": "sold"},
        after={"status": "archived"},
    )
    await db.commit()
    await db.refresh(car)

    logger.info(f"Car unit {car.id} archived")
    return car
