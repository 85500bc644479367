"""
Audit trail recorder and history queries.

record_audit only adds the row to the session; it is committed together with
the mutation that produced it.
"""
from datetime import datetime, date
from decimal import Decimal
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from dealership.core.logging_config import get_logger
from dealership.models import AuditLog, CarUnit, Partner, Transaction
from dealership.schemas.audit_log import AuditLogCreate

logger = get_logger(__name__)


def to_json(value: Any) -> Any:
    """Decimal -> float, datetime -> ISO string"""
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value


def car_unit_snapshot(car: CarUnit) -> Dict[str, Any]:
    return {
        "id": car.id,
        "brand": car.brand,
        "model": car.model,
        "year": car.year,
        "transmission": car.transmission,
        "odometer": car.odometer,
        "color": car.color,
        "vin": car.vin,
        "stock_code": car.stock_code,
        "location": car.location,
        "notes": car.notes,
        "primary_photo_url": car.primary_photo_url,
        "gallery_urls": car.gallery_urls,
        "documents": car.documents,
        "status": car.status,
        "sold_price": to_json(car.sold_price),
    }


def transaction_snapshot(txn: Transaction, include_id: bool = True) -> Dict[str, Any]:
    data = {
        "car_id": txn.car_id,
        "partner_id": txn.partner_id,
        "type": txn.type,
        "amount": to_json(txn.amount),
        "percentage": to_json(txn.percentage),
        "description": txn.description,
        "date": to_json(txn.date),
    }
    if include_id:
        data = {"id": txn.id, **data}
    return data


def partner_snapshot(partner: Partner) -> Dict[str, Any]:
    return {
        "id": partner.id,
        "name": partner.name,
        "type": partner.type,
        "contact_info": partner.contact_info,
        "is_active": partner.is_active,
    }


def record_audit(
    db: AsyncSession,
    actor: str,
    entity_type: str,
    entity_id: int,
    action: str,
    before: Optional[Dict[str, Any]] = None,
    after: Optional[Dict[str, Any]] = None) -> AuditLog:
    """Add an audit row to the current session"""
    log = AuditLog(
        actor=actor,
        entity_type=entity_type,
        entity_id=entity_id,
        action=action,
        before_data=before,
        after_data=after,
    )
    db.add(log)
    return log


async def list_audit_logs(
    db: AsyncSession,
    entity_type: Optional[str] = None,
    entity_id: Optional[int] = None,
    action: Optional[str] = None) -> List[AuditLog]:
    """Audit history, oldest first"""
    query = select(AuditLog)
    if entity_type:
        query = query.where(AuditLog.entity_type == entity_type)
    # 0 is a valid id filter
    if entity_id is not None:
        query = query.where(AuditLog.entity_id == entity_id)
    if action:
        query = query.where(AuditLog.action == action)
    query = query.order_by(AuditLog.created_at.asc(), AuditLog.id.asc())

    result = await db.execute(query)
    return list(result.scalars().all())


async def create_audit_log(db: AsyncSession, data: AuditLogCreate) -> AuditLog:
    """Manual audit entry, committed immediately"""
    log = record_audit(
        db,
        actor=data.actor,
        entity_type=data.entity_type,
        entity_id=data.entity_id,
        action=data.action,
        before=data.before_data,
        after=data.after_data,
    )
    await db.commit()
    await db.refresh(log)
    logger.info(f"Manual audit entry {log.id}: {log.action} {log.entity_type}:{log.entity_id}")
    return log
