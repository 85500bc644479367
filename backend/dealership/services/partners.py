"""
Partners (brokers, workshops, salons, transport companies)
"""
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from dealership.core.constants import ENTITY_PARTNER
from dealership.core.exceptions import NotFound, AlreadyInactive, HasDependents
from dealership.core.logging_config import get_logger
from dealership.models import Partner, Transaction
from dealership.schemas.partner import PartnerCreate, PartnerUpdate
from dealership.services.audit import record_audit, partner_snapshot

logger = get_logger(__name__)


async def get_partner(db: AsyncSession, partner_id: int) -> Partner:
    partner = await db.get(Partner, partner_id)
    if not partner:
        raise NotFound(f"Partner with ID {partner_id} not found")
    return partner


async def list_partners(
    db: AsyncSession,
    type: Optional[str] = None,
    is_active: Optional[bool] = None) -> List[Partner]:
    query = select(Partner)
    if type:
        query = query.where(Partner.type == type)
    if is_active is not None:
        query = query.where(Partner.is_active == is_active)
    query = query.order_by(Partner.name, Partner.id)

    result = await db.execute(query)
    return list(result.scalars().all())


async def create_partner(db: AsyncSession, data: PartnerCreate, *, actor: str) -> Partner:
    partner = Partner(**data.model_dump())
    db.add(partner)
    await db.flush()

    record_audit(db, actor, ENTITY_PARTNER, partner.id, "create", before=None, after=partner_snapshot(partner))
    await db.commit()
    await db.refresh(partner)

    logger.info(f"Partner {partner.id} created: {partner.name} ({partner.type})")
    return partner


async def update_partner(db: AsyncSession, partner_id: int, data: PartnerUpdate, *, actor: str) -> Partner:
    partner = await get_partner(db, partner_id)

    update_data = data.model_dump(exclude_unset=True)
    before = partner_snapshot(partner)
    for field, value in update_data.items():
        setattr(partner, field, value)
    partner.updated_at = datetime.utcnow()

    record_audit(db, actor, ENTITY_PARTNER, partner.id, "update", before=before, after=partner_snapshot(partner))
    await db.commit()
    await db.refresh(partner)

    logger.info(f"Partner {partner.id} updated: {', '.join(update_data) or 'no changes'}")
    return partner


async def delete_partner(db: AsyncSession, partner_id: int, *, actor: str) -> Dict[str, Any]:
    """
    Soft delete: the partner is deactivated, never removed.
    Refused while any transaction still references it.
    """
    partner = await get_partner(db, partner_id)

    if not partner.is_active:
        raise AlreadyInactive(f"Partner with ID {partner_id} is already inactive")

    count_result = await db.execute(
        select(func.count(Transaction.id)).where(Transaction.partner_id == partner_id)
    )
    txn_count = count_result.scalar() or 0
    if txn_count > 0:
        raise HasDependents(
            f"Cannot delete partner with ID {partner_id} - has {txn_count} associated transactions"
        )

    before = partner_snapshot(partner)
    partner.is_active = False
    partner.updated_at = datetime.utcnow()

    record_audit(db, actor, ENTITY_PARTNER, partner.id, "delete", before=before, after=partner_snapshot(partner))
    await db.commit()

    logger.info(f"Partner {partner.id} deactivated")
    return {"success": True}
