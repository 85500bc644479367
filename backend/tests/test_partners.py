import pytest
from sqlalchemy import select

from dealership.core.exceptions import NotFound, HasDependents, AlreadyInactive
from dealership.models import AuditLog
from dealership.schemas.partner import PartnerCreate, PartnerUpdate
from dealership.services.partners import (
    create_partner, get_partner, list_partners, update_partner, delete_partner
)

from tests.conftest import ACTOR


async def test_create_and_list(db):
    await create_partner(db, PartnerCreate(name="Bengkel Jaya", type="workshop"), actor=ACTOR)
    await create_partner(db, PartnerCreate(name="Andi", type="broker", contact_info="0812"), actor=ACTOR)

    brokers = await list_partners(db, type="broker")
    assert [p.name for p in brokers] == ["Andi"]
    assert brokers[0].is_active is True
    assert len(await list_partners(db)) == 2


async def test_update(db, make_partner):
    partner = await make_partner()
    updated = await update_partner(db, partner.id, PartnerUpdate(contact_info="andi@example.com"), actor=ACTOR)
    assert updated.contact_info == "andi@example.com"
    assert updated.name == "Budi Motor"


async def test_get_missing(db):
    with pytest.raises(NotFound, match="Partner with ID 9 not found"):
        await get_partner(db, 9)


async def test_delete_soft_deactivates(db, make_partner):
    partner = await make_partner()

    assert await delete_partner(db, partner.id, actor=ACTOR) == {"success": True}
    await db.refresh(partner)
    assert partner.is_active is False
    assert await list_partners(db, is_active=True) == []

    log = (await db.execute(select(AuditLog).where(AuditLog.action == "delete"))).scalars().one()
    assert log.before_data["is_active"] is True
    assert log.after_data["is_active"] is False


async def test_delete_with_transactions_refused(db, make_partner, make_car, add_txn):
    partner = await make_partner()
    car = await make_car()
    await add_txn(car.id, "broker_fee", 500, partner_id=partner.id)
    await add_txn(car.id, "broker_fee", 250, partner_id=partner.id)

    with pytest.raises(HasDependents, match=f"Cannot delete partner with ID {partner.id} - has 2 associated transactions"):
        await delete_partner(db, partner.id, actor=ACTOR)

    await db.refresh(partner)
    assert partner.is_active is True


async def test_delete_inactive_refused(db, make_partner):
    partner = await make_partner(is_active=False)
    with pytest.raises(AlreadyInactive, match=f"Partner with ID {partner.id} is already inactive"):
        await delete_partner(db, partner.id, actor=ACTOR)


@pytest.mark.parametrize("field", ["name", "type", "is_active"])
def test_update_rejects_null_for_required_fields(field):
    with pytest.raises(ValueError, match=f"{field} cannot be null"):
        PartnerUpdate(**{field: None})


async def test_update_clears_contact_info(db, make_partner):
    partner = await make_partner()
    updated = await update_partner(db, partner.id, PartnerUpdate(contact_info=None), actor=ACTOR)
    assert updated.contact_info is None
    assert updated.name == "Budi Motor"
