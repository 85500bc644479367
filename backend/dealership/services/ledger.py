"""
Transaction ledger

Every write keeps the owning car's derived sold_price in step with its
sale_income rows:
- create assigns the new sale_income amount directly
- update and delete re-sum all remaining sale_income rows (null when not positive)
"""
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from dealership.core.constants import SALE_INCOME, BROKER_FEE, ENTITY_TRANSACTION
from dealership.core.exceptions import NotFound
from dealership.core.logging_config import get_logger
from dealership.models import CarUnit, Partner, Transaction
from dealership.schemas.transaction import TransactionCreate, TransactionUpdate
from dealership.services.audit import record_audit, transaction_snapshot, to_json
from dealership.services.car_status import get_car_or_404

logger = get_logger(__name__)

CENT = Decimal("0.01")

# Fields that keep their value when the caller sends an explicit null
NON_NULLABLE_FIELDS = ("car_id", "type", "amount", "date")


def _decimal(value: Optional[float]) -> Optional[Decimal]:
    if value is None:
        return None
    return Decimal(str(value))


def broker_fee_amount(sold_price: Decimal, percentage: Decimal) -> Decimal:
    """Percentage of the sold price, rounded to cents"""
    return (sold_price * percentage / Decimal("100")).quantize(CENT, rounding=ROUND_HALF_UP)


async def sum_sale_income(db: AsyncSession, car_id: int) -> Decimal:
    result = await db.execute(
        select(Transaction.amount).where(
            Transaction.car_id == car_id,
            Transaction.type == SALE_INCOME
        )
    )
    return sum((Decimal(str(a)) for a in result.scalars().all()), Decimal("0"))


async def recalculate_sold_price(db: AsyncSession, car: CarUnit) -> None:
    """Set sold_price to the sum of the car's sale_income rows, or None"""
    await db.flush()
    total = await sum_sale_income(db, car.id)
    car.sold_price = total if total > 0 else None
    car.updated_at = datetime.utcnow()


async def _check_partner(db: AsyncSession, partner_id: Optional[int]) -> None:
    if partner_id is not None:
        partner = await db.get(Partner, partner_id)
        if not partner:
            raise NotFound(f"Partner with ID {partner_id} does not exist")


async def get_transaction(db: AsyncSession, transaction_id: int) -> Transaction:
    txn = await db.get(Transaction, transaction_id)
    if not txn:
        raise NotFound(f"Transaction with ID {transaction_id} not found")
    return txn


async def list_transactions_by_car(db: AsyncSession, car_id: int) -> List[Transaction]:
    """All transactions of a car unit, newest first"""
    await get_car_or_404(db, car_id)
    result = await db.execute(
        select(Transaction)
        .where(Transaction.car_id == car_id)
        .order_by(Transaction.date.desc(), Transaction.id.desc())
    )
    return list(result.scalars().all())


async def list_transactions(
    db: AsyncSession,
    type: Optional[str] = None,
    partner_id: Optional[int] = None) -> List[Transaction]:
    """Whole ledger, newest first"""
    query = select(Transaction)
    if type:
        query = query.where(Transaction.type == type)
    if partner_id is not None:
        query = query.where(Transaction.partner_id == partner_id)
    query = query.order_by(Transaction.date.desc(), Transaction.id.desc())

    result = await db.execute(query)
    return list(result.scalars().all())


async def create_transaction(db: AsyncSession, data: TransactionCreate, *, actor: str) -> Transaction:
    """
    Book a transaction.

    A broker_fee with a percentage on a car that already has a sold price
    gets its amount derived from that price. A sale_income sets the car's
    sold_price to its amount.
    """
    car = await db.get(CarUnit, data.car_id)
    if not car:
        raise NotFound(f"Car with ID {data.car_id} does not exist")
    await _check_partner(db, data.partner_id)

    amount = _decimal(data.amount)
    percentage = _decimal(data.percentage)
    if data.type == BROKER_FEE and percentage is not None and car.sold_price is not None:
        amount = broker_fee_amount(Decimal(str(car.sold_price)), percentage)

    txn = Transaction(
        car_id=data.car_id,
        partner_id=data.partner_id,
        type=data.type,
        amount=amount,
        percentage=percentage,
        description=data.description,
        date=data.date or datetime.utcnow(),
    )
    db.add(txn)

    if txn.type == SALE_INCOME:
        car.sold_price = amount
        car.updated_at = datetime.utcnow()

    await db.flush()
    record_audit(db, actor, ENTITY_TRANSACTION, txn.id, "create", before=None, after=transaction_snapshot(txn))

    await db.commit()
    await db.refresh(txn)

    logger.info(f"Transaction {txn.id} created: {txn.type} {txn.amount} on car {txn.car_id}")
    return txn


async def update_transaction(
    db: AsyncSession,
    transaction_id: int,
    data: TransactionUpdate,
    *,
    actor: str) -> Transaction:
    """
    Partial update of a transaction.

    When the old or the new type is sale_income, the sold_price of the car
    the transaction ends up on is re-summed from its sale_income rows.
    """
    txn = await get_transaction(db, transaction_id)

    update_data = data.model_dump(exclude_unset=True)
    for field in NON_NULLABLE_FIELDS:
        if field in update_data and update_data[field] is None:
            update_data.pop(field)

    new_car_id = update_data.get("car_id")
    if new_car_id is not None and new_car_id != txn.car_id:
        if not await db.get(CarUnit, new_car_id):
            raise NotFound(f"Car with ID {new_car_id} not found")
    if "partner_id" in update_data:
        await _check_partner(db, update_data["partner_id"])

    before = transaction_snapshot(txn, include_id=False)
    old_type = txn.type

    if "amount" in update_data:
        update_data["amount"] = _decimal(update_data["amount"])
    if "percentage" in update_data:
        update_data["percentage"] = _decimal(update_data["percentage"])

    for field, value in update_data.items():
        setattr(txn, field, value)
    txn.updated_at = datetime.utcnow()

    if old_type == SALE_INCOME or txn.type == SALE_INCOME:
        car = await get_car_or_404(db, txn.car_id)
        await recalculate_sold_price(db, car)

    record_audit(
        db, actor, ENTITY_TRANSACTION, txn.id, "update",
        before=before,
        after=transaction_snapshot(txn, include_id=False),
    )
    await db.commit()
    await db.refresh(txn)

    logger.info(f"Transaction {txn.id} updated: {', '.join(update_data) or 'no changes'}")
    return txn


async def delete_transaction(db: AsyncSession, transaction_id: int, *, actor: str) -> Dict[str, Any]:
    """Delete a transaction; removing a sale_income re-sums the car's sold_price"""
    txn = await get_transaction(db, transaction_id)

    before = transaction_snapshot(txn)
    before["created_at"] = to_json(txn.created_at)
    before["updated_at"] = to_json(txn.updated_at)

    car_id = txn.car_id
    was_sale = txn.type == SALE_INCOME

    await db.delete(txn)

    if was_sale:
        car = await db.get(CarUnit, car_id)
        if car:
            await recalculate_sold_price(db, car)

    record_audit(db, actor, ENTITY_TRANSACTION, transaction_id, "delete", before=before, after=None)
    await db.commit()

    logger.info(f"Transaction {transaction_id} deleted from car {car_id}")
    return {"success": True}
