"""
Per-unit profit figures derived from the ledger.

Buckets (core.constants):
- acquisition: ACQUISITION_TYPES
- expenses: EXPENSE_TYPES
- incomes: INCOME_TYPES

profit = incomes - acquisition - expenses. A car whose sold_price was
written directly (no sale_income rows) counts that price as sale revenue.
"""
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from dealership.core.constants import ACQUISITION_TYPES, EXPENSE_TYPES, INCOME_TYPES, SALE_INCOME
from dealership.core.logging_config import get_logger
from dealership.models import CarUnit, Transaction
from dealership.services.car_status import get_car_or_404

logger = get_logger(__name__)

ZERO = Decimal("0")


@dataclass
class FinancialSummary:
    car_id: int
    total_acquisition: Decimal
    total_expenses: Decimal
    total_incomes: Decimal
    profit: Decimal
    sold_price: Optional[Decimal]

    @property
    def total_cost(self) -> Decimal:
        return self.total_acquisition + self.total_expenses


def summarize(car: CarUnit, transactions: Iterable[Transaction]) -> FinancialSummary:
    """Bucket a car's transactions; no database access"""
    total_acquisition = ZERO
    total_expenses = ZERO
    total_incomes = ZERO
    total_sale_income = ZERO
    has_sale_income = False

    for txn in transactions:
        amount = Decimal(str(txn.amount))
        if txn.type in ACQUISITION_TYPES:
            total_acquisition += amount
        elif txn.type in EXPENSE_TYPES:
            total_expenses += amount
        elif txn.type in INCOME_TYPES:
            total_incomes += amount
            if txn.type == SALE_INCOME:
                total_sale_income += amount
                has_sale_income = True

    stored_price = Decimal(str(car.sold_price)) if car.sold_price is not None else None

    profit = total_incomes - total_acquisition - total_expenses
    if stored_price is not None and not has_sale_income:
        profit += stored_price

    if stored_price is not None:
        sold_price = stored_price
    elif total_sale_income > 0:
        sold_price = total_sale_income
    else:
        sold_price = None

    return FinancialSummary(
        car_id=car.id,
        total_acquisition=total_acquisition,
        total_expenses=total_expenses,
        total_incomes=total_incomes,
        profit=profit,
        sold_price=sold_price,
    )


async def _car_transactions(db: AsyncSession, car_id: int) -> List[Transaction]:
    result = await db.execute(select(Transaction).where(Transaction.car_id == car_id))
    return list(result.scalars().all())


async def get_financial_summary(db: AsyncSession, car_id: int) -> FinancialSummary:
    car = await get_car_or_404(db, car_id)
    return summarize(car, await _car_transactions(db, car.id))


async def get_all_financial_summaries(db: AsyncSession) -> List[FinancialSummary]:
    """One summary per car unit; a car that fails is logged and left out"""
    result = await db.execute(select(CarUnit).order_by(CarUnit.id))
    summaries = []
    for car in result.scalars().all():
        try:
            summaries.append(summarize(car, await _car_transactions(db, car.id)))
        except Exception:
            logger.exception(f"Failed to compute financial summary for car unit {car.id}")
    return summaries
