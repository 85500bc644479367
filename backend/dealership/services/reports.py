"""
Read-only reports: profit, expenses by category and partner, stock aging.
Profit figures come from the financial summary calculator.
"""
from collections import OrderedDict
from datetime import datetime
from decimal import Decimal
from typing import Dict, Optional, Tuple

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from dealership.core.constants import INCOME_TYPES, INACTIVE_STATUSES, ACQUISITION_TYPES
from dealership.models import CarUnit, Partner, Transaction
from dealership.schemas.report import (
    ProfitReport, ExpenseReport, ExpenseReportItem, StockAgingBucket, StockAgingReport
)
from dealership.services.financial_summary import get_financial_summary

ZERO = Decimal("0")

# (label, lower day bound, upper day bound or None)
AGING_BUCKETS = (
    ("0-30 days", 0, 30),
    ("31-60 days", 31, 60),
    ("61-90 days", 61, 90),
    ("90+ days", 91, None),
)


def aging_bucket(age_days: int) -> str:
    for label, low, high in AGING_BUCKETS:
        if age_days >= low and (high is None or age_days <= high):
            return label
    return AGING_BUCKETS[0][0]


async def get_profit_report(
    db: AsyncSession,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None) -> ProfitReport:
    """Profit over sold units whose last update falls in the period"""
    end_date = end_date or datetime.utcnow()

    query = select(CarUnit.id).where(
        CarUnit.status == "sold",
        CarUnit.sold_price.isnot(None),
        CarUnit.updated_at <= end_date
    )
    if start_date:
        query = query.where(CarUnit.updated_at >= start_date)
    result = await db.execute(query.order_by(CarUnit.id))
    car_ids = list(result.scalars().all())

    total_profit = ZERO
    for car_id in car_ids:
        summary = await get_financial_summary(db, car_id)
        total_profit += summary.profit

    units_sold = len(car_ids)
    average = total_profit / units_sold if units_sold else ZERO

    return ProfitReport(
        total_profit=float(total_profit),
        average_profit_per_unit=round(float(average), 2),
        units_sold=units_sold,
        period_start=start_date,
        period_end=end_date,
    )


async def get_expense_report(
    db: AsyncSession,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    partner_id: Optional[int] = None) -> ExpenseReport:
    """Non-income transactions grouped by type and partner"""
    query = (
        select(Transaction.type, Partner.name, Transaction.amount)
        .outerjoin(Partner, Transaction.partner_id == Partner.id)
        .where(Transaction.type.notin_(INCOME_TYPES))
    )
    if start_date:
        query = query.where(Transaction.date >= start_date)
    if end_date:
        query = query.where(Transaction.date <= end_date)
    if partner_id is not None:
        query = query.where(Transaction.partner_id == partner_id)
    query = query.order_by(Transaction.type, Partner.name)

    groups: Dict[Tuple[str, Optional[str]], Tuple[Decimal, int]] = OrderedDict()
    result = await db.execute(query)
    for txn_type, partner_name, amount in result.all():
        key = (txn_type, partner_name)
        total, count = groups.get(key, (ZERO, 0))
        groups[key] = (total + Decimal(str(amount)), count + 1)

    items = [
        ExpenseReportItem(
            type=txn_type,
            partner_name=partner_name,
            total_amount=float(total),
            transaction_count=count,
        )
        for (txn_type, partner_name), (total, count) in groups.items()
    ]
    grand_total = sum((total for total, _ in groups.values()), ZERO)

    return ExpenseReport(data=items, total_amount=float(grand_total))


async def get_stock_aging_report(db: AsyncSession, now: Optional[datetime] = None) -> StockAgingReport:
    """Units still on the lot, bucketed by days since they were created"""
    now = now or datetime.utcnow()

    acquisition_sum = (
        select(
            Transaction.car_id,
            func.coalesce(func.sum(Transaction.amount), 0).label("acquisition")
        )
        .where(Transaction.type.in_(ACQUISITION_TYPES))
        .group_by(Transaction.car_id)
        .subquery()
    )
    result = await db.execute(
        select(CarUnit.created_at, acquisition_sum.c.acquisition)
        .outerjoin(acquisition_sum, acquisition_sum.c.car_id == CarUnit.id)
        .where(CarUnit.status.notin_(INACTIVE_STATUSES))
    )

    buckets = OrderedDict((label, [0, ZERO]) for label, _, _ in AGING_BUCKETS)
    for created_at, acquisition in result.all():
        label = aging_bucket((now - created_at).days)
        buckets[label][0] += 1
        buckets[label][1] += Decimal(str(acquisition or 0))

    return StockAgingReport(data=[
        StockAgingBucket(age_range=label, count=count, total_value=float(value))
        for label, (count, value) in buckets.items()
    ])
