"""
Dashboard KPIs
"""
from collections import defaultdict
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from dealership.core.constants import INACTIVE_STATUSES
from dealership.models import CarUnit, Transaction
from dealership.schemas.dashboard import DashboardKPIs, ProfitUnit
from dealership.services.financial_summary import summarize

SECONDS_PER_DAY = 86400


def _profit_unit(car: CarUnit, profit) -> ProfitUnit:
    return ProfitUnit(
        car_id=car.id,
        stock_code=car.stock_code,
        display_name=car.display_name,
        profit=float(profit),
    )


async def get_dashboard_kpis(db: AsyncSession) -> DashboardKPIs:
    """
    Stock count, average days to sale and profit leaders.

    Profit figures cover units with ledger activity: at least one
    transaction or a stored sold price.
    """
    cars = list((await db.execute(select(CarUnit).order_by(CarUnit.id))).scalars().all())
    txns = (await db.execute(select(Transaction))).scalars().all()

    by_car = defaultdict(list)
    for txn in txns:
        by_car[txn.car_id].append(txn)

    active_stock_count = sum(1 for car in cars if car.status not in INACTIVE_STATUSES)

    sold = [car for car in cars if car.status == "sold"]
    average_days_to_sale: Optional[float] = None
    if sold:
        total_days = sum(
            (car.updated_at - car.created_at).total_seconds() / SECONDS_PER_DAY for car in sold
        )
        average_days_to_sale = round(total_days / len(sold), 1)

    ranked: List[tuple] = []
    for car in cars:
        if by_car.get(car.id) or car.sold_price is not None:
            ranked.append((car, summarize(car, by_car.get(car.id, [])).profit))

    total_profit = sum((profit for _, profit in ranked), 0)

    top = max(ranked, key=lambda item: item[1]) if ranked else None
    non_negative = [item for item in ranked if item[1] >= 0]
    bottom = min(non_negative, key=lambda item: item[1]) if non_negative else None

    return DashboardKPIs(
        active_stock_count=active_stock_count,
        average_days_to_sale=average_days_to_sale,
        total_period_profit=float(total_profit),
        top_profit_unit=_profit_unit(*top) if top else None,
        bottom_profit_unit=_profit_unit(*bottom) if bottom else None,
    )
