"""
CSV exports of inventory, the transaction ledger and per-unit profit.

Each function returns the full CSV document as text, header row first.
"""
import csv
from datetime import datetime
from decimal import Decimal
from io import StringIO
from typing import Any, Iterable, List, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from dealership.core.logging_config import get_logger
from dealership.models import CarUnit, Partner, Transaction
from dealership.schemas.car_unit import CarUnitFilter
from dealership.services.car_units import apply_inventory_filters
from dealership.services.financial_summary import get_financial_summary

logger = get_logger(__name__)

INVENTORY_HEADERS = [
    "ID", "Stock Code", "Brand", "Model", "Year", "Transmission", "Odometer",
    "Color", "VIN", "Location", "Status", "Sold Price", "Created At", "Updated At",
]
TRANSACTION_HEADERS = [
    "ID", "Date", "Type", "Amount", "Percentage", "Description",
    "Car ID", "Stock Code", "Car", "Car Status", "Partner ID", "Partner Name", "Partner Type",
]
PROFIT_HEADERS = [
    "Car ID", "Stock Code", "Car", "Status", "Acquisition", "Expenses", "Total Cost",
    "Sale Price", "Incomes", "Profit", "Margin %",
]


def format_value(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, Decimal):
        return f"{value:.2f}"
    return str(value)


def render_csv(headers: Sequence[str], rows: Iterable[Sequence[Any]]) -> str:
    output = StringIO()
    writer = csv.writer(output, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
    writer.writerow(headers)
    for row in rows:
        writer.writerow([format_value(v) for v in row])
    return output.getvalue()


async def export_inventory_csv(db: AsyncSession, filters: Optional[CarUnitFilter] = None) -> str:
    """Inventory with the listing filters, unpaginated"""
    filters = filters or CarUnitFilter()
    query = apply_inventory_filters(select(CarUnit), filters).order_by(CarUnit.created_at.desc(), CarUnit.id.desc())
    cars = (await db.execute(query)).scalars().all()

    rows = [
        [
            car.id, car.stock_code, car.brand, car.model, car.year, car.transmission,
            car.odometer, car.color, car.vin, car.location, car.status, car.sold_price,
            car.created_at, car.updated_at,
        ]
        for car in cars
    ]
    logger.info(f"Exported {len(rows)} car units to CSV")
    return render_csv(INVENTORY_HEADERS, rows)


async def export_transactions_csv(
    db: AsyncSession,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    car_status: Optional[str] = None,
    partner_id: Optional[int] = None) -> str:
    """Ledger rows joined with their car and partner"""
    query = (
        select(Transaction, CarUnit, Partner)
        .join(CarUnit, Transaction.car_id == CarUnit.id)
        .outerjoin(Partner, Transaction.partner_id == Partner.id)
    )
    if start_date:
        query = query.where(Transaction.date >= start_date)
    if end_date:
        query = query.where(Transaction.date <= end_date)
    if car_status:
        query = query.where(CarUnit.status == car_status)
    if partner_id is not None:
        query = query.where(Transaction.partner_id == partner_id)
    query = query.order_by(Transaction.date.desc(), Transaction.id.desc())

    rows: List[list] = []
    for txn, car, partner in (await db.execute(query)).all():
        rows.append([
            txn.id, txn.date, txn.type, txn.amount, txn.percentage, txn.description,
            car.id, car.stock_code, car.display_name, car.status,
            partner.id if partner else None,
            partner.name if partner else None,
            partner.type if partner else None,
        ])
    logger.info(f"Exported {len(rows)} transactions to CSV")
    return render_csv(TRANSACTION_HEADERS, rows)


async def export_profit_csv(
    db: AsyncSession,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    status: Optional[str] = None) -> str:
    """Per-unit profit breakdown built from the financial summaries"""
    query = select(CarUnit)
    if start_date:
        query = query.where(CarUnit.created_at >= start_date)
    if end_date:
        query = query.where(CarUnit.created_at <= end_date)
    if status:
        query = query.where(CarUnit.status == status)
    cars = (await db.execute(query.order_by(CarUnit.id))).scalars().all()

    rows = []
    for car in cars:
        summary = await get_financial_summary(db, car.id)
        revenue = summary.profit + summary.total_cost
        margin = None
        if revenue:
            margin = (summary.profit / revenue * 100).quantize(Decimal("0.01"))
        rows.append([
            car.id, car.stock_code, car.display_name, car.status,
            summary.total_acquisition, summary.total_expenses, summary.total_cost,
            summary.sold_price, summary.total_incomes, summary.profit, margin,
        ])
    logger.info(f"Exported profit breakdown for {len(rows)} car units to CSV")
    return render_csv(PROFIT_HEADERS, rows)
