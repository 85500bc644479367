"""Reports API"""
from datetime import datetime
from typing import Any, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from dealership.core.deps import get_db
from dealership.schemas.report import ProfitReport, ExpenseReport, StockAgingReport
from dealership.services import reports

router = APIRouter()


@router.get("/profit", response_model=ProfitReport)
async def profit_report(
    *,
    db: AsyncSession = Depends(get_db),
    start_date: Optional[datetime] = Query(None),
    end_date: Optional[datetime] = Query(None)) -> Any:
    return await reports.get_profit_report(db, start_date=start_date, end_date=end_date)


@router.get("/expenses", response_model=ExpenseReport)
async def expense_report(
    *,
    db: AsyncSession = Depends(get_db),
    start_date: Optional[datetime] = Query(None),
    end_date: Optional[datetime] = Query(None),
    partner_id: Optional[int] = Query(None)) -> Any:
    return await reports.get_expense_report(db, start_date=start_date, end_date=end_date, partner_id=partner_id)


@router.get("/stock-aging", response_model=StockAgingReport)
async def stock_aging_report(*, db: AsyncSession = Depends(get_db)) -> Any:
    return await reports.get_stock_aging_report(db)
