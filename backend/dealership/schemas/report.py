"""
Report schemas
"""
from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel


class ProfitReport(BaseModel):
    """Profit over sold units in a period"""
    total_profit: float
    average_profit_per_unit: float
    units_sold: int
    period_start: Optional[datetime] = None
    period_end: datetime


class ExpenseReportItem(BaseModel):
    type: str
    partner_name: Optional[str] = None
    total_amount: float
    transaction_count: int


class ExpenseReport(BaseModel):
    data: List[ExpenseReportItem]
    total_amount: float


class StockAgingBucket(BaseModel):
    age_range: str
    count: int
    total_value: float


class StockAgingReport(BaseModel):
    data: List[StockAgingBucket]
