"""Dashboard KPI schemas"""
from typing import Optional
from pydantic import BaseModel


class ProfitUnit(BaseModel):
    car_id: int
    stock_code: str
    display_name: str
    profit: float


class DashboardKPIs(BaseModel):
    active_stock_count: int
    average_days_to_sale: Optional[float] = None
    total_period_profit: float
    top_profit_unit: Optional[ProfitUnit] = None
    bottom_profit_unit: Optional[ProfitUnit] = None
