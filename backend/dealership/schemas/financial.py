"""Per-unit financial summary"""
from typing import Optional, List
from pydantic import BaseModel


class FinancialSummaryResponse(BaseModel):
    car_id: int
    total_acquisition: float
    total_expenses: float
    total_incomes: float
    profit: float
    sold_price: Optional[float] = None


class FinancialSummaryListResponse(BaseModel):
    data: List[FinancialSummaryResponse]
    total: int
