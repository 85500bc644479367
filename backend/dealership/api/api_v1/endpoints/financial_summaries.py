"""Financial summaries across all car units"""
from typing import Any
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from dealership.core.deps import get_db
from dealership.schemas.financial import FinancialSummaryResponse, FinancialSummaryListResponse
from dealership.services.financial_summary import FinancialSummary, get_all_financial_summaries

router = APIRouter()


def build_summary_response(summary: FinancialSummary) -> FinancialSummaryResponse:
    return FinancialSummaryResponse(
        car_id=summary.car_id,
        total_acquisition=float(summary.total_acquisition),
        total_expenses=float(summary.total_expenses),
        total_incomes=float(summary.total_incomes),
        profit=float(summary.profit),
        sold_price=float(summary.sold_price) if summary.sold_price is not None else None)


@router.get("/", response_model=FinancialSummaryListResponse)
async def list_financial_summaries(*, db: AsyncSession = Depends(get_db)) -> Any:
    summaries = await get_all_financial_summaries(db)
    return FinancialSummaryListResponse(
        data=[build_summary_response(s) for s in summaries],
        total=len(summaries)
    )
