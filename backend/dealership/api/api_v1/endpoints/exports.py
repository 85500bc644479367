"""
CSV download endpoints
"""
from datetime import datetime
from typing import Optional
from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession

from dealership.core.constants import UnitStatus, Transmission
from dealership.core.deps import get_db
from dealership.schemas.car_unit import CarUnitFilter
from dealership.services import export

router = APIRouter()


def csv_response(content: str, filename: str) -> Response:
    stamp = datetime.utcnow().strftime("%Y%m%d_%H%M%S")
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}_{stamp}.csv"'}
    )


@router.get("/inventory.csv")
async def export_inventory(
    *,
    db: AsyncSession = Depends(get_db),
    status: Optional[UnitStatus] = Query(None),
    year_min: Optional[int] = Query(None),
    year_max: Optional[int] = Query(None),
    transmission: Optional[Transmission] = Query(None),
    price_min: Optional[float] = Query(None),
    price_max: Optional[float] = Query(None),
    partner_id: Optional[int] = Query(None),
    search: Optional[str] = Query(None)) -> Response:
    filters = CarUnitFilter(
        status=status, year_min=year_min, year_max=year_max, transmission=transmission,
        price_min=price_min, price_max=price_max, partner_id=partner_id, search=search)
    return csv_response(await export.export_inventory_csv(db, filters), "inventory")


@router.get("/transactions.csv")
async def export_transactions(
    *,
    db: AsyncSession = Depends(get_db),
    start_date: Optional[datetime] = Query(None),
    end_date: Optional[datetime] = Query(None),
    car_status: Optional[UnitStatus] = Query(None),
    partner_id: Optional[int] = Query(None)) -> Response:
    content = await export.export_transactions_csv(
        db, start_date=start_date, end_date=end_date, car_status=car_status, partner_id=partner_id)
    return csv_response(content, "transactions")


@router.get("/profit.csv")
async def export_profit(
    *,
    db: AsyncSession = Depends(get_db),
    start_date: Optional[datetime] = Query(None),
    end_date: Optional[datetime] = Query(None),
    status: Optional[UnitStatus] = Query(None)) -> Response:
    content = await export.export_profit_csv(db, start_date=start_date, end_date=end_date, status=status)
    return csv_response(content, "profit")
