"""
Car unit API: inventory, lifecycle, ledger and profit per unit
"""
from typing import Any, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from dealership.core.constants import UnitStatus, Transmission
from dealership.core.deps import get_db, get_actor
from dealership.models import CarUnit
from dealership.schemas.car_unit import (
    CarUnitCreate,
    CarUnitUpdate,
    CarUnitFilter,
    CarUnitResponse,
    CarUnitListResponse,
    StatusChangeRequest)
from dealership.schemas.financial import FinancialSummaryResponse
from dealership.schemas.transaction import TransactionListResponse
from dealership.services import car_units as car_unit_service
from dealership.services.car_status import change_car_status, archive_car_unit
from dealership.services.financial_summary import get_financial_summary
from dealership.services.ledger import list_transactions_by_car
from dealership.api.api_v1.endpoints.transactions import build_transaction_response
from dealership.api.api_v1.endpoints.financial_summaries import build_summary_response

router = APIRouter()


def build_car_unit_response(car: CarUnit) -> CarUnitResponse:
    return CarUnitResponse(
        id=car.id,
        brand=car.brand,
        model=car.model,
        year=car.year,
        transmission=car.transmission,
        odometer=car.odometer,
        color=car.color,
        vin=car.vin,
        stock_code=car.stock_code,
        location=car.location,
        notes=car.notes,
        primary_photo_url=car.primary_photo_url,
        gallery_urls=car.gallery_urls,
        documents=car.documents,
        status=car.status,
        sold_price=float(car.sold_price) if car.sold_price is not None else None,
        display_name=car.display_name,
        created_at=car.created_at,
        updated_at=car.updated_at)


@router.get("/", response_model=CarUnitListResponse)
async def list_car_units(
    *,
    db: AsyncSession = Depends(get_db),
    status: Optional[UnitStatus] = Query(None, description="Lifecycle status"),
    year_min: Optional[int] = Query(None),
    year_max: Optional[int] = Query(None),
    transmission: Optional[Transmission] = Query(None),
    price_min: Optional[float] = Query(None, description="Minimum sold price"),
    price_max: Optional[float] = Query(None, description="Maximum sold price"),
    partner_id: Optional[int] = Query(None, description="Units with a transaction through this partner"),
    search: Optional[str] = Query(None, description="Brand, model, stock code or VIN"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100)) -> Any:
    """Inventory listing"""
    filters = CarUnitFilter(
        status=status, year_min=year_min, year_max=year_max, transmission=transmission,
        price_min=price_min, price_max=price_max, partner_id=partner_id, search=search,
        page=page, limit=limit)
    units, total = await car_unit_service.list_car_units(db, filters)
    return CarUnitListResponse(
        data=[build_car_unit_response(u) for u in units],
        total=total,
        page=page,
        limit=limit
    )


@router.post("/", response_model=CarUnitResponse, status_code=201)
async def create_car_unit(
    *,
    db: AsyncSession = Depends(get_db),
    actor: str = Depends(get_actor),
    car_in: CarUnitCreate) -> Any:
    car = await car_unit_service.create_car_unit(db, car_in, actor=actor)
    return build_car_unit_response(car)


@router.get("/{car_id}", response_model=CarUnitResponse)
async def get_car_unit(*, db: AsyncSession = Depends(get_db), car_id: int) -> Any:
    car = await car_unit_service.get_car_unit(db, car_id)
    return build_car_unit_response(car)


@router.put("/{car_id}", response_model=CarUnitResponse)
async def update_car_unit(
    *,
    db: AsyncSession = Depends(get_db),
    actor: str = Depends(get_actor),
    car_id: int,
    car_in: CarUnitUpdate) -> Any:
    car = await car_unit_service.update_car_unit(db, car_id, car_in, actor=actor)
    return build_car_unit_response(car)


@router.post("/{car_id}/status", response_model=CarUnitResponse)
async def change_status(
    *,
    db: AsyncSession = Depends(get_db),
    actor: str = Depends(get_actor),
    car_id: int,
    status_in: StatusChangeRequest) -> Any:
    """Move the unit along its lifecycle"""
    car = await change_car_status(db, car_id, status_in.status, status_in.notes, actor=actor)
    return build_car_unit_response(car)


@router.post("/{car_id}/archive", response_model=CarUnitResponse)
async def archive(
    *,
    db: AsyncSession = Depends(get_db),
    actor: str = Depends(get_actor),
    car_id: int) -> Any:
    """Archive a sold unit"""
    car = await archive_car_unit(db, car_id, actor=actor)
    return build_car_unit_response(car)


@router.post("/{car_id}/duplicate", response_model=CarUnitResponse, status_code=201)
async def duplicate(
    *,
    db: AsyncSession = Depends(get_db),
    actor: str = Depends(get_actor),
    car_id: int) -> Any:
    car = await car_unit_service.duplicate_car_unit(db, car_id, actor=actor)
    return build_car_unit_response(car)


@router.get("/{car_id}/transactions", response_model=TransactionListResponse)
async def car_transactions(*, db: AsyncSession = Depends(get_db), car_id: int) -> Any:
    """Ledger of one unit, newest first"""
    txns = await list_transactions_by_car(db, car_id)
    return TransactionListResponse(
        data=[build_transaction_response(t) for t in txns],
        total=len(txns)
    )


@router.get("/{car_id}/financial-summary", response_model=FinancialSummaryResponse)
async def car_financial_summary(*, db: AsyncSession = Depends(get_db), car_id: int) -> Any:
    summary = await get_financial_summary(db, car_id)
    return build_summary_response(summary)
