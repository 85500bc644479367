"""Dashboard API"""
from typing import Any
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from dealership.core.deps import get_db
from dealership.schemas.dashboard import DashboardKPIs
from dealership.services.dashboard import get_dashboard_kpis

router = APIRouter()


@router.get("/kpis", response_model=DashboardKPIs)
async def dashboard_kpis(*, db: AsyncSession = Depends(get_db)) -> Any:
    return await get_dashboard_kpis(db)
