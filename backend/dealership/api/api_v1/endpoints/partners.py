"""
Partner API
"""
from typing import Any, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from dealership.core.constants import PartnerType
from dealership.core.deps import get_db, get_actor
from dealership.schemas.partner import (
    PartnerCreate,
    PartnerUpdate,
    PartnerResponse,
    PartnerListResponse)
from dealership.services import partners as partner_service

router = APIRouter()


@router.get("/", response_model=PartnerListResponse)
async def list_partners(
    *,
    db: AsyncSession = Depends(get_db),
    type: Optional[PartnerType] = Query(None, description="Partner type"),
    is_active: Optional[bool] = Query(None, description="Active only")) -> Any:
    partners = await partner_service.list_partners(db, type=type, is_active=is_active)
    return PartnerListResponse(
        data=[PartnerResponse.model_validate(p) for p in partners],
        total=len(partners)
    )


@router.post("/", response_model=PartnerResponse, status_code=201)
async def create_partner(
    *,
    db: AsyncSession = Depends(get_db),
    actor: str = Depends(get_actor),
    partner_in: PartnerCreate) -> Any:
    partner = await partner_service.create_partner(db, partner_in, actor=actor)
    return PartnerResponse.model_validate(partner)


@router.get("/{partner_id}", response_model=PartnerResponse)
async def get_partner(*, db: AsyncSession = Depends(get_db), partner_id: int) -> Any:
    partner = await partner_service.get_partner(db, partner_id)
    return PartnerResponse.model_validate(partner)


@router.put("/{partner_id}", response_model=PartnerResponse)
async def update_partner(
    *,
    db: AsyncSession = Depends(get_db),
    actor: str = Depends(get_actor),
    partner_id: int,
    partner_in: PartnerUpdate) -> Any:
    partner = await partner_service.update_partner(db, partner_id, partner_in, actor=actor)
    return PartnerResponse.model_validate(partner)


@router.delete("/{partner_id}")
async def delete_partner(
    *,
    db: AsyncSession = Depends(get_db),
    actor: str = Depends(get_actor),
    partner_id: int) -> Any:
    """Deactivate a partner with no transactions"""
    return await partner_service.delete_partner(db, partner_id, actor=actor)
