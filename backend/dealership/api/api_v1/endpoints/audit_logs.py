"""Audit log API"""

from typing import Any, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from dealership.core.deps import get_db
from dealership.schemas.audit_log import AuditLogCreate, AuditLogResponse, AuditLogListResponse
from dealership.services import audit

router = APIRouter()


@router.get("/", response_model=AuditLogListResponse)
async def list_audit_logs(
    *,
    db: AsyncSession = Depends(get_db),
    entity_type: Optional[str] = Query(None, description="car_unit / transaction / partner"),
    entity_id: Optional[int] = Query(None),
    action: Optional[str] = Query(None)) -> Any:
    """History, oldest first"""
    logs = await audit.list_audit_logs(db, entity_type=entity_type, entity_id=entity_id, action=action)
    return AuditLogListResponse(
        data=[AuditLogResponse.model_validate(log) for log in logs],
        total=len(logs)
    )


@router.post("/", response_model=AuditLogResponse, status_code=201)
async def create_audit_log(*, db: AsyncSession = Depends(get_db), log_in: AuditLogCreate) -> Any:
    log = await audit.create_audit_log(db, log_in)
    return AuditLogResponse.model_validate(log)
