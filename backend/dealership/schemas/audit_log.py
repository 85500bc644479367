"""Audit log schemas"""

from datetime import datetime
from typing import Optional, List, Any, Dict
from pydantic import BaseModel, Field

from dealership.core.constants import AuditAction


class AuditLogCreate(BaseModel):
    """Manual audit entry"""
    actor: str = Field(..., min_length=1, max_length=100)
    entity_type: str = Field(..., min_length=1, max_length=50)
    entity_id: int
    action: AuditAction
    before_data: Optional[Dict[str, Any]] = None
    after_data: Optional[Dict[str, Any]] = None


class AuditLogResponse(BaseModel):
    id: int
    actor: str
    entity_type: str
    entity_id: int
    action: str
    before_data: Optional[Dict[str, Any]]
    after_data: Optional[Dict[str, Any]]
    created_at: datetime

    action_display: str

    class Config:
        from_attributes = True


class AuditLogListResponse(BaseModel):
    data: List[AuditLogResponse]
    total: int
