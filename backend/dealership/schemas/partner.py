"""
Partner schemas
"""
from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel, Field, field_validator

from dealership.core.constants import PartnerType


class PartnerBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100, description="Name")
    type: PartnerType = Field(..., description="Partner type")
    contact_info: Optional[str] = Field(None, description="Contact details")


class PartnerCreate(PartnerBase):
    pass


class PartnerUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    type: Optional[PartnerType] = None
    contact_info: Optional[str] = None
    is_active: Optional[bool] = None

    @field_validator("name", "type", "is_active")
    @classmethod
    def reject_null(cls, v, info):
        if v is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return v


class PartnerResponse(PartnerBase):
    id: int
    is_active: bool
    type_display: str = ""
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class PartnerListResponse(BaseModel):
    data: List[PartnerResponse]
    total: int
