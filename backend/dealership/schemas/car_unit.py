"""
Car unit schemas
"""
from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel, Field, field_validator

from dealership.core.constants import UnitStatus, Transmission


def _check_year(v: Optional[int]) -> Optional[int]:
    if v is None:
        return v
    latest = datetime.utcnow().year + 1
    if v < 1900 or v > latest:
        raise ValueError(f"year must be between 1900 and {latest}")
    return v


class CarUnitBase(BaseModel):
    """Descriptive car fields"""
    brand: str = Field(..., min_length=1, max_length=100, description="Brand")
    model: str = Field(..., min_length=1, max_length=100, description="Model")
    year: int = Field(..., description="Model year")
    transmission: Transmission = Field(..., description="Transmission")
    odometer: int = Field(..., ge=0, description="Odometer (km)")
    color: str = Field(..., min_length=1, max_length=50, description="Colour")
    vin: Optional[str] = Field(None, max_length=50, description="VIN")
    stock_code: str = Field(..., min_length=1, max_length=50, description="Stock code")
    location: Optional[str] = Field(None, max_length=200)
    notes: Optional[str] = None
    primary_photo_url: Optional[str] = Field(None, max_length=500)
    gallery_urls: Optional[List[str]] = None
    documents: Optional[List[str]] = None

    @field_validator("year")
    @classmethod
    def validate_year(cls, v):
        return _check_year(v)


class CarUnitCreate(CarUnitBase):
    """Create car unit"""
    status: UnitStatus = "draft"


class CarUnitUpdate(BaseModel):
    """Update car unit; status and sold_price are written as given"""
    brand: Optional[str] = Field(None, min_length=1, max_length=100)
    model: Optional[str] = Field(None, min_length=1, max_length=100)
    year: Optional[int] = None
    transmission: Optional[Transmission] = None
    odometer: Optional[int] = Field(None, ge=0)
    color: Optional[str] = Field(None, min_length=1, max_length=50)
    vin: Optional[str] = Field(None, max_length=50)
    stock_code: Optional[str] = Field(None, min_length=1, max_length=50)
    location: Optional[str] = Field(None, max_length=200)
    notes: Optional[str] = None
    primary_photo_url: Optional[str] = Field(None, max_length=500)
    gallery_urls: Optional[List[str]] = None
    documents: Optional[List[str]] = None
    status: Optional[UnitStatus] = None
    sold_price: Optional[float] = Field(None, ge=0)

    @field_validator("year")
    @classmethod
    def validate_year(cls, v):
        return _check_year(v)

    @field_validator(
        "brand", "model", "year", "transmission", "odometer", "color", "stock_code", "status"
    )
    @classmethod
    def reject_null(cls, v, info):
        # Omit the field to leave it unchanged
        if v is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return v


class CarUnitFilter(BaseModel):
    """Inventory filters"""
    status: Optional[UnitStatus] = None
    year_min: Optional[int] = None
    year_max: Optional[int] = None
    transmission: Optional[Transmission] = None
    price_min: Optional[float] = None
    price_max: Optional[float] = None
    partner_id: Optional[int] = None
    search: Optional[str] = None
    page: int = Field(1, ge=1)
    limit: int = Field(20, ge=1, le=100)


class StatusChangeRequest(BaseModel):
    """Status change"""
    status: UnitStatus
    notes: Optional[str] = None


class CarUnitResponse(BaseModel):
    """Car unit response"""
    id: int
    brand: str
    model: str
    year: int
    transmission: str
    odometer: int
    color: str
    vin: Optional[str] = None
    stock_code: str
    location: Optional[str] = None
    notes: Optional[str] = None
    primary_photo_url: Optional[str] = None
    gallery_urls: Optional[List[str]] = None
    documents: Optional[List[str]] = None
    status: str
    sold_price: Optional[float] = None
    display_name: str = ""
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class CarUnitListResponse(BaseModel):
    """Inventory page"""
    data: List[CarUnitResponse]
    total: int
    page: int
    limit: int
