"""
Ledger transaction schemas

Amounts travel as numbers and are converted to Decimal inside the services.
"""
from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel, Field

from dealership.core.constants import TransactionType


class TransactionCreate(BaseModel):
    """Book a transaction against a car unit"""
    car_id: int = Field(..., description="Car unit ID")
    partner_id: Optional[int] = Field(None, description="Partner ID")
    type: TransactionType = Field(..., description="Transaction type")
    amount: float = Field(..., description="Amount")
    percentage: Optional[float] = Field(None, description="Broker fee percentage of the sold price")
    description: Optional[str] = None
    date: Optional[datetime] = Field(None, description="Defaults to now")


class TransactionUpdate(BaseModel):
    """
    Partial update. Only fields sent by the caller are applied;
    partner_id, percentage and description may be cleared with null.
    """
    car_id: Optional[int] = None
    partner_id: Optional[int] = None
    type: Optional[TransactionType] = None
    amount: Optional[float] = None
    percentage: Optional[float] = None
    description: Optional[str] = None
    date: Optional[datetime] = None


class TransactionResponse(BaseModel):
    id: int
    car_id: int
    partner_id: Optional[int] = None
    type: str
    type_display: str = ""
    amount: float
    percentage: Optional[float] = None
    description: Optional[str] = None
    date: datetime
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class TransactionListResponse(BaseModel):
    data: List[TransactionResponse]
    total: int
