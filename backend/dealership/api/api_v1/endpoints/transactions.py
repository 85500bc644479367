"""
Transaction ledger API
"""
from typing import Any, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from dealership.core.constants import TransactionType
from dealership.core.deps import get_db, get_actor
from dealership.models import Transaction
from dealership.schemas.transaction import (
    TransactionCreate,
    TransactionUpdate,
    TransactionResponse,
    TransactionListResponse)
from dealership.services import ledger

router = APIRouter()


def build_transaction_response(txn: Transaction) -> TransactionResponse:
    return TransactionResponse(
        id=txn.id,
        car_id=txn.car_id,
        partner_id=txn.partner_id,
        type=txn.type,
        type_display=txn.type_display,
        amount=float(txn.amount),
        percentage=float(txn.percentage) if txn.percentage is not None else None,
        description=txn.description,
        date=txn.date,
        created_at=txn.created_at,
        updated_at=txn.updated_at)


@router.get("/", response_model=TransactionListResponse)
async def list_transactions(
    *,
    db: AsyncSession = Depends(get_db),
    type: Optional[TransactionType] = Query(None, description="Transaction type"),
    partner_id: Optional[int] = Query(None)) -> Any:
    txns = await ledger.list_transactions(db, type=type, partner_id=partner_id)
    return TransactionListResponse(
        data=[build_transaction_response(t) for t in txns],
        total=len(txns)
    )


@router.post("/", response_model=TransactionResponse, status_code=201)
async def create_transaction(
    *,
    db: AsyncSession = Depends(get_db),
    actor: str = Depends(get_actor),
    txn_in: TransactionCreate) -> Any:
    txn = await ledger.create_transaction(db, txn_in, actor=actor)
    return build_transaction_response(txn)


@router.get("/{transaction_id}", response_model=TransactionResponse)
async def get_transaction(*, db: AsyncSession = Depends(get_db), transaction_id: int) -> Any:
    txn = await ledger.get_transaction(db, transaction_id)
    return build_transaction_response(txn)


@router.put("/{transaction_id}", response_model=TransactionResponse)
async def update_transaction(
    *,
    db: AsyncSession = Depends(get_db),
    actor: str = Depends(get_actor),
    transaction_id: int,
    txn_in: TransactionUpdate) -> Any:
    txn = await ledger.update_transaction(db, transaction_id, txn_in, actor=actor)
    return build_transaction_response(txn)


@router.delete("/{transaction_id}")
async def delete_transaction(
    *,
    db: AsyncSession = Depends(get_db),
    actor: str = Depends(get_actor),
    transaction_id: int) -> Any:
    return await ledger.delete_transaction(db, transaction_id, actor=actor)
