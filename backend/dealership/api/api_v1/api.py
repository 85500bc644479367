"""API v1 router aggregation (no authentication)"""
from fastapi import APIRouter

from dealership.api.api_v1.endpoints import (
    car_units, partners, transactions, financial_summaries,
    reports, dashboard, exports, audit_logs
)

api_router = APIRouter()

# Inventory and ledger
api_router.include_router(car_units.router, prefix="/car-units", tags=["Car units"])
api_router.include_router(partners.router, prefix="/partners", tags=["Partners"])
api_router.include_router(transactions.router, prefix="/transactions", tags=["Transactions"])

# Reporting
api_router.include_router(financial_summaries.router, prefix="/financial-summaries", tags=["Financial summaries"])
api_router.include_router(reports.router, prefix="/reports", tags=["Reports"])
api_router.include_router(dashboard.router, prefix="/dashboard", tags=["Dashboard"])
api_router.include_router(exports.router, prefix="/exports", tags=["Exports"])

# System
api_router.include_router(audit_logs.router, prefix="/audit-logs", tags=["Audit log"])
