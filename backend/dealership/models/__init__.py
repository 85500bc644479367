# Data models

from dealership.models.car_unit import CarUnit
from dealership.models.partner import Partner
from dealership.models.transaction import Transaction
from dealership.models.audit_log import AuditLog

__all__ = [
    "CarUnit",
    "Partner",
    "Transaction",
    "AuditLog",
]
