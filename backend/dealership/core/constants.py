"""Value sets shared by models, schemas and services."""

from typing import Dict, FrozenSet, Literal, Tuple

UnitStatus = Literal["draft", "bought", "recond", "ready", "listed", "sold", "archived"]
Transmission = Literal["manual", "automatic", "cvt"]
PartnerType = Literal["broker", "workshop", "salon", "transport", "other"]
TransactionType = Literal[
    "acquisition", "broker_fee", "workshop", "detailing", "transport",
    "admin", "tax", "other_expense", "sale_income", "other_income"
]
AuditAction = Literal["create", "update", "delete", "status_change"]

UNIT_STATUSES: Tuple[str, ...] = ("draft", "bought", "recond", "ready", "listed", "sold", "archived")

# Directed graph of allowed status changes; archived is terminal
STATUS_TRANSITIONS: Dict[str, FrozenSet[str]] = {
    "draft": frozenset({"bought", "archived"}),
    "bought": frozenset({"recond", "ready", "archived"}),
    "recond": frozenset({"ready", "listed", "archived"}),
    "ready": frozenset({"listed", "sold", "archived"}),
    "listed": frozenset({"sold", "recond", "archived"}),
    "sold": frozenset({"archived"}),
    "archived": frozenset(),
}

# Units still on the lot
INACTIVE_STATUSES: FrozenSet[str] = frozenset({"sold", "archived"})

# Ledger partition used by every profit figure
ACQUISITION_TYPES: FrozenSet[str] = frozenset({"acquisition"})
EXPENSE_TYPES: FrozenSet[str] = frozenset({
    "broker_fee", "workshop", "detailing", "transport", "admin", "tax", "other_expense"
})
INCOME_TYPES: FrozenSet[str] = frozenset({"sale_income", "other_income"})

SALE_INCOME = "sale_income"
BROKER_FEE = "broker_fee"

ENTITY_CAR_UNIT = "car_unit"
ENTITY_TRANSACTION = "transaction"
ENTITY_PARTNER = "partner"
