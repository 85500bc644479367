"""
Ledger transaction model

Each row is one expense or income booked against a car unit, optionally
through a partner.

Type partition (see core.constants):
- acquisition: purchase of the car
- expenses: broker_fee, workshop, detailing, transport, admin, tax, other_expense
- incomes: sale_income, other_income
"""
from datetime import datetime
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, DECIMAL
from sqlalchemy.orm import relationship
from dealership.db.base import Base


class Transaction(Base):
    """Ledger entry for a car unit"""
    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True, index=True)

    car_id = Column(Integer, ForeignKey("car_units.id"), nullable=False, index=True, comment="Car unit ID")
    partner_id = Column(Integer, ForeignKey("partners.id"), index=True, comment="Partner ID")

    type = Column(String(20), nullable=False, index=True, comment="Transaction type")
    amount = Column(DECIMAL(12, 2), nullable=False, comment="Amount")
    # Only used to derive broker_fee amounts from the sold price
    percentage = Column(DECIMAL(5, 2), comment="Percentage")
    description = Column(Text, comment="Description")

    date = Column(DateTime, nullable=False, default=datetime.utcnow, comment="Transaction date")

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    car = relationship("CarUnit", back_populates="transactions")
    partner = relationship("Partner", back_populates="transactions")

    def __repr__(self):
        return f"<Transaction {self.type} car={self.car_id} {self.amount}>"

    @property
    def type_display(self) -> str:
        type_map = {
            "acquisition": "Acquisition",
            "broker_fee": "Broker fee",
            "workshop": "Workshop",
            "detailing": "Detailing",
            "transport": "Transport",
            "admin": "Administration",
            "tax": "Tax",
            "other_expense": "Other expense",
            "sale_income": "Sale income",
            "other_income": "Other income"
        }
        return type_map.get(self.type, self.type)
