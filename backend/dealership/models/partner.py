"""
Partner model - brokers, workshops, salons, transport companies

Deleting a partner only deactivates it, and only while no transaction
references it.
"""
from datetime import datetime
from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime
from sqlalchemy.orm import relationship
from dealership.db.base import Base


class Partner(Base):
    """External party involved in transactions"""
    __tablename__ = "partners"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False, index=True, comment="Name")
    # broker / workshop / salon / transport / other
    type = Column(String(20), nullable=False, index=True, comment="Partner type")
    contact_info = Column(Text, comment="Contact details")

    is_active = Column(Boolean, nullable=False, default=True, comment="Active")

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    transactions = relationship("Transaction", back_populates="partner")

    def __repr__(self):
        return f"<Partner {self.name} ({self.type})>"

    @property
    def type_display(self) -> str:
        type_map = {
            "broker": "Broker",
            "workshop": "Workshop",
            "salon": "Salon",
            "transport": "Transport",
            "other": "Other"
        }
        return type_map.get(self.type, self.type)
