"""
Car unit model

A single vehicle tracked from acquisition to sale.
- stock_code is the dealership's own identifier (unique)
- sold_price is derived from the sale_income ledger rows, see services.ledger
- units are never deleted; the terminal status is archived
"""
from datetime import datetime
from sqlalchemy import Column, Integer, String, Text, DateTime, DECIMAL
from sqlalchemy.dialects.sqlite import JSON
from sqlalchemy.orm import relationship
from dealership.db.base import Base


class CarUnit(Base):
    """Car unit in inventory"""
    __tablename__ = "car_units"

    id = Column(Integer, primary_key=True, index=True)

    brand = Column(String(100), nullable=False, index=True, comment="Brand")
    model = Column(String(100), nullable=False, comment="Model")
    year = Column(Integer, nullable=False, comment="Model year")
    # manual / automatic / cvt
    transmission = Column(String(20), nullable=False, comment="Transmission")
    odometer = Column(Integer, nullable=False, comment="Odometer reading (km)")
    color = Column(String(50), nullable=False, comment="Colour")
    vin = Column(String(50), comment="VIN")
    stock_code = Column(String(50), unique=True, nullable=False, index=True, comment="Stock code (unique)")
    location = Column(String(200), comment="Lot / location")
    notes = Column(Text, comment="Notes")

    primary_photo_url = Column(String(500), comment="Primary photo")
    gallery_urls = Column(JSON, comment="Gallery photo URLs")
    documents = Column(JSON, comment="Document references")

    # draft -> bought -> recond -> ready -> listed -> sold -> archived
    status = Column(String(20), nullable=False, default="draft", index=True, comment="Lifecycle status")

    sold_price = Column(DECIMAL(12, 2), comment="Sold price (derived from sale income)")

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    transactions = relationship("Transaction", back_populates="car")

    def __repr__(self):
        return f"<CarUnit {self.stock_code} ({self.status})>"

    @property
    def display_name(self) -> str:
        return f"{self.year} {self.brand} {self.model}"
