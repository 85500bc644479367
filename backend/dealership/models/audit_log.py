"""
Audit log model - append-only trail of every mutation

Actions:
- create / update / delete
- status_change: car unit lifecycle moves

before_data / after_data hold JSON snapshots built by the services.
"""

from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.dialects.sqlite import JSON
from dealership.db.base import Base


class AuditLog(Base):
    """Audit trail entry"""
    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True, index=True)

    actor = Column(String(100), nullable=False, comment="Who performed the action")

    # car_unit / transaction / partner
    entity_type = Column(String(50), nullable=False, index=True, comment="Entity type")
    entity_id = Column(Integer, nullable=False, index=True, comment="Entity ID")

    action = Column(String(20), nullable=False, index=True, comment="Action")

    before_data = Column(JSON, comment="Snapshot before")
    after_data = Column(JSON, comment="Snapshot after")

    created_at = Column(DateTime, default=datetime.utcnow, index=True)

    def __repr__(self):
        return f"<AuditLog {self.action} {self.entity_type}:{self.entity_id}>"

    @property
    def action_display(self) -> str:
        action_map = {
            "create": "Created",
            "update": "Updated",
            "delete": "Deleted",
            "status_change": "Status changed"
        }
        return action_map.get(self.action, self.action)
