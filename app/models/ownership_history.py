"""
Ownership history table — append-only audit trail of owner name changes.
Written by rc_service on update. rc_id is a plain indexed column (no FK)
so history survives deletion of the RC it describes.
"""

from sqlalchemy import Column, Integer, String, DateTime, Boolean
from app.database import Base


class OwnershipHistory(Base):
    __tablename__ = "ownership_history"

    id = Column(Integer, primary_key=True, autoincrement=True)
    rc_id = Column(String(36), nullable=False, index=True)
    rc_number = Column(String(50), nullable=False, index=True)   # snapshot at transfer time
    previous_owner_name = Column(String(200), nullable=False)
    new_owner_name = Column(String(200), nullable=False)
    transferred_at = Column(DateTime(timezone=True), nullable=False, index=True)
    stolen_at_transfer = Column(Boolean)
    suspicious_at_transfer = Column(Boolean)

    def __repr__(self):
        return (f"<OwnershipHistory {self.id} rc={self.rc_number} "
                f"{self.previous_owner_name!r} -> {self.new_owner_name!r}>")
