"""
Registration Certificate (RC) table — one row per registered vehicle.
Nested sections (owner, vehicle info, registration, insurance, PUC) are
stored as JSON documents with snake_case keys; identifiers and fraud flags
stay at the root so they can be indexed and filtered.
"""

import uuid
from sqlalchemy import Column, Integer, String, DateTime, Boolean, JSON
from app.database import Base


def new_rc_id() -> str:
    return uuid.uuid4().hex


class Rc(Base):
    __tablename__ = "rc_records"

    id = Column(String(36), primary_key=True, default=new_rc_id)
    rc_number = Column(String(50), unique=True, nullable=False, index=True)

    owner = Column(JSON, nullable=False)              # name, phone, email, address, aadhaar_last4
    vehicle_info = Column(JSON, nullable=False)       # type, make, model, variant, fuel_type, color, manufacture_year
    registration_info = Column(JSON)                  # registration_date, valid_till, active
    insurance = Column(JSON)                          # provider, policy_number, valid_till
    puc = Column(JSON)                                # certificate_number, valid_till

    chassis_number = Column(String(100), nullable=False, index=True)
    engine_number = Column(String(100), nullable=False, index=True)
    registration_state = Column(String(50), nullable=False, index=True)

    stolen = Column(Boolean)
    suspicious = Column(Boolean)

    owners_count = Column(Integer, nullable=False, default=1)   # always 1 + len(previous_owners)
    previous_owners = Column(JSON, nullable=False, default=list)

    created_at = Column(DateTime(timezone=True), index=True)
    updated_at = Column(DateTime(timezone=True))

    @property
    def owner_name(self):
        return (self.owner or {}).get("name")

    @property
    def owner_email(self):
        return (self.owner or {}).get("email")

    def __repr__(self):
        return f"<Rc {self.rc_number} owner={self.owner_name} state={self.registration_state}>"
