from datetime import datetime
from typing import Optional
from app.schemas.rc import CamelModel


class OwnershipHistoryOut(CamelModel):
    id: int
    rc_id: str
    rc_number: str
    previous_owner_name: str
    new_owner_name: str
    transferred_at: datetime
    stolen_at_transfer: Optional[bool]
    suspicious_at_transfer: Optional[bool]
