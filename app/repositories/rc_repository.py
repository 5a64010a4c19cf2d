"""
Record store for RC rows.
save() is an upsert keyed by id: rows without an id are inserted and get a
generated one, rows with an id replace whatever is stored under it.
Each write commits on its own; there is no transaction spanning calls.
"""

from datetime import date, datetime
from typing import Optional
from sqlalchemy import func
from sqlalchemy.exc import DataError, IntegrityError
from sqlalchemy.orm import Session
from app.models.rc import Rc
from app.utils.logger import get_logger

logger = get_logger(__name__)


class DuplicateRcNumberError(Exception):
    """Raised when a save collides with the unique rc_number index."""

    def __init__(self, rc_number: str):
        super().__init__(f"RC number {rc_number} already registered")
        self.rc_number = rc_number


class RcRepository:
    def __init__(self, db: Session):
        self.db = db

    # ── CRUD ─────────────────────────────────────────────────────────────
    def find_all(self) -> list[Rc]:
        return self.db.query(Rc).all()

    def find_by_id(self, rc_id: str) -> Optional[Rc]:
        return self.db.query(Rc).filter(Rc.id == rc_id).first()

    def find_by_rc_number(self, rc_number: str) -> Optional[Rc]:
        return self.db.query(Rc).filter(Rc.rc_number == rc_number).first()

    def save(self, rc: Rc) -> Rc:
        if rc.id is None:
            self.db.add(rc)
        else:
            rc = self.db.merge(rc)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            logger.warning(f"[RC] Duplicate rc_number rejected: {rc.rc_number}")
            raise DuplicateRcNumberError(rc.rc_number)
        self.db.refresh(rc)
        return rc

    def delete_by_id(self, rc_id: str) -> None:
        self.db.query(Rc).filter(Rc.id == rc_id).delete(synchronize_session=False)
        self.db.commit()

    # ── Read-only queries ────────────────────────────────────────────────
    def find_by_state(self, state: str) -> list[Rc]:
        return self.db.query(Rc).filter(Rc.registration_state == state).all()

    def find_with_expired_insurance(self, today: date) -> list[Rc]:
        # valid_till is stored as an ISO date string, so string order is date order
        valid_till = Rc.insurance["valid_till"].as_string()
        return self.db.query(Rc).filter(valid_till < today.isoformat()).all()

    def find_with_expired_puc(self, today: date) -> list[Rc]:
        valid_till = Rc.puc["valid_till"].as_string()
        return self.db.query(Rc).filter(valid_till < today.isoformat()).all()

    def find_created_between(self, start: datetime, end: datetime) -> list[Rc]:
        return (
            self.db.query(Rc)
            .filter(Rc.created_at >= start, Rc.created_at <= end)
            .order_by(Rc.created_at)
            .all()
        )

    def search_by_rc_number(self, pattern: str, offset: int = 0, limit: int = 10) -> tuple[list[Rc], int]:
        """Case-insensitive regex match on rc_number. Returns (page rows, total matches)."""
        q = self.db.query(Rc).filter(Rc.rc_number.regexp_match(pattern, flags="i"))
        try:
            total = q.count()
            rows = q.order_by(Rc.rc_number).offset(offset).limit(limit).all()
        except DataError:
            # PostgreSQL rejects a malformed pattern; the session must be usable afterwards
            self.db.rollback()
            logger.info(f"[RC] Rejected rc_number pattern {pattern!r}")
            raise
        return rows, total

    def count_by_chassis_number(self, chassis_number: str) -> int:
        return self.db.query(func.count(Rc.id)).filter(Rc.chassis_number == chassis_number).scalar()

    def count_by_engine_number(self, engine_number: str) -> int:
        return self.db.query(func.count(Rc.id)).filter(Rc.engine_number == engine_number).scalar()
