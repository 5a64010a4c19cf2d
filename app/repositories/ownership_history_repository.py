"""Append-only audit store for ownership transfers. Nothing here updates or deletes."""

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from app.models.ownership_history import OwnershipHistory


class OwnershipHistoryRepository:
    def __init__(self, db: Session):
        self.db = db

    def save(self, entry: OwnershipHistory) -> OwnershipHistory:
        self.db.add(entry)
        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
        self.db.refresh(entry)
        return entry

    def find_by_rc_id(self, rc_id: str) -> list[OwnershipHistory]:
        """All transfers for an RC, newest first."""
        return (
            self.db.query(OwnershipHistory)
            .filter(OwnershipHistory.rc_id == rc_id)
            .order_by(OwnershipHistory.transferred_at.desc())
            .all()
        )
