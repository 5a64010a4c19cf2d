"""
RC lifecycle: create, update with ownership-transfer auditing, delete, lookups,
plus the filter / pagination / stats read models.

Update runs as three independent steps, none of them rolled back:
  1. persist the RC row
  2. append an ownership_history row if owner.name changed
  3. hand an owner notification to the mail pool
A failure in step 2 is logged as a consistency warning and the saved RC is
still returned; step 3 never fails the caller.
"""

from datetime import date, datetime, timezone
from typing import Optional
from sqlalchemy.exc import SQLAlchemyError
from app.config import settings
from app.models.ownership_history import OwnershipHistory
from app.models.rc import Rc
from app.repositories.ownership_history_repository import OwnershipHistoryRepository
from app.repositories.rc_repository import RcRepository
from app.schemas.rc import RcIn
from app.services.notification_service import EmailNotifier
from app.services.rc_filter import filter_records, normalize_page, page_bundle, paginate
from app.services.rc_stats import compute_stats, stats_timezone
from app.services.rc_validation import build_record, validate_required
from app.utils.logger import get_logger
from app.utils.metrics import record_operation

logger = get_logger(__name__)


class RcNotFoundError(Exception):
    """Update targeted an unknown id while upsert-on-update is disabled."""

    def __init__(self, rc_id: str):
        super().__init__(f"RC {rc_id} not found")
        self.rc_id = rc_id


def _now() -> datetime:
    return datetime.now(timezone.utc)


class RcService:
    def __init__(self, rc_repo: RcRepository, history_repo: OwnershipHistoryRepository,
                 notifier: EmailNotifier, upsert_on_update: Optional[bool] = None):
        self.rc_repo = rc_repo
        self.history_repo = history_repo
        self.notifier = notifier
        self.upsert_on_update = settings.RC_UPDATE_UPSERT if upsert_on_update is None else upsert_on_update

    # ── Writes ───────────────────────────────────────────────────────────
    async def create(self, body: RcIn) -> Rc:
        validate_required(body)
        rc = build_record(body)
        rc.created_at = rc.updated_at = _now()

        saved = self.rc_repo.save(rc)
        record_operation("create")
        logger.info(f"[RC] Created {saved.rc_number} id={saved.id} owner={saved.owner_name}")

        if saved.owner_email:
            self.notifier.notify_created(saved.owner_email, saved.owner_name, saved.rc_number)
        return saved

    async def update(self, rc_id: str, body: RcIn) -> Rc:
        existing = self.rc_repo.find_by_id(rc_id)
        validate_required(body)
        if existing is None and not self.upsert_on_update:
            raise RcNotFoundError(rc_id)

        # Snapshot before save: merge() writes into the same identity as `existing`
        previous_owner = existing.owner_name if existing is not None else None
        now = _now()
        rc = build_record(body, rc_id=rc_id)
        rc.created_at = existing.created_at if existing is not None else now
        rc.updated_at = now

        saved = self.rc_repo.save(rc)
        record_operation("update")
        if existing is None:
            logger.info(f"[RC] Update on unknown id {rc_id} created {saved.rc_number}")
        else:
            logger.info(f"[RC] Updated {saved.rc_number} id={saved.id}")

        new_owner = body.owner.name
        if previous_owner is not None and new_owner is not None and previous_owner != new_owner:
            self._record_transfer(saved, previous_owner, new_owner, now)
            if saved.owner_email:
                self.notifier.notify_transferred(saved.owner_email, saved.owner_name, saved.rc_number)
        return saved

    def _record_transfer(self, saved: Rc, previous_owner: str, new_owner: str, at: datetime):
        entry = OwnershipHistory(
            rc_id=saved.id,
            rc_number=saved.rc_number,
            previous_owner_name=previous_owner,
            new_owner_name=new_owner,
            transferred_at=at,
            stolen_at_transfer=saved.stolen,
            suspicious_at_transfer=saved.suspicious,
        )
        try:
            self.history_repo.save(entry)
        except SQLAlchemyError:
            logger.warning(
                f"[TRANSFER] Consistency warning: RC {saved.rc_number} saved with owner "
                f"{new_owner!r} but history entry from {previous_owner!r} was not written",
                exc_info=True,
            )
            return
        logger.info(f"[TRANSFER] {saved.rc_number}: {previous_owner!r} -> {new_owner!r}")

    async def delete(self, rc_id: str):
        self.rc_repo.delete_by_id(rc_id)
        record_operation("delete")
        logger.info(f"[RC] Deleted id={rc_id}")

    # ── Lookups ──────────────────────────────────────────────────────────
    def get_all(self) -> list[Rc]:
        return self.rc_repo.find_all()

    def get_by_id(self, rc_id: str) -> Optional[Rc]:
        return self.rc_repo.find_by_id(rc_id)

    def search_by_rc_number(self, rc_number: str) -> Optional[Rc]:
        found = self.rc_repo.find_by_rc_number(rc_number)
        record_operation("search")
        return found

    def get_history(self, rc_id: str) -> list[OwnershipHistory]:
        return self.history_repo.find_by_rc_id(rc_id)

    def get_by_state(self, state: str) -> list[Rc]:
        return self.rc_repo.find_by_state(state)

    def get_expired_insurance(self, today: Optional[date] = None) -> list[Rc]:
        return self.rc_repo.find_with_expired_insurance(today or date.today())

    def get_expired_puc(self, today: Optional[date] = None) -> list[Rc]:
        return self.rc_repo.find_with_expired_puc(today or date.today())

    def get_created_between(self, start: datetime, end: datetime) -> list[Rc]:
        return self.rc_repo.find_created_between(start, end)

    def search_rc_number_pattern(self, pattern: str, page: int = 0, size: Optional[int] = None) -> dict:
        page, size = normalize_page(page, size)
        rows, total = self.rc_repo.search_by_rc_number(pattern, offset=page * size, limit=size)
        return page_bundle(rows, page, size, total)

    def count_identifiers(self, chassis_number: Optional[str] = None,
                          engine_number: Optional[str] = None) -> dict:
        result = {"chassis_number": chassis_number, "engine_number": engine_number}
        if chassis_number:
            result["chassis_number_count"] = self.rc_repo.count_by_chassis_number(chassis_number)
        if engine_number:
            result["engine_number_count"] = self.rc_repo.count_by_engine_number(engine_number)
        return result

    # ── Read models ──────────────────────────────────────────────────────
    def get_filtered(self, state: Optional[str] = None, stolen: Optional[bool] = None,
                     suspicious: Optional[bool] = None, make: Optional[str] = None,
                     owner_name: Optional[str] = None) -> list[Rc]:
        return filter_records(self.rc_repo.find_all(), state, stolen, suspicious, make, owner_name)

    def get_paged(self, state: Optional[str] = None, stolen: Optional[bool] = None,
                  suspicious: Optional[bool] = None, make: Optional[str] = None,
                  owner_name: Optional[str] = None, page: int = 0,
                  size: Optional[int] = None) -> dict:
        return paginate(self.get_filtered(state, stolen, suspicious, make, owner_name), page, size)

    def get_stats(self) -> dict:
        return compute_stats(self.rc_repo.find_all(), stats_timezone())
