"""Record store and audit store against a real (in-memory SQLite) database."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))
sys.path.insert(0, os.path.dirname(__file__))

import pytest
from datetime import date, datetime, timezone
from unittest.mock import MagicMock
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from app.database import Base
from app.models.ownership_history import OwnershipHistory
from app.models.rc import Rc
from app.repositories.ownership_history_repository import OwnershipHistoryRepository
from app.repositories.rc_repository import DuplicateRcNumberError, RcRepository
from app.services.rc_service import RcService
from app.services.rc_validation import RcValidationError
from helpers import make_body, make_rc


@pytest.fixture
def db():
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    yield session
    session.close()
    engine.dispose()


@pytest.fixture
def service(db):
    return RcService(RcRepository(db), OwnershipHistoryRepository(db), MagicMock(), upsert_on_update=True)


def rc_count(db):
    return db.query(Rc).count()


class TestRcRepository:
    def test_save_without_id_generates_one(self, db):
        rc = make_rc(rc_id=None)
        saved = RcRepository(db).save(rc)
        assert saved.id
        assert RcRepository(db).find_by_id(saved.id).rc_number == "KA01AB1234"

    def test_save_with_unknown_id_inserts(self, db):
        saved = RcRepository(db).save(make_rc("rc-new"))
        assert saved.id == "rc-new"
        assert rc_count(db) == 1

    def test_save_with_existing_id_replaces(self, db):
        repo = RcRepository(db)
        repo.save(make_rc("rc-1", owner_name="John Buyer"))

        repo.save(make_rc("rc-1", owner_name="Jane Doe", state="DL"))

        assert rc_count(db) == 1
        stored = repo.find_by_id("rc-1")
        assert stored.owner_name == "Jane Doe"
        assert stored.registration_state == "DL"

    def test_duplicate_rc_number_rejected(self, db):
        repo = RcRepository(db)
        repo.save(make_rc("rc-1", rc_number="KA01AB1234"))

        with pytest.raises(DuplicateRcNumberError):
            repo.save(make_rc("rc-2", rc_number="KA01AB1234"))

        # session rolled back and still usable
        assert rc_count(db) == 1
        assert repo.find_by_id("rc-2") is None

    def test_delete_missing_id_is_noop(self, db):
        repo = RcRepository(db)
        repo.save(make_rc("rc-1"))
        repo.delete_by_id("nope")
        assert rc_count(db) == 1

    def test_delete_removes_row(self, db):
        repo = RcRepository(db)
        repo.save(make_rc("rc-1"))
        repo.delete_by_id("rc-1")
        assert repo.find_by_id("rc-1") is None

    def test_find_by_rc_number_and_state(self, db):
        repo = RcRepository(db)
        repo.save(make_rc("1", "KA01", state="KA"))
        repo.save(make_rc("2", "DL01", state="DL"))
        assert repo.find_by_rc_number("DL01").id == "2"
        assert repo.find_by_rc_number("MH01") is None
        assert [rc.id for rc in repo.find_by_state("KA")] == ["1"]

    def test_expired_insurance_and_puc(self, db):
        repo = RcRepository(db)
        lapsed = make_rc("1", "KA01")
        lapsed.insurance = {"provider": "ACKO", "valid_till": "2024-03-31"}
        lapsed.puc = {"valid_till": "2025-12-31"}
        current = make_rc("2", "KA02")
        current.insurance = {"provider": "ACKO", "valid_till": "2026-03-31"}
        current.puc = {"valid_till": "2024-06-30"}
        uninsured = make_rc("3", "KA03")
        for rc in (lapsed, current, uninsured):
            repo.save(rc)

        today = date(2025, 1, 1)
        assert [rc.id for rc in repo.find_with_expired_insurance(today)] == ["1"]
        assert [rc.id for rc in repo.find_with_expired_puc(today)] == ["2"]

    def test_identifier_counts(self, db):
        repo = RcRepository(db)
        repo.save(make_rc("1", "KA01"))
        assert repo.count_by_chassis_number("CHS-KA01") == 1
        assert repo.count_by_engine_number("ENG-MISSING") == 0


class TestOwnershipHistoryRepository:
    def test_history_newest_first(self, db):
        repo = OwnershipHistoryRepository(db)
        repo.save(OwnershipHistory(rc_id="rc-1", rc_number="KA01", previous_owner_name="A",
                                   new_owner_name="B", transferred_at=datetime(2024, 1, 1, tzinfo=timezone.utc)))
        repo.save(OwnershipHistory(rc_id="rc-1", rc_number="KA01", previous_owner_name="B",
                                   new_owner_name="C", transferred_at=datetime(2024, 6, 1, tzinfo=timezone.utc)))
        repo.save(OwnershipHistory(rc_id="rc-2", rc_number="KA02", previous_owner_name="X",
                                   new_owner_name="Y", transferred_at=datetime(2024, 3, 1, tzinfo=timezone.utc)))

        entries = repo.find_by_rc_id("rc-1")
        assert [e.new_owner_name for e in entries] == ["C", "B"]


class TestLifecycleOnRealStores:
    @pytest.mark.asyncio
    async def test_transfer_history_survives_delete(self, db, service):
        rc_id = (await service.create(make_body())).id
        await service.update(rc_id, make_body(owner={"name": "Jane Doe"}, stolen=True))

        await service.delete(rc_id)

        assert service.get_by_id(rc_id) is None
        history = service.get_history(rc_id)
        assert [(h.previous_owner_name, h.new_owner_name, h.stolen_at_transfer) for h in history] == [
            ("John Buyer", "Jane Doe", True)
        ]

    @pytest.mark.asyncio
    async def test_update_keeps_single_row(self, db, service):
        created = await service.create(make_body())
        updated = await service.update(created.id, make_body(previousOwners=["A"]))
        assert rc_count(db) == 1
        assert updated.owners_count == 2

    @pytest.mark.asyncio
    async def test_invalid_create_leaves_store_unchanged(self, db, service):
        await service.create(make_body())
        with pytest.raises(RcValidationError):
            await service.create(make_body(rcNumber="DL02CD5678", chassisNumber=""))
        assert rc_count(db) == 1

    @pytest.mark.asyncio
    async def test_delete_missing_leaves_store_unchanged(self, db, service):
        await service.create(make_body())
        await service.delete("nope")
        assert rc_count(db) == 1
