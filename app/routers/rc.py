"""
RC registry endpoints.
Reads are open; POST/PUT/DELETE are gated by AdminKeyMiddleware (X-ADMIN-KEY)
before they reach this router.
"""

from datetime import datetime, timezone
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.exc import DataError
from sqlalchemy.orm import Session
from app.database import get_db
from app.repositories.ownership_history_repository import OwnershipHistoryRepository
from app.repositories.rc_repository import RcRepository
from app.schemas.ownership_history import OwnershipHistoryOut
from app.schemas.rc import IdentifierCounts, RcIn, RcOut, RcPage, RcStats
from app.services.notification_service import email_notifier
from app.services.rc_service import RcService

router = APIRouter()


def get_rc_service(db: Session = Depends(get_db)) -> RcService:
    """FastAPI dependency — one service per request, bound to the request's session."""
    return RcService(RcRepository(db), OwnershipHistoryRepository(db), email_notifier)


def _or_404(rc, what: str):
    if rc is None:
        raise HTTPException(status_code=404, detail=f"RC {what} not found")
    return rc


def _as_utc(value: datetime) -> datetime:
    """Query timestamps without an offset are read as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


# ── Collection reads (static paths before /rc/{rc_id}) ───────────────────
@router.get("/rc", response_model=list[RcOut], summary="List all RC records")
def list_rcs(service: RcService = Depends(get_rc_service)):
    return service.get_all()


@router.get("/rc/search", response_model=RcOut, summary="Exact lookup by RC number")
def search_rc(rc_number: str = Query(..., alias="rcNumber"),
              service: RcService = Depends(get_rc_service)):
    return _or_404(service.search_by_rc_number(rc_number), rc_number)


@router.get("/rc/search/pattern", response_model=RcPage, summary="Regex search on RC number (case-insensitive)")
def search_rc_pattern(q: str, page: int = 0, size: Optional[int] = None,
                      service: RcService = Depends(get_rc_service)):
    try:
        return service.search_rc_number_pattern(q, page, size)
    except DataError:
        raise HTTPException(status_code=400, detail=f"Invalid pattern: {q!r}")


@router.get("/rc/filter", response_model=list[RcOut], summary="Filter by state / flags / make / owner")
def filter_rcs(
    state: Optional[str] = Query(None, alias="registrationState"),
    stolen: Optional[bool] = None,
    suspicious: Optional[bool] = None,
    make: Optional[str] = None,
    owner_name: Optional[str] = Query(None, alias="ownerName"),
    service: RcService = Depends(get_rc_service),
):
    """All supplied criteria must match. Text criteria are case-insensitive substrings."""
    return service.get_filtered(state, stolen, suspicious, make, owner_name)


@router.get("/rc/paged", response_model=RcPage, summary="Filtered list, one page at a time")
def paged_rcs(
    state: Optional[str] = Query(None, alias="registrationState"),
    stolen: Optional[bool] = None,
    suspicious: Optional[bool] = None,
    make: Optional[str] = None,
    owner_name: Optional[str] = Query(None, alias="ownerName"),
    page: int = 0,
    size: Optional[int] = None,
    service: RcService = Depends(get_rc_service),
):
    return service.get_paged(state, stolen, suspicious, make, owner_name, page, size)


@router.get("/rc/stats", response_model=RcStats, summary="Dashboard counters and monthly registrations")
def rc_stats(service: RcService = Depends(get_rc_service)):
    return service.get_stats()


@router.get("/rc/state/{state}", response_model=list[RcOut], summary="RCs registered in a state")
def rcs_by_state(state: str, service: RcService = Depends(get_rc_service)):
    return service.get_by_state(state)


@router.get("/rc/expired/insurance", response_model=list[RcOut], summary="RCs with lapsed insurance")
def expired_insurance(service: RcService = Depends(get_rc_service)):
    return service.get_expired_insurance()


@router.get("/rc/expired/puc", response_model=list[RcOut], summary="RCs with lapsed PUC certificate")
def expired_puc(service: RcService = Depends(get_rc_service)):
    return service.get_expired_puc()


@router.get("/rc/created", response_model=list[RcOut], summary="RCs created within a time range")
def created_between(start: datetime, end: datetime, service: RcService = Depends(get_rc_service)):
    start, end = _as_utc(start), _as_utc(end)
    if start > end:
        raise HTTPException(status_code=400, detail="start must not be after end")
    return service.get_created_between(start, end)


@router.get("/rc/identifiers", response_model=IdentifierCounts, summary="How many RCs share a chassis / engine number")
def identifier_counts(
    chassis_number: Optional[str] = Query(None, alias="chassisNumber"),
    engine_number: Optional[str] = Query(None, alias="engineNumber"),
    service: RcService = Depends(get_rc_service),
):
    if not chassis_number and not engine_number:
        raise HTTPException(status_code=400, detail="chassisNumber or engineNumber is required")
    return service.count_identifiers(chassis_number, engine_number)


# ── Single record ────────────────────────────────────────────────────────
@router.get("/rc/{rc_id}", response_model=RcOut, summary="Get an RC by id")
def get_rc(rc_id: str, service: RcService = Depends(get_rc_service)):
    return _or_404(service.get_by_id(rc_id), rc_id)


@router.get("/rc/{rc_id}/history", response_model=list[OwnershipHistoryOut],
            summary="Ownership transfers for an RC, newest first")
def rc_history(rc_id: str, service: RcService = Depends(get_rc_service)):
    return service.get_history(rc_id)


@router.post("/rc", response_model=RcOut, summary="Register a new RC (admin)")
async def create_rc(body: RcIn, service: RcService = Depends(get_rc_service)):
    return await service.create(body)


@router.put("/rc/{rc_id}", response_model=RcOut, summary="Replace an RC (admin); owner change is audited")
async def update_rc(rc_id: str, body: RcIn, service: RcService = Depends(get_rc_service)):
    return await service.update(rc_id, body)


@router.delete("/rc/{rc_id}", summary="Delete an RC (admin); history is kept")
async def delete_rc(rc_id: str, service: RcService = Depends(get_rc_service)):
    await service.delete(rc_id)
    return {"status": "deleted", "id": rc_id}
