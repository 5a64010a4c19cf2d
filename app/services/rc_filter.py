"""
In-memory filtering and page slicing over the full RC list.
The whole table is loaded per request; fine at registry scale, move the
predicates into SQL if the table grows past what fits comfortably in memory.
"""

import math
from typing import Iterable, Optional
from app.config import settings


def _contains(value: Optional[str], needle: str) -> bool:
    return value is not None and needle.lower() in value.lower()


def _given(criterion: Optional[str]) -> bool:
    return criterion is not None and criterion.strip() != ""


def matches(rc, state: Optional[str] = None, stolen: Optional[bool] = None,
            suspicious: Optional[bool] = None, make: Optional[str] = None,
            owner_name: Optional[str] = None) -> bool:
    """True when the record satisfies every criterion that was supplied."""
    if _given(state) and not _contains(rc.registration_state, state):
        return False
    # None on the record never equals an explicit True/False criterion
    if stolen is not None and rc.stolen != stolen:
        return False
    if suspicious is not None and rc.suspicious != suspicious:
        return False
    if _given(make) and not _contains((rc.vehicle_info or {}).get("make"), make):
        return False
    if _given(owner_name) and not _contains((rc.owner or {}).get("name"), owner_name):
        return False
    return True


def filter_records(records: Iterable, state: Optional[str] = None, stolen: Optional[bool] = None,
                   suspicious: Optional[bool] = None, make: Optional[str] = None,
                   owner_name: Optional[str] = None) -> list:
    return [rc for rc in records
            if matches(rc, state, stolen, suspicious, make, owner_name)]


def normalize_page(page: Optional[int], size: Optional[int]) -> tuple[int, int]:
    """Negative page -> 0, missing or non-positive size -> DEFAULT_PAGE_SIZE."""
    page = max(page or 0, 0)
    if not size or size < 1:
        size = settings.DEFAULT_PAGE_SIZE
    return page, size


def page_bundle(items: list, page: int, size: int, total: int) -> dict:
    return {
        "items": items,
        "page": page,
        "size": size,
        "total": total,
        "total_pages": math.ceil(total / size),
    }


def paginate(items: list, page: Optional[int] = 0, size: Optional[int] = None) -> dict:
    """Slice one page out of an already-filtered list; page/size in the result are the effective values."""
    page, size = normalize_page(page, size)
    total = len(items)
    start = min(page * size, total)
    end = min(start + size, total)
    return page_bundle(items[start:end], page, size, total)
