"""Manual pantry status changes: "got it" restocks and explicit status overrides."""
from __future__ import annotations
import logging
from datetime import datetime
from typing import Optional

from dinner.domain.Outcome import Outcome
from dinner.domain.Pantry import Pantry
from dinner.infra.Pantry_Repository import get_staple, update_staple
from dinner.infra.Store import DataAccessError, JsonStore
from dinner.utilities.constants import PANTRY_STATUSES, STATUS_FULL

logger = logging.getLogger(__name__)

__all__ = ["mark_staple_as_stocked", "set_staple_status"]


def mark_staple_as_stocked(store: JsonStore, staple_id: str, *, now: Optional[datetime] = None) -> Outcome:
    """Back to Full, stamping the restock times."""
    stamp = (now or datetime.now()).isoformat()
    try:
        ok = update_staple(store, staple_id, {
            "status": STATUS_FULL,
            "marked_stocked_at": stamp,
            "last_restocked": stamp,
            "updated_at": stamp,
        })
    except DataAccessError as e:
        return Outcome.failure(e.message)
    if not ok:
        return Outcome.failure("Staple not found")
    logger.info("Staple %s marked as stocked", staple_id)
    return Outcome.success(id=staple_id)


def set_staple_status(store: JsonStore, staple_id: str, status: str, *,
                      now: Optional[datetime] = None) -> Outcome:
    """Set any status by hand; the only path that puts a staple in Out."""
    if status not in PANTRY_STATUSES:
        return Outcome.failure(f"Invalid status: {status}")
    now = now or datetime.now()
    try:
        staple = get_staple(store, staple_id)
        if staple is None:
            return Outcome.failure("Staple not found")
        if staple.status == status:
            return Outcome.success(staple, id=staple_id)
        update_staple(store, staple_id, {"status": status, "updated_at": now.isoformat()})
    except DataAccessError as e:
        return Outcome.failure(e.message)
    Pantry([staple]).set_status(staple, status, when=now)
    return Outcome.success(staple, id=staple_id)
