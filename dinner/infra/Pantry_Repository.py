"""Pantry staple persistence helpers."""

import logging
from typing import Any, Dict, Optional

from dinner.domain.Pantry import Pantry, PantryStaple
from dinner.infra.Store import DuplicateKeyError, JsonStore
from dinner.utilities.constants import STATUS_FULL

logger = logging.getLogger(__name__)


def reading_from_staples(store: JsonStore) -> Pantry:
    """Load every staple row into a Pantry aggregate."""
    return Pantry.from_dict(store.query("pantry_staples", sort=[("name", "asc")]))


def get_staple(store: JsonStore, staple_id: str) -> Optional[PantryStaple]:
    row = store.get("pantry_staples", staple_id)
    return PantryStaple.from_dict(row) if row else None


def insert_staple(store: JsonStore, name: str) -> bool:
    """Create a Full staple for a name. Returns False when one already exists (unique violation)."""
    name = (name or "").strip()
    if not name:
        return False
    try:
        store.insert("pantry_staples", {
            "name": name,
            "status": STATUS_FULL,
            "last_restocked": None,
            "frequency_rank": 0,
            "marked_stocked_at": None,
            "updated_at": None,
        })
    except DuplicateKeyError:
        logger.debug("Staple %r already tracked", name)
        return False
    logger.info("Tracking new pantry staple %r", name)
    return True


def update_staple(store: JsonStore, staple_id: str, changes: Dict[str, Any]) -> bool:
    return bool(store.update("pantry_staples", {"id": staple_id}, changes))
