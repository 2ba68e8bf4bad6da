from typing import Optional

from fastapi import APIRouter, Depends, Query

from dinner.api.responses import error_response
from dinner.events.web_observers import get_events as get_web_events
from dinner.infra.Pantry_Repository import reading_from_staples
from dinner.infra.Store import JsonStore, get_store
from dinner.logic.pantry.analysis import split_stock_up
from dinner.logic.pantry.depletion import depletion_counts
from dinner.logic.pantry.frequency import recalculate_frequency_ranks
from dinner.logic.pantry.stock import mark_staple_as_stocked, set_staple_status
from dinner.utilities.validators import StapleStatusInput

router = APIRouter(prefix="/api/pantry", tags=["pantry"])


@router.get("")
def api_list_staples(store: JsonStore = Depends(get_store)):
    """Every staple by name, with the meal count driving its status."""
    counts = depletion_counts(store)
    staples = []
    for s in reading_from_staples(store).get_items():
        row = s.to_dict()
        row["meal_count"] = counts.get(s.name, 0)
        staples.append(row)
    return {"staples": staples}


@router.get("/stock-up")
def api_stock_up(store: JsonStore = Depends(get_store)):
    return split_stock_up(reading_from_staples(store).get_items())


# -------------------- API: Pantry Alerts (polled by frontend) --------------------
@router.get("/alerts")
def api_pantry_alerts(
    since: Optional[int] = Query(default=None, description="Return events with id greater than this value")
):
    """
    Return recent pantry alert events (status changes, low stock).

    Client polling strategy:
        1. First call without 'since' to load current backlog.
        2. Store 'next_cursor' from response.
        3. Subsequent polls: /api/pantry/alerts?since=<next_cursor>
    """
    return get_web_events(since)


@router.post("/recalculate")
def api_recalculate(store: JsonStore = Depends(get_store)):
    outcome = recalculate_frequency_ranks(store)
    if not outcome:
        return error_response(outcome, status_code=500)
    return {"ok": True, "ranks": outcome.value}


@router.post("/{staple_id}/stocked")
def api_mark_stocked(staple_id: str, store: JsonStore = Depends(get_store)):
    outcome = mark_staple_as_stocked(store, staple_id)
    if not outcome:
        return error_response(outcome)
    return outcome.to_dict()


@router.put("/{staple_id}/status")
def api_set_status(staple_id: str, body: StapleStatusInput, store: JsonStore = Depends(get_store)):
    outcome = set_staple_status(store, staple_id, body.status)
    if not outcome:
        return error_response(outcome)
    return {"ok": True, "id": staple_id, "status": body.status}
