"""Web-facing observers for pantry events.

This module subscribes to the GLOBAL_EVENT_BUS for:
  - pantry.status_changed
  - pantry.low_stock

and stores a lightweight in-memory ring buffer of recent events that the web
layer serves at /api/pantry/alerts, so clients can show restock alerts
right after a meal is logged.

Design:
  * Each event stored with an auto-increment integer id (cursor) so clients
    can request only newer events (since=<last_id_seen>).
  * A Lock guards the buffer; for multi-process deployments the buffer is
    per-process, which is fine for non-critical notifications.
  * A MAX_EVENTS cap prevents unbounded memory growth.
"""
from __future__ import annotations
import logging
from typing import List, Dict, Any
from threading import Lock
from datetime import datetime, timezone

from .Event_Bus import (
    GLOBAL_EVENT_BUS, PANTRY_STATUS_CHANGED, PANTRY_LOW_STOCK
)

logger = logging.getLogger(__name__)

_lock = Lock()
_events: List[Dict[str, Any]] = []
_next_id = 1
MAX_EVENTS = 300  # keep a few hundred recent events
_started = False


def _record(event_name: str, payload: Any):  # signature expected by EventBus
    global _next_id
    with _lock:
        evt: Dict[str, Any] = {
            'id': _next_id,
            'type': event_name,
            'ts': datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
        }
        if isinstance(payload, dict):
            staple = payload.get('staple')
            if staple is not None and hasattr(staple, 'name'):
                evt['name'] = staple.name
                evt['staple_id'] = getattr(staple, 'id', None)
                evt['status'] = getattr(staple, 'status', None)
            for k in ('previous', 'frequency_rank'):
                if k in payload:
                    evt[k] = payload[k]
        _events.append(evt)
        _next_id += 1
        # Trim buffer
        if len(_events) > MAX_EVENTS:
            del _events[: len(_events) - MAX_EVENTS]


def start(bus=GLOBAL_EVENT_BUS):
    """Idempotent start: subscribe observers once."""
    global _started
    if _started:
        return
    bus.subscribe(PANTRY_STATUS_CHANGED, _record)
    bus.subscribe(PANTRY_LOW_STOCK, _record)
    _started = True
    logger.debug("Pantry alert observers subscribed")


def get_events(since: int | None = None) -> Dict[str, Any]:
    """Return events newer than 'since' (exclusive).

    If since is None, returns every buffered event.
    Response includes next_cursor (largest id) so client can poll with since=next_cursor.
    """
    with _lock:
        if since is None:
            data = list(_events)
        else:
            data = [e for e in _events if e['id'] > since]
        next_cursor = _events[-1]['id'] if _events else since or 0
    return {'events': data, 'next_cursor': next_cursor}


def clear():
    """Drop buffered events (cursor ids keep increasing)."""
    with _lock:
        _events.clear()


__all__ = ['start', 'get_events', 'clear', 'MAX_EVENTS']
