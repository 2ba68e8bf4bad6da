"""Pantry aggregate: tracked staples keyed by normalized name, with status-change notifications."""
from datetime import datetime
from typing import Dict, Iterable, List, Optional

from dinner.domain.Ingredient import normalize_name
from dinner.events.Event_Bus import GLOBAL_EVENT_BUS, PANTRY_LOW_STOCK, PANTRY_STATUS_CHANGED
from dinner.utilities.constants import PANTRY_STATUSES, STATUS_FULL, STATUS_LOW, STOCKED_STATUSES


class PantryStaple:
    def __init__(self, id: Optional[str] = None, name: str = "", status: str = STATUS_FULL,
                 last_restocked: Optional[str] = None, frequency_rank: int = 0,
                 marked_stocked_at: Optional[str] = None, updated_at: Optional[str] = None):
        if status not in PANTRY_STATUSES:
            raise ValueError(f"Unknown pantry status: {status!r}")
        self.id = id
        self.name = name
        self.status = status
        self.last_restocked = last_restocked
        self.frequency_rank = frequency_rank
        self.marked_stocked_at = marked_stocked_at
        self.updated_at = updated_at

    @property
    def key(self) -> str:
        return normalize_name(self.name)

    @property
    def is_stocked(self) -> bool:
        return self.status in STOCKED_STATUSES

    def __str__(self) -> str:
        return f"{self.name} - {self.status} - rank {self.frequency_rank}"

    __repr__ = __str__

    @staticmethod
    def from_dict(data):
        d = dict(data) if isinstance(data, dict) else {}
        status = d.get("status") or STATUS_FULL
        if status not in PANTRY_STATUSES:
            status = STATUS_FULL
        return PantryStaple(
            id=d.get("id"),
            name=str(d.get("name") or ""),
            status=status,
            last_restocked=d.get("last_restocked"),
            frequency_rank=d.get("frequency_rank") or 0,
            marked_stocked_at=d.get("marked_stocked_at"),
            updated_at=d.get("updated_at"),
        )

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "status": self.status,
            "last_restocked": self.last_restocked,
            "frequency_rank": self.frequency_rank,
            "marked_stocked_at": self.marked_stocked_at,
            "updated_at": self.updated_at,
        }


class Pantry:
    def __init__(self, staples: Optional[Iterable[PantryStaple]] = None):
        self.items: List[PantryStaple] = []
        self._index: Dict[str, PantryStaple] = {}
        self._event_bus = GLOBAL_EVENT_BUS
        for staple in staples or []:
            self.add_item(staple)

    # --- Observer helpers -------------------------------------------------
    def set_event_bus(self, bus):
        self._event_bus = bus
        return self

    def _notify_status_changed(self, staple: PantryStaple, previous: str):
        self._event_bus.publish(PANTRY_STATUS_CHANGED, {
            "staple": staple,
            "previous": previous,
            "status": staple.status,
        })
        if staple.status == STATUS_LOW:
            self._event_bus.publish(PANTRY_LOW_STOCK, {
                "staple": staple,
                "frequency_rank": staple.frequency_rank,
            })

    def add_item(self, staple: PantryStaple):
        '''
        Adds a staple. The first staple seen for a normalized name wins the index.
        '''
        self.items.append(staple)
        if staple.key and staple.key not in self._index:
            self._index[staple.key] = staple

    def get(self, name: str) -> Optional[PantryStaple]:
        return self._index.get(normalize_name(name))

    def is_stocked(self, name: str) -> bool:
        '''True when the matching staple is Full or Half; untracked names are not stocked.'''
        staple = self.get(name)
        return bool(staple and staple.is_stocked)

    def set_status(self, staple: PantryStaple, status: str, *, when: Optional[datetime] = None) -> bool:
        '''
        Changes a staple's status in memory and notifies subscribers.
        Returns False when the status is unchanged.
        '''
        if status not in PANTRY_STATUSES:
            raise ValueError(f"Unknown pantry status: {status!r}")
        if staple.status == status:
            return False
        previous = staple.status
        staple.status = status
        staple.updated_at = (when or datetime.now()).isoformat()
        self._notify_status_changed(staple, previous)
        return True

    def get_items(self):
        return self.items

    def __len__(self) -> int:
        return len(self.items)

    def __str__(self) -> str:
        items_str = ",\n\t".join(str(item) for item in self.items)
        return f"Staples:\n\t{items_str}"

    def __repr__(self) -> str:
        return self.__str__()

    @staticmethod
    def from_dict(data):
        '''
        Builds a Pantry from a list of stored staple rows.
        '''
        return Pantry(PantryStaple.from_dict(row) for row in data or [])

    def to_dict(self):
        return [item.to_dict() for item in self.items]
