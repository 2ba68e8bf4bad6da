"""Event helper utilities.

Publishing shortcuts for the events raised outside the Pantry aggregate.

Quick import:
    from dinner.events.event_helpers import publish_meal_logged, publish_ranks_recalculated
"""
from __future__ import annotations
from typing import Optional
from .Event_Bus import (
    publish,
    MEAL_LOGGED, PANTRY_RANKS_RECALCULATED,
)

__all__ = ['publish_meal_logged', 'publish_ranks_recalculated', 'MEAL_LOGGED', 'PANTRY_RANKS_RECALCULATED']


def publish_meal_logged(meal_id: Optional[str], recipe_id: str, consumed_at: str):
    """Publish a meal.logged event."""
    publish(MEAL_LOGGED, {
        'meal_id': meal_id,
        'recipe_id': recipe_id,
        'consumed_at': consumed_at,
    })


def publish_ranks_recalculated(updated: int, total: int):
    """Publish a pantry.ranks_recalculated event.

    Payload structure:
        { 'updated': <staples whose rank changed>, 'total': <staples scored> }
    """
    publish(PANTRY_RANKS_RECALCULATED, {
        'updated': updated,
        'total': total,
    })
