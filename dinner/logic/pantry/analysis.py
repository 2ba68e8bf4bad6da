"""Pantry analysis helpers.

Stock-up view: staples that need restocking, most relevant first.
"""
from __future__ import annotations
from typing import List, Dict, Any, Iterable

from dinner.domain.Pantry import PantryStaple
from dinner.utilities.constants import STATUS_LOW, STATUS_OUT

__all__ = ["stock_up_list", "split_stock_up"]

_STATUS_ORDER = {STATUS_OUT: 0, STATUS_LOW: 1}


def stock_up_list(staples: Iterable[PantryStaple]) -> List[PantryStaple]:
    """Low or Out staples: Out first, then higher frequency rank, then name."""
    needing = [s for s in staples if s.status in _STATUS_ORDER]
    needing.sort(key=lambda s: (_STATUS_ORDER[s.status], -(s.frequency_rank or 0), s.key))
    return needing


def split_stock_up(staples: Iterable[PantryStaple]) -> Dict[str, List[Dict[str, Any]]]:
    """Group the stock-up list into {'out': [...], 'low': [...]} rows for the web layer."""
    out: List[Dict[str, Any]] = []
    low: List[Dict[str, Any]] = []
    for s in stock_up_list(staples):
        row = {
            'id': s.id,
            'name': s.name,
            'status': s.status,
            'frequency_rank': s.frequency_rank,
            'last_restocked': s.last_restocked,
        }
        (out if s.status == STATUS_OUT else low).append(row)
    return {'out': out, 'low': low, 'count': len(out) + len(low)}
