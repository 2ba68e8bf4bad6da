"""Data store gateway: four JSON-file collections with insert/update/delete/query.

Each collection lives in its own ``<collection>.json`` file (a list of row
dicts). Writes go through a temp file and a move so a crash never leaves a
half-written collection behind. ``pantry_staples.name`` is unique after
trimming and lower-casing; violating it raises DuplicateKeyError, which
callers creating staples treat as success.
"""
import json
import logging
import os
import shutil
import tempfile
from pathlib import Path
from threading import RLock
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple, Union
from uuid import uuid4

from dinner.domain.Ingredient import normalize_name
from dinner.infra.paths import DATA_DIR, collection_file
from dinner.utilities.constants import COLLECTIONS

logger = logging.getLogger(__name__)

Row = Dict[str, Any]
SortSpec = Sequence[Tuple[str, str]]

# collection -> (field, key function) pairs that must be unique
UNIQUE_CONSTRAINTS: Dict[str, List[Tuple[str, Callable[[Any], Any]]]] = {
    "pantry_staples": [("name", normalize_name)],
}


class DataAccessError(Exception):
    """The store could not read or write a collection."""

    code: Optional[str] = None

    def __init__(self, message: str, *, collection: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.collection = collection


class DuplicateKeyError(DataAccessError):
    """Unique constraint violation (same code Postgres uses for unique_violation)."""

    code = "23505"

    def __init__(self, collection: str, field: str, value: Any):
        super().__init__(f"duplicate key value violates unique constraint on {collection}.{field}: {value!r}",
                         collection=collection)
        self.field = field
        self.value = value


def _matches(row: Row, filter: Optional[Dict[str, Any]]) -> bool:
    if not filter:
        return True
    for field, expected in filter.items():
        actual = row.get(field)
        if isinstance(expected, (list, tuple, set, frozenset)):
            if actual not in expected:
                return False
        elif actual != expected:
            return False
    return True


def _sort_rows(rows: List[Row], sort: Optional[SortSpec]) -> List[Row]:
    # Apply keys from last to first so the first key dominates (stable sort)
    for field, direction in reversed(list(sort or [])):
        descending = str(direction).lower() == "desc"
        present = [r for r in rows if r.get(field) is not None]
        missing = [r for r in rows if r.get(field) is None]
        present.sort(key=lambda r: r.get(field), reverse=descending)
        rows = missing + present if not descending else present + missing
    return rows


class JsonStore:
    def __init__(self, data_dir: Union[str, Path] = DATA_DIR):
        self.data_dir = Path(data_dir)
        self._lock = RLock()

    def __repr__(self) -> str:
        return f"JsonStore({str(self.data_dir)!r})"

    # --- file helpers -----------------------------------------------------
    def _path(self, collection: str) -> Path:
        if collection not in COLLECTIONS:
            raise DataAccessError(f"Unknown collection: {collection}", collection=collection)
        return collection_file(self.data_dir, collection)

    def _load(self, collection: str) -> List[Row]:
        path = self._path(collection)
        if not path.exists():
            return []
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            logger.error("Invalid JSON in %s: %s", path, e)
            raise DataAccessError(f"Corrupt data file for {collection}: {e}", collection=collection) from e
        except OSError as e:
            raise DataAccessError(f"Cannot read {collection}: {e}", collection=collection) from e
        if not isinstance(data, list):
            raise DataAccessError(f"Corrupt data file for {collection}: expected a list", collection=collection)
        return data

    def _atomic_write(self, collection: str, rows: List[Row]):
        path = self._path(collection)
        try:
            os.makedirs(path.parent, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=str(path.parent), prefix=f".{collection}_", suffix=".json")
        except OSError as e:
            raise DataAccessError(f"Cannot write {collection}: {e}", collection=collection) from e
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as tmp:
                json.dump(rows, tmp, indent=2, ensure_ascii=False)
            shutil.move(tmp_path, path)
        except OSError as e:
            raise DataAccessError(f"Cannot write {collection}: {e}", collection=collection) from e
        finally:
            if os.path.exists(tmp_path):
                try:
                    os.remove(tmp_path)
                except OSError:
                    logger.warning("Could not remove temp file %s", tmp_path)

    def _check_unique(self, collection: str, rows: List[Row]):
        for field, key_fn in UNIQUE_CONSTRAINTS.get(collection, []):
            seen = set()
            for row in rows:
                key = key_fn(row.get(field))
                if key in seen:
                    raise DuplicateKeyError(collection, field, row.get(field))
                seen.add(key)

    # --- public gateway ---------------------------------------------------
    def insert(self, collection: str, rows: Union[Row, Iterable[Row]]):
        """Insert one row (dict) or many (iterable of dicts). Returns the stored copies."""
        single = isinstance(rows, dict)
        new_rows = [dict(rows)] if single else [dict(r) for r in rows]
        for row in new_rows:
            row.setdefault("id", uuid4().hex)
        with self._lock:
            current = self._load(collection)
            combined = current + new_rows
            self._check_unique(collection, combined)
            self._atomic_write(collection, combined)
        return new_rows[0] if single else new_rows

    def update(self, collection: str, filter: Optional[Dict[str, Any]], changes: Dict[str, Any]) -> List[Row]:
        with self._lock:
            rows = self._load(collection)
            updated = []
            for row in rows:
                if _matches(row, filter):
                    row.update(changes)
                    updated.append(dict(row))
            if updated:
                self._check_unique(collection, rows)
                self._atomic_write(collection, rows)
        return updated

    def delete(self, collection: str, filter: Optional[Dict[str, Any]]) -> int:
        with self._lock:
            rows = self._load(collection)
            kept = [r for r in rows if not _matches(r, filter)]
            removed = len(rows) - len(kept)
            if removed:
                self._atomic_write(collection, kept)
        return removed

    def query(self, collection: str, filter: Optional[Dict[str, Any]] = None,
              sort: Optional[SortSpec] = None, limit: Optional[int] = None) -> List[Row]:
        with self._lock:
            rows = [dict(r) for r in self._load(collection) if _matches(r, filter)]
        rows = _sort_rows(rows, sort)
        if limit is not None:
            rows = rows[:max(limit, 0)]
        return rows

    def get(self, collection: str, id: str) -> Optional[Row]:
        rows = self.query(collection, {"id": id}, limit=1)
        return rows[0] if rows else None


def get_store() -> JsonStore:
    """FastAPI dependency: the store over the configured data directory."""
    return JsonStore(DATA_DIR)


__all__ = ['JsonStore', 'DataAccessError', 'DuplicateKeyError', 'get_store', 'UNIQUE_CONSTRAINTS']
