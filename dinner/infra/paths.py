from pathlib import Path

from dinner.utilities.config import DATA_DIR as _CONFIGURED_DATA_DIR

# Centralized data location (single source of truth)
DATA_DIR = Path(_CONFIGURED_DATA_DIR).resolve()


def collection_file(data_dir: Path, collection: str) -> Path:
    """File backing a collection inside a data directory: <data_dir>/<collection>.json."""
    return Path(data_dir) / f"{collection}.json"


__all__ = ['DATA_DIR', 'collection_file']
