"""Configuration management for the What's with Dinner service."""
import os
from typing import Final, Optional
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables from .env file if it exists
env_path = Path(__file__).parent.parent / '.env'
if env_path.exists():
    load_dotenv(env_path)


def _optional_int(key: str) -> Optional[int]:
    raw = os.getenv(key, '').strip()
    return int(raw) if raw else None


# Application Settings
APP_HOST: Final[str] = os.getenv('APP_HOST', '0.0.0.0')
APP_PORT: Final[int] = int(os.getenv('APP_PORT', '8000'))
DEBUG: Final[bool] = os.getenv('DEBUG', 'False').lower() == 'true'
LOG_LEVEL: Final[str] = os.getenv('LOG_LEVEL', 'INFO').upper()

# Single-tenant household id stamped on meal_history rows
DEFAULT_USER_ID: Final[str] = os.getenv('DEFAULT_USER_ID', '00000000-0000-0000-0000-000000000001')

# Recipe extraction
OPENAI_API_KEY: Final[str] = os.getenv('OPENAI_API_KEY', '')
OPENAI_MODEL: Final[str] = os.getenv('OPENAI_MODEL', 'gpt-4o-mini')
PAGE_TEXT_LIMIT: Final[int] = int(os.getenv('PAGE_TEXT_LIMIT', '12000'))
FETCH_TIMEOUT_SECONDS: Final[float] = float(os.getenv('FETCH_TIMEOUT_SECONDS', '15'))

# Depletion model (meal counts per ingredient)
HALF_MEAL_COUNT: Final[int] = int(os.getenv('HALF_MEAL_COUNT', '3'))
LOW_MEAL_COUNT: Final[int] = int(os.getenv('LOW_MEAL_COUNT', '5'))
# Unset means lifetime counting
DEPLETION_WINDOW_DAYS: Final[Optional[int]] = _optional_int('DEPLETION_WINDOW_DAYS')

# Suggestions
COVERAGE_THRESHOLD: Final[float] = float(os.getenv('COVERAGE_THRESHOLD', '0.8'))
SUGGESTION_LOOKBACK_DAYS: Final[int] = int(os.getenv('SUGGESTION_LOOKBACK_DAYS', '14'))
MAX_ALTERNATIVES: Final[int] = int(os.getenv('MAX_ALTERNATIVES', '5'))
SAME_WEEKDAY_ALTERNATIVES: Final[int] = int(os.getenv('SAME_WEEKDAY_ALTERNATIVES', '3'))
REUSE_LOOKBACK_MONTHS: Final[int] = int(os.getenv('REUSE_LOOKBACK_MONTHS', '2'))

# File Paths
BASE_DIR: Final[Path] = Path(__file__).parent.parent
DATA_DIR: Final[Path] = Path(os.getenv('DATA_DIR', str(BASE_DIR / 'data')))
