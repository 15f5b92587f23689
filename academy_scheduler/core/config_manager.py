# File: academy_scheduler/core/config_manager.py
"""
Centralized configuration management for the academy scheduler.
Loads settings from environment variables and fixture files.
"""

import os
import json
from pathlib import Path
from typing import Dict, Any, Tuple
from dotenv import load_dotenv

from academy_scheduler.models.enums import SessionCategory, SessionStatus, Granularity

# Load environment variables
load_dotenv()

class Config:
    """Application configuration singleton."""

    # Base directories
    BASE_DIR = Path(__file__).parent.parent.parent  # Go up 3 levels from academy_scheduler/core/

    LOGS_DIR = BASE_DIR / "logs"
    FIXTURES_DIR = BASE_DIR / "fixtures"
    ENV_FILE = BASE_DIR / ".env"

    # Backend API
    API_BASE_URL = os.getenv("ACADEMY_API_BASE_URL", "")
    API_TOKEN = os.getenv("ACADEMY_API_TOKEN")
    REQUEST_TIMEOUT = float(os.getenv("REQUEST_TIMEOUT", "30"))

    SESSIONS_PATH = "classes/class-schedule"
    SESSION_PATH = "classes/class-schedule/{session_id}"
    VACATIONS_PATH = "vacation/teacher/{instructor_id}"

    # Calendar Settings
    TARGET_TIMEZONE = os.getenv("TIMEZONE", "UTC")
    WEEK_START_DAY = int(os.getenv("WEEK_START_DAY", "6"))  # 0=Monday ... 6=Sunday
    DEFAULT_GRANULARITY = Granularity.WEEK

    # Category Color Mapping (keys are upper-cased category names)
    CATEGORY_COLORS: Dict[str, str] = {
        SessionCategory.DANCE.name: '#8B5CF6',
        SessionCategory.VOCAL.name: '#10B981',
        SessionCategory.INSTRUMENT.name: '#F59E0B',
        SessionCategory.WORKSHOP.name: '#EF4444',
    }
    NEUTRAL_COLOR = '#6B7280'
    EVENT_TEXT_COLOR = '#ffffff'

    # Status badge colors: (background, text)
    STATUS_COLORS: Dict[SessionStatus, Tuple[str, str]] = {
        SessionStatus.SCHEDULED: ('#DBEAFE', '#1E40AF'),
        SessionStatus.ONGOING: ('#DCFCE7', '#166534'),
        SessionStatus.COMPLETED: ('#F3F4F6', '#1F2937'),
        SessionStatus.CANCELLED: ('#FEE2E2', '#991B1B'),
    }

    @classmethod
    def load_fixture(cls, path: Path) -> Dict[str, Any]:
        """Load a sessions/vacations fixture from a JSON file."""
        path = Path(path)
        if not path.is_absolute() and not path.exists():
            path = cls.FIXTURES_DIR / path
        if not path.exists():
            raise FileNotFoundError(f"Fixture file not found: {path}")

        with open(path, 'r', encoding='utf-8') as f:
            return json.load(f)

    @classmethod
    def validate(cls) -> bool:
        """Validate that all required configuration is present."""
        errors = []

        if not cls.API_BASE_URL:
            errors.append("ACADEMY_API_BASE_URL not set")

        if not cls.API_TOKEN:
            errors.append("ACADEMY_API_TOKEN not set")

        if not 0 <= cls.WEEK_START_DAY <= 6:
            errors.append(f"WEEK_START_DAY must be 0-6, got {cls.WEEK_START_DAY}")

        if errors:
            for error in errors:
                print(f"Configuration Error: {error}")
            return False

        return True
