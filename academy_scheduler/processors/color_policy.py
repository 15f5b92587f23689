# File: academy_scheduler/processors/color_policy.py
"""
Display color lookups shared by the calendar and the impacted-classes view.
Every lookup is total: unknown inputs get the neutral color.
"""

from dataclasses import dataclass
from typing import Optional, Tuple, Union

from academy_scheduler.core.config_manager import Config
from academy_scheduler.models import SessionRecord, SessionStatus


@dataclass(frozen=True)
class DisplayColors:
    background: str
    border: str
    text: str


def category_color(category: Optional[str]) -> str:
    """Background color for a session category."""
    if not category:
        return Config.NEUTRAL_COLOR
    return Config.CATEGORY_COLORS.get(str(category).strip().upper(), Config.NEUTRAL_COLOR)


def status_colors(status: Union[SessionStatus, str, None]) -> Tuple[str, str]:
    """(background, text) pair for a status badge."""
    if isinstance(status, str):
        try:
            status = SessionStatus(status.strip().capitalize())
        except ValueError:
            status = None
    return Config.STATUS_COLORS.get(status, (Config.NEUTRAL_COLOR, Config.EVENT_TEXT_COLOR))


def event_colors(session: SessionRecord) -> DisplayColors:
    """Colors for a calendar event: keyed on category, border matches background."""
    color = category_color(session.category)
    return DisplayColors(background=color, border=color, text=Config.EVENT_TEXT_COLOR)
