"""Persistenz und Laufzeitsteuerung (asyncio, eine Event-Loop)."""

from .file_access import FileAccess, LocalFileAccess
from .retry_save import Debouncer, RetrySaver
from .profile_store import ProfileStore, parse_profile
from .today_store import TodayConfigStore
from .regenerator import Regenerator
from .context import Component, ScheduleContext

__all__ = [
    "FileAccess",
    "LocalFileAccess",
    "Debouncer",
    "RetrySaver",
    "ProfileStore",
    "parse_profile",
    "TodayConfigStore",
    "Regenerator",
    "Component",
    "ScheduleContext",
]
