"""ScheduleContext: bündelt Profil, Tagesplan und Mitternachts-Timer.

Ersetzt modulweite Zustände durch ein explizites Objekt mit init() und
teardown(). Resolver und Materializer bekommen das Profil als Parameter
und kennen den Kontext nicht.
"""

import asyncio
import logging
from datetime import datetime
from pathlib import Path
from typing import Awaitable, Callable, Optional, Protocol

from config.schema import AppConfig
from models.profile import Profile
from storage.file_access import FileAccess, LocalFileAccess
from storage.profile_store import ProfileStore
from storage.regenerator import Regenerator
from storage.today_store import TodayConfigStore

logger = logging.getLogger(__name__)


class Component(Protocol):
    """Minimale Fähigkeit eines ladbaren Bausteins."""

    async def on_load(self) -> None: ...

    async def on_unload(self) -> None: ...


class ScheduleContext:
    """Laufzeitkontext des Stundenplans (Component)."""

    def __init__(self, config: AppConfig, files: Optional[FileAccess] = None,
                 clock: Callable[[], datetime] = datetime.now,
                 sleep: Callable[[float], Awaitable[None]] = asyncio.sleep) -> None:
        self.config = config
        self.files = files or LocalFileAccess(Path(config.storage.data_dir))
        self.clock = clock
        self.profiles = ProfileStore(
            self.files,
            config.storage.profile_file,
            debounce_seconds=config.save.debounce_ms / 1000,
            max_retries=config.save.max_retries,
        )
        self.today = TodayConfigStore(
            self.files,
            config.storage.today_file,
            self.profiles,
            max_retries=config.save.max_retries,
            clock=clock,
        )
        self.regenerator = Regenerator(self._on_midnight, clock=clock, sleep=sleep)
        self.initialized = False

    @property
    def profile(self) -> Profile:
        return self.profiles.profile

    async def init(self) -> None:
        """Lädt Profil und Tagesplan und startet den Mitternachts-Timer."""
        if self.initialized:
            return
        await self.profiles.load()
        await self.today.load(self.clock())
        self.profiles.add_listener(self._on_profile_changed)
        self.regenerator.start()
        self.initialized = True
        logger.debug(f"ScheduleContext initialisiert ({self.files!r})")

    async def teardown(self) -> None:
        """Stoppt den Timer und schreibt ausstehende Änderungen."""
        self.regenerator.cancel()
        if not self.initialized:
            return
        self.profiles.remove_listener(self._on_profile_changed)
        await self.profiles.close()
        await self.today.close()
        self.initialized = False
        logger.debug("ScheduleContext beendet")

    async def on_load(self) -> None:
        await self.init()

    async def on_unload(self) -> None:
        await self.teardown()

    def _on_profile_changed(self, profile: Profile) -> None:
        self.today.regenerate()
        self.today.save()

    async def _on_midnight(self, now: datetime) -> None:
        self.today.regenerate(now)
        await self.today.save_now()
