"""Mitternachts-Timer: erzeugt den Tagesplan bei jedem Tageswechsel neu."""

import asyncio
import logging
from datetime import datetime
from typing import Awaitable, Callable, Optional

from resolver.calendar_math import next_midnight

logger = logging.getLogger(__name__)


class Regenerator:
    """Wartet bis Mitternacht, ruft ``on_midnight`` auf und plant sich neu ein.

    Uhr und Wartefunktion sind austauschbar (Tests). cancel() ist idempotent
    und muss beim Herunterfahren aufgerufen werden.
    """

    def __init__(self, on_midnight: Callable[[datetime], Awaitable[None]],
                 clock: Callable[[], datetime] = datetime.now,
                 sleep: Callable[[float], Awaitable[None]] = asyncio.sleep) -> None:
        self._on_midnight = on_midnight
        self._clock = clock
        self._sleep = sleep
        self._task: Optional[asyncio.Task] = None
        self.runs = 0

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Startet den Timer (ein bereits laufender Timer wird ersetzt)."""
        self.cancel()
        self._task = asyncio.get_running_loop().create_task(self._loop())

    def cancel(self) -> None:
        if self._task is not None:
            self._task.cancel()
            self._task = None

    async def _loop(self) -> None:
        while True:
            now = self._clock()
            target = next_midnight(now)
            logger.debug(f"Nächste Tagesplan-Erzeugung: {target.isoformat()}")
            # Früh aufgewacht (Uhr verstellt, Ungenauigkeit) → weiter warten
            while now < target:
                await self._sleep((target - now).total_seconds())
                now = self._clock()
            logger.info("Mitternacht erreicht, Tagesplan wird neu erzeugt")
            try:
                await self._on_midnight(now)
            except Exception:
                logger.exception("Tagesplan-Erzeugung um Mitternacht fehlgeschlagen")
            self.runs += 1
