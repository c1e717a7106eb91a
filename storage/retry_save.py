"""Speicher-Disziplin: Entprellen, Single-Flight und begrenzte Wiederholung.

- Debouncer: mehrere Auslösungen innerhalb von ``delay`` Sekunden → ein Aufruf
- RetrySaver: höchstens ein Schreibvorgang gleichzeitig pro Datei. Kommt
  während des Schreibens eine neue Anforderung, wird sie vorgemerkt und nach
  Abschluss GENAU EINMAL nachgeholt (nicht einmal pro Anforderung).
- Fehlgeschlagene Schreibvorgänge werden nacheinander wiederholt; nach
  ``max_retries`` Versuchen wird der Fehler geloggt, aber nie an den
  Aufrufer weitergereicht. Der Zustand im Speicher bleibt erhalten.

Alles läuft kooperativ auf einer Event-Loop, daher ohne Locks.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional

logger = logging.getLogger(__name__)


class RetrySaver:
    """Single-Flight-Schreiber mit Nachhol-Markierung und Wiederholungen."""

    def __init__(self, action: Callable[[], Awaitable[None]], name: str,
                 max_retries: int = 5) -> None:
        self._action = action
        self.name = name
        self.max_retries = max_retries
        self._task: Optional[asyncio.Task] = None
        self._pending = False
        self.successful_writes = 0
        self.failed_writes = 0   # Schreibvorgänge, die alle Versuche erschöpft haben

    @property
    def is_saving(self) -> bool:
        return self._task is not None and not self._task.done()

    def request(self) -> None:
        """Fordert einen Schreibvorgang an (muss in einer laufenden Event-Loop aufgerufen werden)."""
        if self.is_saving:
            self._pending = True
            return
        self._task = asyncio.get_running_loop().create_task(self._run())

    async def flush(self) -> None:
        """Wartet, bis der laufende Schreibvorgang (inkl. Nachholen) beendet ist."""
        if self._task is not None:
            await self._task

    async def _run(self) -> None:
        await self._attempt()
        while self._pending:
            self._pending = False
            await self._attempt()

    async def _attempt(self) -> bool:
        for attempt in range(1, self.max_retries + 1):
            try:
                await self._action()
            except Exception as e:
                if attempt < self.max_retries:
                    logger.warning(
                        f"{self.name}: Speichern fehlgeschlagen, neuer Versuch "
                        f"({attempt}/{self.max_retries}): {e}"
                    )
                    continue
                logger.error(
                    f"{self.name}: Speichern nach {self.max_retries} Versuchen "
                    f"fehlgeschlagen: {e}"
                )
                self.failed_writes += 1
                return False
            self.successful_writes += 1
            logger.debug(f"{self.name}: gespeichert")
            return True
        return False

    def __repr__(self) -> str:
        return f"RetrySaver({self.name!r}, saving={self.is_saving})"


class Debouncer:
    """Fasst Auslösungen innerhalb eines Zeitfensters zu einem Aufruf zusammen."""

    def __init__(self, callback: Callable[[], None], delay: float) -> None:
        self._callback = callback
        self.delay = delay
        self._handle: Optional[asyncio.TimerHandle] = None

    @property
    def is_pending(self) -> bool:
        return self._handle is not None

    def trigger(self) -> None:
        """(Neu-)Startet das Zeitfenster."""
        if self._handle is not None:
            self._handle.cancel()
        self._handle = asyncio.get_running_loop().call_later(self.delay, self._fire)

    def flush(self) -> None:
        """Führt einen vorgemerkten Aufruf sofort aus."""
        if self._handle is not None:
            self._handle.cancel()
            self._fire()

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self) -> None:
        self._handle = None
        self._callback()
