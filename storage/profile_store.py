"""Profil-Store: selbstheilendes Laden und entprelltes Speichern des Profils."""

import json
import logging
from typing import Callable

from pydantic import ValidationError

from models.profile import Profile
from storage.file_access import FileAccess
from storage.retry_save import Debouncer, RetrySaver

logger = logging.getLogger(__name__)

ProfileListener = Callable[[Profile], None]


def parse_profile(text: str) -> Profile:
    """Parst eine Profildatei; fehlende Schlüssel der obersten Ebene werden ergänzt.

    Raises:
        ValueError: Kein gültiges JSON-Objekt oder Validierungsfehler.
    """
    raw = json.loads(text)
    if not isinstance(raw, dict):
        raise ValueError("Profildatei enthält kein JSON-Objekt")
    defaults = json.loads(Profile().to_json())
    for key in Profile.top_level_keys():
        if raw.get(key) is None:
            raw[key] = defaults[key]
            logger.warning(f"Profil: Schlüssel '{key}' fehlt, Standardwert ergänzt")
    try:
        return Profile.model_validate(raw)
    except ValidationError as e:
        raise ValueError(f"Profil ungültig: {e}") from e


class ProfileStore:
    """Hält das Profil im Speicher und schreibt Änderungen entprellt zurück.

    Änderungen werden NICHT automatisch erkannt: Die ändernde Stelle ruft
    notify_changed() auf (oder nutzt update()). Beide müssen innerhalb einer
    laufenden Event-Loop aufgerufen werden.
    """

    def __init__(self, files: FileAccess, path: str,
                 debounce_seconds: float = 0.3, max_retries: int = 5) -> None:
        self.files = files
        self.path = path
        self.profile = Profile()
        self._saver = RetrySaver(self._write, "Profil", max_retries=max_retries)
        self._debouncer = Debouncer(self._saver.request, debounce_seconds)
        self._listeners: list[ProfileListener] = []

    # ─── Laden ───

    async def load(self) -> Profile:
        """Lädt das Profil. Bei fehlender oder defekter Datei: Standardprofil + sofort speichern."""
        if not await self.files.exists(self.path):
            logger.info(f"Keine Profildatei gefunden ({self.path}), neues Profil wird angelegt")
            self.profile = Profile()
            await self.save_now()
            return self.profile
        try:
            text = await self.files.read_file(self.path)
            self.profile = parse_profile(text)
            logger.debug(f"Profil geladen: {self.path}")
        except (OSError, ValueError) as e:
            logger.error(f"Profil konnte nicht geladen werden, Standardprofil wird verwendet: {e}")
            self.profile = Profile()
            await self.save_now()
        return self.profile

    # ─── Änderungen ───

    def add_listener(self, listener: ProfileListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: ProfileListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def notify_changed(self) -> None:
        """Meldet eine Profiländerung: entprelltes Speichern + Listener."""
        self._debouncer.trigger()
        for listener in list(self._listeners):
            listener(self.profile)

    def update(self, mutate: Callable[[Profile], None]) -> Profile:
        """Wendet eine Änderung auf das Profil an und meldet sie."""
        mutate(self.profile)
        self.notify_changed()
        return self.profile

    def replace(self, profile: Profile) -> None:
        """Ersetzt das komplette Profil (z.B. Demo-Profil) und meldet die Änderung."""
        self.profile = profile
        self.notify_changed()

    # ─── Speichern ───

    async def save_now(self) -> None:
        """Schreibt sofort (ohne Entprellen) und wartet auf das Ergebnis."""
        self._debouncer.cancel()
        self._saver.request()
        await self._saver.flush()

    async def close(self) -> None:
        """Führt ausstehende Speicherungen aus und wartet darauf."""
        self._debouncer.flush()
        await self._saver.flush()

    async def _write(self) -> None:
        await self.files.write_file(self.path, self.profile.to_json())
