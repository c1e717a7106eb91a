"""Tagesplan-Store: Laden, Veralterungs-Prüfung, Neuerzeugung und Speichern."""

import json
import logging
from datetime import datetime
from typing import Callable, Optional

from pydantic import ValidationError

from models.today_config import TodayConfig
from resolver.materializer import GenerationResult, generate_today_config
from resolver.selector import select_active_root
from resolver.time_groups import resolve_curriculum
from storage.file_access import FileAccess
from storage.profile_store import ProfileStore
from storage.retry_save import RetrySaver

logger = logging.getLogger(__name__)

REQUIRED_KEYS = ("generateDate", "schedule")


class TodayConfigStore:
    """Hält den Tagesplan und das Zyklus-Kennzeichen für die Anzeige."""

    def __init__(self, files: FileAccess, path: str, profiles: ProfileStore,
                 max_retries: int = 5,
                 clock: Callable[[], datetime] = datetime.now) -> None:
        self.files = files
        self.path = path
        self.profiles = profiles
        self.clock = clock
        self.today: Optional[TodayConfig] = None
        # True = Zeitgruppen des Profils verweisen zyklisch aufeinander
        self.is_loop = False
        self.last_result: Optional[GenerationResult] = None
        self._saver = RetrySaver(self._write, "Tagesplan", max_retries=max_retries)

    def regenerate(self, now: Optional[datetime] = None) -> GenerationResult:
        """Erzeugt den Tagesplan aus dem aktuellen Profil neu."""
        now = now or self.clock()
        result = generate_today_config(self.profiles.profile, now)
        if result.is_loop:
            logger.error(
                "Tagesplan: zyklische Zeitgruppen – "
                + " → ".join(result.resolve.visited_ids)
            )
        else:
            logger.debug(f"Tagesplan erzeugt: {len(result.config.schedule)} Einträge")
        self.is_loop = result.is_loop
        self.today = result.config
        self.last_result = result
        return result

    async def load(self, now: Optional[datetime] = None) -> TodayConfig:
        """Lädt den Tagesplan; veraltete oder defekte Dateien werden sofort ersetzt."""
        now = now or self.clock()
        need_generate = False
        try:
            raw = json.loads(await self.files.read_file(self.path))
            if not isinstance(raw, dict):
                raise ValueError("Tagesplan-Datei enthält kein JSON-Objekt")
            missing = [k for k in REQUIRED_KEYS if raw.get(k) is None]
            if missing:
                logger.warning(f"Tagesplan-Datei: fehlende Felder {missing}")
                need_generate = True
            else:
                self.today = TodayConfig.model_validate(raw)
        except (OSError, ValueError, ValidationError) as e:
            logger.error(f"Tagesplan-Datei konnte nicht gelesen werden: {e}")
            need_generate = True

        if not need_generate and self.today.generate_date.date() != now.date():
            logger.info("Tagesplan stammt nicht von heute, wird neu erzeugt")
            need_generate = True

        if need_generate:
            self.regenerate(now)
            await self.save_now()
        else:
            self._refresh_loop_flag(now)
        return self.today

    def _refresh_loop_flag(self, now: datetime) -> None:
        """Übernommener Tagesplan: Zyklus-Kennzeichen aus dem aktuellen Profil bestimmen."""
        profile = self.profiles.profile
        selection = select_active_root(profile.enable_config, now)
        result = resolve_curriculum(now, selection, profile)
        if result.is_loop:
            logger.error(
                "Tagesplan: zyklische Zeitgruppen – " + " → ".join(result.visited_ids)
            )
        self.is_loop = result.is_loop
        self.last_result = GenerationResult(config=self.today, resolve=result,
                                            selection=selection)

    def save(self) -> None:
        """Fordert einen Schreibvorgang an (Single-Flight)."""
        self._saver.request()

    async def save_now(self) -> None:
        self._saver.request()
        await self._saver.flush()

    async def close(self) -> None:
        await self._saver.flush()

    async def _write(self) -> None:
        if self.today is None:
            return
        await self.files.write_file(self.path, self.today.to_json())
