"""Auswahl des aktiven Einstiegspunkts (dauerhaft oder temporär)."""

import logging
from dataclasses import dataclass
from datetime import date

from models.enable_config import EnableConfig
from models.time_group import TargetType
from resolver.calendar_math import DateLike, start_of_day

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Selection:
    """Aktiver Einstiegspunkt für einen Tag."""

    type: TargetType
    id: str
    is_temporary: bool = False


def temp_override_active(enable_config: EnableConfig, target_date: DateLike) -> bool:
    """True wenn die temporäre Überschreibung am Zieltag gilt (Grenzen inklusiv)."""
    tmp = enable_config.temp_selected
    if not tmp.enable:
        return False
    if tmp.start_time is None or tmp.end_time is None:
        logger.warning("Temporäre Auswahl aktiv, aber Zeitraum unvollständig – wird ignoriert")
        return False
    day: date = start_of_day(target_date)
    return start_of_day(tmp.start_time) <= day <= start_of_day(tmp.end_time)


def select_active_root(enable_config: EnableConfig, target_date: DateLike) -> Selection:
    """Wählt zwischen dauerhafter Auswahl und temporärer Überschreibung."""
    if temp_override_active(enable_config, target_date):
        tmp = enable_config.temp_selected
        logger.debug(f"Temporäre Auswahl aktiv: {tmp.type.value} '{tmp.id}'")
        return Selection(type=tmp.type, id=tmp.id, is_temporary=True)
    sel = enable_config.selected
    logger.debug(f"Standard-Auswahl: {sel.type.value} '{sel.id}'")
    return Selection(type=sel.type, id=sel.id)
