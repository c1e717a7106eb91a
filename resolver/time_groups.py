"""Auflösung der Zeitgruppen: vom Einstiegspunkt bis zum konkreten Curriculum.

Ablauf pro besuchter Zeitgruppe:
1. Zyklus-Prüfung über die Liste der bereits besuchten IDs
2. Layout-Index bestimmen
   - day + week/month: Wochentag bzw. Monatstag ist direkt der Index
   - sonst: (laufende Periode ab Startdatum - 1) mod cycle
3. Ziel des Layouts: Curriculum zurückgeben oder in die Zeitgruppe absteigen

Zeitgruppen ohne eigenes Startdatum erben das Startdatum der nächsten
übergeordneten Zeitgruppe, die eines hat.

Nicht gefundene Ziele sind KEIN Fehler: Es gibt dann an diesem Tag keinen
Stundenplan. Ein Zyklus im Zeitgruppen-Graphen wird dagegen gesondert über
``is_loop`` gemeldet, weil er auf fehlerhafte Autorendaten hinweist.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Optional

from models.curriculum import Curriculum
from models.profile import Profile
from models.time_group import (
    DayCycleGranularity,
    TargetType,
    TimeGroup,
    TimeGroupLayoutTarget,
)
from resolver.calendar_math import DateLike, cycle_index, start_of_day
from resolver.selector import Selection

logger = logging.getLogger(__name__)


class ResolveFailure(str, Enum):
    """Grund, warum für einen Tag kein Curriculum gefunden wurde."""

    MISSING_TIME_GROUP = "missing_time_group"
    MISSING_CURRICULUM = "missing_curriculum"
    NO_ANCHOR = "no_anchor"
    BEFORE_ANCHOR = "before_anchor"
    NO_LAYOUT_ENTRY = "no_layout_entry"
    LOOP = "loop"


@dataclass
class VisitedGroup:
    """Eine auf dem Weg besuchte Zeitgruppe."""

    id: str
    time_group: TimeGroup


@dataclass
class ResolveResult:
    curriculum: Optional[Curriculum] = None
    curriculum_id: Optional[str] = None
    visited: list[VisitedGroup] = field(default_factory=list)
    is_loop: bool = False
    failure: Optional[ResolveFailure] = None

    @property
    def visited_ids(self) -> list[str]:
        return [v.id for v in self.visited]


def day_cycle_index(time_group: TimeGroup, target_date: date) -> Optional[int]:
    """Index für Tages-Zeitgruppen mit Wochen- oder Monatszyklus."""
    if time_group.day_cycle_granularity == DayCycleGranularity.WEEK:
        return target_date.weekday()
    if time_group.day_cycle_granularity == DayCycleGranularity.MONTH:
        return target_date.day - 1
    return None


class _TimeGroupWalker:
    """Rekursiver Abstieg durch den Zeitgruppen-Graphen (ein Durchlauf)."""

    def __init__(self, profile: Profile, target_date: date) -> None:
        self.profile = profile
        self.target_date = target_date
        self.result = ResolveResult()

    def walk(self, time_group_id: str, inherited_anchor: Optional[date]) -> None:
        time_group = self.profile.time_groups.get(time_group_id)
        if time_group is None:
            logger.warning(f"Unbekannte Zeitgruppe '{time_group_id}'")
            self.result.failure = ResolveFailure.MISSING_TIME_GROUP
            return

        if time_group_id in self.result.visited_ids:
            # Wiederholte Gruppe zur Diagnose nochmals anhängen
            self.result.visited.append(VisitedGroup(time_group_id, time_group))
            self.result.is_loop = True
            self.result.failure = ResolveFailure.LOOP
            logger.error(
                f"Zyklischer Verweis in Zeitgruppen erkannt: "
                f"{' → '.join(self.result.visited_ids)}"
            )
            return
        self.result.visited.append(VisitedGroup(time_group_id, time_group))

        logger.debug(
            f"Zeitgruppe '{time_group_id}': granularity={time_group.granularity.value}, "
            f"dayCycle={time_group.day_cycle_granularity.value}, cycle={time_group.cycle}"
        )

        anchor = inherited_anchor
        if time_group.uses_calendar_position:
            index = day_cycle_index(time_group, self.target_date)
        else:
            if time_group.start_time is not None:
                anchor = start_of_day(time_group.start_time)
            if anchor is None:
                logger.warning(
                    f"Zeitgruppe '{time_group_id}': kein Startdatum (weder eigenes noch geerbtes)"
                )
                self.result.failure = ResolveFailure.NO_ANCHOR
                return
            if self.target_date < anchor:
                logger.warning(
                    f"Zeitgruppe '{time_group_id}': Zieldatum {self.target_date} liegt vor "
                    f"dem Startdatum {anchor} – noch nicht aktiv"
                )
                self.result.failure = ResolveFailure.BEFORE_ANCHOR
                return
            index = cycle_index(time_group.granularity, anchor, self.target_date,
                                time_group.cycle)
            logger.debug(f"  Startdatum {anchor}, Index {index}")

        target = self._layout_at(time_group, index)
        if target is None:
            logger.warning(
                f"Zeitgruppe '{time_group_id}': kein Layout-Eintrag an Index {index}"
            )
            self.result.failure = ResolveFailure.NO_LAYOUT_ENTRY
            return

        if target.type == TargetType.TIMEGROUP:
            self.walk(target.id, anchor)
        else:
            self.take_curriculum(target.id)

    def take_curriculum(self, curriculum_id: str) -> None:
        curriculum = self.profile.curriculums.get(curriculum_id)
        if curriculum is None:
            logger.warning(f"Unbekanntes Curriculum '{curriculum_id}'")
            self.result.failure = ResolveFailure.MISSING_CURRICULUM
            return
        self.result.curriculum = curriculum
        self.result.curriculum_id = curriculum_id

    @staticmethod
    def _layout_at(time_group: TimeGroup, index: Optional[int]) -> Optional[TimeGroupLayoutTarget]:
        if index is None or index < 0 or index >= len(time_group.layout):
            return None
        return time_group.layout[index]


def resolve_curriculum(target_date: DateLike, root: Selection, profile: Profile) -> ResolveResult:
    """Findet das für ``target_date`` gültige Curriculum.

    Args:
        target_date: Zieltag (wird auf 00:00 ausgerichtet).
        root: Einstiegspunkt aus select_active_root().
        profile: Vollständiges Profil.

    Returns:
        ResolveResult mit Curriculum (oder None), besuchten Zeitgruppen
        und Zyklus-Kennzeichen.
    """
    day = start_of_day(target_date)
    walker = _TimeGroupWalker(profile, day)
    if root.type == TargetType.CURRICULUM:
        logger.debug(f"Einstiegspunkt ist Curriculum '{root.id}'")
        walker.take_curriculum(root.id)
    else:
        logger.debug(f"Löse Zeitgruppe '{root.id}' für {day} auf")
        walker.walk(root.id, None)
    return walker.result
