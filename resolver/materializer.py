"""Tagesplan-Erzeugung: Curriculum × Zeitraster → absolute Einträge.

Fehlende Verweise (Zeitraster, Fach, Belegung) führen nie zu einer
Ausnahme: Der betroffene Eintrag wird mit Warnung übersprungen.
"""

import logging
import uuid
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from models.curriculum import Curriculum
from models.profile import Profile
from models.timetable import BreakLayout, DividingLineLayout, LessonLayout
from models.today_config import (
    BreakEntry,
    DividingLineEntry,
    LessonEntry,
    ScheduleEntry,
    TodayConfig,
)
from resolver.calendar_math import DateLike, at_time_on, start_of_day
from resolver.selector import Selection, select_active_root
from resolver.time_groups import ResolveResult, resolve_curriculum

logger = logging.getLogger(__name__)


def new_entry_id(used: set[str]) -> str:
    """Erzeugt eine neue Eintrags-ID, die in ``used`` noch nicht vorkommt."""
    entry_id = uuid.uuid4().hex
    while entry_id in used:
        entry_id = uuid.uuid4().hex
    used.add(entry_id)
    return entry_id


def _lesson_entry(layout_id: str, layout: LessonLayout, curriculum: Curriculum,
                  profile: Profile, day: date) -> Optional[LessonEntry]:
    assignment = curriculum.assignment_for(layout_id)
    if assignment is None:
        logger.warning(f"Stunde '{layout_id}': keine Belegung im Curriculum '{curriculum.name}'")
        return None
    subject_id = assignment.subject_id or layout.subject_id
    subject = profile.subjects.get(subject_id)
    if subject is None:
        logger.warning(f"Stunde '{layout_id}': unbekanntes Fach '{subject_id}'")
        return None
    return LessonEntry(
        name=subject.name,
        short_name=subject.short_name,
        teacher_name=subject.teacher_name,
        start_time=at_time_on(day, layout.start_time),
        end_time=at_time_on(day, layout.end_time),
        no_display_separately=layout.no_display_separately,
    )


def materialize(curriculum: Optional[Curriculum], profile: Profile,
                day: Optional[DateLike] = None) -> dict[str, ScheduleEntry]:
    """Expandiert ein Curriculum zu den Einträgen eines Tages.

    Args:
        curriculum: Aufgelöstes Curriculum oder None (→ leerer Plan).
        profile: Profil mit Zeitrastern und Fächern.
        day: Zieltag; Standard ist heute.

    Returns:
        Dict Eintrags-ID → Eintrag, in Layout-Reihenfolge eingefügt.
    """
    if curriculum is None:
        return {}
    timetable = profile.timetables.get(curriculum.timetable_id)
    if timetable is None:
        logger.warning(
            f"Curriculum '{curriculum.name}': Zeitraster '{curriculum.timetable_id}' fehlt"
        )
        return {}

    target_day = start_of_day(day if day is not None else date.today())
    schedule: dict[str, ScheduleEntry] = {}
    used: set[str] = set()

    for layout_id, layout in timetable.layouts.items():
        entry: Optional[ScheduleEntry]
        if isinstance(layout, BreakLayout):
            entry = BreakEntry(
                name=layout.break_name,
                short_name=layout.break_short_name,
                start_time=at_time_on(target_day, layout.start_time),
                end_time=at_time_on(target_day, layout.end_time),
                no_display_separately=layout.no_display_separately,
            )
        elif isinstance(layout, DividingLineLayout):
            entry = DividingLineEntry(start_time=at_time_on(target_day, layout.start_time))
        else:
            entry = _lesson_entry(layout_id, layout, curriculum, profile, target_day)
        if entry is not None:
            schedule[new_entry_id(used)] = entry

    return schedule


def sorted_schedule(schedule: dict[str, ScheduleEntry]) -> list[tuple[str, ScheduleEntry]]:
    """Einträge aufsteigend nach Beginn; bei Gleichstand stabil (Layout-Reihenfolge)."""
    return sorted(schedule.items(), key=lambda item: item[1].start_time)


@dataclass
class GenerationResult:
    """Erzeugter Tagesplan plus Diagnose der Auflösung."""

    config: TodayConfig
    resolve: ResolveResult
    selection: Selection

    @property
    def is_loop(self) -> bool:
        return self.resolve.is_loop


def generate_day(profile: Profile, day: DateLike) -> tuple[dict[str, ScheduleEntry], ResolveResult, Selection]:
    """Auswahl → Auflösung → Expansion für einen beliebigen Tag."""
    target_day = start_of_day(day)
    selection = select_active_root(profile.enable_config, target_day)
    result = resolve_curriculum(target_day, selection, profile)
    if result.curriculum is None and not result.is_loop:
        logger.info(f"Kein Stundenplan für {target_day:%d.%m.%Y}")
    return materialize(result.curriculum, profile, target_day), result, selection


def generate_today_config(profile: Profile, now: Optional[datetime] = None) -> GenerationResult:
    """Erzeugt den Tagesplan für den Tag von ``now`` (Standard: jetzt)."""
    now = now or datetime.now()
    schedule, result, selection = generate_day(profile, now)
    return GenerationResult(
        config=TodayConfig(generate_date=now, schedule=schedule),
        resolve=result,
        selection=selection,
    )
