"""Stundenstatus für die Anzeige: laufende, nächste und übrige Einträge.

Trennlinien zählen nicht als Unterricht: Sie gehen in die Statusberechnung
nicht ein und erscheinen in der Liste immer als NORMAL.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Union

from models.today_config import BreakEntry, DividingLineEntry, LessonEntry, ScheduleEntry
from resolver.materializer import sorted_schedule

TimedEntry = Union[LessonEntry, BreakEntry]


class LessonStatus(str, Enum):
    OK = "ok"
    BEFORE_FIRST = "before_first"   # vor dem ersten Eintrag
    AFTER_LAST = "after_last"       # nach dem letzten Eintrag
    NO_LESSON = "no_lesson"         # keine Einträge


class ListStatus(str, Enum):
    CURRENT = "current"
    FUTURE = "future"
    NORMAL = "normal"


@dataclass
class StatusSnapshot:
    status: LessonStatus
    current: list[tuple[str, TimedEntry]] = field(default_factory=list)
    future: list[tuple[str, TimedEntry]] = field(default_factory=list)

    @property
    def current_ids(self) -> set[str]:
        return {i for i, _ in self.current}

    @property
    def future_ids(self) -> set[str]:
        return {i for i, _ in self.future}


@dataclass
class ListItem:
    id: str
    entry: ScheduleEntry
    status: ListStatus


def _timed(schedule: dict[str, ScheduleEntry]) -> list[tuple[str, TimedEntry]]:
    return [
        (i, e) for i, e in sorted_schedule(schedule)
        if not isinstance(e, DividingLineEntry)
    ]


def lesson_status(schedule: dict[str, ScheduleEntry], now: datetime) -> StatusSnapshot:
    """Bestimmt laufende und nächste Einträge zum Zeitpunkt ``now``.

    - keine Einträge → NO_LESSON
    - vor dem ersten Beginn → BEFORE_FIRST, "nächste" = alle mit dem ersten Beginn
    - nach dem letzten Ende → AFTER_LAST
    - sonst OK: laufend = Beginn ≤ now ≤ Ende, nächste = alle mit dem
      frühesten Beginn nach ``now``
    """
    timed = _timed(schedule)
    if not timed:
        return StatusSnapshot(LessonStatus.NO_LESSON)

    first_start = timed[0][1].start_time
    if now < first_start:
        return StatusSnapshot(
            LessonStatus.BEFORE_FIRST,
            future=[(i, e) for i, e in timed if e.start_time == first_start],
        )

    if now > timed[-1][1].end_time:
        return StatusSnapshot(LessonStatus.AFTER_LAST)

    snapshot = StatusSnapshot(LessonStatus.OK)
    next_start = None
    for entry_id, entry in timed:
        if entry.start_time <= now <= entry.end_time:
            snapshot.current.append((entry_id, entry))
        elif now < entry.start_time:
            if next_start is None:
                next_start = entry.start_time
            if entry.start_time == next_start:
                snapshot.future.append((entry_id, entry))
    return snapshot


def build_lesson_list(schedule: dict[str, ScheduleEntry], now: datetime) -> list[ListItem]:
    """Sortierte Liste aller Einträge mit Anzeige-Status."""
    snapshot = lesson_status(schedule, now)
    current, future = snapshot.current_ids, snapshot.future_ids
    items: list[ListItem] = []
    for entry_id, entry in sorted_schedule(schedule):
        if isinstance(entry, DividingLineEntry):
            status = ListStatus.NORMAL
        elif entry_id in current:
            status = ListStatus.CURRENT
        elif entry_id in future:
            status = ListStatus.FUTURE
        else:
            status = ListStatus.NORMAL
        items.append(ListItem(entry_id, entry, status))
    return items


def split_lesson_list(items: list[ListItem]) -> tuple[list[ListItem], list[ListItem]]:
    """Trennt in (normal angezeigt, nur separat angezeigt).

    Trennlinien bleiben in der normalen Liste; Einträge mit
    no_display_separately=True landen in der zweiten Liste.
    """
    normal: list[ListItem] = []
    separate: list[ListItem] = []
    for item in items:
        if isinstance(item.entry, DividingLineEntry) or not item.entry.no_display_separately:
            normal.append(item)
        else:
            separate.append(item)
    return normal, separate
