"""Demo-Profil: A/B-Wochen-Stundenplan eines Gymnasiums.

Aufbau:
  ab-woche  (week, cycle=2, Startdatum = Montag der Anker-Woche)
    ├── woche-a  (day, dayCycle=week: Mo..So)
    │     └── a-mo .. a-fr, wochenende
    └── woche-b  (day, dayCycle=week: Mo..So)
          └── b-mo .. b-fr, wochenende

Das Wochenende verweist auf ein Curriculum mit leerem Zeitraster, damit
jede Tages-Zeitgruppe alle sieben Wochentage belegt.
"""

from datetime import date, datetime, time
from typing import Optional

from config.defaults import (
    BELL_SCHEDULE,
    DIVIDING_LINE_AT,
    LESSON_DEFAULT_SUBJECTS,
    PAUSES,
    SUBJECT_METADATA,
    WEEK_A,
    WEEK_B,
)
from models.curriculum import ClassAssignment, Curriculum
from models.enable_config import EnableConfig, SelectedTarget
from models.profile import Profile
from models.subject import Subject
from models.time_group import (
    DayCycleGranularity,
    Granularity,
    TargetType,
    TimeGroup,
    TimeGroupLayoutTarget,
)
from models.timetable import BreakLayout, DividingLineLayout, LessonLayout, Timetable
from resolver.calendar_math import start_of_week

TIMETABLE_ID = "standard"
EMPTY_TIMETABLE_ID = "frei"
WEEKEND_ID = "wochenende"
ROOT_ID = "ab-woche"

_DAY_KEYS = ["mo", "di", "mi", "do", "fr"]
_DAY_NAMES = ["Montag", "Dienstag", "Mittwoch", "Donnerstag", "Freitag"]


def _t(value: str) -> time:
    return time.fromisoformat(value)


def _build_timetable() -> Timetable:
    layouts: dict = {}
    pause_after = {p[0]: p for p in PAUSES}
    for number, (start, end) in enumerate(BELL_SCHEDULE, 1):
        layouts[f"l{number}"] = LessonLayout(
            start_time=_t(start),
            end_time=_t(end),
            subject_id=LESSON_DEFAULT_SUBJECTS.get(number, ""),
        )
        if number in pause_after:
            _, p_start, p_end, name, short = pause_after[number]
            # Trennlinie vor der Pause mit gleichem Beginn (stabile Sortierung)
            if p_start == DIVIDING_LINE_AT:
                layouts["trenner"] = DividingLineLayout(start_time=_t(DIVIDING_LINE_AT))
            layouts[f"p{number}"] = BreakLayout(
                start_time=_t(p_start),
                end_time=_t(p_end),
                break_name=name,
                break_short_name=short,
            )
    return Timetable(name="Standard-Zeitraster", layouts=layouts)


def _build_curriculum(week_label: str, day_idx: int, subject_ids: list[str]) -> Curriculum:
    return Curriculum(
        name=f"{week_label}-Woche {_DAY_NAMES[day_idx]}",
        timetable_id=TIMETABLE_ID,
        classes=[
            ClassAssignment(time_id=f"l{number}", subject_id=subject_id)
            for number, subject_id in enumerate(subject_ids, 1)
        ],
    )


def _build_week_group(week_label: str, prefix: str) -> TimeGroup:
    layout = [
        TimeGroupLayoutTarget(type=TargetType.CURRICULUM, id=f"{prefix}-{key}")
        for key in _DAY_KEYS
    ]
    layout += [TimeGroupLayoutTarget(type=TargetType.CURRICULUM, id=WEEKEND_ID)] * 2
    return TimeGroup(
        name=f"{week_label}-Woche",
        granularity=Granularity.DAY,
        day_cycle_granularity=DayCycleGranularity.WEEK,
        cycle=7,
        layout=layout,
    )


def build_demo_profile(anchor: Optional[date] = None) -> Profile:
    """Erzeugt das Demo-Profil.

    Args:
        anchor: Ein Tag der ersten A-Woche (Standard: heute). Der Zyklus
            beginnt am Montag dieser Woche.
    """
    monday = start_of_week(anchor or date.today())

    subjects = {
        sid: Subject(name=meta["name"], short_name=meta["short"], teacher_name=meta["teacher"])
        for sid, meta in SUBJECT_METADATA.items()
    }

    curriculums: dict[str, Curriculum] = {}
    for week_label, prefix, plan in (("A", "a", WEEK_A), ("B", "b", WEEK_B)):
        for day_idx, subject_ids in plan.items():
            cid = f"{prefix}-{_DAY_KEYS[day_idx]}"
            curriculums[cid] = _build_curriculum(week_label, day_idx, subject_ids)
    curriculums[WEEKEND_ID] = Curriculum(name="Wochenende", timetable_id=EMPTY_TIMETABLE_ID)

    time_groups = {
        "woche-a": _build_week_group("A", "a"),
        "woche-b": _build_week_group("B", "b"),
        ROOT_ID: TimeGroup(
            name="A/B-Wochen",
            granularity=Granularity.WEEK,
            cycle=2,
            start_time=datetime.combine(monday, time()),
            layout=[
                TimeGroupLayoutTarget(type=TargetType.TIMEGROUP, id="woche-a"),
                TimeGroupLayoutTarget(type=TargetType.TIMEGROUP, id="woche-b"),
            ],
        ),
    }

    return Profile(
        subjects=subjects,
        timetables={
            TIMETABLE_ID: _build_timetable(),
            EMPTY_TIMETABLE_ID: Timetable(name="Unterrichtsfrei"),
        },
        curriculums=curriculums,
        time_groups=time_groups,
        enable_config=EnableConfig(
            selected=SelectedTarget(type=TargetType.TIMEGROUP, id=ROOT_ID),
        ),
    )
