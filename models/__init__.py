from models.subject import Subject
from models.timetable import (
    BreakLayout,
    DividingLineLayout,
    LessonLayout,
    Timetable,
    TimetableLayout,
)
from models.curriculum import ClassAssignment, Curriculum
from models.time_group import (
    DayCycleGranularity,
    Granularity,
    TargetType,
    TimeGroup,
    TimeGroupLayoutTarget,
)
from models.enable_config import EnableConfig, SelectedTarget, TempSelected
from models.profile import Profile
from models.today_config import (
    BreakEntry,
    DividingLineEntry,
    LessonEntry,
    ScheduleEntry,
    TodayConfig,
)

__all__ = [
    "Subject",
    "LessonLayout",
    "BreakLayout",
    "DividingLineLayout",
    "Timetable",
    "TimetableLayout",
    "ClassAssignment",
    "Curriculum",
    "Granularity",
    "DayCycleGranularity",
    "TargetType",
    "TimeGroup",
    "TimeGroupLayoutTarget",
    "EnableConfig",
    "SelectedTarget",
    "TempSelected",
    "Profile",
    "LessonEntry",
    "BreakEntry",
    "DividingLineEntry",
    "ScheduleEntry",
    "TodayConfig",
]
