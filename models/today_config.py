"""Tagesplan: erzeugte, absolute Einträge für einen Kalendertag (Pydantic v2).

Der Tagesplan ist ein Wegwerf-Artefakt. Er wird bei Tageswechsel oder
Profiländerung vollständig aus dem Profil neu erzeugt.
"""

from datetime import datetime
from typing import Annotated, Literal, Union

from pydantic import Field

from models.base import CamelModel


class LessonEntry(CamelModel):
    type: Literal["lesson"] = "lesson"
    name: str
    short_name: str = ""
    teacher_name: str = ""
    start_time: datetime
    end_time: datetime
    no_display_separately: bool = False


class BreakEntry(CamelModel):
    type: Literal["break"] = "break"
    name: str               # Pausenname aus dem Zeitraster
    short_name: str = ""
    teacher_name: str = ""
    start_time: datetime
    end_time: datetime
    no_display_separately: bool = False


class DividingLineEntry(CamelModel):
    type: Literal["dividingLine"] = "dividingLine"
    start_time: datetime


ScheduleEntry = Annotated[
    Union[LessonEntry, BreakEntry, DividingLineEntry],
    Field(discriminator="type"),
]


class TodayConfig(CamelModel):
    """Erzeugungszeitpunkt + Einträge (ID → Eintrag)."""

    generate_date: datetime
    schedule: dict[str, ScheduleEntry] = Field(default_factory=dict)
