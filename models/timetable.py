"""Zeitraster-Modell: Zeitplan mit Stunden, Pausen und Trennlinien (Pydantic v2).

Ein Timetable ist eine wiederverwendbare Vorlage für die Uhrzeiten eines
Tages. Welches Fach in welcher Stunde stattfindet, legt erst das Curriculum
fest (siehe models/curriculum.py).
"""

from datetime import datetime, time
from typing import Annotated, Any, Literal, Union

from pydantic import Field, TypeAdapter, field_validator, model_validator

from models.base import CamelModel

# Parser für volle Zeitstempel, auch mit "Z" (UTC)
_DATETIME = TypeAdapter(datetime)


def coerce_time_of_day(value: Any) -> Any:
    """Reduziert einen Zeitwert auf die Uhrzeit.

    Ältere Profildateien speichern Uhrzeiten als vollständige ISO-Datumswerte
    (z.B. "2024-09-02T08:00:00.000+02:00" oder "...T06:00:00.000Z").
    Relevant ist nur die Uhrzeit.
    """
    if isinstance(value, datetime):
        return value.time()
    if isinstance(value, time):
        return value.replace(tzinfo=None)
    if isinstance(value, str) and "T" in value:
        return _DATETIME.validate_python(value).time()
    if isinstance(value, str):
        return time.fromisoformat(value).replace(tzinfo=None)
    return value


class _LayoutBase(CamelModel):
    """Gemeinsame Felder aller Layout-Einträge."""

    start_time: time

    @model_validator(mode="before")
    @classmethod
    def _legacy_keys(cls, data: Any) -> Any:
        # Altes Dateiformat: "noDisplayedSeparately"
        if isinstance(data, dict) and "noDisplayedSeparately" in data:
            data = dict(data)
            data.setdefault("noDisplaySeparately", data.pop("noDisplayedSeparately"))
        return data

    @field_validator("start_time", mode="before")
    @classmethod
    def _start_time_of_day(cls, v: Any) -> Any:
        return coerce_time_of_day(v)


class LessonLayout(_LayoutBase):
    """Unterrichtsstunde im Zeitraster mit Standard-Fach."""

    type: Literal["lesson"] = "lesson"
    end_time: time
    # Standard-Fach, falls das Curriculum kein eigenes Fach angibt
    subject_id: str = ""
    # True = wird nur zur passenden Zeit separat angezeigt
    no_display_separately: bool = False

    @field_validator("end_time", mode="before")
    @classmethod
    def _end_time_of_day(cls, v: Any) -> Any:
        return coerce_time_of_day(v)


class BreakLayout(_LayoutBase):
    """Pause im Zeitraster."""

    type: Literal["break"] = "break"
    end_time: time
    break_name: str = "Pause"
    break_short_name: str = ""
    no_display_separately: bool = False

    @field_validator("end_time", mode="before")
    @classmethod
    def _end_time_of_day(cls, v: Any) -> Any:
        return coerce_time_of_day(v)


class DividingLineLayout(_LayoutBase):
    """Trennlinie: reine Markierung ohne Endzeit."""

    type: Literal["dividingLine"] = "dividingLine"


TimetableLayout = Annotated[
    Union[LessonLayout, BreakLayout, DividingLineLayout],
    Field(discriminator="type"),
]


class Timetable(CamelModel):
    """Zeitraster eines Tages, unabhängig vom konkreten Fach."""

    name: str = ""
    # Layout-ID → Eintrag (Reihenfolge ohne Bedeutung, sortiert wird später)
    layouts: dict[str, TimetableLayout] = Field(default_factory=dict)

    def lesson_ids(self) -> list[str]:
        """IDs aller Unterrichtsstunden des Rasters."""
        return [k for k, v in self.layouts.items() if isinstance(v, LessonLayout)]
