"""Profil: vollständiger Datensatz des Stundenplan-Editors (Pydantic v2).

Alle Sammlungen sind ID-indizierte Dictionaries. Verweise (Curriculum →
Timetable, Zeitgruppe → Zeitgruppe, ...) werden erst beim Zugriff über die
ID aufgelöst; fehlende Ziele sind erlaubt und werden toleriert.
"""

from pydantic import Field
from pydantic.alias_generators import to_camel

from models.base import CamelModel
from models.curriculum import Curriculum
from models.enable_config import EnableConfig
from models.subject import Subject
from models.time_group import TimeGroup
from models.timetable import Timetable


class Profile(CamelModel):
    """Fächer, Zeitraster, Stundenpläne, Zeitgruppen und Aktivierung."""

    subjects: dict[str, Subject] = Field(default_factory=dict)
    timetables: dict[str, Timetable] = Field(default_factory=dict)
    curriculums: dict[str, Curriculum] = Field(default_factory=dict)
    time_groups: dict[str, TimeGroup] = Field(default_factory=dict)
    enable_config: EnableConfig = Field(default_factory=EnableConfig)

    @classmethod
    def top_level_keys(cls) -> list[str]:
        """Schlüssel der obersten Ebene im Dateiformat (camelCase)."""
        return [to_camel(name) for name in cls.model_fields]

    def summary(self) -> str:
        """Kurze Übersicht über das Profil."""
        sel = self.enable_config.selected
        tmp = self.enable_config.temp_selected
        lines = [
            f"Fächer: {len(self.subjects)}",
            f"Zeitraster: {len(self.timetables)}",
            f"Stundenpläne: {len(self.curriculums)}",
            f"Zeitgruppen: {len(self.time_groups)}",
            f"Aktiv: {sel.type.value} '{sel.id}'" if sel.id else "Aktiv: (nichts ausgewählt)",
            f"Temporär: {tmp.type.value} '{tmp.id}' "
            f"({tmp.start_time:%d.%m.%Y} – {tmp.end_time:%d.%m.%Y})"
            if tmp.enable and tmp.start_time and tmp.end_time else "",
        ]
        return "\n".join(l for l in lines if l)
