"""Datenmodell für einen Stundenplan (Curriculum) (Pydantic v2)."""

from pydantic import Field

from models.base import CamelModel


class ClassAssignment(CamelModel):
    """Belegung einer Unterrichtsstunde des Zeitrasters."""

    time_id: str          # Layout-ID im Timetable
    subject_id: str = ""  # Leer = Standard-Fach des Layouts verwenden


class Curriculum(CamelModel):
    """Bindet konkrete Fächer an die Stunden genau eines Zeitrasters."""

    name: str = ""
    timetable_id: str
    classes: list[ClassAssignment] = Field(default_factory=list)

    def assignment_for(self, time_id: str):
        """Gibt die Belegung für eine Layout-ID zurück (oder None)."""
        return next((c for c in self.classes if c.time_id == time_id), None)
