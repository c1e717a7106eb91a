"""Datenmodell für ein Unterrichtsfach (Pydantic v2)."""

from models.base import CamelModel


class Subject(CamelModel):
    """Repräsentiert ein Unterrichtsfach."""

    name: str
    short_name: str = ""     # "D", "M", "E"
    notes: str = ""          # Freitext, z.B. "Raum 204" oder "nur Gruppe A"
    teacher_name: str = ""
