"""Gemeinsame Hilfsfunktionen für Excel-Export und Terminal-Anzeige."""

from datetime import date

from models.today_config import ScheduleEntry

# ─── Farbpalette (RRGGBB, ohne #) ─────────────────────────────────────────────

COLORS: dict[str, str] = {
    "lesson":       "B3D4FF",
    "current":      "B3FFB3",
    "break":        "DDDDDD",
    "dividingLine": "F5F5F5",
    "temporary":    "FFF2B3",
    "loop":         "FF9999",
    "empty":        "F5F5F5",
    "header":       "4472C4",
}

DAY_NAMES: list[str] = ["Mo", "Di", "Mi", "Do", "Fr", "Sa", "So"]


def today_str() -> str:
    """Gibt das heutige Datum als DD.MM.YYYY zurück."""
    return date.today().strftime("%d.%m.%Y")


def day_label(day: date) -> str:
    """'Mo 05.02.2024'"""
    return f"{DAY_NAMES[day.weekday()]} {day:%d.%m.%Y}"


def time_range(entry: ScheduleEntry) -> str:
    """'07:35–08:20' bzw. nur Beginn bei Trennlinien."""
    start = entry.start_time.strftime("%H:%M")
    end = getattr(entry, "end_time", None)
    if end is None:
        return start
    return f"{start}–{end.strftime('%H:%M')}"


# ─── Zelleninhalt-Formatierung ────────────────────────────────────────────────

def entry_color(entry: ScheduleEntry) -> str:
    """Gibt die Hex-Farbe für einen Eintrag zurück (anhand des Typs)."""
    return COLORS.get(entry.type, COLORS["empty"])


def format_entry(entry: ScheduleEntry) -> str:
    """Formatiert einen einzelnen Eintrag als Zelleninhalt.

    lesson:       "Fach\nLehrkraft"
    break:        "Pausenname"
    dividingLine: "──"
    """
    if entry.type == "dividingLine":
        return "──"
    if entry.type == "break":
        return entry.name
    if entry.teacher_name:
        return f"{entry.name}\n{entry.teacher_name}"
    return entry.name
