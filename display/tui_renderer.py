"""Gemeinsamer Renderer für die Terminal-Anzeige des Tagesplans.

Wird von cmd_today, cmd_status und cmd_preview (Rich) verwendet.
"""

from datetime import date, datetime, timedelta
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from models.profile import Profile
    from models.today_config import ScheduleEntry

STATUS_STYLES = {
    "current": "bold black on green",
    "future": "bold yellow",
    "normal": "",
}

STATUS_LABELS = {
    "current": "▶ jetzt",
    "future": "› nächste",
    "normal": "",
}

TYPE_LABELS = {
    "lesson": "Stunde",
    "break": "Pause",
    "dividingLine": "Linie",
}


def _item_rows(items: list, now: Optional[datetime]) -> list[tuple[list[str], str]]:
    from display.lesson_status import ListStatus
    from export.helpers import time_range

    rows: list[tuple[list[str], str]] = []
    for item in items:
        entry = item.entry
        if entry.type == "dividingLine":
            rows.append(([time_range(entry), TYPE_LABELS[entry.type], "─" * 12, "", "", ""], "dim"))
            continue
        status = STATUS_LABELS[item.status.value] if now is not None else ""
        if entry.type == "break":
            cells = [time_range(entry), TYPE_LABELS[entry.type], entry.name,
                     entry.short_name, "", status]
        else:
            cells = [time_range(entry), TYPE_LABELS[entry.type], entry.name,
                     entry.short_name, entry.teacher_name, status]
        if now is not None and item.status != ListStatus.NORMAL:
            style = STATUS_STYLES[item.status.value]
        else:
            style = "italic" if entry.type == "break" else ""
        rows.append((cells, style))
    return rows


def render_day_rows(
    schedule: dict[str, "ScheduleEntry"],
    now: Optional[datetime] = None,
) -> tuple[list[tuple[list[str], str]], list[tuple[list[str], str]]]:
    """Gibt Tabellenzeilen für einen Tagesplan zurück: (Haupttabelle, Nebenliste).

    Jede Zeile: ([Zeit, Typ, Fach/Pause, Kürzel, Lehrkraft, Status], Stil)
    Trennlinien werden als Zeile aus '─' eingefügt. Einträge mit
    no_display_separately landen in der Nebenliste. Ohne ``now`` wird
    kein Eintrag hervorgehoben und die Status-Spalte bleibt leer.
    """
    from display.lesson_status import build_lesson_list, split_lesson_list

    normal, separate = split_lesson_list(build_lesson_list(schedule, now or datetime.min))
    return _item_rows(normal, now), _item_rows(separate, now)


def render_preview_rows(
    profile: "Profile",
    start: date,
    days: int,
) -> list[list[str]]:
    """Gibt eine Übersichtszeile pro Tag zurück.

    Jede Zeile: [Datum, Auswahl, Stundenplan, Fächer]
    """
    from export.helpers import day_label
    from resolver.materializer import generate_day

    rows: list[list[str]] = []
    for offset in range(days):
        day = start + timedelta(days=offset)
        schedule, result, selection = generate_day(profile, day)
        sel_label = f"{selection.type.value}:{selection.id}" if selection.id else "—"
        if selection.is_temporary:
            sel_label += " (temporär)"
        if result.is_loop:
            plan = "⟳ Zyklus: " + " → ".join(result.visited_ids)
            lessons = ""
        elif result.curriculum is None:
            plan = "—"
            lessons = ""
        else:
            plan = result.curriculum.name or result.curriculum_id
            lessons = " ".join(
                e.short_name or e.name
                for e in schedule.values() if e.type == "lesson"
            )
        rows.append([day_label(day), sel_label, plan, lessons])
    return rows
