"""Excel-Export für erzeugte Tagespläne (openpyxl)."""

from datetime import date, timedelta
from pathlib import Path

from models.profile import Profile
from models.today_config import ScheduleEntry
from resolver.materializer import generate_day, sorted_schedule
from resolver.selector import Selection
from resolver.time_groups import ResolveResult

from export.helpers import (
    COLORS, DAY_NAMES, day_label, entry_color, format_entry, time_range, today_str,
)


class ScheduleExporter:
    """Exportiert die Tagespläne eines Zeitraums in eine Excel-Datei.

    Blätter: "Übersicht" (eine Zeile pro Tag) + ein Blatt pro Tag mit
    Einträgen. Tage ohne Stundenplan bekommen kein eigenes Blatt.
    """

    # Spaltenbreiten (Excel-Einheiten)
    COL_ZEIT_W = 15
    COL_NAME_W = 24
    COL_SHORT_W = 8
    COL_TEACHER_W = 22

    # Zeilenhöhen (Punkte)
    ROW_HEADER_H = 22
    ROW_LESSON_H = 30
    ROW_LINE_H = 8

    def __init__(self, profile: Profile, title: str = "Stundenplan"):
        self.profile = profile
        self.title = title

    # ─── Öffentliche API ──────────────────────────────────────────────────────

    def export(self, output_path: Path, start: date, days: int = 7) -> list[date]:
        """Erstellt die Excel-Datei für ``days`` Tage ab ``start``.

        Returns:
            Tage, für die ein Tagesblatt angelegt wurde.
        """
        from openpyxl import Workbook
        wb = Workbook()
        wb.remove(wb.active)   # Leeres Standard-Sheet entfernen

        generated = []
        for offset in range(days):
            day = start + timedelta(days=offset)
            schedule, result, selection = generate_day(self.profile, day)
            generated.append((day, schedule, result, selection))

        self._sheet_uebersicht(wb, generated)

        written: list[date] = []
        for day, schedule, _result, _selection in generated:
            if schedule:
                self._sheet_tag(wb, day, schedule)
                written.append(day)

        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        wb.save(output_path)
        return written

    # ─── Style-Helpers ────────────────────────────────────────────────────────

    def _fill(self, hex_color: str):
        from openpyxl.styles import PatternFill
        return PatternFill(start_color=hex_color, end_color=hex_color, fill_type="solid")

    def _center_align(self, wrap: bool = True):
        from openpyxl.styles import Alignment
        return Alignment(wrap_text=wrap, horizontal="center", vertical="center")

    def _thin_border(self):
        from openpyxl.styles import Border, Side
        s = Side(border_style="thin", color="BBBBBB")
        return Border(left=s, right=s, top=s, bottom=s)

    def _write_header_row(self, ws, headers: list[str], row: int = 1) -> None:
        from openpyxl.styles import Font
        fill = self._fill(COLORS["header"])
        border = self._thin_border()
        for col, text in enumerate(headers, 1):
            cell = ws.cell(row=row, column=col, value=text)
            cell.fill = fill
            cell.font = Font(bold=True, color="FFFFFF", size=10)
            cell.alignment = self._center_align(wrap=False)
            cell.border = border
        ws.row_dimensions[row].height = self.ROW_HEADER_H

    # ─── Sheet: Übersicht ─────────────────────────────────────────────────────

    def _sheet_uebersicht(
        self, wb,
        generated: list[tuple[date, dict[str, ScheduleEntry], ResolveResult, Selection]],
    ) -> None:
        from openpyxl.styles import Font
        ws = wb.create_sheet(title="Übersicht", index=0)

        row = 1
        ws.cell(row=row, column=1, value=self.title).font = Font(bold=True, size=14)
        row += 1
        ws.cell(row=row, column=1, value=f"Erstellt: {today_str()}")
        row += 2

        self._write_header_row(ws, ["Datum", "Auswahl", "Stundenplan", "Stunden", "Hinweis"], row)
        row += 1
        border = self._thin_border()

        for day, schedule, result, selection in generated:
            lessons = sum(1 for e in schedule.values() if e.type == "lesson")
            if result.is_loop:
                plan, note, color = "—", "Zyklus: " + " → ".join(result.visited_ids), COLORS["loop"]
            elif result.curriculum is None:
                plan = "—"
                note = result.failure.value if result.failure else "kein Stundenplan"
                color = COLORS["empty"]
            else:
                plan = result.curriculum.name or result.curriculum_id
                note = ""
                color = COLORS["lesson"]
            if selection.is_temporary:
                note = ("temporär " + note).strip()
                if not result.is_loop:
                    color = COLORS["temporary"]

            values = [day_label(day), selection.id or "—", plan, lessons, note]
            for col, value in enumerate(values, 1):
                c = ws.cell(row=row, column=col, value=value)
                c.border = border
                c.fill = self._fill(color)
            row += 1

        ws.column_dimensions["A"].width = 16
        ws.column_dimensions["B"].width = 20
        ws.column_dimensions["C"].width = 24
        ws.column_dimensions["D"].width = 10
        ws.column_dimensions["E"].width = 40

    # ─── Sheet: Tag ───────────────────────────────────────────────────────────

    def _sheet_tag(self, wb, day: date, schedule: dict[str, ScheduleEntry]) -> None:
        from openpyxl.styles import Font
        title = f"{DAY_NAMES[day.weekday()]} {day:%d.%m.%Y}"[:31]
        ws = wb.create_sheet(title=title)
        ws.column_dimensions["A"].width = self.COL_ZEIT_W
        ws.column_dimensions["B"].width = self.COL_NAME_W
        ws.column_dimensions["C"].width = self.COL_SHORT_W
        ws.column_dimensions["D"].width = self.COL_TEACHER_W
        self._write_header_row(ws, ["Zeit", "Fach", "Kürzel", "Lehrkraft"])
        border = self._thin_border()

        excel_row = 2
        for _entry_id, entry in sorted_schedule(schedule):
            if entry.type == "dividingLine":
                ws.merge_cells(start_row=excel_row, start_column=1,
                               end_row=excel_row, end_column=4)
                c = ws.cell(row=excel_row, column=1, value=f"── {time_range(entry)} ──")
                c.fill = self._fill(entry_color(entry))
                c.alignment = self._center_align(wrap=False)
                c.font = Font(italic=True, size=7, color="999999")
                ws.row_dimensions[excel_row].height = self.ROW_LINE_H
                excel_row += 1
                continue

            name, _, teacher = format_entry(entry).partition("\n")
            values = [time_range(entry), name, entry.short_name, teacher]
            fill = self._fill(entry_color(entry))
            for col, value in enumerate(values, 1):
                c = ws.cell(row=excel_row, column=col, value=value)
                c.fill = fill
                c.border = border
                c.alignment = self._center_align()
                c.font = Font(size=9, italic=entry.type == "break")
            ws.row_dimensions[excel_row].height = self.ROW_LESSON_H
            excel_row += 1
