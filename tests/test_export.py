"""Tests für Excel-Export und Export-Hilfsfunktionen."""

from datetime import date, datetime
from pathlib import Path

import pytest

from data.demo_profile import build_demo_profile
from export.excel_export import ScheduleExporter
from export.helpers import COLORS, day_label, entry_color, format_entry, time_range
from models import (
    BreakEntry,
    DividingLineEntry,
    LessonEntry,
    Profile,
    TargetType,
    TempSelected,
)

START = date(2024, 1, 1)   # Montag, erste A-Woche


@pytest.fixture(scope="module")
def demo_profile() -> Profile:
    return build_demo_profile(START)


# ─── Tests: Hilfsfunktionen ───────────────────────────────────────────────────

class TestHelpers:
    def test_day_label(self):
        assert day_label(date(2024, 9, 8)) == "So 08.09.2024"

    def test_time_range(self):
        lesson = LessonEntry(name="Deutsch", start_time=datetime(2024, 1, 1, 7, 35),
                             end_time=datetime(2024, 1, 1, 8, 20))
        line = DividingLineEntry(start_time=datetime(2024, 1, 1, 12, 55))
        assert time_range(lesson) == "07:35–08:20"
        assert time_range(line) == "12:55"

    def test_format_entry(self):
        start, end = datetime(2024, 1, 1, 8), datetime(2024, 1, 1, 9)
        assert format_entry(LessonEntry(name="Musik", teacher_name="Koch",
                                        start_time=start, end_time=end)) == "Musik\nKoch"
        assert format_entry(LessonEntry(name="Chor", start_time=start, end_time=end)) == "Chor"
        assert format_entry(BreakEntry(name="Pause", start_time=start, end_time=end)) == "Pause"
        assert format_entry(DividingLineEntry(start_time=start)) == "──"

    def test_entry_color_by_type(self):
        start, end = datetime(2024, 1, 1, 8), datetime(2024, 1, 1, 9)
        assert entry_color(BreakEntry(name="P", start_time=start, end_time=end)) == COLORS["break"]
        assert entry_color(LessonEntry(name="L", start_time=start, end_time=end)) == COLORS["lesson"]


# ─── Tests: Excel-Export ──────────────────────────────────────────────────────

class TestExcelExport:

    def test_creates_file(self, tmp_path: Path, demo_profile: Profile):
        out = tmp_path / "sub" / "tagesplan.xlsx"
        ScheduleExporter(demo_profile).export(out, START, 7)
        assert out.exists()
        assert out.stat().st_size > 0

    def test_one_sheet_per_school_day(self, tmp_path: Path, demo_profile: Profile):
        """Wochenende hat keine Einträge → kein Tagesblatt."""
        from openpyxl import load_workbook
        out = tmp_path / "woche.xlsx"
        written = ScheduleExporter(demo_profile).export(out, START, 7)
        assert written == [date(2024, 1, d) for d in range(1, 6)]

        titles = load_workbook(out).sheetnames
        assert titles[0] == "Übersicht"
        assert titles[1:] == [
            "Mo 01.01.2024", "Di 02.01.2024", "Mi 03.01.2024", "Do 04.01.2024", "Fr 05.01.2024",
        ]

    def test_day_sheet_content(self, tmp_path: Path, demo_profile: Profile):
        from openpyxl import load_workbook
        out = tmp_path / "montag.xlsx"
        ScheduleExporter(demo_profile).export(out, START, 1)
        ws = load_workbook(out)["Mo 01.01.2024"]
        assert [c.value for c in ws[1]] == ["Zeit", "Fach", "Kürzel", "Lehrkraft"]
        assert ws["A2"].value == "07:35–08:20"
        assert ws["B2"].value == "Deutsch"
        assert ws["D2"].value == "Müller"
        values = {str(c.value) for row in ws.iter_rows() for c in row if c.value}
        assert "Mittagspause" in values
        assert "── 12:55 ──" in values
        # 1 Kopf + 7 Stunden + 3 Pausen + 1 Trennlinie
        assert ws.max_row == 12

    def test_overview_marks_missing_and_temporary(self, tmp_path: Path, demo_profile: Profile):
        from openpyxl import load_workbook
        profile = demo_profile.model_copy(deep=True)
        profile.enable_config.temp_selected = TempSelected(
            enable=True, type=TargetType.CURRICULUM, id="b-fr",
            start_time=datetime(2024, 1, 2), end_time=datetime(2024, 1, 2),
        )
        out = tmp_path / "temp.xlsx"
        ScheduleExporter(profile, title="Klasse 7b").export(out, date(2023, 12, 31), 3)
        ws = load_workbook(out)["Übersicht"]
        assert ws["A1"].value == "Klasse 7b"
        # Zeile 4 = Kopf, ab Zeile 5 die Tage
        assert ws["A5"].value == "So 31.12.2023"
        assert ws["C5"].value == "—"
        assert ws["E5"].value == "before_anchor"
        assert ws["C6"].value == "A-Woche Montag"
        assert ws["C7"].value == "B-Woche Freitag"
        assert ws["E7"].value == "temporär"
        assert ws["A7"].fill.start_color.rgb.endswith(COLORS["temporary"])

    def test_overview_marks_loop(self, tmp_path: Path, demo_profile: Profile):
        from openpyxl import load_workbook
        profile = demo_profile.model_copy(deep=True)
        profile.time_groups["woche-a"].layout[0].type = TargetType.TIMEGROUP
        profile.time_groups["woche-a"].layout[0].id = "ab-woche"
        out = tmp_path / "loop.xlsx"
        written = ScheduleExporter(profile).export(out, START, 1)
        assert written == []
        ws = load_workbook(out)["Übersicht"]
        assert ws["E5"].value == "Zyklus: ab-woche → woche-a → ab-woche"
        assert ws["A5"].fill.start_color.rgb.endswith(COLORS["loop"])
