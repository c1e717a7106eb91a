"""Konsistenzprüfung eines Profils.

Das Profil darf unvollständig sein (Editor-Zwischenstände): Die Auflösung
toleriert fehlende Verweise. Diese Prüfung meldet sie trotzdem, damit
Lücken vor dem Stichtag auffallen statt erst als leerer Tagesplan.
"""

from typing import Literal, Optional

from pydantic import BaseModel

from models.profile import Profile
from models.time_group import DayCycleGranularity, Granularity, TargetType, TimeGroup
from models.timetable import LessonLayout
from resolver.calendar_math import start_of_day

# Mindestlänge des Layouts bei Tages-Zeitgruppen mit Kalenderposition
DAY_CYCLE_MIN_LAYOUT = {
    DayCycleGranularity.WEEK: 7,
    DayCycleGranularity.MONTH: 31,
}


class ProfileIssue(BaseModel):
    """Ein einzelner Befund."""

    severity: Literal["error", "warning"]
    check: str          # z.B. "dangling_reference"
    description: str
    entity: str         # Zeitgruppen-/Curriculum-/Zeitraster-ID


class ProfileReport(BaseModel):
    """Ergebnis der Profilprüfung."""

    issues: list[ProfileIssue]
    is_valid: bool      # True wenn keine Errors (Warnings ok)

    @property
    def errors(self) -> list[ProfileIssue]:
        return [i for i in self.issues if i.severity == "error"]

    @property
    def warnings(self) -> list[ProfileIssue]:
        return [i for i in self.issues if i.severity == "warning"]

    def checks(self) -> set[str]:
        return {i.check for i in self.issues}

    def print_rich(self) -> None:
        """Gibt den Report formatiert über Rich aus."""
        from rich.console import Console
        from rich.panel import Panel
        from rich.table import Table
        from rich import box

        console = Console()
        status = (
            "[bold green]✓ PROFIL KONSISTENT[/bold green]"
            if self.is_valid
            else "[bold red]✗ FEHLER IM PROFIL[/bold red]"
        )
        lines = [status, f"Fehler: {len(self.errors)} | Warnungen: {len(self.warnings)}"]
        console.print(Panel("\n".join(lines), title="Profil-Prüfung", border_style="cyan"))

        if not self.issues:
            console.print("[dim]Keine Auffälligkeiten gefunden.[/dim]")
            return

        table = Table(box=box.ROUNDED, show_lines=True)
        table.add_column("Typ", width=8)
        table.add_column("Prüfung", width=24)
        table.add_column("Objekt", width=16)
        table.add_column("Beschreibung")
        for issue in self.issues:
            color = "red" if issue.severity == "error" else "yellow"
            table.add_row(
                f"[{color}]{issue.severity.upper()}[/{color}]",
                issue.check,
                issue.entity,
                issue.description,
            )
        console.print(table)


class ProfileChecker:
    """Prüft ein Profil auf verwaiste Verweise, Zyklen und unvollständige Layouts."""

    def check(self, profile: Profile) -> ProfileReport:
        issues: list[ProfileIssue] = []
        issues.extend(self._check_curriculum_refs(profile))
        issues.extend(self._check_time_group_refs(profile))
        issues.extend(self._check_selection(profile))
        issues.extend(self._check_loops(profile))
        issues.extend(self._check_layout_lengths(profile))
        issues.extend(self._check_assignments(profile))
        issues.extend(self._check_anchors(profile))
        has_errors = any(i.severity == "error" for i in issues)
        return ProfileReport(issues=issues, is_valid=not has_errors)

    # ── Verweise ──────────────────────────────────────────────────────────────

    def _target_exists(self, profile: Profile, type_: TargetType, target_id: str) -> bool:
        if type_ == TargetType.CURRICULUM:
            return target_id in profile.curriculums
        return target_id in profile.time_groups

    def _check_curriculum_refs(self, profile: Profile) -> list[ProfileIssue]:
        issues = []
        for cid, curriculum in profile.curriculums.items():
            if curriculum.timetable_id not in profile.timetables:
                issues.append(ProfileIssue(
                    severity="error",
                    check="dangling_reference",
                    entity=cid,
                    description=f"Zeitraster '{curriculum.timetable_id}' existiert nicht",
                ))
        return issues

    def _check_time_group_refs(self, profile: Profile) -> list[ProfileIssue]:
        issues = []
        for gid, group in profile.time_groups.items():
            for idx, target in enumerate(group.layout):
                if not self._target_exists(profile, target.type, target.id):
                    issues.append(ProfileIssue(
                        severity="error",
                        check="dangling_reference",
                        entity=gid,
                        description=(
                            f"Layout[{idx}] verweist auf unbekannte "
                            f"{target.type.value} '{target.id}'"
                        ),
                    ))
        return issues

    def _check_selection(self, profile: Profile) -> list[ProfileIssue]:
        issues = []
        sel = profile.enable_config.selected
        if not sel.id:
            issues.append(ProfileIssue(
                severity="warning",
                check="no_selection",
                entity="enableConfig",
                description="Kein Stundenplan ausgewählt",
            ))
        elif not self._target_exists(profile, sel.type, sel.id):
            issues.append(ProfileIssue(
                severity="error",
                check="dangling_reference",
                entity="enableConfig",
                description=f"Auswahl verweist auf unbekannte {sel.type.value} '{sel.id}'",
            ))

        tmp = profile.enable_config.temp_selected
        if tmp.enable:
            if not self._target_exists(profile, tmp.type, tmp.id):
                issues.append(ProfileIssue(
                    severity="error",
                    check="dangling_reference",
                    entity="enableConfig",
                    description=(
                        f"Temporäre Auswahl verweist auf unbekannte "
                        f"{tmp.type.value} '{tmp.id}'"
                    ),
                ))
            if tmp.start_time is None or tmp.end_time is None:
                issues.append(ProfileIssue(
                    severity="warning",
                    check="temp_window",
                    entity="enableConfig",
                    description="Temporäre Auswahl ohne vollständigen Zeitraum – wird ignoriert",
                ))
            elif start_of_day(tmp.start_time) > start_of_day(tmp.end_time):
                issues.append(ProfileIssue(
                    severity="warning",
                    check="temp_window",
                    entity="enableConfig",
                    description=(
                        f"Zeitraum vertauscht: {tmp.start_time:%d.%m.%Y} liegt nach "
                        f"{tmp.end_time:%d.%m.%Y} – gilt an keinem Tag"
                    ),
                ))
        return issues

    # ── Zyklen ────────────────────────────────────────────────────────────────

    def _check_loops(self, profile: Profile) -> list[ProfileIssue]:
        """Findet Zyklen im Zeitgruppen-Graphen (Tiefensuche, jeder Zyklus einmal)."""
        issues = []
        done: set[str] = set()
        reported: set[frozenset] = set()

        def visit(gid: str, path: list[str]) -> None:
            if gid in path:
                cycle = path[path.index(gid):] + [gid]
                key = frozenset(cycle)
                if key not in reported:
                    reported.add(key)
                    issues.append(ProfileIssue(
                        severity="error",
                        check="loop",
                        entity=gid,
                        description="Zyklus: " + " → ".join(cycle),
                    ))
                return
            if gid in done or gid not in profile.time_groups:
                return
            path.append(gid)
            for target in profile.time_groups[gid].layout:
                if target.type == TargetType.TIMEGROUP:
                    visit(target.id, path)
            path.pop()
            done.add(gid)

        for gid in profile.time_groups:
            visit(gid, [])
        return issues

    # ── Layout-Längen ─────────────────────────────────────────────────────────

    def _check_layout_lengths(self, profile: Profile) -> list[ProfileIssue]:
        issues = []
        for gid, group in profile.time_groups.items():
            if group.uses_calendar_position:
                minimum = DAY_CYCLE_MIN_LAYOUT[group.day_cycle_granularity]
                if len(group.layout) < minimum:
                    issues.append(ProfileIssue(
                        severity="warning",
                        check="short_layout",
                        entity=gid,
                        description=(
                            f"{len(group.layout)} von {minimum} Tagen belegt – "
                            f"übrige Tage ohne Stundenplan"
                        ),
                    ))
            elif len(group.layout) != group.cycle:
                issues.append(ProfileIssue(
                    severity="error",
                    check="layout_cycle_mismatch",
                    entity=gid,
                    description=(
                        f"Layout hat {len(group.layout)} Einträge, cycle ist {group.cycle}"
                    ),
                ))
        return issues

    # ── Stundenbelegung ───────────────────────────────────────────────────────

    def _check_assignments(self, profile: Profile) -> list[ProfileIssue]:
        issues = []
        for cid, curriculum in profile.curriculums.items():
            timetable = profile.timetables.get(curriculum.timetable_id)
            if timetable is None:
                continue
            assigned = {a.time_id for a in curriculum.classes}
            for layout_id, layout in timetable.layouts.items():
                if not isinstance(layout, LessonLayout):
                    continue
                if layout_id not in assigned:
                    issues.append(ProfileIssue(
                        severity="warning",
                        check="unassigned_lesson",
                        entity=cid,
                        description=f"Stunde '{layout_id}' ohne Belegung – wird übersprungen",
                    ))
            for assignment in curriculum.classes:
                layout = timetable.layouts.get(assignment.time_id)
                if layout is None:
                    issues.append(ProfileIssue(
                        severity="warning",
                        check="unknown_time_slot",
                        entity=cid,
                        description=(
                            f"Belegung für unbekannte Stunde '{assignment.time_id}' "
                            f"im Zeitraster '{curriculum.timetable_id}'"
                        ),
                    ))
                    continue
                if not isinstance(layout, LessonLayout):
                    continue
                subject_id = assignment.subject_id or layout.subject_id
                if subject_id not in profile.subjects:
                    issues.append(ProfileIssue(
                        severity="error",
                        check="dangling_reference",
                        entity=cid,
                        description=(
                            f"Stunde '{assignment.time_id}': unbekanntes Fach '{subject_id}'"
                        ),
                    ))
        return issues

    # ── Startdaten ────────────────────────────────────────────────────────────

    def _check_anchors(self, profile: Profile) -> list[ProfileIssue]:
        """Zeitgruppen ohne eigenes oder geerbtes Startdatum, ab der Auswahl gesehen."""
        issues = []
        reported: set[str] = set()
        roots = [profile.enable_config.selected]
        if profile.enable_config.temp_selected.enable:
            roots.append(profile.enable_config.temp_selected)

        def visit(gid: str, has_anchor: bool, path: set[str]) -> None:
            group: Optional[TimeGroup] = profile.time_groups.get(gid)
            if group is None or gid in path:
                return
            if not group.uses_calendar_position:
                has_anchor = has_anchor or group.start_time is not None
                if not has_anchor and gid not in reported:
                    reported.add(gid)
                    issues.append(ProfileIssue(
                        severity="warning",
                        check="missing_anchor",
                        entity=gid,
                        description=(
                            f"{_describe(group)} ohne Startdatum (auch nicht geerbt) "
                            f"– ergibt nie einen Stundenplan"
                        ),
                    ))
            for target in group.layout:
                if target.type == TargetType.TIMEGROUP:
                    visit(target.id, has_anchor, path | {gid})

        for root in roots:
            if root.type == TargetType.TIMEGROUP and root.id:
                visit(root.id, False, set())
        return issues


def _describe(group: TimeGroup) -> str:
    if group.granularity == Granularity.DAY:
        return f"Tages-Zeitgruppe '{group.name}' (custom, cycle={group.cycle})"
    return f"Zeitgruppe '{group.name}' ({group.granularity.value}, cycle={group.cycle})"


def check_profile(profile: Profile) -> ProfileReport:
    """Kurzform für ProfileChecker().check(profile)."""
    return ProfileChecker().check(profile)
