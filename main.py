"""Tagesplan — Haupt-CLI.

Verwendung:
  python main.py setup                    Konfiguration + leeres Profil anlegen
  python main.py setup --demo             ... mit Demo-Profil (A/B-Wochen)
  python main.py config show              Konfiguration anzeigen
  python main.py today                    Heutigen Tagesplan anzeigen
  python main.py today --date 2024-09-02  Tagesplan für ein Datum
  python main.py resolve                  Auflösungsweg der Zeitgruppen anzeigen
  python main.py preview --days 14        Übersicht über mehrere Tage
  python main.py status --at 10:30        Laufende und nächste Stunde
  python main.py check                    Profil auf Fehler prüfen
  python main.py export                   Excel-Export eines Zeitraums
  python main.py watch                    Tagesplan um Mitternacht neu erzeugen
"""

import asyncio
import logging
import sys
from datetime import date, datetime
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table
from rich import box

console = Console()

DATE_FORMATS = ["%Y-%m-%d", "%d.%m.%Y"]


def _setup_logging(level: str) -> None:
    """Richtet RichHandler am Root-Logger ein (einmalig)."""
    root = logging.getLogger()
    if not any(isinstance(h, RichHandler) for h in root.handlers):
        root.addHandler(RichHandler(console=console, show_path=False, rich_tracebacks=True))
    root.setLevel(level)


def _load_config_or_abort():
    """Lädt die Konfiguration oder bricht mit Fehlermeldung ab."""
    from config.manager import ConfigManager
    mgr = ConfigManager()
    if mgr.first_run_check():
        console.print(
            "[red]Keine Konfiguration gefunden.[/red]\n"
            "Führen Sie zunächst [bold]python main.py setup[/bold] aus."
        )
        sys.exit(1)
    try:
        config = mgr.load()
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)
    _setup_logging(config.log_level.value)
    return mgr, config


def _run_with_context(config, action):
    """Öffnet einen ScheduleContext, führt ``action(ctx)`` aus und schließt ihn wieder."""
    from storage.context import ScheduleContext

    async def runner():
        ctx = ScheduleContext(config)
        await ctx.init()
        try:
            result = action(ctx)
            if asyncio.iscoroutine(result):
                result = await result
            return result
        finally:
            await ctx.teardown()

    return asyncio.run(runner())


def _print_loop_panel(visited_ids: list[str]) -> None:
    console.print(Panel(
        "[bold]Die Zeitgruppen verweisen zyklisch aufeinander.[/bold]\n"
        + " → ".join(visited_ids) + "\n\n"
        "Bitte die Zeitgruppen im Profil korrigieren "
        "([bold]python main.py check[/bold]).",
        title="Zyklus erkannt",
        border_style="red",
    ))


def _print_day_table(title: str, schedule: dict, now: Optional[datetime] = None) -> None:
    from display.tui_renderer import render_day_rows

    if not schedule:
        console.print(f"[dim]{title}: kein Unterricht.[/dim]")
        return
    rows, side_rows = render_day_rows(schedule, now)
    for table_title, table_rows in ((title, rows), ("Nicht gesondert angezeigt", side_rows)):
        if not table_rows:
            continue
        table = Table(title=table_title, box=box.ROUNDED)
        table.add_column("Zeit", no_wrap=True)
        table.add_column("Typ")
        table.add_column("Fach")
        table.add_column("Kürzel")
        table.add_column("Lehrkraft")
        table.add_column("Status")
        for cells, style in table_rows:
            table.add_row(*cells, style=style or None)
        console.print(table)


# ─── SETUP ────────────────────────────────────────────────────────────────────

@click.command("setup")
@click.option("--demo", is_flag=True, default=False,
              help="Demo-Profil (A/B-Wochen) anlegen.")
@click.option("--anchor", type=click.DateTime(formats=DATE_FORMATS), default=None,
              help="Ein Tag der ersten A-Woche (Standard: heute).")
def cmd_setup(demo: bool, anchor: Optional[datetime]):
    """Ersteinrichtung: Konfiguration und Profil anlegen."""
    from config.defaults import default_app_config
    from config.manager import ConfigManager

    mgr = ConfigManager()
    if not mgr.first_run_check():
        console.print("[yellow]Eine Konfiguration existiert bereits.[/yellow]")
        if not click.confirm("Trotzdem neu einrichten?", default=False):
            return

    config = default_app_config()
    mgr.save(config)
    _setup_logging(config.log_level.value)

    async def init_profile(ctx):
        if demo:
            from data.demo_profile import build_demo_profile
            ctx.profiles.replace(build_demo_profile(anchor.date() if anchor else None))
            await ctx.profiles.save_now()
        return ctx.profile

    profile = _run_with_context(config, init_profile)
    console.print(Panel(profile.summary(), title="Profil", border_style="cyan"))
    console.print("[bold green]Einrichtung abgeschlossen![/bold green]")
    console.print("Führen Sie jetzt [bold]python main.py today[/bold] aus.")


# ─── CONFIG ───────────────────────────────────────────────────────────────────

@click.group("config")
def cmd_config():
    """Konfiguration anzeigen."""


@cmd_config.command("show")
def config_show():
    """Zeigt die aktuelle Konfiguration an."""
    mgr, config = _load_config_or_abort()

    console.print(Panel(
        f"[bold]{config.display_name}[/bold]  |  Log-Level {config.log_level.value}",
        title="Konfiguration",
        border_style="cyan",
    ))
    table = Table(title="Dateiablage", box=box.ROUNDED)
    table.add_column("Eintrag")
    table.add_column("Wert")
    data_dir = Path(config.storage.data_dir)
    table.add_row("Datenverzeichnis", str(data_dir))
    table.add_row("Profil", str(data_dir / config.storage.profile_file))
    table.add_row("Tagesplan", str(data_dir / config.storage.today_file))
    console.print(table)
    console.print(
        f"[bold]Speichern:[/bold] Entprellung {config.save.debounce_ms} ms | "
        f"max. {config.save.max_retries} Versuche"
    )


# ─── TODAY ────────────────────────────────────────────────────────────────────

@click.command("today")
@click.option("--date", "day", type=click.DateTime(formats=DATE_FORMATS), default=None,
              help="Datum (Standard: heute, aus der gespeicherten Tagesplan-Datei).")
def cmd_today(day: Optional[datetime]):
    """Zeigt den Tagesplan an."""
    from export.helpers import day_label
    from resolver.materializer import generate_day

    _, config = _load_config_or_abort()

    def show(ctx):
        if day is None:
            today = ctx.today.today
            if ctx.today.is_loop and ctx.today.last_result is not None:
                _print_loop_panel(ctx.today.last_result.resolve.visited_ids)
            _print_day_table(f"{config.display_name} – {day_label(today.generate_date.date())}",
                             today.schedule, datetime.now())
            return
        schedule, result, _ = generate_day(ctx.profile, day)
        if result.is_loop:
            _print_loop_panel(result.visited_ids)
        _print_day_table(f"{config.display_name} – {day_label(day.date())}", schedule)

    _run_with_context(config, show)


# ─── RESOLVE ──────────────────────────────────────────────────────────────────

@click.command("resolve")
@click.option("--date", "day", type=click.DateTime(formats=DATE_FORMATS), default=None,
              help="Datum (Standard: heute).")
def cmd_resolve(day: Optional[datetime]):
    """Zeigt den Auflösungsweg durch die Zeitgruppen an."""
    from resolver.selector import select_active_root
    from resolver.time_groups import resolve_curriculum

    _, config = _load_config_or_abort()
    target = (day or datetime.now()).date()

    def show(ctx):
        selection = select_active_root(ctx.profile.enable_config, target)
        result = resolve_curriculum(target, selection, ctx.profile)

        console.print(
            f"[bold]Einstieg:[/bold] {selection.type.value} '{selection.id}'"
            + (" [yellow](temporär)[/yellow]" if selection.is_temporary else "")
        )
        table = Table(title=f"Auflösung für {target:%d.%m.%Y}", box=box.ROUNDED)
        table.add_column("#", justify="right")
        table.add_column("Zeitgruppe")
        table.add_column("Name")
        table.add_column("Granularität")
        table.add_column("Zyklus", justify="right")
        for idx, visited in enumerate(result.visited, 1):
            tg = visited.time_group
            table.add_row(str(idx), visited.id, tg.name, tg.granularity.value, str(tg.cycle))
        if result.visited:
            console.print(table)

        if result.is_loop:
            _print_loop_panel(result.visited_ids)
        elif result.curriculum is not None:
            console.print(
                f"[green]✓[/green] Curriculum '{result.curriculum_id}' "
                f"({result.curriculum.name})"
            )
        else:
            reason = result.failure.value if result.failure else "keine Auswahl"
            console.print(f"[yellow]Kein Curriculum:[/yellow] {reason}")

    _run_with_context(config, show)


# ─── PREVIEW ──────────────────────────────────────────────────────────────────

@click.command("preview")
@click.option("--start", type=click.DateTime(formats=DATE_FORMATS), default=None,
              help="Erster Tag (Standard: heute).")
@click.option("--days", default=7, show_default=True, type=click.IntRange(1, 366),
              help="Anzahl Tage.")
def cmd_preview(start: Optional[datetime], days: int):
    """Zeigt eine Übersicht der Tagespläne mehrerer Tage."""
    from display.tui_renderer import render_preview_rows

    _, config = _load_config_or_abort()
    first = (start or datetime.now()).date()

    def show(ctx):
        table = Table(title=f"Vorschau ab {first:%d.%m.%Y}", box=box.ROUNDED)
        table.add_column("Datum", no_wrap=True)
        table.add_column("Auswahl")
        table.add_column("Stundenplan")
        table.add_column("Fächer")
        for row in render_preview_rows(ctx.profile, first, days):
            style = "red" if row[2].startswith("⟳") else None
            table.add_row(*row, style=style)
        console.print(table)

    _run_with_context(config, show)


# ─── STATUS ───────────────────────────────────────────────────────────────────

@click.command("status")
@click.option("--at", "at", type=click.DateTime(formats=["%Y-%m-%d %H:%M", "%H:%M"]),
              default=None, help="Zeitpunkt (Standard: jetzt).")
def cmd_status(at: Optional[datetime]):
    """Zeigt laufende und nächste Einträge an."""
    from display.lesson_status import LessonStatus, lesson_status
    from resolver.materializer import generate_day

    _, config = _load_config_or_abort()
    now = datetime.now()
    if at is not None:
        # Nur Uhrzeit angegeben → heute
        now = datetime.combine(date.today(), at.time()) if at.year == 1900 else at

    def show(ctx):
        if now.date() == ctx.today.today.generate_date.date():
            schedule = ctx.today.today.schedule
        else:
            schedule, _, _ = generate_day(ctx.profile, now)
        snapshot = lesson_status(schedule, now)
        messages = {
            LessonStatus.NO_LESSON: "Heute kein Unterricht.",
            LessonStatus.BEFORE_FIRST: "Der Unterricht hat noch nicht begonnen.",
            LessonStatus.AFTER_LAST: "Der Unterricht ist vorbei.",
            LessonStatus.OK: "",
        }
        if messages[snapshot.status]:
            console.print(f"[cyan]{messages[snapshot.status]}[/cyan]")
        for label, entries in (("Jetzt", snapshot.current), ("Als Nächstes", snapshot.future)):
            for _, entry in entries:
                console.print(
                    f"[bold]{label}:[/bold] {entry.name} "
                    f"({entry.start_time:%H:%M}–{entry.end_time:%H:%M})"
                )

    _run_with_context(config, show)


# ─── CHECK ────────────────────────────────────────────────────────────────────

@click.command("check")
def cmd_check():
    """Prüft das Profil auf fehlende Verweise, Zyklen und Lücken."""
    from analysis.profile_check import check_profile

    _, config = _load_config_or_abort()
    report = _run_with_context(config, lambda ctx: check_profile(ctx.profile))
    report.print_rich()
    if not report.is_valid:
        sys.exit(1)


# ─── EXPORT ───────────────────────────────────────────────────────────────────

@click.command("export")
@click.option("--start", type=click.DateTime(formats=DATE_FORMATS), default=None,
              help="Erster Tag (Standard: heute).")
@click.option("--days", default=7, show_default=True, type=click.IntRange(1, 366),
              help="Anzahl Tage.")
@click.option("--output", "-o", default="output/tagesplan.xlsx", show_default=True,
              help="Ziel-Datei.")
def cmd_export(start: Optional[datetime], days: int, output: str):
    """Exportiert die Tagespläne eines Zeitraums nach Excel."""
    from export.excel_export import ScheduleExporter

    _, config = _load_config_or_abort()
    first = (start or datetime.now()).date()

    def export(ctx):
        exporter = ScheduleExporter(ctx.profile, title=config.display_name)
        return exporter.export(Path(output), first, days)

    with console.status("Excel-Export läuft..."):
        written = _run_with_context(config, export)
    console.print(f"[green]✓[/green] Excel: {output} ({len(written)} Tagesblätter)")


# ─── WATCH ────────────────────────────────────────────────────────────────────

@click.command("watch")
def cmd_watch():
    """Läuft dauerhaft und erzeugt den Tagesplan um Mitternacht neu (Strg+C beendet)."""
    _, config = _load_config_or_abort()

    async def wait_forever(ctx):
        console.print(
            f"[cyan]Tagesplan aktiv ({len(ctx.today.today.schedule)} Einträge). "
            f"Warte auf Mitternacht...[/cyan]"
        )
        await asyncio.Event().wait()

    try:
        _run_with_context(config, wait_forever)
    except KeyboardInterrupt:
        console.print("[yellow]Beendet.[/yellow]")


# ─── HAUPT-CLI ────────────────────────────────────────────────────────────────

@click.group()
def cli():
    """Tagesplan: Stundenplan-Auflösung für den aktuellen Tag.

    Starten Sie mit: python main.py setup --demo
    """


def main():
    """Einstiegspunkt. Ohne Konfiguration wird auf setup verwiesen."""
    from config.manager import ConfigManager
    mgr = ConfigManager()

    if len(sys.argv) == 1 and mgr.first_run_check():
        console.print(Panel(
            "[bold]Willkommen bei Tagesplan![/bold]\n\n"
            "Keine Konfiguration gefunden.\n"
            "Richten Sie die Anwendung mit [bold]python main.py setup --demo[/bold] ein.",
            border_style="cyan",
        ))
        return

    cli()


# Befehle registrieren
cli.add_command(cmd_setup)
cli.add_command(cmd_config)
cli.add_command(cmd_today)
cli.add_command(cmd_resolve)
cli.add_command(cmd_preview)
cli.add_command(cmd_status)
cli.add_command(cmd_check)
cli.add_command(cmd_export)
cli.add_command(cmd_watch)


if __name__ == "__main__":
    main()
