"""Kalender-Arithmetik: Grenzen zählen statt Zeiträume dividieren.

Alle Differenzen zählen echte Kalendergrenzen zwischen zwei Tagen:
31.01. → 01.02. ist eine Monatsgrenze, So → Mo eine Wochengrenze.
Wochen beginnen am Montag.
"""

from datetime import date, datetime, time, timedelta
from typing import Union

from models.time_group import Granularity

DateLike = Union[date, datetime]


def start_of_day(value: DateLike) -> date:
    """Richtet einen Zeitpunkt auf den Tag aus (00:00 Ortszeit)."""
    if isinstance(value, datetime):
        return value.date()
    return value


def start_of_week(day: DateLike) -> date:
    """Montag der Woche, in der ``day`` liegt."""
    d = start_of_day(day)
    return d - timedelta(days=d.weekday())


def diff_years(anchor: DateLike, target: DateLike) -> int:
    return start_of_day(target).year - start_of_day(anchor).year


def diff_months(anchor: DateLike, target: DateLike) -> int:
    a, t = start_of_day(anchor), start_of_day(target)
    return (t.year - a.year) * 12 + (t.month - a.month)


def diff_weeks(anchor: DateLike, target: DateLike) -> int:
    return (start_of_week(target) - start_of_week(anchor)).days // 7


def diff_days(anchor: DateLike, target: DateLike) -> int:
    return (start_of_day(target) - start_of_day(anchor)).days


_DIFF_BY_GRANULARITY = {
    Granularity.YEAR: diff_years,
    Granularity.MONTH: diff_months,
    Granularity.WEEK: diff_weeks,
    Granularity.DAY: diff_days,
}


def periods_between(granularity: Granularity, anchor: DateLike, target: DateLike) -> int:
    """Laufende Periode ab dem Startdatum, 1-basiert.

    Beispiel granularity=month, Start 31.01.2024:
    31.01.2024 → 1, 01.02.2024 → 2, 01.03.2024 → 3
    """
    return _DIFF_BY_GRANULARITY[granularity](anchor, target) + 1


def cycle_index(granularity: Granularity, anchor: DateLike, target: DateLike,
                cycle: int) -> int:
    """Layout-Index innerhalb des Zyklus: (Periode - 1) mod cycle."""
    return (periods_between(granularity, anchor, target) - 1) % cycle


def at_time_on(day: DateLike, time_of_day: time) -> datetime:
    """Setzt eine Uhrzeit auf einen Tag (Stunde/Minute, Sekunden genullt)."""
    d = start_of_day(day)
    return datetime(d.year, d.month, d.day, time_of_day.hour, time_of_day.minute)


def next_midnight(now: datetime) -> datetime:
    """Beginn des folgenden Tages (lokale Zeit, gleiche tzinfo wie ``now``)."""
    tomorrow = now.date() + timedelta(days=1)
    return datetime.combine(tomorrow, time.min, tzinfo=now.tzinfo)
