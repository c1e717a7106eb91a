"""Zeitgruppen: zyklische Zuordnung von Stundenplänen zu Kalenderzeiten.

Zeitgruppen bilden über ``timegroup``-Verweise einen gerichteten Graphen.
Zyklen sind in den Autorendaten erlaubt und werden erst bei der Auflösung
erkannt (siehe resolver/time_groups.py).
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import Field

from models.base import CamelModel


class Granularity(str, Enum):
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"


class DayCycleGranularity(str, Enum):
    WEEK = "week"      # Layout-Index = Wochentag (Mo=0 .. So=6)
    MONTH = "month"    # Layout-Index = Tag im Monat - 1
    CUSTOM = "custom"  # Layout-Index aus Startdatum und cycle


class TargetType(str, Enum):
    CURRICULUM = "curriculum"
    TIMEGROUP = "timegroup"


class TimeGroupLayoutTarget(CamelModel):
    """Eine Zelle im Zyklus: verweist auf ein Curriculum oder eine Zeitgruppe."""

    type: TargetType
    id: str


class TimeGroup(CamelModel):
    """Zeitgruppe mit Zyklus.

    Beispiel A/B-Woche: granularity=week, cycle=2,
    layout=[Zeitgruppe "A-Woche", Zeitgruppe "B-Woche"].
    """

    name: str = ""
    granularity: Granularity = Granularity.DAY
    # Nur relevant bei granularity=day
    day_cycle_granularity: DayCycleGranularity = DayCycleGranularity.WEEK
    cycle: int = Field(1, ge=1)
    # None = Startdatum der übergeordneten Zeitgruppe erben
    start_time: Optional[datetime] = None
    layout: list[TimeGroupLayoutTarget] = Field(default_factory=list)

    @property
    def uses_calendar_position(self) -> bool:
        """True wenn der Index direkt aus Wochentag/Monatstag folgt (kein Startdatum nötig)."""
        return (
            self.granularity == Granularity.DAY
            and self.day_cycle_granularity != DayCycleGranularity.CUSTOM
        )
