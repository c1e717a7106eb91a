"""Aktivierungs-Konfiguration: welcher Plan gilt, inkl. temporärer Überschreibung."""

from datetime import datetime
from typing import Optional

from pydantic import Field

from models.base import CamelModel
from models.time_group import TargetType


class SelectedTarget(CamelModel):
    """Dauerhaft aktiver Einstiegspunkt (Curriculum oder Zeitgruppe)."""

    type: TargetType = TargetType.TIMEGROUP
    id: str = ""


class TempSelected(CamelModel):
    """Temporäre Überschreibung für einen Datumsbereich (tagesgenau, inklusiv)."""

    enable: bool = False
    type: TargetType = TargetType.CURRICULUM
    id: str = ""
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None


class EnableConfig(CamelModel):
    selected: SelectedTarget = Field(default_factory=SelectedTarget)
    temp_selected: TempSelected = Field(default_factory=TempSelected)
