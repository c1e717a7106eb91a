"""Auflösung und Tagesplan-Erzeugung (reine Funktionen, ohne I/O)."""

from .selector import Selection, select_active_root
from .time_groups import ResolveFailure, ResolveResult, VisitedGroup, resolve_curriculum
from .materializer import (
    GenerationResult,
    generate_day,
    generate_today_config,
    materialize,
    sorted_schedule,
)

__all__ = [
    "Selection",
    "select_active_root",
    "ResolveFailure",
    "ResolveResult",
    "VisitedGroup",
    "resolve_curriculum",
    "GenerationResult",
    "generate_day",
    "generate_today_config",
    "materialize",
    "sorted_schedule",
]
