"""Domain models for day scoring."""

from dataclasses import dataclass
from enum import Enum


class DayStatus(Enum):
    """Adherence category for one day."""

    ON_TRACK = "on_track"
    OFF_TARGET = "off_target"
    FAR_OFF = "far_off"
    NO_DATA = "no_data"


@dataclass(frozen=True)
class DayScore:
    """Goal adherence for one day."""

    goal_score: int
    status: DayStatus
    calories_score: float = 0.0
    protein_score: float = 0.0
    carbs_score: float = 0.0
    fat_score: float = 0.0
