"""Domain models for the profile store."""

from dataclasses import dataclass, field

from nutrition_insights.domain.nutrition import GoalTargets
from nutrition_insights.domain.signals import PrimaryGoal, SecondaryFocus


@dataclass(frozen=True)
class UserProfile:
    """Profile fields the analytics engine reads."""

    timezone: str
    targets: GoalTargets
    goal_type: PrimaryGoal = PrimaryGoal.HEALTH
    secondary_focuses: tuple[SecondaryFocus, ...] = field(default_factory=tuple)
