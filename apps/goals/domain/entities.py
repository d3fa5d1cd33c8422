# apps/goals/domain/entities.py
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional, Union

Number = Union[int, float]


class Timeframe(str, Enum):
    WEEKLY = 'weekly'
    MONTHLY = 'monthly'
    YEARLY = 'yearly'
    CUSTOM = 'custom'


class GoalStatus(str, Enum):
    ACTIVE = 'active'
    COMPLETED = 'completed'
    PAUSED = 'paused'


@dataclass
class ActionStep:
    id: str
    description: str
    completed: bool = False
    target_value: Optional[Number] = None  # None or 0 = binary step
    current_value: Number = 0

    @property
    def is_quantifiable(self) -> bool:
        return bool(self.target_value)

    @property
    def is_blank(self) -> bool:
        return not self.description.strip()


@dataclass
class GoalEntity:
    id: Optional[str]  # None before the first save
    title: str
    user_id: str
    subsection: str
    timeframe: Timeframe = Timeframe.MONTHLY
    description: str = ""

    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None

    action_steps: List[ActionStep] = field(default_factory=list)
    progress: int = 0  # 0-100
    status: GoalStatus = GoalStatus.ACTIVE

    # Hierarchy (sub-goals)
    parent_goal_id: Optional[str] = None

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
