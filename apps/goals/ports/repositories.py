# apps/goals/ports/repositories.py
from abc import ABC, abstractmethod
from typing import List, Optional
from apps.goals.domain.entities import GoalEntity


class IGoalRepository(ABC):
    @abstractmethod
    def get_by_id(self, user_id: str, goal_id: str) -> Optional[GoalEntity]:
        pass

    @abstractmethod
    def save(self, goal: GoalEntity) -> GoalEntity:
        """Writes the whole goal (goal.id must be set)."""
        pass

    @abstractmethod
    def update_fields(self, user_id: str, goal_id: str, **fields) -> None:
        """Partial update (merge) of the stored goal."""
        pass

    @abstractmethod
    def delete(self, user_id: str, goal_id: str) -> None:
        pass

    @abstractmethod
    def list_for_user(self, user_id: str, filters: Optional[dict] = None) -> List[GoalEntity]:
        """Goals of a user, newest first. filters: entity field -> required value."""
        pass
