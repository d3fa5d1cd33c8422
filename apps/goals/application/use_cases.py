# apps/goals/application/use_cases.py
import logging
import uuid
from dataclasses import dataclass, field, replace
from datetime import date, datetime
from numbers import Number
from typing import Callable, List, Optional, Sequence, Union

from django.utils import timezone

from apps.core.conf import tracker_setting
from apps.core.domain.keys import split_key
from apps.core.domain.query import KEY_FIELD
from apps.core.exceptions import NotFoundError, ValidationError
from apps.core.ports.gateway import IDocumentGateway
from apps.goals.adapters.gateway_repository import COLLECTION, GatewayGoalRepository
from apps.goals.domain.entities import ActionStep, GoalEntity, GoalStatus, Timeframe
from apps.goals.domain.lifecycle import GoalLifecycle
from apps.goals.domain.timeframes import CustomRange, TimeframeResolver
from apps.journal.services import COLLECTION as JOURNAL_COLLECTION

logger = logging.getLogger(__name__)


@dataclass
class StepInput:
    description: str
    target_value: Optional[float] = None
    id: Optional[str] = None


@dataclass
class CreateGoalInput:
    title: str
    user_id: str
    subsection: str
    timeframe: Union[Timeframe, str] = Timeframe.MONTHLY
    description: str = ""
    action_steps: List[StepInput] = field(default_factory=list)
    custom_start: Optional[Union[date, datetime]] = None
    custom_end: Optional[Union[date, datetime]] = None
    parent_goal_id: Optional[str] = None


class GoalService:
    """
    Goal use cases on top of the document gateway.

    Every mutation writes first and only then returns the new entity, so a
    failed write (PersistenceFailure) leaves the caller's state untouched.
    """

    def __init__(
        self,
        gateway: IDocumentGateway,
        clock: Callable[[], datetime] = timezone.now,
        lifecycle: Optional[GoalLifecycle] = None,
        resolver: Optional[TimeframeResolver] = None,
    ):
        self.gateway = gateway
        self.repository = GatewayGoalRepository(gateway)
        self.clock = clock
        self.lifecycle = lifecycle or GoalLifecycle()
        self.resolver = resolver or TimeframeResolver(
            week_starts_on=tracker_setting('WEEK_STARTS_ON'),
            custom_default_days=tracker_setting('CUSTOM_TIMEFRAME_DAYS'),
        )

    # --- Reads ---

    def get_goal(self, user_id: str, goal_id: str) -> GoalEntity:
        goal = self.repository.get_by_id(user_id, goal_id)
        if goal is None:
            raise NotFoundError(COLLECTION, goal_id)
        return goal

    def list_goals(self, user_id: str, status=None, timeframe=None, subsection=None) -> List[GoalEntity]:
        filters = {}
        if status is not None:
            filters['status'] = GoalStatus(status)
        if timeframe is not None:
            filters['timeframe'] = Timeframe(timeframe)
        if subsection is not None:
            filters['subsection'] = subsection
        return self.repository.list_for_user(user_id, filters)

    def list_sub_goals(self, user_id: str, parent_goal_id: str) -> List[GoalEntity]:
        return [g for g in self.repository.list_for_user(user_id) if g.parent_goal_id == parent_goal_id]

    def referenced_by(self, user_id: str, goal_id: str) -> List[str]:
        """Ids of journal entries linking to the goal."""
        docs = self.gateway.query(JOURNAL_COLLECTION, [
            ('userId', '==', user_id),
            ('linkedGoals', 'array-contains', goal_id),
        ])
        return [split_key(user_id, d[KEY_FIELD]) for d in docs]

    # --- Writes ---

    def _build_steps(self, inputs: Sequence[StepInput]) -> List[ActionStep]:
        steps = []
        seen = set()
        for item in inputs:
            # Blank steps are dropped, not rejected
            if not item.description or not item.description.strip():
                continue
            if item.target_value is not None and item.target_value < 0:
                raise ValidationError("Step target value must not be negative")
            step_id = item.id or uuid.uuid4().hex
            if step_id in seen:
                raise ValidationError(f"Duplicate action step id: {step_id}")
            seen.add(step_id)
            steps.append(ActionStep(
                id=step_id,
                description=item.description.strip(),
                target_value=item.target_value,
            ))
        return steps

    def create_goal(self, input_dto: CreateGoalInput) -> GoalEntity:
        # 1. Validation (nothing is written on failure)
        if not input_dto.title or not input_dto.title.strip():
            raise ValidationError("Goal title cannot be empty")
        if not input_dto.subsection:
            raise ValidationError("Goal must belong to a life area")

        steps = self._build_steps(input_dto.action_steps)
        if not steps:
            raise ValidationError("Add at least one action step")

        if input_dto.parent_goal_id:
            # Raises NotFoundError for unknown parents
            self.get_goal(input_dto.user_id, input_dto.parent_goal_id)

        # 2. Dates
        now = self.clock()
        window = self.resolver.resolve_window(
            input_dto.timeframe, now,
            CustomRange(input_dto.custom_start, input_dto.custom_end),
        )
        if window.end_date < window.start_date:
            raise ValidationError("Goal end date is before its start date")

        goal = GoalEntity(
            id=f"goal_{uuid.uuid4().hex}",
            title=input_dto.title.strip(),
            description=input_dto.description,
            user_id=input_dto.user_id,
            subsection=input_dto.subsection,
            timeframe=Timeframe(input_dto.timeframe),
            start_date=window.start_date,
            end_date=window.end_date,
            action_steps=steps,
            progress=0,
            status=GoalStatus.ACTIVE,
            parent_goal_id=input_dto.parent_goal_id,
            created_at=now,
            updated_at=now,
        )

        # 3. Persist
        self.repository.save(goal)
        logger.info("Goal %s created for user %s", goal.id, goal.user_id)
        return goal

    def _validate_steps(self, steps: Sequence[ActionStep]) -> None:
        """Edited step lists are checked as a whole; unlike on creation, blank steps are errors."""
        if not steps:
            raise ValidationError("Add at least one action step")
        seen = set()
        for step in steps:
            if not step.id:
                raise ValidationError("Action step id is required")
            if step.id in seen:
                raise ValidationError(f"Duplicate action step id: {step.id}")
            seen.add(step.id)
            if not step.description or step.is_blank:
                raise ValidationError(f"Action step {step.id} needs a description")
            values = [step.current_value] if step.target_value is None else [step.target_value, step.current_value]
            for value in values:
                if isinstance(value, bool) or not isinstance(value, Number):
                    raise ValidationError(f"Action step {step.id} values must be numbers")
            if step.target_value is not None and step.target_value < 0:
                raise ValidationError("Step target value must not be negative")

    def update_steps(self, user_id: str, goal_id: str, steps: Sequence[ActionStep]) -> GoalEntity:
        steps = list(steps)
        self._validate_steps(steps)
        goal = self.get_goal(user_id, goal_id)
        return self._commit_steps(goal, steps)

    def toggle_step(self, user_id: str, goal_id: str, step_id: str) -> GoalEntity:
        goal = self.get_goal(user_id, goal_id)
        steps = self.lifecycle.toggle_step_completion(goal.action_steps, step_id)
        return self._commit_steps(goal, steps)

    def set_step_value(self, user_id: str, goal_id: str, step_id: str, value: float) -> GoalEntity:
        goal = self.get_goal(user_id, goal_id)
        steps = self.lifecycle.set_step_value(goal.action_steps, step_id, value)
        return self._commit_steps(goal, steps)

    def _commit_steps(self, goal: GoalEntity, steps: List[ActionStep]) -> GoalEntity:
        progress, status = self.lifecycle.apply_step_update(goal, steps)
        now = self.clock()

        self.repository.update_fields(
            goal.user_id, goal.id,
            action_steps=steps, progress=progress, status=status, updated_at=now,
        )

        updated = replace(goal, action_steps=steps, progress=progress, status=status, updated_at=now)
        logger.info("Goal %s progress %s%% (%s)", goal.id, progress, status.value)

        if status != goal.status:
            logger.info("Goal %s status %s -> %s", goal.id, goal.status.value, status.value)
        return updated

    def change_status(self, user_id: str, goal_id: str, status) -> GoalEntity:
        """Manual pause / resume."""
        goal = self.get_goal(user_id, goal_id)
        new_status = self.lifecycle.transition(goal, status)
        if new_status == goal.status:
            return goal

        now = self.clock()
        self.repository.update_fields(user_id, goal_id, status=new_status, updated_at=now)
        logger.info("Goal %s status %s -> %s", goal_id, goal.status.value, new_status.value)
        return replace(goal, status=new_status, updated_at=now)

    def delete_goal(self, user_id: str, goal_id: str) -> None:
        """
        Hard delete. Journal entries linking the goal keep the dangling id;
        readers drop unknown ids (see JournalService.resolve_linked_goals).
        """
        self.get_goal(user_id, goal_id)
        self.repository.delete(user_id, goal_id)
        logger.info("Goal %s deleted for user %s", goal_id, user_id)

    def recalculate(self, user_id: str, goal_id: str) -> GoalEntity:
        """Re-derives progress/status from the stored steps (repair path)."""
        goal = self.get_goal(user_id, goal_id)
        return self._commit_steps(goal, goal.action_steps)
