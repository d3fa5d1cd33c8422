# apps/goals/domain/lifecycle.py
from dataclasses import replace
from typing import List, Optional, Sequence, Tuple

from apps.core.exceptions import InvalidTransition, NotFoundError, ValidationError
from apps.goals.domain.entities import ActionStep, GoalEntity, GoalStatus
from apps.goals.domain.progress import ProgressCalculator

# Manual (user initiated) status changes. COMPLETED is only ever derived from progress.
MANUAL_TRANSITIONS = {
    GoalStatus.ACTIVE: {GoalStatus.PAUSED},
    GoalStatus.PAUSED: {GoalStatus.ACTIVE},
    GoalStatus.COMPLETED: set(),
}


class GoalLifecycle:
    def __init__(self, calculator: Optional[ProgressCalculator] = None):
        self.calculator = calculator or ProgressCalculator()

    def derive_status(self, progress: int) -> GoalStatus:
        return GoalStatus.COMPLETED if progress == 100 else GoalStatus.ACTIVE

    def apply_step_update(self, goal: GoalEntity, updated_steps: Sequence[ActionStep]) -> Tuple[int, GoalStatus]:
        """
        Recomputes (progress, status) for a new list of action steps.

        Editing steps counts as working on the goal, so a PAUSED goal comes
        back as ACTIVE (or COMPLETED). This is the single place to change if
        paused goals should survive step edits.
        """
        progress = self.calculator.compute_progress(updated_steps)
        return progress, self.derive_status(progress)

    def toggle_step_completion(self, steps: Sequence[ActionStep], step_id: str) -> List[ActionStep]:
        """Returns a new step list with step_id flipped; the input list is left untouched."""
        result = []
        found = False
        for step in steps:
            if step.id == step_id:
                found = True
                completed = not step.completed
                current = step.current_value
                if step.is_quantifiable:
                    current = step.target_value if completed else 0
                step = replace(step, completed=completed, current_value=current)
            result.append(step)

        if not found:
            raise NotFoundError('actionSteps', step_id)
        return result

    def set_step_value(self, steps: Sequence[ActionStep], step_id: str, value: float) -> List[ActionStep]:
        """Records progress on a quantifiable step; reaching the target completes it."""
        result = []
        found = False
        for step in steps:
            if step.id == step_id:
                found = True
                if not step.is_quantifiable:
                    raise ValidationError(f"Step {step_id} has no target value")
                current = min(max(value, 0), step.target_value)
                step = replace(step, current_value=current, completed=current >= step.target_value)
            result.append(step)

        if not found:
            raise NotFoundError('actionSteps', step_id)
        return result

    def transition(self, goal: GoalEntity, new_status: GoalStatus) -> GoalStatus:
        """Validates a manual status change (pause / resume)."""
        try:
            new_status = GoalStatus(new_status)
        except ValueError:
            raise ValidationError(f"Unknown goal status: {new_status!r}")
        if new_status == goal.status:
            return new_status
        if new_status not in MANUAL_TRANSITIONS[goal.status]:
            raise InvalidTransition(f"Cannot change goal status from {goal.status.value} to {new_status.value}")
        return new_status
