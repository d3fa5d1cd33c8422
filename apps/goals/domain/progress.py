# apps/goals/domain/progress.py
from typing import Optional, Sequence

from apps.core.domain.numbers import round_half_up
from apps.goals.domain.entities import ActionStep


class ProgressCalculator:
    def step_weight(self, step: ActionStep) -> float:
        if step.is_quantifiable:
            return step.target_value
        return 1

    def step_contribution(self, step: ActionStep) -> float:
        if step.is_quantifiable:
            # current_value counts only within [0, target_value]
            return min(max(step.current_value or 0, 0), step.target_value)
        return 1 if step.completed else 0

    def compute_progress(self, steps: Sequence[ActionStep]) -> int:
        """
        Weighted completion in percent (0-100).

        Quantifiable steps weigh their target value and contribute their
        current value, binary steps weigh 1 and contribute 1 when completed.
        A target_value of 0 makes the step binary.
        """
        if not steps:
            return 0

        total_weight = 0
        completed_weight = 0
        for step in steps:
            total_weight += self.step_weight(step)
            completed_weight += self.step_contribution(step)

        if total_weight <= 0:
            return 0

        return round_half_up(100 * completed_weight / total_weight)

    def next_action_step(self, steps: Sequence[ActionStep]) -> Optional[ActionStep]:
        """First step that is not completed yet (shown as 'Next Step' on the goal card)."""
        return next((s for s in steps if not s.completed), None)
