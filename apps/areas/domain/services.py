# apps/areas/domain/services.py
from typing import Sequence

from apps.areas.domain.entities import Metric
from apps.core.domain.numbers import round_half_up


class WinStateAggregator:
    def metric_progress(self, metric: Metric) -> float:
        """
        Percentage of the target reached, capped at 100.
        Metrics without a positive target have no progress.
        """
        if metric.target_value <= 0:
            return 0.0
        return min(100.0, 100 * metric.current_value / metric.target_value)

    def metric_bar_width(self, metric: Metric) -> float:
        """Width of the progress bar (0-100), also safe for negative current values."""
        return max(0.0, min(100.0, self.metric_progress(metric)))

    def compute_overall_progress(self, metrics: Sequence[Metric]) -> int:
        if not metrics:
            return 0

        total = 0.0
        valid_metrics = 0
        for metric in metrics:
            # Metrics without a target do not count at all (not even as 0%)
            if metric.target_value > 0:
                # Negative current values count as 0%
                total += self.metric_bar_width(metric)
                valid_metrics += 1

        if valid_metrics == 0:
            return 0
        return round_half_up(total / valid_metrics)
