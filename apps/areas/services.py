# apps/areas/services.py
import logging
from dataclasses import dataclass, field
from numbers import Number
from typing import List, Optional

from django.utils import timezone

from apps.areas.catalog import get_area
from apps.areas.domain.entities import Metric, WinState
from apps.areas.domain.services import WinStateAggregator
from apps.core.domain.keys import make_key
from apps.core.exceptions import ValidationError
from apps.core.ports.gateway import IDocumentGateway
from apps.goals.application.use_cases import GoalService
from apps.goals.domain.entities import GoalEntity, GoalStatus

logger = logging.getLogger(__name__)

COLLECTION = 'lifeSubsections'


@dataclass
class AreaOverview:
    area: str
    name: str
    win_state: WinState
    overall_progress: int
    active_goals: List[GoalEntity] = field(default_factory=list)
    completed_goals: List[GoalEntity] = field(default_factory=list)


def metric_from_document(raw: dict) -> Metric:
    target = raw.get('targetValue', 0)
    current = raw.get('currentValue', 0)
    for name, value in (('targetValue', target), ('currentValue', current)):
        if isinstance(value, bool) or not isinstance(value, Number):
            raise ValidationError(f"Metric field '{name}' must be a number")
    return Metric(
        name=raw.get('name', ""),
        unit=raw.get('unit', ""),
        target_value=target,
        current_value=current,
    )


def metric_to_document(metric: Metric) -> dict:
    return {
        'name': metric.name,
        'unit': metric.unit,
        'targetValue': metric.target_value,
        'currentValue': metric.current_value,
    }


class WinStateService:
    def __init__(self, gateway: IDocumentGateway, aggregator: Optional[WinStateAggregator] = None):
        self.gateway = gateway
        self.aggregator = aggregator or WinStateAggregator()

    def get_win_state(self, user_id: str, area: str) -> WinState:
        """Stored win state, or the area's default metrics when none was saved yet."""
        doc = self.gateway.get(COLLECTION, make_key(user_id, area))
        raw = (doc or {}).get('winState')
        if not raw:
            return WinState(metrics=get_area(area).build_default_metrics())

        metrics = raw.get('metrics')
        return WinState(
            description=raw.get('description', ""),
            metrics=[metric_from_document(m) for m in metrics] if metrics else get_area(area).build_default_metrics(),
        )

    def save_win_state(self, user_id: str, area: str, win_state: WinState) -> WinState:
        for metric in win_state.metrics:
            if not metric.name or not metric.name.strip():
                raise ValidationError("Every metric needs a name")
            for value in (metric.target_value, metric.current_value):
                if isinstance(value, bool) or not isinstance(value, Number):
                    raise ValidationError(f"Metric '{metric.name}' values must be numbers")

        self.gateway.put(COLLECTION, make_key(user_id, area), {
            'name': area,
            'userId': user_id,
            'winState': {
                'description': win_state.description,
                'metrics': [metric_to_document(m) for m in win_state.metrics],
            },
            'updatedAt': timezone.now(),
        }, merge=True)
        logger.info("Win state of %s saved for user %s", area, user_id)
        return win_state

    def overall_progress(self, user_id: str, area: str) -> int:
        return self.aggregator.compute_overall_progress(self.get_win_state(user_id, area).metrics)

    def area_overview(self, user_id: str, area: str) -> AreaOverview:
        win_state = self.get_win_state(user_id, area)
        goals = GoalService(self.gateway).list_goals(user_id, subsection=area)

        return AreaOverview(
            area=area,
            name=get_area(area).name,
            win_state=win_state,
            overall_progress=self.aggregator.compute_overall_progress(win_state.metrics),
            active_goals=[g for g in goals if g.status == GoalStatus.ACTIVE],
            completed_goals=[g for g in goals if g.status == GoalStatus.COMPLETED],
        )
