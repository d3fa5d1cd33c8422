# apps/goals/adapters/gateway_repository.py
from numbers import Number
from typing import List, Optional

from apps.core.domain.keys import make_key, split_key
from apps.core.domain.query import KEY_FIELD
from apps.core.domain.timestamps import coerce_datetime
from apps.core.exceptions import ValidationError
from apps.core.ports.gateway import IDocumentGateway
from apps.goals.domain.entities import ActionStep, GoalEntity, GoalStatus, Timeframe
from apps.goals.ports.repositories import IGoalRepository

COLLECTION = 'goals'

# Entity field -> stored document field
FIELD_NAMES = {
    'title': 'title',
    'description': 'description',
    'subsection': 'subsection',
    'timeframe': 'timeframe',
    'start_date': 'startDate',
    'end_date': 'endDate',
    'action_steps': 'actionSteps',
    'progress': 'progress',
    'status': 'status',
    'user_id': 'userId',
    'parent_goal_id': 'parentGoalId',
    'created_at': 'createdAt',
    'updated_at': 'updatedAt',
}


def _require(doc: dict, name: str, types, nullable: bool = False, default=None):
    value = doc.get(name, default)
    if value is None:
        if nullable:
            return None
        raise ValidationError(f"Field '{name}' is required")
    # bool is an int subclass, never accept it as a number
    if types is Number and isinstance(value, bool):
        raise ValidationError(f"Field '{name}' must be a number")
    if not isinstance(value, types):
        raise ValidationError(f"Field '{name}' has invalid type {type(value).__name__}")
    return value


def _timestamp(doc: dict, name: str):
    try:
        return coerce_datetime(doc.get(name))
    except (TypeError, ValueError):
        raise ValidationError(f"Field '{name}' is not a valid timestamp")


def step_to_entity(raw: dict) -> ActionStep:
    if not isinstance(raw, dict):
        raise ValidationError("Action step must be a mapping")
    target = _require(raw, 'targetValue', Number, nullable=True)
    if target is not None and target < 0:
        raise ValidationError("Field 'targetValue' must not be negative")
    return ActionStep(
        id=str(_require(raw, 'id', (str, int))),
        description=_require(raw, 'description', str, default=""),
        completed=_require(raw, 'completed', bool, default=False),
        target_value=target,
        current_value=_require(raw, 'currentValue', Number, default=0),
    )


def step_to_document(step: ActionStep) -> dict:
    return {
        'id': step.id,
        'description': step.description,
        'completed': step.completed,
        'targetValue': step.target_value,
        'currentValue': step.current_value,
    }


def _encode(field: str, value):
    if field == 'action_steps':
        return [step_to_document(s) for s in value]
    if field in ('timeframe', 'status') and value is not None:
        return value.value if hasattr(value, 'value') else value
    return value


class GatewayGoalRepository(IGoalRepository):
    def __init__(self, gateway: IDocumentGateway):
        self.gateway = gateway

    def to_entity(self, doc: dict, user_id: Optional[str] = None) -> GoalEntity:
        """Document -> entity, rejecting documents that do not match the goal schema."""
        user_id = user_id or _require(doc, 'userId', str)
        try:
            timeframe = Timeframe(_require(doc, 'timeframe', str))
            status = GoalStatus(_require(doc, 'status', str, default=GoalStatus.ACTIVE.value))
        except ValueError as exc:
            raise ValidationError(str(exc))

        progress = _require(doc, 'progress', Number, default=0)
        return GoalEntity(
            id=split_key(user_id, doc[KEY_FIELD]),
            title=_require(doc, 'title', str),
            description=_require(doc, 'description', str, default=""),
            subsection=_require(doc, 'subsection', str),
            timeframe=timeframe,
            start_date=_timestamp(doc, 'startDate'),
            end_date=_timestamp(doc, 'endDate'),
            action_steps=[step_to_entity(s) for s in _require(doc, 'actionSteps', list, default=[])],
            progress=int(progress),
            status=status,
            user_id=user_id,
            parent_goal_id=_require(doc, 'parentGoalId', str, nullable=True),
            created_at=_timestamp(doc, 'createdAt'),
            updated_at=_timestamp(doc, 'updatedAt'),
        )

    def to_document(self, goal: GoalEntity) -> dict:
        return {
            doc_name: _encode(field, getattr(goal, field))
            for field, doc_name in FIELD_NAMES.items()
        }

    def get_by_id(self, user_id: str, goal_id: str) -> Optional[GoalEntity]:
        doc = self.gateway.get(COLLECTION, make_key(user_id, goal_id))
        if doc is None:
            return None
        return self.to_entity(doc, user_id)

    def save(self, goal: GoalEntity) -> GoalEntity:
        if not goal.id:
            raise ValueError("goal.id is required to save a goal")
        self.gateway.put(COLLECTION, make_key(goal.user_id, goal.id), self.to_document(goal))
        return goal

    def update_fields(self, user_id: str, goal_id: str, **fields) -> None:
        unknown = set(fields) - set(FIELD_NAMES)
        if unknown:
            raise ValueError(f"Unknown goal fields: {sorted(unknown)}")
        data = {FIELD_NAMES[f]: _encode(f, v) for f, v in fields.items()}
        self.gateway.put(COLLECTION, make_key(user_id, goal_id), data, merge=True)

    def delete(self, user_id: str, goal_id: str) -> None:
        self.gateway.delete(COLLECTION, make_key(user_id, goal_id))

    def list_for_user(self, user_id: str, filters: Optional[dict] = None) -> List[GoalEntity]:
        predicates = [('userId', '==', user_id)]
        for field, value in (filters or {}).items():
            predicates.append((FIELD_NAMES[field], '==', _encode(field, value)))

        docs = self.gateway.query(COLLECTION, predicates, order_by='-createdAt')
        return [self.to_entity(d, user_id) for d in docs]
