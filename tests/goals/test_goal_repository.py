# tests/goals/test_goal_repository.py
from datetime import datetime

import pytest
import pytz

from apps.core.exceptions import ValidationError
from apps.goals.adapters.gateway_repository import COLLECTION, GatewayGoalRepository
from apps.goals.domain.entities import ActionStep, GoalEntity, GoalStatus, Timeframe

CREATED = datetime(2024, 3, 1, 9, 0, tzinfo=pytz.UTC)


def stored_goal(**overrides):
    doc = {
        'title': "Run 100 km",
        'subsection': 'fitness',
        'timeframe': 'monthly',
        'startDate': CREATED,
        'endDate': CREATED,
        'actionSteps': [{'id': '1', 'description': "Run", 'completed': False,
                         'targetValue': 100, 'currentValue': 40}],
        'progress': 40,
        'status': 'active',
        'userId': 'user1',
        'createdAt': CREATED,
        'updatedAt': CREATED,
    }
    doc.update(overrides)
    return doc


@pytest.fixture
def repository(gateway):
    return GatewayGoalRepository(gateway)


class TestToEntity:
    def test_reads_stored_document(self, repository, gateway):
        gateway.put(COLLECTION, 'user1_goal_a', stored_goal())
        goal = repository.get_by_id('user1', 'goal_a')

        assert goal.id == 'goal_a'
        assert goal.timeframe == Timeframe.MONTHLY
        assert goal.status == GoalStatus.ACTIVE
        assert goal.action_steps == [ActionStep(id='1', description="Run", target_value=100, current_value=40)]
        assert goal.parent_goal_id is None

    def test_accepts_iso_timestamps(self, repository, gateway):
        gateway.put(COLLECTION, 'user1_goal_a', stored_goal(createdAt='2024-03-01T09:00:00+00:00'))
        assert repository.get_by_id('user1', 'goal_a').created_at == CREATED

    def test_missing_optional_fields_get_defaults(self, repository, gateway):
        doc = stored_goal()
        del doc['progress'], doc['status']
        doc['actionSteps'] = [{'id': 7, 'description': "Stretch"}]
        gateway.put(COLLECTION, 'user1_goal_a', doc)

        goal = repository.get_by_id('user1', 'goal_a')
        assert goal.progress == 0
        assert goal.status == GoalStatus.ACTIVE
        assert goal.action_steps[0].id == '7'
        assert goal.action_steps[0].completed is False

    @pytest.mark.parametrize('overrides', [
        {'title': None},
        {'timeframe': 'daily'},
        {'status': 'archived'},
        {'progress': 'fifty'},
        {'progress': True},
        {'createdAt': 12},
        {'actionSteps': 'run'},
        {'actionSteps': [{'description': "no id"}]},
        {'actionSteps': [{'id': '1', 'description': "x", 'targetValue': -5}]},
        {'actionSteps': [{'id': '1', 'description': "x", 'completed': 'yes'}]},
    ])
    def test_rejects_malformed_documents(self, repository, gateway, overrides):
        gateway.put(COLLECTION, 'user1_goal_a', stored_goal(**overrides))
        with pytest.raises(ValidationError):
            repository.get_by_id('user1', 'goal_a')

    def test_unknown_goal_is_none(self, repository):
        assert repository.get_by_id('user1', 'goal_missing') is None


class TestWrites:
    def test_save_writes_camel_case_document(self, repository, gateway):
        goal = GoalEntity(id='goal_a', title="Read", user_id='user1', subsection='reading',
                          action_steps=[ActionStep(id='1', description="Chapter 1")],
                          created_at=CREATED, updated_at=CREATED)
        repository.save(goal)

        doc = gateway.get(COLLECTION, 'user1_goal_a')
        assert doc['timeframe'] == 'monthly'
        assert doc['status'] == 'active'
        assert doc['parentGoalId'] is None
        assert doc['actionSteps'][0]['targetValue'] is None

    def test_save_requires_id(self, repository):
        with pytest.raises(ValueError):
            repository.save(GoalEntity(id=None, title="Read", user_id='user1', subsection='reading'))

    def test_update_fields_merges(self, repository, gateway):
        gateway.put(COLLECTION, 'user1_goal_a', stored_goal())
        repository.update_fields('user1', 'goal_a', status=GoalStatus.PAUSED)

        doc = gateway.get(COLLECTION, 'user1_goal_a')
        assert doc['status'] == 'paused'
        assert doc['title'] == "Run 100 km"

    def test_update_fields_rejects_unknown_fields(self, repository):
        with pytest.raises(ValueError):
            repository.update_fields('user1', 'goal_a', colour='red')

    def test_list_for_user_is_scoped(self, repository, gateway):
        gateway.put(COLLECTION, 'user1_goal_a', stored_goal())
        gateway.put(COLLECTION, 'user2_goal_b', stored_goal(userId='user2'))

        assert [g.id for g in repository.list_for_user('user1')] == ['goal_a']
