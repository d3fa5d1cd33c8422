# tests/goals/test_goal_service.py
from datetime import date, datetime, timedelta

import pytest
import pytz

from apps.core.adapters.memory_gateway import InMemoryDocumentGateway
from apps.core.exceptions import InvalidTransition, NotFoundError, PersistenceFailure, ValidationError
from apps.goals.application.use_cases import CreateGoalInput, GoalService, StepInput
from apps.goals.domain.entities import ActionStep, GoalStatus, Timeframe

from conftest import NOW, FailingGateway, RecordingGateway


@pytest.fixture
def service(gateway, clock):
    return GoalService(gateway, clock=clock)


def goal_input(user_id='user1', **overrides):
    data = dict(
        title="Attend 20 Jiu Jitsu classes",
        user_id=user_id,
        subsection='jiu-jitsu',
        timeframe=Timeframe.MONTHLY,
        action_steps=[StepInput("Buy a gi", id='1'), StepInput("Go to class", id='2')],
    )
    data.update(overrides)
    return CreateGoalInput(**data)


class TestCreateGoal:
    def test_creates_active_goal_with_month_window(self, service, user_id):
        goal = service.create_goal(goal_input())

        assert goal.id.startswith('goal_')
        assert goal.progress == 0
        assert goal.status == GoalStatus.ACTIVE
        assert goal.start_date == datetime(2024, 3, 1, tzinfo=pytz.UTC)
        assert goal.end_date.date() == date(2024, 3, 31)
        assert goal.created_at == NOW

        stored = service.get_goal(user_id, goal.id)
        assert stored == goal

    def test_stored_under_user_prefixed_key(self, service, gateway, user_id):
        goal = service.create_goal(goal_input())
        doc = gateway.get('goals', f"{user_id}_{goal.id}")
        assert doc['userId'] == user_id
        assert doc['actionSteps'][0] == {
            'id': '1', 'description': "Buy a gi", 'completed': False, 'targetValue': None, 'currentValue': 0,
        }

    def test_blank_title_is_rejected_before_writing(self, service, gateway, user_id):
        with pytest.raises(ValidationError):
            service.create_goal(goal_input(title="   "))
        assert gateway.query('goals') == []

    def test_all_blank_steps_are_rejected(self, service):
        with pytest.raises(ValidationError):
            service.create_goal(goal_input(action_steps=[StepInput(""), StepInput("  ")]))

    def test_blank_steps_are_dropped(self, service):
        goal = service.create_goal(goal_input(action_steps=[StepInput("Run"), StepInput(" ")]))
        assert [s.description for s in goal.action_steps] == ["Run"]

    def test_duplicate_step_ids_are_rejected(self, service):
        with pytest.raises(ValidationError):
            service.create_goal(goal_input(action_steps=[StepInput("a", id='1'), StepInput("b", id='1')]))

    def test_custom_window_defaults(self, service):
        goal = service.create_goal(goal_input(timeframe='custom'))
        assert goal.start_date == NOW
        assert goal.end_date == NOW + timedelta(days=30)

    def test_custom_window_ending_before_start_is_rejected(self, service):
        with pytest.raises(ValidationError):
            service.create_goal(goal_input(timeframe='custom', custom_start=date(2024, 5, 1),
                                           custom_end=date(2024, 4, 1)))

    def test_sub_goal_needs_existing_parent(self, service):
        with pytest.raises(NotFoundError):
            service.create_goal(goal_input(parent_goal_id='goal_missing'))

    def test_sub_goals(self, service, user_id):
        parent = service.create_goal(goal_input())
        child = service.create_goal(goal_input(title="Learn guard passes", parent_goal_id=parent.id))
        assert [g.id for g in service.list_sub_goals(user_id, parent.id)] == [child.id]


class TestStepUpdates:
    def test_toggling_two_binary_steps(self, service, user_id):
        goal = service.create_goal(goal_input())

        goal = service.toggle_step(user_id, goal.id, '1')
        assert goal.progress == 50
        assert goal.status == GoalStatus.ACTIVE

        goal = service.toggle_step(user_id, goal.id, '2')
        assert goal.progress == 100
        assert goal.status == GoalStatus.COMPLETED

        stored = service.get_goal(user_id, goal.id)
        assert (stored.progress, stored.status) == (100, GoalStatus.COMPLETED)
        assert stored.updated_at == NOW

    def test_update_steps_replaces_steps(self, service, user_id):
        goal = service.create_goal(goal_input())
        steps = [ActionStep(id='x', description="Classes", target_value=20, current_value=5)]

        updated = service.update_steps(user_id, goal.id, steps)
        assert updated.progress == 25
        assert service.get_goal(user_id, goal.id).action_steps == steps

    def test_step_edit_unpauses_goal(self, service, user_id):
        goal = service.create_goal(goal_input())
        service.change_status(user_id, goal.id, GoalStatus.PAUSED)

        goal = service.toggle_step(user_id, goal.id, '1')
        assert goal.status == GoalStatus.ACTIVE

    def test_set_step_value(self, service, user_id):
        goal = service.create_goal(goal_input(action_steps=[StepInput("Classes", target_value=20, id='c')]))
        goal = service.set_step_value(user_id, goal.id, 'c', 15)
        assert goal.progress == 75

    def test_unknown_goal(self, service, user_id):
        with pytest.raises(NotFoundError):
            service.toggle_step(user_id, 'goal_missing', '1')

    def test_goals_of_other_users_are_invisible(self, service):
        goal = service.create_goal(goal_input())
        with pytest.raises(NotFoundError):
            service.get_goal('someone_else', goal.id)

    def test_failed_write_propagates_and_keeps_stored_state(self, gateway, clock, user_id):
        goal = GoalService(gateway, clock=clock).create_goal(goal_input())

        broken = FailingGateway()
        broken._collections = gateway._collections
        with pytest.raises(PersistenceFailure):
            GoalService(broken, clock=clock).toggle_step(user_id, goal.id, '1')

        stored = GoalService(gateway, clock=clock).get_goal(user_id, goal.id)
        assert stored.progress == 0
        assert stored.action_steps[0].completed is False

    @pytest.mark.parametrize('steps', [
        [],
        [ActionStep(id='x', description="", target_value=5)],
        [ActionStep(id='x', description="  ")],
        [ActionStep(id='x', description="Run", target_value=-5)],
        [ActionStep(id='x', description="Run", target_value="ten")],
        [ActionStep(id='x', description="Run", current_value=None)],
        [ActionStep(id='', description="Run")],
        [ActionStep(id='x', description="Run"), ActionStep(id='x', description="Swim")],
    ])
    def test_invalid_step_edits_are_rejected_before_writing(self, service, gateway, user_id, steps):
        goal = service.create_goal(goal_input())
        before = gateway.get('goals', f"{user_id}_{goal.id}")

        with pytest.raises(ValidationError):
            service.update_steps(user_id, goal.id, steps)

        assert gateway.get('goals', f"{user_id}_{goal.id}") == before
        assert [g.id for g in service.list_goals(user_id)] == [goal.id]

    def test_zero_target_step_is_completed_by_toggling(self, service, user_id):
        goal = service.create_goal(goal_input(action_steps=[StepInput("Show up", target_value=0, id='1')]))
        goal = service.toggle_step(user_id, goal.id, '1')
        assert (goal.progress, goal.status) == (100, GoalStatus.COMPLETED)


class TestSingleWritePerMutation:
    @pytest.fixture
    def recording(self):
        return RecordingGateway()

    def test_each_mutation_writes_only_the_goal(self, recording, clock, user_id):
        service = GoalService(recording, clock=clock)
        goal = service.create_goal(goal_input())
        key = f"{user_id}_{goal.id}"

        service.toggle_step(user_id, goal.id, '1')
        service.toggle_step(user_id, goal.id, '2')
        service.update_steps(user_id, goal.id, [ActionStep(id='1', description="Buy a gi")])
        service.change_status(user_id, goal.id, GoalStatus.PAUSED)
        service.delete_goal(user_id, goal.id)

        assert recording.writes == [('put', 'goals', key)] * 5 + [('delete', 'goals', key)]

    def test_completing_a_goal_does_not_depend_on_other_collections(self, clock, user_id):
        class GoalsOnlyGateway(InMemoryDocumentGateway):
            def put(self, collection, key, document, merge=False):
                if collection != 'goals':
                    raise PersistenceFailure(f"{collection} is read-only")
                super().put(collection, key, document, merge=merge)

        service = GoalService(GoalsOnlyGateway(), clock=clock)
        goal = service.create_goal(goal_input(action_steps=[StepInput("Sign up", id='1')]))

        done = service.toggle_step(user_id, goal.id, '1')

        assert done.status == GoalStatus.COMPLETED
        assert service.get_goal(user_id, goal.id).status == GoalStatus.COMPLETED


class TestStatusAndDeletion:
    def test_pause_and_resume(self, service, user_id):
        goal = service.create_goal(goal_input())
        assert service.change_status(user_id, goal.id, 'paused').status == GoalStatus.PAUSED
        assert service.get_goal(user_id, goal.id).status == GoalStatus.PAUSED
        assert service.change_status(user_id, goal.id, 'active').status == GoalStatus.ACTIVE

    def test_manual_completion_is_refused(self, service, user_id):
        goal = service.create_goal(goal_input())
        with pytest.raises(InvalidTransition):
            service.change_status(user_id, goal.id, GoalStatus.COMPLETED)

    def test_delete(self, service, user_id):
        goal = service.create_goal(goal_input())
        service.delete_goal(user_id, goal.id)
        with pytest.raises(NotFoundError):
            service.get_goal(user_id, goal.id)

    def test_delete_leaves_journal_links(self, service, gateway, user_id):
        goal = service.create_goal(goal_input())
        gateway.put('journalEntries', f"{user_id}_entry_1", {
            'userId': user_id, 'title': "Day 1", 'linkedGoals': [goal.id],
        })
        assert service.referenced_by(user_id, goal.id) == ['entry_1']

        service.delete_goal(user_id, goal.id)
        assert gateway.get('journalEntries', f"{user_id}_entry_1")['linkedGoals'] == [goal.id]


class TestListGoals:
    def test_filters_and_order(self, gateway, user_id):
        current = {'now': NOW}
        service = GoalService(gateway, clock=lambda: current['now'])

        first = service.create_goal(goal_input())
        current['now'] = NOW + timedelta(minutes=1)
        second = service.create_goal(goal_input(subsection='fitness', timeframe='weekly'))
        service.toggle_step(user_id, second.id, '1')

        assert [g.id for g in service.list_goals(user_id)] == [second.id, first.id]
        assert [g.id for g in service.list_goals(user_id, subsection='fitness')] == [second.id]
        assert [g.id for g in service.list_goals(user_id, timeframe='monthly')] == [first.id]
        assert [g.id for g in service.list_goals(user_id, status='completed')] == []
