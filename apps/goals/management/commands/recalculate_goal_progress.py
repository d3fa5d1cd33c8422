from django.core.management.base import BaseCommand, CommandError

from apps.core.adapters.factory import get_gateway
from apps.goals.application.use_cases import GoalService
from apps.goals.domain.entities import GoalStatus


class Command(BaseCommand):
    help = 'Re-derives progress and status of every goal of a user from its action steps'

    def add_arguments(self, parser):
        parser.add_argument('--user', required=True, help='User id owning the goals')
        parser.add_argument('--dry-run', action='store_true', help='Report differences without writing')

    def handle(self, *args, **options):
        user_id = options['user']
        if not user_id:
            raise CommandError('--user must not be empty')

        service = GoalService(get_gateway())
        changed = 0

        for goal in service.list_goals(user_id):
            # Paused goals are a manual state; leave them alone
            if goal.status == GoalStatus.PAUSED:
                continue

            progress, status = service.lifecycle.apply_step_update(goal, goal.action_steps)
            if progress == goal.progress and status == goal.status:
                continue

            changed += 1
            self.stdout.write(f"- {goal.title}: {goal.progress}% -> {progress}% ({status.value})")
            if not options['dry_run']:
                service.recalculate(user_id, goal.id)

        verb = 'would be updated' if options['dry_run'] else 'updated'
        self.stdout.write(self.style.SUCCESS(f'{changed} goal(s) {verb}.'))
