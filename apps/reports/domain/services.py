# apps/reports/domain/services.py
from datetime import datetime, timedelta

from django.utils import timezone

from apps.core.domain.numbers import round_half_up
from apps.core.exceptions import ValidationError
from apps.core.ports.gateway import IDocumentGateway
from apps.goals.application.use_cases import GoalService
from apps.goals.domain.entities import GoalStatus, Timeframe
from apps.journal.domain.services import journal_streak
from apps.journal.services import JournalService

# Ranges offered on the stats page
DATE_RANGES = (7, 30, 90)


class ReportService:
    def __init__(self, gateway: IDocumentGateway):
        self.gateway = gateway
        self.goals = GoalService(gateway)
        self.journal = JournalService(gateway)

    def journal_entries_since(self, user_id: str, now: datetime, days: int) -> list:
        if days not in DATE_RANGES:
            raise ValidationError(f"Unsupported date range: {days} days")
        since = now - timedelta(days=days)
        return [e for e in self.journal.list_entries(user_id) if e.date is not None and e.date >= since]

    def goal_stats(self, user_id: str, now: datetime, days: int = 30) -> dict:
        """Counters shown above the goal list; journal_entries covers the last `days` days."""
        journal_entries = self.journal_entries_since(user_id, now, days)
        goals = self.goals.list_goals(user_id)
        resolver = self.goals.resolver
        active = [g for g in goals if g.status == GoalStatus.ACTIVE]

        # Average progress of active goals only (paused and completed ones would skew it)
        avg_progress = round_half_up(sum(g.progress for g in active) / len(active)) if active else 0

        return {
            'total': len(goals),
            'active': len(active),
            'completed': len([g for g in goals if g.status == GoalStatus.COMPLETED]),
            'paused': len([g for g in goals if g.status == GoalStatus.PAUSED]),
            'this_week': len([g for g in goals if resolver.is_this_period(Timeframe.WEEKLY, g.start_date, now)]),
            'this_month': len([g for g in goals if resolver.is_this_period(Timeframe.MONTHLY, g.start_date, now)]),
            'this_year': len([g for g in goals if resolver.is_this_period(Timeframe.YEARLY, g.start_date, now)]),
            'avg_progress': avg_progress,
            'journal_entries': len(journal_entries),
        }

    def dashboard(self, user_id: str, now: datetime) -> dict:
        stats = self.goal_stats(user_id, now)
        entries = self.journal.list_entries(user_id)

        return {
            'total_goals': stats['total'],
            'completed_goals': stats['completed'],
            'weekly_progress': stats['avg_progress'],
            'journal_streak': journal_streak(
                (timezone.localtime(e.date) for e in entries if e.date), timezone.localdate(now)
            ),
            'recent_entries': entries[:5],
        }
