# apps/schedule/services.py
import logging
from typing import Dict

from django.utils import timezone

from apps.core.exceptions import ValidationError
from apps.core.ports.gateway import IDocumentGateway

logger = logging.getLogger(__name__)

COLLECTION = 'weeklySchedule'

DAYS = ('Monday', 'Tuesday', 'Wednesday', 'Thursday', 'Friday', 'Saturday', 'Sunday')

TIME_SLOTS = {
    'Early Morning': '5:30-7:00',
    'Morning': '7:00-10:00',
    'Late Morning': '10:00-12:00',
    'Afternoon': '12:00-3:30',
    'Late Afternoon': '3:30-6:00',
    'Evening': '6:00-8:30',
    'Night': '8:30-10:00',
}

Schedule = Dict[str, Dict[str, str]]


def empty_schedule() -> Schedule:
    return {day: {slot: "" for slot in TIME_SLOTS} for day in DAYS}


def update_slot(schedule: Schedule, day: str, slot: str, text: str) -> Schedule:
    """Returns a copy of the schedule with one cell changed."""
    if day not in DAYS or slot not in TIME_SLOTS:
        raise ValidationError(f"Unknown schedule cell: {day} / {slot}")
    updated = {d: dict(slots) for d, slots in schedule.items()}
    updated.setdefault(day, {})[slot] = text
    return updated


class ScheduleService:
    """Weekly template: one document per user, keyed by the bare user id."""

    def __init__(self, gateway: IDocumentGateway):
        self.gateway = gateway

    def get_schedule(self, user_id: str) -> Schedule:
        doc = self.gateway.get(COLLECTION, user_id)
        stored = (doc or {}).get('schedule') or {}

        schedule = empty_schedule()
        for day, slots in stored.items():
            if day in schedule:
                schedule[day].update({s: t for s, t in slots.items() if s in TIME_SLOTS})
        return schedule

    def save_schedule(self, user_id: str, schedule: Schedule) -> Schedule:
        if not user_id:
            raise ValidationError("user_id is required")
        for day, slots in schedule.items():
            if day not in DAYS:
                raise ValidationError(f"Unknown day: {day}")
            unknown = set(slots) - set(TIME_SLOTS)
            if unknown:
                raise ValidationError(f"Unknown time slots: {sorted(unknown)}")

        self.gateway.put(COLLECTION, user_id, {
            'schedule': schedule,
            'userId': user_id,
            'updatedAt': timezone.now(),
        })
        logger.info("Weekly schedule saved for user %s", user_id)
        return schedule
