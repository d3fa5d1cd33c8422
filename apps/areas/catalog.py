# apps/areas/catalog.py
from dataclasses import dataclass, field
from typing import List, Tuple

from apps.areas.domain.entities import Metric

DEFAULT_AREA = 'fitness'


@dataclass(frozen=True)
class LifeArea:
    key: str
    name: str
    icon: str
    color: str
    # (name, unit) pairs; targets start at 0 until the user sets them
    default_metrics: Tuple[Tuple[str, str], ...] = field(default_factory=tuple)

    def build_default_metrics(self) -> List[Metric]:
        return [Metric(name=name, unit=unit) for name, unit in self.default_metrics]


LIFE_AREAS = {
    area.key: area for area in [
        LifeArea('finances', 'Finances', '💰', '#22c55e', (
            ('Net Worth', '$'), ('Passive Income', '$/month'))),
        LifeArea('fitness', 'Fitness', '💪', '#3b82f6', (
            ('Body Weight', 'lbs'), ('Body Fat %', '%'), ('Bench Press', 'lbs'))),
        LifeArea('jiu-jitsu', 'Jiu Jitsu', '🥋', '#a855f7', (
            ('Belt Level', ''), ('Classes Attended', 'classes'), ('Competitions Won', 'wins'))),
        LifeArea('women', 'Women', '💑', '#ec4899', (
            ('Relationship Quality', '/10'), ('Social Confidence', '/10'))),
        LifeArea('attractiveness', 'Attractive', '✨', '#eab308', (
            ('Physical Fitness', '/10'), ('Style & Grooming', '/10'), ('Charisma', '/10'))),
        LifeArea('nutrition', 'Nutrition', '🥗', '#4ade80', (
            ('Daily Calories', 'kcal'), ('Protein Intake', 'g/day'), ('Healthy Meals', '/week'))),
        LifeArea('philosophy', 'Philosophy', '🧠', '#6366f1', (
            ('Books Read', 'books'), ('Meditation Practice', 'days/year'), ('Life Satisfaction', '/10'))),
        LifeArea('languages', 'Languages', '🌍', '#14b8a6', (
            ('Languages Fluent', 'languages'), ('Vocabulary Size', 'words'), ('Practice Hours', 'hrs/week'))),
    ]
}


def get_area(key: str) -> LifeArea:
    """Unknown keys fall back to the fitness area."""
    return LIFE_AREAS.get(key, LIFE_AREAS[DEFAULT_AREA])
