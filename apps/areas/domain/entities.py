# apps/areas/domain/entities.py
from dataclasses import dataclass, field
from typing import List, Union

Number = Union[int, float]


@dataclass
class Metric:
    name: str
    unit: str = ""
    target_value: Number = 0
    current_value: Number = 0


@dataclass
class WinState:
    """What 'winning' looks like in one life area."""
    description: str = ""
    metrics: List[Metric] = field(default_factory=list)
