# apps/todos/domain/entities.py
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class TodoType(str, Enum):
    TODAY = 'today'
    WEEKLY = 'weekly'


@dataclass
class Todo:
    id: Optional[str]
    text: str
    type: TodoType = TodoType.TODAY
    completed: bool = False
    created_at: Optional[datetime] = None
