# apps/journal/domain/entities.py
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional


@dataclass
class JournalEntry:
    id: Optional[str]
    title: str
    content: str = ""  # rich text (HTML) produced by the editor
    tags: List[str] = field(default_factory=list)
    linked_goals: List[str] = field(default_factory=list)  # goal ids, may outlive the goals

    date: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
