# apps/todos/services.py
import logging
import uuid
from dataclasses import replace
from datetime import datetime
from typing import Callable, List

from django.utils import timezone

from apps.core.domain.keys import make_key, split_key
from apps.core.domain.query import KEY_FIELD
from apps.core.domain.timestamps import coerce_datetime
from apps.core.exceptions import NotFoundError, ValidationError
from apps.core.ports.gateway import IDocumentGateway
from apps.todos.domain.entities import Todo, TodoType

logger = logging.getLogger(__name__)

COLLECTION = 'todos'


def _todo_type(value) -> TodoType:
    try:
        return TodoType(value)
    except ValueError:
        raise ValidationError(f"Unknown todo list: {value!r}")


class TodoService:
    """Dashboard todo lists ('today' and 'weekly'), one document per todo."""

    def __init__(self, gateway: IDocumentGateway, clock: Callable[[], datetime] = timezone.now):
        self.gateway = gateway
        self.clock = clock

    def to_entity(self, user_id: str, doc: dict) -> Todo:
        return Todo(
            id=split_key(user_id, doc[KEY_FIELD]),
            text=doc.get('text', ""),
            type=_todo_type(doc.get('type', TodoType.TODAY.value)),
            completed=bool(doc.get('completed', False)),
            created_at=coerce_datetime(doc.get('createdAt')),
        )

    def list_todos(self, user_id: str, todo_type) -> List[Todo]:
        """Todos of one list, newest first."""
        docs = self.gateway.query(COLLECTION, [
            ('userId', '==', user_id),
            ('type', '==', _todo_type(todo_type).value),
        ], order_by='-createdAt')
        return [self.to_entity(user_id, d) for d in docs]

    def get_todo(self, user_id: str, todo_id: str) -> Todo:
        doc = self.gateway.get(COLLECTION, make_key(user_id, todo_id))
        if doc is None:
            raise NotFoundError(COLLECTION, todo_id)
        return self.to_entity(user_id, doc)

    def add_todo(self, user_id: str, text: str, todo_type=TodoType.TODAY) -> Todo:
        text = (text or "").strip()
        if not text:
            raise ValidationError("Todo text cannot be empty")

        todo = Todo(
            id=f"todo_{uuid.uuid4().hex}",
            text=text,
            type=_todo_type(todo_type),
            created_at=self.clock(),
        )
        self.gateway.put(COLLECTION, make_key(user_id, todo.id), {
            'text': todo.text,
            'type': todo.type.value,
            'completed': False,
            'userId': user_id,
            'createdAt': todo.created_at,
        })
        return todo

    def toggle_todo(self, user_id: str, todo_id: str) -> Todo:
        todo = self.get_todo(user_id, todo_id)
        completed = not todo.completed
        self.gateway.put(COLLECTION, make_key(user_id, todo_id), {'completed': completed}, merge=True)
        return replace(todo, completed=completed)

    def delete_todo(self, user_id: str, todo_id: str) -> None:
        self.gateway.delete(COLLECTION, make_key(user_id, todo_id))

    def clear_todos(self, user_id: str, todo_type, completed_only: bool = False) -> int:
        """Deletes a whole list (or only its done items), returns how many were removed."""
        todos = self.list_todos(user_id, todo_type)
        if completed_only:
            todos = [t for t in todos if t.completed]
        for todo in todos:
            self.gateway.delete(COLLECTION, make_key(user_id, todo.id))
        logger.info("Cleared %d %s todos for user %s", len(todos), _todo_type(todo_type).value, user_id)
        return len(todos)
