# apps/core/domain/keys.py
from apps.core.exceptions import ValidationError


def make_key(user_id: str, entity_id: str) -> str:
    """Composite document key partitioning every collection per user."""
    if not user_id:
        raise ValidationError("user_id is required")
    if not entity_id:
        raise ValidationError("entity_id is required")
    return f"{user_id}_{entity_id}"


def split_key(user_id: str, key: str) -> str:
    prefix = f"{user_id}_"
    if key.startswith(prefix):
        return key[len(prefix):]
    return key
