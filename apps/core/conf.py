# apps/core/conf.py
from django.conf import settings

DEFAULTS = {
    'GATEWAY': 'apps.core.adapters.orm_gateway.DjangoDocumentGateway',
    # Python weekday numbering: 0 = Monday ... 6 = Sunday
    'WEEK_STARTS_ON': 6,
    'CUSTOM_TIMEFRAME_DAYS': 30,
}


def tracker_setting(name: str):
    """Reads a key from settings.LIFE_TRACKER, falling back to DEFAULTS."""
    overrides = getattr(settings, 'LIFE_TRACKER', {}) or {}
    if name in overrides:
        return overrides[name]
    return DEFAULTS[name]
