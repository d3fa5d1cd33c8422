# apps/core/adapters/factory.py
from django.utils.module_loading import import_string

from apps.core.conf import tracker_setting
from apps.core.ports.gateway import IDocumentGateway


def get_gateway() -> IDocumentGateway:
    """Instantiates the gateway class configured in LIFE_TRACKER['GATEWAY']."""
    gateway_class = import_string(tracker_setting('GATEWAY'))
    return gateway_class()
