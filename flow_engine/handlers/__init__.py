"""Node handler implementations, one per node type."""

from .base import BaseHandler
from .trigger import TriggerHandler
from .message import MessageHandler
from .delay import DelayHandler
from .condition import ConditionHandler
from .tag import TagHandler
from .webhook import WebhookHandler
from .end import EndHandler

__all__ = [
    "BaseHandler",
    "TriggerHandler",
    "MessageHandler",
    "DelayHandler",
    "ConditionHandler",
    "TagHandler",
    "WebhookHandler",
    "EndHandler",
]
