"""
NLU glue for WolfyBot.

``client`` talks to Wit.ai, ``selector`` picks the winning entity and
``dispatcher`` maps its label to a reply.
"""

from .client import WitClient, WitHttpError
from .dispatcher import IntentDispatcher
from .models import NluEntity, NluResponse
from .selector import ENTITY_CONFIDENCE_THRESHOLD, select_best_entity

__all__ = [
    "ENTITY_CONFIDENCE_THRESHOLD",
    "IntentDispatcher",
    "NluEntity",
    "NluResponse",
    "WitClient",
    "WitHttpError",
    "select_best_entity",
]
