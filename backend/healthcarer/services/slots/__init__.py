# backend/healthcarer/services/slots/__init__.py
"""
Slots module.

Catalogue generation, the Free/Booked state machine and the
availability query planner, over a pluggable slot store.
"""

from .catalogue import generate, generate_time_slots, initialize_catalogue
from .operations import BookingService
from .query import query
from .redis_store import SlotsRedisStore
from .state_machine import book, cancel
from .store import CasResult, InMemorySlotStore, PutResult, SlotStore

__all__ = [
    "generate",
    "generate_time_slots",
    "initialize_catalogue",
    "BookingService",
    "query",
    "SlotsRedisStore",
    "book",
    "cancel",
    "CasResult",
    "InMemorySlotStore",
    "PutResult",
    "SlotStore",
]
