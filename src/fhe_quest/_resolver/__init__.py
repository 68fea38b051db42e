# Area: Resolver
"""
Search attempt lifecycle: state machine, fallback timer, resolver and
the creator flow.
"""

from .enums import AttemptStatus, AttemptEvent, CreatorState
from .state_machine import AttemptStateMachine, TRANSITIONS
from .fallback_timer import FallbackTimer, DEFAULT_FALLBACK_SECONDS
from .resolver import SearchAttempt, SearchAttemptResolver
from .creator_flow import CreatorFlow

__all__ = [
    "AttemptStatus",
    "AttemptEvent",
    "CreatorState",
    "AttemptStateMachine",
    "TRANSITIONS",
    "FallbackTimer",
    "DEFAULT_FALLBACK_SECONDS",
    "SearchAttempt",
    "SearchAttemptResolver",
    "CreatorFlow",
]
