# Area: Ledger
"""
fhe_quest._ledger.event_dispatcher — Typed event dispatch table
===============================================================

Routes decoded contract events to the handlers registered for their
class. Several handlers may listen to one event class; they run in
registration order.
"""

import logging
from typing import Callable, Dict, List, Type

from .events import LedgerEvent

logger = logging.getLogger("fhe_quest.ledger.dispatcher")

EventHandler = Callable[[LedgerEvent], object]


class EventDispatcher:
    """
    Dispatches ledger events to handlers keyed by event class.

    Usage:
        dispatcher = EventDispatcher()
        dispatcher.register(WrongAttemptRecorded, resolver.on_wrong_attempt)
        dispatcher.dispatch(event)
    """

    def __init__(self):
        """Initialize dispatcher with an empty handler table."""
        self._handlers: Dict[Type, List[EventHandler]] = {}

    def register(self, event_type: Type, handler: EventHandler) -> None:
        """
        Register a handler for an event class.

        Args:
            event_type: One of the LedgerEvent dataclasses
            handler: Callable receiving the decoded event
        """
        self._handlers.setdefault(event_type, []).append(handler)
        logger.debug(f"Registered handler for {event_type.__name__}")

    def handlers_for(self, event_type: Type) -> List[EventHandler]:
        """Return the handlers registered for an event class."""
        return list(self._handlers.get(event_type, []))

    def dispatch(self, event: LedgerEvent) -> int:
        """
        Deliver an event to every handler registered for its class.

        Returns:
            Number of handlers invoked
        """
        handlers = self._handlers.get(type(event), [])
        if not handlers:
            logger.debug(f"No handler for event: {type(event).__name__}")
            return 0

        for handler in handlers:
            handler(event)
        return len(handlers)
