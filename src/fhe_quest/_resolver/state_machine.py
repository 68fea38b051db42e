# Area: Resolver
"""
fhe_quest._resolver.state_machine — Search attempt state machine
================================================================

Forward-only transition table for one search attempt. There is no
reset: a new attempt gets a new state machine.
"""

from .enums import AttemptStatus, AttemptEvent


# Valid state transitions: {current_status: {event: next_status}}
TRANSITIONS = {
    AttemptStatus.SELECTED: {
        AttemptEvent.START: AttemptStatus.ENCRYPTING,
        AttemptEvent.FAIL: AttemptStatus.FAILED,
    },
    AttemptStatus.ENCRYPTING: {
        AttemptEvent.ENCRYPTED: AttemptStatus.SUBMITTING,
        AttemptEvent.FAIL: AttemptStatus.FAILED,
    },
    AttemptStatus.SUBMITTING: {
        AttemptEvent.BROADCAST: AttemptStatus.AWAITING_CONFIRMATION,
        AttemptEvent.FAIL: AttemptStatus.FAILED,
    },
    AttemptStatus.AWAITING_CONFIRMATION: {
        AttemptEvent.CONFIRMED: AttemptStatus.AWAITING_ORACLE,
        AttemptEvent.FAIL: AttemptStatus.FAILED,
    },
    AttemptStatus.AWAITING_ORACLE: {
        AttemptEvent.ORACLE_RESULT: AttemptStatus.RESOLVED,
        AttemptEvent.TIMER_FIRED: AttemptStatus.TIMED_OUT,
        AttemptEvent.FAIL: AttemptStatus.FAILED,
    },
    AttemptStatus.RESOLVED: {},
    AttemptStatus.TIMED_OUT: {},
    AttemptStatus.FAILED: {},
}


class AttemptStateMachine:
    """
    Tracks and validates the status of one search attempt.

    Attributes:
        current_status: The attempt's current status
    """

    def __init__(self):
        """Initialize in SELECTED."""
        self.current_status = AttemptStatus.SELECTED

    @property
    def is_terminal(self) -> bool:
        return self.current_status.is_terminal

    def can_transition(self, event: AttemptEvent) -> bool:
        """Check if the event is valid from the current status."""
        return event in TRANSITIONS.get(self.current_status, {})

    def transition(self, event: AttemptEvent) -> AttemptStatus:
        """
        Execute a transition.

        Returns:
            The new status

        Raises:
            ValueError: If the transition is not valid from the current status
        """
        if not self.can_transition(event):
            raise ValueError(
                f"Invalid transition: {event.value} from {self.current_status.value}"
            )
        self.current_status = TRANSITIONS[self.current_status][event]
        return self.current_status
