"""Invocation lifecycle state."""

from dataclasses import dataclass, field
from enum import StrEnum


class InvocationState(StrEnum):
    """States an invocation moves through."""

    IDLE = "idle"
    PAYLOAD_DECODING = "payload_decoding"
    INVOKING = "invoking"
    COMPLETED = "completed"
    PANICKED = "panicked"
    REPORTING = "reporting"


_ALLOWED_TRANSITIONS: dict[InvocationState, frozenset[InvocationState]] = {
    InvocationState.IDLE: frozenset({InvocationState.PAYLOAD_DECODING}),
    InvocationState.PAYLOAD_DECODING: frozenset(
        {InvocationState.INVOKING, InvocationState.REPORTING},
    ),
    InvocationState.INVOKING: frozenset(
        {InvocationState.COMPLETED, InvocationState.PANICKED},
    ),
    InvocationState.COMPLETED: frozenset({InvocationState.REPORTING}),
    InvocationState.PANICKED: frozenset({InvocationState.REPORTING}),
    InvocationState.REPORTING: frozenset({InvocationState.IDLE}),
}


@dataclass
class InvocationRecord:
    """Bookkeeping for a single invocation.

    Attributes:
        started_at: ``time.perf_counter`` reading when decoding began.
        state: Current lifecycle state.
        history: Every state entered, in order.
        failed: Whether the error counter was already incremented.
        duration_millis: Set when reporting starts.
    """

    started_at: float
    state: InvocationState = InvocationState.IDLE
    history: list[InvocationState] = field(default_factory=lambda: [InvocationState.IDLE])
    failed: bool = False
    duration_millis: float = 0.0

    def transition(self, state: InvocationState) -> None:
        """Move to the next state.

        Raises:
            ValueError: If the transition is not part of the lifecycle.
        """
        if state not in _ALLOWED_TRANSITIONS[self.state]:
            error_message = f"Invalid invocation transition {self.state} -> {state}"
            raise ValueError(error_message)
        self.state = state
        self.history.append(state)
