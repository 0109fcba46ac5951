"""Launch phases and the status to phase mapping"""

from enum import Enum


class Phase(str, Enum):
    """Coarse client-side state of a launch"""
    IDLE = "idle"
    INITIALIZING = "initializing"
    FUNDING = "funding"
    PROCESSING = "processing"
    COMPLETED = "completed"
    ERROR = "error"


SUCCESS_STATUSES = frozenset({"success", "completed"})
FAILURE_STATUSES = frozenset({"failed", "funding_timeout", "cancelled"})
PROCESSING_STATUSES = frozenset({
    "funded",
    "configuring_issuer",
    "registering_token",
    "creating_trustline",
    "sending_tokens",
    "creating_checks",
    "creating_amm",
    "scheduling_blackhole",
})
TERMINAL_PHASES = frozenset({Phase.COMPLETED, Phase.ERROR})


def phase_for_status(status: str | None) -> Phase:
    """
    Map a service status to a phase.

    Unknown statuses map to FUNDING, so an unrecognised value never moves the
    user past the funding step.
    """
    normalized = (status or "").strip().lower()
    if normalized in SUCCESS_STATUSES:
        return Phase.COMPLETED
    if normalized in FAILURE_STATUSES:
        return Phase.ERROR
    if normalized in PROCESSING_STATUSES:
        return Phase.PROCESSING
    return Phase.FUNDING


def is_terminal(phase: Phase) -> bool:
    return phase in TERMINAL_PHASES
