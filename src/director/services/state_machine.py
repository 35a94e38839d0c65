"""Automation status state machine.

    idle | scheduled | error --run requested--> running
    running --run completed--> scheduled
    running --run failed-----> error

There is no terminal state. ``running`` is only ever entered by the run
engine; the lifecycle API may override the status to any other state, but
never while a run is in flight.
"""

from src.director.core.exceptions import (
    AutomationValidationError,
    ConflictError,
    InvalidTransitionError,
)
from src.director.models.enums import AutomationStatus

TRANSITIONS: dict[AutomationStatus, frozenset[AutomationStatus]] = {
    AutomationStatus.IDLE: frozenset({AutomationStatus.RUNNING}),
    AutomationStatus.SCHEDULED: frozenset({AutomationStatus.RUNNING}),
    AutomationStatus.ERROR: frozenset({AutomationStatus.RUNNING}),
    AutomationStatus.RUNNING: frozenset({AutomationStatus.SCHEDULED, AutomationStatus.ERROR}),
}

OVERRIDABLE_STATUSES = frozenset(
    {AutomationStatus.IDLE, AutomationStatus.SCHEDULED, AutomationStatus.ERROR}
)


def can_transition(current: AutomationStatus, target: AutomationStatus) -> bool:
    return target in TRANSITIONS[current]


def ensure_transition(current: AutomationStatus, target: AutomationStatus) -> AutomationStatus:
    """Return ``target`` if the run engine may move ``current`` to it.

    Raises:
        ConflictError: If a run is requested while one is already in flight.
        InvalidTransitionError: For any other illegal transition.
    """
    if current == AutomationStatus.RUNNING and target == AutomationStatus.RUNNING:
        raise ConflictError("Automation is already running")
    if not can_transition(current, target):
        raise InvalidTransitionError(current.value, target.value)
    return target


def ensure_override_allowed(
    current: AutomationStatus, target: AutomationStatus
) -> AutomationStatus:
    """Validate an explicit status change requested through the lifecycle API.

    Raises:
        AutomationValidationError: If ``target`` is ``running``.
        ConflictError: If the automation is currently running.
    """
    if target not in OVERRIDABLE_STATUSES:
        raise AutomationValidationError(
            f"Status '{target.value}' can only be set by the run engine"
        )
    if current == AutomationStatus.RUNNING:
        raise ConflictError("Cannot override status while a run is in progress")
    return target
