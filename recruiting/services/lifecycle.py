"""
Status lifecycle policy for applications.

Two policies exist:

- FREE (default): any status may follow any other, including moves out of
  "hired" and "rejected". Recruiters use this to reopen candidates or fix
  mis-clicks.
- LOCK_TERMINAL: "hired" and "rejected" are final; the record can still be
  re-saved with the same status (e.g. to edit notes).

The policy is selected with the LOCK_TERMINAL_STATUSES setting.
"""

import enum
import logging
from typing import Union

from recruiting.models.application import ApplicationStatus

logger = logging.getLogger(__name__)

INITIAL_STATUS = ApplicationStatus.NEW
TERMINAL_STATUSES = frozenset({ApplicationStatus.HIRED, ApplicationStatus.REJECTED})


class TransitionPolicy(str, enum.Enum):
    FREE = "free"
    LOCK_TERMINAL = "lock_terminal"


class StatusTransitionError(Exception):
    """Raised when the active policy forbids a status change."""

    def __init__(self, current: ApplicationStatus, new: ApplicationStatus):
        self.current = current
        self.new = new
        super().__init__(f"Cannot move application from '{current.value}' to '{new.value}'")


def policy_from_settings(lock_terminal_statuses: bool) -> TransitionPolicy:
    return TransitionPolicy.LOCK_TERMINAL if lock_terminal_statuses else TransitionPolicy.FREE


def is_terminal(status: Union[ApplicationStatus, str]) -> bool:
    return ApplicationStatus(status) in TERMINAL_STATUSES


def can_transition(
    current: Union[ApplicationStatus, str],
    new: Union[ApplicationStatus, str],
    policy: TransitionPolicy = TransitionPolicy.FREE,
) -> bool:
    current = ApplicationStatus(current)
    new = ApplicationStatus(new)

    if current == new or policy == TransitionPolicy.FREE:
        return True
    return current not in TERMINAL_STATUSES


def check_transition(
    current: Union[ApplicationStatus, str],
    new: Union[ApplicationStatus, str],
    policy: TransitionPolicy = TransitionPolicy.FREE,
) -> None:
    """
    Raises:
        StatusTransitionError: If policy forbids moving from current to new
        ValueError: If either value is not a known status
    """
    if not can_transition(current, new, policy):
        logger.warning(f"Rejected status change {current} -> {new} under {policy.value} policy")
        raise StatusTransitionError(ApplicationStatus(current), ApplicationStatus(new))
