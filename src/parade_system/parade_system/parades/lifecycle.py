"""Parade status state machine.

    active -> attendance_submitted -> completed

Repositories call `transition()` before they write a new status; services
call the `ensure_*` guards before mutating data that hangs off a parade.
"""

from __future__ import annotations

from ..core.enums import ParadeStatus
from ..core.exceptions import ConflictError, LockedError
from .model import Parade

TRANSITIONS: dict[ParadeStatus, frozenset[ParadeStatus]] = {
    ParadeStatus.ACTIVE: frozenset({ParadeStatus.ATTENDANCE_SUBMITTED}),
    ParadeStatus.ATTENDANCE_SUBMITTED: frozenset({ParadeStatus.COMPLETED}),
    ParadeStatus.COMPLETED: frozenset(),
}


def can_transition(current: ParadeStatus, target: ParadeStatus) -> bool:
    return target in TRANSITIONS[ParadeStatus(current)]


def transition(current: ParadeStatus, target: ParadeStatus) -> ParadeStatus:
    """Return `target` if the move is legal, otherwise raise ConflictError."""

    current = ParadeStatus(current)
    target = ParadeStatus(target)
    if not can_transition(current, target):
        raise ConflictError(f"Illegal parade transition: {current.value} -> {target.value}")
    return target


def status_after_batch(current: ParadeStatus) -> ParadeStatus:
    """Status a parade ends up in after an attendance batch is written.

    The first batch advances `active`; later batches (other divisions, edit
    mode) leave `attendance_submitted` as it is.
    """

    current = ParadeStatus(current)
    if current == ParadeStatus.ACTIVE:
        return transition(current, ParadeStatus.ATTENDANCE_SUBMITTED)
    if current == ParadeStatus.ATTENDANCE_SUBMITTED:
        return current
    raise ConflictError("Parade is completed. Attendance can no longer be submitted.")


def ensure_permissions_editable(parade: Parade) -> None:
    if parade.status != ParadeStatus.ACTIVE:
        raise LockedError("Attendance already submitted. Permissions are locked.")


def ensure_attendance_writable(parade: Parade) -> None:
    if not parade.is_open:
        raise ConflictError("Parade is completed. Attendance can no longer be submitted.")


def ensure_report_editable(parade: Parade) -> None:
    if parade.status == ParadeStatus.COMPLETED:
        raise LockedError("Parade is completed. Report is locked.")


def ensure_remarks_editable(parade: Parade) -> None:
    if parade.status != ParadeStatus.ATTENDANCE_SUBMITTED:
        raise LockedError("Remarks can only be edited while the parade is under review.")
