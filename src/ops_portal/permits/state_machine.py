"""Leave-permit lifecycle.

Pending -> Approved -> On Leave -> Returned, with Rejected and
Butuh Klarifikasi branches decided by an admin. The table below is the only
source of allowed edges; services and the repository guard both derive from
it.
"""

from __future__ import annotations

from typing import Optional

from ..core.enums import PermitAction, PermitStatus, Role
from ..core.exceptions import InvalidTransitionError

# (current status, action) -> next status. ``None`` is "no record yet".
TRANSITIONS: dict[tuple[Optional[PermitStatus], PermitAction], PermitStatus] = {
    (None, PermitAction.SUBMIT): PermitStatus.PENDING,
    (PermitStatus.PENDING, PermitAction.APPROVE): PermitStatus.APPROVED,
    (PermitStatus.PENDING, PermitAction.REJECT): PermitStatus.REJECTED,
    (PermitStatus.PENDING, PermitAction.CLARIFY): PermitStatus.NEEDS_CLARIFICATION,
    (PermitStatus.NEEDS_CLARIFICATION, PermitAction.APPROVE): PermitStatus.APPROVED,
    (PermitStatus.NEEDS_CLARIFICATION, PermitAction.REJECT): PermitStatus.REJECTED,
    (PermitStatus.NEEDS_CLARIFICATION, PermitAction.CLARIFY): PermitStatus.NEEDS_CLARIFICATION,
    (PermitStatus.APPROVED, PermitAction.SIGN_OUT): PermitStatus.ON_LEAVE,
    (PermitStatus.ON_LEAVE, PermitAction.CONFIRM_RETURN): PermitStatus.RETURNED,
}

ACTION_ROLES: dict[PermitAction, frozenset[Role]] = {
    PermitAction.SUBMIT: frozenset({Role.EMPLOYEE, Role.RECEPTIONIST, Role.SECURITY}),
    PermitAction.APPROVE: frozenset({Role.ADMIN}),
    PermitAction.REJECT: frozenset({Role.ADMIN}),
    PermitAction.CLARIFY: frozenset({Role.ADMIN}),
    PermitAction.SIGN_OUT: frozenset({Role.SECURITY}),
    PermitAction.CONFIRM_RETURN: frozenset({Role.SECURITY}),
}

DECISION_ACTIONS = frozenset({PermitAction.APPROVE, PermitAction.REJECT, PermitAction.CLARIFY})

TERMINAL_STATUSES = frozenset({PermitStatus.REJECTED, PermitStatus.RETURNED})

_STATUS_LABELS = {
    PermitStatus.PENDING: "Menunggu",
    PermitStatus.APPROVED: "Disetujui",
    PermitStatus.REJECTED: "Ditolak",
    PermitStatus.ON_LEAVE: "Keluar Area",
    PermitStatus.RETURNED: "Telah Kembali",
    PermitStatus.NEEDS_CLARIFICATION: "Butuh Klarifikasi",
}


def can_transition(current: Optional[PermitStatus], action: PermitAction) -> bool:
    return (current, action) in TRANSITIONS


def next_status(current: Optional[PermitStatus], action: PermitAction) -> PermitStatus:
    try:
        return TRANSITIONS[(current, action)]
    except KeyError:
        label = current.value if current is not None else "(baru)"
        raise InvalidTransitionError(f"Aksi '{action.value}' tidak diizinkan untuk izin berstatus {label}")


def sources_for(action: PermitAction) -> frozenset[PermitStatus]:
    """Statuses from which ``action`` is allowed (the repository's expected prior status)."""
    return frozenset(src for (src, act) in TRANSITIONS if act == action and src is not None)


def target_for(action: PermitAction) -> PermitStatus:
    targets = {dst for (_, act), dst in TRANSITIONS.items() if act == action}
    if len(targets) != 1:
        raise ValueError(f"action {action.value} has no single target status")
    return next(iter(targets))


def roles_for(action: PermitAction) -> frozenset[Role]:
    return ACTION_ROLES[action]


def is_terminal(status: PermitStatus) -> bool:
    return status in TERMINAL_STATUSES


def status_label(status: PermitStatus) -> str:
    return _STATUS_LABELS.get(status, "Tidak Diketahui")
