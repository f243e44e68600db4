from __future__ import annotations

import pytest

from src.ops_portal.core.enums import PermitAction, PermitStatus, Role
from src.ops_portal.core.exceptions import InvalidTransitionError
from src.ops_portal.permits import state_machine as sm


def test_happy_path_edges():
    assert sm.next_status(None, PermitAction.SUBMIT) == PermitStatus.PENDING
    assert sm.next_status(PermitStatus.PENDING, PermitAction.APPROVE) == PermitStatus.APPROVED
    assert sm.next_status(PermitStatus.APPROVED, PermitAction.SIGN_OUT) == PermitStatus.ON_LEAVE
    assert sm.next_status(PermitStatus.ON_LEAVE, PermitAction.CONFIRM_RETURN) == PermitStatus.RETURNED


@pytest.mark.parametrize(
    "action,expected",
    [
        (PermitAction.APPROVE, PermitStatus.APPROVED),
        (PermitAction.REJECT, PermitStatus.REJECTED),
        (PermitAction.CLARIFY, PermitStatus.NEEDS_CLARIFICATION),
    ],
)
def test_clarification_can_be_decided_again(action, expected):
    assert sm.next_status(PermitStatus.NEEDS_CLARIFICATION, action) == expected


@pytest.mark.parametrize("status", [PermitStatus.PENDING, PermitStatus.REJECTED, PermitStatus.RETURNED])
def test_sign_out_requires_approved(status):
    with pytest.raises(InvalidTransitionError):
        sm.next_status(status, PermitAction.SIGN_OUT)


def test_terminal_states_have_no_outgoing_edges():
    for status in sm.TERMINAL_STATUSES:
        assert sm.is_terminal(status)
        assert not any(sm.can_transition(status, action) for action in PermitAction)


def test_return_only_from_on_leave():
    assert sm.sources_for(PermitAction.CONFIRM_RETURN) == frozenset({PermitStatus.ON_LEAVE})
    with pytest.raises(InvalidTransitionError):
        sm.next_status(PermitStatus.APPROVED, PermitAction.CONFIRM_RETURN)


def test_decision_sources():
    assert sm.sources_for(PermitAction.APPROVE) == frozenset({PermitStatus.PENDING, PermitStatus.NEEDS_CLARIFICATION})


def test_roles():
    assert sm.roles_for(PermitAction.APPROVE) == frozenset({Role.ADMIN})
    assert sm.roles_for(PermitAction.SIGN_OUT) == frozenset({Role.SECURITY})
    assert Role.ADMIN not in sm.roles_for(PermitAction.SUBMIT)


def test_target_for_decisions():
    assert sm.target_for(PermitAction.REJECT) == PermitStatus.REJECTED
    assert sm.status_label(PermitStatus.ON_LEAVE) == "Keluar Area"
