"""Read-side views over a permit snapshot.

Every function is pure: queue membership depends only on the list passed in,
so views can be rebuilt from any snapshot (live or fixture).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from ..common.datetime_utils import parse_month
from ..core.enums import PermitStatus
from .model import LeavePermit

ADMIN_QUEUE_STATUSES = frozenset({PermitStatus.PENDING, PermitStatus.NEEDS_CLARIFICATION})


def _by_status(permits: Iterable[LeavePermit], statuses: frozenset[PermitStatus]) -> list[LeavePermit]:
    return [p for p in permits if p.status in statuses]


def admin_queue(permits: Iterable[LeavePermit]) -> list[LeavePermit]:
    return _by_status(permits, ADMIN_QUEUE_STATUSES)


def sign_out_queue(permits: Iterable[LeavePermit]) -> list[LeavePermit]:
    return _by_status(permits, frozenset({PermitStatus.APPROVED}))


def return_queue(permits: Iterable[LeavePermit]) -> list[LeavePermit]:
    return _by_status(permits, frozenset({PermitStatus.ON_LEAVE}))


def monthly_recap(permits: Iterable[LeavePermit], month: str) -> list[LeavePermit]:
    """Permits dated in ``month`` (``YYYY-MM``), newest submission first."""
    year, mon = parse_month(month)
    selected = [p for p in permits if p.date.year == year and p.date.month == mon]
    selected.sort(key=lambda p: p.created_at, reverse=True)
    return selected


@dataclass(frozen=True)
class PermitQueues:
    admin: Sequence[LeavePermit]
    sign_out: Sequence[LeavePermit]
    returning: Sequence[LeavePermit]
    recap: Sequence[LeavePermit]


def derive_queues(permits: Iterable[LeavePermit], month: Optional[str] = None) -> PermitQueues:
    snapshot = list(permits)
    return PermitQueues(
        admin=admin_queue(snapshot),
        sign_out=sign_out_queue(snapshot),
        returning=return_queue(snapshot),
        recap=monthly_recap(snapshot, month) if month else [],
    )
