"""Case status transition table.

Each action lists the statuses it may start from and the status it leaves
the case in (None keeps the current status). Anything not listed is an
invalid transition. CLOSED appears in no ``allowed_from`` set, so a case
with a verdict can no longer change.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..db.models import CaseStatus
from ..errors import InvalidTransition

S = CaseStatus

_OPEN = frozenset(s for s in CaseStatus if s not in (S.DRAFT, S.CLOSED))
_NOT_CLOSED = frozenset(s for s in CaseStatus if s is not S.CLOSED)


@dataclass(frozen=True)
class Transition:
    allowed_from: frozenset
    to: CaseStatus | None


TRANSITIONS: dict[str, Transition] = {
    "update_draft": Transition(frozenset({S.DRAFT}), None),
    "submit_draft": Transition(frozenset({S.DRAFT}), S.REGISTERED),
    "approve_case": Transition(frozenset({S.REGISTERED, S.PENDING_APPROVAL}), S.APPROVED),
    "assign_forensic": Transition(
        frozenset({S.REGISTERED, S.PENDING_APPROVAL, S.APPROVED, S.IN_FORENSIC_ANALYSIS}),
        S.IN_FORENSIC_ANALYSIS,
    ),
    "complete_analysis": Transition(frozenset({S.IN_FORENSIC_ANALYSIS}), S.ANALYSIS_COMPLETE),
    "assign_judge": Transition(_OPEN, S.HEARING),
    "schedule_hearing": Transition(_OPEN, None),
    "submit_verdict": Transition(_OPEN, S.CLOSED),
    "request_transfer": Transition(_NOT_CLOSED, None),
    "approve_transfer": Transition(_NOT_CLOSED, None),
    "reject_transfer": Transition(_NOT_CLOSED, None),
    "add_evidence": Transition(_NOT_CLOSED, None),
    "modify_evidence": Transition(_NOT_CLOSED, None),
    "add_record": Transition(_NOT_CLOSED, None),
}


def can_transition(action: str, current: CaseStatus) -> bool:
    return CaseStatus(current) in TRANSITIONS[action].allowed_from


def next_status(action: str, current: CaseStatus) -> CaseStatus:
    """Return the status after ``action``.

    Raises:
        InvalidTransition: If the action is not allowed from ``current``
    """
    current = CaseStatus(current)
    rule = TRANSITIONS[action]
    if current not in rule.allowed_from:
        raise InvalidTransition(action, current.value)
    return rule.to or current
