"""Case lifecycle operations."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from ..db.models import (
    ActivityAction,
    Case,
    CaseStatus,
    Priority,
    Role,
    TransferStatus,
    VerdictDecision,
    utcnow,
)
from ..db.repositories import CaseRepository, EvidenceRepository, UserRepository
from ..errors import (
    AuthorizationError,
    ConfigurationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from ..schemas import CaseView, HearingView, LedgerAnchorView, LedgerRecordView, TimelineEntryView
from .context import (
    Actor,
    WorkflowContext,
    load_actor_user,
    load_case,
    load_visible_case,
    parse_enum,
    require_role,
)
from .transitions import next_status

logger = logging.getLogger(__name__)

DRAFT_FIELDS = ("title", "description", "case_number", "location", "priority", "police_station")


def touch_case(case: Case, status: CaseStatus | None = None) -> None:
    # every mutation writes the row, so the version check always runs
    if status is not None:
        case.status = status
    case.updated_at = utcnow()


class CaseService:
    """Role-checked case operations; every mutation appends to the timeline."""

    def __init__(self, ctx: WorkflowContext):
        self.ctx = ctx

    def _require_owner(self, case: Case, actor: Actor) -> None:
        if case.registered_by_id != actor.user_id:
            raise AuthorizationError("Only the registering officer can modify this case")

    def _view(self, case_id: str) -> CaseView:
        with self.ctx.db.session() as session:
            return CaseView.from_case(load_case(session, case_id))

    # --- creation and drafts ---

    def create_case(
        self,
        actor: Actor,
        title: str,
        description: str | None = None,
        case_number: str | None = None,
        location: str | None = None,
        priority: Priority | str = Priority.MEDIUM,
        police_station: str | None = None,
        is_draft: bool = False,
    ) -> CaseView:
        """Register a case, or save it as a draft.

        Args:
            actor: Acting POLICE officer
            title: Case title (required)
            is_draft: Save as DRAFT instead of REGISTERED

        Returns:
            The new case, with a one-entry timeline

        Raises:
            AuthorizationError: If the actor is not POLICE
            ValidationError: If the title is empty or the priority unknown
        """
        require_role(actor, Role.POLICE, message="Only police can create cases")
        if not title or not title.strip():
            raise ValidationError("Case title is required")
        priority = parse_enum(Priority, priority or Priority.MEDIUM, "priority")
        status = CaseStatus.DRAFT if is_draft else CaseStatus.REGISTERED
        event = "CASE_DRAFTED" if is_draft else "CASE_CREATED"

        with self.ctx.unit_of_work() as session:
            user = load_actor_user(session, actor)
            repo = CaseRepository(session)
            case = repo.add_case(
                registered_by=user,
                title=title.strip(),
                description=description,
                case_number=case_number,
                location=location,
                priority=priority,
                police_station=police_station,
                status=status,
                is_draft=is_draft,
            )
            repo.add_timeline_entry(
                case, event, user, "Case saved as draft" if is_draft else "Case registered"
            )
            case_pk, case_id = case.id, case.case_id

        self.ctx.activity.record(
            actor,
            ActivityAction.CASE_DRAFTED if is_draft else ActivityAction.CASE_CREATED,
            f"{'Drafted' if is_draft else 'Registered'} case {case_id}: {title.strip()}",
            case_pk=case_pk,
            resource_id=case_id,
            metadata={"priority": priority.value},
        )
        if not is_draft:
            self._mirror_creation(case_pk)
        return self._view(case_id)

    def update_draft(self, actor: Actor, case_id: str, changes: dict[str, Any]) -> CaseView:
        """Edit fields of a draft owned by the actor."""
        require_role(actor, Role.POLICE, message="Only police can edit drafts")
        unknown = set(changes) - set(DRAFT_FIELDS)
        if unknown:
            raise ValidationError(f"Fields cannot be edited: {', '.join(sorted(unknown))}")
        if "title" in changes and not (changes["title"] or "").strip():
            raise ValidationError("Case title is required")

        with self.ctx.unit_of_work() as session:
            load_actor_user(session, actor)
            case = load_case(session, case_id)
            self._require_owner(case, actor)
            next_status("update_draft", case.status)
            for name, value in changes.items():
                if name == "priority":
                    value = parse_enum(Priority, value, "priority")
                setattr(case, name, value)
            touch_case(case)
            case_pk = case.id

        self.ctx.activity.record(
            actor,
            ActivityAction.CASE_UPDATED,
            f"Updated draft {case_id}",
            case_pk=case_pk,
            resource_id=case_id,
            metadata={"fields": sorted(changes)},
        )
        return self._view(case_id)

    def submit_draft(self, actor: Actor, case_id: str) -> CaseView:
        """Turn a draft into a registered case."""
        require_role(actor, Role.POLICE, message="Only police can submit drafts")
        with self.ctx.unit_of_work() as session:
            user = load_actor_user(session, actor)
            case = load_case(session, case_id)
            self._require_owner(case, actor)
            status = next_status("submit_draft", case.status)
            case.is_draft = False
            touch_case(case, status)
            CaseRepository(session).add_timeline_entry(
                case, "CASE_SUBMITTED", user, "Draft submitted"
            )
            case_pk = case.id

        self.ctx.activity.record(
            actor,
            ActivityAction.CASE_SUBMITTED,
            f"Submitted draft {case_id}",
            case_pk=case_pk,
            resource_id=case_id,
        )
        self._mirror_creation(case_pk)
        return self._view(case_id)

    def _mirror_creation(self, case_pk: int) -> None:
        result = self.ctx.notifier.create_case()
        if result is None or not result.success:
            return
        try:
            with self.ctx.unit_of_work() as session:
                case = session.get(Case, case_pk)
                case.blockchain_tx_hash = result.tx_hash
                case.blockchain_case_id = result.data.get("case_ref")
                touch_case(case)
        except Exception as e:
            logger.warning("Could not record ledger linkage for case %s: %s", case_pk, e)

    # --- transfers ---

    def request_transfer(
        self, actor: Actor, case_id: str, to_station: str, reason: str | None = None
    ) -> CaseView:
        """Open a transfer request; only one may be pending at a time."""
        require_role(actor, Role.POLICE, message="Only police can request transfers")
        if not to_station or not to_station.strip():
            raise ValidationError("Destination police station is required")

        with self.ctx.unit_of_work() as session:
            user = load_actor_user(session, actor)
            case = load_case(session, case_id)
            self._require_owner(case, actor)
            next_status("request_transfer", case.status)
            if case.transfer_status == TransferStatus.PENDING:
                raise ConflictError("A transfer request is already pending for this case")
            case.transfer_status = TransferStatus.PENDING
            case.transfer_to_station = to_station.strip()
            case.transfer_reason = reason
            case.transfer_requested_by_id = user.id
            case.transfer_requested_at = utcnow()
            case.transfer_decided_by_id = None
            case.transfer_decided_at = None
            case.transfer_decision_note = None
            touch_case(case)
            CaseRepository(session).add_timeline_entry(
                case, "TRANSFER_REQUESTED", user, f"Transfer to {to_station.strip()} requested"
            )
            case_pk = case.id

        self.ctx.activity.record(
            actor,
            ActivityAction.TRANSFER_REQUESTED,
            f"Requested transfer of {case_id} to {to_station.strip()}",
            case_pk=case_pk,
            resource_id=case_id,
            metadata={"to_station": to_station.strip(), "reason": reason},
        )
        return self._view(case_id)

    def _decide_transfer(
        self, actor: Actor, case_id: str, approve: bool, note: str | None
    ) -> CaseView:
        require_role(actor, Role.ADMIN, message="Only admin can decide transfer requests")
        action = "approve_transfer" if approve else "reject_transfer"
        with self.ctx.unit_of_work() as session:
            user = load_actor_user(session, actor)
            case = load_case(session, case_id)
            if case.transfer_status != TransferStatus.PENDING:
                raise ConflictError("No pending transfer request for this case")
            next_status(action, case.status)
            destination = case.transfer_to_station
            if approve:
                case.police_station = destination
                case.transfer_status = TransferStatus.APPROVED
            else:
                case.transfer_status = TransferStatus.REJECTED
            case.transfer_decided_by_id = user.id
            case.transfer_decided_at = utcnow()
            case.transfer_decision_note = note
            touch_case(case)
            event = "TRANSFER_APPROVED" if approve else "TRANSFER_REJECTED"
            CaseRepository(session).add_timeline_entry(
                case,
                event,
                user,
                note or f"Transfer to {destination} {'approved' if approve else 'rejected'}",
            )
            case_pk = case.id

        self.ctx.activity.record(
            actor,
            ActivityAction.TRANSFER_APPROVED if approve else ActivityAction.TRANSFER_REJECTED,
            f"{'Approved' if approve else 'Rejected'} transfer of {case_id} to {destination}",
            case_pk=case_pk,
            resource_id=case_id,
        )
        return self._view(case_id)

    def approve_transfer(self, actor: Actor, case_id: str, note: str | None = None) -> CaseView:
        return self._decide_transfer(actor, case_id, True, note)

    def reject_transfer(self, actor: Actor, case_id: str, reason: str | None = None) -> CaseView:
        return self._decide_transfer(actor, case_id, False, reason)

    # --- assignment and approval ---

    def _assign(self, actor: Actor, case_id: str, user_id: int, role: Role) -> CaseView:
        require_role(actor, Role.ADMIN, message=f"Only admin can assign {role.value.lower()} officers")
        action = "assign_forensic" if role is Role.FORENSIC else "assign_judge"
        with self.ctx.unit_of_work() as session:
            admin = load_actor_user(session, actor)
            assignee = UserRepository(session).get(user_id)
            if assignee is None:
                raise NotFoundError(f"User {user_id} not found")
            if assignee.role is not role:
                raise ValidationError(f"User {assignee.username} is not a {role.value} officer")
            case = load_case(session, case_id)
            status = next_status(action, case.status)
            if role is Role.FORENSIC:
                case.assigned_forensic = assignee
                event = "FORENSIC_ASSIGNED"
            else:
                case.assigned_judge = assignee
                event = "JUDGE_ASSIGNED"
            touch_case(case, status)
            CaseRepository(session).add_timeline_entry(
                case, event, admin, f"Assigned to {assignee.username}"
            )
            case_pk, assignee_name = case.id, assignee.username

        self.ctx.activity.record(
            actor,
            ActivityAction.FORENSIC_ASSIGNED if role is Role.FORENSIC else ActivityAction.JUDGE_ASSIGNED,
            f"Assigned {assignee_name} to case {case_id}",
            case_pk=case_pk,
            resource_id=case_id,
            metadata={"assignee_id": user_id},
        )
        return self._view(case_id)

    def assign_forensic(self, actor: Actor, case_id: str, forensic_user_id: int) -> CaseView:
        return self._assign(actor, case_id, forensic_user_id, Role.FORENSIC)

    def assign_judge(self, actor: Actor, case_id: str, judge_user_id: int) -> CaseView:
        return self._assign(actor, case_id, judge_user_id, Role.JUDGE)

    def approve_case(self, actor: Actor, case_id: str) -> CaseView:
        """Approve a case; the ledger transaction must succeed first.

        Raises:
            ConfigurationError: If the case was never mirrored on-chain or the
                ledger is not configured
            DependencyError: If the ledger transaction fails
        """
        require_role(actor, Role.ADMIN, message="Only admin can approve cases")
        with self.ctx.db.session() as session:
            load_actor_user(session, actor)
            case = load_case(session, case_id)
            if not case.blockchain_case_id:
                raise ConfigurationError(
                    f"Case {case_id} has no blockchain case id; it was not registered on-chain"
                )
            next_status("approve_case", case.status)
            case_ref, seen_version = case.blockchain_case_id, case.version

        result = self.ctx.gateway.approve_case(case_ref)

        with self.ctx.unit_of_work() as session:
            user = load_actor_user(session, actor)
            case = load_case(session, case_id)
            if case.version != seen_version:
                raise ConflictError(
                    "Case changed while the approval was being recorded on-chain "
                    f"(tx {result.tx_hash}); reload and retry"
                )
            status = next_status("approve_case", case.status)
            case.approved_by = user
            case.approved_at = utcnow()
            case.approval_tx_hash = result.tx_hash
            touch_case(case, status)
            CaseRepository(session).add_timeline_entry(
                case, "CASE_APPROVED", user, f"Approved on-chain in tx {result.tx_hash}"
            )
            case_pk = case.id

        self.ctx.activity.record(
            actor,
            ActivityAction.CASE_APPROVED,
            f"Approved case {case_id}",
            case_pk=case_pk,
            resource_id=case_id,
            metadata={"tx_hash": result.tx_hash, "block_number": result.block_number},
        )
        return self._view(case_id)

    # --- judge actions ---

    def submit_verdict(
        self,
        actor: Actor,
        case_id: str,
        decision: VerdictDecision | str,
        summary: str | None = None,
        html: str | None = None,
    ) -> CaseView:
        """Record the verdict and close the case."""
        require_role(actor, Role.JUDGE, message="Only judges can submit verdicts")
        decision = parse_enum(VerdictDecision, decision, "verdict decision")
        with self.ctx.unit_of_work() as session:
            user = load_actor_user(session, actor)
            case = load_case(session, case_id)
            status = next_status("submit_verdict", case.status)
            now = utcnow()
            case.verdict_decision = decision
            case.verdict_summary = summary
            case.verdict_html = html
            case.verdict_by = user
            case.verdict_at = now
            case.closed_at = now
            touch_case(case, status)
            CaseRepository(session).add_timeline_entry(
                case, "VERDICT_SUBMITTED", user, f"Verdict: {decision.value}"
            )
            case_pk, case_ref = case.id, case.blockchain_case_id

        self.ctx.activity.record(
            actor,
            ActivityAction.VERDICT_SUBMITTED,
            f"Submitted verdict {decision.value} for case {case_id}",
            case_pk=case_pk,
            resource_id=case_id,
            metadata={"decision": decision.value},
        )
        if case_ref:
            result = self.ctx.notifier.give_verdict(case_ref, decision.value)
            if result is not None and result.success:
                try:
                    with self.ctx.unit_of_work() as session:
                        case = session.get(Case, case_pk)
                        case.verdict_tx_hash = result.tx_hash
                        touch_case(case)
                except Exception as e:
                    logger.warning("Could not record verdict tx for %s: %s", case_id, e)
        return self._view(case_id)

    def schedule_hearing(
        self,
        actor: Actor,
        case_id: str,
        date: str,
        time: str,
        location: str | None = None,
        notes: str | None = None,
    ) -> HearingView:
        """Schedule a hearing at ``date`` (YYYY-MM-DD) and ``time`` (HH:MM)."""
        require_role(actor, Role.JUDGE, message="Only judges can schedule hearings")
        if not date or not time:
            raise ValidationError("Hearing date and time are required")
        try:
            scheduled_at = datetime.fromisoformat(f"{date.strip()}T{time.strip()}")
        except ValueError as e:
            raise ValidationError(f"Invalid hearing date/time: {date} {time}") from e

        with self.ctx.unit_of_work() as session:
            user = load_actor_user(session, actor)
            case = load_case(session, case_id)
            next_status("schedule_hearing", case.status)
            repo = CaseRepository(session)
            hearing = repo.add_hearing(case, scheduled_at, user, location=location, notes=notes)
            touch_case(case)
            repo.add_timeline_entry(
                case,
                "HEARING_SCHEDULED",
                user,
                f"Hearing scheduled for {scheduled_at.isoformat(sep=' ', timespec='minutes')}",
            )
            view = HearingView.model_validate(hearing)
            case_pk = case.id

        self.ctx.activity.record(
            actor,
            ActivityAction.HEARING_SCHEDULED,
            f"Scheduled hearing for case {case_id}",
            case_pk=case_pk,
            resource_id=case_id,
            metadata={"scheduled_at": scheduled_at.isoformat(), "location": location},
        )
        return view

    # --- reads ---

    def ledger_record(self, actor: Actor, case_id: str) -> LedgerRecordView:
        """Read the case's on-chain record and check its anchored evidence hashes.

        Evidence whose addEvidence transaction confirmed is indexed on-chain in
        upload order, so its position among those items is its ledger index.

        Raises:
            ConfigurationError: If the case has no on-chain id or the ledger is off
            DependencyError: If a ledger query fails
        """
        require_role(actor, Role.ADMIN, message="Only admin can inspect ledger records")
        with self.ctx.db.session() as session:
            load_actor_user(session, actor)
            case = load_case(session, case_id)
            if not case.blockchain_case_id:
                raise ConfigurationError(f"Case {case_id} has no blockchain case id")
            case_ref = case.blockchain_case_id
            anchored = [
                (ev.evidence_id, ev.content_hash)
                for ev in EvidenceRepository(session).list_for_case(case)
                if ev.blockchain_tx_hash
            ]

        gateway = self.ctx.gateway
        record = gateway.get_case(case_ref).data
        anchors = []
        for index, (evidence_id, content_hash) in enumerate(anchored):
            ledger_hash = gateway.verify_evidence(case_ref, index)
            if ledger_hash != content_hash:
                logger.warning(
                    "Ledger hash mismatch for %s at index %d on case %s",
                    evidence_id,
                    index,
                    case_id,
                    extra={"case_id": case_id, "evidence_id": evidence_id},
                )
            anchors.append(
                LedgerAnchorView(
                    index=index,
                    evidence_id=evidence_id,
                    content_hash=content_hash,
                    ledger_hash=ledger_hash,
                    matches=ledger_hash == content_hash,
                )
            )
        return LedgerRecordView(
            case_id=case_id,
            blockchain_case_id=case_ref,
            police_officer=record["police_officer"],
            forensic_officer=record["forensic_officer"],
            judge_officer=record["judge_officer"],
            approved=record["approved"],
            closed=record["closed"],
            anchors=anchors,
        )

    def list_all_cases(self, actor: Actor) -> list[CaseView]:
        require_role(actor, Role.ADMIN, message="Only admin can list all cases")
        with self.ctx.db.session() as session:
            return [CaseView.from_case(c) for c in CaseRepository(session).list_cases()]

    def list_cases_for_actor(self, actor: Actor) -> list[CaseView]:
        """Cases visible to the actor's role."""
        with self.ctx.db.session() as session:
            repo = CaseRepository(session)
            if actor.role is Role.ADMIN:
                cases = repo.list_cases()
            elif actor.role is Role.POLICE:
                cases = repo.list_registered_by(actor.user_id)
            else:
                cases = repo.list_assigned_to(actor.user_id, actor.role)
            return [CaseView.from_case(c) for c in cases]

    def get_case(self, actor: Actor, case_id: str) -> CaseView:
        with self.ctx.db.session() as session:
            return CaseView.from_case(load_visible_case(session, case_id, actor))

    def get_timeline(self, actor: Actor, case_id: str) -> list[TimelineEntryView]:
        with self.ctx.db.session() as session:
            case = load_visible_case(session, case_id, actor)
            return [TimelineEntryView.model_validate(e) for e in case.timeline]

    def get_hearings(self, actor: Actor, case_id: str) -> list[HearingView]:
        with self.ctx.db.session() as session:
            case = load_visible_case(session, case_id, actor)
            return [HearingView.model_validate(h) for h in case.hearings]
