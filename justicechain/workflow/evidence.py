"""Evidence lifecycle operations."""

from __future__ import annotations

import hashlib
import logging
from pathlib import Path

from ..db.models import (
    ActivityAction,
    AnalysisStatus,
    CustodyAction,
    Evidence,
    EvidenceStatus,
    EvidenceType,
    Role,
    utcnow,
)
from ..db.repositories import CaseRepository, EvidenceRepository
from ..errors import (
    AuthorizationError,
    ConfigurationError,
    ConflictError,
    DependencyError,
    NotFoundError,
    ValidationError,
)
from ..logging_utils import actor_fields
from ..schemas import AvailabilityView, CustodyEntryView, EvidenceHashesView, EvidenceView
from ..storage import sha256_file
from .cases import touch_case
from .context import (
    Actor,
    WorkflowContext,
    can_view_case,
    load_actor_user,
    load_case,
    load_visible_case,
    parse_enum,
    require_role,
)
from .transitions import can_transition, next_status

logger = logging.getLogger(__name__)

AVAILABILITY_NOTE = "gateway availability check passed; content was not re-hashed"


def _load_evidence(session, evidence_id: str) -> Evidence:
    ev = EvidenceRepository(session).get_by_evidence_id(evidence_id)
    if ev is None:
        raise NotFoundError(f"Evidence {evidence_id} not found")
    return ev


class EvidenceService:
    """Upload, analysis, immutability marking and custody tracking."""

    def __init__(self, ctx: WorkflowContext):
        self.ctx = ctx

    def _pinning(self):
        if self.ctx.pinning is None:
            raise ConfigurationError("No pinning service is configured")
        return self.ctx.pinning

    def _check_availability(self, content_hash: str):
        pinning = self._pinning()
        try:
            return pinning.check_availability(content_hash)
        except Exception as e:
            logger.error("Availability check for %s failed: %s", content_hash, e)
            raise DependencyError(f"Availability check failed: {e}") from e

    def _load_visible(self, session, evidence_id: str, actor: Actor) -> Evidence:
        ev = _load_evidence(session, evidence_id)
        if not can_view_case(ev.case, actor):
            raise AuthorizationError("Not authorized to access this evidence")
        return ev

    def upload(
        self,
        actor: Actor,
        case_id: str,
        file_path: Path | str,
        file_name: str,
        title: str | None = None,
        description: str | None = None,
        evidence_type: EvidenceType | str = EvidenceType.OTHER,
        file_size: int | None = None,
        mime_type: str | None = None,
    ) -> EvidenceView:
        """Pin an uploaded file and attach it to a case.

        The local file at ``file_path`` is a temporary upload owned by this
        call; it is deleted whether the upload succeeds or fails.

        Args:
            actor: Acting POLICE officer
            case_id: Public id of an existing, open case
            file_path: Temporary local copy of the upload
            file_name: Original file name

        Returns:
            The new evidence record with its UPLOADED custody entry

        Raises:
            AuthorizationError: If the actor is not POLICE
            NotFoundError: If the case does not exist
            DependencyError: If the pinning service rejects the file or is unreachable
        """
        path = Path(file_path)
        try:
            require_role(actor, Role.POLICE, message="Only police can upload evidence")
            evidence_type = parse_enum(
                EvidenceType, evidence_type or EvidenceType.OTHER, "evidence type"
            )
            with self.ctx.db.session() as session:
                load_actor_user(session, actor)
                case = load_case(session, case_id)
                next_status("add_evidence", case.status)
            pinning = self._pinning()

            sha256 = sha256_file(path)
            size = file_size if file_size is not None else path.stat().st_size
            try:
                pin = pinning.upload(
                    path,
                    file_name,
                    {"caseId": case_id, "uploadedBy": actor.user_id, "sha256": sha256},
                )
            except Exception as e:
                logger.error(
                    "Pinning failed for %s on case %s: %s",
                    file_name,
                    case_id,
                    e,
                    extra={**actor_fields(actor), "case_id": case_id},
                )
                raise DependencyError(f"Failed to pin evidence file: {e}") from e

            with self.ctx.unit_of_work() as session:
                user = load_actor_user(session, actor)
                case = load_case(session, case_id)
                next_status("add_evidence", case.status)
                repo = EvidenceRepository(session)
                ev = repo.add_evidence(
                    case=case,
                    uploaded_by=user,
                    title=(title or file_name).strip(),
                    description=description,
                    evidence_type=evidence_type,
                    file_name=file_name,
                    file_size=size,
                    mime_type=mime_type,
                    content_hash=pin.content_hash,
                    gateway_url=pin.gateway_url,
                    content_uri=pin.content_uri,
                    sha256=sha256,
                )
                repo.add_custody_entry(
                    ev, CustodyAction.UPLOADED, user, f"Uploaded {file_name} via {pinning.name}"
                )
                evidence_id, case_pk, case_ref = ev.evidence_id, case.id, case.blockchain_case_id
        finally:
            path.unlink(missing_ok=True)

        self.ctx.activity.record(
            actor,
            ActivityAction.EVIDENCE_UPLOADED,
            f"Uploaded evidence {evidence_id} to case {case_id}",
            case_pk=case_pk,
            resource_id=evidence_id,
            metadata={"content_hash": pin.content_hash, "sha256": sha256, "file_name": file_name},
        )
        if case_ref:
            result = self.ctx.notifier.add_evidence(case_ref, pin.content_hash)
            if result is not None and result.success:
                self._record_tx(evidence_id, result.tx_hash)
        return self._view(evidence_id)

    def _record_tx(self, evidence_id: str, tx_hash: str | None) -> None:
        try:
            with self.ctx.unit_of_work() as session:
                _load_evidence(session, evidence_id).blockchain_tx_hash = tx_hash
        except Exception as e:
            logger.warning("Could not record ledger tx for evidence %s: %s", evidence_id, e)

    def _view(self, evidence_id: str) -> EvidenceView:
        with self.ctx.db.session() as session:
            return EvidenceView.from_evidence(_load_evidence(session, evidence_id))

    def submit_analysis(
        self, actor: Actor, evidence_id: str, report: str, notes: str | None = None
    ) -> EvidenceView:
        """Record a forensic analysis; may advance the case to ANALYSIS_COMPLETE."""
        require_role(actor, Role.FORENSIC, message="Only forensic officers can submit analysis")
        if not report or not report.strip():
            raise ValidationError("Analysis report is required")

        with self.ctx.unit_of_work() as session:
            user = load_actor_user(session, actor)
            ev = _load_evidence(session, evidence_id)
            if ev.is_immutable:
                raise ConflictError(f"Evidence {evidence_id} is immutable")
            case = ev.case
            next_status("modify_evidence", case.status)
            ev.status = EvidenceStatus.ANALYSIS_COMPLETE
            ev.analysis_status = AnalysisStatus.COMPLETE
            ev.analysis_report = report
            ev.analysis_notes = notes
            ev.analyzed_by = user
            ev.analyzed_at = utcnow()
            EvidenceRepository(session).add_custody_entry(
                ev, CustodyAction.ANALYZED, user, "Forensic analysis submitted"
            )
            # bump the case row so concurrent final submissions conflict on its version
            touch_case(case)
            advanced = self._maybe_complete_case(session, case, user)
            case_pk, case_id, case_ref = case.id, case.case_id, case.blockchain_case_id

        self.ctx.activity.record(
            actor,
            ActivityAction.EVIDENCE_ANALYZED,
            f"Submitted analysis for evidence {evidence_id}",
            case_pk=case_pk,
            resource_id=evidence_id,
            metadata={"case_advanced": advanced},
        )
        if case_ref:
            digest = hashlib.sha256(report.encode("utf-8")).hexdigest()
            self.ctx.notifier.submit_forensic_report(case_ref, digest)
        logger.debug("Analysis recorded for %s on %s", evidence_id, case_id)
        return self._view(evidence_id)

    def _maybe_complete_case(self, session, case, user) -> bool:
        """Advance the case once every evidence item has a completed analysis."""
        if not can_transition("complete_analysis", case.status):
            return False
        items = EvidenceRepository(session).list_for_case(case)
        if not items or any(i.analysis_status != AnalysisStatus.COMPLETE for i in items):
            return False
        touch_case(case, next_status("complete_analysis", case.status))
        CaseRepository(session).add_timeline_entry(
            case, "ANALYSIS_COMPLETE", user, "All evidence analysed"
        )
        return True

    def mark_immutable(self, actor: Actor, evidence_id: str) -> EvidenceView:
        """Lock evidence after the artifact is confirmed reachable.

        Immutability here rests on a gateway availability check only; the
        stored content is not re-hashed.

        Raises:
            ConflictError: If already immutable or changed concurrently
            DependencyError: If the artifact is unreachable
        """
        require_role(actor, Role.JUDGE, message="Only judges can mark evidence immutable")
        with self.ctx.db.session() as session:
            load_actor_user(session, actor)
            ev = _load_evidence(session, evidence_id)
            if ev.is_immutable:
                raise ConflictError(f"Evidence {evidence_id} is already immutable")
            next_status("modify_evidence", ev.case.status)
            content_hash, seen_version = ev.content_hash, ev.version

        check = self._check_availability(content_hash)
        if not check.available:
            raise DependencyError(
                f"Evidence {evidence_id} is not reachable at {check.checked_url}: {check.error}"
            )

        with self.ctx.unit_of_work() as session:
            user = load_actor_user(session, actor)
            ev = _load_evidence(session, evidence_id)
            if ev.version != seen_version:
                raise ConflictError(f"Evidence {evidence_id} changed; reload and retry")
            now = utcnow()
            ev.is_immutable = True
            ev.status = EvidenceStatus.IMMUTABLE
            ev.verified_by = user
            ev.verified_at = now
            ev.availability_verified = True
            ev.availability_checked_at = now
            EvidenceRepository(session).add_custody_entry(
                ev, CustodyAction.LOCKED, user, f"Marked immutable ({AVAILABILITY_NOTE})"
            )
            case_pk = ev.case_pk

        self.ctx.activity.record(
            actor,
            ActivityAction.EVIDENCE_LOCKED,
            f"Marked evidence {evidence_id} immutable",
            case_pk=case_pk,
            resource_id=evidence_id,
            metadata={"check": check.method, "url": check.checked_url},
        )
        return self._view(evidence_id)

    def verify_availability(self, actor: Actor, evidence_id: str) -> AvailabilityView:
        """Probe the store for the artifact and record the outcome."""
        with self.ctx.db.session() as session:
            load_actor_user(session, actor)
            ev = self._load_visible(session, evidence_id, actor)
            content_hash = ev.content_hash

        check = self._check_availability(content_hash)
        now = utcnow()
        with self.ctx.unit_of_work() as session:
            user = load_actor_user(session, actor)
            ev = _load_evidence(session, evidence_id)
            ev.availability_verified = check.available
            ev.availability_checked_at = now
            if check.available:
                EvidenceRepository(session).add_custody_entry(
                    ev, CustodyAction.VERIFIED, user, AVAILABILITY_NOTE
                )
            case_pk = ev.case_pk

        if check.available:
            self.ctx.activity.record(
                actor,
                ActivityAction.EVIDENCE_VERIFIED,
                f"Verified availability of evidence {evidence_id}",
                case_pk=case_pk,
                resource_id=evidence_id,
            )
        return AvailabilityView(
            evidence_id=evidence_id,
            available=check.available,
            method=check.method,
            checked_url=check.checked_url,
            status_code=check.status_code,
            error=check.error,
            checked_at=now,
        )

    # --- reads ---

    def list_by_case(self, actor: Actor, case_id: str) -> list[EvidenceView]:
        with self.ctx.db.session() as session:
            case = load_visible_case(session, case_id, actor)
            items = EvidenceRepository(session).list_for_case(case)
            return [EvidenceView.from_evidence(ev) for ev in items]

    def get(self, actor: Actor, evidence_id: str) -> EvidenceView:
        with self.ctx.db.session() as session:
            return EvidenceView.from_evidence(self._load_visible(session, evidence_id, actor))

    def get_chain(self, actor: Actor, evidence_id: str) -> list[CustodyEntryView]:
        with self.ctx.db.session() as session:
            ev = self._load_visible(session, evidence_id, actor)
            return [CustodyEntryView.model_validate(e) for e in ev.custody]

    def get_hashes(self, actor: Actor, evidence_id: str) -> EvidenceHashesView:
        with self.ctx.db.session() as session:
            ev = self._load_visible(session, evidence_id, actor)
            return EvidenceHashesView(
                evidence_id=ev.evidence_id,
                content_hash=ev.content_hash,
                sha256=ev.sha256,
                gateway_url=ev.gateway_url,
                content_uri=ev.content_uri,
                is_immutable=ev.is_immutable,
            )
