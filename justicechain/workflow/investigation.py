"""Investigation notes, suspects and witnesses attached to a case."""

from __future__ import annotations

import hashlib
import json

from ..db.models import ActivityAction, Reliability, SuspectStatus, utcnow
from ..db.repositories import InvestigationRepository
from ..errors import AuthorizationError, NotFoundError, ValidationError
from ..schemas import NoteView, SuspectView, WitnessView
from .context import (
    Actor,
    WorkflowContext,
    can_view_case,
    load_actor_user,
    load_visible_case,
    parse_enum,
)
from .transitions import next_status


def fingerprint(payload: dict) -> str:
    """sha256 over a canonical JSON encoding of the record's content."""
    return hashlib.sha256(
        json.dumps(payload, sort_keys=True, default=str).encode("utf-8")
    ).hexdigest()


def _required(value: str | None, label: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{label} is required")
    return value.strip()


class InvestigationService:
    """Records owned by a case other than evidence."""

    def __init__(self, ctx: WorkflowContext):
        self.ctx = ctx

    def _open_case(self, session, actor: Actor, case_id: str):
        user = load_actor_user(session, actor)
        case = load_visible_case(session, case_id, actor)
        next_status("add_record", case.status)
        return user, case

    # --- notes ---

    def add_note(
        self,
        actor: Actor,
        case_id: str,
        title: str,
        content: str,
        tags: list[str] | None = None,
        is_confidential: bool = False,
    ) -> NoteView:
        title = _required(title, "Note title")
        content = _required(content, "Note content")
        with self.ctx.unit_of_work() as session:
            user, case = self._open_case(session, actor, case_id)
            note = InvestigationRepository(session).add_note(
                case,
                title=title,
                content=content,
                tags=list(tags or []),
                is_confidential=is_confidential,
                content_hash=fingerprint({"title": title, "content": content, "tags": tags or []}),
                created_by=user,
            )
            view = NoteView.model_validate(note)
            case_pk = case.id

        self.ctx.activity.record(
            actor,
            ActivityAction.NOTE_ADDED,
            f"Added note {view.note_id} to case {case_id}",
            case_pk=case_pk,
            resource_id=view.note_id,
        )
        return view

    def list_notes(self, actor: Actor, case_id: str) -> list[NoteView]:
        with self.ctx.db.session() as session:
            case = load_visible_case(session, case_id, actor)
            notes = InvestigationRepository(session).list_notes(case)
            return [NoteView.model_validate(n) for n in notes]

    def update_note(
        self,
        actor: Actor,
        note_id: str,
        title: str | None = None,
        content: str | None = None,
        tags: list[str] | None = None,
    ) -> NoteView:
        """Edit a note; only its author may do so."""
        with self.ctx.unit_of_work() as session:
            load_actor_user(session, actor)
            note = InvestigationRepository(session).get_note(note_id)
            if note is None:
                raise NotFoundError(f"Note {note_id} not found")
            if note.created_by_id != actor.user_id:
                raise AuthorizationError("You can only edit your own notes")
            next_status("add_record", note.case.status)
            if title is not None:
                note.title = _required(title, "Note title")
            if content is not None:
                note.content = _required(content, "Note content")
            if tags is not None:
                note.tags = list(tags)
            note.content_hash = fingerprint(
                {"title": note.title, "content": note.content, "tags": note.tags}
            )
            note.updated_at = utcnow()
            view = NoteView.model_validate(note)
            case_pk, case_id = note.case_pk, note.case.case_id

        self.ctx.activity.record(
            actor,
            ActivityAction.NOTE_UPDATED,
            f"Updated note {note_id} on case {case_id}",
            case_pk=case_pk,
            resource_id=note_id,
        )
        return view

    # --- suspects ---

    def add_suspect(
        self,
        actor: Actor,
        case_id: str,
        name: str,
        age: int | None = None,
        gender: str | None = None,
        address: str | None = None,
        description: str | None = None,
    ) -> SuspectView:
        name = _required(name, "Suspect name")
        if age is not None and age < 0:
            raise ValidationError("Suspect age cannot be negative")
        with self.ctx.unit_of_work() as session:
            user, case = self._open_case(session, actor, case_id)
            suspect = InvestigationRepository(session).add_suspect(
                case,
                name=name,
                age=age,
                gender=gender,
                address=address,
                description=description,
                status=SuspectStatus.UNDER_WATCH,
                content_hash=fingerprint(
                    {"name": name, "age": age, "gender": gender, "address": address}
                ),
                created_by=user,
            )
            view = SuspectView.model_validate(suspect)
            case_pk = case.id

        self.ctx.activity.record(
            actor,
            ActivityAction.SUSPECT_ADDED,
            f"Added suspect {name} to case {case_id}",
            case_pk=case_pk,
            resource_id=view.suspect_id,
        )
        return view

    def list_suspects(self, actor: Actor, case_id: str) -> list[SuspectView]:
        with self.ctx.db.session() as session:
            case = load_visible_case(session, case_id, actor)
            suspects = InvestigationRepository(session).list_suspects(case)
            return [SuspectView.model_validate(s) for s in suspects]

    def update_suspect_status(
        self, actor: Actor, suspect_id: str, status: SuspectStatus | str
    ) -> SuspectView:
        """Change suspect status; arrest and release stamp their dates."""
        status = parse_enum(SuspectStatus, status, "suspect status")
        with self.ctx.unit_of_work() as session:
            load_actor_user(session, actor)
            suspect = InvestigationRepository(session).get_suspect(suspect_id)
            if suspect is None:
                raise NotFoundError(f"Suspect {suspect_id} not found")
            if not can_view_case(suspect.case, actor):
                raise AuthorizationError("Not authorized to access this case")
            next_status("add_record", suspect.case.status)
            suspect.status = status
            if status is SuspectStatus.ARRESTED:
                suspect.arrest_date = utcnow()
            elif status is SuspectStatus.RELEASED:
                suspect.release_date = utcnow()
            suspect.updated_at = utcnow()
            view = SuspectView.model_validate(suspect)
            case_pk = suspect.case_pk

        self.ctx.activity.record(
            actor,
            ActivityAction.SUSPECT_STATUS_UPDATED,
            f"Suspect {suspect_id} is now {status.value}",
            case_pk=case_pk,
            resource_id=suspect_id,
        )
        return view

    # --- witnesses ---

    def add_witness(
        self,
        actor: Actor,
        case_id: str,
        name: str,
        statement: str,
        contact: str | None = None,
        address: str | None = None,
        reliability: Reliability | str = Reliability.MEDIUM,
    ) -> WitnessView:
        name = _required(name, "Witness name")
        statement = _required(statement, "Witness statement")
        reliability = parse_enum(Reliability, reliability or Reliability.MEDIUM, "reliability")
        with self.ctx.unit_of_work() as session:
            user, case = self._open_case(session, actor, case_id)
            witness = InvestigationRepository(session).add_witness(
                case,
                name=name,
                contact=contact,
                address=address,
                statement=statement,
                reliability=reliability,
                content_hash=fingerprint({"name": name, "statement": statement}),
                created_by=user,
            )
            view = WitnessView.model_validate(witness)
            case_pk = case.id

        self.ctx.activity.record(
            actor,
            ActivityAction.WITNESS_ADDED,
            f"Added witness {name} to case {case_id}",
            case_pk=case_pk,
            resource_id=view.witness_id,
        )
        return view

    def list_witnesses(self, actor: Actor, case_id: str) -> list[WitnessView]:
        with self.ctx.db.session() as session:
            case = load_visible_case(session, case_id, actor)
            witnesses = InvestigationRepository(session).list_witnesses(case)
            return [WitnessView.model_validate(w) for w in witnesses]

    def update_witness_reliability(
        self, actor: Actor, witness_id: str, reliability: Reliability | str
    ) -> WitnessView:
        reliability = parse_enum(Reliability, reliability, "reliability")
        with self.ctx.unit_of_work() as session:
            load_actor_user(session, actor)
            witness = InvestigationRepository(session).get_witness(witness_id)
            if witness is None:
                raise NotFoundError(f"Witness {witness_id} not found")
            if not can_view_case(witness.case, actor):
                raise AuthorizationError("Not authorized to access this case")
            next_status("add_record", witness.case.status)
            witness.reliability = reliability
            witness.updated_at = utcnow()
            view = WitnessView.model_validate(witness)
            case_pk = witness.case_pk

        self.ctx.activity.record(
            actor,
            ActivityAction.WITNESS_RELIABILITY_UPDATED,
            f"Witness {witness_id} reliability set to {reliability.value}",
            case_pk=case_pk,
            resource_id=witness_id,
        )
        return view
