"""Repository for investigation notes, suspects and witnesses."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from ...ids import (
    NOTE_PREFIX,
    SUSPECT_PREFIX,
    WITNESS_PREFIX,
    generate_public_id,
    unique_public_id,
)
from ..models import Case, InvestigationNote, Suspect, Witness


class InvestigationRepository:
    """Repository for records a case owns besides evidence."""

    def __init__(self, session: Session):
        """Initialize the InvestigationRepository with a database session."""
        self.session = session

    def add_note(self, case: Case, **fields) -> InvestigationNote:
        note = InvestigationNote(
            note_id=unique_public_id(
                self.session, InvestigationNote.note_id, lambda: generate_public_id(NOTE_PREFIX)
            ),
            case=case,
            **fields,
        )
        self.session.add(note)
        self.session.flush()
        return note

    def get_note(self, note_id: str) -> InvestigationNote | None:
        stmt = select(InvestigationNote).where(InvestigationNote.note_id == note_id)
        return self.session.execute(stmt).scalar_one_or_none()

    def list_notes(self, case: Case) -> list[InvestigationNote]:
        stmt = (
            select(InvestigationNote)
            .where(InvestigationNote.case_pk == case.id)
            .order_by(InvestigationNote.created_at.desc(), InvestigationNote.id.desc())
        )
        return list(self.session.execute(stmt).scalars().all())

    def add_suspect(self, case: Case, **fields) -> Suspect:
        suspect = Suspect(
            suspect_id=unique_public_id(
                self.session, Suspect.suspect_id, lambda: generate_public_id(SUSPECT_PREFIX)
            ),
            case=case,
            **fields,
        )
        self.session.add(suspect)
        self.session.flush()
        return suspect

    def get_suspect(self, suspect_id: str) -> Suspect | None:
        stmt = select(Suspect).where(Suspect.suspect_id == suspect_id)
        return self.session.execute(stmt).scalar_one_or_none()

    def list_suspects(self, case: Case) -> list[Suspect]:
        stmt = (
            select(Suspect)
            .where(Suspect.case_pk == case.id)
            .order_by(Suspect.created_at.desc(), Suspect.id.desc())
        )
        return list(self.session.execute(stmt).scalars().all())

    def add_witness(self, case: Case, **fields) -> Witness:
        witness = Witness(
            witness_id=unique_public_id(
                self.session, Witness.witness_id, lambda: generate_public_id(WITNESS_PREFIX)
            ),
            case=case,
            **fields,
        )
        self.session.add(witness)
        self.session.flush()
        return witness

    def get_witness(self, witness_id: str) -> Witness | None:
        stmt = select(Witness).where(Witness.witness_id == witness_id)
        return self.session.execute(stmt).scalar_one_or_none()

    def list_witnesses(self, case: Case) -> list[Witness]:
        stmt = (
            select(Witness)
            .where(Witness.case_pk == case.id)
            .order_by(Witness.created_at.desc(), Witness.id.desc())
        )
        return list(self.session.execute(stmt).scalars().all())
