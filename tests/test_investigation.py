"""Tests for investigation notes, suspects and witnesses."""

import pytest

from justicechain.db.models import Reliability, SuspectStatus
from justicechain.errors import AuthorizationError, InvalidTransition, NotFoundError, ValidationError
from justicechain.workflow.investigation import fingerprint


@pytest.fixture
def case(services, police):
    return services.cases.create_case(police, title="Robbery")


def test_add_and_list_notes(services, police, case):
    note = services.investigation.add_note(
        police, case.case_id, "Canvass", "Neighbour heard glass", tags=["canvass"]
    )
    assert note.note_id.startswith("NOTE_")
    assert note.tags == ["canvass"]
    assert note.created_by.id == police.user_id
    assert note.content_hash == fingerprint(
        {"title": "Canvass", "content": "Neighbour heard glass", "tags": ["canvass"]}
    )

    notes = services.investigation.list_notes(police, case.case_id)
    assert [n.note_id for n in notes] == [note.note_id]


def test_update_note_rehashes(services, police, case):
    note = services.investigation.add_note(police, case.case_id, "Canvass", "First draft")
    updated = services.investigation.update_note(police, note.note_id, content="Second draft")
    assert updated.content == "Second draft"
    assert updated.title == "Canvass"
    assert updated.content_hash != note.content_hash


def test_only_author_updates_note(services, police, admin, case):
    note = services.investigation.add_note(police, case.case_id, "Canvass", "Text")
    with pytest.raises(AuthorizationError):
        services.investigation.update_note(admin, note.note_id, content="Edited")


def test_note_requires_content(services, police, case):
    with pytest.raises(ValidationError):
        services.investigation.add_note(police, case.case_id, "Title", "")


def test_records_require_case_access(services, other_police, case):
    with pytest.raises(AuthorizationError):
        services.investigation.add_note(other_police, case.case_id, "Title", "Text")


def test_suspect_status_stamps_dates(services, police, case):
    suspect = services.investigation.add_suspect(police, case.case_id, "J. Doe", age=31)
    assert suspect.status == SuspectStatus.UNDER_WATCH
    assert suspect.arrest_date is None

    arrested = services.investigation.update_suspect_status(police, suspect.suspect_id, "ARRESTED")
    assert arrested.status == SuspectStatus.ARRESTED
    assert arrested.arrest_date is not None

    released = services.investigation.update_suspect_status(police, suspect.suspect_id, "RELEASED")
    assert released.release_date is not None
    assert released.arrest_date == arrested.arrest_date

    assert [s.suspect_id for s in services.investigation.list_suspects(police, case.case_id)] == [
        suspect.suspect_id
    ]


def test_suspect_validation(services, police, case):
    with pytest.raises(ValidationError):
        services.investigation.add_suspect(police, case.case_id, "J. Doe", age=-1)
    with pytest.raises(ValidationError):
        services.investigation.update_suspect_status(police, "SUSPECT_0_0", "ESCAPED")
    with pytest.raises(NotFoundError):
        services.investigation.update_suspect_status(police, "SUSPECT_0_0", "ARRESTED")


def test_witness_reliability(services, police, case):
    witness = services.investigation.add_witness(
        police, case.case_id, "A. Smith", "Saw a van", contact="555-0100"
    )
    assert witness.reliability == Reliability.MEDIUM

    updated = services.investigation.update_witness_reliability(police, witness.witness_id, "HIGH")
    assert updated.reliability == Reliability.HIGH
    assert len(services.investigation.list_witnesses(police, case.case_id)) == 1


def test_closed_case_blocks_records(services, police, judge, case):
    note = services.investigation.add_note(police, case.case_id, "Canvass", "Text")
    services.cases.submit_verdict(judge, case.case_id, "NOT_GUILTY")

    with pytest.raises(InvalidTransition):
        services.investigation.add_note(police, case.case_id, "Late", "Text")
    with pytest.raises(InvalidTransition):
        services.investigation.update_note(police, note.note_id, content="Edited")
    with pytest.raises(InvalidTransition):
        services.investigation.add_witness(police, case.case_id, "B", "Statement")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
