"""Investigation records API router: notes, suspects and witnesses."""

import logging
from typing import List

from fastapi import APIRouter

from ...schemas import NoteView, SuspectView, WitnessView
from ..deps import ServicesDep
from ..errors import to_http_error
from ..models import (
    NoteCreate,
    NoteUpdate,
    SuspectCreate,
    SuspectStatusUpdate,
    WitnessCreate,
    WitnessReliabilityUpdate,
)
from ..security import CurrentActor

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/investigation", tags=["investigation"])


@router.post("/cases/{case_id}/notes", response_model=NoteView, status_code=201)
def add_note_endpoint(case_id: str, body: NoteCreate, actor: CurrentActor, services: ServicesDep):
    try:
        return services.investigation.add_note(actor, case_id, **body.model_dump())
    except Exception as e:
        raise to_http_error("Add note", e) from e


@router.get("/cases/{case_id}/notes", response_model=List[NoteView])
def list_notes_endpoint(case_id: str, actor: CurrentActor, services: ServicesDep):
    try:
        return services.investigation.list_notes(actor, case_id)
    except Exception as e:
        raise to_http_error("List notes", e) from e


@router.put("/notes/{note_id}", response_model=NoteView)
def update_note_endpoint(note_id: str, body: NoteUpdate, actor: CurrentActor, services: ServicesDep):
    """Edit a note; authors only."""
    try:
        return services.investigation.update_note(
            actor, note_id, **body.model_dump(exclude_unset=True)
        )
    except Exception as e:
        raise to_http_error("Update note", e) from e


@router.post("/cases/{case_id}/suspects", response_model=SuspectView, status_code=201)
def add_suspect_endpoint(
    case_id: str, body: SuspectCreate, actor: CurrentActor, services: ServicesDep
):
    try:
        return services.investigation.add_suspect(actor, case_id, **body.model_dump())
    except Exception as e:
        raise to_http_error("Add suspect", e) from e


@router.get("/cases/{case_id}/suspects", response_model=List[SuspectView])
def list_suspects_endpoint(case_id: str, actor: CurrentActor, services: ServicesDep):
    try:
        return services.investigation.list_suspects(actor, case_id)
    except Exception as e:
        raise to_http_error("List suspects", e) from e


@router.put("/suspects/{suspect_id}/status", response_model=SuspectView)
def update_suspect_status_endpoint(
    suspect_id: str, body: SuspectStatusUpdate, actor: CurrentActor, services: ServicesDep
):
    try:
        return services.investigation.update_suspect_status(actor, suspect_id, body.status)
    except Exception as e:
        raise to_http_error("Update suspect status", e) from e


@router.post("/cases/{case_id}/witnesses", response_model=WitnessView, status_code=201)
def add_witness_endpoint(
    case_id: str, body: WitnessCreate, actor: CurrentActor, services: ServicesDep
):
    try:
        return services.investigation.add_witness(actor, case_id, **body.model_dump())
    except Exception as e:
        raise to_http_error("Add witness", e) from e


@router.get("/cases/{case_id}/witnesses", response_model=List[WitnessView])
def list_witnesses_endpoint(case_id: str, actor: CurrentActor, services: ServicesDep):
    try:
        return services.investigation.list_witnesses(actor, case_id)
    except Exception as e:
        raise to_http_error("List witnesses", e) from e


@router.put("/witnesses/{witness_id}/reliability", response_model=WitnessView)
def update_witness_reliability_endpoint(
    witness_id: str, body: WitnessReliabilityUpdate, actor: CurrentActor, services: ServicesDep
):
    try:
        return services.investigation.update_witness_reliability(
            actor, witness_id, body.reliability
        )
    except Exception as e:
        raise to_http_error("Update witness reliability", e) from e
