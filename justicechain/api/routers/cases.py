"""Case lifecycle API router."""

import logging
from typing import List

from fastapi import APIRouter

from ...schemas import ActivityLogView, CaseView, HearingView, TimelineEntryView
from ..deps import ServicesDep
from ..errors import to_http_error
from ..models import (
    AssignOfficer,
    CaseCreate,
    DraftUpdate,
    HearingCreate,
    TransferDecision,
    TransferRequest,
    VerdictSubmit,
)
from ..security import CurrentActor

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/cases", tags=["cases"])


@router.post("", response_model=CaseView, status_code=201)
def create_case_endpoint(body: CaseCreate, actor: CurrentActor, services: ServicesDep):
    """Register a case or save a draft."""
    try:
        return services.cases.create_case(actor, **body.model_dump())
    except Exception as e:
        raise to_http_error("Create case", e) from e


@router.get("", response_model=List[CaseView])
def list_cases_endpoint(actor: CurrentActor, services: ServicesDep):
    """List the cases visible to the caller."""
    try:
        return services.cases.list_cases_for_actor(actor)
    except Exception as e:
        raise to_http_error("List cases", e) from e


@router.get("/all", response_model=List[CaseView])
def list_all_cases_endpoint(actor: CurrentActor, services: ServicesDep):
    """List every case (admin)."""
    try:
        return services.cases.list_all_cases(actor)
    except Exception as e:
        raise to_http_error("List all cases", e) from e


@router.get("/{case_id}", response_model=CaseView)
def get_case_endpoint(case_id: str, actor: CurrentActor, services: ServicesDep):
    """Get a case by public ID."""
    try:
        return services.cases.get_case(actor, case_id)
    except Exception as e:
        raise to_http_error("Get case", e) from e


@router.put("/{case_id}/draft", response_model=CaseView)
def update_draft_endpoint(
    case_id: str, body: DraftUpdate, actor: CurrentActor, services: ServicesDep
):
    """Edit a draft case."""
    try:
        return services.cases.update_draft(actor, case_id, body.model_dump(exclude_unset=True))
    except Exception as e:
        raise to_http_error("Update draft", e) from e


@router.post("/{case_id}/submit", response_model=CaseView)
def submit_draft_endpoint(case_id: str, actor: CurrentActor, services: ServicesDep):
    """Submit a draft for registration."""
    try:
        return services.cases.submit_draft(actor, case_id)
    except Exception as e:
        raise to_http_error("Submit draft", e) from e


@router.post("/{case_id}/transfer", response_model=CaseView)
def request_transfer_endpoint(
    case_id: str, body: TransferRequest, actor: CurrentActor, services: ServicesDep
):
    """Request transfer to another police station."""
    try:
        return services.cases.request_transfer(actor, case_id, body.to_station, body.reason)
    except Exception as e:
        raise to_http_error("Request transfer", e) from e


@router.post("/{case_id}/transfer/approve", response_model=CaseView)
def approve_transfer_endpoint(
    case_id: str, body: TransferDecision, actor: CurrentActor, services: ServicesDep
):
    """Approve the pending transfer request (admin)."""
    try:
        return services.cases.approve_transfer(actor, case_id, body.note)
    except Exception as e:
        raise to_http_error("Approve transfer", e) from e


@router.post("/{case_id}/transfer/reject", response_model=CaseView)
def reject_transfer_endpoint(
    case_id: str, body: TransferDecision, actor: CurrentActor, services: ServicesDep
):
    """Reject the pending transfer request (admin)."""
    try:
        return services.cases.reject_transfer(actor, case_id, body.note)
    except Exception as e:
        raise to_http_error("Reject transfer", e) from e


@router.put("/{case_id}/assign-forensic", response_model=CaseView)
def assign_forensic_endpoint(
    case_id: str, body: AssignOfficer, actor: CurrentActor, services: ServicesDep
):
    """Assign a forensic officer."""
    try:
        return services.cases.assign_forensic(actor, case_id, body.user_id)
    except Exception as e:
        raise to_http_error("Assign forensic", e) from e


@router.put("/{case_id}/assign-judge", response_model=CaseView)
def assign_judge_endpoint(
    case_id: str, body: AssignOfficer, actor: CurrentActor, services: ServicesDep
):
    """Assign a judge."""
    try:
        return services.cases.assign_judge(actor, case_id, body.user_id)
    except Exception as e:
        raise to_http_error("Assign judge", e) from e


@router.put("/{case_id}/approve", response_model=CaseView)
def approve_case_endpoint(case_id: str, actor: CurrentActor, services: ServicesDep):
    """Approve a case on the ledger (admin)."""
    try:
        return services.cases.approve_case(actor, case_id)
    except Exception as e:
        raise to_http_error("Approve case", e) from e


@router.post("/{case_id}/verdict", response_model=CaseView)
def submit_verdict_endpoint(
    case_id: str, body: VerdictSubmit, actor: CurrentActor, services: ServicesDep
):
    """Submit the verdict and close the case."""
    try:
        return services.cases.submit_verdict(
            actor, case_id, body.decision, body.summary, body.html
        )
    except Exception as e:
        raise to_http_error("Submit verdict", e) from e


@router.post("/{case_id}/hearings", response_model=HearingView, status_code=201)
def schedule_hearing_endpoint(
    case_id: str, body: HearingCreate, actor: CurrentActor, services: ServicesDep
):
    """Schedule a hearing."""
    try:
        return services.cases.schedule_hearing(
            actor, case_id, body.date, body.time, body.location, body.notes
        )
    except Exception as e:
        raise to_http_error("Schedule hearing", e) from e


@router.get("/{case_id}/hearings", response_model=List[HearingView])
def list_hearings_endpoint(case_id: str, actor: CurrentActor, services: ServicesDep):
    try:
        return services.cases.get_hearings(actor, case_id)
    except Exception as e:
        raise to_http_error("List hearings", e) from e


@router.get("/{case_id}/timeline", response_model=List[TimelineEntryView])
def get_timeline_endpoint(case_id: str, actor: CurrentActor, services: ServicesDep):
    try:
        return services.cases.get_timeline(actor, case_id)
    except Exception as e:
        raise to_http_error("Get timeline", e) from e


@router.get("/{case_id}/activity", response_model=List[ActivityLogView])
def case_activity_endpoint(case_id: str, actor: CurrentActor, services: ServicesDep):
    """Activity entries for one case."""
    try:
        return services.audit.case_feed(actor, case_id)
    except Exception as e:
        raise to_http_error("Case activity", e) from e
