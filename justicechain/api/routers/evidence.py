"""Evidence upload, analysis and custody API router."""

import logging
import shutil
import tempfile
from pathlib import Path
from typing import List, Optional

from fastapi import APIRouter, File, Form, UploadFile

from ...db.models import EvidenceType
from ...schemas import AvailabilityView, CustodyEntryView, EvidenceHashesView, EvidenceView
from ..deps import ServicesDep
from ..errors import to_http_error
from ..models import AnalysisSubmit
from ..security import CurrentActor

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/evidence", tags=["evidence"])


def _spool_upload(upload: UploadFile, upload_dir: Path | None) -> Path:
    """Copy the request body to a temp file the workflow layer takes ownership of."""
    if upload_dir is not None:
        upload_dir.mkdir(parents=True, exist_ok=True)
    suffix = Path(upload.filename or "").suffix
    with tempfile.NamedTemporaryFile(
        delete=False, dir=upload_dir, prefix="upload-", suffix=suffix
    ) as tmp:
        shutil.copyfileobj(upload.file, tmp)
        return Path(tmp.name)


@router.post("/upload", response_model=EvidenceView, status_code=201)
def upload_evidence_endpoint(
    actor: CurrentActor,
    services: ServicesDep,
    case_id: str = Form(...),
    file: UploadFile = File(...),
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    evidence_type: EvidenceType = Form(EvidenceType.OTHER),
):
    """Upload an evidence file to an open case."""
    try:
        path = _spool_upload(file, services.ctx.upload_dir)
        return services.evidence.upload(
            actor,
            case_id,
            path,
            file.filename or path.name,
            title=title,
            description=description,
            evidence_type=evidence_type,
            file_size=path.stat().st_size,
            mime_type=file.content_type,
        )
    except Exception as e:
        raise to_http_error("Upload evidence", e) from e
    finally:
        file.file.close()


@router.get("/case/{case_id}", response_model=List[EvidenceView])
def list_case_evidence_endpoint(case_id: str, actor: CurrentActor, services: ServicesDep):
    """List evidence attached to a case."""
    try:
        return services.evidence.list_by_case(actor, case_id)
    except Exception as e:
        raise to_http_error("List evidence", e) from e


@router.get("/{evidence_id}", response_model=EvidenceView)
def get_evidence_endpoint(evidence_id: str, actor: CurrentActor, services: ServicesDep):
    """Get evidence by ID."""
    try:
        return services.evidence.get(actor, evidence_id)
    except Exception as e:
        raise to_http_error("Get evidence", e) from e


@router.get("/{evidence_id}/chain", response_model=List[CustodyEntryView])
def get_custody_chain_endpoint(evidence_id: str, actor: CurrentActor, services: ServicesDep):
    """Chain of custody, oldest first."""
    try:
        return services.evidence.get_chain(actor, evidence_id)
    except Exception as e:
        raise to_http_error("Get custody chain", e) from e


@router.get("/{evidence_id}/hashes", response_model=EvidenceHashesView)
def get_hashes_endpoint(evidence_id: str, actor: CurrentActor, services: ServicesDep):
    try:
        return services.evidence.get_hashes(actor, evidence_id)
    except Exception as e:
        raise to_http_error("Get evidence hashes", e) from e


@router.put("/{evidence_id}/analysis", response_model=EvidenceView)
def submit_analysis_endpoint(
    evidence_id: str, body: AnalysisSubmit, actor: CurrentActor, services: ServicesDep
):
    """Submit a forensic analysis report."""
    try:
        return services.evidence.submit_analysis(actor, evidence_id, body.report, body.notes)
    except Exception as e:
        raise to_http_error("Submit analysis", e) from e


@router.put("/{evidence_id}/immutable", response_model=EvidenceView)
def mark_immutable_endpoint(evidence_id: str, actor: CurrentActor, services: ServicesDep):
    """Lock evidence after an availability check (judge)."""
    try:
        return services.evidence.mark_immutable(actor, evidence_id)
    except Exception as e:
        raise to_http_error("Mark immutable", e) from e


@router.post("/{evidence_id}/verify", response_model=AvailabilityView)
def verify_availability_endpoint(evidence_id: str, actor: CurrentActor, services: ServicesDep):
    """Check that the pinned artifact is still reachable."""
    try:
        return services.evidence.verify_availability(actor, evidence_id)
    except Exception as e:
        raise to_http_error("Verify evidence", e) from e
