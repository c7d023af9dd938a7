"""API request models."""

from __future__ import annotations

from pydantic import BaseModel, Field

from ..db.models import Priority, Reliability, Role, SuspectStatus, VerdictDecision

# --- Shared Constants ---
CASE_TITLE_DESC = "Short case title."
POLICE_STATION_DESC = "Police station responsible for the case."
WALLET_DESC = "Ethereum wallet address (0x followed by 40 hex digits)."
WALLET_EXAMPLE = "0x52908400098527886E0F7030069857D2E4169EE7"
USER_ID_DESC = "Internal numeric user id."

# --- Case Models ---


class CaseCreate(BaseModel):
    """
    Model for registering a case or saving it as a draft.

    Used in POST /cases requests.
    """

    title: str = Field(..., description=CASE_TITLE_DESC, examples=["Warehouse burglary"])
    description: str | None = Field(
        None, description="Free-text case description.", examples=["Break-in reported at 02:10."]
    )
    case_number: str | None = Field(
        None, description="Station-issued case number.", examples=["FIR-2024-0113"]
    )
    location: str | None = Field(None, description="Incident location.", examples=["Dock 4"])
    priority: Priority = Field(Priority.MEDIUM, description="Case priority.")
    police_station: str | None = Field(
        None, description=POLICE_STATION_DESC, examples=["Central Station"]
    )
    is_draft: bool = Field(False, description="Save as DRAFT instead of registering.")


class DraftUpdate(BaseModel):
    """
    Model for editing a draft. Only provided fields change.

    Used in PUT /cases/{case_id}/draft requests.
    """

    title: str | None = Field(None, description=CASE_TITLE_DESC)
    description: str | None = None
    case_number: str | None = None
    location: str | None = None
    priority: Priority | None = None
    police_station: str | None = Field(None, description=POLICE_STATION_DESC)


class TransferRequest(BaseModel):
    """
    Model for requesting a case transfer.

    Used in POST /cases/{case_id}/transfer requests.
    """

    to_station: str = Field(..., description="Destination police station.", examples=["North Station"])
    reason: str | None = Field(None, description="Why the case should move.")


class TransferDecision(BaseModel):
    """Used in POST /cases/{case_id}/transfer/approve and /reject requests."""

    note: str | None = Field(None, description="Decision note recorded on the timeline.")


class AssignOfficer(BaseModel):
    """Used in PUT /cases/{case_id}/assign-forensic and /assign-judge requests."""

    user_id: int = Field(..., description=USER_ID_DESC, examples=[7])


class VerdictSubmit(BaseModel):
    """
    Model for a judge's verdict.

    Used in POST /cases/{case_id}/verdict requests.
    """

    decision: VerdictDecision = Field(..., description="Verdict decision.", examples=["GUILTY"])
    summary: str | None = Field(None, description="Plain-text verdict summary.")
    html: str | None = Field(None, description="Formatted verdict document.")


class HearingCreate(BaseModel):
    """Used in POST /cases/{case_id}/hearings requests."""

    date: str = Field(..., description="Hearing date (YYYY-MM-DD).", examples=["2024-07-01"])
    time: str = Field(..., description="Hearing time (HH:MM).", examples=["10:30"])
    location: str | None = Field(None, description="Courtroom.", examples=["Court 3"])
    notes: str | None = None


# --- Evidence Models ---


class AnalysisSubmit(BaseModel):
    """Used in PUT /evidence/{evidence_id}/analysis requests."""

    report: str = Field(..., description="Forensic analysis report.")
    notes: str | None = Field(None, description="Additional analyst notes.")


# --- Investigation Models ---


class NoteCreate(BaseModel):
    title: str = Field(..., examples=["Canvass results"])
    content: str
    tags: list[str] = Field(default_factory=list)
    is_confidential: bool = False


class NoteUpdate(BaseModel):
    title: str | None = None
    content: str | None = None
    tags: list[str] | None = None


class SuspectCreate(BaseModel):
    name: str = Field(..., examples=["J. Doe"])
    age: int | None = Field(None, ge=0)
    gender: str | None = None
    address: str | None = None
    description: str | None = None


class SuspectStatusUpdate(BaseModel):
    status: SuspectStatus = Field(..., examples=["ARRESTED"])


class WitnessCreate(BaseModel):
    name: str
    statement: str
    contact: str | None = None
    address: str | None = None
    reliability: Reliability = Reliability.MEDIUM


class WitnessReliabilityUpdate(BaseModel):
    reliability: Reliability


# --- Identity Models ---


class UserRegister(BaseModel):
    """
    Model for self-registration.

    Used in POST /auth/register requests.
    """

    username: str = Field(..., examples=["officer.k"])
    role: Role = Field(..., description="POLICE, FORENSIC or JUDGE.", examples=["POLICE"])
    wallet: str = Field(..., description=WALLET_DESC, examples=[WALLET_EXAMPLE])
    email: str | None = Field(None, examples=["officer.k@example.org"])
    full_name: str | None = None


class WalletUpdate(BaseModel):
    """Used in PUT /auth/wallet requests."""

    wallet: str = Field(..., description=WALLET_DESC, examples=[WALLET_EXAMPLE])


class RoleVerification(BaseModel):
    """Used in POST /auth/verify-role requests."""

    wallet: str = Field(..., description=WALLET_DESC, examples=[WALLET_EXAMPLE])
    role: Role
