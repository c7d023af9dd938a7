"""Case and evidence workflow services."""

from .audit import AuditService
from .cases import CaseService
from .context import Actor, WorkflowContext
from .evidence import EvidenceService
from .investigation import InvestigationService
from .users import UserService

__all__ = [
    "Actor",
    "AuditService",
    "CaseService",
    "EvidenceService",
    "InvestigationService",
    "UserService",
    "WorkflowContext",
]
