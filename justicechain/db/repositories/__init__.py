"""Domain-specific repositories for database operations.

This package contains focused repository classes for each domain:
- UserRepository: Identity store
- CaseRepository: Cases, timeline entries and hearings
- EvidenceRepository: Evidence records and custody entries
- InvestigationRepository: Notes, suspects and witnesses
- ActivityRepository: Audit trail
- JobRunRepository: Integrity sweep runs

Each repository is instantiated with a Session and used independently.
"""

from .activity import ActivityRepository
from .cases import CaseRepository
from .evidence import EvidenceRepository
from .investigation import InvestigationRepository
from .jobrun import JobRunRepository
from .users import UserRepository

__all__ = [
    "ActivityRepository",
    "CaseRepository",
    "EvidenceRepository",
    "InvestigationRepository",
    "JobRunRepository",
    "UserRepository",
]
