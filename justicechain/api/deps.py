"""Request-scoped access to the services built in ``create_app``."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends, Request

from ..workflow import (
    AuditService,
    CaseService,
    EvidenceService,
    InvestigationService,
    UserService,
    WorkflowContext,
)


@dataclass
class Services:
    ctx: WorkflowContext
    cases: CaseService
    evidence: EvidenceService
    investigation: InvestigationService
    users: UserService
    audit: AuditService

    @classmethod
    def build(cls, ctx: WorkflowContext) -> Services:
        return cls(
            ctx=ctx,
            cases=CaseService(ctx),
            evidence=EvidenceService(ctx),
            investigation=InvestigationService(ctx),
            users=UserService(ctx),
            audit=AuditService(ctx),
        )


def get_services(request: Request) -> Services:
    return request.app.state.services


ServicesDep = Annotated[Services, Depends(get_services)]
