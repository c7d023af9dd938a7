"""Shared fixtures: a throwaway SQLite database, fake pinning and ledger backends."""

from __future__ import annotations

import hashlib
from pathlib import Path
from types import SimpleNamespace

import pytest

from justicechain.db import Database
from justicechain.db.models import Role
from justicechain.ledger import TxResult
from justicechain.storage import AvailabilityResult, PinningError, PinningService, PinResult
from justicechain.workflow import (
    Actor,
    AuditService,
    CaseService,
    EvidenceService,
    InvestigationService,
    UserService,
    WorkflowContext,
)

WALLETS = {
    "police": "0x1111111111111111111111111111111111111111",
    "forensic": "0x2222222222222222222222222222222222222222",
    "judge": "0x3333333333333333333333333333333333333333",
    "admin": "0x4444444444444444444444444444444444444444",
}


class FakePinning(PinningService):
    """In-memory content store; hashes listed in ``missing`` report unavailable."""

    name = "fake"

    def __init__(self):
        self.objects: dict[str, bytes] = {}
        self.missing: set[str] = set()
        self.fail_uploads = False
        self.checks: list[str] = []

    def gateway_url(self, content_hash: str) -> str:
        return f"https://gateway.test/ipfs/{content_hash}"

    def upload(self, src_path, name, metadata=None) -> PinResult:
        if self.fail_uploads:
            raise PinningError("pinning service rejected the file")
        data = Path(src_path).read_bytes()
        content_hash = "Qm" + hashlib.sha256(data).hexdigest()[:44]
        self.objects[content_hash] = data
        return PinResult(
            content_hash=content_hash,
            gateway_url=self.gateway_url(content_hash),
            content_uri=f"ipfs://{content_hash}",
            size=len(data),
        )

    def check_availability(self, content_hash: str) -> AvailabilityResult:
        self.checks.append(content_hash)
        url = self.gateway_url(content_hash)
        if content_hash in self.missing or content_hash not in self.objects:
            return AvailabilityResult(available=False, checked_url=url, status_code=404, error="not found")
        return AvailabilityResult(available=True, checked_url=url, status_code=200)

    def test_connection(self) -> bool:
        return True


class FakeLedger:
    """Stands in for LedgerClient; records every call and never touches a chain."""

    def __init__(self):
        self.calls: list[tuple] = []
        self.failing: set[str] = set()
        self.registered: set[tuple[str, str]] = set()
        self.before: dict[str, object] = {}
        self.anchors: dict[str, list[str]] = {}
        self.address = "0x9999999999999999999999999999999999999999"
        self._next_case = 0
        self._next_tx = 0

    def _result(self, label: str, *args, **data) -> TxResult:
        self.calls.append((label, *args))
        hook = self.before.get(label)
        if hook is not None:
            hook()
        if label in self.failing:
            return TxResult.failed(f"{label} reverted")
        self._next_tx += 1
        return TxResult(
            success=True, tx_hash=f"0x{self._next_tx:064x}", block_number=self._next_tx, data=data
        )

    def register_role(self, role, address):
        result = self._result("register_role", role, address)
        if result.success:
            self.registered.add((role, address.lower()))
        return result

    def create_case(self):
        self._next_case += 1
        return self._result("create_case", case_ref=str(self._next_case))

    def approve_case(self, case_ref):
        return self._result("approve_case", case_ref)

    def add_evidence(self, case_ref, content_hash):
        result = self._result("add_evidence", case_ref, content_hash)
        if result.success:
            self.anchors.setdefault(case_ref, []).append(content_hash)
        return result

    def submit_forensic_report(self, case_ref, content_hash):
        return self._result("submit_forensic_report", case_ref, content_hash)

    def give_verdict(self, case_ref, decision):
        return self._result("give_verdict", case_ref, decision)

    def is_role_registered(self, role, address):
        self.calls.append(("is_role_registered", role, address))
        return TxResult(success=True, data={"registered": (role, address.lower()) in self.registered})

    def get_case(self, case_ref):
        self.calls.append(("get_case", case_ref))
        if "get_case" in self.failing:
            return TxResult.failed("get_case reverted")
        return TxResult(
            success=True,
            data={
                "case_id": case_ref,
                "police_officer": self.address,
                "forensic_officer": self.address,
                "judge_officer": self.address,
                "approved": ("approve_case", case_ref) in self.calls,
                "closed": ("give_verdict", case_ref) in [c[:2] for c in self.calls],
            },
        )

    def verify_evidence(self, case_ref, index):
        self.calls.append(("verify_evidence", case_ref, index))
        stored = self.anchors.get(case_ref, [])
        if index >= len(stored):
            return TxResult.failed("index out of range")
        return TxResult(success=True, data={"content_hash": stored[index]})

    def labels(self) -> list[str]:
        return [c[0] for c in self.calls]


@pytest.fixture
def db(tmp_path):
    """Create a file-backed SQLite database with all tables."""
    database = Database(f"sqlite:///{tmp_path / 'test.db'}")
    database.create_all()
    yield database
    database.dispose()


@pytest.fixture
def pinning():
    return FakePinning()


@pytest.fixture
def ledger():
    return FakeLedger()


@pytest.fixture
def ctx(db, pinning, ledger, tmp_path):
    return WorkflowContext.build(
        db, pinning=pinning, ledger_client=ledger, upload_dir=tmp_path / "uploads"
    )


@pytest.fixture
def services(ctx):
    return SimpleNamespace(
        cases=CaseService(ctx),
        evidence=EvidenceService(ctx),
        investigation=InvestigationService(ctx),
        users=UserService(ctx),
        audit=AuditService(ctx),
    )


def _actor(view) -> Actor:
    return Actor(user_id=view.id, role=view.role)


@pytest.fixture
def admin(services):
    return _actor(services.users.create_admin("admin", wallet=WALLETS["admin"]))


@pytest.fixture
def police(services):
    return _actor(services.users.register("officer", Role.POLICE, WALLETS["police"]))


@pytest.fixture
def other_police(services):
    return _actor(
        services.users.register(
            "officer2", Role.POLICE, "0x5555555555555555555555555555555555555555"
        )
    )


@pytest.fixture
def forensic(services):
    return _actor(services.users.register("analyst", Role.FORENSIC, WALLETS["forensic"]))


@pytest.fixture
def judge(services):
    return _actor(services.users.register("judge", Role.JUDGE, WALLETS["judge"]))


@pytest.fixture
def make_upload(tmp_path):
    """Write a temp file the way the API spools an upload."""
    counter = {"n": 0}

    def _make(content: bytes = b"evidence bytes", suffix: str = ".bin") -> Path:
        counter["n"] += 1
        path = tmp_path / f"upload-{counter['n']}{suffix}"
        path.write_bytes(content)
        return path

    return _make
