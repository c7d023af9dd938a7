"""ABI of the JusticeChain ledger contract (the subset this service calls)."""

from __future__ import annotations


def _fn(name, inputs=(), outputs=(), mutability="nonpayable"):
    return {
        "type": "function",
        "name": name,
        "inputs": [{"name": n, "type": t} for n, t in inputs],
        "outputs": [{"name": n, "type": t} for n, t in outputs],
        "stateMutability": mutability,
    }


JUSTICE_CHAIN_ABI = [
    _fn("registerRole", [("role", "string"), ("account", "address")]),
    _fn("createCase", outputs=[("", "uint256")]),
    _fn("approveCase", [("caseId", "uint256")]),
    _fn("addEvidence", [("caseId", "uint256"), ("ipfsHash", "string")]),
    _fn("submitForensicReport", [("caseId", "uint256"), ("ipfsHash", "string")]),
    _fn("giveVerdict", [("caseId", "uint256"), ("decision", "string")]),
    _fn(
        "verifyEvidence",
        [("caseId", "uint256"), ("index", "uint256")],
        [("", "string")],
        mutability="view",
    ),
    _fn(
        "cases",
        [("", "uint256")],
        [
            ("caseId", "uint256"),
            ("policeOfficer", "address"),
            ("forensicOfficer", "address"),
            ("judgeOfficer", "address"),
            ("approved", "bool"),
            ("closed", "bool"),
        ],
        mutability="view",
    ),
    _fn("police", [("", "address")], [("", "bool")], mutability="view"),
    _fn("forensic", [("", "address")], [("", "bool")], mutability="view"),
    _fn("judge", [("", "address")], [("", "bool")], mutability="view"),
    {
        "type": "event",
        "name": "CaseCreated",
        "anonymous": False,
        "inputs": [
            {"name": "caseId", "type": "uint256", "indexed": True},
            {"name": "policeOfficer", "type": "address", "indexed": True},
        ],
    },
]

# view function per role for registration checks
ROLE_REGISTRY_FUNCTIONS = {
    "POLICE": "police",
    "FORENSIC": "forensic",
    "JUDGE": "judge",
}
