# =============================================================================
# REALM BEOBACHTER - MOCK DATA GENERATORS
# =============================================================================
#
# PURPOSE:
# Build governances, proposals and raw account bytes for tests without any
# network access.
#
# =============================================================================

import base64
import struct
from typing import Dict, Optional

import base58

from collector.accounts import (
    Governance,
    GovernanceConfig,
    Proposal,
    Snapshot,
    VoteThresholdPercentage,
)
from collector.registry import RealmInfo
from shared.enums import GovernanceAccountType

NOW = 1_700_000_000


def address(seed: int) -> str:
    """Deterministic, valid base58 address from a small integer."""
    return base58.b58encode(bytes([seed % 256]) * 32).decode("ascii")


PROGRAM_ID = address(1)
REALM_ID = address(2)
OTHER_REALM_ID = address(3)
GOVERNANCE_ID = address(10)
OTHER_GOVERNANCE_ID = address(11)

TEST_REALM = RealmInfo(
    symbol="TEST",
    display_name="Test DAO",
    program_id=PROGRAM_ID,
    realm_id=REALM_ID,
    proposal_url="https://dao.example/dao/{symbol}/proposal/{proposal_id}",
)


def make_governance(
    governance_id: str = GOVERNANCE_ID,
    realm_id: str = REALM_ID,
    max_voting_time: int = 86400,
) -> Governance:
    return Governance(
        id=governance_id,
        account_type=GovernanceAccountType.MINT_GOVERNANCE,
        realm_id=realm_id,
        governed_account=address(99),
        config=GovernanceConfig(
            vote_threshold_percentage=VoteThresholdPercentage(kind=0, value=60),
            min_community_tokens_to_create_proposal=1_000_000,
            min_instruction_hold_up_time=0,
            max_voting_time=max_voting_time,
            vote_weight_source=0,
            proposal_cool_off_time=0,
            min_council_tokens_to_create_proposal=1,
        ),
        proposals_count=1,
    )


def make_proposal(
    proposal_id: str = "proposal-1",
    governance_id: str = GOVERNANCE_ID,
    name: str = "Test Proposal",
    voting_at: Optional[int] = None,
    voting_completed_at: Optional[int] = None,
) -> Proposal:
    return Proposal(
        id=proposal_id,
        governance_id=governance_id,
        name=name,
        voting_at=voting_at,
        voting_completed_at=voting_completed_at,
    )


def make_snapshot(*records) -> Snapshot:
    governances: Dict[str, Governance] = {}
    proposals: Dict[str, Proposal] = {}
    for record in records:
        if isinstance(record, Governance):
            governances[record.id] = record
        else:
            proposals[record.id] = record
    return Snapshot(governances=governances, proposals=proposals, fetched_at=NOW)


# =============================================================================
# RAW ACCOUNT BYTES (borsh layout)
# =============================================================================

def _pubkey_bytes(pubkey: str) -> bytes:
    return base58.b58decode(pubkey)


def _option(fmt: str, value) -> bytes:
    if value is None:
        return b"\x00"
    return b"\x01" + struct.pack(fmt, value)


def _string(text: str) -> bytes:
    raw = text.encode("utf-8")
    return struct.pack("<I", len(raw)) + raw


def governance_account_bytes(
    realm_id: str = REALM_ID,
    max_voting_time: int = 259200,
    account_type: int = GovernanceAccountType.PROGRAM_GOVERNANCE.value,
    proposals_count: int = 4,
) -> bytes:
    return b"".join([
        struct.pack("<B", account_type),
        _pubkey_bytes(realm_id),
        _pubkey_bytes(address(99)),
        struct.pack("<BB", 0, 60),           # vote_threshold_percentage
        struct.pack("<Q", 10_000_000),       # min_community_tokens_to_create_proposal
        struct.pack("<I", 0),                # min_instruction_hold_up_time
        struct.pack("<I", max_voting_time),
        struct.pack("<B", 0),                # vote_weight_source
        struct.pack("<I", 0),                # proposal_cool_off_time
        struct.pack("<Q", 1),                # min_council_tokens_to_create_proposal
        struct.pack("<I", proposals_count),
    ])


def proposal_account_bytes(
    governance_id: str = GOVERNANCE_ID,
    name: str = "Test Proposal",
    state: int = 2,
    draft_at: int = NOW - 7200,
    voting_at: Optional[int] = None,
    voting_completed_at: Optional[int] = None,
    description_link: str = "https://forum.example/t/1",
) -> bytes:
    return b"".join([
        struct.pack("<B", GovernanceAccountType.PROPOSAL.value),
        _pubkey_bytes(governance_id),
        _pubkey_bytes(address(20)),          # governing_token_mint
        struct.pack("<B", state),
        _pubkey_bytes(address(21)),          # token_owner_record
        struct.pack("<BB", 1, 1),            # signatories
        struct.pack("<QQ", 500, 20),         # yes / no votes
        struct.pack("<HHH", 0, 1, 1),        # instructions
        struct.pack("<q", draft_at),
        _option("<q", draft_at + 60),        # signing_off_at
        _option("<q", voting_at),
        _option("<Q", 123456 if voting_at is not None else None),
        _option("<q", voting_completed_at),
        _option("<q", None),                 # executing_at
        _option("<q", None),                 # closed_at
        struct.pack("<B", 0),                # execution_flags
        _option("<Q", None),                 # max_vote_weight
        b"\x00",                             # vote_threshold_percentage
        _string(name),
        _string(description_link),
    ])


def rpc_account_entry(pubkey: str, data: bytes) -> dict:
    """One element of a getProgramAccounts result."""
    return {
        "pubkey": pubkey,
        "account": {
            "data": [base64.b64encode(data).decode("ascii"), "base64"],
            "executable": False,
            "lamports": 1_000_000,
            "owner": PROGRAM_ID,
        },
    }
