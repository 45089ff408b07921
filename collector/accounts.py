# =============================================================================
# REALM BEOBACHTER - GOVERNANCE ACCOUNTS
# Module: collector/accounts.py
# Purpose: Decode raw SPL Governance accounts into immutable records
# =============================================================================
#
# LAYOUT:
# Accounts are borsh-serialized (little endian). The first byte is the
# account type tag, followed by the owning address at offset 1 (realm for a
# governance, governance for a proposal). The RPC filters rely on that.
#
# Option<T>  = u8 tag (0/1) + T
# String     = u32 length + utf-8 bytes
# Pubkey     = 32 raw bytes, shown base58 encoded
#
# DESIGN:
# - Records are frozen: nothing downstream mutates a snapshot
# - Trailing bytes are ignored (accounts are allocated with padding)
# - Truncated data raises AccountDecodeError
#
# =============================================================================

import struct
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, Optional, Tuple

import base58

from shared.enums import GovernanceAccountType, ProposalChainState
from shared.errors import AccountDecodeError

PUBKEY_LENGTH = 32

# Byte offset of the owner address (realm / governance) in every account
OWNER_OFFSET = 1


class BorshReader:
    """Sequential reader over a borsh-encoded byte buffer."""

    def __init__(self, data: bytes, account_id: str = ""):
        self.data = data
        self.offset = 0
        self.account_id = account_id

    def _take(self, size: int) -> bytes:
        end = self.offset + size
        if end > len(self.data):
            raise AccountDecodeError(
                f"unexpected end of data at offset {self.offset} "
                f"(need {size} bytes, have {len(self.data) - self.offset})",
                account_id=self.account_id,
            )
        chunk = self.data[self.offset:end]
        self.offset = end
        return chunk

    def _unpack(self, fmt: str, size: int):
        return struct.unpack(fmt, self._take(size))[0]

    def u8(self) -> int:
        return self._unpack("<B", 1)

    def u16(self) -> int:
        return self._unpack("<H", 2)

    def u32(self) -> int:
        return self._unpack("<I", 4)

    def u64(self) -> int:
        return self._unpack("<Q", 8)

    def i64(self) -> int:
        return self._unpack("<q", 8)

    def pubkey(self) -> str:
        return base58.b58encode(self._take(PUBKEY_LENGTH)).decode("ascii")

    def string(self) -> str:
        length = self.u32()
        raw = self._take(length)
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise AccountDecodeError(f"invalid utf-8 string: {e}", account_id=self.account_id)

    def option(self, read):
        tag = self.u8()
        if tag == 0:
            return None
        if tag == 1:
            return read()
        raise AccountDecodeError(
            f"invalid option tag {tag} at offset {self.offset - 1}",
            account_id=self.account_id,
        )


# =============================================================================
# RECORDS
# =============================================================================

@dataclass(frozen=True)
class VoteThresholdPercentage:
    """Threshold kind (0 = YesVote, 1 = Quorum) and percentage."""
    kind: int
    value: int


@dataclass(frozen=True)
class GovernanceConfig:
    """Governance rules. Only max_voting_time drives notifications."""
    vote_threshold_percentage: VoteThresholdPercentage
    min_community_tokens_to_create_proposal: int
    min_instruction_hold_up_time: int
    max_voting_time: int  # seconds
    vote_weight_source: int
    proposal_cool_off_time: int
    min_council_tokens_to_create_proposal: int


@dataclass(frozen=True)
class Governance:
    """A voting body of a realm."""
    id: str
    account_type: GovernanceAccountType
    realm_id: str
    governed_account: str
    config: GovernanceConfig
    proposals_count: int

    ACCOUNT_TYPES = (
        GovernanceAccountType.ACCOUNT_GOVERNANCE,
        GovernanceAccountType.PROGRAM_GOVERNANCE,
        GovernanceAccountType.MINT_GOVERNANCE,
        GovernanceAccountType.TOKEN_GOVERNANCE,
    )

    @property
    def max_voting_time(self) -> int:
        return self.config.max_voting_time


@dataclass(frozen=True)
class Proposal:
    """
    A single governance decision.

    voting_at / voting_completed_at are unix timestamps in seconds. They are
    the only fields the notifier looks at; the rest is kept for logging.
    """
    id: str
    governance_id: str
    name: str
    voting_at: Optional[int] = None
    voting_completed_at: Optional[int] = None
    governing_token_mint: str = ""
    state: Optional[ProposalChainState] = None
    draft_at: Optional[int] = None
    signing_off_at: Optional[int] = None
    executing_at: Optional[int] = None
    closed_at: Optional[int] = None
    description_link: str = ""

    ACCOUNT_TYPES = (GovernanceAccountType.PROPOSAL,)

    def voting_started(self) -> Optional[datetime]:
        """voting_at as an aware UTC datetime (None if not started)."""
        if self.voting_at is None:
            return None
        return datetime.fromtimestamp(self.voting_at, tz=timezone.utc)


@dataclass(frozen=True)
class Snapshot:
    """All governances and proposals observed at one point in time."""
    governances: Dict[str, Governance] = field(default_factory=dict)
    proposals: Dict[str, Proposal] = field(default_factory=dict)
    fetched_at: Optional[float] = None

    def governance_for(self, proposal: Proposal) -> Optional[Governance]:
        """Owning governance of a proposal, or None if it is not in the snapshot."""
        return self.governances.get(proposal.governance_id)


# =============================================================================
# DECODING
# =============================================================================

def _account_type(reader: BorshReader, expected: Tuple[GovernanceAccountType, ...]) -> GovernanceAccountType:
    tag = reader.u8()
    try:
        account_type = GovernanceAccountType(tag)
    except ValueError:
        raise AccountDecodeError(f"unknown account type {tag}", account_id=reader.account_id)
    if account_type not in expected:
        raise AccountDecodeError(
            f"account type {account_type.name} is not one of "
            f"{[t.name for t in expected]}",
            account_id=reader.account_id,
        )
    return account_type


def _vote_threshold(reader: BorshReader) -> VoteThresholdPercentage:
    return VoteThresholdPercentage(kind=reader.u8(), value=reader.u8())


def decode_governance(account_id: str, data: bytes) -> Governance:
    """
    Decode a governance account.

    Raises:
        AccountDecodeError: If the data is not a governance account
    """
    reader = BorshReader(data, account_id)
    account_type = _account_type(reader, Governance.ACCOUNT_TYPES)
    realm_id = reader.pubkey()
    governed_account = reader.pubkey()

    config = GovernanceConfig(
        vote_threshold_percentage=_vote_threshold(reader),
        min_community_tokens_to_create_proposal=reader.u64(),
        min_instruction_hold_up_time=reader.u32(),
        max_voting_time=reader.u32(),
        vote_weight_source=reader.u8(),
        proposal_cool_off_time=reader.u32(),
        min_council_tokens_to_create_proposal=reader.u64(),
    )

    return Governance(
        id=account_id,
        account_type=account_type,
        realm_id=realm_id,
        governed_account=governed_account,
        config=config,
        proposals_count=reader.u32(),
    )


def decode_proposal(account_id: str, data: bytes) -> Proposal:
    """
    Decode a proposal account.

    Raises:
        AccountDecodeError: If the data is not a proposal account
    """
    reader = BorshReader(data, account_id)
    _account_type(reader, Proposal.ACCOUNT_TYPES)

    governance_id = reader.pubkey()
    governing_token_mint = reader.pubkey()
    raw_state = reader.u8()
    try:
        state = ProposalChainState(raw_state)
    except ValueError:
        raise AccountDecodeError(f"unknown proposal state {raw_state}", account_id=account_id)

    reader.pubkey()  # token_owner_record
    reader.u8()  # signatories_count
    reader.u8()  # signatories_signed_off_count
    reader.u64()  # yes_votes_count
    reader.u64()  # no_votes_count
    reader.u16()  # instructions_executed_count
    reader.u16()  # instructions_count
    reader.u16()  # instructions_next_index

    draft_at = reader.i64()
    signing_off_at = reader.option(reader.i64)
    voting_at = reader.option(reader.i64)
    reader.option(reader.u64)  # voting_at_slot
    voting_completed_at = reader.option(reader.i64)
    executing_at = reader.option(reader.i64)
    closed_at = reader.option(reader.i64)
    reader.u8()  # execution_flags
    reader.option(reader.u64)  # max_vote_weight
    reader.option(lambda: _vote_threshold(reader))

    name = reader.string()
    description_link = reader.string()

    return Proposal(
        id=account_id,
        governance_id=governance_id,
        name=name,
        voting_at=voting_at,
        voting_completed_at=voting_completed_at,
        governing_token_mint=governing_token_mint,
        state=state,
        draft_at=draft_at,
        signing_off_at=signing_off_at,
        executing_at=executing_at,
        closed_at=closed_at,
        description_link=description_link,
    )


# Record kind -> decoder
DECODERS = {
    Governance: decode_governance,
    Proposal: decode_proposal,
}


def account_types_for(record_kind) -> Tuple[GovernanceAccountType, ...]:
    """Account type tags that decode to the given record kind."""
    return record_kind.ACCOUNT_TYPES
