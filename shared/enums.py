# =============================================================================
# REALM BEOBACHTER - SHARED ENUMS
# =============================================================================
#
# These enums define the shared vocabulary across the notifier.
#
# PROPOSAL LIFECYCLE:
# NOT_YET_VOTING -> VOTING -> CLOSED
# Only VOTING proposals are ever considered for a notification.
#
# =============================================================================

from enum import Enum


class ProposalState(Enum):
    """
    Lifecycle class of a proposal, derived from its timestamps.

    NOT_YET_VOTING: voting_at is not set.
    VOTING: voting_at is set, voting_completed_at is not.
    CLOSED: voting_completed_at is set (terminal, wins over everything).
    """
    NOT_YET_VOTING = "NOT_YET_VOTING"
    VOTING = "VOTING"
    CLOSED = "CLOSED"


class NotificationKind(Enum):
    """Kind of threshold crossing that produced a notification."""
    JUST_OPENED = "JUST_OPENED"
    CLOSING_SOON = "CLOSING_SOON"


class GovernanceAccountType(Enum):
    """
    Account type tag stored in the first byte of every governance account.

    Values follow the on-chain SPL Governance (v1) program.
    """
    UNINITIALIZED = 0
    REALM = 1
    TOKEN_OWNER_RECORD = 2
    ACCOUNT_GOVERNANCE = 3
    PROGRAM_GOVERNANCE = 4
    PROPOSAL = 5
    SIGNATORY_RECORD = 6
    VOTE_RECORD = 7
    PROPOSAL_INSTRUCTION = 8
    MINT_GOVERNANCE = 9
    TOKEN_GOVERNANCE = 10


class ProposalChainState(Enum):
    """On-chain proposal state as stored in the proposal account."""
    DRAFT = 0
    SIGNING_OFF = 1
    VOTING = 2
    SUCCEEDED = 3
    EXECUTING = 4
    COMPLETED = 5
    CANCELLED = 6
    DEFEATED = 7
    EXECUTING_WITH_ERRORS = 8
