# =============================================================================
# REALM BEOBACHTER - PROPOSAL CLASSIFIER
# =============================================================================
#
# Every proposal is in exactly one lifecycle state:
#
#   CLOSED          voting_completed_at set (checked first, always wins)
#   NOT_YET_VOTING  voting_at not set
#   VOTING          voting_at set, voting_completed_at not set
#
# Counters are for the per-tick summary line only, never for control flow.
#
# =============================================================================

from dataclasses import dataclass, field
from typing import Dict, Iterable, List

from collector.accounts import Proposal
from shared.enums import ProposalState


def classify_proposal(proposal: Proposal) -> ProposalState:
    """Lifecycle state of a single proposal."""
    if proposal.voting_completed_at is not None:
        return ProposalState.CLOSED
    if proposal.voting_at is None:
        return ProposalState.NOT_YET_VOTING
    return ProposalState.VOTING


@dataclass
class ClassificationResult:
    """Proposals grouped by state, plus counters for diagnostics."""
    voting: List[Proposal] = field(default_factory=list)
    counts: Dict[ProposalState, int] = field(
        default_factory=lambda: {state: 0 for state in ProposalState}
    )

    @property
    def closed(self) -> int:
        return self.counts[ProposalState.CLOSED]

    @property
    def not_yet_voting(self) -> int:
        return self.counts[ProposalState.NOT_YET_VOTING]

    @property
    def voting_count(self) -> int:
        return self.counts[ProposalState.VOTING]


def classify_proposals(proposals: Iterable[Proposal]) -> ClassificationResult:
    """Classify all proposals; only VOTING ones are kept for evaluation."""
    result = ClassificationResult()
    for proposal in proposals:
        state = classify_proposal(proposal)
        result.counts[state] += 1
        if state is ProposalState.VOTING:
            result.voting.append(proposal)
    return result
