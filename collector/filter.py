# =============================================================================
# REALM BEOBACHTER - REALM FILTER
# Module: collector/filter.py
# Purpose: Restrict a raw snapshot to the governances of one realm
# =============================================================================
#
# Pure function, no side effects. An unknown or misconfigured realm simply
# yields an empty snapshot ("nothing to report this tick").
#
# =============================================================================

import logging
from typing import Dict, Tuple

from .accounts import Governance, Proposal, Snapshot

logger = logging.getLogger(__name__)


def filter_realm(
    governances: Dict[str, Governance],
    proposals: Dict[str, Proposal],
    realm_id: str,
) -> Tuple[Dict[str, Governance], Dict[str, Proposal]]:
    """
    Keep governances owned by realm_id and the proposals owned by those.

    Args:
        governances: All governances by id
        proposals: All proposals by id
        realm_id: Target realm address

    Returns:
        (realm governances, realm proposals)
    """
    realm_governances = {
        governance_id: governance
        for governance_id, governance in governances.items()
        if governance.realm_id == realm_id
    }

    realm_proposals = {
        proposal_id: proposal
        for proposal_id, proposal in proposals.items()
        if proposal.governance_id in realm_governances
    }

    logger.debug(
        f"Realm filter {realm_id}: governances {len(governances)} -> {len(realm_governances)}, "
        f"proposals {len(proposals)} -> {len(realm_proposals)}"
    )
    return realm_governances, realm_proposals


def filter_snapshot(snapshot: Snapshot, realm_id: str) -> Snapshot:
    """Snapshot variant of filter_realm."""
    governances, proposals = filter_realm(snapshot.governances, snapshot.proposals, realm_id)
    return Snapshot(
        governances=governances,
        proposals=proposals,
        fetched_at=snapshot.fetched_at,
    )
