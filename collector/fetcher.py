# =============================================================================
# REALM BEOBACHTER - SNAPSHOT FETCHER
# Module: collector/fetcher.py
# Purpose: Load all governances and proposals of a realm from the chain
# =============================================================================
#
# PIPELINE:
# 1. Governances owned by the realm (memcmp on offset 1 = realm)
# 2. Proposals per governance (memcmp on offset 1 = governance), fanned out
#    concurrently and merged into one mapping keyed by proposal id
#
# Errors are NOT handled here. A failed fetch aborts the tick and is logged
# by the scheduler.
#
# =============================================================================

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, List, Optional

from shared.errors import AccountDecodeError

from .accounts import DECODERS, OWNER_OFFSET, Governance, Proposal, Snapshot, account_types_for
from .client import SolanaRpcClient, pubkey_filter
from .registry import RealmInfo

logger = logging.getLogger(__name__)


def fetch_governance_accounts(
    client: SolanaRpcClient,
    program_id: str,
    record_kind,
    filters: Optional[List[Dict[str, Any]]] = None,
) -> Dict[str, Any]:
    """
    Fetch and decode all program accounts of one record kind.

    Accounts whose type tag belongs to another record kind are skipped,
    since a memcmp on offset 1 can match several account types.

    Args:
        client: RPC client
        program_id: Governance program address
        record_kind: Governance or Proposal
        filters: memcmp filters

    Returns:
        Dict mapping account id to decoded record

    Raises:
        RpcError: On fetch failure
        AccountDecodeError: If an account of the right type is malformed
    """
    decode = DECODERS[record_kind]
    wanted = {t.value for t in account_types_for(record_kind)}

    raw_accounts = client.get_program_accounts(program_id, filters)

    records: Dict[str, Any] = {}
    skipped = 0
    for account_id, data in raw_accounts.items():
        if not data:
            raise AccountDecodeError("empty account data", account_id=account_id)
        if data[0] not in wanted:
            skipped += 1
            continue
        records[account_id] = decode(account_id, data)

    if skipped:
        logger.debug(f"Skipped {skipped} non-{record_kind.__name__} accounts")
    return records


class SnapshotFetcher:
    """
    Fetches a fresh Snapshot of one realm per call.

    Holds no state between calls apart from the RPC client.
    """

    MAX_WORKERS = 8

    def __init__(self, client: SolanaRpcClient, realm: RealmInfo, max_workers: int = MAX_WORKERS):
        self.client = client
        self.realm = realm
        self.max_workers = max_workers

    def fetch_governances(self) -> Dict[str, Governance]:
        return fetch_governance_accounts(
            self.client,
            self.realm.program_id,
            Governance,
            [pubkey_filter(OWNER_OFFSET, self.realm.realm_id)],
        )

    def fetch_proposals(self, governance_id: str) -> Dict[str, Proposal]:
        return fetch_governance_accounts(
            self.client,
            self.realm.program_id,
            Proposal,
            [pubkey_filter(OWNER_OFFSET, governance_id)],
        )

    def fetch(self) -> Snapshot:
        """
        Fetch governances, then all of their proposals concurrently.

        Returns:
            Snapshot of the realm at call time
        """
        fetched_at = time.time()

        governances = self.fetch_governances()
        logger.info(f"Fetched {len(governances)} governances for {self.realm.symbol}")

        proposals: Dict[str, Proposal] = {}
        if governances:
            workers = min(self.max_workers, len(governances))
            with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="proposals") as pool:
                # map() re-raises the first failure when results are consumed
                for batch in pool.map(self.fetch_proposals, list(governances)):
                    proposals.update(batch)

        logger.info(f"Fetched {len(proposals)} proposals for {self.realm.symbol}")
        return Snapshot(governances=governances, proposals=proposals, fetched_at=fetched_at)
