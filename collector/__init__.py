# =============================================================================
# REALM BEOBACHTER - COLLECTOR
# Module: collector/__init__.py
# Purpose: Read-only snapshot of a realm's governances and proposals
# =============================================================================
#
# STRICT SEPARATION:
# This package ONLY fetches, decodes and filters on-chain accounts.
# It does NOT classify proposals or send notifications.
#
# =============================================================================

from .accounts import Governance, GovernanceConfig, Proposal, Snapshot
from .client import SolanaRpcClient, pubkey_filter
from .fetcher import SnapshotFetcher, fetch_governance_accounts
from .filter import filter_realm, filter_snapshot
from .registry import RealmInfo, get_realm_info

__all__ = [
    "Governance",
    "GovernanceConfig",
    "Proposal",
    "Snapshot",
    "SolanaRpcClient",
    "pubkey_filter",
    "SnapshotFetcher",
    "fetch_governance_accounts",
    "filter_realm",
    "filter_snapshot",
    "RealmInfo",
    "get_realm_info",
]
