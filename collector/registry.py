# =============================================================================
# REALM BEOBACHTER - REALM REGISTRY
# Module: collector/registry.py
# Purpose: Known realms (program id, realm id, proposal deep link)
# =============================================================================
#
# A realm is identified by its short symbol (e.g. "MNGO"). The registry only
# maps that symbol to on-chain addresses; it does not touch the network.
#
# =============================================================================

from dataclasses import dataclass, replace
from typing import Dict, Optional


@dataclass(frozen=True)
class RealmInfo:
    """On-chain identity of a realm and where its proposals are shown."""
    symbol: str
    display_name: str
    program_id: str
    realm_id: str
    # Must contain "{proposal_id}"
    proposal_url: str

    def proposal_link(self, proposal_id: str) -> str:
        """Build the deep link for a single proposal."""
        return self.proposal_url.format(symbol=self.symbol, proposal_id=proposal_id)

    def with_overrides(
        self,
        program_id: Optional[str] = None,
        realm_id: Optional[str] = None,
        proposal_url: Optional[str] = None,
    ) -> "RealmInfo":
        """Return a copy with any non-empty override applied."""
        return replace(
            self,
            program_id=program_id or self.program_id,
            realm_id=realm_id or self.realm_id,
            proposal_url=proposal_url or self.proposal_url,
        )


DEFAULT_PROPOSAL_URL = "https://dao-beta.mango.markets/dao/{symbol}/proposal/{proposal_id}"

REALMS: Dict[str, RealmInfo] = {
    "MNGO": RealmInfo(
        symbol="MNGO",
        display_name="Mango DAO",
        program_id="GqTPL6qRf5aUuqscLh8Rg2HTxPUXfhhAXDptTLhp1t2J",
        realm_id="DPiH3H3c7t47BMxqTxLsuPQpEC6Kne8GA9VXbxpnZxFE",
        proposal_url=DEFAULT_PROPOSAL_URL,
    ),
}


def get_realm_info(symbol: str) -> Optional[RealmInfo]:
    """Look up a realm by symbol (case-insensitive). None if unknown."""
    if not symbol:
        return None
    return REALMS.get(symbol.strip().upper())
