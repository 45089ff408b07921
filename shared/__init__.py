# =============================================================================
# REALM BEOBACHTER - SHARED MODULE
# =============================================================================
#
# Shared utilities used by the collector, the governance notifier and the
# scheduler. No business logic lives here.
#
# CONTENTS:
# - Enums (shared type definitions)
# - Errors
# - Logging setup
# - Configuration (shared.config, imported directly)
#
# =============================================================================

from .enums import ProposalState, NotificationKind, GovernanceAccountType
from .errors import NotifierError, ConfigError, RpcError, AccountDecodeError
from .logging_config import setup_logging

__all__ = [
    "ProposalState",
    "NotificationKind",
    "GovernanceAccountType",
    "NotifierError",
    "ConfigError",
    "RpcError",
    "AccountDecodeError",
    "setup_logging",
]
