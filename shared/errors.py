# =============================================================================
# REALM BEOBACHTER - ERRORS
# =============================================================================
#
# None of these are fatal to the process. Fetch and decode errors escape a
# tick and are caught by the scheduler; config errors stop startup only.
#
# =============================================================================


class NotifierError(Exception):
    """Base class for all notifier errors."""


class ConfigError(NotifierError):
    """Raised when the notifier configuration is invalid."""


class RpcError(NotifierError):
    """Raised when the JSON-RPC node cannot deliver account data."""

    def __init__(self, message: str, method: str = "", attempts: int = 0):
        super().__init__(message)
        self.method = method
        self.attempts = attempts


class AccountDecodeError(NotifierError):
    """Raised when raw account bytes do not match the expected layout."""

    def __init__(self, message: str, account_id: str = ""):
        if account_id:
            message = f"{account_id}: {message}"
        super().__init__(message)
        self.account_id = account_id
