# =============================================================================
# REALM BEOBACHTER - THRESHOLD EVALUATOR
# =============================================================================
#
# There is no record of sent notifications. Each event is reported once
# because its window is matched to the poll cadence:
#
# JUST OPENED
#   elapsed = now - voting_at
#   fires iff 0 <= elapsed <= poll_interval + tolerance
#   The window covers a full poll interval, so a proposal opening anywhere
#   between two ticks is seen by the next one. Tolerance absorbs jitter.
#
# CLOSING SOON
#   closes_at = voting_at + governance.max_voting_time
#   remaining = closes_at - now
#   window    = closing_in_hours * 3600
#   fires iff window - poll_interval < remaining < window + tolerance
#   Wide on the early side, narrow on the late side.
#
# KNOWN LIMITATION:
#   A tick that runs late by more than tolerance can miss a closing-soon
#   event entirely.
#
# =============================================================================

import logging
from dataclasses import dataclass
from typing import Optional

from collector.accounts import Governance, Proposal

logger = logging.getLogger(__name__)

SECONDS_PER_HOUR = 60 * 60

POLL_INTERVAL_SECONDS = 5 * 60
TOLERANCE_SECONDS = 30
DEFAULT_CLOSING_IN_HOURS = 4


@dataclass(frozen=True)
class WindowSettings:
    """Window parameters shared by both checks."""
    poll_interval_seconds: int = POLL_INTERVAL_SECONDS
    tolerance_seconds: int = TOLERANCE_SECONDS
    closing_in_hours: int = 6

    @property
    def open_window(self) -> int:
        return self.poll_interval_seconds + self.tolerance_seconds

    @property
    def closing_window(self) -> float:
        return self.closing_in_hours * SECONDS_PER_HOUR


def just_opened(
    proposal: Proposal,
    now: float,
    settings: WindowSettings = WindowSettings(),
) -> bool:
    """
    True if voting on the proposal started within the last open window.

    Args:
        proposal: A VOTING proposal
        now: Current tick time (unix seconds)
        settings: Window parameters

    Returns:
        Whether the "opened for voting" notification fires
    """
    if proposal.voting_at is None:
        return False
    elapsed = now - proposal.voting_at
    return 0 <= elapsed <= settings.open_window


def closing_remaining(proposal: Proposal, governance: Optional[Governance], now: float) -> Optional[float]:
    """Seconds until voting closes, or None if it cannot be computed."""
    if governance is None or proposal.voting_at is None:
        return None
    closes_at = proposal.voting_at + governance.max_voting_time
    return closes_at - now


def closing_soon(
    proposal: Proposal,
    governance: Optional[Governance],
    now: float,
    settings: WindowSettings = WindowSettings(),
) -> bool:
    """
    True if the proposal closes in about settings.closing_in_hours.

    A missing governance is a data gap, not an error: the check is skipped.

    Args:
        proposal: A VOTING proposal
        governance: Owning governance (None if not in the realm snapshot)
        now: Current tick time (unix seconds)
        settings: Window parameters

    Returns:
        Whether the "closing in N hours" notification fires
    """
    if governance is None:
        logger.warning(
            f"Governance {proposal.governance_id} of proposal {proposal.id} not found, "
            f"skipping closing check"
        )
        return False

    remaining = closing_remaining(proposal, governance, now)
    if remaining is None:
        return False

    window = settings.closing_window
    return window - settings.poll_interval_seconds < remaining < window + settings.tolerance_seconds


def warn_when_closing(
    proposal: Proposal,
    governance: Optional[Governance],
    now: float,
    closing_in_hours: int = DEFAULT_CLOSING_IN_HOURS,
    poll_interval_seconds: int = POLL_INTERVAL_SECONDS,
    tolerance_seconds: int = TOLERANCE_SECONDS,
) -> bool:
    """closing_soon with loose parameters; the notifier passes 6 hours."""
    settings = WindowSettings(
        poll_interval_seconds=poll_interval_seconds,
        tolerance_seconds=tolerance_seconds,
        closing_in_hours=closing_in_hours,
    )
    return closing_soon(proposal, governance, now, settings)
