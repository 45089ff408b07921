"""
Proposal Notifier - Meldet Proposals, die gerade zur Abstimmung geoeffnet
wurden oder bald schliessen.

DESIGN:
=======
- run_tick() ist eine reine Funktion: (now, snapshot, config) -> TickResult
- Alle Seiteneffekte (Fetch, Senden, Logging) passieren in
  run_notifier_tick() und dispatch_events()
- Kein Zustand zwischen Ticks, keine gespeicherten "bereits gemeldet"-IDs
- Webhook-Versand ist fire-and-forget

USAGE:
    python -m governance          # Kontinuierlich (alle 5 Minuten)
    python -m governance --once   # Einmal pruefen
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Optional

from collector.accounts import Proposal, Snapshot
from collector.filter import filter_snapshot
from collector.registry import RealmInfo
from shared.config import NotifierConfig
from shared.enums import NotificationKind
from notifications.webhook import post_detached

from .classifier import classify_proposals
from .thresholds import WindowSettings, closing_soon, just_opened

logger = logging.getLogger("proposal_notifier")

# (url, text) -> anything; result is ignored
Sender = Callable[[str, str], object]


# =============================================================================
# DATA STRUCTURES
# =============================================================================

@dataclass(frozen=True)
class NotificationEvent:
    """One fired check for one proposal."""
    kind: NotificationKind
    proposal_id: str
    proposal_name: str
    message: str
    closing_in_hours: Optional[int] = None


@dataclass
class TickResult:
    """Everything one tick decided, before any side effect."""
    events: list[NotificationEvent] = field(default_factory=list)
    count_just_opened: int = 0
    count_closing_soon: int = 0
    count_not_yet_voting: int = 0
    count_voting: int = 0
    count_closed: int = 0

    def summary_line(self) -> str:
        return (
            f"-- countJustOpenedForVoting: {self.count_just_opened}, "
            f"countVotingNotStartedYet: {self.count_not_yet_voting}, "
            f"countClosed: {self.count_closed}"
        )

    def events_of(self, kind: NotificationKind) -> list[NotificationEvent]:
        return [e for e in self.events if e.kind is kind]


# =============================================================================
# MESSAGES
# =============================================================================

def format_message(
    kind: NotificationKind,
    proposal: Proposal,
    realm: RealmInfo,
    closing_in_hours: Optional[int] = None,
) -> str:
    """Human-readable message with a deep link to the proposal."""
    link = realm.proposal_link(proposal.id)
    if kind is NotificationKind.JUST_OPENED:
        return f"“{proposal.name}” proposal just opened for voting 🗳 {link}"
    return f"“{proposal.name}” proposal closing in {closing_in_hours} hours 🗳 {link}"


def window_settings(config: NotifierConfig) -> WindowSettings:
    return WindowSettings(
        poll_interval_seconds=config.poll_interval_seconds,
        tolerance_seconds=config.tolerance_seconds,
        closing_in_hours=config.closing_in_hours,
    )


# =============================================================================
# PURE TICK
# =============================================================================

def run_tick(now: float, snapshot: Snapshot, config: NotifierConfig) -> TickResult:
    """
    Decide which notifications fire for this snapshot at time now.

    Args:
        now: Tick time in unix seconds
        snapshot: Raw snapshot (filtered to the configured realm here)
        config: Notifier configuration with a resolved realm

    Returns:
        TickResult with events and counters
    """
    realm = config.realm or config.resolve_realm()
    return evaluate_snapshot(now, filter_snapshot(snapshot, realm.realm_id), config)


def evaluate_snapshot(now: float, realm_snapshot: Snapshot, config: NotifierConfig) -> TickResult:
    """
    Classify and evaluate an already realm-filtered snapshot.

    Proposals whose governance is missing from the snapshot are still
    checked for "just opened"; only the closing check is skipped.
    """
    realm = config.realm or config.resolve_realm()
    settings = window_settings(config)

    classified = classify_proposals(realm_snapshot.proposals.values())

    result = TickResult(
        count_not_yet_voting=classified.not_yet_voting,
        count_voting=classified.voting_count,
        count_closed=classified.closed,
    )

    for proposal in classified.voting:
        if just_opened(proposal, now, settings):
            result.count_just_opened += 1
            result.events.append(NotificationEvent(
                kind=NotificationKind.JUST_OPENED,
                proposal_id=proposal.id,
                proposal_name=proposal.name,
                message=format_message(NotificationKind.JUST_OPENED, proposal, realm),
            ))

        # Independent of the check above; both may fire in one tick
        governance = realm_snapshot.governance_for(proposal)
        if closing_soon(proposal, governance, now, settings):
            result.count_closing_soon += 1
            result.events.append(NotificationEvent(
                kind=NotificationKind.CLOSING_SOON,
                proposal_id=proposal.id,
                proposal_name=proposal.name,
                message=format_message(
                    NotificationKind.CLOSING_SOON, proposal, realm, settings.closing_in_hours
                ),
                closing_in_hours=settings.closing_in_hours,
            ))

    return result


# =============================================================================
# SIDE EFFECTS
# =============================================================================

def _toggle_for(kind: NotificationKind, config: NotifierConfig) -> bool:
    if kind is NotificationKind.JUST_OPENED:
        return config.notify_on_open
    return config.notify_on_closing


def dispatch_events(
    events: list[NotificationEvent],
    config: NotifierConfig,
    sender: Sender = post_detached,
) -> int:
    """
    Log every event and forward it to the webhook where enabled.

    Returns:
        Number of events handed to the sender
    """
    forwarded = 0
    for event in events:
        logger.info(event.message)
        if config.should_send(_toggle_for(event.kind, config)):
            sender(config.webhook_url, event.message)
            forwarded += 1
    return forwarded


def run_notifier_tick(
    config: NotifierConfig,
    fetch: Callable[[], Snapshot],
    sender: Sender = post_detached,
    now: Optional[float] = None,
) -> TickResult:
    """
    One full tick: fetch, decide, log, send.

    Fetch errors propagate to the caller (the scheduler).
    """
    now = time.time() if now is None else now

    snapshot = fetch()

    logger.info("- scanning all proposals")
    result = run_tick(now, snapshot, config)
    dispatch_events(result.events, config, sender)
    logger.info(result.summary_line())
    return result
