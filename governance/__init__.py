# =============================================================================
# REALM BEOBACHTER - GOVERNANCE PACKAGE
# =============================================================================
#
# Decides, per tick, which proposals warrant a notification.
#
# PRINCIPLES:
# 1. Does NOT persist anything between ticks
# 2. Does NOT write to the chain
# 3. Window arithmetic is pure and takes "now" explicitly
#
# =============================================================================

from .classifier import ClassificationResult, classify_proposal, classify_proposals
from .thresholds import WindowSettings, closing_soon, just_opened, warn_when_closing
from .proposal_notifier import (
    NotificationEvent,
    TickResult,
    dispatch_events,
    evaluate_snapshot,
    format_message,
    run_notifier_tick,
    run_tick,
)

__all__ = [
    "ClassificationResult",
    "classify_proposal",
    "classify_proposals",
    "WindowSettings",
    "closing_soon",
    "just_opened",
    "warn_when_closing",
    "NotificationEvent",
    "TickResult",
    "dispatch_events",
    "evaluate_snapshot",
    "format_message",
    "run_notifier_tick",
    "run_tick",
]
