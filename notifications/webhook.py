# =============================================================================
# WEBHOOK NOTIFICATIONS
# =============================================================================
#
# Fire-and-forget delivery to a chat webhook (Discord-style {"content": ...}).
# Delivery failures are logged here and never reach the caller.
#
# =============================================================================
import logging
import threading
from typing import Optional

import requests

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10
# Discord rejects content longer than this
MAX_CONTENT_LENGTH = 2000


def send_message(
    url: Optional[str],
    text: str,
    timeout: int = DEFAULT_TIMEOUT,
) -> bool:
    if not url:
        logger.debug("Webhook: nicht konfiguriert, Nachricht wird ignoriert")
        return False
    try:
        resp = requests.post(url, json={"content": text[:MAX_CONTENT_LENGTH]}, timeout=timeout)
        if resp.ok:
            logger.debug("Webhook: Nachricht gesendet")
            return True
        logger.warning(f"Webhook Fehler: {resp.status_code} {resp.text[:100]}")
        return False
    except requests.exceptions.Timeout:
        logger.warning("Webhook: Timeout beim Senden")
        return False
    except requests.exceptions.RequestException as e:
        logger.warning(f"Webhook: Fehler beim Senden: {e}")
        return False


def post_detached(url: Optional[str], text: str, timeout: int = DEFAULT_TIMEOUT) -> Optional[threading.Thread]:
    """Send on a daemon thread without waiting. Returns the thread (None if no URL)."""
    if not url:
        return None
    thread = threading.Thread(
        target=send_message,
        args=(url, text, timeout),
        name="webhook-send",
        daemon=True,
    )
    thread.start()
    return thread
