"""Global test fixtures."""
import logging
import sys
from pathlib import Path

import pytest

# Project root on the path when running without an editable install
sys.path.insert(0, str(Path(__file__).parent.parent))

from shared.config import NotifierConfig
from tests.mock_data import TEST_REALM, NOW


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def config():
    """Config for the test realm with a webhook and default windows."""
    return NotifierConfig(
        realm_symbol=TEST_REALM.symbol,
        program_id=TEST_REALM.program_id,
        realm_id=TEST_REALM.realm_id,
        proposal_url=TEST_REALM.proposal_url,
        webhook_url="https://hooks.example/abc",
        realm=TEST_REALM,
    )


@pytest.fixture
def sent():
    """Recording sender: collects (url, text) tuples."""
    messages = []

    def _sender(url, text):
        messages.append((url, text))

    _sender.messages = messages
    return _sender


@pytest.fixture(autouse=True)
def capture_notifier_logs(caplog):
    caplog.set_level(logging.INFO)
    yield caplog
