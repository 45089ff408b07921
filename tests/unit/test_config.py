"""
UNIT TESTS - NOTIFIER CONFIG
============================
Tests fuer shared/config.py (defaults < YAML < environment)
"""

import os
import tempfile
from pathlib import Path

import pytest

from collector.registry import REALMS, get_realm_info
from shared.config import DEFAULT_RPC_URL, NotifierConfig, load_config
from shared.errors import ConfigError
from tests.mock_data import PROGRAM_ID, REALM_ID


def create_temp_config_file(content: str) -> Path:
    """Create a temporary config file for testing."""
    fd, path = tempfile.mkstemp(suffix=".yaml")
    with os.fdopen(fd, "w") as f:
        f.write(content)
    return Path(path)


VALID_CONFIG_YAML = """
notifier:
  realm_symbol: "MNGO"
  rpc_url: "https://rpc.from-yaml.example"
  notify_on_open: true
  notify_on_closing: false
  poll_interval_seconds: 120
  tolerance_seconds: 15
  closing_in_hours: 12
"""

MISSING = Path("/nonexistent/notifier.yaml")


class TestDefaults:
    def test_defaults_without_file_or_env(self):
        config = load_config(config_path=MISSING, environ={})

        assert config.realm_symbol == "MNGO"
        assert config.rpc_url == DEFAULT_RPC_URL
        assert config.webhook_url is None
        assert config.webhook_enabled is False
        assert config.poll_interval_seconds == 300
        assert config.tolerance_seconds == 30
        assert config.closing_in_hours == 6
        assert config.realm == REALMS["MNGO"]

    def test_should_send_needs_destination(self):
        assert NotifierConfig(webhook_url=None).should_send(True) is False
        assert NotifierConfig(webhook_url="https://x").should_send(True) is True
        assert NotifierConfig(webhook_url="https://x").should_send(False) is False


class TestYaml:
    def test_yaml_values(self):
        path = create_temp_config_file(VALID_CONFIG_YAML)
        try:
            config = load_config(config_path=path, environ={})
        finally:
            path.unlink()

        assert config.rpc_url == "https://rpc.from-yaml.example"
        assert config.notify_on_closing is False
        assert config.poll_interval_seconds == 120
        assert config.tolerance_seconds == 15
        assert config.closing_in_hours == 12

    def test_unknown_key_ignored(self, caplog):
        path = create_temp_config_file("notifier:\n  bogus: 1\n")
        try:
            config = load_config(config_path=path, environ={})
        finally:
            path.unlink()
        assert config.realm_symbol == "MNGO"
        assert "bogus" in caplog.text

    def test_malformed_yaml(self):
        path = create_temp_config_file("notifier: [unclosed\n")
        try:
            with pytest.raises(ConfigError):
                load_config(config_path=path, environ={})
        finally:
            path.unlink()

    def test_invalid_interval(self):
        path = create_temp_config_file("notifier:\n  poll_interval_seconds: 0\n")
        try:
            with pytest.raises(ConfigError):
                load_config(config_path=path, environ={})
        finally:
            path.unlink()


class TestEnvironment:
    def test_env_overrides_yaml(self):
        path = create_temp_config_file(VALID_CONFIG_YAML)
        environ = {
            "RPC_NODE_URL": "https://rpc.from-env.example",
            "WEBHOOK_URL": "https://discord.example/api/webhooks/1",
            "NOTIFY_ON_CLOSING": "yes",
        }
        try:
            config = load_config(config_path=path, environ=environ)
        finally:
            path.unlink()

        assert config.rpc_url == "https://rpc.from-env.example"
        assert config.webhook_enabled
        assert config.notify_on_closing is True
        assert config.to_dict()["webhook_url"] == "***"

    def test_blank_env_ignored(self):
        config = load_config(config_path=MISSING, environ={"WEBHOOK_URL": "  ", "RPC_NODE_URL": ""})
        assert config.webhook_url is None
        assert config.rpc_url == DEFAULT_RPC_URL

    def test_empty_webhook_env_clears_yaml(self):
        path = create_temp_config_file(
            "notifier:\n  webhook_url: https://discord.example/api/webhooks/1\n"
        )
        try:
            from_yaml = load_config(config_path=path, environ={})
            cleared = load_config(config_path=path, environ={"WEBHOOK_URL": ""})
        finally:
            path.unlink()

        assert from_yaml.webhook_enabled
        assert cleared.webhook_url is None
        assert cleared.should_send(True) is False

    def test_invalid_bool(self):
        with pytest.raises(ConfigError, match="NOTIFY|notify_on_open"):
            load_config(config_path=MISSING, environ={"NOTIFY_ON_OPEN": "maybe"})


class TestRealmResolution:
    def test_unknown_realm_without_ids(self):
        with pytest.raises(ConfigError, match="Unknown realm"):
            load_config(config_path=MISSING, environ={"REALM_SYMBOL": "NOPE"})

    def test_unknown_realm_with_ids(self):
        path = create_temp_config_file(
            f"notifier:\n  realm_symbol: mydao\n  program_id: {PROGRAM_ID}\n  realm_id: {REALM_ID}\n"
        )
        try:
            config = load_config(config_path=path, environ={})
        finally:
            path.unlink()
        assert config.realm.symbol == "MYDAO"
        assert config.realm.realm_id == REALM_ID

    @pytest.mark.parametrize("template", [
        "https://dao.example/proposal/{id}",
        "https://dao.example/proposal/{proposal_id}/{0}",
        "https://dao.example/proposal/{proposal_id!z}",
    ])
    def test_proposal_url_unknown_placeholder(self, template):
        path = create_temp_config_file(f"notifier:\n  proposal_url: '{template}'\n")
        try:
            with pytest.raises(ConfigError, match="proposal_url"):
                load_config(config_path=path, environ={})
        finally:
            path.unlink()

    def test_proposal_url_without_proposal_id(self):
        path = create_temp_config_file("notifier:\n  proposal_url: 'https://dao.example/proposals'\n")
        try:
            with pytest.raises(ConfigError, match="proposal_id"):
                load_config(config_path=path, environ={})
        finally:
            path.unlink()

    def test_proposal_url_with_symbol(self):
        path = create_temp_config_file(
            "notifier:\n  proposal_url: 'https://dao.example/{symbol}/p/{proposal_id}'\n"
        )
        try:
            config = load_config(config_path=path, environ={})
        finally:
            path.unlink()
        assert config.realm.proposal_link("abc") == "https://dao.example/MNGO/p/abc"

    def test_override_known_realm_url(self):
        config = NotifierConfig(proposal_url="https://app.example/p/{proposal_id}")
        realm = config.resolve_realm()
        assert realm.program_id == REALMS["MNGO"].program_id
        assert realm.proposal_link("xyz") == "https://app.example/p/xyz"

    def test_registry_lookup_case_insensitive(self):
        assert get_realm_info("mngo") is REALMS["MNGO"]
        assert get_realm_info("") is None
