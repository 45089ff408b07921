# =============================================================================
# REALM BEOBACHTER - CONFIGURATION
# =============================================================================
#
# Central notifier configuration.
#
# LOAD ORDER (later wins):
#   1. Built-in defaults
#   2. config/notifier.yaml  ("notifier:" section, optional file)
#   3. Environment (.env is loaded first, existing variables are kept)
#
# USAGE:
#   from shared.config import load_config
#
#   config = load_config()
#   if config.webhook_enabled:
#       ...
#
# =============================================================================

import logging
import os
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml
from dotenv import load_dotenv

from collector.registry import RealmInfo, get_realm_info, DEFAULT_PROPOSAL_URL
from shared.errors import ConfigError

logger = logging.getLogger(__name__)

# Base directory
BASE_DIR = Path(__file__).parent.parent
CONFIG_PATH = BASE_DIR / "config" / "notifier.yaml"
ENV_FILE = BASE_DIR / ".env"

DEFAULT_RPC_URL = "https://api.mainnet-beta.solana.com"

# Environment variable -> config field
ENV_OVERRIDES = {
    "RPC_NODE_URL": "rpc_url",
    "WEBHOOK_URL": "webhook_url",
    "REALM_SYMBOL": "realm_symbol",
    "NOTIFY_ON_OPEN": "notify_on_open",
    "NOTIFY_ON_CLOSING": "notify_on_closing",
    "LOG_LEVEL": "log_level",
}

_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off")


@dataclass(frozen=True)
class NotifierConfig:
    """
    Recognized notifier options.

    Outbound delivery needs both the per-kind toggle and a webhook_url.
    Without a webhook_url every message is still logged.
    """
    realm_symbol: str = "MNGO"
    program_id: str = ""
    realm_id: str = ""
    proposal_url: str = ""
    rpc_url: str = DEFAULT_RPC_URL
    webhook_url: Optional[str] = None
    notify_on_open: bool = True
    notify_on_closing: bool = True
    poll_interval_seconds: int = 300
    tolerance_seconds: int = 30
    closing_in_hours: int = 6
    request_timeout: int = 30
    log_level: str = "INFO"
    realm: Optional[RealmInfo] = field(default=None, compare=False)

    @property
    def webhook_enabled(self) -> bool:
        return bool(self.webhook_url)

    def should_send(self, notify_toggle: bool) -> bool:
        """True if a message of a kind with this toggle goes to the webhook."""
        return notify_toggle and self.webhook_enabled

    def resolve_realm(self) -> RealmInfo:
        """
        Combine the registry entry for realm_symbol with explicit overrides.

        Raises:
            ConfigError: If the realm is unknown and no ids are configured
        """
        known = get_realm_info(self.realm_symbol)
        if known is not None:
            return known.with_overrides(
                program_id=self.program_id,
                realm_id=self.realm_id,
                proposal_url=self.proposal_url,
            )

        if not (self.program_id and self.realm_id):
            raise ConfigError(
                f"Unknown realm '{self.realm_symbol}': set program_id and realm_id explicitly"
            )

        return RealmInfo(
            symbol=self.realm_symbol.upper(),
            display_name=self.realm_symbol,
            program_id=self.program_id,
            realm_id=self.realm_id,
            proposal_url=self.proposal_url or DEFAULT_PROPOSAL_URL,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Export configuration as dictionary (webhook URL masked)."""
        data = {f.name: getattr(self, f.name) for f in fields(self) if f.name != "realm"}
        if data["webhook_url"]:
            data["webhook_url"] = "***"
        return data


_FIELD_TYPES = {f.name: f.type for f in fields(NotifierConfig) if f.name != "realm"}


def _parse_bool(name: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    raw = str(value).strip().lower()
    if raw in _TRUE_VALUES:
        return True
    if raw in _FALSE_VALUES:
        return False
    raise ConfigError(f"Invalid boolean for {name}: {value!r}")


def _coerce(name: str, value: Any) -> Any:
    """Convert a YAML/env value to the type of the config field."""
    expected = _FIELD_TYPES[name]

    if name == "webhook_url":
        value = str(value).strip() if value is not None else ""
        return value or None

    if expected is bool:
        return _parse_bool(name, value)

    try:
        if expected is int:
            return int(value)
        if expected is float:
            return float(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid value for {name}: {value!r}") from e

    return str(value).strip()


def _read_yaml(path: Path) -> Dict[str, Any]:
    """Read the "notifier" section of the YAML file. Missing file -> {}."""
    if not path.exists():
        logger.debug(f"Config file not found, using defaults: {path}")
        return {}

    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse {path}: {e}") from e

    if not isinstance(raw, dict):
        raise ConfigError(f"{path}: top level must be a mapping")

    section = raw.get("notifier", raw)
    if not isinstance(section, dict):
        raise ConfigError(f"{path}: 'notifier' section must be a mapping")
    return section


def _apply(values: Dict[str, Any], source: Mapping[str, Any], origin: str) -> None:
    for key, value in source.items():
        if key not in _FIELD_TYPES:
            logger.warning(f"Ignoring unknown option '{key}' from {origin}")
            continue
        values[key] = _coerce(key, value)


def _check_proposal_url(realm: RealmInfo) -> None:
    """Reject proposal URL templates that cannot produce a deep link."""
    template = realm.proposal_url
    if "{proposal_id}" not in template:
        raise ConfigError(f"proposal_url must contain '{{proposal_id}}': {template!r}")
    try:
        realm.proposal_link("check")
    except (KeyError, IndexError, ValueError) as e:
        raise ConfigError(f"Invalid proposal_url template {template!r}: {e!r}") from e


def load_config(
    config_path: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
    env_file: Optional[Path] = ENV_FILE,
) -> NotifierConfig:
    """
    Build the notifier configuration.

    Args:
        config_path: Path to notifier.yaml. Defaults to config/notifier.yaml
        environ: Environment mapping. Defaults to os.environ
        env_file: .env file loaded into os.environ before reading it (None to skip)

    Returns:
        NotifierConfig with the realm resolved

    Raises:
        ConfigError: On malformed values or an unresolvable realm
    """
    if environ is None:
        if env_file is not None and env_file.exists():
            load_dotenv(env_file, override=False)
        environ = os.environ

    values: Dict[str, Any] = {}
    _apply(values, _read_yaml(config_path or CONFIG_PATH), "yaml")

    # Blank values are ignored, except WEBHOOK_URL where blank disables delivery
    env_values = {
        field_name: environ[var]
        for var, field_name in ENV_OVERRIDES.items()
        if environ.get(var, "").strip() or (field_name == "webhook_url" and var in environ)
    }
    _apply(values, env_values, "environment")

    config = NotifierConfig(**values)

    if config.poll_interval_seconds <= 0:
        raise ConfigError("poll_interval_seconds must be positive")
    if config.tolerance_seconds < 0:
        raise ConfigError("tolerance_seconds must not be negative")

    config = replace(config, realm=config.resolve_realm())
    _check_proposal_url(config.realm)

    logger.debug(f"Loaded config: {config.to_dict()}")
    return config
