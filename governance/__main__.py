# =============================================================================
# REALM BEOBACHTER - GOVERNANCE NOTIFIER
# Module: governance/__main__.py
# Purpose: CLI entry point for the proposal notifier
# =============================================================================
#
# USAGE:
# python -m governance            # run forever, one tick every 5 minutes
# python -m governance --once     # single tick, then exit
#
# OPTIONS:
# --config     Path to notifier.yaml (default: config/notifier.yaml)
# --once       Run one tick and exit
# --verbose    Enable debug logging
#
# ENVIRONMENT (.env is loaded automatically):
# RPC_NODE_URL   Solana JSON-RPC endpoint
# WEBHOOK_URL    Chat webhook; unset = log only
#
# =============================================================================

import argparse
import logging
import sys
from functools import partial
from pathlib import Path

from app.scheduler import Scheduler
from collector.client import SolanaRpcClient
from collector.fetcher import SnapshotFetcher
from shared.config import load_config
from shared.errors import ConfigError
from shared.logging_config import setup_logging

from .proposal_notifier import run_notifier_tick


def parse_args(argv=None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="python -m governance",
        description="Realm Beobachter - notify when governance proposals open or close soon",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m governance
  python -m governance --once --verbose
  python -m governance --config ./config/notifier.yaml
        """,
    )

    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to notifier.yaml (default: config/notifier.yaml)",
    )

    parser.add_argument(
        "--once",
        action="store_true",
        help="Run a single tick and exit",
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging",
    )

    return parser.parse_args(argv)


def main(argv=None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    try:
        config = load_config(config_path=args.config)
    except ConfigError as e:
        setup_logging(level=logging.INFO)
        logging.getLogger(__name__).error(f"Invalid configuration: {e}")
        return 1

    setup_logging(level=logging.DEBUG if args.verbose else config.log_level)
    logger = logging.getLogger(__name__)

    logger.info("=" * 50)
    logger.info("GOVERNANCE NOTIFIER STARTED")
    logger.info(f"Realm: {config.realm.display_name} ({config.realm.realm_id})")
    logger.info(f"RPC: {config.rpc_url}")
    logger.info(f"Webhook: {'configured' if config.webhook_enabled else 'not configured (log only)'}")
    logger.info(f"Mode: {'Single check' if args.once else 'Continuous'}")
    logger.info("=" * 50)

    client = SolanaRpcClient(config.rpc_url, timeout=config.request_timeout)
    fetcher = SnapshotFetcher(client, config.realm)
    tick = partial(run_notifier_tick, config, fetcher.fetch)

    if args.once:
        try:
            tick()
            return 0
        except Exception as e:
            logger.exception(f"Tick failed: {e}")
            return 1

    scheduler = Scheduler(tick, interval_seconds=config.poll_interval_seconds, name="governance-notifier")
    scheduler.run_forever()
    return 0


if __name__ == "__main__":
    sys.exit(main())
