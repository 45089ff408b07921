# =============================================================================
# REALM BEOBACHTER - COLLECTOR
# Module: collector/client.py
# Purpose: JSON-RPC client for a Solana node with retries and timeouts
# =============================================================================
#
# DESIGN:
# - Read-only: only getProgramAccounts is used
# - Implements exponential backoff for retries
# - Clear error handling and logging
#
# API REFERENCE:
# Default endpoint: https://api.mainnet-beta.solana.com
# Method: getProgramAccounts (encoding=base64, memcmp filters)
#
# =============================================================================

import base64
import itertools
import logging
import time
from typing import Any, Dict, List, Optional

import base58
import requests

from shared.errors import RpcError

logger = logging.getLogger(__name__)


def pubkey_filter(offset: int, pubkey: str) -> Dict[str, Any]:
    """
    Build a memcmp filter matching a base58 address at a byte offset.

    Args:
        offset: Byte offset inside the account data
        pubkey: Base58 encoded address

    Returns:
        Filter object for getProgramAccounts
    """
    # Validate early so a typo in the config fails before hitting the node
    if len(base58.b58decode(pubkey)) != 32:
        raise ValueError(f"Not a 32 byte address: {pubkey}")
    return {"memcmp": {"offset": offset, "bytes": pubkey}}


class SolanaRpcClient:
    """
    HTTP client for a Solana JSON-RPC node.

    Features:
    - Exponential backoff retry logic
    - Configurable timeouts
    - Shared requests.Session (connection reuse across fan-out threads)
    """

    DEFAULT_TIMEOUT = 30  # seconds
    MAX_RETRIES = 3
    INITIAL_BACKOFF = 1.0  # seconds
    MAX_BACKOFF = 30.0  # seconds

    def __init__(
        self,
        rpc_url: str,
        timeout: int = DEFAULT_TIMEOUT,
        max_retries: int = MAX_RETRIES,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize the RPC client.

        Args:
            rpc_url: JSON-RPC endpoint URL
            timeout: Request timeout in seconds
            max_retries: Maximum number of attempts per call
            session: Optional requests session (tests inject a mock)
        """
        self.rpc_url = rpc_url
        self.timeout = timeout
        self.max_retries = max(1, max_retries)
        self.session = session or requests.Session()
        self.session.headers.update({
            "User-Agent": "RealmBeobachter/1.0",
            "Content-Type": "application/json",
            "Accept": "application/json",
        })
        self._ids = itertools.count(1)

    def get_program_accounts(
        self,
        program_id: str,
        filters: Optional[List[Dict[str, Any]]] = None,
    ) -> Dict[str, bytes]:
        """
        Fetch all accounts owned by a program that match the filters.

        Args:
            program_id: Base58 program address
            filters: memcmp / dataSize filters

        Returns:
            Dict mapping account address to raw account data

        Raises:
            RpcError: If the node returns an error or all retries fail
        """
        config: Dict[str, Any] = {"encoding": "base64", "commitment": "confirmed"}
        if filters:
            config["filters"] = filters

        result = self._call("getProgramAccounts", [program_id, config])

        if not isinstance(result, list):
            raise RpcError(
                f"Unexpected getProgramAccounts result type: {type(result).__name__}",
                method="getProgramAccounts",
            )

        accounts: Dict[str, bytes] = {}
        for entry in result:
            try:
                pubkey = entry["pubkey"]
                encoded, encoding = entry["account"]["data"]
            except (KeyError, TypeError, ValueError) as e:
                raise RpcError(f"Malformed account entry: {e}", method="getProgramAccounts") from e
            if encoding != "base64":
                raise RpcError(f"Unexpected account encoding: {encoding}", method="getProgramAccounts")
            accounts[pubkey] = base64.b64decode(encoded)

        logger.debug(f"getProgramAccounts {program_id}: {len(accounts)} accounts")
        return accounts

    def _call(self, method: str, params: List[Any]) -> Any:
        """
        Make a JSON-RPC POST with retry logic.

        Args:
            method: RPC method name
            params: Positional params

        Returns:
            The "result" member of the response

        Raises:
            RpcError: If all retry attempts fail
        """
        payload = {
            "jsonrpc": "2.0",
            "id": next(self._ids),
            "method": method,
            "params": params,
        }

        backoff = self.INITIAL_BACKOFF
        last_error: Optional[Exception] = None

        for attempt in range(self.max_retries):
            try:
                logger.debug(f"RPC attempt {attempt + 1}: {method}")

                response = self.session.post(self.rpc_url, json=payload, timeout=self.timeout)

                # Don't retry client errors (4xx) except 429 (rate limit)
                if 400 <= response.status_code < 500 and response.status_code != 429:
                    raise RpcError(
                        f"Client error: {response.status_code} {response.text[:100]}",
                        method=method,
                        attempts=attempt + 1,
                    )
                response.raise_for_status()

                body = response.json()
                if "error" in body:
                    error = body["error"] or {}
                    last_error = RpcError(
                        f"RPC error {error.get('code')}: {error.get('message')}",
                        method=method,
                        attempts=attempt + 1,
                    )
                    logger.warning(f"{last_error} on attempt {attempt + 1}")
                else:
                    return body.get("result")

            except RpcError:
                raise

            except requests.exceptions.Timeout as e:
                last_error = e
                logger.warning(f"Timeout on attempt {attempt + 1}: {method}")

            except requests.exceptions.RequestException as e:
                last_error = e
                logger.warning(f"HTTP error on attempt {attempt + 1}: {e}")

            except ValueError as e:
                last_error = e
                logger.warning(f"JSON decode error on attempt {attempt + 1}: {e}")

            # Exponential backoff before retry
            if attempt < self.max_retries - 1:
                sleep_time = min(backoff, self.MAX_BACKOFF)
                logger.info(f"Retrying in {sleep_time:.1f}s...")
                time.sleep(sleep_time)
                backoff *= 2

        # All retries exhausted
        raise RpcError(
            f"All {self.max_retries} retry attempts failed for {method}. Last error: {last_error}",
            method=method,
            attempts=self.max_retries,
        )
