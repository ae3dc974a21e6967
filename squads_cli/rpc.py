"""Minimal Solana JSON-RPC client."""

import base64
import logging
from typing import List, Optional, Tuple

import requests
from solders.hash import Hash

from .config import COMMITMENT, RPC_TIMEOUT
from .errors import RpcError

logger = logging.getLogger(__name__)


def rpc_request(endpoint: str, method: str, params: list):
    """Make a JSON-RPC request to Solana."""
    payload = {
        "jsonrpc": "2.0",
        "id": 1,
        "method": method,
        "params": params,
    }
    logger.debug(f"RPC {method} -> {endpoint}")
    try:
        response = requests.post(endpoint, json=payload, timeout=RPC_TIMEOUT)
        response.raise_for_status()
        result = response.json()
    except requests.RequestException as e:
        raise RpcError(method, str(e)) from e
    except ValueError as e:
        raise RpcError(method, f"invalid JSON response: {e}") from e

    if not isinstance(result, dict):
        raise RpcError(method, f"unexpected response: {result!r}")
    if "error" in result:
        error = result["error"]
        if isinstance(error, dict):
            raise RpcError(method, error.get("message", error), error.get("data"))
        raise RpcError(method, error)
    return result.get("result")


def _result_value(method: str, result):
    """The `value` of a context-wrapped result."""
    if not isinstance(result, dict) or "value" not in result:
        raise RpcError(method, f"unexpected response: {result!r}")
    return result["value"]


def get_account_info(endpoint: str, address: str, encoding: str = "base64") -> Optional[dict]:
    """Fetch account info from Solana RPC."""
    result = rpc_request(endpoint, "getAccountInfo", [
        address,
        {"encoding": encoding, "commitment": COMMITMENT}
    ])
    return result.get("value") if isinstance(result, dict) else None


def decode_base64_account_data(data: list) -> bytes:
    """Decode base64 account data from RPC response."""
    if isinstance(data, list) and len(data) >= 1:
        return base64.b64decode(data[0])
    return b""


def get_latest_blockhash(endpoint: str) -> Tuple[Hash, int]:
    """Return (blockhash, last valid block height)."""
    result = rpc_request(endpoint, "getLatestBlockhash", [{"commitment": COMMITMENT}])
    value = _result_value("getLatestBlockhash", result)
    if not isinstance(value, dict) or not {"blockhash", "lastValidBlockHeight"} <= value.keys():
        raise RpcError("getLatestBlockhash", f"unexpected response: {result!r}")
    return Hash.from_string(value["blockhash"]), value["lastValidBlockHeight"]


def get_block_height(endpoint: str) -> int:
    return rpc_request(endpoint, "getBlockHeight", [{"commitment": COMMITMENT}])


def send_transaction(endpoint: str, raw_transaction: bytes) -> str:
    """Submit a signed, serialized transaction; returns the signature string."""
    return rpc_request(endpoint, "sendTransaction", [
        base64.b64encode(raw_transaction).decode(),
        {"encoding": "base64", "preflightCommitment": COMMITMENT},
    ])


def get_signature_statuses(endpoint: str, signatures: List[str]) -> List[Optional[dict]]:
    result = rpc_request(endpoint, "getSignatureStatuses", [signatures])
    statuses = _result_value("getSignatureStatuses", result)
    if not isinstance(statuses, list) or len(statuses) != len(signatures):
        raise RpcError("getSignatureStatuses", f"expected {len(signatures)} status(es), got {statuses!r}")
    return statuses
