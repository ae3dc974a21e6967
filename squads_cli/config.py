"""Built-in defaults and endpoint resolution."""

import os
from typing import Optional

from .errors import ConfigError

# Squads v4 program on every public cluster
DEFAULT_PROGRAM_ID = "SQDS4ep65T869zMMBKyuUq6aD6EgTu8psMjkvj52pCf"

# Micro-lamports per compute unit
DEFAULT_PRIORITY_FEE = 5000

LOCALNET_URL = "http://127.0.0.1:8899"
DEFAULT_RPC_URL = LOCALNET_URL

CLUSTERS = {
    "localnet": LOCALNET_URL,
    "devnet": "https://api.devnet.solana.com",
    "testnet": "https://api.testnet.solana.com",
    "mainnet": "https://api.mainnet-beta.solana.com",
    "mainnet-beta": "https://api.mainnet-beta.solana.com",
}

CLUSTER_ALIASES = {
    "l": "localnet",
    "d": "devnet",
    "t": "testnet",
    "m": "mainnet",
}

# Seconds per JSON-RPC call
RPC_TIMEOUT = 30
CONFIRM_POLL_INTERVAL = 0.5
COMMITMENT = "confirmed"


def resolve_rpc_endpoint(value: Optional[str] = None) -> str:
    """
    Turn a --rpc-url value into an HTTP endpoint.

    Accepts a full http(s) URL or a cluster moniker. Without a value the
    SOLANA_RPC_URL environment variable is used, then localnet.
    """
    if value is None:
        value = os.environ.get("SOLANA_RPC_URL") or DEFAULT_RPC_URL

    value = value.strip()
    if value.startswith(("http://", "https://")):
        return value

    name = CLUSTER_ALIASES.get(value.lower(), value.lower())
    if name in CLUSTERS:
        return CLUSTERS[name]

    raise ConfigError(
        f"Unknown cluster {value!r}: expected an http(s) URL or one of "
        f"{', '.join(sorted(CLUSTERS))}"
    )


def mask_api_key(url: str) -> str:
    """Mask API key in URL for display."""
    if "api-key=" in url:
        return url.split("api-key=")[0] + "api-key=***"
    return url
