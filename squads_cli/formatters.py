"""Output formatters for command results."""

import json

from solders.pubkey import Pubkey

from .config import mask_api_key
from .types import CommandResult


def to_dict(obj):
    if hasattr(obj, "__dataclass_fields__"):
        return {k: to_dict(v) for k, v in obj.__dict__.items()}
    elif isinstance(obj, list):
        return [to_dict(item) for item in obj]
    elif isinstance(obj, Pubkey):
        return str(obj)
    else:
        return obj


def format_text(result: CommandResult) -> str:
    """Two lines: the derived account and the transaction signature."""
    lines = [
        f"{result.label}: {result.address}",
        f"{result.signature_label}: {result.signature}",
    ]
    return "\n".join(lines)


def format_json(result: CommandResult, pretty: bool = True) -> str:
    data = to_dict(result)
    data.pop("signature_label")
    data["rpc_endpoint"] = mask_api_key(result.rpc_endpoint)
    if pretty:
        return json.dumps(data, indent=2)
    return json.dumps(data)
