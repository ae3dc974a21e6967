"""Fallible parsing of addresses and wallet keypair files."""

import json
import logging
import os
import re

import base58
from solders.keypair import Keypair
from solders.pubkey import Pubkey

from .errors import KeypairLoadError

logger = logging.getLogger(__name__)

PUBKEY_LENGTH = 32
KEYPAIR_LENGTH = 64

_HEX_PUBKEY = re.compile(r"[0-9a-fA-F]{64}")


def decode_address(value: str) -> Pubkey:
    """
    Decode a 32-byte address.

    Base58 is the canonical form; a 64-character hex string is accepted too.
    Raises ValueError with a description of what is wrong.
    """
    text = value.strip()
    if not text:
        raise ValueError("empty address")

    if _HEX_PUBKEY.fullmatch(text):
        raw = bytes.fromhex(text)
    else:
        try:
            raw = base58.b58decode(text)
        except ValueError as e:
            raise ValueError(f"not valid base58: {e}") from e

    if len(raw) != PUBKEY_LENGTH:
        raise ValueError(f"decodes to {len(raw)} bytes, expected {PUBKEY_LENGTH}")
    return Pubkey(raw)


def load_keypair(path: str) -> Keypair:
    """Read a Solana CLI wallet file (JSON array of 64 byte values)."""
    full_path = os.path.expanduser(path)
    try:
        with open(full_path) as f:
            content = json.load(f)
    except FileNotFoundError:
        raise KeypairLoadError(path, "file not found")
    except OSError as e:
        raise KeypairLoadError(path, e.strerror or str(e))
    except json.JSONDecodeError as e:
        raise KeypairLoadError(path, f"not valid JSON ({e.msg})")

    if not isinstance(content, list) or len(content) != KEYPAIR_LENGTH:
        raise KeypairLoadError(path, f"expected a JSON array of {KEYPAIR_LENGTH} bytes")
    if not all(isinstance(b, int) and not isinstance(b, bool) and 0 <= b <= 255 for b in content):
        raise KeypairLoadError(path, "array values must be integers between 0 and 255")

    try:
        keypair = Keypair.from_bytes(bytes(content))
    except ValueError as e:
        raise KeypairLoadError(path, str(e))

    logger.debug(f"Loaded keypair {keypair.pubkey()} from {full_path}")
    return keypair
