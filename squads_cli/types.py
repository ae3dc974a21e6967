"""Type definitions for the Squads multisig CLI."""

from dataclasses import dataclass
from typing import Optional, Union

from solders.keypair import Keypair
from solders.pubkey import Pubkey


@dataclass(frozen=True)
class Member:
    """Multisig member: address plus an opaque 8-bit permission mask."""
    address: Pubkey
    permissions: int


@dataclass(frozen=True)
class ProgramConfig:
    """Global Squads program configuration account."""
    address: Pubkey
    authority: Pubkey
    multisig_creation_fee: int
    treasury: Pubkey


@dataclass(frozen=True)
class Supplied:
    """Create key loaded from a keypair file; the multisig address is deterministic."""
    keypair: Keypair


@dataclass(frozen=True)
class Generated:
    """Create key generated for a single transaction and discarded afterwards."""


CreateKeySource = Union[Supplied, Generated]


@dataclass
class CommandResult:
    """Outcome of a submitted command."""
    label: str  # "Program config" or "Multisig"
    address: Pubkey
    signature: str
    rpc_endpoint: str
    create_key: Optional[Pubkey] = None
    signature_label: str = "Signature"
