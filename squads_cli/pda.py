"""
Program-derived addresses used by the Squads v4 program.

A PDA is hashed from the seeds, a bump byte and the program id, taking the
highest bump whose result is not a valid ed25519 point so that no private
key can exist for it. The bump search itself is done by solders.
"""

from typing import Sequence, Tuple

from solders.pubkey import Pubkey

from .errors import DerivationError

SEED_PREFIX = b"multisig"
SEED_PROGRAM_CONFIG = b"program_config"
SEED_MULTISIG = b"multisig"

MAX_SEEDS = 16
MAX_SEED_LENGTH = 32


def find_program_address(seeds: Sequence[bytes], program_id: Pubkey) -> Tuple[Pubkey, int]:
    """Return (address, bump); raises DerivationError when no bump yields an address."""
    seeds = [bytes(seed) for seed in seeds]
    # solders panics instead of raising on these, and the bump takes one seed slot
    if len(seeds) >= MAX_SEEDS:
        raise DerivationError(f"too many seeds: {len(seeds)} (max {MAX_SEEDS - 1})")
    for seed in seeds:
        if len(seed) > MAX_SEED_LENGTH:
            raise DerivationError(f"seed longer than {MAX_SEED_LENGTH} bytes: {seed!r}")

    try:
        return Pubkey.find_program_address(seeds, program_id)
    except (ValueError, TypeError) as e:
        raise DerivationError(
            f"no valid bump for seeds {[s.hex() for s in seeds]} and program {program_id}: {e}"
        ) from e


def program_config_address(program_id: Pubkey) -> Tuple[Pubkey, int]:
    return find_program_address([SEED_PREFIX, SEED_PROGRAM_CONFIG], program_id)


def multisig_address(create_key: Pubkey, program_id: Pubkey) -> Tuple[Pubkey, int]:
    return find_program_address([SEED_PREFIX, SEED_MULTISIG, bytes(create_key)], program_id)
