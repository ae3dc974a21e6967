"""Instruction builders and account layouts for the Squads v4 program."""

import hashlib
import struct
from typing import List, Optional, Sequence

from borsh_construct import CStruct, Option, String, U8, U16, U32, U64, Vec
from solders.compute_budget import ID as COMPUTE_BUDGET_PROGRAM_ID
from solders.compute_budget import set_compute_unit_price
from solders.instruction import AccountMeta, Instruction
from solders.pubkey import Pubkey
from solders.system_program import ID as SYSTEM_PROGRAM_ID

from .config import DEFAULT_PRIORITY_FEE
from .errors import AccountFetchError
from .pda import multisig_address, program_config_address
from .types import Member, ProgramConfig

U64_MAX = 2**64 - 1
SET_COMPUTE_UNIT_PRICE_TAG = 3

PubkeyLayout = U8[32]

ProgramConfigInitArgsLayout = CStruct(
    "authority" / PubkeyLayout,
    "multisig_creation_fee" / U64,
    "treasury" / PubkeyLayout,
)

MemberLayout = CStruct(
    "key" / PubkeyLayout,
    "permissions" / CStruct("mask" / U8),
)

MultisigCreateArgsV2Layout = CStruct(
    "config_authority" / Option(PubkeyLayout),
    "threshold" / U16,
    "members" / Vec(MemberLayout),
    "time_lock" / U32,
    "rent_collector" / Option(PubkeyLayout),
    "memo" / Option(String),
)

# Account data after the 8-byte discriminator; 64 reserved bytes follow.
ProgramConfigLayout = CStruct(
    "authority" / PubkeyLayout,
    "multisig_creation_fee" / U64,
    "treasury" / PubkeyLayout,
)
PROGRAM_CONFIG_MIN_SIZE = 8 + 32 + 8 + 32


def sighash(name: str) -> bytes:
    return hashlib.sha256(f"global:{name}".encode()).digest()[:8]


def account_discriminator(name: str) -> bytes:
    return hashlib.sha256(f"account:{name}".encode()).digest()[:8]


def _pubkey_bytes(pubkey: Optional[Pubkey]) -> Optional[List[int]]:
    if pubkey is None:
        return None
    return list(bytes(pubkey))


def priority_fee_instruction(micro_lamports: Optional[int] = None) -> Instruction:
    """ComputeBudget SetComputeUnitPrice; defaults to DEFAULT_PRIORITY_FEE."""
    if micro_lamports is None:
        micro_lamports = DEFAULT_PRIORITY_FEE
    if not 0 <= micro_lamports <= U64_MAX:
        raise ValueError(f"priority fee out of u64 range: {micro_lamports}")
    return set_compute_unit_price(micro_lamports)


def decode_compute_unit_price(instruction: Instruction) -> int:
    """Return the micro-lamport price encoded in a SetComputeUnitPrice instruction."""
    data = bytes(instruction.data)
    if instruction.program_id != COMPUTE_BUDGET_PROGRAM_ID:
        raise ValueError(f"not a compute budget instruction: {instruction.program_id}")
    if len(data) != 9 or data[0] != SET_COMPUTE_UNIT_PRICE_TAG:
        raise ValueError(f"not a SetComputeUnitPrice payload: {data.hex()}")
    return struct.unpack("<Q", data[1:])[0]


def program_config_init_instruction(
    program_id: Pubkey,
    initializer: Pubkey,
    authority: Pubkey,
    treasury: Pubkey,
    multisig_creation_fee: int,
) -> Instruction:
    """
    Build `program_config_init`.

    Accounts: program_config (writable PDA), initializer (signer, pays rent),
    system_program. The program itself rejects a second initialization.
    """
    program_config, _ = program_config_address(program_id)
    data = sighash("program_config_init") + ProgramConfigInitArgsLayout.build(
        {
            "authority": _pubkey_bytes(authority),
            "multisig_creation_fee": multisig_creation_fee,
            "treasury": _pubkey_bytes(treasury),
        }
    )
    accounts = [
        AccountMeta(pubkey=program_config, is_signer=False, is_writable=True),
        AccountMeta(pubkey=initializer, is_signer=True, is_writable=True),
        AccountMeta(pubkey=SYSTEM_PROGRAM_ID, is_signer=False, is_writable=False),
    ]
    return Instruction(program_id=program_id, data=data, accounts=accounts)


def multisig_create_instruction(
    program_id: Pubkey,
    treasury: Pubkey,
    create_key: Pubkey,
    creator: Pubkey,
    threshold: int,
    members: Sequence[Member],
    config_authority: Optional[Pubkey] = None,
    rent_collector: Optional[Pubkey] = None,
    memo: Optional[str] = None,
    time_lock: int = 0,
) -> Instruction:
    """
    Build `multisig_create_v2`.

    `treasury` must be the one stored in the program config account.
    Threshold and member uniqueness are checked by the program, not here.
    """
    program_config, _ = program_config_address(program_id)
    multisig, _ = multisig_address(create_key, program_id)

    data = sighash("multisig_create_v2") + MultisigCreateArgsV2Layout.build(
        {
            "config_authority": _pubkey_bytes(config_authority),
            "threshold": threshold,
            "members": [
                {"key": _pubkey_bytes(m.address), "permissions": {"mask": m.permissions}}
                for m in members
            ],
            "time_lock": time_lock,
            "rent_collector": _pubkey_bytes(rent_collector),
            "memo": memo,
        }
    )
    accounts = [
        AccountMeta(pubkey=program_config, is_signer=False, is_writable=False),
        AccountMeta(pubkey=treasury, is_signer=False, is_writable=True),
        AccountMeta(pubkey=multisig, is_signer=False, is_writable=True),
        AccountMeta(pubkey=create_key, is_signer=True, is_writable=False),
        AccountMeta(pubkey=creator, is_signer=True, is_writable=True),
        AccountMeta(pubkey=SYSTEM_PROGRAM_ID, is_signer=False, is_writable=False),
    ]
    return Instruction(program_id=program_id, data=data, accounts=accounts)


def decode_program_config(address: Pubkey, data: bytes) -> ProgramConfig:
    """
    Decode a ProgramConfig account.

    Layout:
    - bytes 0-7: discriminator
    - bytes 8-39: authority
    - bytes 40-47: multisig_creation_fee (u64)
    - bytes 48-79: treasury
    - bytes 80-143: reserved
    """
    if len(data) < PROGRAM_CONFIG_MIN_SIZE:
        raise AccountFetchError(
            str(address), f"account data too short for ProgramConfig ({len(data)} bytes)"
        )
    if data[:8] != account_discriminator("ProgramConfig"):
        raise AccountFetchError(str(address), "account is not a Squads ProgramConfig")

    parsed = ProgramConfigLayout.parse(data[8:PROGRAM_CONFIG_MIN_SIZE])
    return ProgramConfig(
        address=address,
        authority=Pubkey(bytes(parsed.authority)),
        multisig_creation_fee=parsed.multisig_creation_fee,
        treasury=Pubkey(bytes(parsed.treasury)),
    )
