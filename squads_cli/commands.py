"""The two commands: program config initialization and multisig creation."""

import logging
from typing import Optional, Sequence

from solders.keypair import Keypair
from solders.pubkey import Pubkey

from . import rpc
from .errors import AccountFetchError, RpcError
from .instructions import (
    decode_compute_unit_price,
    decode_program_config,
    multisig_create_instruction,
    priority_fee_instruction,
    program_config_init_instruction,
)
from .members import describe_permissions
from .pda import multisig_address, program_config_address
from .transaction import submit
from .types import CommandResult, CreateKeySource, Generated, Member, ProgramConfig, Supplied

logger = logging.getLogger(__name__)


def resolve_create_key(source: CreateKeySource) -> Keypair:
    """Return the supplied create key, or a fresh one for this transaction only."""
    if isinstance(source, Supplied):
        return source.keypair
    if isinstance(source, Generated):
        keypair = Keypair()
        logger.info(f"Generated one-time create key {keypair.pubkey()}")
        return keypair
    raise TypeError(f"unknown create key source: {source!r}")


def _priority_fee_instruction(priority_fee: Optional[int]):
    ix = priority_fee_instruction(priority_fee)
    logger.debug(f"Compute unit price: {decode_compute_unit_price(ix)} micro-lamports")
    return ix


def fetch_program_config(endpoint: str, program_id: Pubkey) -> ProgramConfig:
    """Read and decode the program config account; fatal if missing."""
    address, _ = program_config_address(program_id)
    try:
        account = rpc.get_account_info(endpoint, str(address))
    except RpcError as e:
        raise AccountFetchError(str(address), f"could not fetch program config: {e.detail}") from e

    if not account:
        raise AccountFetchError(
            str(address), "program config not found; run program-config-init first"
        )
    if account.get("owner") != str(program_id):
        raise AccountFetchError(
            str(address), f"program config is not owned by {program_id}. Owner: {account.get('owner')}"
        )

    data = rpc.decode_base64_account_data(account.get("data", []))
    return decode_program_config(address, data)


def program_config_init(
    endpoint: str,
    program_id: Pubkey,
    initializer: Keypair,
    authority: Pubkey,
    treasury: Pubkey,
    multisig_creation_fee: int,
    priority_fee: Optional[int] = None,
) -> CommandResult:
    program_config, _ = program_config_address(program_id)
    logger.info(f"Initializing program config {program_config}")

    instructions = [
        _priority_fee_instruction(priority_fee),
        program_config_init_instruction(
            program_id,
            initializer.pubkey(),
            authority,
            treasury,
            multisig_creation_fee,
        ),
    ]
    signature = submit(endpoint, instructions, initializer)

    return CommandResult(
        label="Program config",
        address=program_config,
        signature=signature,
        rpc_endpoint=endpoint,
        signature_label="Transaction signature",
    )


def multisig_create(
    endpoint: str,
    program_id: Pubkey,
    creator: Keypair,
    members: Sequence[Member],
    threshold: int,
    create_key_source: CreateKeySource,
    config_authority: Optional[Pubkey] = None,
    rent_collector: Optional[Pubkey] = None,
    priority_fee: Optional[int] = None,
) -> CommandResult:
    """
    Create a multisig owned by `members`.

    The creation fee goes to the treasury currently stored in the program
    config, which is read fresh for every invocation.
    """
    create_key = resolve_create_key(create_key_source)
    multisig, _ = multisig_address(create_key.pubkey(), program_id)

    program_config = fetch_program_config(endpoint, program_id)
    logger.info(
        f"Creating multisig {multisig} "
        f"(treasury {program_config.treasury}, fee {program_config.multisig_creation_fee} lamports)"
    )
    for member in members:
        logger.info(f"  member {member.address}: {', '.join(describe_permissions(member.permissions))}")

    instructions = [
        _priority_fee_instruction(priority_fee),
        multisig_create_instruction(
            program_id,
            treasury=program_config.treasury,
            create_key=create_key.pubkey(),
            creator=creator.pubkey(),
            threshold=threshold,
            members=members,
            config_authority=config_authority,
            rent_collector=rent_collector,
        ),
    ]
    signature = submit(endpoint, instructions, creator, [create_key])

    return CommandResult(
        label="Multisig",
        address=multisig,
        signature=signature,
        rpc_endpoint=endpoint,
        create_key=create_key.pubkey(),
    )
